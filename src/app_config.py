from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli as tomllib  # type: ignore

from app_config_parser import parse_app_config
from app_config_schema import (
    DEFAULT_CONFIG_FILE,
    AppConfig,
    AppConfigurationError,
    AudioSettings,
    RuntimeSettings,
    SessionSettings,
    UIServerSettings,
)

__all__ = [
    "AppConfig",
    "AppConfigurationError",
    "AudioSettings",
    "RuntimeSettings",
    "SessionSettings",
    "UIServerSettings",
    "load_app_config",
    "resolve_config_path",
]


def resolve_config_path(config_path: str | None = None) -> Path:
    env_path = os.getenv("APP_CONFIG_FILE")
    raw = config_path or env_path or DEFAULT_CONFIG_FILE
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    if path.exists():
        return path

    # Packaged fallback: use bundled config.toml when no explicit path is provided.
    if config_path is None and env_path is None:
        bundle_root = getattr(sys, "_MEIPASS", None)
        if bundle_root:
            bundled_path = Path(bundle_root) / DEFAULT_CONFIG_FILE
            if bundled_path.exists():
                return bundled_path

    return path


def load_app_config(config_path: str | None = None) -> AppConfig:
    """Load `config.toml`; built-in defaults apply when no file was requested."""
    explicit = config_path is not None or bool(os.getenv("APP_CONFIG_FILE"))
    path = resolve_config_path(config_path)
    if not path.exists():
        if explicit:
            raise AppConfigurationError(f"Config file not found: {path}")
        return AppConfig()
    if not path.is_file():
        raise AppConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as error:
        raise AppConfigurationError(f"Failed to parse config TOML: {error}") from error

    if not isinstance(raw, Mapping):
        raise AppConfigurationError("Root config TOML object must be a table.")

    return parse_app_config(raw, base_dir=path.parent, source_file=str(path))
