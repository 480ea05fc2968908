"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    AppConfig,
    AppConfigurationError,
    AudioSettings,
    RuntimeSettings,
    SessionSettings,
    UIServerSettings,
)

_KNOWN_SECTIONS = frozenset({"session", "audio", "ui_server", "runtime"})


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    unknown = sorted(set(raw) - _KNOWN_SECTIONS)
    if unknown:
        raise AppConfigurationError(
            f"Unknown config sections: {', '.join(f'[{name}]' for name in unknown)}"
        )

    return AppConfig(
        session=_parse_session_settings(_section(raw, "session")),
        audio=_parse_audio_settings(_section(raw, "audio")),
        ui_server=_parse_ui_server_settings(_section(raw, "ui_server"), base_dir=base_dir),
        runtime=_parse_runtime_settings(_section(raw, "runtime")),
        source_file=source_file,
    )


def _parse_session_settings(section: Mapping[str, Any]) -> SessionSettings:
    defaults = SessionSettings()
    return SessionSettings(
        focus_minutes=_as_int(
            section.get("focus_minutes", defaults.focus_minutes),
            "session.focus_minutes",
        ),
        break_minutes=_as_int(
            section.get("break_minutes", defaults.break_minutes),
            "session.break_minutes",
        ),
        auto_start_break=_as_bool(
            section.get("auto_start_break", defaults.auto_start_break),
            "session.auto_start_break",
        ),
        auto_start_focus=_as_bool(
            section.get("auto_start_focus", defaults.auto_start_focus),
            "session.auto_start_focus",
        ),
        sound_enabled=_as_bool(
            section.get("sound_enabled", defaults.sound_enabled),
            "session.sound_enabled",
        ),
        count_up_display=_as_bool(
            section.get("count_up_display", defaults.count_up_display),
            "session.count_up_display",
        ),
    )


def _parse_audio_settings(section: Mapping[str, Any]) -> AudioSettings:
    return AudioSettings(
        enabled=_as_bool(section.get("enabled", True), "audio.enabled"),
        sample_rate_hz=_as_int(section.get("sample_rate_hz", 44100), "audio.sample_rate_hz"),
        output_device=(
            _as_int(section.get("output_device"), "audio.output_device")
            if "output_device" in section
            else None
        ),
        master_volume=_as_float(section.get("master_volume", 1.0), "audio.master_volume"),
    )


def _parse_ui_server_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> UIServerSettings:
    index_file = _as_str(section.get("index_file", ""), "ui_server.index_file")
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "ui_server.host"),
        port=_as_int(section.get("port", 8765), "ui_server.port"),
        index_file=_resolve_path(base_dir, index_file) if index_file else "",
    )


def _parse_runtime_settings(section: Mapping[str, Any]) -> RuntimeSettings:
    level = _as_str(section.get("log_level", "INFO"), "runtime.log_level").upper()
    if not isinstance(logging.getLevelName(level), int):
        raise AppConfigurationError(f"runtime.log_level is not a logging level: {level}")
    return RuntimeSettings(log_level=level)


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
