"""Configuration model for the static UI page and websocket server."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path


class ServerConfigurationError(Exception):
    """Raised when UI server configuration is invalid."""


WEBSOCKET_PATH = "/ws"
ROOT_PATH = "/"
INDEX_PATH = "/index.html"
HEALTHZ_PATH = "/healthz"


def default_index_file() -> Path:
    """Bundled timer page, also resolved inside frozen builds."""
    base_dir = Path(getattr(sys, "_MEIPASS", Path(__file__).resolve().parents[2]))
    return base_dir / "web_ui" / "index.html"


@dataclass(frozen=True)
class UIServerConfig:
    """Validated UI server configuration derived from app settings."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""

    def __post_init__(self) -> None:
        if not self.host.strip():
            raise ServerConfigurationError("ui_server.host cannot be empty")
        if not 1 <= self.port <= 65535:
            raise ServerConfigurationError(
                f"ui_server.port must be in [1, 65535], got: {self.port}"
            )
        # A disabled server never reads the page.
        if self.enabled:
            _require_file(self.index_file)

    @property
    def websocket_path(self) -> str:
        return WEBSOCKET_PATH

    @property
    def http_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @classmethod
    def from_settings(cls, settings) -> "UIServerConfig":
        index_file = (settings.index_file or "").strip() or str(default_index_file())
        return cls(
            enabled=bool(settings.enabled),
            host=settings.host,
            port=settings.port,
            index_file=index_file,
        )


def _require_file(raw: str) -> None:
    if not raw:
        raise ServerConfigurationError("ui_server.index_file cannot be empty")
    path = Path(raw)
    if not path.exists():
        raise ServerConfigurationError(f"UI index file not found: {path}")
    if not path.is_file():
        raise ServerConfigurationError(f"UI index path is not a file: {path}")
