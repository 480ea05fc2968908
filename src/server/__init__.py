"""UI server module for the static timer page and websocket streaming."""

from .config import ServerConfigurationError, UIServerConfig
from .events import UICommand
from .service import UIServer

__all__ = [
    "ServerConfigurationError",
    "UICommand",
    "UIServerConfig",
    "UIServer",
]
