"""Web UI websocket event and command constants."""

from __future__ import annotations

# Server -> client event types
EVENT_HELLO = "hello"
EVENT_SESSION = "session"
EVENT_ERROR = "error"

# Client -> server message type and command actions
MESSAGE_COMMAND = "command"
COMMAND_TOGGLE = "toggle"
COMMAND_RESET = "reset"
COMMAND_UPDATE_SETTINGS = "update_settings"

COMMAND_ACTIONS: frozenset[str] = frozenset(
    {COMMAND_TOGGLE, COMMAND_RESET, COMMAND_UPDATE_SETTINGS}
)

STICKY_EVENT_TYPES: frozenset[str] = frozenset({EVENT_SESSION, EVENT_ERROR})

STICKY_EVENT_ORDER: tuple[str, ...] = (
    EVENT_ERROR,
    EVENT_SESSION,
)
