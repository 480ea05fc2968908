"""Serialization of outbound UI events and parsing of inbound commands."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from contracts.ui_protocol import (
    COMMAND_ACTIONS,
    MESSAGE_COMMAND,
    STICKY_EVENT_ORDER,
    STICKY_EVENT_TYPES,
)


@dataclass(frozen=True)
class UICommand:
    """User operation requested by a connected UI client."""
    action: str
    settings: dict[str, Any] = field(default_factory=dict)


def make_event(
    event_type: str,
    *,
    now_fn: Callable[[], datetime] | None = None,
    **payload: Any,
) -> str:
    """Serialize an event payload with type and timestamp for websocket delivery."""
    now = now_fn() if now_fn is not None else datetime.now(timezone.utc)
    return json.dumps(
        {
            "type": event_type,
            "timestamp": now.isoformat(),
            **payload,
        }
    )


def parse_command(raw: str | bytes) -> Optional[UICommand]:
    """Decode a client message; returns None for anything that is not a command."""
    try:
        message = json.loads(raw)
    except (TypeError, ValueError):
        return None

    if not isinstance(message, dict) or message.get("type") != MESSAGE_COMMAND:
        return None

    action = message.get("action")
    if action not in COMMAND_ACTIONS:
        return None

    settings = message.get("settings") or {}
    if not isinstance(settings, dict):
        return None
    return UICommand(action=action, settings=settings)


class StickyEventStore:
    """Thread-safe cache of sticky events replayed to new websocket clients."""
    def __init__(self):
        self._events: dict[str, str] = {}
        self._lock = threading.Lock()

    def remember(self, event_type: str, message: str) -> None:
        if event_type not in STICKY_EVENT_TYPES:
            return
        with self._lock:
            self._events[event_type] = message

    def snapshot(self) -> list[str]:
        with self._lock:
            return [self._events[key] for key in STICKY_EVENT_ORDER if key in self._events]
