from __future__ import annotations

from typing import Any, Optional, Protocol

from contracts.ui_protocol import EVENT_ERROR, EVENT_SESSION
from focus_timer import SessionActionResult

from .messages import format_clock, next_session_label, session_status_message


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...


class RuntimeUIPublisher:
    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_error(self, message: str) -> None:
        self.publish(EVENT_ERROR, message=message)

    def publish_session_update(self, result: SessionActionResult) -> None:
        snapshot = result.snapshot
        payload: dict[str, Any] = {
            "action": result.action,
            "reason": result.reason,
            "state": snapshot.state,
            "mode": snapshot.mode,
            "remaining_seconds": snapshot.remaining_seconds,
            "duration_seconds": snapshot.duration_seconds,
            "display_seconds": snapshot.display_seconds,
            "display": format_clock(snapshot.display_seconds),
            "count_up": snapshot.count_up,
            "settings": snapshot.config.as_dict(),
            "next_mode": snapshot.next_session.mode,
            "next_duration_seconds": snapshot.next_session.duration_seconds,
            "next_label": next_session_label(snapshot),
            "message": session_status_message(snapshot),
        }
        self.publish(EVENT_SESSION, **payload)
