"""Clock formatting and status text for session snapshots."""

from __future__ import annotations

from focus_timer import SessionSnapshot
from focus_timer.constants import (
    STATE_FINISHED,
    STATE_PAUSED,
    STATE_RUNNING,
)

MODE_LABELS = {
    "focus": "Focus",
    "break": "Break",
}


def format_clock(seconds: int) -> str:
    """Format seconds as `HH : MM : SS`; negative values render as zero."""
    total = max(0, int(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d} : {minutes:02d} : {secs:02d}"


def session_status_message(snapshot: SessionSnapshot) -> str:
    """Build one-line status text for the current session snapshot."""
    label = MODE_LABELS[snapshot.mode]
    clock = format_clock(snapshot.remaining_seconds)
    if snapshot.state == STATE_RUNNING:
        return f"{label} running ({clock} left)"
    if snapshot.state == STATE_PAUSED:
        return f"{label} paused ({clock} left)"
    if snapshot.state == STATE_FINISHED:
        return f"Session complete, press play to start {label.lower()}"
    return f"Ready: {label.lower()} {clock}"


def next_session_label(snapshot: SessionSnapshot) -> str:
    upcoming = snapshot.next_session
    return f"Next: {MODE_LABELS[upcoming.mode]} {format_clock(upcoming.duration_seconds)}"
