"""State, mode, action, and reason constants used by the session controller."""

from __future__ import annotations

DEFAULT_FOCUS_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5

MIN_FOCUS_MINUTES = 1
MAX_FOCUS_MINUTES = 180
MIN_BREAK_MINUTES = 0
MAX_BREAK_MINUTES = 60

TICK_INTERVAL_SECONDS = 1.0
INTERVAL_START_DELAY_SECONDS = 1.0
ALARM_REPEAT_SECONDS = 2.5

MODE_FOCUS = "focus"
MODE_BREAK = "break"

STATE_IDLE = "idle"
STATE_RUNNING = "running"
STATE_PAUSED = "paused"
STATE_FINISHED = "finished"

ACTION_TOGGLE = "toggle"
ACTION_RESET = "reset"
ACTION_UPDATE_SETTINGS = "update_settings"

ACTION_SYNC = "sync"
ACTION_TICK = "tick"
ACTION_COMPLETED = "completed"

REASON_STARTED = "started"
REASON_RESUMED = "resumed"
REASON_PAUSED = "paused"
REASON_ACKNOWLEDGED = "acknowledged"
REASON_RESET = "reset"
REASON_SETTINGS_APPLIED = "settings_applied"
REASON_TICK = "tick"
REASON_AUTO_STARTED = "auto_started"
REASON_AWAITING_ACK = "awaiting_acknowledgement"
REASON_STARTUP = "startup"
