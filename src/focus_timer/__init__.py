from .alarm import FinishedAlarm
from .controller import (
    AudioCues,
    LifecycleState,
    NextSession,
    SessionActionResult,
    SessionController,
    SessionSnapshot,
)
from .scheduler import LoopScheduler, ScheduledCall, Scheduler
from .settings import SessionConfig, SessionMode, SettingsError, merge_settings

__all__ = [
    "AudioCues",
    "FinishedAlarm",
    "LifecycleState",
    "LoopScheduler",
    "NextSession",
    "ScheduledCall",
    "Scheduler",
    "SessionActionResult",
    "SessionConfig",
    "SessionController",
    "SessionMode",
    "SessionSnapshot",
    "SettingsError",
    "merge_settings",
]
