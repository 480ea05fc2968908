"""Session settings value object and clamping rules for live edits."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Literal, Mapping

from .constants import (
    DEFAULT_BREAK_MINUTES,
    DEFAULT_FOCUS_MINUTES,
    MAX_BREAK_MINUTES,
    MAX_FOCUS_MINUTES,
    MIN_BREAK_MINUTES,
    MIN_FOCUS_MINUTES,
    MODE_BREAK,
    MODE_FOCUS,
)

SessionMode = Literal["focus", "break"]


class SettingsError(Exception):
    """Raised when a settings edit cannot be applied."""


@dataclass(frozen=True)
class SessionConfig:
    """Immutable timer settings; every edit produces a new instance."""
    focus_minutes: int = DEFAULT_FOCUS_MINUTES
    break_minutes: int = DEFAULT_BREAK_MINUTES
    auto_start_break: bool = True
    auto_start_focus: bool = True
    sound_enabled: bool = True
    count_up_display: bool = False

    @property
    def break_enabled(self) -> bool:
        return self.break_minutes > 0

    def duration_minutes(self, mode: SessionMode) -> int:
        if mode == MODE_BREAK:
            return self.break_minutes
        return self.focus_minutes

    def duration_seconds(self, mode: SessionMode) -> int:
        return self.duration_minutes(mode) * 60

    def auto_start(self, mode: SessionMode) -> bool:
        if mode == MODE_BREAK:
            return self.auto_start_break
        return self.auto_start_focus

    @classmethod
    def clamped(cls, **values: Any) -> "SessionConfig":
        """Build a config with durations clamped into their allowed ranges."""
        unknown = sorted(set(values) - _FIELD_NAMES)
        if unknown:
            raise SettingsError(f"Unknown settings: {', '.join(unknown)}")

        defaults = cls()
        focus = values.get("focus_minutes", defaults.focus_minutes)
        brk = values.get("break_minutes", defaults.break_minutes)
        return cls(
            focus_minutes=_clamp(
                _as_minutes(focus, "focus_minutes"),
                MIN_FOCUS_MINUTES,
                MAX_FOCUS_MINUTES,
            ),
            break_minutes=_clamp(
                _as_minutes(brk, "break_minutes"),
                MIN_BREAK_MINUTES,
                MAX_BREAK_MINUTES,
            ),
            auto_start_break=_as_flag(
                values.get("auto_start_break", defaults.auto_start_break),
                "auto_start_break",
            ),
            auto_start_focus=_as_flag(
                values.get("auto_start_focus", defaults.auto_start_focus),
                "auto_start_focus",
            ),
            sound_enabled=_as_flag(
                values.get("sound_enabled", defaults.sound_enabled),
                "sound_enabled",
            ),
            count_up_display=_as_flag(
                values.get("count_up_display", defaults.count_up_display),
                "count_up_display",
            ),
        )

    def as_dict(self) -> dict[str, Any]:
        return {field.name: getattr(self, field.name) for field in fields(self)}


_FIELD_NAMES = frozenset(field.name for field in fields(SessionConfig))


def merge_settings(current: SessionConfig, changes: Mapping[str, Any]) -> SessionConfig:
    """Apply a partial edit on top of ``current`` and clamp the result."""
    if not isinstance(changes, Mapping):
        raise SettingsError("Settings edit must be an object.")
    merged = {**current.as_dict(), **dict(changes)}
    return SessionConfig.clamped(**merged)


def next_mode_after(mode: SessionMode, config: SessionConfig) -> SessionMode:
    """Return the mode that follows ``mode``; a zero-length break is skipped."""
    candidate: SessionMode = MODE_BREAK if mode == MODE_FOCUS else MODE_FOCUS
    if candidate == MODE_BREAK and not config.break_enabled:
        return MODE_FOCUS
    return candidate


def _clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


def _as_minutes(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise SettingsError(f"{field} must be a whole number of minutes.")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise SettingsError(f"{field} must be a whole number of minutes.") from error
    raise SettingsError(f"{field} must be a whole number of minutes.")


def _as_flag(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise SettingsError(f"{field} must be a boolean.")
