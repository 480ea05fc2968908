"""Focus/break session state machine driven by ticks and user operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional, Protocol

from .constants import (
    ACTION_COMPLETED,
    ACTION_RESET,
    ACTION_TICK,
    ACTION_TOGGLE,
    ACTION_UPDATE_SETTINGS,
    INTERVAL_START_DELAY_SECONDS,
    MODE_BREAK,
    MODE_FOCUS,
    REASON_ACKNOWLEDGED,
    REASON_AUTO_STARTED,
    REASON_AWAITING_ACK,
    REASON_PAUSED,
    REASON_RESET,
    REASON_RESUMED,
    REASON_SETTINGS_APPLIED,
    REASON_STARTED,
    REASON_TICK,
    STATE_FINISHED,
    STATE_IDLE,
    STATE_PAUSED,
    STATE_RUNNING,
    TICK_INTERVAL_SECONDS,
)
from .scheduler import ScheduledCall, Scheduler
from .settings import SessionConfig, SessionMode, next_mode_after

LifecycleState = Literal["idle", "running", "paused", "finished"]
SessionAction = Literal["toggle", "reset", "update_settings", "tick", "completed", "sync"]


class AudioCues(Protocol):
    """Fire-and-forget tone triggers consumed by the controller."""
    def play_start(self) -> None:
        ...

    def play_pause(self) -> None:
        ...

    def play_complete(self) -> None:
        ...

    def play_interval_start(self) -> None:
        ...


@dataclass(frozen=True)
class NextSession:
    """Mode and full length of the session that follows the current one."""
    mode: SessionMode
    duration_seconds: int


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable read-only view handed to display and alarm collaborators."""
    state: LifecycleState
    mode: SessionMode
    remaining_seconds: int
    duration_seconds: int
    display_seconds: int
    next_session: NextSession
    config: SessionConfig

    @property
    def count_up(self) -> bool:
        return self.config.count_up_display

    @property
    def sound_enabled(self) -> bool:
        return self.config.sound_enabled

    @property
    def is_running(self) -> bool:
        return self.state == STATE_RUNNING

    @property
    def awaiting_acknowledgement(self) -> bool:
        return self.state == STATE_FINISHED


@dataclass(frozen=True)
class SessionActionResult:
    """Result envelope returned after applying a session operation."""
    action: SessionAction
    reason: str
    snapshot: SessionSnapshot


SnapshotListener = Callable[[SessionActionResult], None]


class SessionController:
    """Owns (lifecycle, mode, remaining seconds) for a single focus/break cycle.

    The controller is single-threaded: every method, including the tick
    callback it hands to the scheduler, must run on the loop that drives
    the scheduler. Timed resources follow cancel-then-replace: there is at
    most one pending tick and one pending interval-start cue at any time.
    """

    def __init__(
        self,
        *,
        config: SessionConfig,
        audio: AudioCues,
        scheduler: Scheduler,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._audio = audio
        self._scheduler = scheduler
        self._logger = logger or logging.getLogger("focus_timer")
        self._listeners: list[SnapshotListener] = []

        self._state: LifecycleState = STATE_IDLE
        self._mode: SessionMode = MODE_FOCUS
        self._remaining_seconds = config.duration_seconds(MODE_FOCUS)

        self._tick_handle: Optional[ScheduledCall] = None
        self._interval_start_handle: Optional[ScheduledCall] = None

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def mode(self) -> SessionMode:
        return self._mode

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def tick_armed(self) -> bool:
        return self._tick_handle is not None and self._tick_handle.pending

    @property
    def mode_duration_seconds(self) -> int:
        return self._config.duration_seconds(self._mode)

    @property
    def display_seconds(self) -> int:
        if self._config.count_up_display:
            return self.mode_duration_seconds - self._remaining_seconds
        return self._remaining_seconds

    @property
    def next_session(self) -> NextSession:
        mode = next_mode_after(self._mode, self._config)
        return NextSession(mode=mode, duration_seconds=self._config.duration_seconds(mode))

    def add_listener(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self._state,
            mode=self._mode,
            remaining_seconds=self._remaining_seconds,
            duration_seconds=self.mode_duration_seconds,
            display_seconds=self.display_seconds,
            next_session=self.next_session,
            config=self._config,
        )

    def toggle(self) -> SessionActionResult:
        """Start, pause, resume, or acknowledge a finished session."""
        self._cancel_interval_start()

        if self._state == STATE_FINISHED:
            reason = REASON_ACKNOWLEDGED
            self._enter_running()
            self._cue(self._audio.play_start)
        elif self._state == STATE_RUNNING:
            reason = REASON_PAUSED
            self._state = STATE_PAUSED
            self._cancel_tick()
            self._cue(self._audio.play_pause)
        else:
            reason = REASON_STARTED if self._state == STATE_IDLE else REASON_RESUMED
            self._enter_running()
            self._cue(self._audio.play_start)

        self._logger.info(
            "Session %s: mode=%s remaining=%ss",
            reason,
            self._mode,
            self._remaining_seconds,
        )
        return self._emit(ACTION_TOGGLE, reason)

    def reset(self) -> SessionActionResult:
        """Return to an idle focus session with a full countdown."""
        self._cancel_tick()
        self._cancel_interval_start()
        self._state = STATE_IDLE
        self._mode = MODE_FOCUS
        self._remaining_seconds = self._config.duration_seconds(MODE_FOCUS)
        self._cue(self._audio.play_pause)
        self._logger.info("Session reset: remaining=%ss", self._remaining_seconds)
        return self._emit(ACTION_RESET, REASON_RESET)

    def update_config(self, new_config: SessionConfig) -> SessionActionResult:
        """Swap in new settings while keeping elapsed time of the current session.

        Idle sessions are recomputed to the full new duration. Otherwise the
        elapsed seconds stay fixed and only the remaining budget moves, which
        may leave the counter at or below zero; the next tick completes it.
        A paused or staged break is replaced by a full focus session once
        breaks are disabled.
        """
        old_duration = self._config.duration_seconds(self._mode)

        if (
            self._mode == MODE_BREAK
            and not new_config.break_enabled
            and self._state in (STATE_PAUSED, STATE_FINISHED)
        ):
            self._mode = MODE_FOCUS
            self._remaining_seconds = new_config.duration_seconds(MODE_FOCUS)
        elif self._state == STATE_IDLE:
            self._remaining_seconds = new_config.duration_seconds(self._mode)
        else:
            elapsed = old_duration - self._remaining_seconds
            self._remaining_seconds = new_config.duration_seconds(self._mode) - elapsed

        self._config = new_config
        self._logger.info(
            "Settings applied: state=%s mode=%s remaining=%ss",
            self._state,
            self._mode,
            self._remaining_seconds,
        )
        return self._emit(ACTION_UPDATE_SETTINGS, REASON_SETTINGS_APPLIED)

    def on_tick(self) -> Optional[SessionActionResult]:
        """Apply one second of countdown; completes the session at zero."""
        self._tick_handle = None
        if self._state != STATE_RUNNING:
            return None

        if self._remaining_seconds > 0:
            self._remaining_seconds -= 1

        if self._remaining_seconds <= 0:
            return self._complete()

        self._arm_tick()
        self._logger.debug("Tick: mode=%s remaining=%ss", self._mode, self._remaining_seconds)
        return self._emit(ACTION_TICK, REASON_TICK)

    def _complete(self) -> SessionActionResult:
        self._cancel_tick()
        self._cancel_interval_start()

        finished_mode = self._mode
        next_mode = next_mode_after(finished_mode, self._config)
        self._mode = next_mode
        self._remaining_seconds = self._config.duration_seconds(next_mode)

        if self._config.auto_start(next_mode):
            reason = REASON_AUTO_STARTED
            self._enter_running()
            self._cue(self._audio.play_complete)
            if next_mode == MODE_BREAK and self._config.sound_enabled:
                self._interval_start_handle = self._scheduler.schedule(
                    INTERVAL_START_DELAY_SECONDS,
                    self._play_interval_start,
                    label="interval-start",
                )
        else:
            reason = REASON_AWAITING_ACK
            self._state = STATE_FINISHED

        self._logger.info(
            "Session completed: finished=%s next=%s state=%s",
            finished_mode,
            next_mode,
            self._state,
        )
        return self._emit(ACTION_COMPLETED, reason)

    def _enter_running(self) -> None:
        self._state = STATE_RUNNING
        self._arm_tick()

    def _arm_tick(self) -> None:
        self._cancel_tick()
        self._tick_handle = self._scheduler.schedule(
            TICK_INTERVAL_SECONDS,
            self.on_tick,
            label="tick",
        )

    def _cancel_tick(self) -> None:
        self._scheduler.cancel(self._tick_handle)
        self._tick_handle = None

    def _cancel_interval_start(self) -> None:
        self._scheduler.cancel(self._interval_start_handle)
        self._interval_start_handle = None

    def _play_interval_start(self) -> None:
        self._interval_start_handle = None
        self._cue(self._audio.play_interval_start)

    def _cue(self, play: Callable[[], None]) -> None:
        if self._config.sound_enabled:
            play()

    def _emit(self, action: SessionAction, reason: str) -> SessionActionResult:
        result = SessionActionResult(action=action, reason=reason, snapshot=self.snapshot())
        for listener in tuple(self._listeners):
            listener(result)
        return result
