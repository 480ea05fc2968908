"""Repeating completion cue while a finished session awaits acknowledgement."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .constants import ALARM_REPEAT_SECONDS
from .controller import SessionActionResult, SessionSnapshot
from .scheduler import ScheduledCall, Scheduler


class FinishedAlarm:
    """Plays the completion cue now and every 2.5s while state is finished.

    Subscribe ``observe`` to a controller; the alarm arms on entering the
    finished state with sound enabled and cancels its pending repeat as
    soon as either condition stops holding.
    """

    def __init__(
        self,
        *,
        play_complete: Callable[[], None],
        scheduler: Scheduler,
        repeat_seconds: float = ALARM_REPEAT_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        self._play_complete = play_complete
        self._scheduler = scheduler
        self._repeat_seconds = repeat_seconds
        self._logger = logger or logging.getLogger("focus_timer.alarm")
        self._handle: Optional[ScheduledCall] = None

    @property
    def armed(self) -> bool:
        return self._handle is not None and self._handle.pending

    def observe(self, result: SessionActionResult) -> None:
        self.sync(result.snapshot)

    def sync(self, snapshot: SessionSnapshot) -> None:
        should_ring = snapshot.awaiting_acknowledgement and snapshot.sound_enabled
        if should_ring and not self.armed:
            self._logger.info("Session finished; ringing until acknowledged")
            self._ring()
        elif not should_ring and self.armed:
            self.stop()

    def stop(self) -> None:
        self._scheduler.cancel(self._handle)
        self._handle = None
        self._logger.debug("Alarm stopped")

    def _ring(self) -> None:
        self._play_complete()
        self._handle = self._scheduler.schedule(
            self._repeat_seconds,
            self._ring,
            label="finished-alarm",
        )
