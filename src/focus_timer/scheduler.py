"""Cancellable scheduled callbacks run cooperatively by the runtime loop."""

from __future__ import annotations

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol


@dataclass(eq=False)
class ScheduledCall:
    """Handle for one pending callback; cancelled handles never fire."""
    due_at: float
    callback: Callable[[], None] = field(repr=False)
    label: str = ""
    cancelled: bool = False
    fired: bool = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)


class Scheduler(Protocol):
    def schedule(
        self,
        delay_seconds: float,
        callback: Callable[[], None],
        *,
        label: str = "",
    ) -> ScheduledCall:
        ...

    def cancel(self, handle: Optional[ScheduledCall]) -> None:
        ...


class LoopScheduler:
    """Monotonic priority queue of callbacks executed by ``run_due``.

    Nothing runs on its own: the owning loop calls ``run_due`` and sleeps
    for at most ``seconds_until_next`` between calls, so every callback
    executes on the loop thread.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ):
        self._clock = clock
        self._logger = logger or logging.getLogger("focus_timer.scheduler")
        self._heap: list[tuple[float, int, ScheduledCall]] = []
        self._sequence = itertools.count()

    def schedule(
        self,
        delay_seconds: float,
        callback: Callable[[], None],
        *,
        label: str = "",
    ) -> ScheduledCall:
        handle = ScheduledCall(
            due_at=self._clock() + max(0.0, float(delay_seconds)),
            callback=callback,
            label=label,
        )
        heapq.heappush(self._heap, (handle.due_at, next(self._sequence), handle))
        self._logger.debug("Scheduled %s in %.2fs", label or "callback", delay_seconds)
        return handle

    def cancel(self, handle: Optional[ScheduledCall]) -> None:
        if handle is None or not handle.pending:
            return
        handle.cancelled = True
        self._logger.debug("Cancelled %s", handle.label or "callback")

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, handle in self._heap if handle.pending)

    def seconds_until_next(self) -> Optional[float]:
        self._drop_cancelled()
        if not self._heap:
            return None
        return max(0.0, self._heap[0][0] - self._clock())

    def run_due(self) -> int:
        """Fire every callback whose deadline has passed; return how many ran."""
        now = self._clock()
        ran = 0
        while self._heap and self._heap[0][0] <= now:
            _, _, handle = heapq.heappop(self._heap)
            if not handle.pending:
                continue
            handle.fired = True
            handle.callback()
            ran += 1
        return ran

    def _drop_cancelled(self) -> None:
        while self._heap and not self._heap[0][2].pending:
            heapq.heappop(self._heap)
