"""Runtime loop that drives scheduled callbacks and applies UI commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from queue import Empty, Queue
from typing import Optional

from focus_timer import (
    AudioCues,
    FinishedAlarm,
    LoopScheduler,
    SessionActionResult,
    SessionConfig,
    SessionController,
)
from focus_timer.constants import ACTION_SYNC, REASON_STARTUP
from server.events import UICommand
from server.service import UIServer

from .commands import SessionCommandDispatcher
from .ui import RuntimeUIPublisher

_MAX_WAIT_SECONDS = 0.25


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    session_config: SessionConfig
    audio: AudioCues
    command_queue: Queue[UICommand]
    ui_server: Optional[UIServer] = None
    scheduler: Optional[LoopScheduler] = None


class RuntimeEngine:
    """Single-threaded loop owning the controller, scheduler, and alarm."""
    def __init__(self, bootstrap: RuntimeBootstrap):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        self._stop_requested = False

        self._scheduler = bootstrap.scheduler or LoopScheduler()
        self._ui = RuntimeUIPublisher(bootstrap.ui_server)
        self._controller = SessionController(
            config=bootstrap.session_config,
            audio=bootstrap.audio,
            scheduler=self._scheduler,
            logger=logging.getLogger("focus_timer"),
        )
        self._alarm = FinishedAlarm(
            play_complete=bootstrap.audio.play_complete,
            scheduler=self._scheduler,
            logger=logging.getLogger("focus_timer.alarm"),
        )
        self._dispatcher = SessionCommandDispatcher(
            controller=self._controller,
            ui=self._ui,
            logger=self._logger,
        )

        self._controller.add_listener(self._alarm.observe)
        self._controller.add_listener(self._ui.publish_session_update)

    @property
    def controller(self) -> SessionController:
        return self._controller

    def stop(self) -> None:
        """Ask the loop to exit after the current iteration; signal-safe."""
        self._stop_requested = True

    def run(self) -> int:
        self._publish_startup_sync()
        self._logger.info("Ready. Waiting for commands ...")

        try:
            while not self._stop_requested:
                self.run_once()
            self._logger.info("Stop requested.")
            return 0
        except KeyboardInterrupt:
            self._logger.info("Shutdown requested by keyboard interrupt.")
            return 0
        except Exception as error:
            self._logger.error("Unexpected error: %s", error, exc_info=True)
            return 1
        finally:
            self._shutdown()

    def run_once(self) -> None:
        """Fire due callbacks, then wait for one command until the next deadline."""
        self._scheduler.run_due()

        command = self._poll_command(self._wait_seconds())
        if command is not None:
            self._dispatcher.dispatch(command)

    def _wait_seconds(self) -> float:
        until_next = self._scheduler.seconds_until_next()
        if until_next is None:
            return _MAX_WAIT_SECONDS
        return min(until_next, _MAX_WAIT_SECONDS)

    def _poll_command(self, timeout: float) -> Optional[UICommand]:
        queue = self._bootstrap.command_queue
        try:
            if timeout <= 0:
                return queue.get_nowait()
            return queue.get(timeout=timeout)
        except Empty:
            return None

    def _publish_startup_sync(self) -> None:
        self._ui.publish_session_update(
            SessionActionResult(
                action=ACTION_SYNC,
                reason=REASON_STARTUP,
                snapshot=self._controller.snapshot(),
            )
        )

    def _shutdown(self) -> None:
        self._alarm.stop()

        ui_server = self._bootstrap.ui_server
        if ui_server is not None:
            self._logger.info("Stopping UI server...")
            try:
                ui_server.stop(timeout_seconds=5.0)
            except Exception as error:
                self._logger.error("Error stopping UI server: %s", error, exc_info=True)
