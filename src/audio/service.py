"""Fire-and-forget cue player backing the session controller's audio triggers."""

from __future__ import annotations

import concurrent.futures
import logging
from typing import Optional, Protocol

import numpy as np

from .config import AudioConfig
from .tones import (
    CUE_COMPLETE,
    CUE_INTERVAL_START,
    CUE_PAUSE,
    CUE_START,
    CUES,
    AudioError,
    render_cue,
)


class AudioOutputLike(Protocol):
    def play(self, buffer: np.ndarray, sample_rate_hz: int) -> None:
        ...


class ToneCuePlayer:
    """Pre-renders every cue and plays them on a single background worker.

    Calls return immediately; cues queue behind each other on the worker
    so overlapping requests play in order instead of mixing.
    """

    def __init__(
        self,
        config: AudioConfig,
        output: AudioOutputLike,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._output = output
        self._logger = logger or logging.getLogger("audio")
        self._buffers = {
            name: render_cue(name, config.sample_rate_hz) * config.master_volume
            for name in CUES
        }
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="audio-cue",
        )

    def play_start(self) -> None:
        self._submit(CUE_START)

    def play_pause(self) -> None:
        self._submit(CUE_PAUSE)

    def play_complete(self) -> None:
        self._submit(CUE_COMPLETE)

    def play_interval_start(self) -> None:
        self._submit(CUE_INTERVAL_START)

    def close(self, wait: bool = False) -> None:
        """Stop the worker; queued cues are dropped unless ``wait`` is set."""
        self._executor.shutdown(wait=wait, cancel_futures=not wait)

    def _submit(self, name: str) -> None:
        try:
            future = self._executor.submit(self._play, name)
        except RuntimeError:
            # Executor already shut down.
            self._logger.debug("Dropping cue %s after shutdown", name)
            return
        future.add_done_callback(self._log_failure)

    def _play(self, name: str) -> None:
        self._logger.debug("Playing cue %s", name)
        self._output.play(self._buffers[name], self._config.sample_rate_hz)

    def _log_failure(self, future: concurrent.futures.Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if isinstance(error, AudioError):
            self._logger.error("Cue playback failed: %s", error)
        elif error is not None:
            self._logger.error("Unexpected cue playback error: %s", error, exc_info=error)


class SilentCuePlayer:
    """Cue sink used when audio output is disabled in config."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("audio")

    def play_start(self) -> None:
        self._logger.debug("Cue start (audio disabled)")

    def play_pause(self) -> None:
        self._logger.debug("Cue pause (audio disabled)")

    def play_complete(self) -> None:
        self._logger.debug("Cue complete (audio disabled)")

    def play_interval_start(self) -> None:
        self._logger.debug("Cue interval_start (audio disabled)")

    def close(self, wait: bool = False) -> None:
        return None
