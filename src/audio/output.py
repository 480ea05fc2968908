"""Sounddevice-backed playback for synthesized cue buffers."""

import logging
import threading
from typing import Optional

import numpy as np
import sounddevice as sd

from .tones import AudioError

# Extra wait on top of the buffer length before a stream is considered stuck.
_STREAM_GRACE_SECONDS = 1.0


class SoundDeviceAudioOutput:
    """Streams mono float32 cue buffers to a sounddevice output device."""
    def __init__(
        self,
        output_device_index: Optional[int] = None,
        blocksize: int = 1024,
        logger: Optional[logging.Logger] = None,
    ):
        self._output_device_index = output_device_index
        self._blocksize = blocksize
        self._logger = logger or logging.getLogger(__name__)

    def play(self, buffer: np.ndarray, sample_rate_hz: int) -> None:
        """Play ``buffer`` and return once the stream has drained."""
        if buffer.ndim != 1:
            raise AudioError("Expected mono PCM array for playback")
        if len(buffer) == 0:
            raise AudioError("Cannot play empty audio buffer")

        samples = np.ascontiguousarray(buffer, dtype=np.float32)
        drained = threading.Event()
        cursor = 0

        def fill(outdata, frames, time_info, status):
            nonlocal cursor
            del time_info
            if status:
                self._logger.warning("Sounddevice status: %s", status)

            chunk = samples[cursor : cursor + frames]
            cursor += len(chunk)
            outdata[: len(chunk), 0] = chunk
            if len(chunk) < frames:
                outdata[len(chunk) :, 0] = 0
                raise sd.CallbackStop()

        timeout = len(samples) / sample_rate_hz + _STREAM_GRACE_SECONDS
        try:
            with sd.OutputStream(
                channels=1,
                samplerate=sample_rate_hz,
                blocksize=self._blocksize,
                dtype="float32",
                callback=fill,
                finished_callback=drained.set,
                device=self._output_device_index,
            ):
                if not drained.wait(timeout):
                    self._logger.warning("Cue playback did not drain within %.1fs", timeout)
        except sd.PortAudioError as error:
            raise AudioError(f"Audio playback failed: {error}") from error
