"""Numpy synthesis of the enveloped tones that make up each audio cue."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np

Waveform = Literal["sine", "triangle"]

ATTACK_SECONDS = 0.05
DECAY_FLOOR = 0.001


class AudioError(Exception):
    """Raised when cue synthesis or playback fails."""


@dataclass(frozen=True)
class Tone:
    """One oscillator note placed ``offset_seconds`` into a cue."""
    frequency_hz: float
    duration_seconds: float
    volume: float = 0.1
    waveform: Waveform = "sine"
    offset_seconds: float = 0.0


CUE_START = "start"
CUE_PAUSE = "pause"
CUE_COMPLETE = "complete"
CUE_INTERVAL_START = "interval_start"

CUES: dict[str, tuple[Tone, ...]] = {
    # Rising A4 -> A5.
    CUE_START: (
        Tone(440.0, 0.15),
        Tone(880.0, 0.4, offset_seconds=0.15),
    ),
    CUE_PAUSE: (Tone(300.0, 0.2),),
    # C5, E5, G5.
    CUE_COMPLETE: (
        Tone(523.25, 0.3, volume=0.15),
        Tone(659.25, 0.3, volume=0.15, offset_seconds=0.3),
        Tone(783.99, 0.8, volume=0.15, offset_seconds=0.6),
    ),
    CUE_INTERVAL_START: (Tone(329.63, 0.8, volume=0.05, waveform="triangle"),),
}


def synthesize_tone(tone: Tone, sample_rate_hz: int) -> np.ndarray:
    """Render a single tone with a linear attack and exponential decay."""
    if tone.duration_seconds <= 0:
        raise AudioError("Tone duration must be positive")
    if sample_rate_hz <= 0:
        raise AudioError("Sample rate must be positive")

    n_samples = int(round(tone.duration_seconds * sample_rate_hz))
    t = np.arange(n_samples, dtype=np.float64) / sample_rate_hz
    phase = tone.frequency_hz * t

    if tone.waveform == "sine":
        wave = np.sin(2.0 * np.pi * phase)
    elif tone.waveform == "triangle":
        wave = 2.0 * np.abs(2.0 * (phase - np.floor(phase + 0.5))) - 1.0
    else:
        raise AudioError(f"Unsupported waveform: {tone.waveform}")

    return (wave * _envelope(t, tone)).astype(np.float32)


def render_cue(name: str, sample_rate_hz: int) -> np.ndarray:
    """Mix the tones of a named cue into one mono float32 buffer."""
    tones = CUES.get(name)
    if tones is None:
        raise AudioError(f"Unknown cue: {name}")

    total_seconds = max(tone.offset_seconds + tone.duration_seconds for tone in tones)
    buffer = np.zeros(int(round(total_seconds * sample_rate_hz)), dtype=np.float32)
    for tone in tones:
        samples = synthesize_tone(tone, sample_rate_hz)
        start = int(round(tone.offset_seconds * sample_rate_hz))
        end = min(len(buffer), start + len(samples))
        buffer[start:end] += samples[: end - start]

    return np.clip(buffer, -1.0, 1.0)


def _envelope(t: np.ndarray, tone: Tone) -> np.ndarray:
    attack = min(ATTACK_SECONDS, tone.duration_seconds)
    decay_time = tone.duration_seconds - attack
    rising = tone.volume * t / attack

    if decay_time <= 0:
        return np.minimum(rising, tone.volume)

    # Exponential ramp from volume down to DECAY_FLOOR at the end of the tone.
    progress = np.clip((t - attack) / decay_time, 0.0, 1.0)
    falling = tone.volume * np.power(DECAY_FLOOR / tone.volume, progress)
    return np.where(t < attack, rising, falling)
