"""Configuration model for cue synthesis and output device selection."""

from dataclasses import dataclass
from typing import Optional


class AudioConfigurationError(Exception):
    """Raised when audio configuration is invalid."""


_SUPPORTED_SAMPLE_RATES = (22050, 44100, 48000)


@dataclass(frozen=True)
class AudioConfig:
    """Resolved cue playback settings."""
    enabled: bool = True
    sample_rate_hz: int = 44100
    output_device_index: Optional[int] = None
    master_volume: float = 1.0

    def __post_init__(self) -> None:
        if self.sample_rate_hz not in _SUPPORTED_SAMPLE_RATES:
            allowed = ", ".join(str(rate) for rate in _SUPPORTED_SAMPLE_RATES)
            raise AudioConfigurationError(
                f"audio.sample_rate_hz must be one of: {allowed}"
            )
        if not 0.0 <= self.master_volume <= 1.0:
            raise AudioConfigurationError(
                f"audio.master_volume must be in [0.0, 1.0], got: {self.master_volume}"
            )

    @classmethod
    def from_settings(cls, settings) -> "AudioConfig":
        return cls(
            enabled=bool(settings.enabled),
            sample_rate_hz=settings.sample_rate_hz,
            output_device_index=settings.output_device,
            master_volume=settings.master_volume,
        )
