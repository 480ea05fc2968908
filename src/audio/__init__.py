"""Public exports for cue synthesis and playback components."""

from .config import AudioConfig, AudioConfigurationError
from .output import SoundDeviceAudioOutput
from .service import SilentCuePlayer, ToneCuePlayer
from .tones import AudioError, render_cue

__all__ = [
    "AudioConfig",
    "AudioConfigurationError",
    "AudioError",
    "SilentCuePlayer",
    "SoundDeviceAudioOutput",
    "ToneCuePlayer",
    "render_cue",
]
