"""Diagnostic tool that plays every session cue on the configured output."""

import logging
import sys
import time

import sounddevice as sd

from app_config import AppConfigurationError, load_app_config
from audio import AudioConfig, AudioConfigurationError, AudioError, SoundDeviceAudioOutput, render_cue
from audio.tones import CUES


def setup_logging():
    """Configure console logging for the diagnostic tool."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
    )


def main():
    """List output devices, then play each cue with a short gap between them."""
    setup_logging()
    logger = logging.getLogger(__name__)

    try:
        app_config = load_app_config()
        config = AudioConfig.from_settings(app_config.audio)
    except (AppConfigurationError, AudioConfigurationError) as e:
        print(f"Error: {e}")
        return 1

    print("=== Session Cue Check ===\n")
    print(sd.query_devices())
    device = config.output_device_index
    print(f"\nUsing output device: {'default' if device is None else device}")
    print(f"Sample rate: {config.sample_rate_hz} Hz\n")

    output = SoundDeviceAudioOutput(
        output_device_index=config.output_device_index,
        logger=logger,
    )

    for name in CUES:
        buffer = render_cue(name, config.sample_rate_hz) * config.master_volume
        duration = len(buffer) / config.sample_rate_hz
        print(f"Playing '{name}' ({duration:.2f}s, peak {abs(buffer).max():.3f})")
        try:
            output.play(buffer, config.sample_rate_hz)
        except AudioError as e:
            print(f"  ✗ {e}")
            return 1
        time.sleep(0.5)

    print("\n✓ All cues played.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
