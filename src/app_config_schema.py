"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_CONFIG_FILE = "config.toml"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class SessionSettings:
    """Initial focus/break settings from `[session]`."""
    focus_minutes: int = 25
    break_minutes: int = 5
    auto_start_break: bool = True
    auto_start_focus: bool = True
    sound_enabled: bool = True
    count_up_display: bool = False


@dataclass(frozen=True)
class AudioSettings:
    """Cue playback settings from `[audio]`."""
    enabled: bool = True
    sample_rate_hz: int = 44100
    output_device: Optional[int] = None
    master_volume: float = 1.0


@dataclass(frozen=True)
class UIServerSettings:
    """Built-in UI server settings from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""


@dataclass(frozen=True)
class RuntimeSettings:
    """Process-level settings from `[runtime]`."""
    log_level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    session: SessionSettings = field(default_factory=SessionSettings)
    audio: AudioSettings = field(default_factory=AudioSettings)
    ui_server: UIServerSettings = field(default_factory=UIServerSettings)
    runtime: RuntimeSettings = field(default_factory=RuntimeSettings)
    source_file: str = ""
