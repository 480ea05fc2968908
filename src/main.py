import logging
import signal
from queue import Queue
from typing import Optional, Union

from app_config import AppConfig, AppConfigurationError, load_app_config, resolve_config_path
from audio import (
    AudioConfig,
    AudioConfigurationError,
    AudioError,
    SilentCuePlayer,
    SoundDeviceAudioOutput,
    ToneCuePlayer,
)
from focus_timer import SessionConfig, SettingsError
from runtime import RuntimeBootstrap, RuntimeEngine
from server import ServerConfigurationError, UICommand, UIServer, UIServerConfig

CuePlayer = Union[ToneCuePlayer, SilentCuePlayer]


def setup_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("focus_timer_app")


def setup_signal_handlers(engine: RuntimeEngine, logger: logging.Logger) -> None:
    """Stop the runtime loop gracefully on SIGTERM and SIGINT."""

    def signal_handler(signum: int, frame) -> None:
        del frame
        logger.info("%s received, stopping...", signal.Signals(signum).name)
        engine.stop()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def build_session_config(app_config: AppConfig) -> SessionConfig:
    settings = app_config.session
    return SessionConfig.clamped(
        focus_minutes=settings.focus_minutes,
        break_minutes=settings.break_minutes,
        auto_start_break=settings.auto_start_break,
        auto_start_focus=settings.auto_start_focus,
        sound_enabled=settings.sound_enabled,
        count_up_display=settings.count_up_display,
    )


def build_cue_player(app_config: AppConfig) -> CuePlayer:
    audio_config = AudioConfig.from_settings(app_config.audio)
    if not audio_config.enabled:
        return SilentCuePlayer(logger=logging.getLogger("audio"))

    output = SoundDeviceAudioOutput(
        output_device_index=audio_config.output_device_index,
        logger=logging.getLogger("audio.output"),
    )
    return ToneCuePlayer(
        config=audio_config,
        output=output,
        logger=logging.getLogger("audio"),
    )


def main() -> int:
    """Run the focus/break timer until interrupted."""
    logger = setup_logging(level=logging.INFO)

    try:
        config_path = resolve_config_path()
        app_config = load_app_config()
        logging.getLogger().setLevel(app_config.runtime.log_level)
        session_config = build_session_config(app_config)
        if app_config.source_file:
            logger.info("Loaded runtime config: %s", config_path)
        else:
            logger.info("No config file at %s, using defaults", config_path)
    except (AppConfigurationError, SettingsError) as error:
        logger.error("App configuration error: %s", error)
        return 1

    try:
        cue_player = build_cue_player(app_config)
    except (AudioConfigurationError, AudioError) as error:
        logger.error("Audio initialization error: %s", error)
        return 1

    command_queue: Queue[UICommand] = Queue()

    # Optional UI server
    ui_server: Optional[UIServer] = None
    try:
        ui_config = UIServerConfig.from_settings(app_config.ui_server)
        if ui_config.enabled:
            ui_server = UIServer(
                config=ui_config,
                on_command=command_queue.put,
                logger=logging.getLogger("ui_server"),
            )
            ui_server.start()
        else:
            logger.info("UI server disabled via ui_server.enabled=false")
    except ServerConfigurationError as error:
        logger.error("UI server configuration error: %s", error)
        cue_player.close()
        return 1
    except RuntimeError as error:
        logger.error("UI server startup error: %s", error)
        cue_player.close()
        return 1

    engine = RuntimeEngine(
        RuntimeBootstrap(
            logger=logging.getLogger("runtime"),
            session_config=session_config,
            audio=cue_player,
            command_queue=command_queue,
            ui_server=ui_server,
        )
    )
    setup_signal_handlers(engine, logger)

    try:
        return engine.run()
    finally:
        cue_player.close()


if __name__ == "__main__":
    raise SystemExit(main())
