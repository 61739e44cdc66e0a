import logging
import signal
import sys
import threading
from typing import Optional

import click

from app_config import AppConfigurationError, load_app_config
from intervals import IntervalConfigurationError
from runtime import IntentError, RuntimeBootstrap, RuntimeEngine, RuntimeHooks
from server import ServerConfigurationError, UIServer, UIServerConfig
from workouts import PresetError


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return logging.getLogger("runtime")


def setup_signal_handlers(stop_event: threading.Event) -> None:
    """Set up graceful shutdown on SIGTERM and SIGINT."""
    logger = logging.getLogger("runtime")

    def signal_handler(signum: int, frame) -> None:
        del frame
        logger.info("%s received, stopping...", signal.Signals(signum).name)
        stop_event.set()

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def run(
    config_path: Optional[str],
    intent: Optional[str],
    duration_seconds: Optional[float],
    verbose: bool = False,
) -> int:
    logger = setup_logging(level=logging.DEBUG if verbose else logging.INFO)

    try:
        app_config = load_app_config(config_path)
    except AppConfigurationError as error:
        logger.error("Configuration error: %s", error)
        return 1

    ui_server: Optional[UIServer] = None
    try:
        ui_server_config = UIServerConfig.from_settings(app_config.ui_server)
    except ServerConfigurationError as error:
        logger.error("UI server configuration error: %s", error)
        return 1

    if ui_server_config.enabled:
        ui_server = UIServer(ui_server_config, logger=logging.getLogger("ui_server"))
        try:
            ui_server.start(timeout_seconds=5.0)
        except RuntimeError as error:
            logger.error("UI server unavailable, continuing without it: %s", error)
            ui_server = None

    try:
        engine = RuntimeEngine(
            RuntimeBootstrap(
                logger=logger,
                app_config=app_config,
                ui_server=ui_server,
                hooks=RuntimeHooks(setup_signal_handlers=setup_signal_handlers),
            )
        )
        if intent:
            update = engine.handle_intent(intent)
        else:
            update = engine.start_session()
        if not update.accepted:
            logger.error("Workout could not be started: %s", update.reason)
            return 1
        return engine.run(duration_seconds=duration_seconds)
    except PresetError as error:
        logger.error("Preset storage error: %s", error)
        return 1
    except (IntentError, IntervalConfigurationError) as error:
        logger.error("Invalid workout request: %s", error)
        return 1
    finally:
        if ui_server:
            logger.info("Stopping UI server...")
            try:
                ui_server.stop(timeout_seconds=5.0)
            except Exception as error:
                logger.error("Error stopping UI server: %s", error, exc_info=True)


@click.command()
@click.option("--config", "config_path", default=None, help="Path to config.toml.")
@click.option("--intent", default=None, help="Deep link such as runwalk://start?run=60&walk=90.")
@click.option(
    "--duration",
    "duration_seconds",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Stop the workout after this many seconds.",
)
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
def cli(
    config_path: Optional[str],
    intent: Optional[str],
    duration_seconds: Optional[float],
    verbose: bool,
) -> None:
    """Run one run/walk interval workout until interrupted."""
    sys.exit(run(config_path, intent, duration_seconds, verbose))


if __name__ == "__main__":
    cli()
