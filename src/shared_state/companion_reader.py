"""Standalone companion process that reads the shared snapshot and projects a timeline."""

from __future__ import annotations

import logging
import signal
import threading
from typing import Optional

import click

from app_config import AppConfigurationError, load_app_config

from .companion import CompanionTimelineReader, Timeline
from .store import SnapshotStore


def log_timeline(timeline: Timeline, logger: logging.Logger) -> int:
    """Log each projected entry and return how many were consumed."""
    state = timeline.state
    if not state.is_active:
        logger.info(
            "Idle (run %ss / walk %ss)",
            state.run_interval_setting,
            state.walk_interval_setting,
        )
    consumed = 0
    for entry in timeline.entries:
        consumed += 1
        if entry.state.is_active:
            logger.debug(
                "t+%ds %s %s (%.0f%%)",
                consumed - 1,
                entry.state.current_phase,
                entry.state.formatted_time_remaining,
                entry.state.progress * 100,
            )
    if state.is_active:
        logger.info(
            "%s %s remaining, %d entries projected",
            state.current_phase,
            state.formatted_time_remaining,
            consumed,
        )
    return consumed


def run_companion(
    reader: CompanionTimelineReader,
    *,
    once: bool,
    logger: logging.Logger,
    stop_event: Optional[threading.Event] = None,
) -> int:
    """Read a timeline, then sleep until its ``refresh_at`` before reading again."""
    stop = stop_event or threading.Event()
    while True:
        timeline = reader.timeline()
        log_timeline(timeline, logger)
        if once:
            return 0

        wait_seconds = max(0.0, timeline.refresh_at - timeline.generated_at)
        logger.debug("Next timeline read in %.0fs", wait_seconds)
        if stop.wait(wait_seconds):
            return 0


@click.command()
@click.option("--config", "config_path", default=None, help="Path to config.toml.")
@click.option("--once", is_flag=True, help="Read the snapshot once and exit.")
@click.option("--verbose", is_flag=True, help="Log every projected entry.")
def main(config_path: Optional[str], once: bool, verbose: bool) -> None:
    """Run the companion timeline reader until interrupted."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger = logging.getLogger("companion")

    try:
        app_config = load_app_config(config_path)
    except AppConfigurationError as error:
        logger.error("Companion configuration error: %s", error)
        raise SystemExit(1)

    settings = app_config.shared_state
    reader = CompanionTimelineReader(
        SnapshotStore(settings.store_dir, slot=settings.slot),
        staleness_seconds=settings.staleness_seconds,
        logger=logger,
    )

    stop_event = threading.Event()

    def handle_signal(signum, frame) -> None:
        del frame
        logger.info("Signal %s received, stopping.", signal.Signals(signum).name)
        stop_event.set()

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    raise SystemExit(run_companion(reader, once=once, logger=logger, stop_event=stop_event))


if __name__ == "__main__":
    main()
