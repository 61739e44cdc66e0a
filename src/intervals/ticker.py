"""Background thread that drives one session controller on a fixed cadence."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .session import SessionController

DEFAULT_TICK_INTERVAL_SECONDS = 0.25


class SessionTicker:
    """Single scheduling thread that calls ``controller.tick()`` until stopped."""

    def __init__(
        self,
        controller: SessionController,
        *,
        interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")

        self._controller = controller
        self._interval_seconds = float(interval_seconds)
        self._logger = logger or logging.getLogger("ticker")
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            self._logger.warning("Session ticker is already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            daemon=True,
            name="session-ticker",
        )
        self._thread.start()
        self._logger.debug("Session ticker started (interval=%.2fs)", self._interval_seconds)

    def stop(self, timeout_seconds: float = 2.0) -> None:
        if self._thread is None:
            return

        self._stop_event.set()
        if self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout_seconds)
            if self._thread.is_alive():
                self._logger.error(
                    "Session ticker did not stop within %.1fs",
                    timeout_seconds,
                )
        self._thread = None

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval_seconds):
            try:
                self._controller.tick()
            except Exception as error:
                self._logger.error("Session tick failed: %s", error, exc_info=True)
