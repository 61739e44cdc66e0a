"""Runtime wiring of one session controller with its listeners and outputs."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from app_config import AppConfig
from cues import BellCue, HapticCue, LoggingCueOutput, VoiceAnnouncer
from cues.outputs import HapticOutput, SoundOutput, SpeechOutput
from intervals import (
    Clock,
    IntervalConfiguration,
    SessionController,
    SessionTicker,
    SessionUpdate,
    SystemClock,
    WorkoutSummary,
)
from server import UIServer
from shared_state import SharedSnapshot, SharedStatePublisher, SnapshotStore
from workouts import PresetRegistry, StatisticsRecorder, WorkoutHistoryStore

from .intents import resolve_intent
from .ui import RuntimeUIPublisher

POLL_INTERVAL_SECONDS = 0.25


@dataclass(frozen=True)
class RuntimeHooks:
    """Injectable lifecycle hooks used by runtime startup and shutdown flow."""
    setup_signal_handlers: Callable[[threading.Event], None]


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    app_config: AppConfig
    clock: Optional[Clock] = None
    ui_server: Optional[UIServer] = None
    speech_output: Optional[SpeechOutput] = None
    haptic_output: Optional[HapticOutput] = None
    sound_output: Optional[SoundOutput] = None
    hooks: Optional[RuntimeHooks] = None


class RuntimeEngine:
    """Owns the session controller, its ticker and every session listener."""

    def __init__(self, bootstrap: RuntimeBootstrap):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        config = bootstrap.app_config
        self._clock = bootstrap.clock or SystemClock()

        self._history: Optional[WorkoutHistoryStore] = None
        if config.history.enabled:
            self._history = WorkoutHistoryStore(
                Path(config.history.path),
                logger=logging.getLogger("history"),
            )

        self._presets = PresetRegistry(
            config.presets.path or None,
            logger=logging.getLogger("presets"),
        )

        self._controller = SessionController(
            clock=self._clock,
            default_config=IntervalConfiguration(
                run_seconds=config.session.run_seconds,
                walk_seconds=config.session.walk_seconds,
            ),
            sink=self._history,
            logger=logging.getLogger("session"),
        )
        self._ticker = SessionTicker(
            self._controller,
            interval_seconds=config.session.tick_interval_seconds,
            logger=logging.getLogger("ticker"),
        )

        self._publisher: Optional[SharedStatePublisher] = None
        if config.shared_state.enabled:
            self._publisher = SharedStatePublisher(
                SnapshotStore(
                    config.shared_state.store_dir,
                    slot=config.shared_state.slot,
                    logger=logging.getLogger("shared_state"),
                ),
                clock=self._clock,
                min_interval_seconds=config.shared_state.publish_interval_seconds,
                tick_interval_seconds=config.session.tick_interval_seconds,
                logger=logging.getLogger("shared_state"),
            )

        self._statistics = StatisticsRecorder(logger=logging.getLogger("statistics"))
        cue_logger = logging.getLogger("cues")
        fallback_output = LoggingCueOutput(logger=cue_logger)
        self._cues = (
            VoiceAnnouncer(
                bootstrap.speech_output or fallback_output,
                enabled=config.cues.voice_enabled,
                logger=cue_logger,
            ),
            HapticCue(
                bootstrap.haptic_output or fallback_output,
                enabled=config.cues.haptics_enabled,
                logger=cue_logger,
            ),
            BellCue(
                bootstrap.sound_output or fallback_output,
                enabled=config.cues.bells_enabled,
                logger=cue_logger,
            ),
        )
        self._ui = RuntimeUIPublisher(bootstrap.ui_server)
        if bootstrap.ui_server is not None:
            bootstrap.ui_server.set_state_provider(self.state_payload)

        self._register_listeners()
        self._last_summary: Optional[WorkoutSummary] = None

    @property
    def controller(self) -> SessionController:
        return self._controller

    @property
    def statistics(self) -> StatisticsRecorder:
        return self._statistics

    @property
    def presets(self) -> PresetRegistry:
        return self._presets

    @property
    def history(self) -> Optional[WorkoutHistoryStore]:
        return self._history

    @property
    def last_summary(self) -> Optional[WorkoutSummary]:
        return self._last_summary

    def start_session(self, config: Optional[IntervalConfiguration] = None) -> SessionUpdate:
        update = self._controller.start(config)
        if update.accepted:
            self._ticker.start()
        return update

    def handle_intent(self, url: str) -> SessionUpdate:
        """Start a session from a deep link; raises ``IntentError`` for bad links."""
        config = resolve_intent(url, self._controller.config, self._presets)
        self._logger.info("Intent %s resolved to %s", url, config.summary)
        return self.start_session(config)

    def stop_session(self) -> Optional[WorkoutSummary]:
        self._ticker.stop()
        summary = self._controller.stop()
        if summary is not None:
            self._last_summary = summary
        return summary

    def state_payload(self) -> dict[str, Any]:
        """Shared snapshot of the current session in its wire form."""
        snapshot = SharedSnapshot.from_session(
            self._controller.snapshot(),
            at=self._clock.now(),
        )
        return snapshot.to_dict()

    def run(
        self,
        *,
        stop_event: Optional[threading.Event] = None,
        duration_seconds: Optional[float] = None,
    ) -> int:
        """Block until ``stop_event`` is set or ``duration_seconds`` have elapsed.

        The session is always stopped and a final inactive snapshot published
        on the way out.
        """
        stop = stop_event or threading.Event()
        hooks = self._bootstrap.hooks
        if hooks is not None:
            hooks.setup_signal_handlers(stop)

        deadline = None
        if duration_seconds is not None:
            deadline = self._clock.now() + duration_seconds

        try:
            while not stop.wait(POLL_INTERVAL_SECONDS):
                if not self._controller.snapshot().is_active:
                    self._logger.info("Session is no longer active")
                    break
                if deadline is not None and self._clock.now() >= deadline:
                    self._logger.info("Requested duration reached")
                    break
        except KeyboardInterrupt:
            self._logger.info("Shutdown requested by keyboard interrupt.")
        finally:
            self._shutdown()
        return 0

    def _register_listeners(self) -> None:
        controller = self._controller
        controller.add_update_listener(self._statistics.handle_update)
        controller.add_phase_listener(self._statistics.handle_phase_change)
        if self._publisher is not None:
            controller.add_update_listener(self._publisher.handle_update)
        for cue in self._cues:
            controller.add_phase_listener(cue.handle_phase_change)
            controller.add_update_listener(cue.handle_update)
        controller.add_phase_listener(self._ui.handle_phase_change)
        controller.add_update_listener(self._ui.handle_update)

    def _shutdown(self) -> None:
        summary = self.stop_session()
        if summary is not None:
            self._logger.info(
                "Workout finished: run %.0fs, walk %.0fs, %d intervals",
                summary.total_run_seconds,
                summary.total_walk_seconds,
                summary.total_intervals,
            )
        if self._publisher is not None:
            self._publisher.publish(
                SharedSnapshot.from_session(self._controller.snapshot(), at=self._clock.now())
            )
