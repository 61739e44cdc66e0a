from __future__ import annotations

from typing import Any, Optional, Protocol

from contracts.ui_protocol import (
    EVENT_COUNTDOWN,
    EVENT_ERROR,
    EVENT_PHASE_CHANGE,
    EVENT_SESSION,
    EVENT_WORKOUT_SUMMARY,
)
from intervals import PhaseChangeEvent, SessionUpdate
from server.events import phase_change_payload, session_payload

from .messages import rejection_message, session_status_message


class UIServerLike(Protocol):
    def publish(self, event_type: str, *, at: Optional[float] = None, **payload: Any) -> None:
        ...


class RuntimeUIPublisher:
    """Session listener that forwards updates to the websocket feed."""

    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def handle_phase_change(self, event: PhaseChangeEvent) -> None:
        self.publish(EVENT_PHASE_CHANGE, at=event.at, **phase_change_payload(event))

    def handle_update(self, update: SessionUpdate) -> None:
        if not update.accepted:
            self.publish(
                EVENT_ERROR,
                at=update.at,
                action=update.action,
                reason=update.reason,
                message=rejection_message(update.reason),
            )
            return

        self.publish(
            EVENT_SESSION,
            at=update.at,
            action=update.action,
            reason=update.reason,
            message=session_status_message(update.snapshot),
            **session_payload(update.snapshot),
        )
        if update.countdown_second is not None:
            self.publish(EVENT_COUNTDOWN, at=update.at, seconds=update.countdown_second)
        if update.summary is not None:
            self.publish(EVENT_WORKOUT_SUMMARY, at=update.at, **update.summary.to_dict())
