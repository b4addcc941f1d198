from __future__ import annotations

import logging
import time
from dataclasses import replace
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.application.dto.flow_result import FlowResult
from app.application.exceptions import (
    CollaboratorUnavailable,
    LLMContractError,
    PersistenceUnavailable,
    TranscriptionUnavailable,
)
from app.application.ports.booking_store import BookingStorePort
from app.application.ports.llm import LLMPort
from app.application.ports.session_store import SessionStorePort
from app.application.use_cases.normalize_input import NormalizeInputUseCase
from app.application.use_cases.reply_composer import ReplyComposer
from app.application.use_cases.route_turn import RouteTurnUseCase
from app.application.use_cases.send_reply import SendReplyUseCase
from app.application.utils.message_rules import contains_banned_words
from app.application.utils.state_helpers import reset_flows
from app.domain.entities.actions import Action, AskAssistant, CancelLatestBooking, PersistBooking, SendText
from app.domain.entities.message import Message
from app.domain.entities.session import Session
from app.domain.entities.turn import CanonicalTurn, Language


class HandleIncomingMessageUseCase:
    """
    Entry point for one inbound message.

    Holds the user's lock from session read to session write, so two
    messages from the same user are applied one after the other while
    different users run in parallel. Flow decisions come back as a list of
    actions; this class is the only place that performs them.
    """

    def __init__(
        self,
        store: SessionStorePort,
        normalizer: NormalizeInputUseCase,
        router: RouteTurnUseCase,
        send_reply: SendReplyUseCase,
        llm: LLMPort,
        bookings: BookingStorePort,
        composer: ReplyComposer,
        timezone: str,
        clock=time.time,
    ) -> None:
        self._store = store
        self._normalizer = normalizer
        self._router = router
        self._send_reply = send_reply
        self._llm = llm
        self._bookings = bookings
        self._composer = composer
        self._timezone = _safe_timezone(timezone)
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def handle(self, message: Message) -> None:
        try:
            if not self._store.mark_processed(message.id):
                self._logger.info("Duplicate message ignored", extra={"message_id": message.id})
                return

            with self._store.lock(message.sender_id):
                self._handle_locked(message)
        except Exception as e:
            self._logger.exception(
                "Failed to handle incoming message",
                extra={
                    "message_id": message.id,
                    "user_id": message.sender_id,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )

    def _handle_locked(self, message: Message) -> None:
        user_id = message.sender_id
        session = self._store.get(user_id)

        try:
            turn = self._normalizer.execute(message, session)
        except TranscriptionUnavailable as e:
            self._logger.warning(
                "Transcription unavailable",
                extra={"message_id": message.id, "user_id": user_id, "reason": str(e)},
            )
            self._send(user_id, SendText(self._composer.text("transcription_retry", session.last_language)))
            return

        touched = replace(session, last_language=turn.language, last_seen_at=self._clock())
        result = self._decide(touched, turn, message)

        if self._run_actions(user_id, result.actions, turn.language):
            self._store.set(user_id, result.session)
        else:
            # Gated action failed: keep the collected data so the next message retries.
            self._store.set(user_id, touched)

        self._logger.info(
            "Message handled",
            extra={
                "message_id": message.id,
                "user_id": user_id,
                "flow": result.session.active_flow.value,
                "language": turn.language.value,
            },
        )

    def _decide(self, session: Session, turn: CanonicalTurn, message: Message) -> FlowResult:
        if not turn.is_selection and contains_banned_words(turn.text):
            self._logger.info(
                "Abusive message redirected",
                extra={"message_id": message.id, "user_id": message.sender_id, "reason": "banned_words"},
            )
            return FlowResult(
                session=reset_flows(session),
                actions=[SendText(self._composer.text("abuse_redirect", turn.language))],
            )
        return self._router.execute(session, turn)

    def _run_actions(self, user_id: str, actions: list[Action], language: Language) -> bool:
        """Run actions in order. Returns False when a gating action could not complete."""
        for action in actions:
            if isinstance(action, AskAssistant):
                self._send(user_id, SendText(self._ask_assistant(action)))
                continue

            if not action.gating:
                self._send(user_id, action)
                continue

            try:
                if isinstance(action, PersistBooking):
                    self._persist_booking(user_id, action)
                elif isinstance(action, CancelLatestBooking):
                    self._send(user_id, SendText(self._cancel_latest_booking(user_id, action)))
            except PersistenceUnavailable as e:
                self._logger.error(
                    "Booking store unavailable",
                    extra={"user_id": user_id, "action": type(action).__name__, "reason": str(e)},
                )
                self._send(user_id, SendText(self._composer.text("persistence_retry", language)))
                return False
        return True

    def _ask_assistant(self, action: AskAssistant) -> str:
        try:
            return self._llm.answer(action.question, action.language)
        except (CollaboratorUnavailable, LLMContractError) as e:
            self._logger.warning("Assistant unavailable", extra={"reason": str(e)})
            return action.fallback_text

    def _persist_booking(self, user_id: str, action: PersistBooking) -> None:
        record = replace(action.booking, created_at=datetime.now(self._timezone))
        stored = self._bookings.append_booking(record)
        self._logger.info("Booking saved", extra={"user_id": user_id, "booking_id": stored.id})

    def _cancel_latest_booking(self, user_id: str, action: CancelLatestBooking) -> str:
        booking = self._bookings.find_latest_booking_by_phone(action.phone)
        if booking is None or booking.id is None:
            self._logger.info("No booking to cancel", extra={"user_id": user_id, "reason": "not_found"})
            return action.not_found_text
        if not self._bookings.mark_cancelled(booking.id):
            self._logger.info("Booking vanished before cancel", extra={"user_id": user_id, "booking_id": booking.id})
            return action.not_found_text
        self._logger.info("Booking cancelled", extra={"user_id": user_id, "booking_id": booking.id})
        return action.confirmed_text

    def _send(self, user_id: str, action: Action) -> None:
        self._send_reply.execute(user_id, action)


def _safe_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")
