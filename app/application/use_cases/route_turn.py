from __future__ import annotations

import logging

from app.application.dto.flow_result import FlowResult
from app.application.use_cases.booking import BookingUseCase
from app.application.use_cases.cancellation import CancellationUseCase
from app.application.use_cases.classify_intent import ClassifyIntentUseCase
from app.application.use_cases.reply_composer import ReplyComposer
from app.domain.entities.actions import AskAssistant, SendText
from app.domain.entities.intent import Intent
from app.domain.entities.session import ActiveFlow, Session
from app.domain.entities.turn import CanonicalTurn


class RouteTurnUseCase:
    """Active flow first; otherwise classify the turn and route from idle."""

    def __init__(
        self,
        classifier: ClassifyIntentUseCase,
        booking: BookingUseCase,
        cancellation: CancellationUseCase,
        composer: ReplyComposer,
    ) -> None:
        self._classifier = classifier
        self._booking = booking
        self._cancellation = cancellation
        self._composer = composer
        self._logger = logging.getLogger(__name__)

    def execute(self, session: Session, turn: CanonicalTurn) -> FlowResult:
        if session.active_flow == ActiveFlow.BOOKING:
            return self._booking.process(session, turn)
        if session.active_flow == ActiveFlow.CANCELLATION:
            return self._cancellation.process(session, turn)
        return self._route_idle(session, turn)

    def _route_idle(self, session: Session, turn: CanonicalTurn) -> FlowResult:
        language = turn.language

        # A service tap from an old menu cannot start a booking on its own.
        if turn.selection_kind() == "service":
            self._logger.info("Stale service selection", extra={"flow": "none"})
            started = self._booking.start(session, language)
            return FlowResult(
                session=started.session,
                actions=[SendText(self._composer.text("finish_steps_first", language)), *started.actions],
            )

        classification = self._classifier.execute(turn)
        intent = classification.intent
        self._logger.info("Intent classified", extra={"intent": intent.value, "language": language.value})

        if intent == Intent.CANCELLATION:
            return self._cancellation.start(session, language)
        if intent == Intent.LOCATION:
            return FlowResult(session=session, actions=self._composer.location(language))
        if intent == Intent.OFFERS:
            return FlowResult(session=session, actions=self._composer.offers(language))
        if intent == Intent.DOCTORS:
            return FlowResult(session=session, actions=self._composer.doctors(language))
        if intent == Intent.CLOSED_DAY:
            return FlowResult(session=session, actions=self._composer.closed_day(language))
        if intent == Intent.BOOKING_SHORTCUT:
            return self._booking.start(session, language, classification.matched)
        if intent == Intent.BOOKING_REQUEST:
            return self._booking.start_from_request(session, turn)
        if intent == Intent.GREETING:
            return FlowResult(session=session, actions=[SendText(self._composer.greeting(language))])

        return FlowResult(
            session=session,
            actions=[
                AskAssistant(
                    question=turn.text,
                    language=language,
                    fallback_text=self._composer.text("assistant_unavailable", language),
                )
            ],
        )
