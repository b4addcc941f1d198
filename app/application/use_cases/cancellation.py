from __future__ import annotations

import logging

from app.application.dto.flow_result import FlowResult
from app.application.exceptions import ValidationRejected
from app.application.use_cases.reply_composer import ReplyComposer
from app.application.utils.message_rules import is_question
from app.application.utils.state_helpers import reset_flows, start_cancellation
from app.application.utils.validators import canonical_phone
from app.domain.entities.actions import AskAssistant, CancelLatestBooking, SendText
from app.domain.entities.session import Session
from app.domain.entities.turn import CanonicalTurn, Language


class CancellationUseCase:
    """Two states: waiting for the booking phone number, then done."""

    def __init__(self, composer: ReplyComposer) -> None:
        self._composer = composer
        self._logger = logging.getLogger(__name__)

    def start(self, session: Session, language: Language) -> FlowResult:
        return FlowResult(
            session=start_cancellation(session),
            actions=[SendText(self._composer.text("cancel_ask_phone", language))],
        )

    def process(self, session: Session, turn: CanonicalTurn) -> FlowResult:
        language = turn.language

        if not turn.is_selection and is_question(turn.text):
            return FlowResult(
                session=session,
                actions=[
                    AskAssistant(
                        question=turn.text,
                        language=language,
                        fallback_text=self._composer.text("assistant_unavailable", language),
                    ),
                    SendText(self._composer.text("cancel_ask_phone", language)),
                ],
            )

        try:
            phone = canonical_phone(turn.text)
        except ValidationRejected as e:
            self._logger.info("Cancellation phone rejected", extra={"flow": "cancellation", "reason": e.reason})
            return FlowResult(session=session, actions=[SendText(self._composer.text("phone_invalid", language))])

        # The lookup and the status change happen in the dispatcher; a "not found"
        # outcome still ends the flow.
        return FlowResult(
            session=reset_flows(session),
            actions=[
                CancelLatestBooking(
                    phone=phone,
                    confirmed_text=self._composer.text("cancel_confirmed", language),
                    not_found_text=self._composer.text("cancel_not_found", language),
                )
            ],
        )
