from __future__ import annotations

import logging
from dataclasses import replace

from app.application.dto.flow_result import FlowResult
from app.application.exceptions import ValidationRejected
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.use_cases.cancellation import CancellationUseCase
from app.application.use_cases.reply_composer import ReplyComposer
from app.application.utils.message_rules import (
    extract_slot_from_text,
    is_cancellation_request,
    is_question,
    mentions_closed_day,
    parse_slot_shortcut,
)
from app.application.utils.state_helpers import reset_flows, start_booking, update_booking
from app.application.utils.validators import NameValidator, canonical_phone, match_service
from app.domain.entities.actions import AskAssistant, PersistBooking, SendText
from app.domain.entities.booking import BookingRecord
from app.domain.entities.booking_state import BookingDraft, BookingStage
from app.domain.entities.clinic_content import ClinicContent
from app.domain.entities.session import Session
from app.domain.entities.turn import CanonicalTurn, Language


class BookingUseCase:
    """
    Booking state machine: AWAIT_SLOT -> AWAIT_NAME -> AWAIT_PHONE -> AWAIT_SERVICE -> COMPLETE.

    Every call advances at most one stage and returns the next session together
    with the actions to run. A field, once accepted, is only ever dropped by a
    cancellation request, which moves the user into the cancellation flow.
    """

    def __init__(
        self,
        composer: ReplyComposer,
        name_validator: NameValidator,
        catalog: ServiceCatalogPort,
        content: ClinicContent,
        cancellation: CancellationUseCase,
    ) -> None:
        self._composer = composer
        self._name_validator = name_validator
        self._catalog = catalog
        self._content = content
        self._cancellation = cancellation
        self._logger = logging.getLogger(__name__)

    def start(self, session: Session, language: Language, appointment_slot: str | None = None) -> FlowResult:
        if appointment_slot is None:
            return FlowResult(session=start_booking(session), actions=self._composer.slot_prompt(language))
        return FlowResult(
            session=start_booking(session, appointment_slot),
            actions=[SendText(self._composer.text("ask_name", language))],
        )

    def start_from_request(self, session: Session, turn: CanonicalTurn) -> FlowResult:
        """Booking request from idle; a slot named in the same sentence skips the menu."""
        slot = extract_slot_from_text(turn.text, self._content.slot_shortcuts)
        return self.start(session, turn.language, slot)

    def process(self, session: Session, turn: CanonicalTurn) -> FlowResult:
        draft = session.booking or BookingDraft()
        stage = draft.stage
        language = turn.language

        if not turn.is_selection and is_cancellation_request(turn.text):
            self._logger.info("Booking pre-empted by cancellation", extra={"flow": "booking", "stage": stage.value})
            return self._cancellation.start(session, language)

        if not turn.is_selection and is_question(turn.text):
            return FlowResult(
                session=session,
                actions=[
                    AskAssistant(
                        question=turn.text,
                        language=language,
                        fallback_text=self._composer.text("assistant_unavailable", language),
                    ),
                    *self._composer.reprompt(stage, language),
                ],
            )

        if stage == BookingStage.AWAIT_SLOT:
            return self._handle_slot(session, draft, turn)
        if stage == BookingStage.AWAIT_NAME:
            return self._handle_name(session, draft, turn)
        if stage == BookingStage.AWAIT_PHONE:
            return self._handle_phone(session, draft, turn)
        if stage == BookingStage.AWAIT_SERVICE:
            return self._handle_service(session, draft, turn)

        # A complete draft is never stored; treat it as a fresh start.
        return self.start(reset_flows(session), language)

    def _handle_slot(self, session: Session, draft: BookingDraft, turn: CanonicalTurn) -> FlowResult:
        language = turn.language
        if mentions_closed_day(turn.text):
            self._logger.info("Closed day requested", extra={"flow": "booking", "stage": "await_slot"})
            return FlowResult(session=session, actions=self._composer.closed_day(language))

        slot = self._slot_from_turn(turn)
        if slot is None:
            return FlowResult(session=session, actions=self._wrong_step(turn, BookingStage.AWAIT_SLOT))

        return FlowResult(
            session=update_booking(session, replace(draft, appointment_slot=slot)),
            actions=[SendText(self._composer.text("ask_name", language))],
        )

    def _handle_name(self, session: Session, draft: BookingDraft, turn: CanonicalTurn) -> FlowResult:
        language = turn.language
        if turn.is_selection:
            return FlowResult(session=session, actions=self._wrong_step(turn, BookingStage.AWAIT_NAME))

        check = self._name_validator.validate(turn.text)
        if not check.accepted:
            self._logger.info("Name rejected", extra={"flow": "booking", "stage": "await_name", "reason": check.reason})
            return FlowResult(session=session, actions=[SendText(self._composer.text("name_invalid", language))])

        return FlowResult(
            session=update_booking(session, replace(draft, name=check.name)),
            actions=[SendText(self._composer.text("ask_phone", language))],
        )

    def _handle_phone(self, session: Session, draft: BookingDraft, turn: CanonicalTurn) -> FlowResult:
        language = turn.language
        if turn.is_selection:
            return FlowResult(session=session, actions=self._wrong_step(turn, BookingStage.AWAIT_PHONE))

        try:
            phone = canonical_phone(turn.text)
        except ValidationRejected as e:
            self._logger.info("Phone rejected", extra={"flow": "booking", "stage": "await_phone", "reason": e.reason})
            return FlowResult(session=session, actions=[SendText(self._composer.text("phone_invalid", language))])

        return FlowResult(
            session=update_booking(session, replace(draft, phone=phone)),
            actions=self._composer.service_prompt(language),
        )

    def _handle_service(self, session: Session, draft: BookingDraft, turn: CanonicalTurn) -> FlowResult:
        language = turn.language
        if turn.selection_kind() == "slot":
            return FlowResult(session=session, actions=self._wrong_step(turn, BookingStage.AWAIT_SERVICE))

        entry = match_service(turn.text, self._catalog, turn.selection_id)
        if entry is None:
            self._logger.info("Service not matched", extra={"flow": "booking", "stage": "await_service"})
            return FlowResult(
                session=session,
                actions=[SendText(self._composer.text("service_invalid", language)), *self._composer.service_prompt(language)],
            )

        record = BookingRecord(
            name=draft.name or "",
            phone=draft.phone or "",
            service=entry.title,
            appointment_slot=draft.appointment_slot or "",
        )
        return FlowResult(
            session=reset_flows(session),
            actions=[PersistBooking(record), SendText(self._composer.booking_confirmed(record, language))],
        )

    def _slot_from_turn(self, turn: CanonicalTurn) -> str | None:
        if turn.selection_kind() == "slot":
            return self._content.slot_label(turn.selection_id or "") or turn.text.upper()
        if turn.is_selection:
            return None
        return parse_slot_shortcut(turn.text, self._content.slot_shortcuts) or extract_slot_from_text(
            turn.text, self._content.slot_shortcuts
        )

    def _wrong_step(self, turn: CanonicalTurn, stage: BookingStage) -> list:
        """A tap on an old menu, or free text where a menu choice is expected."""
        if turn.is_selection:
            return [SendText(self._composer.text("finish_steps_first", turn.language)), *self._composer.reprompt(stage, turn.language)]
        return self._composer.reprompt(stage, turn.language)
