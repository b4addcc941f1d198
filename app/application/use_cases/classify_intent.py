from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from app.application.utils.message_rules import (
    BOOKING_KEYWORDS,
    CANCELLATION_KEYWORDS,
    CLOSED_DAY_WORDS,
    DOCTORS_KEYWORDS,
    LOCATION_KEYWORDS,
    OFFERS_KEYWORDS,
    includes_any,
    is_greeting,
    parse_slot_shortcut,
)
from app.domain.entities.clinic_content import ClinicContent
from app.domain.entities.intent import Intent, IntentClassification
from app.domain.entities.turn import CanonicalTurn


@dataclass(frozen=True)
class IntentRule:
    intent: Intent
    match: Callable[[CanonicalTurn], str | None]


class ClassifyIntentUseCase:
    """
    Ordered rule list for turns that arrive while no flow is active.

    The first matching rule wins. Cancellation must stay ahead of the
    informational categories and those must stay ahead of Booking request,
    because real phrasing overlaps ("cancel my booking", "price to book").
    """

    def __init__(self, content: ClinicContent) -> None:
        self._content = content
        self.rules: tuple[IntentRule, ...] = (
            IntentRule(Intent.CANCELLATION, _keywords(CANCELLATION_KEYWORDS)),
            IntentRule(Intent.LOCATION, _keywords(LOCATION_KEYWORDS)),
            IntentRule(Intent.OFFERS, _keywords(OFFERS_KEYWORDS)),
            IntentRule(Intent.DOCTORS, _keywords(DOCTORS_KEYWORDS)),
            IntentRule(Intent.CLOSED_DAY, _keywords(CLOSED_DAY_WORDS)),
            IntentRule(Intent.BOOKING_SHORTCUT, self._match_shortcut),
            IntentRule(Intent.BOOKING_REQUEST, _keywords(BOOKING_KEYWORDS)),
            IntentRule(Intent.GREETING, lambda turn: turn.text if is_greeting(turn.text) else None),
        )

    def execute(self, turn: CanonicalTurn) -> IntentClassification:
        for rule in self.rules:
            matched = rule.match(turn)
            if matched:
                return IntentClassification(intent=rule.intent, matched=matched)
        return IntentClassification(intent=Intent.AI_FALLBACK)

    def _match_shortcut(self, turn: CanonicalTurn) -> str | None:
        if turn.selection_kind() == "slot":
            return self._content.slot_label(turn.selection_id or "") or turn.text.upper()
        if turn.is_selection:
            return None
        return parse_slot_shortcut(turn.text, self._content.slot_shortcuts)


def _keywords(keywords: tuple[str, ...]) -> Callable[[CanonicalTurn], str | None]:
    def match(turn: CanonicalTurn) -> str | None:
        return includes_any(keywords, turn.text)

    return match
