from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Intent(str, Enum):
    CANCELLATION = "cancellation"
    LOCATION = "location"
    OFFERS = "offers"
    DOCTORS = "doctors"
    CLOSED_DAY = "closed_day"
    BOOKING_SHORTCUT = "booking_shortcut"
    BOOKING_REQUEST = "booking_request"
    GREETING = "greeting"
    AI_FALLBACK = "ai_fallback"


@dataclass(frozen=True)
class IntentClassification:
    intent: Intent
    matched: str | None = None  # keyword or shortcut that fired the rule
