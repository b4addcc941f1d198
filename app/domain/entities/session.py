from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from app.domain.entities.booking_state import BookingDraft, CancellationState
from app.domain.entities.turn import Language


class ActiveFlow(str, Enum):
    NONE = "none"
    BOOKING = "booking"
    CANCELLATION = "cancellation"


@dataclass(frozen=True)
class Session:
    active_flow: ActiveFlow = ActiveFlow.NONE
    booking: BookingDraft | None = None  # only while active_flow is BOOKING
    cancellation: CancellationState | None = None  # only while active_flow is CANCELLATION
    last_language: Language = Language.AR
    last_seen_at: float | None = None
