from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BookingStage(str, Enum):
    AWAIT_SLOT = "await_slot"
    AWAIT_NAME = "await_name"
    AWAIT_PHONE = "await_phone"
    AWAIT_SERVICE = "await_service"
    COMPLETE = "complete"


@dataclass(frozen=True)
class BookingDraft:
    # Fields fill strictly in this order: slot, name, phone, service.
    appointment_slot: str | None = None
    name: str | None = None
    phone: str | None = None  # canonical "07XXXXXXXX" only
    service: str | None = None

    @property
    def stage(self) -> BookingStage:
        if self.appointment_slot is None:
            return BookingStage.AWAIT_SLOT
        if self.name is None:
            return BookingStage.AWAIT_NAME
        if self.phone is None:
            return BookingStage.AWAIT_PHONE
        if self.service is None:
            return BookingStage.AWAIT_SERVICE
        return BookingStage.COMPLETE

    @property
    def is_complete(self) -> bool:
        return self.stage == BookingStage.COMPLETE


@dataclass(frozen=True)
class CancellationState:
    awaiting_phone: bool = True
