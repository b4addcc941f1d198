from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class BookingStatus(str, Enum):
    BOOKED = "booked"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class BookingRecord:
    name: str
    phone: str
    service: str
    appointment_slot: str
    created_at: datetime | None = None
    id: str | None = None  # assigned by the booking store
    status: BookingStatus = BookingStatus.BOOKED
