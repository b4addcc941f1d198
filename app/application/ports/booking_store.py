from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.booking import BookingRecord


class BookingStorePort(ABC):
    @abstractmethod
    def append_booking(self, record: BookingRecord) -> BookingRecord:
        """Persist a complete booking. Returns the stored record with its id."""
        raise NotImplementedError

    @abstractmethod
    def find_latest_booking_by_phone(self, phone: str) -> BookingRecord | None:
        """Most recent non-cancelled booking for a canonical phone, or None."""
        raise NotImplementedError

    @abstractmethod
    def mark_cancelled(self, booking_id: str) -> bool:
        """Mark a booking cancelled. Returns False if no such booking exists."""
        raise NotImplementedError
