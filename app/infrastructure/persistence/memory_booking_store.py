from __future__ import annotations

import itertools
import threading
from dataclasses import replace

from app.application.ports.booking_store import BookingStorePort
from app.domain.entities.booking import BookingRecord, BookingStatus


class MemoryBookingStore(BookingStorePort):
    def __init__(self) -> None:
        self._records: list[BookingRecord] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def append_booking(self, record: BookingRecord) -> BookingRecord:
        with self._lock:
            stored = replace(record, id=str(next(self._ids)))
            self._records.append(stored)
            return stored

    def find_latest_booking_by_phone(self, phone: str) -> BookingRecord | None:
        with self._lock:
            # Newest first; insertion order breaks created_at ties.
            for record in reversed(self._records):
                if record.phone == phone and record.status != BookingStatus.CANCELLED:
                    return record
        return None

    def mark_cancelled(self, booking_id: str) -> bool:
        with self._lock:
            for i, record in enumerate(self._records):
                if record.id == booking_id:
                    self._records[i] = replace(record, status=BookingStatus.CANCELLED)
                    return True
        return False

    def all(self) -> list[BookingRecord]:
        with self._lock:
            return list(self._records)
