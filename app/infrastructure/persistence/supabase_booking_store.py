from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from app.application.exceptions import PersistenceUnavailable
from app.application.ports.booking_store import BookingStorePort
from app.domain.entities.booking import BookingRecord, BookingStatus


class SupabaseBookingStore(BookingStorePort):
    """
    Bookings in a Supabase table, through its PostgREST API.

    Columns: id, name, phone, service, appointment, status, created_at.
    Any transport or HTTP error is raised as PersistenceUnavailable.
    """

    def __init__(
        self,
        base_url: str,
        service_key: str,
        table: str = "bookings",
        timeout: float = 10.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._endpoint = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self._headers = {
            "apikey": service_key,
            "Authorization": f"Bearer {service_key}",
            "Content-Type": "application/json",
        }
        self._client = http_client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def append_booking(self, record: BookingRecord) -> BookingRecord:
        rows = self._request(
            "POST",
            json=[_to_row(record)],
            headers={"Prefer": "return=representation"},
        )
        return _from_row(rows[0]) if rows else record

    def find_latest_booking_by_phone(self, phone: str) -> BookingRecord | None:
        rows = self._request(
            "GET",
            params={
                "select": "*",
                "phone": f"eq.{phone}",
                "or": f"(status.is.null,status.neq.{BookingStatus.CANCELLED.value})",
                "order": "created_at.desc,id.desc",
                "limit": "1",
            },
        )
        return _from_row(rows[0]) if rows else None

    def mark_cancelled(self, booking_id: str) -> bool:
        rows = self._request(
            "PATCH",
            params={"id": f"eq.{booking_id}"},
            json={"status": BookingStatus.CANCELLED.value},
            headers={"Prefer": "return=representation"},
        )
        return bool(rows)

    def _request(self, method: str, **kwargs: Any) -> list[dict[str, Any]]:
        headers = {**self._headers, **kwargs.pop("headers", {})}
        try:
            resp = self._client.request(method, self._endpoint, headers=headers, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.error("Supabase request failed", extra={"method": method, "error_type": type(e).__name__})
            raise PersistenceUnavailable(f"Supabase {method} failed: {e}") from e

        if not resp.content:
            return []
        try:
            data = resp.json()
        except ValueError as e:
            raise PersistenceUnavailable("Supabase returned a non-JSON body") from e
        return data if isinstance(data, list) else [data]


def _to_row(record: BookingRecord) -> dict[str, Any]:
    row: dict[str, Any] = {
        "name": record.name,
        "phone": record.phone,
        "service": record.service,
        "appointment": record.appointment_slot,
        "status": record.status.value,
    }
    if record.created_at is not None:
        row["created_at"] = record.created_at.isoformat()
    return row


def _from_row(row: dict[str, Any]) -> BookingRecord:
    created_raw = row.get("created_at")
    status_raw = row.get("status") or BookingStatus.BOOKED.value
    return BookingRecord(
        name=row.get("name") or "",
        phone=row.get("phone") or "",
        service=row.get("service") or "",
        appointment_slot=row.get("appointment") or "",
        created_at=datetime.fromisoformat(created_raw) if created_raw else None,
        id=str(row["id"]) if row.get("id") is not None else None,
        status=BookingStatus.CANCELLED if status_raw == BookingStatus.CANCELLED.value else BookingStatus.BOOKED,
    )
