from __future__ import annotations

from dataclasses import replace

from app.domain.entities.booking_state import BookingDraft, CancellationState
from app.domain.entities.session import ActiveFlow, Session


def start_booking(session: Session, appointment_slot: str | None = None) -> Session:
    """Enter the booking flow. Any cancellation in progress is dropped."""
    return replace(
        session,
        active_flow=ActiveFlow.BOOKING,
        booking=BookingDraft(appointment_slot=appointment_slot),
        cancellation=None,
    )


def update_booking(session: Session, draft: BookingDraft) -> Session:
    return replace(session, active_flow=ActiveFlow.BOOKING, booking=draft, cancellation=None)


def start_cancellation(session: Session) -> Session:
    """Enter the cancellation flow. Any booking in progress is discarded, never persisted."""
    return replace(
        session,
        active_flow=ActiveFlow.CANCELLATION,
        booking=None,
        cancellation=CancellationState(awaiting_phone=True),
    )


def reset_flows(session: Session) -> Session:
    """Back to idle; language and activity timestamps are kept."""
    return replace(session, active_flow=ActiveFlow.NONE, booking=None, cancellation=None)
