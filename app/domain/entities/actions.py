"""
Outbound actions emitted by the flow engine and executed by the dispatcher.

Actions are immutable value objects. They describe side effects; they never
perform them. The dispatcher runs them in order and stops at the first gating
action (booking persistence or cancellation) that fails.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.domain.entities.booking import BookingRecord
from app.domain.entities.turn import Language


@dataclass(frozen=True)
class MenuOption:
    id: str
    title: str
    description: str | None = None
    section: str | None = None


@dataclass(frozen=True)
class SelectionMenu:
    body: str
    options: tuple[MenuOption, ...]
    button_label: str = "Options"
    header: str | None = None


class Action:
    """Base action type."""

    gating: bool = False


@dataclass(frozen=True)
class SendText(Action):
    text: str


@dataclass(frozen=True)
class SendSelectionMenu(Action):
    menu: SelectionMenu


@dataclass(frozen=True)
class SendImage(Action):
    url: str


@dataclass(frozen=True)
class AskAssistant(Action):
    question: str
    language: Language
    fallback_text: str


@dataclass(frozen=True)
class PersistBooking(Action):
    booking: BookingRecord
    gating = True


@dataclass(frozen=True)
class CancelLatestBooking(Action):
    phone: str
    confirmed_text: str
    not_found_text: str
    gating = True
