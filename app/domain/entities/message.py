from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MessageKind(str, Enum):
    TEXT = "text"
    VOICE = "voice"
    SELECTION = "selection"


@dataclass(frozen=True)
class Message:
    id: str
    sender_id: str
    kind: MessageKind
    timestamp: int
    platform: str
    text: str | None = None
    media_id: str | None = None  # VOICE only
    selection_id: str | None = None  # SELECTION only, e.g. "slot_3pm", "service_فحص_عام"
