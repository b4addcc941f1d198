from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from app.domain.entities.message import Message, MessageKind


class WebhookEventDTO(BaseModel):
    """WhatsApp Cloud API webhook body: entry[].changes[].value.messages[]."""

    object: str | None = None
    entry: list[dict[str, Any]] = Field(default_factory=list)

    def extract_messages(self) -> list[Message]:
        messages: list[Message] = []
        for entry in self.entry or []:
            for change in entry.get("changes", []) or []:
                value = change.get("value") or {}
                # Delivery/read receipts arrive under "statuses" and carry no messages.
                for raw in value.get("messages", []) or []:
                    message = _to_message(raw)
                    if message is not None:
                        messages.append(message)
        return messages


def _to_message(raw: dict[str, Any]) -> Message | None:
    mid = raw.get("id")
    sender = raw.get("from")
    timestamp = raw.get("timestamp")
    if not (mid and sender and timestamp):
        return None
    try:
        sent_at = int(timestamp)
    except (TypeError, ValueError):
        return None

    common = {"id": str(mid), "sender_id": str(sender), "timestamp": sent_at, "platform": "whatsapp"}
    kind = raw.get("type")

    if kind == "text":
        body = (raw.get("text") or {}).get("body")
        if not body:
            return None
        return Message(kind=MessageKind.TEXT, text=str(body), **common)

    if kind == "audio":
        media_id = (raw.get("audio") or {}).get("id")
        if not media_id:
            return None
        return Message(kind=MessageKind.VOICE, media_id=str(media_id), **common)

    if kind == "interactive":
        interactive = raw.get("interactive") or {}
        reply = interactive.get("button_reply") or interactive.get("list_reply") or {}
        selection_id = reply.get("id")
        if not selection_id:
            return None
        return Message(
            kind=MessageKind.SELECTION,
            selection_id=str(selection_id),
            text=reply.get("title"),
            **common,
        )

    return None
