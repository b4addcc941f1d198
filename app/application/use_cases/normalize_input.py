from __future__ import annotations

import logging

from app.application.exceptions import TranscriptionUnavailable
from app.application.ports.transcription import TranscriptionPort
from app.application.utils.message_rules import detect_language
from app.domain.entities.message import Message, MessageKind
from app.domain.entities.session import Session
from app.domain.entities.turn import CanonicalTurn

SELECTION_PREFIXES = ("slot_", "service_")


class NormalizeInputUseCase:
    """Turn text, voice and button/list replies into one CanonicalTurn."""

    def __init__(self, transcriber: TranscriptionPort) -> None:
        self._transcriber = transcriber
        self._logger = logging.getLogger(__name__)

    def execute(self, message: Message, session: Session) -> CanonicalTurn:
        if message.kind == MessageKind.SELECTION:
            return selection_turn(message.selection_id or "", session)

        if message.kind == MessageKind.VOICE:
            if not message.media_id:
                raise TranscriptionUnavailable("voice message without media id")
            transcript = (self._transcriber.transcribe(message.media_id) or "").strip()
            if not transcript:
                raise TranscriptionUnavailable("empty transcript")
            self._logger.info(
                "Voice message transcribed",
                extra={"message_id": message.id, "user_id": message.sender_id},
            )
            return text_turn(transcript, session)

        return text_turn(message.text or "", session)


def text_turn(text: str, session: Session) -> CanonicalTurn:
    stripped = text.strip()
    return CanonicalTurn(text=stripped, language=detect_language(stripped, session.last_language))


def selection_turn(selection_id: str, session: Session) -> CanonicalTurn:
    """Selections carry no language signal; the session's last language is kept."""
    raw = selection_id.strip()
    label = raw
    for prefix in SELECTION_PREFIXES:
        if raw.startswith(prefix):
            label = raw[len(prefix):]
            break
    label = " ".join(label.replace("_", " ").replace("-", " ").split())
    return CanonicalTurn(text=label, language=session.last_language, selection_id=raw)
