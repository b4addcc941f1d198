from __future__ import annotations

from app.application.exceptions import TranscriptionUnavailable
from app.application.ports.transcription import TranscriptionPort


class MockTranscriber(TranscriptionPort):
    """Dev stand-in: voice notes are not supported without a transcription backend."""

    def __init__(self, transcripts: dict[str, str] | None = None) -> None:
        self._transcripts = dict(transcripts or {})

    def transcribe(self, media_id: str) -> str:
        text = self._transcripts.get(media_id, "").strip()
        if not text:
            raise TranscriptionUnavailable(f"no transcript for {media_id}")
        return text
