from __future__ import annotations

import logging

import httpx
from openai import OpenAI, OpenAIError

from app.application.exceptions import TranscriptionUnavailable
from app.application.ports.transcription import TranscriptionPort
from app.core.config import settings
from app.infrastructure.whatsapp.whatsapp_client import WhatsAppClient


class WhisperTranscriber(TranscriptionPort):
    """Fetch the voice note from WhatsApp, then transcribe it with a Whisper endpoint."""

    def __init__(self, media_client: WhatsAppClient, client: OpenAI | None = None, language: str = "ar") -> None:
        self._media_client = media_client
        self.client = client or OpenAI(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            timeout=settings.LLM_TIMEOUT_SECONDS,
            max_retries=1,
        )
        self._language = language
        self._logger = logging.getLogger(__name__)

    def transcribe(self, media_id: str) -> str:
        try:
            url = self._media_client.get_media_url(media_id)
            if not url:
                raise TranscriptionUnavailable(f"no media url for {media_id}")
            audio = self._media_client.download_media(url)
        except (httpx.HTTPError, ValueError) as e:
            raise TranscriptionUnavailable(f"media download failed: {e}") from e

        try:
            result = self.client.audio.transcriptions.create(
                model=settings.OPENAI_MODEL_TRANSCRIBE,
                file=("voice.ogg", audio, "audio/ogg"),
                language=self._language,
            )
        except OpenAIError as e:
            raise TranscriptionUnavailable(f"transcription failed: {e}") from e

        text = (getattr(result, "text", "") or "").strip()
        if not text:
            raise TranscriptionUnavailable("empty transcript")
        self._logger.info("Transcribed voice note", extra={"chars": len(text)})
        return text
