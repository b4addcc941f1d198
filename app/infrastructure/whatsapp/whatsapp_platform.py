from __future__ import annotations

import logging

import httpx

from app.application.ports.message_platform import MessagePlatformPort
from app.domain.entities.actions import SelectionMenu
from app.infrastructure.whatsapp.whatsapp_client import WhatsAppClient


class WhatsAppPlatform(MessagePlatformPort):
    """Fire-and-forget sends: transport errors are logged here and never reach the flows."""

    def __init__(self, client: WhatsAppClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    def send_text(self, recipient_id: str, text: str) -> None:
        try:
            self._client.send_text(recipient_id=recipient_id, text=text)
        except httpx.HTTPError as e:
            self._log_failure(recipient_id, "text", e)

    def send_selection_menu(self, recipient_id: str, menu: SelectionMenu) -> None:
        try:
            self._client.send_selection_menu(recipient_id=recipient_id, menu=menu)
        except httpx.HTTPError as e:
            self._log_failure(recipient_id, "interactive", e)

    def send_image(self, recipient_id: str, url: str) -> None:
        try:
            self._client.send_image(recipient_id=recipient_id, url=url)
        except httpx.HTTPError as e:
            self._log_failure(recipient_id, "image", e)

    def _log_failure(self, recipient_id: str, message_type: str, error: httpx.HTTPError) -> None:
        status_code = error.response.status_code if isinstance(error, httpx.HTTPStatusError) else None
        self._logger.warning(
            "Outbound message dropped",
            extra={
                "user_id": recipient_id,
                "message_type": message_type,
                "status_code": status_code,
                "error_type": type(error).__name__,
            },
        )
