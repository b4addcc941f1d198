from __future__ import annotations

import logging

from app.application.ports.message_platform import MessagePlatformPort
from app.domain.entities.actions import SelectionMenu


class MockWhatsAppPlatform(MessagePlatformPort):
    """Logs instead of sending; keeps what it would have sent for local inspection."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, object]] = []
        self._logger = logging.getLogger(__name__)

    def send_text(self, recipient_id: str, text: str) -> None:
        self.sent.append((recipient_id, "text", text))
        self._logger.info("Mock send to WhatsApp", extra={"user_id": recipient_id, "text": text})

    def send_selection_menu(self, recipient_id: str, menu: SelectionMenu) -> None:
        self.sent.append((recipient_id, "menu", menu))
        self._logger.info(
            "Mock menu to WhatsApp",
            extra={"user_id": recipient_id, "options": [o.id for o in menu.options]},
        )

    def send_image(self, recipient_id: str, url: str) -> None:
        self.sent.append((recipient_id, "image", url))
        self._logger.info("Mock image to WhatsApp", extra={"user_id": recipient_id, "url": url})
