from __future__ import annotations

import logging

from app.application.ports.message_platform import MessagePlatformPort
from app.core.config import settings
from app.domain.entities.actions import Action, SendImage, SendSelectionMenu, SendText


class SendReplyUseCase:
    def __init__(self, platform: MessagePlatformPort, enabled: bool | None = None) -> None:
        self._platform = platform
        self._enabled = settings.AUTO_REPLY_ENABLED if enabled is None else enabled
        self._logger = logging.getLogger(__name__)

    def execute(self, recipient_id: str, action: Action) -> bool:
        """Send one outbound action. Returns True if actually sent, False if skipped."""
        if not self._enabled:
            self._logger.info("WOULD_SEND_REPLY", extra={"user_id": recipient_id, "action": type(action).__name__})
            self._logger.info("AUTO_REPLY_ENABLED=false -> skipping send")
            return False

        if isinstance(action, SendText):
            self._platform.send_text(recipient_id=recipient_id, text=action.text)
        elif isinstance(action, SendSelectionMenu):
            self._platform.send_selection_menu(recipient_id=recipient_id, menu=action.menu)
        elif isinstance(action, SendImage):
            self._platform.send_image(recipient_id=recipient_id, url=action.url)
        else:
            raise TypeError(f"not a send action: {type(action).__name__}")
        return True
