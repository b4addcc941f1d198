from __future__ import annotations

import logging
from typing import Any

import httpx

from app.domain.entities.actions import SelectionMenu

GRAPH_BASE_URL = "https://graph.facebook.com"

# WhatsApp interactive message limits.
MAX_BUTTONS = 3
BUTTON_TITLE_MAX = 20
ROW_TITLE_MAX = 24
ROW_DESCRIPTION_MAX = 72
SECTION_TITLE_MAX = 24
MAX_LIST_ROWS = 10


class WhatsAppClient:
    """Thin httpx wrapper around the WhatsApp Cloud API (Graph) endpoints."""

    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        api_version: str = "v21.0",
        timeout: float = 10.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._access_token = access_token
        self._messages_endpoint = f"{GRAPH_BASE_URL}/{api_version}/{phone_number_id}/messages"
        self._media_endpoint = f"{GRAPH_BASE_URL}/{api_version}"
        self._client = http_client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._access_token}"}

    def send_text(self, recipient_id: str, text: str) -> None:
        self._post_message(recipient_id, {"type": "text", "text": {"body": text, "preview_url": True}})

    def send_image(self, recipient_id: str, url: str) -> None:
        self._post_message(recipient_id, {"type": "image", "image": {"link": url}})

    def send_selection_menu(self, recipient_id: str, menu: SelectionMenu) -> None:
        self._post_message(recipient_id, {"type": "interactive", "interactive": build_interactive(menu)})

    def get_media_url(self, media_id: str) -> str | None:
        resp = self._client.get(f"{self._media_endpoint}/{media_id}", headers=self._headers)
        resp.raise_for_status()
        return resp.json().get("url")

    def download_media(self, url: str) -> bytes:
        resp = self._client.get(url, headers=self._headers)
        resp.raise_for_status()
        return resp.content

    def _post_message(self, recipient_id: str, body: dict[str, Any]) -> None:
        payload = {"messaging_product": "whatsapp", "recipient_type": "individual", "to": recipient_id, **body}
        resp = self._client.post(self._messages_endpoint, headers=self._headers, json=payload)
        if resp.status_code >= 400:
            try:
                error_info = resp.json().get("error", {})
                error_code = error_info.get("code")
                error_message = error_info.get("message")
            except ValueError:
                error_code = None
                error_message = resp.text[:200]

            self._logger.error(
                "WhatsApp send failed",
                extra={
                    "status": resp.status_code,
                    "error_code": error_code,
                    "error_message": error_message,
                    "user_id": recipient_id,
                    "message_type": body.get("type"),
                },
            )
            resp.raise_for_status()


def build_interactive(menu: SelectionMenu) -> dict[str, Any]:
    """Up to three plain options become reply buttons; anything else becomes a list."""
    use_buttons = len(menu.options) <= MAX_BUTTONS and not any(o.description for o in menu.options)
    if use_buttons:
        interactive: dict[str, Any] = {
            "type": "button",
            "body": {"text": menu.body},
            "action": {
                "buttons": [
                    {"type": "reply", "reply": {"id": o.id, "title": o.title[:BUTTON_TITLE_MAX]}}
                    for o in menu.options
                ]
            },
        }
    else:
        sections: dict[str, list[dict[str, str]]] = {}
        for option in menu.options[:MAX_LIST_ROWS]:
            row = {"id": option.id, "title": option.title[:ROW_TITLE_MAX]}
            if option.description:
                row["description"] = option.description[:ROW_DESCRIPTION_MAX]
            sections.setdefault(option.section or menu.button_label, []).append(row)
        interactive = {
            "type": "list",
            "body": {"text": menu.body},
            "action": {
                "button": menu.button_label[:BUTTON_TITLE_MAX],
                "sections": [
                    {"title": title[:SECTION_TITLE_MAX], "rows": rows} for title, rows in sections.items()
                ],
            },
        }
    if menu.header:
        interactive["header"] = {"type": "text", "text": menu.header}
    return interactive
