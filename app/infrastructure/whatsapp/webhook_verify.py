from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Mapping

logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "sha256="


def verify_subscription(params: Mapping[str, str], expected_token: str) -> str | None:
    """Meta's GET handshake: echo hub.challenge back when the verify token matches."""
    if params.get("hub.mode") != "subscribe":
        return None
    token = params.get("hub.verify_token")
    if not expected_token or not token or not hmac.compare_digest(token, expected_token):
        return None
    return params.get("hub.challenge")


def verify_signature(body: bytes, signature_header: str | None, app_secret: str | None, env: str) -> bool:
    """Check X-Hub-Signature-256 against an HMAC-SHA256 of the raw body."""
    if not signature_header:
        if env.lower() in {"dev", "local"}:
            logger.warning("Missing signature header; accepting in dev mode")
            return True
        return False

    if not app_secret:
        logger.error("WHATSAPP_APP_SECRET is not set; cannot verify webhook signature")
        return False

    if not signature_header.lower().startswith(SIGNATURE_PREFIX):
        return False

    received = signature_header[len(SIGNATURE_PREFIX):]
    expected = hmac.new(app_secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, received)
