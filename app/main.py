import logging

from fastapi import FastAPI

from app.api.webhooks import router as webhooks_router
from app.core.config import settings

CONTEXT_KEYS = ("message_id", "user_id", "intent", "flow", "stage", "language", "reason")


class ContextFormatter(logging.Formatter):
    """Appends the conversation context passed through `extra=` as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)

    # httpx logs every request line at INFO; keep it for debugging only.
    logging.getLogger("httpx").setLevel(logging.WARNING)


configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Clinic WhatsApp Assistant", version="1.0.0")

app.include_router(webhooks_router, tags=["webhooks"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
