from __future__ import annotations

from app.application.ports.llm import LLMPort
from app.domain.entities.turn import Language


class MockLLM(LLMPort):
    """Offline stand-in: canned answers, and no opinion on names."""

    def answer(self, text: str, language: Language) -> str:
        if language == Language.EN:
            return "Thanks for your question! Our team will confirm the details shortly."
        return "شكراً لسؤالك! سيقوم فريقنا بتأكيد التفاصيل لك قريباً."

    def is_plausible_name(self, text: str) -> bool | None:
        return None
