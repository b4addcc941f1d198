from __future__ import annotations

from openai import OpenAI

from app.application.exceptions import LLMContractError, LLMUpstreamError
from app.application.ports.llm import LLMPort
from app.core.config import settings
from app.domain.entities.turn import Language
from app.infrastructure.llm.prompts import build_answer_system_prompt, build_name_check_prompt

_YES = ("yes", "نعم", "ايوه", "أجل")
_NO = ("no", "لا")


class OpenAILLM(LLMPort):
    """
    OpenAI-compatible chat adapter implementing LLMPort.

    Works against any OpenAI-compatible endpoint (set OPENAI_BASE_URL).
    - Raises:
        LLMUpstreamError: networking/provider failures and timeouts
        LLMContractError: empty answer text
    """

    def __init__(self, client: OpenAI | None = None, clinic_name: str | None = None) -> None:
        self.client = client or OpenAI(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            timeout=settings.LLM_TIMEOUT_SECONDS,
            max_retries=1,
        )
        self._clinic_name = clinic_name or settings.CLINIC_NAME

    def answer(self, text: str, language: Language) -> str:
        return self._call_text(
            model=settings.OPENAI_MODEL_REPLY,
            messages=[
                {"role": "system", "content": build_answer_system_prompt(self._clinic_name, language)},
                {"role": "user", "content": text},
            ],
            temperature=settings.OPENAI_TEMPERATURE_REPLY,
            max_tokens=512,
        )

    def is_plausible_name(self, text: str) -> bool | None:
        try:
            reply = self._call_text(
                model=settings.OPENAI_MODEL_NAME_CHECK,
                messages=[{"role": "user", "content": build_name_check_prompt(text)}],
                temperature=settings.OPENAI_TEMPERATURE_NAME_CHECK,
                max_tokens=5,
            )
        except LLMContractError:
            return None
        return parse_yes_no(reply)

    def _call_text(self, model: str, messages: list[dict[str, str]], temperature: float, max_tokens: int) -> str:
        try:
            resp = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as e:
            raise LLMUpstreamError(f"OpenAI API error: {e}") from e

        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not content:
            raise LLMContractError("LLM returned empty response text.")

        return content


def parse_yes_no(reply: str) -> bool | None:
    """First word of the reply: yes -> True, no -> False, anything else -> None."""
    words = reply.strip().strip("\"'.!").lower().split()
    if not words:
        return None
    first = words[0].strip("\"'.,!،")
    if first in _YES:
        return True
    if first in _NO:
        return False
    return None
