from abc import ABC, abstractmethod

from app.domain.entities.turn import Language


class LLMPort(ABC):
    @abstractmethod
    def answer(self, text: str, language: Language) -> str:
        """
        Answer an open-domain customer question.

        Raises:
            LLMUpstreamError: provider unreachable or timed out
            LLMContractError: provider returned an empty answer
        """
        raise NotImplementedError

    @abstractmethod
    def is_plausible_name(self, text: str) -> bool | None:
        """
        Constrained yes/no check: does `text` look like a real person's name?

        Returns True (yes), False (no) or None when the model's answer is
        neither. Raises LLMUpstreamError when the call itself fails.
        """
        raise NotImplementedError
