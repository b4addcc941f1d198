from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Language(str, Enum):
    AR = "ar"
    EN = "en"


@dataclass(frozen=True)
class CanonicalTurn:
    """One inbound user message after normalization, whatever its original modality."""

    text: str
    language: Language
    selection_id: str | None = None

    @property
    def is_selection(self) -> bool:
        return self.selection_id is not None

    def selection_kind(self) -> str | None:
        """Prefix of the selection id ("slot" or "service"), or None for free text."""
        if not self.selection_id or "_" not in self.selection_id:
            return None
        return self.selection_id.split("_", 1)[0]
