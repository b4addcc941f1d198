from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from app.application.exceptions import CollaboratorUnavailable, LLMContractError, ValidationRejected
from app.application.ports.llm import LLMPort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.utils.message_rules import to_latin_digits
from app.domain.entities.service_catalog import ServiceCatalogEntry

CANONICAL_PHONE_RE = re.compile(r"^07\d{8}$")

NAME_MAX_LENGTH = 40
NAME_MAX_TOKENS = 3
SERVICE_MIN_FRAGMENT = 3

_LETTER_RE = re.compile(r"[A-Za-zء-ي]")
_NAME_PUNCTUATION_RE = re.compile(r"[^\w\s'\-]")
_ARABIC_MARKS_RE = re.compile(r"[\u064B-\u065F\u0640]")
_NAME_HEURISTIC_RE = re.compile(r"^[A-Za-zء-يٱ-ۓ' \-]{2,40}$")
_WORD_RE = re.compile(r"\w+")

logger = logging.getLogger(__name__)


def normalize_phone(text: str) -> str:
    """Map Arabic-Indic digits to ASCII, then keep decimal digits only."""
    latin = to_latin_digits(text or "")
    return "".join(ch for ch in latin if "0" <= ch <= "9")


def canonical_phone(text: str) -> str:
    """Return the canonical "07" + 8 digits form, or raise ValidationRejected."""
    digits = normalize_phone(text)
    if not CANONICAL_PHONE_RE.match(digits):
        raise ValidationRejected("phone_format")
    return digits


def is_valid_phone(text: str) -> bool:
    try:
        canonical_phone(text)
    except ValidationRejected:
        return False
    return True


def normalize_name(text: str) -> str:
    """Strip punctuation except apostrophe/hyphen and collapse whitespace."""
    cleaned = _ARABIC_MARKS_RE.sub("", text or "")
    cleaned = _NAME_PUNCTUATION_RE.sub(" ", cleaned).replace("_", " ")
    return " ".join(cleaned.split())


def passes_name_heuristic(name: str) -> bool:
    return bool(_NAME_HEURISTIC_RE.match(name)) and len(name.split()) <= NAME_MAX_TOKENS


@dataclass(frozen=True)
class NameCheck:
    accepted: bool
    name: str | None = None
    reason: str | None = None


class NameValidator:
    """
    Cheap structural checks first, then a yes/no question to the language model.

    The model can only ever reject on an explicit "no". If the call fails the
    name is accepted; if the answer is indeterminate the local heuristic decides.
    """

    def __init__(self, llm: LLMPort) -> None:
        self._llm = llm

    def validate(self, text: str) -> NameCheck:
        trimmed = (text or "").strip()
        if not _LETTER_RE.search(trimmed):
            return NameCheck(False, reason="no_letters")
        if any(ch.isdigit() for ch in trimmed):
            return NameCheck(False, reason="contains_digit")
        if len(trimmed) > NAME_MAX_LENGTH:
            return NameCheck(False, reason="too_long")

        name = normalize_name(trimmed)
        if not name:
            return NameCheck(False, reason="no_letters")

        try:
            verdict = self._llm.is_plausible_name(name)
        except (CollaboratorUnavailable, LLMContractError) as e:
            logger.warning("Name check unavailable, accepting", extra={"reason": str(e)})
            return NameCheck(True, name=name, reason="collaborator_unavailable")

        if verdict is True:
            return NameCheck(True, name=name)
        if verdict is False:
            return NameCheck(False, reason="model_rejected")

        if passes_name_heuristic(name):
            return NameCheck(True, name=name, reason="heuristic")
        return NameCheck(False, reason="heuristic_rejected")


def _tokens(text: str) -> list[str]:
    return _WORD_RE.findall((text or "").lower())


def _contains_run(tokens: list[str], run: list[str]) -> bool:
    width = len(run)
    return any(tokens[i:i + width] == run for i in range(len(tokens) - width + 1))


def match_service(
    text: str,
    catalog: ServiceCatalogPort,
    selection_id: str | None = None,
) -> ServiceCatalogEntry | None:
    """
    Exact selection-id match first, then whole-word matching against each
    entry's title and aliases: either the candidate appears as a run of words
    in the message, or the message is a run of words inside the candidate and
    is at least SERVICE_MIN_FRAGMENT characters long.
    """
    if selection_id:
        entry = catalog.get_by_selection_id(selection_id)
        if entry:
            return entry

    words = _tokens(text)
    if not words:
        return None
    fragment_ok = len(" ".join(words)) >= SERVICE_MIN_FRAGMENT

    for entry in catalog.list_services():
        for candidate in (entry.title, *entry.aliases):
            candidate_words = _tokens(candidate)
            if not candidate_words:
                continue
            if _contains_run(words, candidate_words):
                return entry
            if fragment_ok and _contains_run(candidate_words, words):
                return entry
    return None
