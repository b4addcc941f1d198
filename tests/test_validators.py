from __future__ import annotations

from app.application.exceptions import LLMContractError, LLMUpstreamError, ValidationRejected
from app.application.utils.validators import (
    NameValidator,
    canonical_phone,
    is_valid_phone,
    match_service,
    normalize_name,
    normalize_phone,
    passes_name_heuristic,
)

from tests.conftest import FakeLLM

import pytest


def test_canonical_phone_is_idempotent():
    assert canonical_phone("0785050875") == "0785050875"
    assert canonical_phone(canonical_phone("0785050875")) == "0785050875"


def test_arabic_digit_variants_share_one_canonical_form():
    assert canonical_phone("٠٧٨٥٠٥٠٨٧٥") == "0785050875"
    assert canonical_phone("۰۷۸۵۰۵۰۸۷۵") == "0785050875"
    assert canonical_phone("078 505 0875") == "0785050875"
    assert canonical_phone("078-505-0875") == "0785050875"


@pytest.mark.parametrize("raw", ["078505087", "07850508755", "0685050875", "+962785050875", "", "phone"])
def test_phone_rejects_other_shapes(raw):
    with pytest.raises(ValidationRejected) as exc:
        canonical_phone(raw)
    assert exc.value.reason == "phone_format"
    assert not is_valid_phone(raw)


def test_normalize_phone_keeps_digits_only():
    assert normalize_phone("tel: ٠٧٩-١٢٣") == "079123"


def test_normalize_name():
    assert normalize_name("  Ahmed,   Ali!! ") == "Ahmed Ali"
    assert normalize_name("O'Brien-Smith.") == "O'Brien-Smith"
    assert normalize_name("مُحَمَّد  علي") == "محمد علي"


def test_name_heuristic():
    assert passes_name_heuristic("محمد علي")
    assert passes_name_heuristic("Sara")
    assert not passes_name_heuristic("a")
    assert not passes_name_heuristic("one two three four")


@pytest.mark.parametrize(
    "raw, reason",
    [("12345", "no_letters"), ("Ahmed2", "contains_digit"), ("x" * 41, "too_long"), ("!!!", "no_letters")],
)
def test_name_cheap_checks_reject_without_calling_model(raw, reason):
    llm = FakeLLM()
    check = NameValidator(llm).validate(raw)
    assert not check.accepted
    assert check.reason == reason
    assert llm.name_checks == []


def test_name_accepted_when_model_says_yes():
    check = NameValidator(FakeLLM(name_verdict=True)).validate(" Ahmed  Ali ")
    assert check.accepted
    assert check.name == "Ahmed Ali"


def test_name_rejected_when_model_says_no():
    check = NameValidator(FakeLLM(name_verdict=False)).validate("Banana Phone")
    assert not check.accepted
    assert check.reason == "model_rejected"


def test_name_accepted_when_model_unavailable():
    check = NameValidator(FakeLLM(name_verdict=LLMUpstreamError("timeout"))).validate("زززز")
    assert check.accepted
    assert check.reason == "collaborator_unavailable"


def test_name_accepted_when_model_breaks_contract():
    check = NameValidator(FakeLLM(name_verdict=LLMContractError("empty"))).validate("Rania")
    assert check.accepted


def test_indeterminate_model_answer_falls_back_to_heuristic():
    validator = NameValidator(FakeLLM(name_verdict=None))
    assert validator.validate("ريم").accepted
    rejected = validator.validate("this is not my real name")
    assert not rejected.accepted
    assert rejected.reason == "heuristic_rejected"


def test_match_service_by_title_and_substring(catalog):
    assert match_service("فحص عام", catalog).title == "فحص عام"
    assert match_service("ابي تبييض الأسنان لو سمحت", catalog).title == "تبييض الأسنان"
    assert match_service("WHITENING", catalog).title == "تبييض الأسنان"


def test_match_service_by_selection_id(catalog):
    entry = match_service("anything", catalog, selection_id="service_فحص_عام")
    assert entry is not None
    assert entry.title == "فحص عام"


def test_match_service_rejects_unknown(catalog):
    assert match_service("pizza", catalog) is None
    assert match_service("x", catalog) is None


def test_match_service_by_alias_on_word_boundary(catalog):
    assert match_service("root canal please", catalog).title == "علاج الجذور"
    assert match_service("other", catalog).title == "خدمة أخرى"
    assert match_service("تنظيف؟", catalog).title == "تنظيف الأسنان"
    assert match_service("عام", catalog).title == "فحص عام"


@pytest.mark.parametrize("reply", ["لا", "ال", "سن", "عا", "ca", "an", "another one", "my mother", "bother"])
def test_match_service_ignores_fragments_and_embedded_words(catalog, reply):
    assert match_service(reply, catalog) is None
