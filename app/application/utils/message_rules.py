from __future__ import annotations

import re

from app.domain.entities.turn import Language

CANCELLATION_KEYWORDS = (
    "الغاء",
    "إلغاء",
    "الغي",
    "إلغي",
    "ألغي",
    "الغو",
    "إلغو",
    "الغيت",
    "الغوا",
    "الغاء الحجز",
    "الغاء الموعد",
    "حذف موعد",
    "ابغى الغي",
    "ابي الغي",
    "ما ابي",
    "ماابي",
    "ما ابغى",
    "ماابغى",
    "cancel",
    "cancell",
    "cancle",
    "delete booking",
)

LOCATION_KEYWORDS = (
    "موقع",
    "مكان",
    "عنوان",
    "وين",
    "فين",
    "أين",
    "وينكم",
    "فينكم",
    "location",
    "where",
    "address",
    "place",
    "maps",
)

OFFERS_KEYWORDS = (
    "عروض",
    "عرض",
    "خصم",
    "خصومات",
    "تخفيض",
    "باقات",
    "باكيج",
    "بكج",
    "خدمات",
    "أسعار",
    "اسعار",
    "سعر",
    "بكم",
    "offer",
    "discount",
    "price",
    "deal",
    "services",
)

DOCTORS_KEYWORDS = (
    "دكتور",
    "دكاترة",
    "طبيب",
    "أطباء",
    "اطباء",
    "doctor",
    "physician",
    "dentist",
    "dr.",
)

BOOKING_KEYWORDS = (
    "book",
    "boocing",
    "bocking",
    "bokking",
    "pooking",
    "pocking",
    "boking",
    "bokin",
    "appointment",
    "appoinment",
    "appoint",
    "reserv",
    "resrv",
    "schedul",
    "shedule",
    "احجز",
    "احجر",
    "احجد",
    "اجحر",
    "احجذ",
    "احجوز",
    "حجز",
    "موعد",
)

CLOSED_DAY_WORDS = ("الجمعة", "الجمعه", "friday")

GREETING_TOKENS = frozenset(
    {
        "hi",
        "hello",
        "hey",
        "there",
        "good",
        "morning",
        "evening",
        "هلا",
        "مرحبا",
        "مرحباً",
        "السلام",
        "عليكم",
        "اهلا",
        "أهلا",
        "أهلاً",
        "اهلين",
        "هاي",
        "شلونك",
        "صباح",
        "مساء",
        "الخير",
        "النور",
        "ورحمة",
        "الله",
        "وبركاته",
    }
)

QUESTION_WORDS = frozenset(
    {
        "how",
        "why",
        "what",
        "when",
        "where",
        "which",
        "who",
        "price",
        "كم",
        "ليش",
        "ليه",
        "مدة",
        "متى",
        "كيف",
        "شو",
        "وش",
        "ايش",
        "شنو",
        "هل",
        "وين",
    }
)

BANNED_WORDS = frozenset(
    {
        "fuck",
        "fck",
        "fuk",
        "shit",
        "bitch",
        "btch",
        "ass",
        "dick",
        "cock",
        "pussy",
        "cunt",
        "whore",
        "slut",
        "bastard",
        "porn",
        "nude",
        "naked",
        "xxx",
        "nsfw",
        "horny",
        "sexy",
        "nigger",
        "nigga",
        "kike",
        "terrorist",
        "isis",
        "كس",
        "عرص",
        "عرصة",
        "شرموط",
        "شرموطة",
        "قحبة",
        "خول",
        "زب",
        "طيز",
        "نيك",
        "متناك",
        "متناكة",
        "منيوك",
        "كسمك",
        "سكس",
        "عاهرة",
        "يلعن",
        "داعش",
        "إرهابي",
        "ارهابي",
    }
)

BANNED_PHRASES = (
    "ابن كلب",
    "ابن حرام",
    "يا حيوان",
    "يا كلب",
    "قليل ادب",
    "suicide bomber",
)

_ARABIC_RE = re.compile(r"[؀-ۿ]")
_TOKEN_RE = re.compile(r"[\w'.]+")

# Arabic-Indic (U+0660..) and Extended Arabic-Indic (U+06F0..) digits to ASCII.
_DIGIT_TABLE = str.maketrans("٠١٢٣٤٥٦٧٨٩۰۱۲۳۴۵۶۷۸۹", "01234567890123456789")


def to_latin_digits(text: str) -> str:
    return text.translate(_DIGIT_TABLE)


def includes_any(keywords: tuple[str, ...], text: str) -> str | None:
    """Case-insensitive substring match. Returns the first keyword found."""
    lower = (text or "").lower()
    for keyword in keywords:
        if keyword in lower:
            return keyword
    return None


def tokenize(text: str) -> list[str]:
    return [t.strip(".") for t in _TOKEN_RE.findall((text or "").lower()) if t.strip(".")]


def detect_language(text: str, fallback: Language) -> Language:
    """Arabic letters anywhere mean AR; other letters mean EN; no letters at all keeps `fallback`."""
    letters = [ch for ch in text or "" if ch.isalpha()]
    if not letters:
        return fallback
    if any(_ARABIC_RE.match(ch) for ch in letters):
        return Language.AR
    return Language.EN


def is_cancellation_request(text: str) -> bool:
    return includes_any(CANCELLATION_KEYWORDS, text) is not None


def is_location_request(text: str) -> bool:
    return includes_any(LOCATION_KEYWORDS, text) is not None


def is_offers_request(text: str) -> bool:
    return includes_any(OFFERS_KEYWORDS, text) is not None


def is_doctors_request(text: str) -> bool:
    return includes_any(DOCTORS_KEYWORDS, text) is not None


def is_booking_request(text: str) -> bool:
    return includes_any(BOOKING_KEYWORDS, text) is not None


def mentions_closed_day(text: str) -> bool:
    return includes_any(CLOSED_DAY_WORDS, text) is not None


def is_greeting(text: str) -> bool:
    tokens = tokenize(text)
    return bool(tokens) and len(tokens) <= 4 and all(t in GREETING_TOKENS for t in tokens)


def is_question(text: str) -> bool:
    stripped = (text or "").strip()
    if stripped.endswith(("?", "؟")):
        return True
    return any(t in QUESTION_WORDS for t in tokenize(stripped))


def contains_banned_words(text: str) -> bool:
    tokens = tokenize(text)
    if any(t in BANNED_WORDS for t in tokens):
        return True
    joined = " ".join(tokens)
    return any(phrase in joined for phrase in BANNED_PHRASES)


def parse_slot_shortcut(text: str, shortcuts: dict[str, str]) -> str | None:
    """A bare shortcut like "3" (or "٣") maps to its slot label."""
    return shortcuts.get(to_latin_digits((text or "").strip()))


def extract_slot_from_text(text: str, shortcuts: dict[str, str]) -> str | None:
    """
    Find an explicit slot inside a longer booking sentence, e.g.
    "book me at 6 pm" or "احجز الساعة 9".
    """
    if not shortcuts:
        return None
    keys = "|".join(re.escape(k) for k in sorted(shortcuts, key=len, reverse=True))
    normalized = to_latin_digits((text or "").lower())
    patterns = (
        rf"(?<!\d)({keys})\s*(?:pm|p\.m\.|مساءً|مساء|م)(?!\w)",
        rf"(?:الساعة|الساعه|at)\s*({keys})(?!\d)",
    )
    for pattern in patterns:
        match = re.search(pattern, normalized)
        if match:
            return shortcuts[match.group(1)]
    return None
