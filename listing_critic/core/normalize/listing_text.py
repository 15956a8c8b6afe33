# listing_critic/core/normalize/listing_text.py
"""
Deterministic field extractor (labelled text blob → ExtractedFields).

Used as the fallback whenever the LLM extractor is unavailable or returns
something unusable, and to fill fields the LLM left null. Each field is an
ordered list of strategies; the first one producing a sane value wins.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import TypeVar

from listing_critic.schemas.models import ExtractedFields

T = TypeVar("T")

SQFT_TO_SQM = 0.092903

WORD_NUMBERS: dict[str, int] = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
}
_WORDS = "|".join(WORD_NUMBERS)

MAX_BEDROOMS = 20
MAX_BATHROOMS = 15

# A count that matched but fell outside its bounds; ends the strategy chain as None.
_OUT_OF_RANGE = object()

# ---------- Strategy plumbing ----------


def first_match(text: str, strategies: Iterable[Callable[[str], T | None]]) -> T | None:
    """Run strategies in order; return the first non-None result."""
    for strategy in strategies:
        value = strategy(text)
        if value is not None:
            return value
    return None


def _pattern(regex: re.Pattern[str], convert: Callable[[str], T | None]) -> Callable[[str], T | None]:
    def _strategy(text: str) -> T | None:
        m = regex.search(text)
        return convert(m.group(1)) if m else None

    return _strategy


def _keywords(table: tuple[tuple[re.Pattern[str], T], ...], scope: Callable[[str], str] = lambda t: t) -> Callable[[str], T | None]:
    def _strategy(text: str) -> T | None:
        haystack = scope(text)
        for rx, value in table:
            if rx.search(haystack):
                return value
        return None

    return _strategy


def _labelled_line(label: str) -> Callable[[str], str]:
    rx = re.compile(rf"^{re.escape(label)}:\s*(.*)$", re.MULTILINE)

    def _scope(text: str) -> str:
        m = rx.search(text)
        return m.group(1) if m else ""

    return _scope


# ---------- Converters ----------


def _count_in(lo: int, hi: int) -> Callable[[str], int | object | None]:
    def _convert(raw: str) -> int | object | None:
        raw = raw.strip().lower()
        n = WORD_NUMBERS.get(raw)
        if n is None:
            try:
                n = int(raw)
            except ValueError:
                return None
        return n if lo <= n <= hi else _OUT_OF_RANGE

    return _convert


def _bounded_count(text: str, strategies: Iterable[Callable[[str], int | object | None]]) -> int | None:
    value = first_match(text, strategies)
    return None if value is _OUT_OF_RANGE else value


def _to_price(raw: str) -> float | None:
    digits = raw.replace(",", "")
    if not digits.isdigit():
        return None
    value = float(digits)
    return value if value > 0 else None


def _to_sqm(raw: str) -> float | None:
    try:
        value = float(raw.replace(",", ""))
    except ValueError:
        return None
    return value if value > 0 else None


def _sqft_to_sqm(raw: str) -> float | None:
    try:
        sqft = float(raw.replace(",", ""))
    except ValueError:
        return None
    sqm = float(round(sqft * SQFT_TO_SQM))
    return sqm if sqm > 0 else None


def _stripped(raw: str) -> str | None:
    return raw.strip() or None


# ---------- Field tables ----------


def _count_strategies(upper_label: str, stem: str, hi: int) -> tuple[Callable[[str], int | object | None], ...]:
    convert = _count_in(1, hi)
    return (
        # Key-facts block: "BEDROOMS\n3" (uppercase label only)
        _pattern(re.compile(rf"{upper_label}\s*[^\dA-Za-z]{{0,20}}(\d+)"), convert),
        _pattern(re.compile(rf"\b(\d+)\s+{stem}(?:room)?s?\b", re.IGNORECASE), convert),
        _pattern(re.compile(rf"\b({_WORDS})\s+{stem}(?:room)?s?\b", re.IGNORECASE), convert),
        _pattern(re.compile(rf"\b{stem}rooms?\s*:?\s*(\d+)", re.IGNORECASE), convert),
    )


BEDROOM_STRATEGIES = _count_strategies("BEDROOMS", "bed", MAX_BEDROOMS)
BATHROOM_STRATEGIES = _count_strategies("BATHROOMS", "bath", MAX_BATHROOMS)

PRICE_STRATEGIES = (
    _pattern(re.compile(r"^Price:.*?£([\d,]+)", re.MULTILINE), _to_price),
    _pattern(re.compile(r"^Meta Price:\s*£([\d,]+)", re.MULTILINE), _to_price),
    _pattern(re.compile(r"^Structured Price:\s*£([\d,]+)", re.MULTILINE), _to_price),
    _pattern(re.compile(r"£([\d,]+)"), _to_price),
)

SIZE_STRATEGIES = (
    _pattern(re.compile(r"(\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?)\s*(?:sq\.?\s*m(?:etres?)?\b|sqm\b|m²|square\s*met(?:re|er)s?)", re.IGNORECASE), _to_sqm),
    _pattern(re.compile(r"(\d{1,3}(?:,\d{3})+|\d+)\s*sq\.?\s*f(?:ee)?t", re.IGNORECASE), _sqft_to_sqm),
)

ADDRESS_STRATEGIES = (_pattern(re.compile(r"^Address:\s*(.+)$", re.MULTILINE), _stripped),)

LISTING_DATE_STRATEGIES = (_pattern(re.compile(r"Added on\s+(\d{1,2}/\d{1,2}/\d{4})", re.IGNORECASE), _stripped),)
REDUCTION_DATE_STRATEGIES = (_pattern(re.compile(r"Reduced on\s+(\d{1,2}/\d{1,2}/\d{4})", re.IGNORECASE), _stripped),)

_TENURE_TABLE = (
    (re.compile(r"\bshared[\s-]ownership\b", re.IGNORECASE), "shared-ownership"),
    (re.compile(r"\bcommonhold\b", re.IGNORECASE), "commonhold"),
    (re.compile(r"\bleasehold\b", re.IGNORECASE), "leasehold"),
    (re.compile(r"\bfreehold\b", re.IGNORECASE), "freehold"),
)
TENURE_STRATEGIES = (
    _keywords(_TENURE_TABLE, _labelled_line("Tenure")),
    _keywords(_TENURE_TABLE),
)

# Order matters: "semi-detached" before "detached", "maisonette" before "flat"
_TYPE_TABLE = (
    (re.compile(r"\bsemi[\s-]?detached\b", re.IGNORECASE), "semi-detached"),
    (re.compile(r"\bmaisonette\b", re.IGNORECASE), "maisonette"),
    (re.compile(r"\bbungalow\b", re.IGNORECASE), "bungalow"),
    (re.compile(r"\bcottage\b", re.IGNORECASE), "cottage"),
    (re.compile(r"\btown\s?house\b", re.IGNORECASE), "townhouse"),
    (re.compile(r"\b(?:end[\s-]of[\s-]terrace|mid[\s-]terrace|terraced)\b", re.IGNORECASE), "terraced"),
    (re.compile(r"\b(?:flat|apartment|studio)\b", re.IGNORECASE), "flat"),
    (re.compile(r"\bdetached\b", re.IGNORECASE), "detached"),
)
PROPERTY_TYPE_STRATEGIES = (
    _keywords(_TYPE_TABLE, _labelled_line("Property Type")),
    _keywords(_TYPE_TABLE),
)

CONDITION_STRATEGIES = (
    _keywords(
        (
            (re.compile(r"\bstructural\s+(?:issues|repairs|works?|movement)\b", re.IGNORECASE), "structural-project"),
            (re.compile(r"\b(?:in\s+need\s+of|requires?)\s+(?:modernisation|renovation|refurbishment|updating)\b|\brenovation\s+project\b", re.IGNORECASE), "renovation"),
        )
    ),
)

_IMAGES_LINE_RE = re.compile(r"^Images:\s*(.+)$", re.MULTILINE)
_HTTP_URL_RE = re.compile(r"^https?://[^\s,/]+\.[^\s,]+$")


def _images(text: str) -> list[str]:
    m = _IMAGES_LINE_RE.search(text)
    if not m:
        return []
    return [u.strip() for u in m.group(1).split(",") if _HTTP_URL_RE.match(u.strip())]


# ---------- Public API ----------


def extract_fields_from_text(text: str) -> ExtractedFields:
    """
    Pull listing facts out of the labelled text blob with regexes only.

    Never raises; fields that cannot be found (or fail bounds) stay None.
    """
    return ExtractedFields(
        address=first_match(text, ADDRESS_STRATEGIES),
        price=first_match(text, PRICE_STRATEGIES),
        square_meters=first_match(text, SIZE_STRATEGIES),
        bedrooms=_bounded_count(text, BEDROOM_STRATEGIES),
        bathrooms=_bounded_count(text, BATHROOM_STRATEGIES),
        property_type=first_match(text, PROPERTY_TYPE_STRATEGIES),
        tenure=first_match(text, TENURE_STRATEGIES),
        condition=first_match(text, CONDITION_STRATEGIES),
        listing_date=first_match(text, LISTING_DATE_STRATEGIES),
        price_reduction_date=first_match(text, REDUCTION_DATE_STRATEGIES),
        images=_images(text),
        source="regex",
    )


__all__ = [
    "SQFT_TO_SQM",
    "WORD_NUMBERS",
    "first_match",
    "extract_fields_from_text",
]
