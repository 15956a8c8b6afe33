# listing_critic/core/normalize/listing_html.py
"""
Structural listing extractor (parsed HTML → labelled text blob).

Resilient, network-free pass over a listing page that emits one labelled line
per recognised fact, plus meta/JSON-LD hints and whole-page regex sweeps:

    Address: ...
    Price: £...
    Size/Features: ...
    Bedrooms: ... / Bathrooms: ... / Tenure: ... / Property Type: ...
    Listing Date: Added on DD/MM/YYYY
    Price Reduction: Reduced on DD/MM/YYYY
    Images: url, url, ...
    Meta Price: / Meta Description ... / Structured Price: / Structured Size:
    Found prices: / Found sizes (sq ft): / Found sizes (sq m):

The blob is intentionally redundant; field extractors downstream pick the
most trustworthy line.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from bs4 import BeautifulSoup

# ---------- Regex tables ----------

_DIGIT_RE = re.compile(r"\d")
_LETTER_RE = re.compile(r"[A-Za-z]")
_NUMBER_WORD_RE = re.compile(r"\b(?:one|two|three|four|five|six|seven|eight|nine|ten)\b", re.IGNORECASE)
_WS_RE = re.compile(r"\s+")

_PRICE_SWEEP_RE = re.compile(r"£[\d,]+")
_SQFT_SWEEP_RE = re.compile(r"(?:\d{1,3}(?:,\d{3})+|\d+)\s*sq\.?\s*ft", re.IGNORECASE)
_SQM_SWEEP_RE = re.compile(r"(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d+)?\s*(?:sq\.?\s*m(?:etres?)?\b|sqm\b|square\s*metres?|m²)", re.IGNORECASE)

_ADDED_ON_RE = re.compile(r"Added on\s+(\d{1,2}/\d{1,2}/\d{4})", re.IGNORECASE)
_REDUCED_ON_RE = re.compile(r"Reduced on\s+(\d{1,2}/\d{1,2}/\d{4})", re.IGNORECASE)

_TENURE_WORD_RE = re.compile(r"\b(?:freehold|leasehold|commonhold|shared\s+ownership)\b", re.IGNORECASE)
_TYPE_WORD_RE = re.compile(
    r"\b(?:detached|semi[\s-]?detached|terraced|terrace|flat|apartment|maisonette|bungalow|cottage|town\s?house|studio)\b",
    re.IGNORECASE,
)

SWEEP_LIMIT = 5
MAX_LINE_CHARS = 500

# ---------- Sanity checks ----------


def _collapse(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def is_valid_address(text: str) -> bool:
    lt = text.lower()
    return (
        len(text) > 5
        and "£" not in text
        and bool(_LETTER_RE.search(text))
        and "rightmove" not in lt
        and "property" not in lt
        and "for sale" not in lt
    )


def _is_price(text: str) -> bool:
    return "£" in text and bool(_DIGIT_RE.search(text))


def _is_size(text: str) -> bool:
    lt = text.lower()
    mentions = "sq" in lt or "m²" in text or "SIZE" in text
    return mentions and bool(_DIGIT_RE.search(text))


def _mentions_count(word: str) -> Callable[[str], bool]:
    def _check(text: str) -> bool:
        if word not in text.lower():
            return False
        return bool(_DIGIT_RE.search(text) or _NUMBER_WORD_RE.search(text))

    return _check


def _is_tenure(text: str) -> bool:
    return bool(_TENURE_WORD_RE.search(text))


def _is_property_type(text: str) -> bool:
    return bool(_TYPE_WORD_RE.search(text))


# ---------- Field rules ----------


@dataclass(frozen=True)
class FieldRule:
    label: str
    selectors: tuple[str, ...]
    check: Callable[[str], bool]


FIELD_RULES: tuple[FieldRule, ...] = (
    FieldRule(
        "Address",
        (
            "h1",
            '[data-testid="address"]',
            '[class*="address"]',
            ".property-address",
            ".property-header h1",
            ".property-title",
            'h1:not(:-soup-contains("£"))',
            '[data-testid="property-address"]',
        ),
        is_valid_address,
    ),
    FieldRule(
        "Price",
        (
            'h1:-soup-contains("£")',
            '[data-testid="price"]',
            ".property-header-price",
            ".propertyHeaderPrice",
            'span:-soup-contains("£")',
            ".price",
            ".property-price",
            '[class*="price"]',
            "h1",
            'h2:-soup-contains("£")',
        ),
        _is_price,
    ),
    FieldRule(
        "Size/Features",
        (
            '[data-testid="property-features"]',
            ".key-features",
            'li:-soup-contains("sq ft")',
            'li:-soup-contains("sq m")',
            'span:-soup-contains("sq ft")',
            'span:-soup-contains("sq m")',
            'div:-soup-contains("sq ft")',
            'div:-soup-contains("sq m")',
            ".property-features",
            ".property-description",
            '[class*="feature"]',
            '[class*="size"]',
            'li:-soup-contains("SIZE")',
            'div:-soup-contains("SIZE")',
        ),
        _is_size,
    ),
    FieldRule(
        "Bedrooms",
        (
            'div:-soup-contains("BEDROOMS")',
            'span:-soup-contains("BEDROOMS")',
            '[data-testid*="bedroom"]',
            '[class*="bedroom"]',
            'li:-soup-contains("bedroom")',
            'div:-soup-contains("bedroom")',
            ".key-features",
            '[data-testid="property-features"]',
            ".property-features",
        ),
        _mentions_count("bedroom"),
    ),
    FieldRule(
        "Bathrooms",
        (
            'div:-soup-contains("BATHROOMS")',
            'span:-soup-contains("BATHROOMS")',
            '[data-testid*="bathroom"]',
            '[class*="bathroom"]',
            'li:-soup-contains("bathroom")',
            'div:-soup-contains("bathroom")',
            ".key-features",
            '[data-testid="property-features"]',
            ".property-features",
        ),
        _mentions_count("bathroom"),
    ),
    FieldRule(
        "Tenure",
        (
            'div:-soup-contains("TENURE")',
            'span:-soup-contains("TENURE")',
            '[data-testid*="tenure"]',
            '[class*="tenure"]',
            'li:-soup-contains("hold")',
            'div:-soup-contains("Tenure")',
        ),
        _is_tenure,
    ),
    FieldRule(
        "Property Type",
        (
            'div:-soup-contains("PROPERTY TYPE")',
            'span:-soup-contains("PROPERTY TYPE")',
            '[data-testid*="property-type"]',
            '[class*="propertyType"]',
            'div:-soup-contains("Property type")',
        ),
        _is_property_type,
    ),
)

# ---------- Helpers ----------


def _best_text(soup: BeautifulSoup, rule: FieldRule) -> str | None:
    """First selector with a sane match wins; among its matches the shortest text."""
    for selector in rule.selectors:
        texts = [_collapse(el.get_text(" ", strip=True)) for el in soup.select(selector)]
        sane = [t for t in texts if t and rule.check(t)]
        if sane:
            best = min(sane, key=len)
            return best if len(best) <= MAX_LINE_CHARS else best[:MAX_LINE_CHARS]
    return None


def _page_text(soup: BeautifulSoup) -> str:
    root = soup.body or soup
    return _collapse(root.get_text(" ", strip=True))


def _walk_jsonld(node: object) -> Iterator[dict]:
    if isinstance(node, list):
        for item in node:
            yield from _walk_jsonld(item)
    elif isinstance(node, dict):
        yield node
        if "@graph" in node:
            yield from _walk_jsonld(node["@graph"])


def _offer_price(offers: object) -> object | None:
    if isinstance(offers, list):
        for o in offers:
            p = _offer_price(o)
            if p is not None:
                return p
        return None
    if isinstance(offers, dict):
        return offers.get("price")
    return None


def _size_text(size: object) -> str:
    if isinstance(size, dict):
        value = size.get("value")
        unit = size.get("unitText") or size.get("unitCode") or ""
        return f"{value} {unit}".strip()
    return str(size)


def extract_meta_and_structured_data(soup: BeautifulSoup) -> list[str]:
    lines: list[str] = []

    for meta in soup.select('meta[property="product:price:amount"]'):
        content = meta.get("content")
        if content:
            lines.append(f"Meta Price: £{content}")

    for meta in soup.select('meta[name="description"]'):
        description = meta.get("content") or ""
        price = _PRICE_SWEEP_RE.search(description)
        sqft = _SQFT_SWEEP_RE.search(description)
        sqm = _SQM_SWEEP_RE.search(description)
        if price:
            lines.append(f"Meta Description Price: {price.group(0)}")
        if sqft:
            lines.append(f"Meta Description Size (sq ft): {sqft.group(0)}")
        if sqm:
            lines.append(f"Meta Description Size (sq m): {sqm.group(0)}")

    for script in soup.select('script[type="application/ld+json"]'):
        try:
            data = json.loads(script.string or script.get_text() or "")
        except (json.JSONDecodeError, TypeError):
            continue
        for node in _walk_jsonld(data):
            price = _offer_price(node.get("offers"))
            if price is not None:
                lines.append(f"Structured Price: £{price}")
            size = node.get("floorSize") or node.get("size")
            if size:
                lines.append(f"Structured Size: {_size_text(size)}")

    return lines


def sweep_page_patterns(page_text: str) -> list[str]:
    lines: list[str] = []
    for label, rx in (
        ("Found prices", _PRICE_SWEEP_RE),
        ("Found sizes (sq ft)", _SQFT_SWEEP_RE),
        ("Found sizes (sq m)", _SQM_SWEEP_RE),
    ):
        hits = [m.group(0) for m in rx.finditer(page_text)][:SWEEP_LIMIT]
        if hits:
            lines.append(f"{label}: {', '.join(hits)}")
    return lines


# ---------- Public API ----------


def extract_listing_text(doc: BeautifulSoup | str, images: list[str] | None = None) -> str:
    """
    Flatten a listing page into the labelled text blob.

    Fields with no sane match are omitted rather than defaulted. Returns ""
    when nothing at all was recognised.
    """
    soup = doc if isinstance(doc, BeautifulSoup) else BeautifulSoup(doc, "lxml")
    lines: list[str] = []

    for rule in FIELD_RULES:
        text = _best_text(soup, rule)
        if text:
            lines.append(f"{rule.label}: {text}")

    page_text = _page_text(soup)
    added = _ADDED_ON_RE.search(page_text)
    if added:
        lines.append(f"Listing Date: Added on {added.group(1)}")
    reduced = _REDUCED_ON_RE.search(page_text)
    if reduced:
        lines.append(f"Price Reduction: Reduced on {reduced.group(1)}")

    if images:
        lines.append(f"Images: {', '.join(images)}")

    lines.extend(extract_meta_and_structured_data(soup))
    lines.extend(sweep_page_patterns(page_text))

    return "\n".join(lines) + "\n" if lines else ""


__all__ = [
    "FIELD_RULES",
    "FieldRule",
    "is_valid_address",
    "extract_meta_and_structured_data",
    "sweep_page_patterns",
    "extract_listing_text",
]
