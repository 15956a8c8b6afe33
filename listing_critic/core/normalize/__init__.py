# listing_critic/core/normalize/__init__.py
from __future__ import annotations

from .listing_html import extract_listing_text
from .listing_text import SQFT_TO_SQM, WORD_NUMBERS, extract_fields_from_text, first_match

__all__ = [
    "extract_listing_text",
    "extract_fields_from_text",
    "first_match",
    "SQFT_TO_SQM",
    "WORD_NUMBERS",
]
