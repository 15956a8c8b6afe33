# listing_critic/core/ai/field_extractor.py
"""
LLM field extractor with deterministic regex fallback.

Exports
-------
- FIELD_EXTRACTION_PROMPT
- validate_llm_payload(payload) -> ExtractedFields
- extract_fields(text, model) -> ExtractedFields

The model's JSON is untrusted input: every field is validated strictly on its
own and dropped (left null) when it does not fit the schema. Nothing in here
raises; the worst case is the regex extraction of the same blob.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from listing_critic.core.normalize.listing_text import SQFT_TO_SQM, extract_fields_from_text
from listing_critic.logging_config import preview
from listing_critic.schemas.models import CONDITIONS, EXTRACTED_FIELD_NAMES, PROPERTY_TYPES, TENURES, ExtractedFields

from .llm import TextModel, parse_json_object

logger = logging.getLogger(__name__)

_TYPE_LIST = ", ".join(PROPERTY_TYPES)
_TENURE_LIST = ", ".join(TENURES)
_CONDITION_LIST = ", ".join(f'"{c}"' for c in CONDITIONS)
_TYPE_ENUM = " | ".join(f'"{t}"' for t in PROPERTY_TYPES)
_TENURE_ENUM = " | ".join(f'"{t}"' for t in TENURES)
_CONDITION_ENUM = " | ".join(f'"{c}"' for c in CONDITIONS)


FIELD_EXTRACTION_PROMPT = f"""Extract comprehensive property information from the following Rightmove property listing content:

Property Content:
{{content}}

Please analyze the content and extract the following information:
1. Address - full property address (street name, area and postcode district, e.g. "Main Street, Tiddington, CV37")
2. Price - property price in GBP (numerical value only, no £ symbol)
3. Square meters - if only sq ft is available, convert to sq m (1 sq ft = {SQFT_TO_SQM} sq m)
4. Bedrooms - number of bedrooms (patterns like "BEDROOMS: 2", "Two Bedrooms", "2 bedroom", "2 bed")
5. Bathrooms - number of bathrooms (patterns like "BATHROOMS: 2", "Two Bathrooms", "2 bathroom", "2 bath")
6. Property type - {_TYPE_LIST}
7. Tenure - {_TENURE_LIST}
8. Property condition - based on the description: {_CONDITION_LIST}
9. Listing date - "Added on DD/MM/YYYY" in the content
10. Price reduction date - "Reduced on DD/MM/YYYY" in the content

EXTRACTION RULES:
- Numbers only for price and measurements
- If only sq ft is provided, multiply sq ft by {SQFT_TO_SQM}
- Map common terms: "apartment" -> "flat"; a "house" is typed from its description
- Infer condition from keywords like "modernised", "needs work", "refurbishment"
- Use null for any field that cannot be determined

Return ONLY a JSON object of this shape:
{{{{
  "address": "string" | null,
  "price": number | null,
  "square_meters": number | null,
  "bedrooms": integer | null,
  "bathrooms": integer | null,
  "property_type": {_TYPE_ENUM} | null,
  "tenure": {_TENURE_ENUM} | null,
  "condition": {_CONDITION_ENUM} | null,
  "listing_date": "DD/MM/YYYY" | null,
  "price_reduction_date": "DD/MM/YYYY" | null,
  "images": ["string"] | null
}}}}
"""


def build_prompt(text: str) -> str:
    return FIELD_EXTRACTION_PROMPT.format(content=text)


def validate_llm_payload(payload: dict[str, Any]) -> ExtractedFields:
    """Keep only the fields that validate strictly; no coercion of wrong types."""
    accepted: dict[str, Any] = {}
    rejected: list[str] = []
    for name in EXTRACTED_FIELD_NAMES:
        value = payload.get(name)
        if value is None:
            continue
        try:
            checked = ExtractedFields.model_validate({name: value}, strict=True)
        except ValidationError:
            rejected.append(name)
            continue
        accepted[name] = getattr(checked, name)

    if rejected:
        logger.warning("Rejected LLM fields failing validation: %s", ", ".join(rejected))
    return ExtractedFields(**accepted, source="llm")


def extract_fields(text: str, model: TextModel | None) -> ExtractedFields:
    """
    Ask the model for the listing facts; fall back to regexes on any failure.

    Null LLM fields are filled from the regex extraction of the same text.
    """
    fallback = extract_fields_from_text(text)
    if model is None:
        return fallback

    try:
        raw = model.generate(build_prompt(text))
    except Exception as e:  # noqa: BLE001
        logger.warning("LLM extraction failed (%s: %s); using regex fallback", type(e).__name__, e)
        return fallback

    try:
        payload = parse_json_object(raw)
    except ValueError as e:
        logger.warning("LLM returned unusable output (%s); using regex fallback", e)
        logger.debug("Unusable LLM output: %s", preview(str(raw), 500))
        return fallback

    return validate_llm_payload(payload).merged_with(fallback)


__all__ = ["FIELD_EXTRACTION_PROMPT", "build_prompt", "validate_llm_payload", "extract_fields"]
