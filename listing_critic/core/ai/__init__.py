# listing_critic/core/ai/__init__.py
"""
LLM-backed pieces: field extraction, area-average read-off and the critic.

Every entry point degrades deterministically when the model is missing or
misbehaves; only the area-average lookup raises (AreaAverageError).
"""

from __future__ import annotations

from .area_average import (
    AreaAverageService,
    apply_area_average,
    extract_postcode_district,
    value_for_money_score,
)
from .critic import critique, risk_factors
from .field_extractor import extract_fields, validate_llm_payload
from .llm import OpenAITextModel, TextModel, build_text_model, parse_json_object

__all__ = [
    "TextModel",
    "OpenAITextModel",
    "build_text_model",
    "parse_json_object",
    "extract_fields",
    "validate_llm_payload",
    "AreaAverageService",
    "apply_area_average",
    "extract_postcode_district",
    "value_for_money_score",
    "critique",
    "risk_factors",
]
