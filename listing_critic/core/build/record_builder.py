# listing_critic/core/build/record_builder.py
"""
Normalizer/Builder: ExtractedFields → validated PropertyRecord.

Scraped facts are taken as-is; everything a listing page cannot tell us
(valuation indices, sale history, local-area figures) is filled with
price-derived placeholders so the record is always complete. Costs and
mortgage figures are computed. Validation is the only step that raises.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from pydantic import ValidationError

from listing_critic.core.finance.mortgage import mortgage_scenarios
from listing_critic.core.finance.stamp_duty import stamp_duty
from listing_critic.errors import InvalidRecordError
from listing_critic.schemas.models import CORE_FIELD_NAMES, ExtractedFields, PropertyRecord

logger = logging.getLogger(__name__)

# ---------- Defaults & placeholders ----------

DEFAULT_ADDRESS = "Address not found"
DEFAULT_TENURE = "freehold"
DEFAULT_CONDITION = "ready-to-move"
DEFAULT_PRICE_PER_SQM = 10_000
DEFAULT_MARKET_TIME_DAYS = 30
DEFAULT_VALUE_FOR_MONEY = 7.0
DEFAULT_AREA_AVERAGE = 3000.0

CONVEYANCING_FEE = 1500
SURVEY_FEE = 600

LAST_SALE_DATE = datetime(2020, 1, 1, 10, 0, tzinfo=timezone.utc)
PRICE_HISTORY_DATE = datetime(2023, 1, 1, tzinfo=timezone.utc)

MAX_CONFIDENCE = 0.9
SOURCE_SCRAPED = "rightmove-scraping"
SOURCE_ESTIMATED = "rightmove-estimated"


def _parse_ddmmyyyy(value: str) -> date | None:
    try:
        return datetime.strptime(value.strip(), "%d/%m/%Y").date()
    except ValueError:
        return None


def market_time(listing_date: str | None, now: datetime | None = None) -> int:
    """Whole days on the market; 30 when the date is missing, unparsable or in the future."""
    if not listing_date:
        return DEFAULT_MARKET_TIME_DAYS
    listed = _parse_ddmmyyyy(listing_date)
    if listed is None:
        return DEFAULT_MARKET_TIME_DAYS
    today = (now or datetime.now(timezone.utc)).date()
    days = (today - listed).days
    # a listing date after today is treated as unknown
    return days if days >= 0 else DEFAULT_MARKET_TIME_DAYS


def price_per_sq_m(price: float | None, square_meters: float | None) -> float:
    if price and square_meters:
        return round(price / square_meters)
    return DEFAULT_PRICE_PER_SQM


def confidence(extracted: ExtractedFields, estimated: bool) -> float:
    score = MAX_CONFIDENCE * extracted.extracted_count() / len(CORE_FIELD_NAMES)
    if estimated:
        score /= 2
    return round(score, 3)


def _record_data(extracted: ExtractedFields, estimated: bool, now: datetime) -> dict:
    price = extracted.price or 0.0
    return {
        "address": extracted.address or DEFAULT_ADDRESS,
        "price": price,
        "price_per_sq_m": price_per_sq_m(extracted.price, extracted.square_meters),
        "bedrooms": extracted.bedrooms or 0,
        "bathrooms": extracted.bathrooms or 0,
        "tenure": extracted.tenure or DEFAULT_TENURE,
        "property_type": extracted.property_type,
        "market_time": market_time(extracted.listing_date, now),
        "value_for_money": DEFAULT_VALUE_FOR_MONEY,
        "condition": extracted.condition or DEFAULT_CONDITION,
        "listing_date": extracted.listing_date,
        "price_reduction_date": extracted.price_reduction_date,
        "indices": {
            "zoopla": price,
            "ons": round(price * 0.98),
            "acadata": round(price * 1.02),
        },
        "history": {
            "last_sale_price": round(price * 0.8),
            "last_sale_date": LAST_SALE_DATE,
            "growth_since_last_sale": 25.0,
            "price_reductions": [],
        },
        "listing_delta": {"rightmove": 0, "acadata": 0, "listing_date": now},
        "local_area": {
            "ons_area_change": 10.0,
            "recent_sales": [],
            "area_average": DEFAULT_AREA_AVERAGE,
            "postcode_average": {
                "detached": round(price * 1.5),
                "semi_detached": round(price * 1.2),
                "terraced": price,
                "flat": round(price * 0.8),
            },
            "price_history": [{"date": PRICE_HISTORY_DATE, "price": round(price * 0.9)}],
        },
        "costs": {
            "sdlt": stamp_duty(price),
            "conveyancing": CONVEYANCING_FEE,
            "survey": SURVEY_FEE,
        },
        "mortgage": {"monthly_payments": mortgage_scenarios(price)},
        "images": list(extracted.images),
        "last_updated": now,
        "data_source": SOURCE_ESTIMATED if estimated else SOURCE_SCRAPED,
        "confidence": confidence(extracted, estimated),
    }


# ---------- Public API ----------


def build_property_record(
    extracted: ExtractedFields,
    *,
    estimated: bool = False,
    now: datetime | None = None,
) -> PropertyRecord:
    """
    Fold an extraction into a complete PropertyRecord.

    `estimated` marks records built from the URL-pattern fallback; regex-only
    extractions are always treated as estimated. Raises InvalidRecordError when
    the assembled record violates a schema invariant.
    """
    now = now or datetime.now(timezone.utc)
    estimated = estimated or extracted.source == "regex"

    try:
        return PropertyRecord.model_validate(_record_data(extracted, estimated, now))
    except ValidationError as e:
        logger.error("Built record failed validation: %d error(s)", e.error_count())
        raise InvalidRecordError(
            f"PropertyRecord failed validation: {e.error_count()} error(s)",
            errors=e.errors(include_url=False, include_context=False, include_input=False),
        ) from e


__all__ = ["build_property_record", "market_time", "price_per_sq_m", "confidence"]
