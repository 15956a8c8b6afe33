# listing_critic/core/ai/critic.py
"""
Brutal-critic verdict on a PropertyRecord.

The LLM writes a one-paragraph, deliberately blunt assessment plus a
BUY / DON'T_BUY / NEUTRAL call; risk factors are computed deterministically
from the record so they never depend on the model.
"""

from __future__ import annotations

import logging
from typing import get_args

from listing_critic.schemas.models import CriticVerdict, PropertyRecord, Recommendation

from .llm import TextModel, parse_json_object

logger = logging.getLogger(__name__)

RECOMMENDATIONS: tuple[str, ...] = get_args(Recommendation)

CRITIC_PERSONA = """You are a hard-nosed, no-nonsense UK property critic who has seen every estate-agent trick in the book. You assess listings with a blunt, straight-talking style.

PERSONALITY:
- Direct and brutally honest
- Treats property as an investment, not just a home
- Quotes specific numbers from the data to back every claim
- Opinionated and decisive; never sits on the fence without a reason

STYLE:
- Open with a strong statement
- Weigh the price against the valuations, costs and local market
- Keep it to one paragraph

You must respond with a valid JSON object:
{
  "analysis": "your one-paragraph assessment",
  "recommendation": "BUY" | "DON'T_BUY" | "NEUTRAL"
}"""

ANALYSIS_TEMPLATE = """Based on the following property data, give your brutally honest assessment of whether this property is worth buying:

Property Details:
- Address: {address}
- Price: £{price:,.0f}
- Price per sqm: £{price_per_sq_m:,.0f}/sqm
- Bedrooms: {bedrooms}
- Bathrooms: {bathrooms:g}
- Property Type: {property_type}
- Tenure: {tenure}
- Condition: {condition}
- Days on market: {market_time}

Market Analysis:
- Zoopla Valuation: £{zoopla:,.0f}
- ONS Valuation: £{ons:,.0f}
- Acadata Valuation: £{acadata:,.0f}
- Last Sale Price: £{last_sale_price:,.0f} ({last_sale_year})
- Growth Since Last Sale: {growth:g}%
- Value for Money Score: {value_for_money:g}/10

Financial Costs:
- SDLT: £{sdlt:,.0f}
- Total Purchase Costs: £{total_costs:,.0f}

Local Area:
- ONS Area Price Change: {ons_area_change:g}%
- Postcode average for this property type: {postcode_average}

Provide your analysis and recommendation in the required JSON format."""

OVERPRICED_RATIO = 1.1
MODEST_GROWTH_PCT = 10.0
POOR_VALUE_SCORE = 5.0


def _postcode_average(record: PropertyRecord) -> str:
    field = (record.property_type or "").replace("-", "_")
    value = getattr(record.local_area.postcode_average, field, None) if field else None
    return f"£{value:,.0f}" if value else "n/a"


def build_prompt(record: PropertyRecord) -> str:
    analysis = ANALYSIS_TEMPLATE.format(
        address=record.address,
        price=record.price,
        price_per_sq_m=record.price_per_sq_m,
        bedrooms=record.bedrooms,
        bathrooms=record.bathrooms,
        property_type=record.property_type or "unknown",
        tenure=record.tenure,
        condition=record.condition,
        market_time=record.market_time,
        zoopla=record.indices.zoopla,
        ons=record.indices.ons,
        acadata=record.indices.acadata,
        last_sale_price=record.history.last_sale_price,
        last_sale_year=record.history.last_sale_date.year,
        growth=record.history.growth_since_last_sale,
        value_for_money=record.value_for_money,
        sdlt=record.costs.sdlt,
        total_costs=record.costs.total,
        ons_area_change=record.local_area.ons_area_change,
        postcode_average=_postcode_average(record),
    )
    return f"{CRITIC_PERSONA}\n\n{analysis}"


def risk_factors(record: PropertyRecord) -> list[str]:
    risks: list[str] = []

    idx = record.indices
    avg_valuation = (idx.zoopla + idx.ons + idx.acadata) / 3
    if avg_valuation > 0 and record.price > avg_valuation * OVERPRICED_RATIO:
        pct = round((record.price / avg_valuation - 1) * 100)
        risks.append(f"Property is priced {pct}% above average valuations")

    growth = record.history.growth_since_last_sale
    if growth < MODEST_GROWTH_PCT:
        risks.append(f"Modest growth of only {growth:g}% since last sale")

    if record.value_for_money <= POOR_VALUE_SCORE:
        risks.append("Below average value for money score")

    return risks


def _fallback_verdict(record: PropertyRecord, risks: list[str]) -> str:
    head = f"{record.address} at £{record.price:,.0f} scores {record.value_for_money:g}/10 for value."
    if not risks:
        return head + " No red flags in the numbers, but no model was available for a full verdict."
    return head + " Red flags: " + "; ".join(risks) + "."


def parse_verdict(text: str) -> tuple[str, str]:
    """(analysis, recommendation) from model output; raw text + NEUTRAL when unparsable."""
    try:
        payload = parse_json_object(text)
    except ValueError:
        return text.strip(), "NEUTRAL"
    analysis = payload.get("analysis")
    recommendation = payload.get("recommendation")
    if not isinstance(analysis, str) or not analysis.strip():
        analysis = text.strip()
    if recommendation not in RECOMMENDATIONS:
        recommendation = "NEUTRAL"
    return analysis, recommendation


def critique(record: PropertyRecord, model: TextModel | None) -> CriticVerdict:
    """
    Produce a CriticVerdict. Without a model (or when the call fails) the
    verdict is a deterministic summary with a NEUTRAL recommendation.
    """
    risks = risk_factors(record)
    if model is None:
        return CriticVerdict(overall_verdict=_fallback_verdict(record, risks), recommendation="NEUTRAL", risk_factors=risks)

    try:
        text = model.generate(build_prompt(record))
    except Exception as e:  # noqa: BLE001
        logger.warning("Critic model call failed (%s: %s); using deterministic verdict", type(e).__name__, e)
        return CriticVerdict(overall_verdict=_fallback_verdict(record, risks), recommendation="NEUTRAL", risk_factors=risks)

    analysis, recommendation = parse_verdict(text)
    return CriticVerdict(overall_verdict=analysis, recommendation=recommendation, risk_factors=risks)


__all__ = ["CRITIC_PERSONA", "build_prompt", "risk_factors", "parse_verdict", "critique"]
