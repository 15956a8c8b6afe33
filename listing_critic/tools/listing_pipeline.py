# listing_critic/tools/listing_pipeline.py
"""
Listing pipeline tool (listing URL → validated PropertyRecord [+ verdict]).

Pipeline (synchronous, single request per listing):
  1) core.fetch.validate_listing_url(url)          → UnsupportedUrlError before any I/O
  2) core.fetch.scrape_listing(url, policy)         → labelled text blob + images (URL fallback on 403/429/network)
  3) core.ai.extract_fields(text, model)            → ExtractedFields (regex fallback, never raises)
  4) core.build.build_property_record(fields)       → PropertyRecord (InvalidRecordError on schema violation)
  5) (optional) AreaAverageService.lookup(district) → rescored value for money
  6) (optional) core.ai.critique(record, model)     → CriticVerdict

This module is the single integration point for the API and the CLI.
"""

from __future__ import annotations

import logging
from datetime import datetime

from listing_critic.config import Settings
from listing_critic.core.ai import (
    AreaAverageService,
    TextModel,
    apply_area_average,
    build_text_model,
    critique,
    extract_fields,
    extract_postcode_district,
)
from listing_critic.core.build import build_property_record
from listing_critic.core.fetch import scrape_listing, validate_listing_url
from listing_critic.errors import AreaAverageError
from listing_critic.schemas.models import CriticVerdict, FetchPolicy, ListingAnalysis, PropertyRecord

logger = logging.getLogger(__name__)


def enrich_with_area_average(record: PropertyRecord, service: AreaAverageService) -> tuple[PropertyRecord, bool]:
    """
    Look up the record's postcode district and rescore value for money.
    Lookup failures are logged and leave the record untouched.
    """
    district = extract_postcode_district(record.address)
    if not district:
        logger.info("No postcode district in %r; skipping area average", record.address)
        return record, False
    try:
        area_average = service.lookup(district)
    except AreaAverageError as e:
        logger.warning("Area average lookup for %s failed: %s", district, e)
        return record, False
    return apply_area_average(record, area_average), True


def analyze_listing_url(
    url: str,
    *,
    policy: FetchPolicy | None = None,
    model: TextModel | None = None,
    area_service: AreaAverageService | None = None,
    now: datetime | None = None,
) -> ListingAnalysis:
    """
    Run the full pipeline for one listing URL.

    Raises:
        UnsupportedUrlError: the URL is not a listing on the supported site.
        HttpStatusError:     the site answered with a non-2xx status that is not a block.
        InvalidRecordError:  the assembled record violates a schema invariant.
    """
    url = validate_listing_url(url)
    scrape = scrape_listing(url, policy=policy)
    extracted = extract_fields(scrape.text, model)
    if not extracted.images and scrape.images:
        extracted = extracted.model_copy(update={"images": list(scrape.images)})

    record = build_property_record(extracted, estimated=scrape.fallback_used, now=now)

    applied = False
    if area_service is not None and not scrape.fallback_used:
        record, applied = enrich_with_area_average(record, area_service)

    logger.info("Analyzed %s: %s", url, record.summary())
    return ListingAnalysis(
        url=url,
        record=record,
        extracted=extracted,
        fallback_used=scrape.fallback_used,
        area_average_applied=applied,
    )


def critique_record(record: PropertyRecord, model: TextModel | None) -> CriticVerdict:
    return critique(record, model)


# ---------------------------
# Settings-facing wrappers
# ---------------------------


def build_area_service(settings: Settings, model: TextModel | None) -> AreaAverageService | None:
    """The area lookup reads its figure through the LLM, so it needs a model."""
    if model is None:
        return None
    return AreaAverageService(
        model=model,
        url=settings.area_average_url,
        timeout_s=settings.fetch_timeout_s,
        user_agent=settings.user_agent,
    )


def run_listing_pipeline(
    url: str,
    settings: Settings,
    *,
    with_area_average: bool = False,
    with_verdict: bool = False,
) -> tuple[ListingAnalysis, CriticVerdict | None]:
    """
    Settings-driven entrypoint used by the CLI.
    Returns the analysis plus the verdict when requested.
    """
    model = build_text_model(settings)
    area_service = build_area_service(settings, model) if with_area_average else None
    analysis = analyze_listing_url(url, policy=settings.fetch_policy(), model=model, area_service=area_service)
    verdict = critique_record(analysis.record, model) if with_verdict else None
    return analysis, verdict


__all__ = [
    "analyze_listing_url",
    "critique_record",
    "enrich_with_area_average",
    "build_area_service",
    "run_listing_pipeline",
]
