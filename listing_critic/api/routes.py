# listing_critic/api/routes.py
"""
API Routes for the listing critic

Provides REST API endpoints for:
- Listing URL → validated PropertyRecord
- Brutal-critic verdict on a PropertyRecord
- Area average (mean £/sq m) for a postcode
- Health
"""

from __future__ import annotations

import logging
from typing import Any

from flask import Blueprint, Flask, current_app, jsonify, request
from pydantic import ValidationError

from listing_critic import __version__
from listing_critic.core.fetch.errors import HttpStatusError
from listing_critic.errors import (
    AreaAverageError,
    InvalidRecordError,
    ListingCriticError,
    UnsupportedUrlError,
)
from listing_critic.schemas.models import PropertyRecord
from listing_critic.tools.listing_pipeline import analyze_listing_url, critique_record

logger = logging.getLogger(__name__)

EXTENSION_KEY = "listing_critic"

# Create blueprint
api = Blueprint("api", __name__, url_prefix="/api")


def _services() -> dict[str, Any]:
    return current_app.extensions[EXTENSION_KEY]


def _error(message: str, status: int, **extra: Any):
    return jsonify({"status": "error", "error": message, **extra}), status


def _json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# Error handlers
@api.errorhandler(UnsupportedUrlError)
def _unsupported_url(e: UnsupportedUrlError):
    return _error(e.message, 400)


@api.errorhandler(HttpStatusError)
def _upstream_status(e: HttpStatusError):
    logger.error("Listing fetch failed: %s", e.message)
    return _error(e.message, 502, upstreamStatus=e.status_code)


@api.errorhandler(InvalidRecordError)
def _invalid_record(e: InvalidRecordError):
    return _error(e.message, 422, details=e.errors)


@api.errorhandler(AreaAverageError)
def _area_average_failed(e: AreaAverageError):
    logger.error("Area average lookup failed: %s", e.message)
    return _error(e.message, 502)


@api.errorhandler(ListingCriticError)
def _listing_critic_error(e: ListingCriticError):
    logger.error("Unhandled pipeline error: %s", e.message)
    return _error(e.message, 500)


# Health
@api.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    svc = _services()
    return jsonify(
        {
            "status": "healthy",
            "version": __version__,
            "llmEnabled": svc["model"] is not None,
            "areaAverageEnabled": svc["area_service"] is not None,
        }
    )


# Listing extraction
@api.route("/chat/structured_output", methods=["POST"])
def structured_output():
    """Scrape a listing URL (last chat message, or `url`) into a PropertyRecord."""
    data = _json_body()
    messages = data.get("messages") or []
    url = data.get("url")
    if not url and messages and isinstance(messages[-1], dict):
        url = messages[-1].get("content")
    if not isinstance(url, str) or not url.strip():
        return _error("Please provide a valid Rightmove URL", 400)

    svc = _services()
    analysis = analyze_listing_url(url, policy=svc["policy"], model=svc["model"], area_service=None)
    return jsonify(analysis.record.model_dump(mode="json", by_alias=True)), 200


# Verdict
@api.route("/analysis/property", methods=["POST"])
def property_analysis():
    """Brutal-critic verdict on a PropertyRecord (`propertyData`)."""
    payload = _json_body().get("propertyData")
    if not payload:
        return _error("Property data is required", 400)

    try:
        record = PropertyRecord.model_validate(payload)
    except ValidationError as e:
        return _error(
            "Property data failed validation",
            422,
            details=e.errors(include_url=False, include_context=False, include_input=False),
        )

    verdict = critique_record(record, _services()["model"])
    return jsonify(verdict.model_dump(mode="json", by_alias=True)), 200


# Area average
@api.route("/area-average", methods=["POST"])
def area_average():
    """Mean price per sq m for a postcode district."""
    postcode = _json_body().get("postcode")
    if not isinstance(postcode, str) or not postcode.strip():
        return _error("Postcode is required", 400)

    service = _services()["area_service"]
    if service is None:
        return _error("Area average lookup needs a configured language model", 503)

    return jsonify({"areaAverage": service.lookup(postcode)}), 200


def register_routes(app: Flask) -> None:
    """Register API routes with Flask app."""
    app.register_blueprint(api)
    logger.info("API routes registered")
