# listing_critic/core/ai/area_average.py
"""
Area-average enrichment.

Looks up the mean price per sq m for a postcode district on the Housemetric
results page (the figure is read off the page by the LLM) and rescores a
record's value for money against it.

Exports
-------
- AreaAverageService(model, url, timeout_s).lookup(postcode) -> float
- extract_postcode_district(address) -> str | None
- value_for_money_score(area_average, price_per_sq_m) -> float
- apply_area_average(record, area_average) -> PropertyRecord
"""

from __future__ import annotations

import logging
import re

import requests
from bs4 import BeautifulSoup
from pydantic import ValidationError

from listing_critic.errors import AreaAverageError, InvalidRecordError
from listing_critic.schemas.models import FetchPolicy, PropertyRecord

from .llm import TextModel

logger = logging.getLogger(__name__)

AREA_AVERAGE_PROMPT = (
    "You are provided with the text of a Housemetric postcode results page. "
    "Extract the mean price per square metre for the postcode {postcode}. "
    "Respond ONLY with the numeric value in pounds, no other text.\n\n"
    "PAGE:\n{page}"
)

_POSTCODE_DISTRICT_RE = re.compile(r"\b[A-Z]{1,2}\d[A-Z\d]?\b")
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")

MAX_PAGE_CHARS = 60_000


def extract_postcode_district(address: str) -> str | None:
    """Outward code ("CV37", "SW1A", "N1") of a UK address; the last one wins."""
    matches = _POSTCODE_DISTRICT_RE.findall(address or "")
    return matches[-1] if matches else None


def parse_area_average(text: str) -> float:
    cleaned = re.sub(r"[,£Â]", "", text or "")
    m = _NUMBER_RE.search(cleaned)
    if not m:
        raise AreaAverageError(f"Failed to parse area average from model output: {text[:80]!r}")
    value = float(m.group(0))
    if value <= 0:
        raise AreaAverageError(f"Area average must be positive, got {value}")
    return value


def value_for_money_score(area_average: float, price_per_sq_m: float) -> float:
    """(area average / price per sq m) x 10, one decimal, clamped to 0..10."""
    if price_per_sq_m <= 0:
        raise ValueError("price_per_sq_m must be > 0")
    score = round(area_average / price_per_sq_m * 10, 1)
    return min(10.0, max(0.0, score))


def apply_area_average(record: PropertyRecord, area_average: float) -> PropertyRecord:
    """
    Return a new validated record carrying `area_average` and the rescored
    value for money. A record without a usable price per sq m is returned unchanged.
    """
    if record.price_per_sq_m <= 0:
        return record

    data = record.model_dump()
    data["local_area"]["area_average"] = area_average
    data["value_for_money"] = value_for_money_score(area_average, record.price_per_sq_m)
    try:
        return PropertyRecord.model_validate(data)
    except ValidationError as e:
        raise InvalidRecordError(
            f"PropertyRecord failed validation: {e.error_count()} error(s)",
            errors=e.errors(include_url=False, include_context=False, include_input=False),
        ) from e


class AreaAverageService:
    """Postcode → mean £/sq m via the results page plus an LLM read-off."""

    def __init__(
        self,
        model: TextModel,
        url: str = "https://housemetric.co.uk/results",
        timeout_s: float = 20.0,
        user_agent: str | None = None,
    ) -> None:
        self.model = model
        self.url = url
        self.timeout_s = timeout_s
        self.user_agent = user_agent or FetchPolicy().user_agent

    def fetch_page(self, postcode: str) -> str:
        try:
            resp = requests.get(
                self.url,
                params={"str_input": postcode},
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout_s,
            )
        except requests.RequestException as e:
            raise AreaAverageError(f"Failed to fetch postcode data: {e}") from e
        if not 200 <= resp.status_code < 300:
            raise AreaAverageError(f"Failed to fetch postcode data ({resp.status_code})")
        return resp.text

    def extract_average(self, html: str, postcode: str) -> float:
        page = BeautifulSoup(html, "lxml").get_text(" ", strip=True)[:MAX_PAGE_CHARS]
        prompt = AREA_AVERAGE_PROMPT.format(postcode=postcode, page=page)
        try:
            text = self.model.generate(prompt)
        except Exception as e:  # noqa: BLE001
            raise AreaAverageError(f"Area average model call failed: {e}") from e
        return parse_area_average(text)

    def lookup(self, postcode: str) -> float:
        postcode = (postcode or "").strip()
        if not postcode:
            raise AreaAverageError("Postcode is required")
        value = self.extract_average(self.fetch_page(postcode), postcode)
        logger.info("Area average for %s: £%.0f/sqm", postcode, value)
        return value


__all__ = [
    "AreaAverageService",
    "extract_postcode_district",
    "parse_area_average",
    "value_for_money_score",
    "apply_area_average",
]
