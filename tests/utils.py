# tests/utils.py
"""
Single source of truth for test data, fakes, and canonical payloads.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

import requests

from listing_critic.core.build import build_property_record
from listing_critic.schemas.models import ExtractedFields, PropertyRecord

# -----------------------------
# Global defaults (edit once)
# -----------------------------

LISTING_ID = "123456789"
LISTING_URL = f"https://www.rightmove.co.uk/properties/{LISTING_ID}"
GALLERY_IMAGE = "https://media.rightmove.co.uk/147k/146153/123456789/146153_33166290_IMG_00_0000.jpeg"
FIXED_NOW = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)

DEFAULT_LISTING_HTML = f"""<!doctype html>
<html>
  <head>
    <title>3 bedroom semi-detached house for sale in Main Street, Tiddington, CV37</title>
    <meta property="product:price:amount" content="500000">
    <meta name="description" content="3 bedroom semi-detached house for sale. £500,000. 1,076 sq ft">
  </head>
  <body>
    <h1>Main Street, Tiddington, CV37</h1>
    <div class="property-header-price"><span>£500,000</span></div>
    <div data-testid="gallery-main">
      <img src="{GALLERY_IMAGE}" alt="Front">
    </div>
    <div class="key-facts">
      <div><dt>PROPERTY TYPE</dt><dd>Semi-Detached</dd></div>
      <div><dt>BEDROOMS</dt><dd>3</dd></div>
      <div><dt>BATHROOMS</dt><dd>2</dd></div>
      <div><dt>TENURE</dt><dd>Freehold</dd></div>
    </div>
    <ul class="key-features">
      <li>Three bedrooms</li>
      <li>South facing garden</li>
      <li>1,076 sq ft</li>
    </ul>
    <div>Added on 15/09/2026</div>
  </body>
</html>
"""

EMPTY_HTML = "<html><body><p>Nothing to see</p></body></html>"

LLM_FIELDS_JSON = json.dumps(
    {
        "address": "Main Street, Tiddington, CV37",
        "price": 500000,
        "square_meters": 100,
        "bedrooms": 3,
        "bathrooms": 2,
        "property_type": "semi-detached",
        "tenure": "freehold",
        "condition": "ready-to-move",
        "listing_date": "15/09/2026",
        "price_reduction_date": None,
        "images": None,
    }
)

# -----------------------------
# Fakes
# -----------------------------


class FakeResp:
    """Just enough of requests.Response for the fetchers."""

    def __init__(self, status_code: int = 200, text: str = "", url: str = LISTING_URL) -> None:
        self.status_code = status_code
        self.text = text
        self.content = text.encode("utf-8")
        self.url = url


class FakeGet:
    """Stand-in for requests.get: canned response (or exception) plus a call log."""

    def __init__(self, resp: FakeResp | None = None, exc: Exception | None = None) -> None:
        self.resp = resp or FakeResp()
        self.exc = exc
        self.calls: list[dict[str, Any]] = []

    def __call__(self, url: str, **kwargs: Any) -> FakeResp:
        self.calls.append({"url": url, **kwargs})
        if self.exc is not None:
            raise self.exc
        return self.resp


class FakeTextModel:
    """Deterministic TextModel; records prompts."""

    def __init__(self, reply: str = "{}", exc: Exception | None = None) -> None:
        self.reply = reply
        self.exc = exc
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.exc is not None:
            raise self.exc
        return self.reply


class FakeAreaService:
    def __init__(self, value: float = 4000.0, exc: Exception | None = None) -> None:
        self.value = value
        self.exc = exc
        self.postcodes: list[str] = []

    def lookup(self, postcode: str) -> float:
        self.postcodes.append(postcode)
        if self.exc is not None:
            raise self.exc
        return self.value


def http_error(status_code: int, url: str = LISTING_URL) -> requests.HTTPError:
    resp = requests.Response()
    resp.status_code = status_code
    resp.url = url
    return requests.HTTPError(f"HTTP {status_code}", response=resp)


# -----------------------------
# Factories
# -----------------------------


def make_extracted(**overrides: Any) -> ExtractedFields:
    data: dict[str, Any] = {
        "address": "Main Street, Tiddington, CV37",
        "price": 500_000.0,
        "square_meters": 100.0,
        "bedrooms": 3,
        "bathrooms": 2,
        "property_type": "semi-detached",
        "tenure": "freehold",
        "condition": "ready-to-move",
        "listing_date": "15/09/2026",
        "images": [GALLERY_IMAGE],
        "source": "llm",
    }
    data.update(overrides)
    return ExtractedFields(**data)


def make_record(**overrides: Any) -> PropertyRecord:
    return build_property_record(make_extracted(**overrides), now=FIXED_NOW)
