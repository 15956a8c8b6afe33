# listing_critic/core/fetch/html_fetcher.py
"""
Polite listing fetcher with URL-pattern fallback.

A single GET per listing, issued with browser-like headers after a fixed
politeness delay. Blocks (403/429) and transport failures degrade to a
text block derived from the URL; any other non-2xx status is an error.
"""

from __future__ import annotations

import logging
import time

import requests
from bs4 import BeautifulSoup

from listing_critic.core.media.image_finder import ListingImageFinder
from listing_critic.core.normalize.listing_html import extract_listing_text
from listing_critic.schemas.models import FetchPolicy, ScrapeResult

from .errors import (
    BLOCK_STATUS_CODES,
    RECOVERABLE_FETCH_ERRORS,
    BlockedError,
    HttpStatusError,
    fetcher_error_guard,
)
from .url_fallback import extract_from_url_pattern

logger = logging.getLogger(__name__)

# -------------------------
# Internal HTTP helpers
# -------------------------


def browser_headers(policy: FetchPolicy) -> dict[str, str]:
    return {
        "User-Agent": policy.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7",
        "Accept-Language": "en-GB,en-US;q=0.9,en;q=0.8",
        "Accept-Encoding": "gzip, deflate, br",
        "DNT": "1",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "cross-site",
        "Sec-Fetch-User": "?1",
        "Cache-Control": "max-age=0",
        "Referer": "https://www.google.com/",
    }


def _http_get(url: str, policy: FetchPolicy) -> requests.Response:
    return requests.get(url, headers=browser_headers(policy), timeout=policy.timeout_s)


# -------------------------
# Public API
# -------------------------


def fetch_html(url: str, *, policy: FetchPolicy | None = None) -> str:
    """
    Fetch raw listing HTML.

    Raises:
        BlockedError:    403/429 from the site.
        HttpStatusError: any other non-2xx status.
        NetworkError:    DNS, connection or timeout failures.
    """
    pol = policy or FetchPolicy()
    if pol.delay_s > 0:
        time.sleep(pol.delay_s)

    with fetcher_error_guard():
        resp = _http_get(url, pol)
        code = resp.status_code
        if code in BLOCK_STATUS_CODES:
            raise BlockedError(f"Access blocked (HTTP {code})", status_code=code)
        if not 200 <= code < 300:
            raise HttpStatusError(f"HTTP error! status: {code}", status_code=code, url=url)
        logger.debug("Fetched %s (%d bytes)", url, len(resp.content or b""))
        return resp.text


def scrape_listing(
    url: str,
    *,
    policy: FetchPolicy | None = None,
    image_finder: ListingImageFinder | None = None,
) -> ScrapeResult:
    """
    Fetch a listing page and flatten it into the labelled text blob.

    Blocks and network failures never raise: the result carries the
    URL-pattern note and `fallback_used=True`. HttpStatusError propagates.
    """
    pol = policy or FetchPolicy()
    try:
        html = fetch_html(url, policy=pol)
    except RECOVERABLE_FETCH_ERRORS as e:
        logger.warning("Fetch of %s failed (%s); using URL-pattern fallback", url, e)
        return ScrapeResult(url=url, text=extract_from_url_pattern(url), fallback_used=True)

    soup = BeautifulSoup(html, "lxml")
    finder = image_finder or ListingImageFinder(base_url=pol.base_url)
    images = finder.find(soup)
    text = extract_listing_text(soup, images=images)

    if not text.strip():
        logger.warning("No listing content recognised on %s; using URL-pattern fallback", url)
        return ScrapeResult(url=url, text=extract_from_url_pattern(url), images=images, fallback_used=True)

    logger.info("Scraped %s: %d chars of text, %d images", url, len(text), len(images))
    return ScrapeResult(url=url, text=text, images=images)


__all__ = ["browser_headers", "fetch_html", "scrape_listing"]
