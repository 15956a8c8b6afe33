# listing_critic/core/fetch/url_fallback.py
"""
URL-pattern helpers: listing URL validation and the fallback text used
when a listing page cannot be read.
"""

from __future__ import annotations

import re
from urllib.parse import urlparse

from listing_critic.errors import UnsupportedUrlError

_LISTING_ID_RE = re.compile(r"rightmove\.co\.uk/properties/(\d+)")
_LISTING_PATH_RE = re.compile(r"^/properties/\d+")


def listing_id_from_url(url: str) -> str | None:
    m = _LISTING_ID_RE.search(url)
    return m.group(1) if m else None


def extract_from_url_pattern(url: str) -> str:
    """
    Best-effort text block derived only from the URL.

    Carries the numeric listing ID when the URL follows the property-path
    convention, plus a note that automatic extraction failed.
    """
    listing_id = listing_id_from_url(url)
    if listing_id:
        return (
            f"Property ID: {listing_id}\n"
            "Note: Unable to scrape full details due to access restrictions. "
            "Please provide the property details manually or try a different URL.\n"
        )
    return (
        f"URL: {url}\n"
        "Note: Unable to access property details due to website restrictions. "
        "Please provide the square meters and price manually, or try accessing the page "
        "directly and copying the relevant information.\n"
    )


def validate_listing_url(url: str) -> str:
    """
    Accept only listing pages on the supported site; raises UnsupportedUrlError
    before any network I/O otherwise. Returns the stripped URL.
    """
    url = (url or "").strip()
    parts = urlparse(url)
    host = (parts.hostname or "").lower()
    if parts.scheme not in ("http", "https") or not (host == "rightmove.co.uk" or host.endswith(".rightmove.co.uk")):
        raise UnsupportedUrlError(f"Please provide a valid Rightmove URL (got {url!r})")
    if not _LISTING_PATH_RE.match(parts.path):
        raise UnsupportedUrlError(f"Not a Rightmove property listing URL: {url!r}")
    return url
