# listing_critic/core/fetch/__init__.py
from .errors import (
    BLOCK_STATUS_CODES,
    RECOVERABLE_FETCH_ERRORS,
    BlockedError,
    HtmlFetcherError,
    HttpStatusError,
    NetworkError,
    classify_fetcher_error,
    fetcher_error_guard,
)
from .html_fetcher import browser_headers, fetch_html, scrape_listing
from .url_fallback import extract_from_url_pattern, listing_id_from_url, validate_listing_url

__all__ = [
    "HtmlFetcherError",
    "NetworkError",
    "HttpStatusError",
    "BlockedError",
    "BLOCK_STATUS_CODES",
    "RECOVERABLE_FETCH_ERRORS",
    "classify_fetcher_error",
    "fetcher_error_guard",
    "browser_headers",
    "fetch_html",
    "scrape_listing",
    "extract_from_url_pattern",
    "listing_id_from_url",
    "validate_listing_url",
]
