# listing_critic/core/fetch/errors.py
"""
Typed errors + utilities for the listing fetcher.

Exports
-------
- HtmlFetcherError, NetworkError, HttpStatusError, BlockedError
- RECOVERABLE_FETCH_ERRORS
- classify_fetcher_error(exc)
- fetcher_error_guard()
- BLOCK_STATUS_CODES

Only `HttpStatusError` is meant to reach callers of `scrape_listing`; blocks
and transport failures are recovered with the URL-pattern fallback.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import requests

from listing_critic.errors import ListingCriticError

# Rate-limit / bot-wall responses that degrade to the URL-pattern fallback
BLOCK_STATUS_CODES = frozenset({403, 429})

# =========================
# Exception types
# =========================


class HtmlFetcherError(ListingCriticError):
    """Base class for listing fetch failures."""


class NetworkError(HtmlFetcherError):
    """Transport-level failure (DNS, connection reset, timeout)."""


class HttpStatusError(HtmlFetcherError):
    """Non-2xx response that is not a block; carries the status code."""

    def __init__(self, message: str, *, status_code: int, url: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class BlockedError(HtmlFetcherError):
    """The site answered 403/429; the page content is not available."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


# Errors that `scrape_listing` turns into a URL-pattern fallback
RECOVERABLE_FETCH_ERRORS = (BlockedError, NetworkError)

# =========================
# Classification helpers
# =========================


def classify_fetcher_error(exc: Exception) -> HtmlFetcherError:
    """
    Map arbitrary exceptions raised inside the fetcher to a typed HtmlFetcherError.

    Heuristics:
      - Any HtmlFetcherError subclass → passed through
      - requests.HTTPError with a response → BlockedError / HttpStatusError
      - other requests.* errors → NetworkError
      - Fallback → HtmlFetcherError
    """
    if isinstance(exc, HtmlFetcherError):
        return exc

    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        code = exc.response.status_code
        if code in BLOCK_STATUS_CODES:
            return BlockedError(f"HTTP {code}", status_code=code)
        return HttpStatusError(f"HTTP error! status: {code}", status_code=code, url=exc.response.url)

    if isinstance(exc, requests.RequestException):
        return NetworkError(f"{type(exc).__name__}: {exc}")

    return HtmlFetcherError(f"{type(exc).__name__}: {exc}")


@contextmanager
def fetcher_error_guard() -> Iterator[None]:
    """Context manager to normalize unexpected exceptions from fetcher internals."""
    try:
        yield
    except HtmlFetcherError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise classify_fetcher_error(exc) from exc


__all__ = [
    "BLOCK_STATUS_CODES",
    "HtmlFetcherError",
    "NetworkError",
    "HttpStatusError",
    "BlockedError",
    "RECOVERABLE_FETCH_ERRORS",
    "classify_fetcher_error",
    "fetcher_error_guard",
]
