# listing_critic/errors.py
"""
Typed errors shared across the pipeline.

Hierarchy
---------
ListingCriticError (base)
├── ConfigurationError      invalid environment / settings
├── UnsupportedUrlError     input rejected before any network I/O
├── InvalidRecordError      final PropertyRecord failed schema validation
├── AreaAverageError        area-average lookup could not produce a number
└── HtmlFetcherError        see listing_critic.core.fetch.errors
"""

from __future__ import annotations


class ListingCriticError(Exception):
    """Base class for all listing-critic failures."""

    def __init__(self, message: str, *args: object) -> None:
        self.message = message
        super().__init__(message, *args)


class ConfigurationError(ListingCriticError):
    """Raised when settings cannot be loaded from the environment."""


class UnsupportedUrlError(ListingCriticError):
    """The URL is not a listing on the supported site."""


class InvalidRecordError(ListingCriticError):
    """A built PropertyRecord violated a schema invariant."""

    def __init__(self, message: str, errors: list[dict[str, object]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class AreaAverageError(ListingCriticError):
    """The area-average lookup failed or returned no usable figure."""


__all__ = [
    "ListingCriticError",
    "ConfigurationError",
    "UnsupportedUrlError",
    "InvalidRecordError",
    "AreaAverageError",
]
