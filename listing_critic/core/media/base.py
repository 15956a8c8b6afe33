# listing_critic/core/media/base.py
"""
Cross-layer contract for listing image discovery.

`PageStateProvider` is how the image resolver mines client-side page state
(inline JSON assigned to a window global, hydration blobs, ...) without
knowing any site's variable names. Concrete providers live in
`page_state.py`; the resolver consults them in order after its CSS selectors.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from bs4 import BeautifulSoup


@runtime_checkable
class PageStateProvider(Protocol):
    """
    Protocol for page-state image mining.

    Implementations must be pure (no network I/O) and operate on the already
    parsed document. They return raw image URLs in page order; filtering,
    normalisation and de-duplication are the resolver's job.
    """

    name: str

    def find_images(self, soup: BeautifulSoup) -> list[str]:
        """Return candidate image URLs found in the page's embedded state."""
        ...


__all__ = ["PageStateProvider"]
