# listing_critic/core/media/__init__.py
from .base import PageStateProvider
from .image_finder import (
    ListingImageFinder,
    canonical_image_url,
    is_acceptable_quality,
    is_system_image,
    normalize_image_url,
)
from .page_state import NullPageStateProvider, RightmovePageModelProvider

__all__ = [
    "PageStateProvider",
    "RightmovePageModelProvider",
    "NullPageStateProvider",
    "ListingImageFinder",
    "normalize_image_url",
    "canonical_image_url",
    "is_acceptable_quality",
    "is_system_image",
]
