# listing_critic/core/media/image_finder.py
"""
Listing gallery image resolver.

Scans a parsed listing page for gallery photos and returns a de-duplicated,
quality-filtered list of absolute URLs. It never downloads bytes.

Source order (first seen wins on duplicates):
  1. Gallery / generic CSS selectors (`src`, `data-src`, `data-lazy-src`)
  2. PageStateProvider implementations (e.g. window.PAGE_MODEL)
  3. CDN image URLs found anywhere in inline script text

If nothing survives the filters, a looser pass keeps any CDN-hosted <img>
that is not obviously a logo, icon or agent photo.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from bs4 import BeautifulSoup

from .base import PageStateProvider
from .page_state import RightmovePageModelProvider

logger = logging.getLogger(__name__)

# -----------------------
# Tables
# -----------------------

IMAGE_SELECTORS: tuple[str, ...] = (
    '[data-testid="gallery-main"] img',
    '[data-testid="media-viewer-main"] img',
    '[class*="gallery-main"] img',
    '[class*="media-main"] img',
    '[data-testid="gallery"]:not([class*="thumb"]) img',
    '[data-testid="media-viewer"]:not([class*="thumb"]) img',
    '[class*="gallery"]:not([class*="thumb"]):not([class*="thumbnail"]) img',
    '[data-testid*="gallery"] img',
    '[data-testid*="media"] img',
    '[class*="PropertyImages"] img',
    '[class*="propertyImages"] img',
    '[class*="Gallery"] img',
    '[class*="MediaGallery"] img',
    'img[src*="media.rightmove"][src*="/max/"]',
    'img[src*="media.rightmove"][src*="/640x"]',
    'img[src*="media.rightmove"][src*="/480x"]',
    'img[data-src*="media.rightmove"][data-src*="/max/"]',
    'img[data-src*="media.rightmove"][data-src*="/640x"]',
    'img[src*="media.rightmove"]',
    'img[data-src*="media.rightmove"]',
    'img[src*="rightmove-static"]',
    'img[data-src*="rightmove-static"]',
    'img[alt*="bedroom"]:not([class*="thumb"])',
    'img[alt*="kitchen"]:not([class*="thumb"])',
    'img[alt*="living"]:not([class*="thumb"])',
    'img[alt*="bathroom"]:not([class*="thumb"])',
)

SRC_ATTRS = ("src", "data-src", "data-lazy-src")
CDN_HOSTS = ("media.rightmove", "rightmove-static")

_PROPERTY_IMAGE_RE = re.compile(r"_IMG_\d{1,2}_\d{1,4}\.(?:jpe?g|png|webp)$", re.IGNORECASE)
_IMAGE_EXT_RE = re.compile(r"\.(?:jpe?g|png|webp)$", re.IGNORECASE)
_THUMBNAIL_MARKERS = ("_thumb", "_small", "/thumb", "_max_", "_bp_", "_ad_", "_mpu_", "_pd_")

_SYSTEM_MARKERS = (
    "logo", "icon", "avatar", "agent", "brand", "watermark",
    "overlay", "marker", "assets/", "static/images/", "banner",
    "badge", "stamp", "/text/", "_text_", "/UI/", "ui-",
    "branding", "_bp_", "/bp_", "_ad_",
    "/ad_", "_mpu_", "_pd_", "_promo_", "_sponsor_",
)
_SYSTEM_RES = (
    re.compile(r"/[A-Z]{2,}_"),
    re.compile(r"estate[-_]agent", re.IGNORECASE),
    re.compile(r"agent[-_]photo", re.IGNORECASE),
    re.compile(r"\d+_bp_"),
    re.compile(r"\d+_ad_"),
)
_FALLBACK_EXCLUDES = ("logo", "icon", "agent")

_SIZE_DIR_RE = re.compile(r"/\d+x\d+/")
_SIZE_SUFFIX_RE = re.compile(r"_(?:max_)?\d+x\d+(?=\.)")
_QUERY_RE = re.compile(r"\?.*$")

_SCRIPT_CDN_RE = re.compile(
    r"(?:https?:)?//(?:[\w-]+\.)*(?:media\.rightmove|rightmove-static)[\w.-]*/[^\s\"'<>\\]*?\.(?:jpe?g|png|webp)",
    re.IGNORECASE,
)

MAX_IMAGES = 20
MAX_FALLBACK_IMAGES = 15

# -----------------------
# URL helpers
# -----------------------


def normalize_image_url(url: str, base_url: str = "https://www.rightmove.co.uk") -> str:
    """Protocol-relative → https; root-relative → site origin."""
    url = url.strip()
    if url.startswith("//"):
        return "https:" + url
    if url.startswith("/"):
        return base_url.rstrip("/") + url
    return url


def canonical_image_url(url: str) -> str:
    """Strip size tokens, default port and query so resized copies compare equal."""
    out = _SIZE_DIR_RE.sub("/", url)
    out = _SIZE_SUFFIX_RE.sub("", out)
    out = out.replace(":443/", "/")
    return _QUERY_RE.sub("", out)


def is_cdn_image(url: str) -> bool:
    return any(host in url for host in CDN_HOSTS)


def is_acceptable_quality(url: str) -> bool:
    """Full-size gallery photo: `_IMG_NN_NNNN.ext` filename and no thumbnail/ad markers."""
    path = _QUERY_RE.sub("", url)
    is_property_image = bool(_PROPERTY_IMAGE_RE.search(path)) or (
        "_IMG_" in path and bool(_IMAGE_EXT_RE.search(path)) and "_max_" not in path
    )
    is_not_thumbnail = not any(marker in path for marker in _THUMBNAIL_MARKERS)
    return is_property_image and is_not_thumbnail


def is_system_image(url: str) -> bool:
    """Logos, badges, agent photos, ad slots and other page chrome."""
    return any(marker in url for marker in _SYSTEM_MARKERS) or any(rx.search(url) for rx in _SYSTEM_RES)


# -----------------------
# Finder
# -----------------------


class _Collector:
    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.urls: list[str] = []
        self._seen: set[str] = set()

    @property
    def full(self) -> bool:
        return len(self.urls) >= self.limit

    def add(self, url: str) -> bool:
        key = canonical_image_url(url)
        if self.full or url in self._seen or key in self._seen:
            return False
        self._seen.update((url, key))
        self.urls.append(url)
        return True


class ListingImageFinder:
    """
    Stateless gallery resolver; every `find()` call recomputes from the document.
    """

    def __init__(
        self,
        base_url: str = "https://www.rightmove.co.uk",
        providers: Sequence[PageStateProvider] | None = None,
    ) -> None:
        self.base_url = base_url
        self.providers: tuple[PageStateProvider, ...] = tuple(providers) if providers is not None else (RightmovePageModelProvider(),)

    def _img_sources(self, imgs: Iterable) -> Iterable[str]:
        for img in imgs:
            src = next((img.get(a) for a in SRC_ATTRS if img.get(a)), None)
            if src:
                yield src

    def _accept(self, raw: str, out: _Collector) -> None:
        url = normalize_image_url(raw, self.base_url)
        if is_cdn_image(url) and is_acceptable_quality(url) and not is_system_image(url):
            out.add(url)

    def _script_urls(self, soup: BeautifulSoup) -> Iterable[str]:
        for script in soup.find_all("script"):
            text = (script.string or script.get_text() or "").replace("\\/", "/")
            for m in _SCRIPT_CDN_RE.finditer(text):
                yield m.group(0)

    def _fallback(self, soup: BeautifulSoup) -> list[str]:
        out = _Collector(MAX_FALLBACK_IMAGES)
        for raw in self._img_sources(soup.find_all("img")):
            url = normalize_image_url(raw, self.base_url)
            lowered = url.lower()
            if is_cdn_image(url) and not any(x in lowered for x in _FALLBACK_EXCLUDES):
                out.add(url)
            if out.full:
                break
        return out.urls

    def find(self, soup: BeautifulSoup) -> list[str]:
        out = _Collector(MAX_IMAGES)

        for selector in IMAGE_SELECTORS:
            for raw in self._img_sources(soup.select(selector)):
                self._accept(raw, out)
            if out.full:
                return out.urls

        for provider in self.providers:
            for raw in provider.find_images(soup):
                self._accept(raw, out)
            if out.full:
                return out.urls

        for raw in self._script_urls(soup):
            self._accept(raw, out)
            if out.full:
                return out.urls

        if out.urls:
            return out.urls

        fallback = self._fallback(soup)
        if fallback:
            logger.debug("No gallery photos passed the quality filter; kept %d CDN images", len(fallback))
        return fallback


__all__ = [
    "IMAGE_SELECTORS",
    "ListingImageFinder",
    "normalize_image_url",
    "canonical_image_url",
    "is_acceptable_quality",
    "is_system_image",
    "is_cdn_image",
]
