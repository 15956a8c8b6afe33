# listing_critic/core/media/page_state.py
"""
PageStateProvider implementations.

- RightmovePageModelProvider: decodes `window.PAGE_MODEL = {...}` and walks it
  for `images` arrays of `{url, resizedImageUrls?}`.
- NullPageStateProvider: finds nothing (tests, non-Rightmove pages).
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_PAGE_MODEL_RE = re.compile(r"window\.PAGE_MODEL\s*=\s*")


def _walk_images(node: object) -> Iterator[str]:
    if isinstance(node, dict):
        for key, value in node.items():
            if key == "images" and isinstance(value, list):
                for img in value:
                    if not isinstance(img, dict):
                        continue
                    url = img.get("url")
                    if isinstance(url, str) and url:
                        yield url
                    resized = img.get("resizedImageUrls")
                    if isinstance(resized, dict):
                        yield from (u for u in resized.values() if isinstance(u, str) and u)
            else:
                yield from _walk_images(value)
    elif isinstance(node, list):
        for item in node:
            yield from _walk_images(item)


class RightmovePageModelProvider:
    """Mine gallery URLs from Rightmove's hydration global."""

    name = "rightmove-page-model"

    def __init__(self) -> None:
        self._decoder = json.JSONDecoder()

    def find_images(self, soup: BeautifulSoup) -> list[str]:
        for script in soup.find_all("script"):
            text = script.string or script.get_text() or ""
            m = _PAGE_MODEL_RE.search(text)
            if not m:
                continue
            try:
                data, _end = self._decoder.raw_decode(text, m.end())
            except json.JSONDecodeError as e:
                logger.debug("PAGE_MODEL present but not decodable: %s", e)
                continue
            return list(_walk_images(data))
        return []


class NullPageStateProvider:
    name = "null"

    def find_images(self, soup: BeautifulSoup) -> list[str]:
        return []


__all__ = ["RightmovePageModelProvider", "NullPageStateProvider"]
