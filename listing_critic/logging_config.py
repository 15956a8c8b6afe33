# listing_critic/logging_config.py
"""
Logging setup for listing-critic.

Usage:
    from listing_critic.logging_config import setup_logging

    setup_logging()                 # once, at process start (CLI / server)
    logger = logging.getLogger(__name__)

Modules never configure handlers themselves; they only call
`logging.getLogger(__name__)`, which sits under the `listing_critic` logger.
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

PACKAGE_LOGGER = "listing_critic"

_configured = False


def setup_logging(level: str | None = None, log_file: str | None = None, *, force: bool = False) -> logging.Logger:
    """
    Configure the package logger once: console handler plus optional rotating file.

    Args:
        level:    DEBUG/INFO/WARNING/ERROR. Defaults to INFO.
        log_file: Optional path; parent directories are created.
        force:    Reconfigure even if already set up (tests, REPL reloads).
    """
    global _configured
    logger = logging.getLogger(PACKAGE_LOGGER)
    if _configured and not force:
        return logger

    numeric_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logger.setLevel(numeric_level)
    logger.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False

    # Third-party noise
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    _configured = True
    return logger


def redact(text: str) -> str:
    """Strip API keys from text before it reaches a log line."""
    for k in ("OPENAI_API_KEY",):
        val = os.getenv(k)
        if val:
            text = text.replace(val, "[REDACTED]")
    return text


def preview(text: str, limit: int = 2000) -> str:
    return text if len(text) <= limit else text[:limit] + "…"


__all__ = ["PACKAGE_LOGGER", "setup_logging", "redact", "preview"]
