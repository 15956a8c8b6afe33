# listing_critic/api/__init__.py
"""JSON API over the listing pipeline."""

from .server import create_app, run_server

__all__ = ["create_app", "run_server"]
