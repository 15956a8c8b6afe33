# listing_critic/core/build/__init__.py
from .record_builder import build_property_record, market_time

__all__ = ["build_property_record", "market_time"]
