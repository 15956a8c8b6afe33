# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import make_record, FakeTextModel
"""

from .utils import FakeTextModel, make_extracted, make_record

__all__ = ["make_record", "make_extracted", "FakeTextModel"]
