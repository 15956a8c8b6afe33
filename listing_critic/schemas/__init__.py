from .models import (
    CONDITIONS,
    PROPERTY_TYPES,
    TENURES,
    CriticVerdict,
    ExtractedFields,
    FetchPolicy,
    ListingAnalysis,
    PropertyRecord,
    ScrapeResult,
)

__all__ = [
    "CONDITIONS",
    "PROPERTY_TYPES",
    "TENURES",
    "CriticVerdict",
    "ExtractedFields",
    "FetchPolicy",
    "ListingAnalysis",
    "PropertyRecord",
    "ScrapeResult",
]
