# listing_critic/schemas/models.py

from __future__ import annotations

import re
from datetime import datetime
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic.networks import HttpUrl

# =========================
# Enumerations
# =========================

PropertyType = Literal[
    "detached",
    "semi-detached",
    "terraced",
    "flat",
    "maisonette",
    "bungalow",
    "cottage",
    "townhouse",
]
Tenure = Literal["freehold", "leasehold", "shared-ownership", "commonhold"]
Condition = Literal["ready-to-move", "renovation", "structural-project"]
Recommendation = Literal["BUY", "DON'T_BUY", "NEUTRAL"]

PROPERTY_TYPES: tuple[str, ...] = get_args(PropertyType)
TENURES: tuple[str, ...] = get_args(Tenure)
CONDITIONS: tuple[str, ...] = get_args(Condition)

_LISTING_DATE_RE = re.compile(r"^\d{1,2}/\d{1,2}/\d{4}$")
_HTTP_URL = TypeAdapter(HttpUrl)


def _check_image_urls(urls: list[str]) -> list[str]:
    for u in urls:
        try:
            _HTTP_URL.validate_python(u)
        except ValidationError as e:
            raise ValueError(f"Invalid image URL: {u!r}") from e
    return urls


# =========================
# Fetch policy
# =========================


class FetchPolicy(BaseModel):
    """
    Politeness and transport settings for the listing fetcher.

    No retries are modelled: a blocked or failed fetch degrades to the
    URL-pattern fallback instead.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    delay_s: float = Field(1.0, ge=0, description="Artificial delay before each listing request (seconds).")
    timeout_s: float = Field(20.0, gt=0, description="HTTP timeout in seconds.")
    user_agent: str = Field(
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        description="Browser-like User-Agent sent with listing requests.",
    )
    base_url: str = Field("https://www.rightmove.co.uk", description="Origin used to absolutize root-relative URLs.")


class ScrapeResult(BaseModel):
    """
    Hand-off contract from the fetcher to the field extractors.

    `text` is a deliberately redundant, multi-labelled blob ("Price: ...",
    "Meta Price: ...", "Found prices: ..."); downstream extractors disambiguate.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: str = Field(..., description="Listing URL that was requested.")
    text: str = Field(..., description="Labelled text blob, or the URL-pattern fallback note.")
    images: list[str] = Field(default_factory=list, description="Resolved gallery image URLs (may be empty).")
    fallback_used: bool = Field(False, description="True when the page could not be read and the URL fallback was used.")


# =========================
# Extraction (transient)
# =========================


class ExtractedFields(BaseModel):
    """
    Raw listing facts produced by the LLM or the regex fallback.

    Every field is independently optional. Bounds mirror the sanity checks of
    the regex extractor so LLM payloads can be validated against the same rules.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    address: str | None = Field(None, min_length=1)
    price: float | None = Field(None, ge=0, description="Asking price in GBP.")
    square_meters: float | None = Field(None, gt=0)
    bedrooms: int | None = Field(None, ge=1, le=20)
    bathrooms: int | None = Field(None, ge=1, le=15)
    property_type: PropertyType | None = None
    tenure: Tenure | None = None
    condition: Condition | None = None
    listing_date: str | None = Field(None, description="DD/MM/YYYY, verbatim from the listing.")
    price_reduction_date: str | None = Field(None, description="DD/MM/YYYY, verbatim from the listing.")
    images: list[str] = Field(default_factory=list)

    source: Literal["llm", "regex"] = Field("regex", description="Which extractor produced the values.")

    @field_validator("listing_date", "price_reduction_date")
    @classmethod
    def _dd_mm_yyyy(cls, v: str | None) -> str | None:
        if v is not None and not _LISTING_DATE_RE.match(v):
            raise ValueError("expected DD/MM/YYYY")
        return v

    @field_validator("images")
    @classmethod
    def _well_formed_images(cls, v: list[str]) -> list[str]:
        return _check_image_urls(v)

    def merged_with(self, other: ExtractedFields) -> ExtractedFields:
        """Fill this extraction's missing fields from `other` (self wins when set)."""
        update: dict[str, object] = {}
        for name in EXTRACTED_FIELD_NAMES:
            mine = getattr(self, name)
            if mine is None or (name == "images" and not mine):
                theirs = getattr(other, name)
                if theirs is not None:
                    update[name] = theirs
        return self.model_copy(update=update) if update else self

    def extracted_count(self) -> int:
        """How many of the core facts were actually found."""
        return sum(1 for name in CORE_FIELD_NAMES if getattr(self, name) is not None)


EXTRACTED_FIELD_NAMES: tuple[str, ...] = (
    "address",
    "price",
    "square_meters",
    "bedrooms",
    "bathrooms",
    "property_type",
    "tenure",
    "condition",
    "listing_date",
    "price_reduction_date",
    "images",
)

# Facts that feed the confidence score
CORE_FIELD_NAMES: tuple[str, ...] = (
    "address",
    "price",
    "square_meters",
    "bedrooms",
    "bathrooms",
    "property_type",
    "tenure",
    "condition",
)


# =========================
# Property record (validated)
# =========================


class _RecordModel(BaseModel):
    """Frozen, camelCase-serialised base for the public record."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True, extra="forbid")


class PriceIndices(_RecordModel):
    zoopla: float = Field(..., ge=0)
    ons: float = Field(..., ge=0)
    acadata: float = Field(..., ge=0)


class PriceReduction(_RecordModel):
    date: datetime
    amount: float = Field(..., ge=0)
    new_price: float = Field(..., ge=0)


class PropertyHistory(_RecordModel):
    last_sale_price: float = Field(..., ge=0)
    last_sale_date: datetime
    growth_since_last_sale: float = Field(..., description="Percent growth since the last recorded sale.")
    price_reductions: list[PriceReduction] = Field(default_factory=list)


class ListingDelta(_RecordModel):
    rightmove: float = Field(..., description="Percent delta vs. the listing site's own estimate.")
    acadata: float = Field(..., description="Percent delta vs. the Acadata index.")
    listing_date: datetime


class RecentSale(_RecordModel):
    address: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    date: datetime
    distance: str = Field(..., min_length=1)


class PostcodeAverage(_RecordModel):
    detached: float = Field(..., ge=0)
    semi_detached: float = Field(..., ge=0)
    terraced: float = Field(..., ge=0)
    flat: float = Field(..., ge=0)


class PriceHistoryEntry(_RecordModel):
    date: datetime
    price: float = Field(..., ge=0)


class LocalArea(_RecordModel):
    ons_area_change: float
    recent_sales: list[RecentSale] = Field(default_factory=list)
    area_average: float | None = Field(None, gt=0, description="Mean price per sq m for the postcode district.")
    postcode_average: PostcodeAverage
    price_history: list[PriceHistoryEntry] = Field(..., min_length=1)


class PropertyCosts(_RecordModel):
    sdlt: float = Field(..., ge=0)
    conveyancing: float = Field(..., ge=0)
    survey: float = Field(..., ge=0)

    @property
    def total(self) -> float:
        return self.sdlt + self.conveyancing + self.survey


class MortgagePayment(_RecordModel):
    deposit: float = Field(..., ge=0)
    ltv: float = Field(..., ge=0, le=100)
    monthly_payment: float = Field(..., ge=0)
    rate: float = Field(..., ge=0, description="Annual interest rate in percent.")


class MortgageData(_RecordModel):
    monthly_payments: list[MortgagePayment] = Field(..., min_length=1)


class PropertyRecord(_RecordModel):
    """
    Fully-populated, validated listing report.

    Serialise with `model_dump(mode="json", by_alias=True)` for the camelCase
    JSON shape consumed by the UI.
    """

    address: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    price_per_sq_m: float = Field(..., ge=0)
    bedrooms: int = Field(..., ge=0)
    bathrooms: float = Field(..., ge=0)
    tenure: Tenure
    property_type: PropertyType | None = None

    market_time: int = Field(..., ge=0, description="Days on the market.")
    value_for_money: float = Field(..., ge=0, le=10)
    condition: Condition
    listing_date: str | None = None
    price_reduction_date: str | None = None

    indices: PriceIndices
    history: PropertyHistory
    listing_delta: ListingDelta
    local_area: LocalArea
    costs: PropertyCosts
    mortgage: MortgageData

    images: list[str] | None = None
    last_updated: datetime | None = None
    data_source: str | None = None
    confidence: float | None = Field(None, ge=0, le=1)

    @field_validator("images")
    @classmethod
    def _well_formed_images(cls, v: list[str] | None) -> list[str] | None:
        return _check_image_urls(v) if v is not None else v

    def summary(self) -> str:
        bits = [self.address, f"£{self.price:,.0f}", f"£{self.price_per_sq_m:,.0f}/sqm"]
        bits.append(f"{self.bedrooms} bd / {self.bathrooms:g} ba")
        if self.property_type:
            bits.append(self.property_type)
        bits.append(self.tenure)
        bits.append(f"VfM {self.value_for_money:.1f}/10")
        if self.confidence is not None:
            bits.append(f"confidence={self.confidence:.2f}")
        return " | ".join(bits)


# =========================
# Critic output
# =========================


class CriticVerdict(BaseModel):
    """Stylised verdict on a PropertyRecord plus deterministic risk factors."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    overall_verdict: str = Field(..., description="One-paragraph critic analysis.")
    recommendation: Recommendation = "NEUTRAL"
    risk_factors: list[str] = Field(default_factory=list)


# =========================
# Pipeline result
# =========================


class ListingAnalysis(BaseModel):
    """Everything one listing run produced, for callers that need more than the record."""

    model_config = ConfigDict(frozen=True)

    url: str
    record: PropertyRecord
    extracted: ExtractedFields
    fallback_used: bool = Field(False, description="True when the page could not be read and the URL fallback was used.")
    area_average_applied: bool = False
