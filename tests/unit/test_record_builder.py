# tests/unit/test_record_builder.py
from datetime import datetime, timezone

import pytest

from listing_critic.core.build import build_property_record, market_time
from listing_critic.core.build.record_builder import DEFAULT_ADDRESS, DEFAULT_PRICE_PER_SQM, confidence, price_per_sq_m
from listing_critic.errors import InvalidRecordError
from listing_critic.schemas.models import ExtractedFields
from tests.utils import FIXED_NOW, GALLERY_IMAGE, make_extracted, make_record


def test_full_extraction_builds_scraped_record():
    record = make_record()
    assert record.address == "Main Street, Tiddington, CV37"
    assert record.price == 500_000
    assert record.price_per_sq_m == 5000
    assert record.bedrooms == 3
    assert record.bathrooms == 2
    assert record.property_type == "semi-detached"
    assert record.market_time == 16
    assert record.value_for_money == 7.0
    assert record.images == [GALLERY_IMAGE]
    assert record.data_source == "rightmove-scraping"
    assert record.confidence == pytest.approx(0.9)
    assert record.last_updated == FIXED_NOW


def test_costs_and_mortgage_are_computed():
    record = make_record()
    assert record.costs.sdlt == 12_500
    assert record.costs.total == 12_500 + 1500 + 600
    payments = record.mortgage.monthly_payments
    assert [p.ltv for p in payments] == [90, 80, 70]
    assert payments[0].deposit == 50_000


def test_placeholders_derive_from_price():
    record = make_record()
    assert record.indices.zoopla == 500_000
    assert record.indices.ons == 490_000
    assert record.indices.acadata == 510_000
    assert record.history.last_sale_price == 400_000
    assert record.local_area.postcode_average.semi_detached == 600_000
    assert record.local_area.price_history[0].price == 450_000


def test_empty_extraction_uses_defaults():
    record = build_property_record(ExtractedFields(), now=FIXED_NOW)
    assert record.address == DEFAULT_ADDRESS
    assert record.price == 0
    assert record.price_per_sq_m == DEFAULT_PRICE_PER_SQM
    assert record.tenure == "freehold"
    assert record.condition == "ready-to-move"
    assert record.market_time == 30
    assert record.costs.sdlt == 0
    assert record.data_source == "rightmove-estimated"
    assert record.confidence == 0.0


def test_estimated_flag_halves_confidence():
    extracted = make_extracted()
    assert confidence(extracted, estimated=False) == pytest.approx(0.9)
    assert confidence(extracted, estimated=True) == pytest.approx(0.45)
    record = build_property_record(extracted, estimated=True, now=FIXED_NOW)
    assert record.data_source == "rightmove-estimated"


def test_market_time():
    now = datetime(2026, 10, 1, tzinfo=timezone.utc)
    assert market_time("01/10/2026", now) == 0
    assert market_time("1/9/2026", now) == 30
    assert market_time("15/09/2026", now) == 16
    assert market_time(None, now) == 30
    assert market_time("31/02/2026", now) == 30
    assert market_time("01/12/2026", now) == 30


def test_price_per_sq_m():
    assert price_per_sq_m(500_000, 100) == 5000
    assert price_per_sq_m(333_333, 100) == 3333
    assert price_per_sq_m(500_000, None) == DEFAULT_PRICE_PER_SQM
    assert price_per_sq_m(None, 100) == DEFAULT_PRICE_PER_SQM


def test_camel_case_json_shape():
    data = make_record().model_dump(mode="json", by_alias=True)
    assert data["pricePerSqM"] == 5000
    assert data["localArea"]["postcodeAverage"]["semiDetached"] == 600_000
    assert data["mortgage"]["monthlyPayments"][0]["monthlyPayment"] > 0
    assert data["dataSource"] == "rightmove-scraping"


def test_schema_violation_raises_invalid_record():
    broken = ExtractedFields.model_construct(images=["not a url"])
    with pytest.raises(InvalidRecordError) as ei:
        build_property_record(broken, now=FIXED_NOW)
    assert ei.value.errors
    assert ei.value.errors[0]["loc"][0] == "images"
