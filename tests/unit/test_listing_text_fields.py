# tests/unit/test_listing_text_fields.py
import pytest

from listing_critic.core.normalize.listing_text import extract_fields_from_text, first_match


def test_labelled_blob_parses_all_fields():
    text = (
        "Address: 12 High Street, Oxford, OX1\n"
        "Price: Guide Price £425,000\n"
        "Size/Features: 850 sq ft\n"
        "Bedrooms: BEDROOMS 3\n"
        "Bathrooms: BATHROOMS 1\n"
        "Tenure: TENURE Leasehold\n"
        "Property Type: PROPERTY TYPE Apartment\n"
        "Listing Date: Added on 01/09/2026\n"
        "Price Reduction: Reduced on 20/09/2026\n"
    )
    f = extract_fields_from_text(text)
    assert f.source == "regex"
    assert f.address == "12 High Street, Oxford, OX1"
    assert f.price == 425_000.0
    assert f.square_meters == 79.0  # 850 sq ft
    assert f.bedrooms == 3
    assert f.bathrooms == 1
    assert f.tenure == "leasehold"
    assert f.property_type == "flat"
    assert f.listing_date == "01/09/2026"
    assert f.price_reduction_date == "20/09/2026"


def test_missing_fields_stay_none():
    f = extract_fields_from_text("Nothing useful here")
    assert f.price is None
    assert f.bedrooms is None
    assert f.property_type is None
    assert f.images == []
    assert f.extracted_count() == 0


def test_price_prefers_labelled_line_then_meta():
    assert extract_fields_from_text("Found prices: £1,000\nPrice: £350,000\n").price == 350_000.0
    assert extract_fields_from_text("Meta Price: £275000\nFound prices: £9\n").price == 275_000.0


def test_zero_price_is_not_a_price():
    assert extract_fields_from_text("Found prices: £0\n").price is None


def test_square_metres_preferred_over_square_feet():
    f = extract_fields_from_text("Size/Features: 1,000 sq ft / 93 sq m\n")
    assert f.square_meters == 93.0


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Two bedroom cottage", 2),
        ("4 bed detached house", 4),
        ("Bedrooms: 5", 5),
        ("two bedrooms", 2),
        ("2 bedrooms", 2),
        ("BEDROOMS: 2", 2),
        ("25 bedrooms", None),
    ],
)
def test_bedroom_phrasings(text, expected):
    assert extract_fields_from_text(text).bedrooms == expected


def test_bathroom_bounds():
    assert extract_fields_from_text("20 bathrooms").bathrooms is None
    assert extract_fields_from_text("Two bathrooms").bathrooms == 2


def test_labelled_tenure_wins_over_body_mention():
    text = "Tenure: Leasehold\nDescription: share of freehold available\n"
    assert extract_fields_from_text(text).tenure == "leasehold"


def test_semi_detached_not_read_as_detached():
    assert extract_fields_from_text("Lovely semi-detached home").property_type == "semi-detached"


def test_roof_terrace_is_not_terraced():
    assert extract_fields_from_text("Detached house with a roof terrace").property_type == "detached"


def test_condition_keywords():
    assert extract_fields_from_text("In need of modernisation throughout").condition == "renovation"
    assert extract_fields_from_text("Evidence of structural movement").condition == "structural-project"
    assert extract_fields_from_text("Immaculate throughout").condition is None


def test_images_line_keeps_only_http_urls():
    text = "Images: https://media.rightmove.co.uk/a/1_IMG_00_0000.jpeg, not-a-url\n"
    assert extract_fields_from_text(text).images == ["https://media.rightmove.co.uk/a/1_IMG_00_0000.jpeg"]


def test_first_match_returns_first_non_none():
    strategies = [lambda t: None, lambda t: len(t), lambda t: -1]
    assert first_match("abc", strategies) == 3
    assert first_match("abc", []) is None


def test_out_of_range_count_is_not_replaced_by_a_later_mention():
    assert extract_fields_from_text("Bedrooms: BEDROOMS 25\nLovely 3 bedroom home\n").bedrooms is None
    assert extract_fields_from_text("Bathrooms: BATHROOMS 20\nen-suite and 2 bathrooms\n").bathrooms is None


def test_square_metres_with_thousands_separator():
    assert extract_fields_from_text("Size/Features: 1,250 sq m plot\n").square_meters == 1250.0
    assert extract_fields_from_text("Size/Features: 1,250.5 sqm\n").square_meters == 1250.5
