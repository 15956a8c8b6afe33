# tests/unit/test_listing_html_extractor.py
from bs4 import BeautifulSoup

from listing_critic.core.normalize.listing_html import (
    extract_listing_text,
    extract_meta_and_structured_data,
    is_valid_address,
    sweep_page_patterns,
)
from tests.utils import DEFAULT_LISTING_HTML, EMPTY_HTML, GALLERY_IMAGE


def test_default_listing_flattens_to_labelled_lines():
    text = extract_listing_text(DEFAULT_LISTING_HTML, images=[GALLERY_IMAGE])
    lines = text.splitlines()

    assert "Address: Main Street, Tiddington, CV37" in lines
    assert "Price: £500,000" in lines
    assert "Bedrooms: BEDROOMS 3" in lines
    assert "Bathrooms: BATHROOMS 2" in lines
    assert "Tenure: TENURE Freehold" in lines
    assert "Property Type: PROPERTY TYPE Semi-Detached" in lines
    assert "Listing Date: Added on 15/09/2026" in lines
    assert f"Images: {GALLERY_IMAGE}" in lines
    assert "Meta Price: £500000" in lines
    assert "Meta Description Size (sq ft): 1,076 sq ft" in lines
    assert any(line.startswith("Size/Features:") and "1,076 sq ft" in line for line in lines)


def test_field_lines_precede_meta_and_sweeps():
    lines = extract_listing_text(DEFAULT_LISTING_HTML).splitlines()
    assert lines.index("Address: Main Street, Tiddington, CV37") < lines.index("Meta Price: £500000")
    assert lines[-1].startswith("Found ")


def test_page_without_listing_content_is_empty():
    assert extract_listing_text(EMPTY_HTML) == ""


def test_address_sanity_checks():
    assert is_valid_address("12 High Street, Oxford")
    assert not is_valid_address("£300,000")
    assert not is_valid_address("Flat for sale")
    assert not is_valid_address("Rightmove")
    assert not is_valid_address("12345")


def test_jsonld_graph_price_and_size():
    html = """
    <html><head><script type="application/ld+json">
    {"@context": "https://schema.org", "@graph": [
      {"@type": "Residence", "offers": {"price": 350000}, "floorSize": {"value": 80, "unitText": "sq m"}}
    ]}
    </script></head><body></body></html>
    """
    lines = extract_meta_and_structured_data(BeautifulSoup(html, "lxml"))
    assert "Structured Price: £350000" in lines
    assert "Structured Size: 80 sq m" in lines


def test_broken_jsonld_is_skipped():
    html = '<html><head><script type="application/ld+json">{not json</script></head></html>'
    assert extract_meta_and_structured_data(BeautifulSoup(html, "lxml")) == []


def test_sweeps_cap_at_five_hits():
    lines = sweep_page_patterns("£1 £2 £3 £4 £5 £6 and 70 sq m")
    assert lines == ["Found prices: £1, £2, £3, £4, £5", "Found sizes (sq m): 70 sq m"]


def test_size_sweep_keeps_thousands_separator():
    assert sweep_page_patterns("Plot of 1,250 sq m") == ["Found sizes (sq m): 1,250 sq m"]
