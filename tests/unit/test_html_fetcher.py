# tests/unit/test_html_fetcher.py
import pytest
import requests

from listing_critic.core.fetch import (
    BlockedError,
    HtmlFetcherError,
    HttpStatusError,
    NetworkError,
    browser_headers,
    classify_fetcher_error,
    fetch_html,
    fetcher_error_guard,
    scrape_listing,
)
from listing_critic.errors import ListingCriticError
from listing_critic.schemas.models import FetchPolicy
from tests.utils import DEFAULT_LISTING_HTML, EMPTY_HTML, GALLERY_IMAGE, LISTING_ID, LISTING_URL, FakeResp, http_error


def test_fetch_html_sends_browser_headers(listing_page, policy):
    html = fetch_html(LISTING_URL, policy=policy)
    assert "Main Street" in html

    call = listing_page.calls[0]
    assert call["url"] == LISTING_URL
    assert call["timeout"] == policy.timeout_s
    assert call["headers"]["User-Agent"] == policy.user_agent
    assert call["headers"]["Accept-Language"].startswith("en-GB")
    assert browser_headers(policy)["Referer"] == "https://www.google.com/"


def test_fetch_html_sleeps_before_request(fake_get, monkeypatch):
    sleeps: list[float] = []
    monkeypatch.setattr("listing_critic.core.fetch.html_fetcher.time.sleep", sleeps.append)
    fake_get(FakeResp(200, DEFAULT_LISTING_HTML))

    fetch_html(LISTING_URL, policy=FetchPolicy(delay_s=0.25))
    assert sleeps == [0.25]


@pytest.mark.parametrize("status", [403, 429])
def test_block_statuses_raise_blocked(fake_get, policy, status):
    fake_get(FakeResp(status, "denied"))
    with pytest.raises(BlockedError) as ei:
        fetch_html(LISTING_URL, policy=policy)
    assert ei.value.status_code == status


def test_other_statuses_raise_http_status_error(fake_get, policy):
    fake_get(FakeResp(500, "oops"))
    with pytest.raises(HttpStatusError) as ei:
        fetch_html(LISTING_URL, policy=policy)
    assert ei.value.status_code == 500
    assert "500" in ei.value.message


def test_transport_errors_become_network_error(fake_get, policy):
    fake_get(exc=requests.ConnectionError("connection reset"))
    with pytest.raises(NetworkError):
        fetch_html(LISTING_URL, policy=policy)


def test_scrape_listing_builds_text_and_images(listing_page, policy):
    result = scrape_listing(LISTING_URL, policy=policy)
    assert result.fallback_used is False
    assert result.images == [GALLERY_IMAGE]
    assert "Address: Main Street, Tiddington, CV37" in result.text
    assert f"Images: {GALLERY_IMAGE}" in result.text


def test_scrape_listing_falls_back_when_blocked(fake_get, policy):
    fake_get(FakeResp(403, "denied"))
    result = scrape_listing(LISTING_URL, policy=policy)
    assert result.fallback_used is True
    assert result.images == []
    assert result.text.startswith(f"Property ID: {LISTING_ID}\n")


def test_scrape_listing_falls_back_on_network_failure(fake_get, policy):
    fake_get(exc=requests.Timeout("slow"))
    assert scrape_listing(LISTING_URL, policy=policy).fallback_used is True


def test_scrape_listing_falls_back_on_unrecognised_page(fake_get, policy):
    fake_get(FakeResp(200, EMPTY_HTML))
    result = scrape_listing(LISTING_URL, policy=policy)
    assert result.fallback_used is True
    assert "Property ID" in result.text


def test_scrape_listing_propagates_http_status_error(fake_get, policy):
    fake_get(FakeResp(404, "gone"))
    with pytest.raises(HttpStatusError):
        scrape_listing(LISTING_URL, policy=policy)


def test_classify_fetcher_error():
    assert isinstance(classify_fetcher_error(http_error(429)), BlockedError)
    assert isinstance(classify_fetcher_error(http_error(502)), HttpStatusError)
    assert isinstance(classify_fetcher_error(requests.ConnectionError("x")), NetworkError)
    other = classify_fetcher_error(ValueError("x"))
    assert type(other) is HtmlFetcherError
    assert isinstance(other, ListingCriticError)


def test_error_guard_wraps_and_chains():
    with pytest.raises(NetworkError) as ei:
        with fetcher_error_guard():
            raise requests.ConnectionError("down")
    assert isinstance(ei.value.__cause__, requests.ConnectionError)
