# tests/conftest.py
from __future__ import annotations

import logging

import pytest

from listing_critic import logging_config
from listing_critic.config import Settings
from listing_critic.schemas.models import FetchPolicy
from tests.utils import DEFAULT_LISTING_HTML, FakeGet, FakeResp


# -------- Logging isolation --------
@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger(logging_config.PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    logging_config._configured = False


# -------- Offline defaults --------
@pytest.fixture
def policy() -> FetchPolicy:
    return FetchPolicy(delay_s=0.0, timeout_s=5.0)


@pytest.fixture
def settings() -> Settings:
    return Settings(fetch_delay_s=0.0, fetch_timeout_s=5.0)


@pytest.fixture
def fake_get(monkeypatch):
    """Patch requests.get; call with a FakeResp or exception to install it."""

    def _install(resp: FakeResp | None = None, exc: Exception | None = None) -> FakeGet:
        getter = FakeGet(resp=resp, exc=exc)
        monkeypatch.setattr("requests.get", getter)
        return getter

    return _install


@pytest.fixture
def listing_page(fake_get) -> FakeGet:
    return fake_get(FakeResp(200, DEFAULT_LISTING_HTML))
