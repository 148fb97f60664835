"""
Shared fixtures for the rate-resolution tests.
"""

from unittest.mock import AsyncMock

import pytest

from application.services import ConversionEngine, RateCache, RateFetcher
from tests.fakes import NOW, InMemoryRateStore


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def store():
    return InMemoryRateStore()


@pytest.fixture
def provider():
    mock_provider = AsyncMock()
    mock_provider.name = "currencyapi.com"
    return mock_provider


@pytest.fixture
def sleep():
    return AsyncMock()


@pytest.fixture
def fetcher(provider, sleep):
    return RateFetcher(provider, max_attempts=5, base_delay=0.5, sleep=sleep)


@pytest.fixture
def engine(store, fetcher, clock):
    return ConversionEngine(
        cache=RateCache(store, clock=clock),
        fetcher=fetcher,
        clock=clock,
    )
