"""
Pytest configuration and shared fixtures for tickerboard tests.
"""

import pytest

from fakes import (
    MARKET_CLOSED_TIME,
    MARKET_OPEN_TIME,
    FakeConfigStore,
    FakeStockProvider,
    FakeWeatherProvider,
    MutableClock,
)
from tickerboard.domain.entities.dashboard_config import DashboardConfig


@pytest.fixture
def open_clock():
    return MutableClock(MARKET_OPEN_TIME)


@pytest.fixture
def closed_clock():
    return MutableClock(MARKET_CLOSED_TIME)


@pytest.fixture
def store():
    return FakeConfigStore(DashboardConfig(tickers=("AAPL",), refresh_interval=15000))


@pytest.fixture
def provider():
    return FakeStockProvider(prices={"AAPL": 190.0, "MSFT": 410.0})


@pytest.fixture
def weather_provider():
    return FakeWeatherProvider()
