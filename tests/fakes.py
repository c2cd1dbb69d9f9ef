"""
In-memory fakes for the domain ports, shared by the test modules.
"""

import asyncio
from collections import defaultdict
from dataclasses import replace
from datetime import datetime
from typing import Any, Optional

from tickerboard.application.services.market_calendar import ET
from tickerboard.domain.entities.dashboard_config import DashboardConfig
from tickerboard.domain.entities.fetch_result import FetchResult
from tickerboard.domain.entities.stock_snapshot import (
    CompanyMetrics,
    CompanyProfile,
    PriceHistory,
    StockQuote,
)
from tickerboard.domain.entities.weather_report import WeatherReport
from tickerboard.domain.ports.config_store_port import IConfigStore
from tickerboard.domain.ports.push_channel_port import IPushChannel
from tickerboard.domain.ports.stock_data_port import IStockDataProvider
from tickerboard.domain.ports.weather_port import IWeatherProvider
from tickerboard.infrastructure.config_store.json_file_store import canonical_hash

# Monday 2026-03-02 10:00 ET and Saturday 2026-03-07 12:00 ET.
MARKET_OPEN_TIME = datetime(2026, 3, 2, 10, 0, tzinfo=ET)
MARKET_CLOSED_TIME = datetime(2026, 3, 7, 12, 0, tzinfo=ET)


class MutableClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeConfigStore(IConfigStore):
    def __init__(self, config: Optional[DashboardConfig] = None) -> None:
        self.config = config or DashboardConfig()
        self.saved: list[DashboardConfig] = []
        self.missing = False
        self.mtime = 1

    def set(self, **changes: Any) -> None:
        """Simulate an out-of-band edit of the stored document."""
        self.config = replace(self.config, **changes)
        self.mtime += 1

    async def load(self) -> DashboardConfig:
        return self.config

    async def save(self, config: DashboardConfig) -> None:
        self.config = config
        self.saved.append(config)
        self.missing = False
        self.mtime += 1

    async def content_hash(self) -> Optional[str]:
        if self.missing:
            return None
        return canonical_hash(self.config.to_dict())

    def modified_at(self) -> Optional[int]:
        return None if self.missing else self.mtime


class FakeStockProvider(IStockDataProvider):
    """Answers every call with canned data and records what was asked."""

    def __init__(
        self,
        prices: Optional[dict[str, float]] = None,
        failing: tuple[str, ...] = (),
        delay: float = 0.0,
        gate: Optional[asyncio.Event] = None,
    ) -> None:
        self.prices = prices or {}
        self.failing = set(failing)
        self.delay = delay
        self.gate = gate
        self.calls: dict[str, list[str]] = defaultdict(list)
        self.in_flight = 0
        self.max_in_flight = 0

    def quote_calls(self, symbol: Optional[str] = None) -> int:
        quotes = self.calls["quote"]
        return len(quotes) if symbol is None else quotes.count(symbol)

    async def get_quote(self, symbol: str) -> FetchResult[StockQuote]:
        self.calls["quote"].append(symbol)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        if symbol in self.failing:
            return FetchResult.failed("provider exploded")
        price = self.prices.get(symbol, 100.0)
        return FetchResult.ok(
            StockQuote(
                price=price,
                change=1.5,
                change_percent=1.2,
                open=price - 1,
                high=price + 2,
                low=price - 2,
                previous_close=price - 1.5,
                volume=1000,
            )
        )

    async def get_profile(self, symbol: str) -> FetchResult[CompanyProfile]:
        self.calls["profile"].append(symbol)
        return FetchResult.ok(CompanyProfile(name=f"{symbol} Inc."))

    async def get_history(self, symbol: str, days: int = 7) -> FetchResult[PriceHistory]:
        self.calls["history"].append(symbol)
        return FetchResult.ok(PriceHistory(timestamps=[1_000], prices=[100.0], volumes=[10]))

    async def get_metrics(self, symbol: str) -> FetchResult[CompanyMetrics]:
        self.calls["metrics"].append(symbol)
        return FetchResult.ok(CompanyMetrics(pe_ratio=21.0))


class FakeWeatherProvider(IWeatherProvider):
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.locations: list[str] = []

    async def get_weather(self, location: str) -> FetchResult[WeatherReport]:
        self.locations.append(location)
        if self.fail:
            return FetchResult.failed("weather service down")
        return FetchResult.ok(
            WeatherReport(
                location=f"{location}, United States",
                temperature=68,
                condition="Clear sky",
                description="Clear sky",
                icon="☀️",
            )
        )


class RecordingChannel(IPushChannel):
    def __init__(self, fail_times: int = 0) -> None:
        self.messages: list[dict[str, Any]] = []
        self.fail_times = fail_times

    async def send(self, message_type: str, data: Optional[dict[str, Any]] = None) -> None:
        if self.fail_times:
            self.fail_times -= 1
            raise RuntimeError("socket closed")
        self.messages.append({"type": message_type, "data": data})

    @property
    def types(self) -> list[str]:
        return [m["type"] for m in self.messages]

    @property
    def updates(self) -> list[dict[str, Any]]:
        return [m["data"] for m in self.messages if m["type"] == "update"]


class FakeDispatcher:
    def __init__(self) -> None:
        self.triggers = 0

    def trigger(self) -> None:
        self.triggers += 1
