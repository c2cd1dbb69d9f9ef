"""
Application service: the stock cache and its refresh policy.

get_stocks() decides between a provider round-trip and the last batch:
  1. force_fresh        -> fetch, replace cache.
  2. market open        -> fetch, replace cache.
  3. market closed      -> reuse the cache, unless there is none or its
                           symbol set differs from the configured one.

A cache is never served for a symbol set other than the configured one.
One instance backs the HTTP polling path; each push connection owns its own.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from tickerboard.application.services.market_calendar import eastern_now, is_market_open
from tickerboard.application.services.stock_fetcher import StockFetcher
from tickerboard.domain.entities.dashboard_config import DashboardConfig
from tickerboard.domain.entities.stock_snapshot import StockSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockBatch:
    stocks: list[StockSnapshot]
    from_cache: bool
    fetched_at: Optional[int]


class StockCache:
    def __init__(
        self,
        fetcher: StockFetcher,
        clock: Callable[[], datetime] = eastern_now,
    ) -> None:
        self._fetcher = fetcher
        self._clock = clock
        self._stocks: Optional[list[StockSnapshot]] = None
        self._fetched_at: Optional[int] = None

    @property
    def cached(self) -> Optional[list[StockSnapshot]]:
        return self._stocks

    @property
    def fetched_at(self) -> Optional[int]:
        return self._fetched_at

    def clear(self) -> None:
        self._stocks = None
        self._fetched_at = None

    async def get_stocks(self, config: DashboardConfig, force_fresh: bool = False) -> StockBatch:
        market_open = is_market_open(self._clock())

        if force_fresh:
            logger.info("Force fetching fresh stock data for: %s", list(config.tickers))
            return await self._refresh(config, market_open)
        if market_open:
            return await self._refresh(config, market_open)
        if self._stocks is None:
            return await self._refresh(config, market_open)
        if self._cached_symbols() != config.ticker_set:
            logger.info("Tickers changed, fetching fresh data")
            return await self._refresh(config, market_open)
        return StockBatch(stocks=self._stocks, from_cache=True, fetched_at=self._fetched_at)

    def _cached_symbols(self) -> frozenset[str]:
        return frozenset(snapshot.symbol for snapshot in self._stocks or ())

    async def _refresh(self, config: DashboardConfig, market_open: bool) -> StockBatch:
        stocks = await self._fetcher.fetch_all(config.tickers, market_open=market_open)
        self._stocks = stocks
        self._fetched_at = int(time.time() * 1000)
        return StockBatch(stocks=stocks, from_cache=False, fetched_at=self._fetched_at)
