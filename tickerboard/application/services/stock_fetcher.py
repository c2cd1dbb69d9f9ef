"""
Application service: builds StockSnapshots from an IStockDataProvider.

Quote and profile are requested together for each symbol, and every symbol
in a batch is requested together. History is only requested while the
market is open (it is the most quota-hungry call); fundamentals are always
best-effort. Nothing here raises for provider trouble: a missing quote turns
into a snapshot with ``error`` set.
"""

import asyncio
import logging
import time
from typing import Iterable

from tickerboard.domain.entities.fetch_result import FetchResult, FetchStatus
from tickerboard.domain.entities.stock_snapshot import PriceHistory, StockSnapshot
from tickerboard.domain.ports.stock_data_port import IStockDataProvider

logger = logging.getLogger(__name__)

QUOTE_FAILED = "Failed to fetch data"


class StockFetcher:
    HISTORY_DAYS: int = 7

    def __init__(self, provider: IStockDataProvider) -> None:
        self._provider = provider

    async def fetch_all(self, symbols: Iterable[str], market_open: bool) -> list[StockSnapshot]:
        """Fetch every symbol concurrently; result order follows *symbols*."""
        return list(
            await asyncio.gather(
                *(self.fetch_symbol(symbol, market_open) for symbol in symbols)
            )
        )

    async def fetch_symbol(self, symbol: str, market_open: bool) -> StockSnapshot:
        """Build one snapshot. Never raises, so one symbol cannot sink a batch."""
        try:
            return await self._fetch_symbol(symbol, market_open)
        except Exception:
            logger.exception("Unexpected error fetching stock data for %s", symbol)
            return StockSnapshot(
                symbol=symbol,
                display_name=symbol,
                timestamp=_now_ms(),
                error=QUOTE_FAILED,
            )

    async def _fetch_symbol(self, symbol: str, market_open: bool) -> StockSnapshot:
        quote_result, profile_result = await asyncio.gather(
            self._provider.get_quote(symbol),
            self._provider.get_profile(symbol),
        )
        history_result, metrics_result = await asyncio.gather(
            self._history(symbol, market_open),
            self._provider.get_metrics(symbol),
        )

        profile = profile_result.value_or_none()
        display_name = (profile.name if profile else None) or symbol

        quote = quote_result.value_or_none()
        if quote is None:
            if quote_result.status is FetchStatus.FAILED:
                logger.error("Error fetching stock data for %s: %s", symbol, quote_result.reason)
            return StockSnapshot(
                symbol=symbol,
                display_name=display_name,
                timestamp=_now_ms(),
                history=history_result.value_or_none(),
                metrics=metrics_result.value_or_none(),
                error=_quote_error(quote_result),
            )

        return StockSnapshot(
            symbol=symbol,
            display_name=display_name,
            price=quote.price,
            change=quote.change,
            change_percent=quote.change_percent,
            open=quote.open,
            high=quote.high,
            low=quote.low,
            previous_close=quote.previous_close,
            volume=quote.volume,
            timestamp=_now_ms(),
            history=history_result.value_or_none(),
            metrics=metrics_result.value_or_none(),
        )

    async def _history(self, symbol: str, market_open: bool) -> FetchResult[PriceHistory]:
        if not market_open:
            return FetchResult.skipped("market closed")
        return await self._provider.get_history(symbol, days=self.HISTORY_DAYS)


def _quote_error(result: FetchResult) -> str:
    if result.status is FetchStatus.SKIPPED and result.reason:
        return result.reason
    return QUOTE_FAILED


def _now_ms() -> int:
    return int(time.time() * 1000)
