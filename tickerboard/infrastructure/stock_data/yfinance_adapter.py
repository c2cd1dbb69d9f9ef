"""
Infrastructure adapter: yfinance → IStockDataProvider.

All yfinance-specific details (ticker.info, fast_info, history()) are confined
here. yfinance is synchronous, so each call runs in a worker thread. Any
exception yfinance raises is contained as FetchResult.failed.
Selected with QUOTE_PROVIDER=yfinance; needs no API key.
"""

import asyncio
import logging
from typing import Any, Callable, Optional, TypeVar

import yfinance as yf

from tickerboard.domain.entities.fetch_result import FetchResult
from tickerboard.domain.entities.stock_snapshot import (
    CompanyMetrics,
    CompanyProfile,
    PriceHistory,
    StockQuote,
)
from tickerboard.domain.ports.stock_data_port import IStockDataProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")


class YFinanceStockDataProvider(IStockDataProvider):
    """Fetches stock market data from Yahoo Finance via the yfinance library."""

    def __init__(self, ticker_factory: Callable[[str], Any] = yf.Ticker) -> None:
        self._ticker = ticker_factory

    async def get_quote(self, symbol: str) -> FetchResult[StockQuote]:
        return await self._call("quote", symbol, self._quote)

    async def get_profile(self, symbol: str) -> FetchResult[CompanyProfile]:
        return await self._call("profile", symbol, self._profile)

    async def get_history(self, symbol: str, days: int = 7) -> FetchResult[PriceHistory]:
        return await self._call("history", symbol, lambda s: self._history(s, days))

    async def get_metrics(self, symbol: str) -> FetchResult[CompanyMetrics]:
        return await self._call("metrics", symbol, self._metrics)

    # ------------------------------------------------------------------
    # Blocking implementations (worker thread)
    # ------------------------------------------------------------------

    def _quote(self, symbol: str) -> FetchResult[StockQuote]:
        fast_info = self._ticker(symbol).fast_info
        price = getattr(fast_info, "last_price", None)
        if price is None:
            return FetchResult.empty(f"No price data available for symbol: {symbol!r}")
        previous_close = getattr(fast_info, "previous_close", None)
        change = change_percent = None
        if previous_close:
            change = round(float(price) - float(previous_close), 4)
            change_percent = round(change / float(previous_close) * 100, 4)
        return FetchResult.ok(
            StockQuote(
                price=round(float(price), 4),
                change=change,
                change_percent=change_percent,
                open=getattr(fast_info, "open", None),
                high=getattr(fast_info, "day_high", None),
                low=getattr(fast_info, "day_low", None),
                previous_close=previous_close,
                volume=_int_or_none(getattr(fast_info, "last_volume", None)),
            )
        )

    def _profile(self, symbol: str) -> FetchResult[CompanyProfile]:
        info = self._ticker(symbol).info or {}
        name = info.get("shortName") or info.get("longName")
        if not name:
            return FetchResult.empty("no profile")
        return FetchResult.ok(CompanyProfile(name=name))

    def _history(self, symbol: str, days: int) -> FetchResult[PriceHistory]:
        history = self._ticker(symbol).history(period=f"{days}d", interval="1d")
        if history.empty:
            return FetchResult.empty(f"No historical data available for symbol: {symbol!r}")
        return FetchResult.ok(
            PriceHistory(
                timestamps=[int(ts.timestamp() * 1000) for ts in history.index],
                prices=[round(float(close), 4) for close in history["Close"]],
                volumes=[int(volume) for volume in history["Volume"]],
            )
        )

    def _metrics(self, symbol: str) -> FetchResult[CompanyMetrics]:
        info = self._ticker(symbol).info or {}
        if not info:
            return FetchResult.empty("no metrics")
        return FetchResult.ok(
            CompanyMetrics(
                pe_ratio=info.get("trailingPE") or info.get("forwardPE"),
                market_cap=info.get("marketCap"),
                dividend_yield=info.get("dividendYield"),
                eps=info.get("trailingEps"),
                beta=info.get("beta"),
                year_high=info.get("fiftyTwoWeekHigh"),
                year_low=info.get("fiftyTwoWeekLow"),
                volume=info.get("volume"),
                avg_volume=info.get("averageVolume10days"),
            )
        )

    async def _call(
        self,
        what: str,
        symbol: str,
        fn: Callable[[str], FetchResult[T]],
    ) -> FetchResult[T]:
        try:
            return await asyncio.to_thread(fn, symbol)
        except Exception as exc:
            logger.debug("yfinance %s for %s failed", what, symbol, exc_info=True)
            return FetchResult.failed(f"{what}: {exc}")


def _int_or_none(value: Optional[Any]) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None
