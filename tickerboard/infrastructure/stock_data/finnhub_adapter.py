"""
Infrastructure adapter: Finnhub REST API → IStockDataProvider.

All Finnhub-specific details (endpoints, field names, plan limitations) are
confined here. Every call resolves to a FetchResult; HTTP errors, timeouts
and malformed bodies are contained and never raised to the caller.
Without an API key every call is SKIPPED rather than attempted.
"""

import logging
import time
from typing import Any, Optional

import httpx

from tickerboard.domain.entities.fetch_result import FetchResult
from tickerboard.domain.entities.stock_snapshot import (
    CompanyMetrics,
    CompanyProfile,
    PriceHistory,
    StockQuote,
)
from tickerboard.domain.ports.stock_data_port import IStockDataProvider

logger = logging.getLogger(__name__)

NO_API_KEY = "FINNHUB_API_KEY not set"


class FinnhubStockDataProvider(IStockDataProvider):
    """Quotes, profiles, daily candles and fundamentals from finnhub.io."""

    BASE_URL = "https://finnhub.io/api/v1"

    def __init__(
        self,
        api_key: Optional[str],
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self._api_key = api_key
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    # ------------------------------------------------------------------
    # IStockDataProvider interface
    # ------------------------------------------------------------------

    async def get_quote(self, symbol: str) -> FetchResult[StockQuote]:
        if not self.enabled:
            return FetchResult.skipped(NO_API_KEY)
        response = await self._get("/quote", symbol=symbol)
        if isinstance(response, FetchResult):
            return response
        if response.status_code != 200:
            return FetchResult.failed(f"quote HTTP {response.status_code}")
        body = _json_object(response)
        if body is None:
            return FetchResult.failed("quote response was not a JSON object")
        return FetchResult.ok(
            StockQuote(
                price=_number(body.get("c")),
                change=_number(body.get("d")),
                change_percent=_number(body.get("dp")),
                open=_number(body.get("o")),
                high=_number(body.get("h")),
                low=_number(body.get("l")),
                previous_close=_number(body.get("pc")),
                volume=_integer(body.get("v")),
            )
        )

    async def get_profile(self, symbol: str) -> FetchResult[CompanyProfile]:
        if not self.enabled:
            return FetchResult.skipped(NO_API_KEY)
        response = await self._get("/stock/profile2", symbol=symbol)
        if isinstance(response, FetchResult):
            return response
        if response.status_code != 200:
            return FetchResult.failed(f"profile HTTP {response.status_code}")
        body = _json_object(response)
        if body is None:
            return FetchResult.failed("profile response was not a JSON object")
        if not body.get("name"):
            return FetchResult.empty("no profile")
        return FetchResult.ok(CompanyProfile(name=body["name"]))

    async def get_history(self, symbol: str, days: int = 7) -> FetchResult[PriceHistory]:
        if not self.enabled:
            return FetchResult.skipped(NO_API_KEY)
        to_ts = int(time.time())
        from_ts = to_ts - days * 24 * 60 * 60
        response = await self._get(
            "/stock/candle", symbol=symbol, resolution="D", **{"from": from_ts, "to": to_ts}
        )
        if isinstance(response, FetchResult):
            return response
        if response.status_code == 403:
            # Candles need a paid plan; the free tier answers 403.
            logger.info("Historical data not available for %s (requires paid Finnhub plan)", symbol)
            return FetchResult.empty("history requires a paid plan")
        if response.status_code != 200:
            return FetchResult.failed(f"history HTTP {response.status_code}")
        body = _json_object(response)
        if body is None:
            return FetchResult.failed("history response was not a JSON object")
        closes = body.get("c") or []
        if body.get("s") != "ok" or not closes:
            return FetchResult.empty("no candles")
        try:
            history = PriceHistory(
                timestamps=[int(t) * 1000 for t in body.get("t") or []],
                prices=[float(c) for c in closes],
                volumes=[int(v) for v in body.get("v") or []],
            )
        except (TypeError, ValueError) as exc:
            return FetchResult.failed(f"malformed candle data: {exc}")
        return FetchResult.ok(history)

    async def get_metrics(self, symbol: str) -> FetchResult[CompanyMetrics]:
        if not self.enabled:
            return FetchResult.skipped(NO_API_KEY)
        response = await self._get("/stock/metric", symbol=symbol, metric="all")
        if isinstance(response, FetchResult):
            return response
        if response.status_code in (403, 404):
            return FetchResult.empty(f"metrics HTTP {response.status_code}")
        if response.status_code != 200:
            return FetchResult.failed(f"metrics HTTP {response.status_code}")
        body = _json_object(response)
        metric = body.get("metric") if body else None
        if not isinstance(metric, dict) or not metric:
            return FetchResult.empty("no metrics")
        return FetchResult.ok(
            CompanyMetrics(
                pe_ratio=_first(metric, "peNormalizedAnnual", "peBasicExclExtraTTM"),
                market_cap=_first(metric, "marketCapitalization"),
                dividend_yield=_first(metric, "dividendYieldIndicatedAnnual"),
                eps=_first(metric, "epsNormalizedAnnual", "epsBasicExclExtraTTM"),
                beta=_first(metric, "beta"),
                year_high=_first(metric, "52WeekHigh"),
                year_low=_first(metric, "52WeekLow"),
                volume=_first(metric, "volume"),
                avg_volume=_first(metric, "volume10DayAverage"),
            )
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _get(self, path: str, **params: Any) -> httpx.Response | FetchResult:
        params["token"] = self._api_key
        try:
            return await self._client.get(f"{self.BASE_URL}{path}", params=params)
        except httpx.HTTPError as exc:
            return FetchResult.failed(f"{path}: {exc.__class__.__name__}: {exc}")


def _json_object(response: httpx.Response) -> Optional[dict]:
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _number(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _integer(value: Any) -> Optional[int]:
    number = _number(value)
    return int(number) if number is not None else None


def _first(metric: dict, *keys: str) -> Optional[float]:
    """First truthy numeric value among *keys*."""
    for key in keys:
        value = _number(metric.get(key))
        if value:
            return value
    return None
