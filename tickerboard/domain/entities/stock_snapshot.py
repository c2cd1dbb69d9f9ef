"""
Domain entities for per-symbol stock data.
Zero external dependencies: pure Python dataclasses only.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StockQuote:
    price: Optional[float]
    change: Optional[float]
    change_percent: Optional[float]
    open: Optional[float]
    high: Optional[float]
    low: Optional[float]
    previous_close: Optional[float]
    volume: Optional[int] = None


@dataclass(frozen=True)
class CompanyProfile:
    name: Optional[str]


@dataclass(frozen=True)
class PriceHistory:
    timestamps: list[int]
    prices: list[float]
    volumes: list[int]

    def to_dict(self) -> dict:
        return {
            "timestamps": list(self.timestamps),
            "prices": list(self.prices),
            "volumes": list(self.volumes),
        }


@dataclass(frozen=True)
class CompanyMetrics:
    pe_ratio: Optional[float] = None
    market_cap: Optional[float] = None
    dividend_yield: Optional[float] = None
    eps: Optional[float] = None
    beta: Optional[float] = None
    year_high: Optional[float] = None
    year_low: Optional[float] = None
    volume: Optional[float] = None
    avg_volume: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "peRatio": self.pe_ratio,
            "marketCap": self.market_cap,
            "dividendYield": self.dividend_yield,
            "eps": self.eps,
            "beta": self.beta,
            "yearHigh": self.year_high,
            "yearLow": self.year_low,
            "volume": self.volume,
            "avgVolume": self.avg_volume,
        }


@dataclass(frozen=True)
class StockSnapshot:
    """Everything the dashboard shows for one symbol at one point in time.

    Snapshots are never mutated; a refresh produces a new one. A snapshot
    whose quote could not be fetched carries ``error`` and null price fields.
    """

    symbol: str
    display_name: str
    price: Optional[float] = None
    change: Optional[float] = None
    change_percent: Optional[float] = None
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    previous_close: Optional[float] = None
    volume: Optional[int] = None
    timestamp: Optional[int] = None
    history: Optional[PriceHistory] = None
    metrics: Optional[CompanyMetrics] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "displayName": self.display_name,
            "price": self.price,
            "change": self.change,
            "changePercent": self.change_percent,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "previousClose": self.previous_close,
            "volume": self.volume,
            "timestamp": self.timestamp,
            "history": self.history.to_dict() if self.history else None,
            "metrics": self.metrics.to_dict() if self.metrics else None,
            "error": self.error,
        }
