"""
Port (interface) for stock data providers.
Infrastructure adapters (e.g. FinnhubStockDataProvider, YFinanceStockDataProvider)
must implement this interface.

Every method is a coroutine that contains its own failures: it returns a
FetchResult and never raises for provider-side problems.
"""

from abc import ABC, abstractmethod

from tickerboard.domain.entities.fetch_result import FetchResult
from tickerboard.domain.entities.stock_snapshot import (
    CompanyMetrics,
    CompanyProfile,
    PriceHistory,
    StockQuote,
)


class IStockDataProvider(ABC):
    @abstractmethod
    async def get_quote(self, symbol: str) -> FetchResult[StockQuote]: ...

    @abstractmethod
    async def get_profile(self, symbol: str) -> FetchResult[CompanyProfile]: ...

    @abstractmethod
    async def get_history(self, symbol: str, days: int = 7) -> FetchResult[PriceHistory]:
        """Daily closes for the last *days* days. EMPTY when the plan lacks the feature."""
        ...

    @abstractmethod
    async def get_metrics(self, symbol: str) -> FetchResult[CompanyMetrics]: ...

    async def aclose(self) -> None:
        """Release pooled connections. Default: nothing to release."""
