"""
Use-case: the combined stock batch for the HTTP polling path.
Backed by the process-wide StockCache owned by DashboardContext.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from tickerboard.application.services.market_calendar import market_status
from tickerboard.application.services.stock_cache import StockBatch, StockCache
from tickerboard.domain.entities.market_status import MarketStatus
from tickerboard.domain.ports.config_store_port import IConfigStore


@dataclass(frozen=True)
class StockBatchView:
    batch: StockBatch
    market_status: MarketStatus

    def to_dict(self) -> dict:
        return {
            "stocks": [s.to_dict() for s in self.batch.stocks],
            "marketStatus": self.market_status.to_dict(),
            "lastUpdate": self.batch.fetched_at,
            "fromCache": self.batch.from_cache,
        }


class GetStockBatchUseCase:
    def __init__(
        self,
        store: IConfigStore,
        cache: StockCache,
        clock: Callable[[], datetime],
    ) -> None:
        self._store = store
        self._cache = cache
        self._clock = clock

    async def execute(self) -> StockBatchView:
        config = await self._store.load()
        status = market_status(self._clock())
        batch = await self._cache.get_stocks(config, force_fresh=False)
        return StockBatchView(batch=batch, market_status=status)
