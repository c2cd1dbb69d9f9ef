"""
Application context: the one object that owns the dashboard's runtime state.

Replaces process-wide globals (config hash, global stock cache, connection
registry) with an explicit object built by the composition root, started in
the web app's lifespan and stopped on shutdown. Tests build their own with
fake ports.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from tickerboard.application.services.broadcast_dispatcher import BroadcastDispatcher
from tickerboard.application.services.change_detector import ConfigChangeDetector
from tickerboard.application.services.connection import DashboardConnection
from tickerboard.application.services.connection_registry import ConnectionRegistry
from tickerboard.application.services.market_calendar import eastern_now
from tickerboard.application.services.save_triggered_source import SaveTriggeredChangeSource
from tickerboard.application.services.stock_cache import StockCache
from tickerboard.application.services.stock_fetcher import StockFetcher
from tickerboard.application.services.weather_service import WeatherService
from tickerboard.domain.ports.config_change_source_port import IConfigChangeSource
from tickerboard.domain.ports.config_store_port import IConfigStore
from tickerboard.domain.ports.music_provider_port import IMusicProvider
from tickerboard.domain.ports.push_channel_port import IPushChannel
from tickerboard.domain.ports.stock_data_port import IStockDataProvider
from tickerboard.domain.ports.weather_port import IWeatherProvider

logger = logging.getLogger(__name__)


class DashboardContext:
    def __init__(
        self,
        store: IConfigStore,
        stock_provider: IStockDataProvider,
        weather_provider: IWeatherProvider,
        music_provider: Optional[IMusicProvider] = None,
        clock: Callable[[], datetime] = eastern_now,
        settle_delay: float = BroadcastDispatcher.SETTLE_DELAY_SECONDS,
        closed_market_period: float = DashboardConnection.CLOSED_MARKET_PERIOD_SECONDS,
    ) -> None:
        self.store = store
        self.stock_provider = stock_provider
        self.weather_provider = weather_provider
        self.music_provider = music_provider
        self.clock = clock
        self.closed_market_period = closed_market_period

        self.stock_fetcher = StockFetcher(stock_provider)
        self.stock_cache = StockCache(self.stock_fetcher, clock=clock)
        self.weather = WeatherService(weather_provider)

        self.registry = ConnectionRegistry()
        self.dispatcher = BroadcastDispatcher(self.registry, settle_delay=settle_delay)
        self.detector = ConfigChangeDetector(store, self.dispatcher)
        self.saves = SaveTriggeredChangeSource(store, self.detector)
        self._sources: list[IConfigChangeSource] = [self.saves]
        self._started = False

    def add_change_source(self, source: IConfigChangeSource) -> None:
        self._sources.append(source)

    def new_connection(self, channel: IPushChannel, connection_id: Optional[str] = None) -> DashboardConnection:
        """Create a connection with its own stock cache and register it."""
        connection = DashboardConnection(
            channel=channel,
            store=self.store,
            stock_cache=StockCache(self.stock_fetcher, clock=self.clock),
            weather=self.weather,
            clock=self.clock,
            closed_market_period=self.closed_market_period,
            connection_id=connection_id,
        )
        self.registry.add(connection)
        logger.info("Client connected: %s (%d live)", connection.id, len(self.registry))
        return connection

    def drop_connection(self, connection: DashboardConnection) -> None:
        connection.stop()
        self.registry.remove(connection.id)
        logger.info("Client disconnected: %s (%d live)", connection.id, len(self.registry))

    async def start(self) -> None:
        if self._started:
            return
        await self.detector.prime()
        for source in self._sources:
            await source.start()
        self._started = True

    async def stop(self) -> None:
        for source in self._sources:
            await source.stop()
        for connection in self.registry.snapshot():
            self.drop_connection(connection)
        await self.dispatcher.aclose()
        await self.stock_provider.aclose()
        await self.weather_provider.aclose()
        if self.music_provider is not None:
            await self.music_provider.aclose()
        self._started = False
