"""
Per-connection update scheduler.

A DashboardConnection owns everything one live client needs: its push
channel, its own stock cache and a cancellable timer task. Lifecycle:

    CONNECTING --start()--> ACTIVE --stop()--> DISCONNECTED (terminal)

Updates to one connection never overlap. A timer tick that finds an update
already in flight is dropped; a forced update waits its turn. Nothing is
pushed once stop() has run, even if a fetch was in flight at the time.
"""

import asyncio
import logging
import uuid
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from tickerboard.application.services.market_calendar import eastern_now, market_status
from tickerboard.application.services.stock_cache import StockCache
from tickerboard.application.services.weather_service import WeatherService
from tickerboard.domain.entities.dashboard_config import DashboardConfig
from tickerboard.domain.ports.config_store_port import IConfigStore
from tickerboard.domain.ports.push_channel_port import IPushChannel

logger = logging.getLogger(__name__)

UPDATE = "update"
CONFIG_CHANGED = "configChanged"


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    ACTIVE = "active"
    DISCONNECTED = "disconnected"


class DashboardConnection:
    CLOSED_MARKET_PERIOD_SECONDS: float = 300.0

    def __init__(
        self,
        channel: IPushChannel,
        store: IConfigStore,
        stock_cache: StockCache,
        weather: WeatherService,
        clock: Callable[[], datetime] = eastern_now,
        closed_market_period: float = CLOSED_MARKET_PERIOD_SECONDS,
        connection_id: Optional[str] = None,
    ) -> None:
        self.id = connection_id or uuid.uuid4().hex
        self.state = ConnectionState.CONNECTING
        self.last_known_config: Optional[DashboardConfig] = None
        self._channel = channel
        self._store = store
        self._stock_cache = stock_cache
        self._weather = weather
        self._clock = clock
        self._closed_market_period = closed_market_period
        self._lock = asyncio.Lock()
        self._timer: Optional[asyncio.Task] = None
        self._period: Optional[float] = None

    @property
    def stock_cache(self) -> StockCache:
        return self._stock_cache

    @property
    def period(self) -> Optional[float]:
        """Seconds between scheduled updates, None until started."""
        return self._period

    @property
    def timer(self) -> Optional[asyncio.Task]:
        return self._timer

    @property
    def is_closed(self) -> bool:
        return self.state is ConnectionState.DISCONNECTED

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Send the first update, then start the repeating timer."""
        await self.send_update(force_fresh=False)
        if self.is_closed:
            return
        config = self.last_known_config or await self._store.load()
        if self.is_closed:
            return
        self._schedule(self.period_for(config, market_status(self._clock()).is_open))
        self.state = ConnectionState.ACTIVE

    def stop(self) -> None:
        """Cancel the timer. Synchronous so the caller can evict immediately after."""
        self.state = ConnectionState.DISCONNECTED
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    async def send_update(self, force_fresh: bool = False) -> bool:
        """Fetch and push one update.

        Returns:
            True if an update reached the channel. Failures are logged, never
            raised, so a bad tick cannot take the timer down.
        """
        if self.is_closed:
            return False
        async with self._lock:
            return await self._send_update_locked(force_fresh)

    async def request_update(self) -> bool:
        """Client asked for an immediate refresh."""
        logger.info("Update requested by client %s", self.id)
        return await self.send_update(force_fresh=True)

    async def reload_config(self) -> bool:
        """Client saved the config itself: drop the local cache and refetch."""
        logger.info("Config change reported by client %s", self.id)
        self._stock_cache.clear()
        return await self.send_update(force_fresh=True)

    async def notify_config_changed(self) -> None:
        if self.is_closed:
            return
        try:
            await self._channel.send(CONFIG_CHANGED)
        except Exception as exc:
            logger.warning("Could not notify client %s of config change: %s", self.id, exc)

    async def _send_update_locked(self, force_fresh: bool) -> bool:
        try:
            config = await self._store.load()
            self.last_known_config = config
            status = market_status(self._clock())

            batch, weather = await asyncio.gather(
                self._stock_cache.get_stocks(config, force_fresh=force_fresh),
                self._weather.current(config.weather_location),
            )
            if self.is_closed:
                logger.debug("Client %s left during fetch; discarding update", self.id)
                return False

            logger.info(
                "Sending update with %d stocks: %s",
                len(batch.stocks),
                [s.symbol for s in batch.stocks],
            )
            await self._channel.send(
                UPDATE,
                {
                    "stocks": [s.to_dict() for s in batch.stocks],
                    "weather": weather.to_dict(),
                    "marketStatus": status.to_dict(),
                },
            )
            self._reschedule_if_needed(config, status.is_open)
            return True
        except Exception:
            logger.exception("Error sending update to client %s", self.id)
            return False

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def period_for(self, config: DashboardConfig, market_open: bool) -> float:
        if market_open:
            return config.refresh_interval / 1000
        return self._closed_market_period

    def _reschedule_if_needed(self, config: DashboardConfig, market_open: bool) -> None:
        if self._timer is None or self.is_closed:
            return
        period = self.period_for(config, market_open)
        if period != self._period:
            logger.info("Updated interval to %s seconds for client %s", period, self.id)
            self._schedule(period)

    def _schedule(self, period: float) -> None:
        # A timer cancelled from inside its own tick stops at its next sleep.
        if self._timer is not None:
            self._timer.cancel()
        self._period = period
        self._timer = asyncio.create_task(self._run_timer(period), name=f"tickerboard-timer-{self.id}")
        logger.info("Update interval set to %s seconds for client %s", period, self.id)

    async def _run_timer(self, period: float) -> None:
        while True:
            await asyncio.sleep(period)
            if self._lock.locked():
                logger.debug("Update still in flight for %s; skipping tick", self.id)
                continue
            # Shielded: cancelling the timer must not abort a fetch mid-flight;
            # the finished update is discarded by send_update once closed.
            await asyncio.shield(self.send_update(force_fresh=False))
