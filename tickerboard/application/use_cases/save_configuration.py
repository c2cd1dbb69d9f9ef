"""
Use-case: replace the dashboard configuration and broadcast the change.
The save goes through SaveTriggeredChangeSource so every live client is told
immediately instead of on the next file poll.
"""

from tickerboard.application.services.save_triggered_source import SaveTriggeredChangeSource
from tickerboard.domain.entities.dashboard_config import DashboardConfig


class SaveConfigurationUseCase:
    def __init__(self, saves: SaveTriggeredChangeSource) -> None:
        self._saves = saves

    async def execute(self, config: DashboardConfig) -> DashboardConfig:
        """Persist *config* wholesale.

        Raises:
            ValueError: if *config* has no usable tickers list.
            ConfigStoreError: propagated from the store on write failure.
        """
        if any(not symbol.strip() for symbol in config.tickers):
            raise ValueError("tickers must not contain blank symbols")
        normalized = DashboardConfig(
            tickers=tuple(symbol.strip().upper() for symbol in config.tickers),
            weather_location=config.weather_location,
            refresh_interval=config.refresh_interval,
            music_auth=config.music_auth,
            extra=config.extra,
        )
        await self._saves.save(normalized)
        return normalized
