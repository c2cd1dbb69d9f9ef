"""
Application service: current weather for the configured location.
Turns any non-OK provider result into a defaulted WeatherReport so the
dashboard always has something to render.
"""

import logging

from tickerboard.domain.entities.fetch_result import FetchStatus
from tickerboard.domain.entities.weather_report import WeatherReport
from tickerboard.domain.ports.weather_port import IWeatherProvider

logger = logging.getLogger(__name__)


class WeatherService:
    def __init__(self, provider: IWeatherProvider) -> None:
        self._provider = provider

    async def current(self, location: str) -> WeatherReport:
        result = await self._provider.get_weather(location)
        if result.is_ok:
            return result.data
        if result.status is FetchStatus.FAILED:
            logger.error("Error fetching weather data for %r: %s", location, result.reason)
        return WeatherReport.unavailable(location)
