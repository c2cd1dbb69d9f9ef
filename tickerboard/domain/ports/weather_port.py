"""
Port (interface) for weather providers.
Infrastructure adapters (e.g. OpenMeteoWeatherProvider) must implement this interface.
"""

from abc import ABC, abstractmethod

from tickerboard.domain.entities.fetch_result import FetchResult
from tickerboard.domain.entities.weather_report import WeatherReport


class IWeatherProvider(ABC):
    @abstractmethod
    async def get_weather(self, location: str) -> FetchResult[WeatherReport]:
        """Current conditions for a free-form *location*. Never raises."""
        ...

    async def aclose(self) -> None:
        """Release pooled connections. Default: nothing to release."""
