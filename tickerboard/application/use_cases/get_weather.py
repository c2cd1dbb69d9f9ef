"""Use-case: current weather for the configured location."""

from tickerboard.application.services.weather_service import WeatherService
from tickerboard.domain.entities.weather_report import WeatherReport
from tickerboard.domain.ports.config_store_port import IConfigStore


class GetWeatherUseCase:
    def __init__(self, store: IConfigStore, weather: WeatherService) -> None:
        self._store = store
        self._weather = weather

    async def execute(self) -> WeatherReport:
        config = await self._store.load()
        return await self._weather.current(config.weather_location)
