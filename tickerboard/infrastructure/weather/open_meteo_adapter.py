"""
Infrastructure adapter: Open-Meteo geocoding + forecast APIs → IWeatherProvider.

Open-Meteo is free and keyless. The location string is geocoded first
(first match wins), then current conditions are requested in °F and mph.
WMO weather codes are mapped to a description and an icon here.
"""

from typing import Any, Optional

import httpx

from tickerboard.domain.entities.fetch_result import FetchResult
from tickerboard.domain.entities.weather_report import WeatherReport
from tickerboard.domain.ports.weather_port import IWeatherProvider

WEATHER_DESCRIPTIONS = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Foggy",
    51: "Light drizzle",
    53: "Drizzle",
    55: "Heavy drizzle",
    61: "Light rain",
    63: "Rain",
    65: "Heavy rain",
    71: "Light snow",
    73: "Snow",
    75: "Heavy snow",
    77: "Snow grains",
    80: "Light showers",
    81: "Showers",
    82: "Heavy showers",
    85: "Light snow showers",
    86: "Snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with hail",
    99: "Thunderstorm with hail",
}

CURRENT_FIELDS = (
    "temperature_2m,relative_humidity_2m,apparent_temperature,"
    "weather_code,wind_speed_10m,is_day"
)


def describe_weather(code: Optional[int]) -> str:
    return WEATHER_DESCRIPTIONS.get(code, "Unknown")


def weather_icon(code: Optional[int], is_day: bool = True) -> str:
    if code is None:
        return "🌡️"
    if code == 0:
        return "☀️" if is_day else "🌙"
    if code in (1, 2):
        return "🌤️" if is_day else "🌙"
    if code == 3:
        return "☁️"
    if code in (45, 48):
        return "🌫️"
    if 51 <= code <= 55:
        return "🌦️"
    if 61 <= code <= 65:
        return "🌧️"
    if 71 <= code <= 77:
        return "🌨️"
    if 80 <= code <= 82:
        return "🌧️"
    if 85 <= code <= 86:
        return "🌨️"
    if code >= 95:
        return "⛈️"
    return "🌡️"


class OpenMeteoWeatherProvider(IWeatherProvider):
    GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
    FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def get_weather(self, location: str) -> FetchResult[WeatherReport]:
        try:
            place = await self._geocode(location)
            if place is None:
                return FetchResult.failed(f"Location not found: {location!r}")
            response = await self._client.get(
                self.FORECAST_URL,
                params={
                    "latitude": place["latitude"],
                    "longitude": place["longitude"],
                    "current": CURRENT_FIELDS,
                    "temperature_unit": "fahrenheit",
                    "wind_speed_unit": "mph",
                    "timezone": "auto",
                },
            )
            response.raise_for_status()
            body = response.json()
            if not isinstance(body, dict) or not isinstance(body.get("current"), dict):
                return FetchResult.failed("forecast response had no current conditions")
            current = body["current"]
            return FetchResult.ok(self._to_report(place, current))
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as exc:
            return FetchResult.failed(f"{exc.__class__.__name__}: {exc}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _geocode(self, location: str) -> Optional[dict[str, Any]]:
        response = await self._client.get(
            self.GEOCODING_URL,
            params={"name": location, "count": 1, "language": "en", "format": "json"},
        )
        response.raise_for_status()
        body = response.json()
        results = body.get("results") if isinstance(body, dict) else None
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            return None
        return results[0]

    @staticmethod
    def _to_report(place: dict[str, Any], current: dict[str, Any]) -> WeatherReport:
        code = current.get("weather_code")
        is_day = current.get("is_day") == 1
        description = describe_weather(code)
        name = place.get("name", "")
        country = place.get("country")
        return WeatherReport(
            location=f"{name}, {country}" if country else name,
            temperature=round(current["temperature_2m"]),
            feels_like=_round_or_none(current.get("apparent_temperature")),
            condition=description,
            description=description,
            icon=weather_icon(code, is_day),
            humidity=current.get("relative_humidity_2m"),
            wind_speed=_round_or_none(current.get("wind_speed_10m")),
            weather_code=code,
            is_day=is_day,
        )


def _round_or_none(value: Optional[float]) -> Optional[int]:
    return round(value) if value is not None else None
