"""
Domain entity for current weather conditions at the configured location.
Zero external dependencies: pure Python dataclass only.
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class WeatherReport:
    location: str
    temperature: Union[int, str]
    condition: str
    description: str
    icon: str
    feels_like: Optional[int] = None
    humidity: Optional[int] = None
    wind_speed: Optional[int] = None
    weather_code: Optional[int] = None
    is_day: Optional[bool] = None
    error: Optional[str] = None

    @classmethod
    def unavailable(cls, location: str, reason: str = "Failed to fetch weather") -> "WeatherReport":
        return cls(
            location=location,
            temperature="--",
            condition="Unknown",
            description="Unable to fetch weather",
            icon="🌡️",
            error=reason,
        )

    def to_dict(self) -> dict:
        return {
            "location": self.location,
            "temperature": self.temperature,
            "feelsLike": self.feels_like,
            "condition": self.condition,
            "description": self.description,
            "icon": self.icon,
            "humidity": self.humidity,
            "windSpeed": self.wind_speed,
            "weatherCode": self.weather_code,
            "isDay": self.is_day,
            "error": self.error,
        }
