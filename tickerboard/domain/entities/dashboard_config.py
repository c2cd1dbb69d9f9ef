"""
Domain entities for the persisted dashboard configuration.
Zero external dependencies: pure Python dataclasses only.

The JSON document uses camelCase keys (tickers, weatherLocation,
refreshInterval, musicAuth); to_dict()/from_dict() are the only place that
mapping lives.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

DEFAULT_TICKERS = ("AAPL", "TSLA", "MSFT", "GOOGL")
DEFAULT_WEATHER_LOCATION = "New York"
DEFAULT_REFRESH_INTERVAL_MS = 15000

MIN_REFRESH_INTERVAL_MS = 5000
MAX_REFRESH_INTERVAL_MS = 60000

_KNOWN_KEYS = {"tickers", "weatherLocation", "refreshInterval", "musicAuth", "spotify"}


def clamp_refresh_interval(interval_ms: int) -> int:
    return max(MIN_REFRESH_INTERVAL_MS, min(MAX_REFRESH_INTERVAL_MS, interval_ms))


@dataclass(frozen=True)
class MusicAuth:
    enabled: bool = False
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    token_expires_at: Optional[int] = None
    selected_item: Optional[dict] = None

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
            "tokenExpiresAt": self.token_expires_at,
            "selectedItem": self.selected_item,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "MusicAuth":
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("musicAuth must be a JSON object")
        return cls(
            enabled=bool(data.get("enabled", False)),
            access_token=data.get("accessToken"),
            refresh_token=data.get("refreshToken"),
            token_expires_at=data.get("tokenExpiresAt"),
            selected_item=data.get("selectedItem"),
        )


@dataclass(frozen=True)
class DashboardConfig:
    """The single shared dashboard configuration.

    tickers:          ordered symbols; uniqueness is expected but not enforced.
    weather_location: free-form place name handed to the geocoder.
    refresh_interval: milliseconds between pushes while the market is open;
                      documents are clamped to [5000, 60000].
    music_auth:       music-provider OAuth state, if any.
    extra:            unrecognised top-level keys, preserved on round-trip.
    """

    tickers: tuple[str, ...] = DEFAULT_TICKERS
    weather_location: str = DEFAULT_WEATHER_LOCATION
    refresh_interval: int = DEFAULT_REFRESH_INTERVAL_MS
    music_auth: MusicAuth = field(default_factory=MusicAuth)
    extra: dict = field(default_factory=dict)

    @property
    def ticker_set(self) -> frozenset[str]:
        return frozenset(self.tickers)

    def with_music_auth(self, music_auth: MusicAuth) -> "DashboardConfig":
        return DashboardConfig(
            tickers=self.tickers,
            weather_location=self.weather_location,
            refresh_interval=self.refresh_interval,
            music_auth=music_auth,
            extra=dict(self.extra),
        )

    def to_dict(self) -> dict[str, Any]:
        document = dict(self.extra)
        document.update(
            {
                "tickers": list(self.tickers),
                "weatherLocation": self.weather_location,
                "refreshInterval": self.refresh_interval,
                "musicAuth": self.music_auth.to_dict(),
            }
        )
        return document

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DashboardConfig":
        """Build a config from its JSON document, filling gaps with defaults.

        The legacy top-level "spotify" key is read as an alias of "musicAuth".
        """
        if not isinstance(data, dict):
            raise ValueError("configuration document must be a JSON object")
        tickers = data.get("tickers", DEFAULT_TICKERS)
        if isinstance(tickers, str) or not isinstance(tickers, (list, tuple)):
            raise ValueError("tickers must be a list of symbols")
        music = data.get("musicAuth", data.get("spotify"))
        return cls(
            tickers=tuple(str(symbol) for symbol in tickers),
            weather_location=str(data.get("weatherLocation", DEFAULT_WEATHER_LOCATION)),
            refresh_interval=clamp_refresh_interval(
                int(data.get("refreshInterval", DEFAULT_REFRESH_INTERVAL_MS))
            ),
            music_auth=MusicAuth.from_dict(music),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )
