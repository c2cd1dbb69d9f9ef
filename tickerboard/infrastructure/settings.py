"""
Process settings read from the environment.

The entry point calls load_dotenv() before Settings.from_env(), so a local
.env file works the same as real environment variables. Missing provider
credentials are not errors: the matching features switch themselves off.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional


@dataclass(frozen=True)
class Settings:
    finnhub_api_key: Optional[str] = None
    quote_provider: str = "finnhub"
    host: str = "0.0.0.0"
    port: int = 3000
    config_file: Path = Path("config.json")
    config_poll_seconds: float = 1.0
    http_timeout_seconds: float = 10.0
    spotify_client_id: Optional[str] = None
    spotify_client_secret: Optional[str] = None
    spotify_redirect_uri: Optional[str] = None
    log_level: str = "INFO"

    @property
    def music_enabled(self) -> bool:
        return bool(self.spotify_client_id)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        port = int(env.get("PORT", "3000"))
        return cls(
            finnhub_api_key=env.get("FINNHUB_API_KEY") or None,
            quote_provider=env.get("QUOTE_PROVIDER", "finnhub").strip().lower(),
            host=env.get("HOST", "0.0.0.0"),
            port=port,
            config_file=Path(env.get("CONFIG_FILE", "config.json")),
            config_poll_seconds=float(env.get("CONFIG_POLL_SECONDS", "1.0")),
            http_timeout_seconds=float(env.get("HTTP_TIMEOUT_SECONDS", "10")),
            spotify_client_id=env.get("SPOTIFY_CLIENT_ID") or None,
            spotify_client_secret=env.get("SPOTIFY_CLIENT_SECRET") or None,
            spotify_redirect_uri=(
                env.get("SPOTIFY_REDIRECT_URI") or f"http://localhost:{port}/config.html"
            ),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )
