"""
FastAPI entry point: HTTP API + WebSocket push channel.

This module is the Composition Root: it reads Settings, wires the
infrastructure adapters into a DashboardContext and exposes the context
through routes. The context's lifecycle (change sources, live connections,
HTTP clients) is tied to the app lifespan.

Run locally:
    uvicorn tickerboard.infrastructure.entrypoints.fastapi_app:app --port 3000
or:
    python -m tickerboard.infrastructure.entrypoints.fastapi_app
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()

from tickerboard.application.context import DashboardContext
from tickerboard.application.services.connection import DashboardConnection
from tickerboard.application.services.market_calendar import format_hours, is_market_open, market_status
from tickerboard.application.use_cases.connect_music_account import (
    ExchangeMusicCodeUseCase,
    GetMusicAuthUrlUseCase,
)
from tickerboard.application.use_cases.get_configuration import GetConfigurationUseCase
from tickerboard.application.use_cases.get_stock_batch import GetStockBatchUseCase
from tickerboard.application.use_cases.get_weather import GetWeatherUseCase
from tickerboard.application.use_cases.save_configuration import SaveConfigurationUseCase
from tickerboard.application.use_cases.search_music import SearchMusicUseCase
from tickerboard.domain.entities.dashboard_config import (
    MAX_REFRESH_INTERVAL_MS,
    MIN_REFRESH_INTERVAL_MS,
    DashboardConfig,
)
from tickerboard.domain.errors import (
    ConfigStoreError,
    MusicAuthError,
    MusicNotConfiguredError,
    MusicProviderError,
)
from tickerboard.domain.ports.stock_data_port import IStockDataProvider
from tickerboard.infrastructure.config_store.json_file_store import JsonFileConfigStore
from tickerboard.infrastructure.config_store.polling_source import PollingConfigChangeSource
from tickerboard.infrastructure.logging_setup import configure_logging
from tickerboard.infrastructure.music.spotify_adapter import SpotifyMusicProvider
from tickerboard.infrastructure.push.websocket_channel import WebSocketPushChannel
from tickerboard.infrastructure.settings import Settings
from tickerboard.infrastructure.stock_data.finnhub_adapter import FinnhubStockDataProvider
from tickerboard.infrastructure.stock_data.yfinance_adapter import YFinanceStockDataProvider
from tickerboard.infrastructure.weather.open_meteo_adapter import OpenMeteoWeatherProvider

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------
class MusicAuthPayload(BaseModel):
    enabled: bool = False
    accessToken: Optional[str] = None
    refreshToken: Optional[str] = None
    tokenExpiresAt: Optional[int] = None
    selectedItem: Optional[dict] = None


class ConfigPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    tickers: list[str]
    weatherLocation: str = Field(min_length=1)
    refreshInterval: int = Field(ge=MIN_REFRESH_INTERVAL_MS, le=MAX_REFRESH_INTERVAL_MS)
    musicAuth: Optional[MusicAuthPayload] = None

    def to_config(self) -> DashboardConfig:
        return DashboardConfig.from_dict(self.model_dump(exclude_none=True))


class MusicCodePayload(BaseModel):
    code: Optional[str] = None


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------
def build_stock_provider(settings: Settings) -> IStockDataProvider:
    if settings.quote_provider == "yfinance":
        return YFinanceStockDataProvider()
    if settings.quote_provider != "finnhub":
        logger.warning("Unknown QUOTE_PROVIDER %r; falling back to finnhub", settings.quote_provider)
    return FinnhubStockDataProvider(settings.finnhub_api_key, timeout=settings.http_timeout_seconds)


def build_context(settings: Settings) -> DashboardContext:
    store = JsonFileConfigStore(settings.config_file)
    music = (
        SpotifyMusicProvider(
            client_id=settings.spotify_client_id,
            client_secret=settings.spotify_client_secret,
            redirect_uri=settings.spotify_redirect_uri,
            timeout=settings.http_timeout_seconds,
        )
        if settings.music_enabled
        else None
    )
    context = DashboardContext(
        store=store,
        stock_provider=build_stock_provider(settings),
        weather_provider=OpenMeteoWeatherProvider(timeout=settings.http_timeout_seconds),
        music_provider=music,
    )
    context.add_change_source(
        PollingConfigChangeSource(store, context.detector, interval=settings.config_poll_seconds)
    )
    return context


def create_app(context: DashboardContext, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    get_config_uc = GetConfigurationUseCase(context.store)
    save_config_uc = SaveConfigurationUseCase(context.saves)
    stock_batch_uc = GetStockBatchUseCase(context.store, context.stock_cache, context.clock)
    weather_uc = GetWeatherUseCase(context.store, context.weather)
    music_url_uc = GetMusicAuthUrlUseCase(context.music_provider)
    music_code_uc = ExchangeMusicCodeUseCase(context.music_provider, context.store)
    music_search_uc = SearchMusicUseCase(context.music_provider)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        await context.start()
        open_now = is_market_open(context.clock())
        logger.info("Market hours: %s", format_hours())
        logger.info("Market is currently: %s", "OPEN" if open_now else "CLOSED")
        if not settings.finnhub_api_key and settings.quote_provider == "finnhub":
            logger.warning("FINNHUB_API_KEY not set - stock quotes are disabled")
        if not open_now:
            logger.info("Quote history requests are paused while the market is closed")
        try:
            yield
        finally:
            await context.stop()

    app = FastAPI(title="Tickerboard", lifespan=lifespan)
    app.state.context = context

    # -----------------------------------------------------------------------
    # Configuration
    # -----------------------------------------------------------------------
    @app.get("/api/config")
    async def get_config():
        try:
            config = await get_config_uc.execute()
        except Exception as exc:
            logger.exception("Failed to load configuration")
            raise HTTPException(status_code=500, detail="Failed to load configuration") from exc
        return config.to_dict()

    @app.post("/api/config")
    async def save_config(body: ConfigPayload):
        try:
            saved = await save_config_uc.execute(body.to_config())
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except ConfigStoreError as exc:
            logger.error("%s", exc)
            raise HTTPException(status_code=500, detail="Failed to save configuration") from exc
        return {"success": True, "config": saved.to_dict()}

    # -----------------------------------------------------------------------
    # Dashboard data
    # -----------------------------------------------------------------------
    @app.get("/api/stocks")
    async def get_stocks():
        try:
            view = await stock_batch_uc.execute()
        except Exception as exc:
            logger.exception("Failed to fetch stock data")
            raise HTTPException(status_code=500, detail="Failed to fetch stock data") from exc
        return view.to_dict()

    @app.get("/api/weather")
    async def get_weather():
        try:
            report = await weather_uc.execute()
        except Exception as exc:
            logger.exception("Failed to fetch weather data")
            raise HTTPException(status_code=500, detail="Failed to fetch weather data") from exc
        return report.to_dict()

    @app.get("/api/market-status")
    async def get_market_status():
        return market_status(context.clock()).to_dict()

    @app.get("/health")
    async def health():
        return {"status": "ok", "connections": len(context.registry)}

    # -----------------------------------------------------------------------
    # Music provider
    # -----------------------------------------------------------------------
    @app.get("/api/music/auth-url")
    async def music_auth_url():
        try:
            return {"authUrl": music_url_uc.execute()}
        except MusicNotConfiguredError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc

    @app.post("/api/music/callback")
    async def music_callback(body: MusicCodePayload):
        try:
            access_token = await music_code_uc.execute(body.code or "")
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except MusicNotConfiguredError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        except MusicProviderError as exc:
            raise HTTPException(status_code=500, detail="Failed to exchange authorization code") from exc
        return {"accessToken": access_token}

    @app.get("/api/music/search")
    async def music_search(request: Request, q: Optional[str] = None):
        if not q:
            raise HTTPException(status_code=400, detail="Query parameter required")
        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            raise HTTPException(status_code=401, detail="Authorization required")
        token = auth_header.split(" ", 1)[1]
        try:
            items = await music_search_uc.execute(q, token)
        except MusicAuthError as exc:
            raise HTTPException(status_code=401, detail="Invalid or expired token") from exc
        except MusicNotConfiguredError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        except Exception as exc:
            logger.exception("Error searching music provider")
            raise HTTPException(status_code=500, detail="Failed to search music provider") from exc
        return {"items": items}

    # -----------------------------------------------------------------------
    # Push channel
    # -----------------------------------------------------------------------
    @app.websocket("/ws")
    async def dashboard_socket(websocket: WebSocket):
        await websocket.accept()
        connection = context.new_connection(WebSocketPushChannel(websocket))
        try:
            await connection.start()
            while True:
                raw = await websocket.receive_text()
                await handle_client_message(connection, raw)
        except WebSocketDisconnect:
            pass
        finally:
            context.drop_connection(connection)

    return app


async def handle_client_message(connection: DashboardConnection, raw: str) -> None:
    """Route one inbound push-channel message; bad input is logged and ignored."""
    try:
        message = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Ignoring non-JSON message from client %s", connection.id)
        return
    message_type = message.get("type") if isinstance(message, dict) else None
    if message_type == "requestUpdate":
        await connection.request_update()
    elif message_type == "configChanged":
        await connection.reload_config()
    else:
        logger.warning("Ignoring unknown message type %r from client %s", message_type, connection.id)


# ---------------------------------------------------------------------------
# Composition Root: wire all dependencies once at startup
# ---------------------------------------------------------------------------
_settings = Settings.from_env()
configure_logging(_settings.log_level)
app = create_app(build_context(_settings), _settings)


def main() -> None:
    logger.info("Tickerboard running on http://localhost:%d", _settings.port)
    uvicorn.run(app, host=_settings.host, port=_settings.port, log_level=_settings.log_level.lower())


if __name__ == "__main__":
    main()
