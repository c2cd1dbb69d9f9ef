"""
Infrastructure adapter: FastAPI/Starlette WebSocket → IPushChannel.

Messages are JSON envelopes: {"type": <message type>} plus "data" when the
message carries a payload.
"""

from typing import Any, Optional

from fastapi import WebSocket

from tickerboard.domain.ports.push_channel_port import IPushChannel


class WebSocketPushChannel(IPushChannel):
    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket

    async def send(self, message_type: str, data: Optional[dict[str, Any]] = None) -> None:
        message: dict[str, Any] = {"type": message_type}
        if data is not None:
            message["data"] = data
        await self._websocket.send_json(message)
