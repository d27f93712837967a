# livemap/services/relay/channel.py
"""
Серверная сторона канала событий поверх FastAPI WebSocket.
"""

from __future__ import annotations

from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

from livemap.shared.channel import (
    Channel,
    ChannelClosed,
    MalformedMessage,
    decode_envelope,
    encode_envelope,
)

__all__ = ["Channel", "ChannelClosed", "MalformedMessage", "WebSocketChannel"]


class WebSocketChannel:
    """Обёртка над принятым WebSocket."""

    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket

    async def send(self, event: str, data: Any) -> None:
        try:
            await self._websocket.send_text(encode_envelope(event, data))
        except (WebSocketDisconnect, OSError, RuntimeError) as exc:
            # RuntimeError: Starlette не даёт писать после close
            raise ChannelClosed(str(exc)) from exc

    async def receive(self) -> tuple[str, Any]:
        message = await self._websocket.receive()

        if message["type"] == "websocket.disconnect":
            raise ChannelClosed(f"code={message.get('code')}")

        raw = message.get("text")
        if raw is None:
            raw = message.get("bytes") or b""
        return decode_envelope(raw)

    async def close(self) -> None:
        try:
            await self._websocket.close()
        except (OSError, RuntimeError):
            # Уже закрыто
            pass
