# livemap/web_client/infra/relay_client.py
"""
Клиент relay поверх websockets.
"""

from __future__ import annotations

from typing import Any, AsyncIterator

import websockets
from websockets.exceptions import ConnectionClosed

from livemap.common.constants import RelayEvent
from livemap.shared.channel import ChannelClosed, MalformedMessage, decode_envelope, encode_envelope
from livemap.shared.models.location import LocationSample


class RelayClient:
    """
    Клиентская сторона канала событий.

    Использование:
        async with RelayClient("ws://localhost:9090/ws") as relay:
            await relay.send_location(10.0, 20.0)
            async for event, data in relay.events():
                ...
    """

    def __init__(self, url: str, *, open_timeout: float = 10.0) -> None:
        self.url = url
        self.open_timeout = open_timeout
        self._connection: Any = None

    async def __aenter__(self) -> "RelayClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def connect(self) -> None:
        self._connection = await websockets.connect(self.url, open_timeout=self.open_timeout)

    async def close(self) -> None:
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    async def send(self, event: str, data: Any) -> None:
        if self._connection is None:
            raise ChannelClosed("not connected")
        try:
            await self._connection.send(encode_envelope(event, data))
        except ConnectionClosed as exc:
            raise ChannelClosed(str(exc)) from exc

    async def receive(self) -> tuple[str, Any]:
        if self._connection is None:
            raise ChannelClosed("not connected")
        try:
            raw = await self._connection.recv()
        except ConnectionClosed as exc:
            raise ChannelClosed(str(exc)) from exc
        return decode_envelope(raw)

    async def send_location(self, latitude: float, longitude: float) -> None:
        sample = LocationSample(latitude=latitude, longitude=longitude)
        await self.send(RelayEvent.SEND_LOCATION.value, sample.model_dump())

    async def events(self) -> AsyncIterator[tuple[str, Any]]:
        """Входящие события до закрытия соединения; битые кадры пропускаются."""
        while True:
            try:
                yield await self.receive()
            except MalformedMessage:
                continue
            except ChannelClosed:
                return
