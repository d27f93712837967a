# livemap/web_client/renderer.py
"""
Рендерер карты: отражает receive-location и user-disconnected
в маркерах на карте.
"""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import ValidationError

from livemap.common.constants import RelayEvent
from livemap.common.logger import log_debug, log_warning
from livemap.shared.channel import Channel, ChannelClosed, MalformedMessage
from livemap.shared.models.location import RelayedUpdate


class MapView(Protocol):
    """То, на чём рисуются маркеры."""

    def set_view(self, latitude: float, longitude: float) -> None: ...

    def add_marker(self, latitude: float, longitude: float) -> Any: ...

    def move_marker(self, marker: Any, latitude: float, longitude: float) -> None: ...

    def remove_marker(self, marker: Any) -> None: ...


class MapRenderer:
    """
    Набор маркеров identity -> marker.

    Не больше одного маркера на identity: первое обновление создаёт маркер,
    следующие двигают его, объявление об отключении удаляет.
    Каждое обновление центрирует карту на своей точке.
    """

    def __init__(self, view: MapView) -> None:
        self._view = view
        self._markers: dict[str, Any] = {}

    @property
    def markers(self) -> dict[str, Any]:
        return dict(self._markers)

    def __len__(self) -> int:
        return len(self._markers)

    async def handle_update(self, data: Any) -> None:
        """Обработать receive-location {id, latitude, longitude}."""
        try:
            update = RelayedUpdate.model_validate(data)
        except ValidationError:
            await log_warning(f"Некорректное обновление локации, пропуск: {data!r}")
            return

        self._view.set_view(update.latitude, update.longitude)

        marker = self._markers.get(update.id)
        if marker is not None:
            self._view.move_marker(marker, update.latitude, update.longitude)
        else:
            self._markers[update.id] = self._view.add_marker(update.latitude, update.longitude)

    async def handle_disconnect(self, identity: Any) -> None:
        """Обработать user-disconnected: убрать маркер, если он есть."""
        marker = self._markers.pop(str(identity), None)
        if marker is not None:
            self._view.remove_marker(marker)

    async def dispatch(self, event: str, data: Any) -> None:
        if event == RelayEvent.RECEIVE_LOCATION.value:
            await self.handle_update(data)
        elif event == RelayEvent.USER_DISCONNECTED.value:
            await self.handle_disconnect(data)
        else:
            await log_debug(f"Неизвестное событие '{event}', пропуск")

    def clear(self) -> None:
        """Убрать все маркеры (после переподключения к relay)."""
        for marker in self._markers.values():
            self._view.remove_marker(marker)
        self._markers.clear()


async def pump_events(channel: Channel, renderer: MapRenderer) -> None:
    """Передавать входящие события в рендерер, пока канал открыт."""
    while True:
        try:
            event, data = await channel.receive()
        except MalformedMessage as exc:
            await log_warning(f"Некорректный кадр от relay: {exc.reason}")
            continue
        except ChannelClosed:
            return

        await renderer.dispatch(event, data)
