# livemap/web_client/reporter.py
"""
Репортёр геолокации: подписка на позицию устройства и отправка
каждой точки в relay как send-location.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol

from livemap.common.constants import RelayEvent
from livemap.common.logger import log_debug, log_warning
from livemap.config import settings
from livemap.shared.channel import Channel, ChannelClosed


PositionCallback = Callable[[Any], Awaitable[None]]


@dataclass(frozen=True)
class WatchOptions:
    """Параметры непрерывной подписки на позицию."""
    enable_high_accuracy: bool = True
    timeout_ms: int = 5000
    maximum_age_ms: int = 0

    @classmethod
    def from_settings(cls) -> "WatchOptions":
        geo = settings.geolocation
        return cls(
            enable_high_accuracy=geo.ENABLE_HIGH_ACCURACY,
            timeout_ms=geo.TIMEOUT_MS,
            maximum_age_ms=geo.MAXIMUM_AGE_MS,
        )

    def to_js(self) -> dict[str, Any]:
        """Опции в формате PositionOptions браузера."""
        return {
            "enableHighAccuracy": self.enable_high_accuracy,
            "timeout": self.timeout_ms,
            "maximumAge": self.maximum_age_ms,
        }


class GeolocationWatcher(Protocol):
    """Непрерывная отменяемая подписка на позицию устройства."""

    async def start(
        self,
        on_position: PositionCallback,
        on_error: PositionCallback,
        options: WatchOptions,
    ) -> bool:
        """Запустить подписку. False — на платформе нет геолокации."""
        ...

    async def stop(self) -> None: ...


class LocationReporter:
    """
    Отправляет каждую полученную точку сразу, без батчинга.

    Ошибки получения позиции только логируются: повторы определяет
    сама подписка, relay о них не узнаёт. Без геолокации
    репортёр ничего не делает.
    """

    def __init__(
        self,
        watcher: GeolocationWatcher | None,
        channel: Channel | None = None,
        options: WatchOptions | None = None,
    ) -> None:
        self._watcher = watcher
        self._options = options or WatchOptions.from_settings()
        self._active = False
        # Канал может меняться при переподключении к relay
        self.channel: Channel | None = channel

    @property
    def active(self) -> bool:
        return self._active

    @property
    def options(self) -> WatchOptions:
        return self._options

    async def start(self) -> bool:
        if self._active:
            return True
        if self._watcher is None:
            return False

        self._active = await self._watcher.start(
            self._on_position,
            self._on_error,
            self._options,
        )
        return self._active

    async def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        await self._watcher.stop()

    async def _on_position(self, position: Any) -> None:
        if not isinstance(position, Mapping):
            await log_warning(f"Неожиданный формат позиции: {position!r}")
            return

        sample = {
            "latitude": position.get("latitude"),
            "longitude": position.get("longitude"),
        }

        if self.channel is None:
            await log_debug("Нет соединения с relay, точка пропущена")
            return

        try:
            await self.channel.send(RelayEvent.SEND_LOCATION.value, sample)
        except ChannelClosed:
            await log_debug("Соединение с relay закрыто, точка пропущена")

    async def _on_error(self, error: Any) -> None:
        if isinstance(error, Mapping):
            error = f"{error.get('message')} (code={error.get('code')})"
        await log_warning(f"Ошибка геолокации: {error}")
