from __future__ import annotations

import asyncio
from typing import Optional

from nicegui import background_tasks, ui
from websockets.exceptions import WebSocketException

from livemap.common.logger import log_info, log_warning
from livemap.config import settings
from livemap.web_client.components.geolocation import BrowserGeolocationWatcher
from livemap.web_client.components.map_component import MapComponent
from livemap.web_client.infra.relay_client import RelayClient
from livemap.web_client.renderer import MapRenderer, pump_events
from livemap.web_client.reporter import LocationReporter


class LiveMapPage:
    """Карта на весь экран с маркерами всех подключённых клиентов."""

    def __init__(self, relay_url: str) -> None:
        self.relay_url = relay_url
        self.client = ui.context.client
        self.map_component = MapComponent()
        self.renderer = MapRenderer(self.map_component)
        self.reporter = LocationReporter(BrowserGeolocationWatcher(self.client))
        self.ws_task: Optional[asyncio.Task] = None

    async def mount(self) -> None:
        self.map_component.render()
        self.ws_task = background_tasks.create(self._run(), name="live_map_ws_loop")
        # on_disconnect срабатывает и на кратковременный разрыв сокета
        self.client.on_delete(self.shutdown)

    async def _run(self) -> None:
        await self.client.connected()
        await self.reporter.start()
        await self._ws_loop()

    async def _ws_loop(self) -> None:
        while True:
            try:
                async with RelayClient(self.relay_url) as relay:
                    await log_info(f"Подключено к relay: {self.relay_url}")
                    # Пропущенные за время разрыва отключения не восстановить
                    self.renderer.clear()
                    self.reporter.channel = relay
                    await pump_events(relay, self.renderer)
                await log_info("Соединение с relay закрыто")
            except asyncio.CancelledError:
                break
            except (OSError, asyncio.TimeoutError, WebSocketException) as e:
                await log_warning(f"Ошибка соединения с relay: {e}")
            finally:
                self.reporter.channel = None

            await asyncio.sleep(settings.web_client.RECONNECT_DELAY)

    async def shutdown(self) -> None:
        await self.reporter.stop()
        if self.ws_task:
            self.ws_task.cancel()
