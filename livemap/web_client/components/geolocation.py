from __future__ import annotations

import json
from typing import Any, Optional

from nicegui import Client, ui

from livemap.web_client.reporter import PositionCallback, WatchOptions


class BrowserGeolocationWatcher:
    """
    navigator.geolocation.watchPosition в браузере клиента.
    Позиции и ошибки приходят обратно через emitEvent / ui.on.
    """

    POSITION_EVENT = "livemap-position"
    ERROR_EVENT = "livemap-position-error"

    def __init__(self, client: Client) -> None:
        self.client = client
        self.watch_id: Optional[int] = None

    def _watch_js(self, options: WatchOptions) -> str:
        # null, если у браузера нет геолокации
        return f"""
        (() => {{
            if (!navigator.geolocation) {{
                return null;
            }}
            return navigator.geolocation.watchPosition(
                (position) => emitEvent("{self.POSITION_EVENT}", {{
                    latitude: position.coords.latitude,
                    longitude: position.coords.longitude,
                }}),
                (error) => emitEvent("{self.ERROR_EVENT}", {{
                    code: error.code,
                    message: error.message,
                }}),
                {json.dumps(options.to_js())}
            );
        }})()
        """

    async def start(
        self,
        on_position: PositionCallback,
        on_error: PositionCallback,
        options: WatchOptions,
    ) -> bool:
        with self.client:
            ui.on(self.POSITION_EVENT, lambda e: on_position(e.args))
            ui.on(self.ERROR_EVENT, lambda e: on_error(e.args))

        result: Any = await self.client.run_javascript(self._watch_js(options))
        self.watch_id = int(result) if result is not None else None
        return self.watch_id is not None

    async def stop(self) -> None:
        if self.watch_id is None:
            return
        watch_id, self.watch_id = self.watch_id, None
        if self.client.has_socket_connection:
            self.client.run_javascript(f"navigator.geolocation.clearWatch({watch_id})")
