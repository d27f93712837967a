# tests/web_client/test_live_map.py
"""
Тесты страницы карты: подписки клиента и цикл переподключения к relay.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from livemap.config import settings
from livemap.web_client.pages.live_map import LiveMapPage
from livemap.web_client.renderer import MapRenderer


URL = "ws://relay.test/ws"
MODULE = "livemap.web_client.pages.live_map"


@pytest.fixture
def page(map_view):
    with patch(f"{MODULE}.ui") as mock_ui:
        mock_ui.context.client = MagicMock()
        page = LiveMapPage(URL)
    page.renderer = MapRenderer(map_view)
    return page


def _session(relay=None, error: Exception | None = None) -> MagicMock:
    """Контекстный менеджер, который вернёт RelayClient(...)."""
    cm = MagicMock()
    if error is not None:
        cm.__aenter__ = AsyncMock(side_effect=error)
    else:
        cm.__aenter__ = AsyncMock(return_value=relay)
    cm.__aexit__ = AsyncMock(return_value=False)
    return cm


class TestMount:

    @pytest.mark.asyncio
    async def test_cleanup_only_on_client_delete(self, page: LiveMapPage) -> None:
        """Кратковременный разрыв сокета не останавливает страницу."""
        page.map_component.render = MagicMock()
        task = MagicMock()

        def create(coro, name):
            coro.close()
            return task

        with patch(f"{MODULE}.background_tasks.create", side_effect=create):
            await page.mount()

        page.client.on_delete.assert_called_once_with(page.shutdown)
        page.client.on_disconnect.assert_not_called()
        task.cancel.assert_not_called()
        assert page.ws_task is task

    @pytest.mark.asyncio
    async def test_shutdown_stops_reporter_and_loop(self, page: LiveMapPage) -> None:
        page.reporter.stop = AsyncMock()
        page.ws_task = MagicMock()

        await page.shutdown()

        page.reporter.stop.assert_awaited_once()
        page.ws_task.cancel.assert_called_once()


class TestWsLoop:

    @pytest.mark.asyncio
    async def test_retry_then_session_then_cancel(self, page: LiveMapPage) -> None:
        """Неудачное подключение, пауза, сессия с очисткой маркеров, отмена."""
        await page.renderer.handle_update({"id": "stale", "latitude": 1, "longitude": 1})
        relay = MagicMock()
        seen = {}

        async def pump(channel, renderer):
            seen["channel"] = page.reporter.channel
            seen["markers"] = len(renderer)
            raise asyncio.CancelledError()

        sessions = [_session(error=OSError("connection refused")), _session(relay)]

        with patch(f"{MODULE}.RelayClient", side_effect=sessions) as relay_client, \
                patch(f"{MODULE}.asyncio.sleep", new=AsyncMock()) as sleep, \
                patch(f"{MODULE}.pump_events", side_effect=pump), \
                patch(f"{MODULE}.log_warning", new=AsyncMock()) as warn:
            await page._ws_loop()

        assert relay_client.call_count == 2
        relay_client.assert_called_with(URL)
        warn.assert_awaited_once()
        sleep.assert_awaited_once_with(settings.web_client.RECONNECT_DELAY)

        assert seen == {"channel": relay, "markers": 0}
        assert page.reporter.channel is None

    @pytest.mark.asyncio
    async def test_closed_session_reconnects(self, page: LiveMapPage) -> None:
        """После штатного закрытия соединения страница подключается заново."""
        relay = MagicMock()
        sessions = [_session(relay), _session(error=asyncio.CancelledError())]

        with patch(f"{MODULE}.RelayClient", side_effect=sessions), \
                patch(f"{MODULE}.asyncio.sleep", new=AsyncMock()) as sleep, \
                patch(f"{MODULE}.pump_events", new=AsyncMock()) as pump:
            await page._ws_loop()

        pump.assert_awaited_once_with(relay, page.renderer)
        sleep.assert_awaited_once_with(settings.web_client.RECONNECT_DELAY)
        assert page.reporter.channel is None
