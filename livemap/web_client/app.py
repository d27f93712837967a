import os

# Локальные данные NiceGUI — не в корне проекта
os.environ.setdefault('NICEGUI_STORAGE_PATH', '/tmp/livemap_nicegui')

from fastapi import FastAPI
from nicegui import app, ui

from livemap.common.constants import TypeMsg
from livemap.common.logger import log_info
from livemap.config import settings
from livemap.web_client.pages.live_map import LiveMapPage


WILDCARD_HOSTS = ("", "0.0.0.0", "::")


def relay_ws_url() -> str:
    """URL WebSocket relay для страницы; по умолчанию — свой же процесс."""
    if settings.web_client.RELAY_WS_URL:
        return settings.web_client.RELAY_WS_URL

    host = settings.relay.RELAY_HOST
    if host in WILDCARD_HOSTS:
        host = "127.0.0.1"
    elif ":" in host:
        host = f"[{host}]"
    return f"ws://{host}:{settings.relay.RELAY_PORT}{settings.relay.RELAY_WS_PATH}"


def create_pages() -> None:

    @ui.page('/')
    async def index():
        page = LiveMapPage(relay_ws_url())
        await page.mount()

    @app.on_startup
    async def startup() -> None:
        await log_info("Web Client started", type_msg=TypeMsg.INFO)


def mount_web_client(fastapi_app: FastAPI) -> None:
    """Смонтировать страницу карты на "/" приложения relay."""
    create_pages()
    ui.run_with(
        fastapi_app,
        mount_path='/',
        title=settings.map.PAGE_TITLE,
    )
