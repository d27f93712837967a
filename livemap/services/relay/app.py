# livemap/services/relay/app.py
"""
FastAPI приложение relay.

WebSocket endpoints:
- /ws — канал событий send-location / receive-location / user-disconnected

REST endpoints:
- GET /health — проверка здоровья
- GET /stats — статистика соединений
- GET / — страница карты (NiceGUI), если UI подключён
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request, WebSocket

from livemap.common.constants import TypeMsg
from livemap.common.logger import log_info, setup_logging
from livemap.config import settings
from livemap.services.relay.broadcaster import Broadcaster
from livemap.services.relay.channel import WebSocketChannel
from livemap.services.relay.handler import serve_connection
from livemap.services.relay.registry import ConnectionRegistry
from livemap.shared.models.common import HealthStatus, RelayStats


SERVICE_NAME = "livemap_relay"

router = APIRouter()


# === LIFESPAN ===

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Жизненный цикл приложения."""
    setup_logging()
    await log_info(
        f"Relay запущен на порту {settings.relay.RELAY_PORT}, "
        f"echo_to_sender={app.state.broadcaster.echo_to_sender}",
        type_msg=TypeMsg.INFO,
    )

    yield

    # Graceful drain нет: открытые соединения просто обрываются
    await log_info(
        f"Relay остановлен, активных соединений: {len(app.state.broadcaster.registry)}",
        type_msg=TypeMsg.INFO,
    )


# === HEALTH CHECK ===

@router.get("/health", response_model=HealthStatus, tags=["Health"])
async def health_check() -> HealthStatus:
    """Проверка здоровья сервиса."""
    return HealthStatus(
        status="healthy",
        service=SERVICE_NAME,
        version=settings.system.VERSION,
    )


# === STATS ===

@router.get("/stats", response_model=RelayStats, tags=["Stats"])
async def get_stats(request: Request) -> RelayStats:
    """Получить статистику соединений."""
    stats = request.app.state.broadcaster.registry.get_stats()
    return RelayStats(**stats)


# === WEBSOCKET ===

@router.websocket(settings.relay.RELAY_WS_PATH)
async def relay_socket(websocket: WebSocket) -> None:
    """
    Канал одного клиента.

    Входящие кадры:
    - {"event": "send-location", "data": {"latitude": .., "longitude": ..}}

    Исходящие кадры:
    - {"event": "receive-location", "data": {"id": .., "latitude": .., "longitude": ..}}
    - {"event": "user-disconnected", "data": "<id>"}
    """
    await websocket.accept()
    await serve_connection(WebSocketChannel(websocket), websocket.app.state.broadcaster)


# === APP ===

def create_app(
    *,
    with_ui: bool = True,
    broadcaster: Broadcaster | None = None,
) -> FastAPI:
    """
    Собрать приложение relay.

    Args:
        with_ui: смонтировать страницу карты NiceGUI на "/"
        broadcaster: готовый broadcaster (для тестов)
    """
    app = FastAPI(
        title="livemap relay",
        description="Relay геолокации в реальном времени.",
        version=settings.system.VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.broadcaster = broadcaster or Broadcaster(
        ConnectionRegistry(),
        echo_to_sender=settings.relay.ECHO_TO_SENDER,
    )
    app.include_router(router)

    if with_ui:
        # NiceGUI импортируется только когда нужна страница карты
        from livemap.web_client.app import mount_web_client
        mount_web_client(app)

    return app
