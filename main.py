#!/usr/bin/env python3
# main.py
"""
Точка входа livemap.
Запускает relay (WebSocket + страница карты) на одном фиксированном порту.
"""

from __future__ import annotations

import asyncio

import uvicorn

from livemap.common.constants import TypeMsg
from livemap.common.logger import log_info, setup_logging
from livemap.config import settings


async def run_relay() -> None:
    """Запускает relay и страницу карты."""
    await log_info(
        f"livemap v{settings.system.VERSION}: relay на "
        f"{settings.relay.RELAY_HOST}:{settings.relay.RELAY_PORT}...",
        type_msg=TypeMsg.INFO,
    )

    config = uvicorn.Config(
        "livemap.services.relay.app:create_app",
        factory=True,
        host=settings.relay.RELAY_HOST,
        port=settings.relay.RELAY_PORT,
        log_level="debug" if settings.system.DEBUG else "info",
    )

    server = uvicorn.Server(config)
    try:
        await server.serve()
    except asyncio.CancelledError:
        # Drain нет: клиенты сами заметят разрыв
        await log_info("Relay: остановка", type_msg=TypeMsg.DEBUG)


def main() -> None:
    setup_logging()
    asyncio.run(run_relay())


if __name__ == "__main__":
    main()
