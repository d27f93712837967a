# livemap/services/relay/handler.py
"""
Цикл обработки одного соединения.

Единственная точка ожидания — следующий входящий кадр. Рассылка
обновления завершается до чтения следующего события того же соединения;
события разных соединений перемежаются.
"""

from __future__ import annotations

from typing import Any

from livemap.common.constants import RelayEvent
from livemap.common.logger import log_debug, log_error, log_info, log_warning
from livemap.services.relay.broadcaster import Broadcaster
from livemap.services.relay.channel import Channel, ChannelClosed, MalformedMessage


async def dispatch_event(broadcaster: Broadcaster, identity: str, event: str, data: Any) -> None:
    """Обработать событие от клиента."""
    if event == RelayEvent.SEND_LOCATION.value:
        await broadcaster.on_location_update(identity, data)
    else:
        await log_debug(f"Неизвестное событие '{event}' от {identity}, пропуск")


async def serve_connection(channel: Channel, broadcaster: Broadcaster) -> str:
    """
    Обслуживать соединение до его закрытия.

    Returns:
        identity, выданное соединению
    """
    identity = await broadcaster.on_connect(channel)

    try:
        while True:
            try:
                event, data = await channel.receive()
            except MalformedMessage as exc:
                await log_warning(
                    f"Некорректный кадр от {identity}: {exc.reason}",
                    extra={"identity": identity},
                )
                continue

            await dispatch_event(broadcaster, identity, event, data)

    except ChannelClosed:
        await log_info(f"Канал {identity} закрыт клиентом")
    except Exception:
        await log_error(f"Ошибка в цикле соединения {identity}", exc_info=True)
    finally:
        await broadcaster.on_disconnect(identity)

    return identity
