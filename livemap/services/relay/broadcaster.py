# livemap/services/relay/broadcaster.py
"""
Broadcaster: пересылка геолокации всем открытым соединениям
и объявление об отключениях.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any, Callable

from livemap.common.constants import RelayEvent
from livemap.common.logger import log_debug, log_info, log_warning
from livemap.services.relay.channel import Channel, ChannelClosed
from livemap.services.relay.registry import ConnectionRegistry


def new_identity() -> str:
    """Непрозрачный уникальный идентификатор соединения."""
    return uuid.uuid4().hex


class Broadcaster:
    """
    Fan-out relay для одной «комнаты».

    - on_connect: выдаёт identity и регистрирует канал
    - on_location_update: рассылает {id, ...sample} всем соединениям
    - on_disconnect: удаляет соединение и объявляет его identity остальным

    Координаты не валидируются. Доставка best-effort: получатель,
    на котором send упал, просто пропускает сообщение, повторов нет.
    """

    def __init__(
        self,
        registry: ConnectionRegistry | None = None,
        *,
        echo_to_sender: bool = True,
        identity_factory: Callable[[], str] = new_identity,
    ) -> None:
        self._registry = registry if registry is not None else ConnectionRegistry()
        self._echo_to_sender = echo_to_sender
        self._identity_factory = identity_factory

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    @property
    def echo_to_sender(self) -> bool:
        return self._echo_to_sender

    async def on_connect(self, channel: Channel) -> str:
        """Выдать новое identity и зарегистрировать соединение."""
        identity = self._identity_factory()
        while identity in self._registry:
            identity = self._identity_factory()

        self._registry.add(identity, channel)
        await log_info(
            f"Соединение {identity} подключено (активных: {len(self._registry)})",
            extra={"identity": identity},
        )
        return identity

    async def on_location_update(self, sender: str, sample: Any) -> int:
        """
        Разослать обновление отправителя.

        Returns:
            Количество получателей, которым сообщение было записано
        """
        if not isinstance(sample, Mapping):
            await log_warning(
                f"Payload от {sender} не является объектом, пересылается только id",
                extra={"identity": sender, "payload_type": type(sample).__name__},
            )

        update = self.build_update(sender, sample)
        await log_debug(f"Обновление от {sender}: {update}")

        exclude = None if self._echo_to_sender else sender
        return await self._broadcast(RelayEvent.RECEIVE_LOCATION.value, update, exclude=exclude)

    async def on_disconnect(self, identity: str) -> int:
        """
        Удалить соединение и объявить об этом оставшимся.

        Повторный вызов для того же identity ничего не рассылает.
        """
        if self._registry.remove(identity) is None:
            return 0

        await log_info(
            f"Соединение {identity} отключено (активных: {len(self._registry)})",
            extra={"identity": identity},
        )
        return await self._broadcast(RelayEvent.USER_DISCONNECTED.value, identity)

    @staticmethod
    def build_update(sender: str, sample: Any) -> dict[str, Any]:
        """{id: sender, ...sample}; id из самого sample игнорируется."""
        fields: dict[str, Any] = {}
        if isinstance(sample, Mapping):
            fields = {k: v for k, v in sample.items() if k != "id"}
        return {"id": sender, **fields}

    async def _broadcast(self, event: str, data: Any, exclude: str | None = None) -> int:
        sent_count = 0

        for identity, conn in self._registry:
            if identity == exclude:
                continue
            # Могло отключиться, пока рассылка ждала предыдущий send
            if identity not in self._registry:
                continue

            try:
                await conn.channel.send(event, data)
                sent_count += 1
            except ChannelClosed:
                await log_debug(f"{event}: получатель {identity} уже закрыт, пропуск")
            except Exception as e:
                await log_warning(
                    f"{event}: не удалось отправить {identity}: {e}",
                    extra={"identity": identity},
                )

        self._registry.record_sent(sent_count)
        return sent_count
