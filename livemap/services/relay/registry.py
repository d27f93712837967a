# livemap/services/relay/registry.py
"""
Реестр активных соединений relay.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterator

from livemap.services.relay.channel import Channel


@dataclass
class ConnectionInfo:
    """Информация о соединении."""
    identity: str
    channel: Channel
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ConnectionRegistry:
    """
    Множество открытых соединений: identity -> ConnectionInfo.

    Блокировок нет: все операции выполняются в одном event loop,
    между await реестр никто не меняет.
    """

    def __init__(self) -> None:
        self._connections: dict[str, ConnectionInfo] = {}

        # Для статистики
        self._total_connections: int = 0
        self._total_messages_sent: int = 0

    def add(self, identity: str, channel: Channel) -> ConnectionInfo:
        """
        Зарегистрировать соединение.

        Raises:
            ValueError: identity уже занят другим открытым соединением
        """
        if identity in self._connections:
            raise ValueError(f"Identity уже используется: {identity}")

        info = ConnectionInfo(identity=identity, channel=channel)
        self._connections[identity] = info
        self._total_connections += 1
        return info

    def remove(self, identity: str) -> ConnectionInfo | None:
        """Удалить соединение. None, если его уже нет."""
        return self._connections.pop(identity, None)

    def get(self, identity: str) -> ConnectionInfo | None:
        return self._connections.get(identity)

    def __contains__(self, identity: object) -> bool:
        return identity in self._connections

    def __len__(self) -> int:
        return len(self._connections)

    def __iter__(self) -> Iterator[tuple[str, ConnectionInfo]]:
        # Снимок: во время рассылки реестр может измениться
        return iter(list(self._connections.items()))

    def identities(self) -> list[str]:
        return list(self._connections)

    def record_sent(self, count: int = 1) -> None:
        self._total_messages_sent += count

    def get_stats(self) -> dict[str, Any]:
        """Получить статистику."""
        oldest = min((info.connected_at for info in self._connections.values()), default=None)
        return {
            "active_connections": len(self._connections),
            "total_connections_ever": self._total_connections,
            "total_messages_sent": self._total_messages_sent,
            "oldest_connected_at": oldest,
        }
