# tests/services/test_registry.py
"""
Тесты для реестра соединений.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from livemap.services.relay.registry import ConnectionRegistry


class TestConnectionRegistry:
    """Тесты для ConnectionRegistry."""

    def test_add_and_lookup(self, registry: ConnectionRegistry, make_channel) -> None:
        """Добавленное соединение доступно по identity."""
        channel = make_channel()
        info = registry.add("a", channel)

        assert "a" in registry
        assert len(registry) == 1
        assert registry.get("a") is info
        assert info.channel is channel
        assert info.connected_at is not None

    def test_duplicate_identity_rejected(self, registry: ConnectionRegistry, make_channel) -> None:
        """Два открытых соединения не могут делить identity."""
        registry.add("a", make_channel())

        with pytest.raises(ValueError):
            registry.add("a", make_channel())

    def test_remove_returns_info(self, registry: ConnectionRegistry, make_channel) -> None:
        registry.add("a", make_channel())

        info = registry.remove("a")

        assert info is not None
        assert info.identity == "a"
        assert "a" not in registry

    def test_remove_missing_is_noop(self, registry: ConnectionRegistry) -> None:
        """Удаление отсутствующего identity не бросает исключение."""
        assert registry.remove("ghost") is None

    def test_iteration_is_snapshot(self, registry: ConnectionRegistry, make_channel) -> None:
        """Реестр можно менять во время обхода."""
        for name in ("a", "b", "c"):
            registry.add(name, make_channel())

        seen = []
        for identity, _ in registry:
            seen.append(identity)
            registry.remove("c")

        assert seen == ["a", "b", "c"]
        assert registry.identities() == ["a", "b"]

    def test_stats(self, registry: ConnectionRegistry, make_channel) -> None:
        """Статистика учитывает всех когда-либо подключённых."""
        registry.add("a", make_channel())
        registry.add("b", make_channel())
        registry.remove("a")
        registry.record_sent(3)

        assert registry.get_stats() == {
            "active_connections": 1,
            "total_connections_ever": 2,
            "total_messages_sent": 3,
            "oldest_connected_at": registry.get("b").connected_at,
        }

    def test_oldest_connection(self, registry: ConnectionRegistry, make_channel) -> None:
        """В статистике время подключения самого старого открытого соединения."""
        assert registry.get_stats()["oldest_connected_at"] is None

        first = registry.add("a", make_channel())
        second = registry.add("b", make_channel())
        first.connected_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        second.connected_at = datetime(2024, 1, 2, tzinfo=timezone.utc)

        assert registry.get_stats()["oldest_connected_at"] == first.connected_at

        registry.remove("a")

        assert registry.get_stats()["oldest_connected_at"] == second.connected_at
