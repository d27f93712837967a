# tests/conftest.py
"""
Общие фикстуры и тестовые двойники.
"""

from __future__ import annotations

import asyncio
import itertools
from pathlib import Path
from typing import Any

import pytest

from livemap.services.relay.broadcaster import Broadcaster
from livemap.services.relay.registry import ConnectionRegistry
from livemap.shared.channel import ChannelClosed


_CLOSE = object()


class FakeChannel:
    """Канал в памяти: входящие кадры из очереди, исходящие — в список."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.inbox: asyncio.Queue[Any] = asyncio.Queue()
        self.sent: list[tuple[str, Any]] = []
        self.closed = False
        self.send_error: Exception | None = None

    def push(self, event: str, data: Any = None) -> None:
        self.inbox.put_nowait((event, data))

    def push_error(self, exc: Exception) -> None:
        self.inbox.put_nowait(exc)

    def push_close(self) -> None:
        self.inbox.put_nowait(_CLOSE)

    async def send(self, event: str, data: Any) -> None:
        if self.closed:
            raise ChannelClosed("closed")
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((event, data))

    async def receive(self) -> tuple[str, Any]:
        item = await self.inbox.get()
        if item is _CLOSE:
            self.closed = True
            raise ChannelClosed("closed by peer")
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True

    def events(self, name: str) -> list[Any]:
        return [data for event, data in self.sent if event == name]


class FakeMarker:
    def __init__(self, latitude: float, longitude: float) -> None:
        self.position = (latitude, longitude)
        self.removed = False


class FakeMapView:
    """MapView, который запоминает вызовы."""

    def __init__(self) -> None:
        self.center: tuple[float, float] | None = None
        self.view_calls: list[tuple[float, float]] = []
        self.markers: list[FakeMarker] = []

    def set_view(self, latitude: float, longitude: float) -> None:
        self.center = (latitude, longitude)
        self.view_calls.append(self.center)

    def add_marker(self, latitude: float, longitude: float) -> FakeMarker:
        marker = FakeMarker(latitude, longitude)
        self.markers.append(marker)
        return marker

    def move_marker(self, marker: FakeMarker, latitude: float, longitude: float) -> None:
        assert not marker.removed
        marker.position = (latitude, longitude)

    def remove_marker(self, marker: FakeMarker) -> None:
        assert not marker.removed
        marker.removed = True

    @property
    def visible(self) -> list[FakeMarker]:
        return [m for m in self.markers if not m.removed]


# =============================================================================
# ФИКСТУРЫ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@pytest.fixture
def identity_factory():
    """Предсказуемые identity: conn-1, conn-2, ..."""
    counter = itertools.count(1)
    return lambda: f"conn-{next(counter)}"


@pytest.fixture
def broadcaster(registry: ConnectionRegistry, identity_factory) -> Broadcaster:
    return Broadcaster(registry, echo_to_sender=True, identity_factory=identity_factory)


@pytest.fixture
def map_view() -> FakeMapView:
    return FakeMapView()


@pytest.fixture
def make_channel():
    """Фабрика FakeChannel."""
    return FakeChannel
