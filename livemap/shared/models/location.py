# livemap/shared/models/location.py
"""
Модели сообщений, которыми обмениваются клиент и relay.

Сервер эти модели для валидации не использует: payload `send-location`
пересылается как есть. Клиент валидирует входящие обновления перед
отрисовкой маркера.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class LocationSample(BaseModel):
    """Одна точка геолокации от клиента."""

    latitude: float
    longitude: float


class RelayedUpdate(LocationSample):
    """Точка, помеченная идентификатором соединения-отправителя."""

    id: str


class Envelope(BaseModel):
    """
    Кадр WebSocket: {"event": <имя события>, "data": <payload>}.

    Так по одному WebSocket мультиплексируются именованные события.
    """

    event: str
    data: Any = None
