# livemap/shared/channel.py
"""
Канал именованных событий: общий протокол клиента и сервера.

Каждый кадр — JSON-объект {"event": ..., "data": ...}.
"""

from __future__ import annotations

import json
from typing import Any, Protocol

from pydantic import ValidationError

from livemap.shared.models.location import Envelope


class ChannelClosed(Exception):
    """Соединение закрыто (штатное событие жизненного цикла, не ошибка)."""


class MalformedMessage(Exception):
    """Кадр не удалось разобрать как конверт события."""

    def __init__(self, raw: Any, reason: str) -> None:
        super().__init__(reason)
        self.raw = raw
        self.reason = reason


class Channel(Protocol):
    """Канал событий одного соединения."""

    async def send(self, event: str, data: Any) -> None: ...

    async def receive(self) -> tuple[str, Any]: ...

    async def close(self) -> None: ...


def encode_envelope(event: str, data: Any) -> str:
    """Сериализует событие в текстовый кадр."""
    return json.dumps({"event": event, "data": data}, ensure_ascii=False)


def decode_envelope(raw: str | bytes) -> tuple[str, Any]:
    """
    Разбирает текстовый кадр в пару (event, data).

    Raises:
        MalformedMessage: не JSON или нет поля event
    """
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedMessage(raw, f"invalid JSON: {exc}") from exc

    try:
        envelope = Envelope.model_validate(payload)
    except ValidationError as exc:
        raise MalformedMessage(raw, "not an event envelope") from exc

    return envelope.event, envelope.data
