# livemap/shared/models/common.py
"""
Общие модели для всех компонентов.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class HealthStatus(BaseModel):
    """Статус здоровья сервиса."""

    service: str
    status: str = "healthy"  # healthy, degraded, unhealthy
    version: str | None = None
    uptime_seconds: float | None = None


class RelayStats(BaseModel):
    """Статистика соединений relay."""

    active_connections: int
    total_connections_ever: int
    total_messages_sent: int
    # Время подключения самого старого из открытых соединений
    oldest_connected_at: datetime | None = None
