# livemap/services/__init__.py
"""
Серверные сервисы приложения.

Сервисы:
- relay: приём геолокации по WebSocket и рассылка всем соединениям
"""

__all__: list[str] = []
