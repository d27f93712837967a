# livemap/services/relay/__init__.py
"""
Relay геолокации.

Обеспечивает:
- WebSocket соединения клиентов и выдачу identity
- Пересылку send-location всем соединениям как receive-location
- Объявление user-disconnected при закрытии соединения
"""

from livemap.services.relay.broadcaster import Broadcaster
from livemap.services.relay.channel import Channel, ChannelClosed, MalformedMessage
from livemap.services.relay.handler import serve_connection
from livemap.services.relay.registry import ConnectionInfo, ConnectionRegistry

__all__ = [
    "Broadcaster",
    "Channel",
    "ChannelClosed",
    "MalformedMessage",
    "ConnectionInfo",
    "ConnectionRegistry",
    "serve_connection",
]
