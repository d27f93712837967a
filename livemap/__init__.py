# livemap/__init__.py
"""
livemap — relay для обмена геолокацией в реальном времени.

Компоненты:
- services.relay: WebSocket relay (реестр соединений + broadcaster)
- web_client: страница карты (NiceGUI + Leaflet), репортёр и рендерер
"""

__version__ = "1.0.0"
