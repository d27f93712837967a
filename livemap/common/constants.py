# livemap/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class RelayEvent(str, Enum):
    """Имена событий в канале между клиентом и relay."""
    SEND_LOCATION = "send-location"            # client → server
    RECEIVE_LOCATION = "receive-location"      # server → client
    USER_DISCONNECTED = "user-disconnected"    # server → client


LOGGER_NAME = "livemap"
