# livemap/common/__init__.py
"""
Общие утилиты, константы и логгер.
"""

from livemap.common.logger import get_logger, log_info, log_error, log_warning, log_debug
from livemap.common.constants import TypeMsg, RelayEvent

__all__ = [
    "get_logger",
    "log_info",
    "log_error",
    "log_warning",
    "log_debug",
    "TypeMsg",
    "RelayEvent",
]
