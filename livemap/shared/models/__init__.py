# livemap/shared/models/__init__.py
"""
Pydantic-модели для обмена между клиентом и relay.
"""

from livemap.shared.models.common import HealthStatus, RelayStats
from livemap.shared.models.location import Envelope, LocationSample, RelayedUpdate

__all__ = [
    "HealthStatus",
    "RelayStats",
    "Envelope",
    "LocationSample",
    "RelayedUpdate",
]
