"""Entity implementations for Airthings Cloud integration.

This package contains all entity types:
- Channel sensors
- Base entity classes
"""

from .base_entity import AirthingsBaseEntity
from .sensor import AirthingsChannelSensor

__all__ = [
    "AirthingsBaseEntity",
    "AirthingsChannelSensor",
]
