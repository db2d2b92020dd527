"""Sensor data models for Airthings Cloud integration."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class SensorReading:
    """Most recent measurement of one upstream sensor series."""

    sensor_type: str
    value: Any


@dataclass(frozen=True)
class ChannelState:
    """Published value of one output channel."""

    value: Any
    unit: Optional[str] = None
    changed: bool = False


@dataclass(frozen=True)
class DeviceState:
    """Channel values of the device after the latest cycle.

    ``data_fetched`` tells whether that cycle extracted at least one
    recognised reading.
    """

    channels: Mapping[str, ChannelState] = field(default_factory=dict)
    data_fetched: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "channels", MappingProxyType(dict(self.channels)))

    def get(self, key: str) -> Optional[ChannelState]:
        return self.channels.get(key)

    def value(self, key: str) -> Any:
        channel = self.channels.get(key)
        return channel.value if channel else None
