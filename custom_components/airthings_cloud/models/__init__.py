"""Data models for Airthings Cloud integration.

This package contains data models and validation.
"""

from .credentials import Credentials, SampleWindow
from .sensor_data import ChannelState, DeviceState, SensorReading

__all__ = [
    "ChannelState",
    "Credentials",
    "DeviceState",
    "SampleWindow",
    "SensorReading",
]
