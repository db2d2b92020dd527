"""Pytest configuration and fixtures for Airthings Cloud integration tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from homeassistant.config_entries import ConfigEntry

from custom_components.airthings_cloud.const import (
    CONF_DEVICE_ID,
    CONF_PASSWORD,
    CONF_USERNAME,
    DOMAIN,
)


@pytest.fixture
def mock_hass():
    """Mock Home Assistant instance."""
    hass = MagicMock()
    hass.data = {DOMAIN: {}}
    return hass


@pytest.fixture
def mock_config_entry() -> ConfigEntry:
    """Mock config entry."""
    entry = MagicMock(spec=ConfigEntry)
    entry.entry_id = "test_entry_id"
    entry.title = "Airthings 2930000001"
    entry.data = {
        CONF_USERNAME: "user@example.com",
        CONF_PASSWORD: "hunter2",
        CONF_DEVICE_ID: "2930000001",
    }
    entry.options = {}
    return entry


@pytest.fixture
def sample_body() -> dict[str, Any]:
    """Samples response as returned by the web API."""
    return {
        "batteryPercentage": "87.456",
        "sensors": [
            {"type": "radonShortTermAvg", "measurements": [1.1, 1.2, 1.35]},
            {"type": "temp", "measurements": [21.4, 21.6]},
            {"type": "humidity", "measurements": [41, 42.8]},
            {"type": "pressure", "measurements": [1012.0, 1013.26]},
            {"type": "co2", "measurements": [400, 410, 420]},
            {"type": "voc", "measurements": [95, 101]},
            {"type": "light", "measurements": [12]},
        ],
    }
