"""Tests for diagnostics."""

from __future__ import annotations

import datetime
from unittest.mock import MagicMock

import pytest

from homeassistant.components.diagnostics import REDACTED

from custom_components.airthings_cloud.const import DOMAIN, KEY_CARBON_DIOXIDE
from custom_components.airthings_cloud.coordinators.stats_coordinator import (
    AirthingsStatsCoordinator,
)
from custom_components.airthings_cloud.diagnostics import async_get_config_entry_diagnostics
from custom_components.airthings_cloud.models import ChannelState, DeviceState


@pytest.mark.asyncio
async def test_diagnostics_redacts_credentials(mock_hass, mock_config_entry):
    """Test credentials are redacted and channel values reported."""
    coordinator = MagicMock(spec=AirthingsStatsCoordinator)
    coordinator.last_update_success = True
    coordinator.update_interval = datetime.timedelta(minutes=5)
    coordinator.pipeline = MagicMock(in_flight=False)
    coordinator.data = DeviceState(
        channels={KEY_CARBON_DIOXIDE: ChannelState(value=420, unit="ppm", changed=True)},
        data_fetched=True,
    )
    mock_hass.data[DOMAIN][mock_config_entry.entry_id] = {"coordinator": coordinator}

    result = await async_get_config_entry_diagnostics(mock_hass, mock_config_entry)

    assert result["entry"]["data"]["password"] == REDACTED
    assert result["entry"]["data"]["username"] == REDACTED
    assert result["device"]["device_id"] == "2930000001"
    assert result["coordinator"]["data_fetched"] is True
    assert result["channels"][KEY_CARBON_DIOXIDE] == {"value": "420", "unit": "ppm"}


@pytest.mark.asyncio
async def test_diagnostics_without_coordinator(mock_hass, mock_config_entry):
    """Test diagnostics before the entry is loaded."""
    result = await async_get_config_entry_diagnostics(mock_hass, mock_config_entry)

    assert result["coordinator"] == {"status": "not_initialized"}
