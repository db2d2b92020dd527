"""Diagnostics support for Airthings Cloud integration."""

from __future__ import annotations

from typing import Any

from homeassistant.components.diagnostics import async_redact_data
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .const import DOMAIN, CONF_DEVICE_ID, CONF_PASSWORD, CONF_USERNAME
from .coordinators.stats_coordinator import AirthingsStatsCoordinator

TO_REDACT = {CONF_PASSWORD, CONF_USERNAME, "access_token", "token", "secret"}


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    entry_data = hass.data.get(DOMAIN, {}).get(entry.entry_id, {})

    diagnostics_data: dict[str, Any] = {
        "entry": {
            "entry_id": entry.entry_id,
            "title": entry.title,
            "data": async_redact_data(entry.data, TO_REDACT),
            "options": dict(entry.options),
        },
        "device": {
            "device_id": entry.data.get(CONF_DEVICE_ID),
        },
    }

    coordinator = entry_data.get("coordinator")
    if isinstance(coordinator, AirthingsStatsCoordinator):
        state = coordinator.data
        diagnostics_data["coordinator"] = {
            "last_update_success": coordinator.last_update_success,
            "update_interval": str(coordinator.update_interval),
            "cycle_in_flight": coordinator.pipeline.in_flight,
            "data_fetched": state.data_fetched if state else None,
        }
        diagnostics_data["channels"] = {
            key: {"value": str(channel.value), "unit": channel.unit}
            for key, channel in (state.channels.items() if state else ())
        }
    else:
        diagnostics_data["coordinator"] = {"status": "not_initialized"}

    return diagnostics_data
