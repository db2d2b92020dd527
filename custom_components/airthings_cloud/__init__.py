"""Airthings Cloud integration for Home Assistant."""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .const import (
    DOMAIN, _LOGGER, CONF_USERNAME, CONF_PASSWORD, CONF_DEVICE_ID, CONF_DEBUG,
    SERVICE_POLL_NOW,
)
from .core.api_client import AirthingsCloudApiClient
from .core.pipeline import AirthingsPollPipeline
from .coordinators.stats_coordinator import AirthingsStatsCoordinator
from .models import Credentials

PLATFORMS: list[Platform] = [Platform.SENSOR]


def _async_update_log_level(hass: HomeAssistant) -> None:
    """Set the integration logger from the debug option of every loaded entry."""
    debug = any(
        entry_data.get(CONF_DEBUG, False)
        for entry_data in hass.data.get(DOMAIN, {}).values()
    )
    _LOGGER.setLevel(logging.DEBUG if debug else logging.NOTSET)
    if debug:
        _LOGGER.debug("Debug logging enabled")


async def async_setup(hass: HomeAssistant, config: dict) -> bool:
    """Set up the Airthings Cloud integration."""
    # Config flow is handled automatically by Home Assistant
    # when config_flow: true is set in manifest.json
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Airthings Cloud from a config entry."""
    _LOGGER.info(f"Setting up Airthings Cloud: {entry.title} ({entry.entry_id})")

    credentials = Credentials(
        username=entry.data[CONF_USERNAME],
        password=entry.data[CONF_PASSWORD],
        device_id=entry.data[CONF_DEVICE_ID],
    )
    session = async_get_clientsession(hass)
    api_client = AirthingsCloudApiClient(session)
    pipeline = AirthingsPollPipeline(api_client, credentials)
    coordinator = AirthingsStatsCoordinator(hass, entry, pipeline)

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        "api_client": api_client,
        "coordinator": coordinator,
        CONF_DEBUG: entry.options.get(CONF_DEBUG, False),
    }
    _async_update_log_level(hass)

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    # First poll runs in the background; entities fill in when it lands.
    hass.async_create_task(coordinator.async_refresh())

    if not hass.services.has_service(DOMAIN, SERVICE_POLL_NOW):
        async def _svc_poll_now(call: ServiceCall) -> None:
            """Run one poll cycle for every loaded device."""
            for entry_data in list(hass.data.get(DOMAIN, {}).values()):
                coord = entry_data.get("coordinator")
                if isinstance(coord, AirthingsStatsCoordinator):
                    if _LOGGER.isEnabledFor(logging.DEBUG):
                        _LOGGER.debug("poll_now requested for %s", coord.device_id)
                    await coord.async_refresh()

        hass.services.async_register(DOMAIN, SERVICE_POLL_NOW, _svc_poll_now)

    entry.async_on_unload(entry.add_update_listener(_async_reload_entry))

    _LOGGER.info(f"Setup complete for {entry.title} (device: {credentials.device_id})")
    return True


async def _async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry so new options take effect."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    device_id = entry.data.get(CONF_DEVICE_ID, "unknown")
    _LOGGER.info(f"Unloading Airthings Cloud: {entry.title} (device: {device_id})")

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)

    domain_data = hass.data.get(DOMAIN, {})
    if domain_data.pop(entry.entry_id, None) is None:
        _LOGGER.warning(f"No entry data {entry.entry_id} to clean.")

    if not domain_data and hass.services.has_service(DOMAIN, SERVICE_POLL_NOW):
        hass.services.async_remove(DOMAIN, SERVICE_POLL_NOW)
    _async_update_log_level(hass)

    _LOGGER.info(f"Unload {entry.title}: {'OK' if unload_ok else 'Failed'}.")
    return unload_ok
