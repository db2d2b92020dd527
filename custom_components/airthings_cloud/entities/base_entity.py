"""Base entity class for Airthings Cloud integration."""

from typing import Optional
import logging

from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from ..const import DOMAIN
from ..coordinators.stats_coordinator import AirthingsStatsCoordinator

_LOGGER = logging.getLogger(__name__)


def build_device_info(device_id: str, name: Optional[str] = None) -> DeviceInfo:
    """Return the registry entry shared by all channels of a device."""
    return DeviceInfo(
        identifiers={(DOMAIN, device_id)},
        name=name or f"Airthings {device_id}",
        manufacturer="Airthings",
        model="Wave Plus",
        configuration_url=f"https://dashboard.airthings.com/devices/{device_id}",
    )


class AirthingsBaseEntity(CoordinatorEntity[AirthingsStatsCoordinator]):
    """Base class for Airthings Cloud entities."""

    _attr_has_entity_name = True
    _attr_should_poll = False

    def __init__(self, coordinator: AirthingsStatsCoordinator, device_info: DeviceInfo) -> None:
        """Initialize base entity.

        Args:
            coordinator: Stats coordinator of the device
            device_info: Device information
        """
        super().__init__(coordinator)
        self._device_id = coordinator.device_id
        self._attr_device_info = device_info
