"""Sensor entities for Airthings Cloud integration."""

from typing import Any, Optional
import logging

from homeassistant.components.sensor import (
    SensorEntity,
    SensorEntityDescription,
    SensorDeviceClass,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import (
    CONCENTRATION_PARTS_PER_BILLION,
    CONCENTRATION_PARTS_PER_MILLION,
    PERCENTAGE,
    EntityCategory,
    UnitOfPressure,
    UnitOfTemperature,
)
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.entity import generate_entity_id
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.util import slugify

from ..const import (
    DOMAIN,
    KEY_BATTERY,
    KEY_CARBON_DIOXIDE,
    KEY_HUMIDITY,
    KEY_LAST_UPDATE,
    KEY_PRESSURE,
    KEY_RADON_SHORT_TERM_AVG,
    KEY_TEMPERATURE,
    KEY_TVOC,
    UNIT_PCI_PER_LITER,
)
from ..coordinators.stats_coordinator import AirthingsStatsCoordinator
from ..models import DeviceState
from .base_entity import AirthingsBaseEntity, build_device_info

_LOGGER = logging.getLogger(__name__)

SENSOR_DESCRIPTIONS: tuple[SensorEntityDescription, ...] = (
    SensorEntityDescription(
        key=KEY_BATTERY,
        name="Battery",
        native_unit_of_measurement=PERCENTAGE,
        device_class=SensorDeviceClass.BATTERY,
        state_class=SensorStateClass.MEASUREMENT,
        entity_category=EntityCategory.DIAGNOSTIC,
        suggested_display_precision=2,
    ),
    SensorEntityDescription(
        key=KEY_TEMPERATURE,
        name="Temperature",
        native_unit_of_measurement=UnitOfTemperature.CELSIUS,
        device_class=SensorDeviceClass.TEMPERATURE,
        state_class=SensorStateClass.MEASUREMENT,
    ),
    SensorEntityDescription(
        key=KEY_HUMIDITY,
        name="Humidity",
        native_unit_of_measurement=PERCENTAGE,
        device_class=SensorDeviceClass.HUMIDITY,
        state_class=SensorStateClass.MEASUREMENT,
    ),
    SensorEntityDescription(
        key=KEY_PRESSURE,
        name="Pressure",
        native_unit_of_measurement=UnitOfPressure.MBAR,
        device_class=SensorDeviceClass.PRESSURE,
        state_class=SensorStateClass.MEASUREMENT,
        suggested_display_precision=1,
    ),
    SensorEntityDescription(
        key=KEY_CARBON_DIOXIDE,
        name="Carbon dioxide",
        native_unit_of_measurement=CONCENTRATION_PARTS_PER_MILLION,
        device_class=SensorDeviceClass.CO2,
        state_class=SensorStateClass.MEASUREMENT,
    ),
    SensorEntityDescription(
        key=KEY_TVOC,
        name="Total VOC",
        native_unit_of_measurement=CONCENTRATION_PARTS_PER_BILLION,
        state_class=SensorStateClass.MEASUREMENT,
        icon="mdi:chemical-weapon",
    ),
    SensorEntityDescription(
        key=KEY_RADON_SHORT_TERM_AVG,
        name="Radon short-term average",
        native_unit_of_measurement=UNIT_PCI_PER_LITER,
        state_class=SensorStateClass.MEASUREMENT,
        icon="mdi:radioactive",
        suggested_display_precision=2,
    ),
    SensorEntityDescription(
        key=KEY_LAST_UPDATE,
        name="Last update",
        device_class=SensorDeviceClass.TIMESTAMP,
        entity_category=EntityCategory.DIAGNOSTIC,
    ),
)


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up sensor platform."""
    _LOGGER.debug(f"Setting up sensor platform for {entry.title}")

    try:
        coordinator: AirthingsStatsCoordinator = hass.data[DOMAIN][entry.entry_id]["coordinator"]
    except KeyError as exc:
        _LOGGER.error(f"Missing key {exc} in entry data")
        return

    device_info = build_device_info(coordinator.device_id, entry.title)
    async_add_entities(
        AirthingsChannelSensor(coordinator, device_info, description)
        for description in SENSOR_DESCRIPTIONS
    )
    _LOGGER.info(f"Adding {len(SENSOR_DESCRIPTIONS)} sensors for {coordinator.device_id}")


class AirthingsChannelSensor(AirthingsBaseEntity, SensorEntity):
    """One output channel of an Airthings device."""

    def __init__(
        self,
        coordinator: AirthingsStatsCoordinator,
        device_info,
        description: SensorEntityDescription,
    ) -> None:
        """Initialize channel sensor."""
        super().__init__(coordinator, device_info)
        self.entity_description = description
        self._attr_unique_id = f"{self._device_id}_{description.key}"
        object_id = f"airthings_{self._device_id}_{slugify(description.key)}"
        self.entity_id = generate_entity_id("sensor.{}", object_id, hass=coordinator.hass)
        self._attr_native_value: Optional[Any] = None
        self._last_state: Optional[DeviceState] = None
        self._update_state_from_coordinator()

    def _update_state_from_coordinator(self) -> bool:
        """Copy the channel value from coordinator data.

        Each DeviceState is consumed once. Failed and skipped cycles hand
        back the same object, so its change flags are not acted on again.

        Returns:
            True if the channel was published with a new value
        """
        data = self.coordinator.data
        if data is self._last_state:
            return False
        self._last_state = data
        channel = data.get(self.entity_description.key) if data else None
        if channel is None:
            return False
        if channel.changed or self._attr_native_value is None:
            self._attr_native_value = channel.value
            return True
        return False

    @callback
    def _handle_coordinator_update(self) -> None:
        """Write state only for channels that changed in this cycle."""
        if self._update_state_from_coordinator():
            self.async_write_ha_state()
            if _LOGGER.isEnabledFor(logging.DEBUG):
                _LOGGER.debug("Update sensor %s: %s", self.entity_id, self._attr_native_value)

    @property
    def available(self) -> bool:
        """Previous values stay available across failed cycles."""
        return self._attr_native_value is not None
