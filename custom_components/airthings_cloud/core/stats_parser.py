"""Sample payload parser for Airthings Cloud integration.

Maps the per-type measurement series returned by the samples endpoint onto
the integration's output channels. Only the last element of each series is
used; it is the most recent measurement in the requested window.
"""

import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional
import logging

from homeassistant.const import (
    CONCENTRATION_PARTS_PER_BILLION,
    CONCENTRATION_PARTS_PER_MILLION,
    PERCENTAGE,
    UnitOfPressure,
    UnitOfTemperature,
)

from ..const import (
    FIELD_BATTERY_PERCENTAGE,
    FIELD_SENSORS,
    KEY_BATTERY,
    KEY_CARBON_DIOXIDE,
    KEY_HUMIDITY,
    KEY_LAST_UPDATE,
    KEY_PRESSURE,
    KEY_RADON_SHORT_TERM_AVG,
    KEY_TEMPERATURE,
    KEY_TVOC,
    SENSOR_TYPE_CO2,
    SENSOR_TYPE_HUMIDITY,
    SENSOR_TYPE_PRESSURE,
    SENSOR_TYPE_RADON_SHORT_TERM,
    SENSOR_TYPE_TEMP,
    SENSOR_TYPE_VOC,
    UNIT_PCI_PER_LITER,
)
from ..models import ChannelState, DeviceState, SensorReading
from .exceptions import ParseException

_LOGGER = logging.getLogger(__name__)


class ChannelMapping(NamedTuple):
    key: str
    coerce: Callable[[Any], Any]
    unit: Optional[str]


def _to_float(value: Any) -> float:
    return float(value)


def _to_int(value: Any) -> int:
    return int(float(value))


def _to_pressure(value: Any) -> float:
    return round(float(value), 1)


SENSOR_CHANNELS: Dict[str, ChannelMapping] = {
    SENSOR_TYPE_RADON_SHORT_TERM: ChannelMapping(KEY_RADON_SHORT_TERM_AVG, _to_float, UNIT_PCI_PER_LITER),
    SENSOR_TYPE_TEMP: ChannelMapping(KEY_TEMPERATURE, _to_float, UnitOfTemperature.CELSIUS),
    SENSOR_TYPE_HUMIDITY: ChannelMapping(KEY_HUMIDITY, _to_int, PERCENTAGE),
    SENSOR_TYPE_PRESSURE: ChannelMapping(KEY_PRESSURE, _to_pressure, UnitOfPressure.MBAR),
    SENSOR_TYPE_CO2: ChannelMapping(KEY_CARBON_DIOXIDE, _to_int, CONCENTRATION_PARTS_PER_MILLION),
    SENSOR_TYPE_VOC: ChannelMapping(KEY_TVOC, _to_int, CONCENTRATION_PARTS_PER_BILLION),
}


def parse_sensor_readings(sensors: Iterable[Any]) -> List[SensorReading]:
    """Return the most recent measurement of every non-empty series.

    Entries without a type or without measurements are skipped.
    """
    readings: List[SensorReading] = []
    for sensor in sensors:
        if not isinstance(sensor, Mapping):
            _LOGGER.debug("Skipping malformed sensor entry: %r", sensor)
            continue
        sensor_type = sensor.get("type")
        measurements = sensor.get("measurements")
        if not isinstance(sensor_type, str):
            continue
        if not isinstance(measurements, list) or not measurements:
            if _LOGGER.isEnabledFor(logging.DEBUG):
                _LOGGER.debug("No measurements for sensor %s", sensor_type)
            continue
        readings.append(SensorReading(sensor_type, measurements[-1]))
    return readings


def parse_battery(body: Mapping[str, Any]) -> Optional[float]:
    """Return the battery percentage rounded to 2 decimals, if present."""
    raw = body.get(FIELD_BATTERY_PERCENTAGE)
    if raw is None:
        return None
    try:
        return round(float(raw), 2)
    except (TypeError, ValueError):
        _LOGGER.warning(f"Ignoring invalid {FIELD_BATTERY_PERCENTAGE}: {raw!r}")
        return None


def _channel(value: Any, unit: Optional[str], previous: DeviceState, key: str) -> ChannelState:
    return ChannelState(value=value, unit=unit, changed=value != previous.value(key))


def normalize_samples(
    body: Mapping[str, Any],
    previous: DeviceState,
    now: datetime.datetime,
) -> DeviceState:
    """Build the next device state from a samples response.

    Channels without a fresh reading keep their previous value with
    ``changed`` cleared. Battery is applied whether or not any sensor
    reading was found; ``lastUpdate`` only when at least one was.

    Raises:
        ParseException: If ``sensors`` is not a list
    """
    sensors = body.get(FIELD_SENSORS)
    if not isinstance(sensors, list):
        raise ParseException(f"'{FIELD_SENSORS}' is not a list: {type(sensors).__name__}")

    channels: Dict[str, ChannelState] = {
        key: ChannelState(value=state.value, unit=state.unit, changed=False)
        for key, state in previous.channels.items()
    }

    battery = parse_battery(body)
    if battery is not None:
        channels[KEY_BATTERY] = _channel(battery, PERCENTAGE, previous, KEY_BATTERY)

    data_fetched = False
    for reading in parse_sensor_readings(sensors):
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("Parsing statistics for sensor %s", reading.sensor_type)
        mapping = SENSOR_CHANNELS.get(reading.sensor_type.lower())
        if mapping is None:
            continue
        try:
            value = mapping.coerce(reading.value)
        except (TypeError, ValueError):
            _LOGGER.warning(f"Ignoring non-numeric {reading.sensor_type} measurement: {reading.value!r}")
            continue
        channels[mapping.key] = _channel(value, mapping.unit, previous, mapping.key)
        data_fetched = True

    if data_fetched:
        channels[KEY_LAST_UPDATE] = ChannelState(value=now, unit=None, changed=True)

    return DeviceState(channels=channels, data_fetched=data_fetched)
