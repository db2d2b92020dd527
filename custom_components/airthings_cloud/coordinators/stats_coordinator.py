"""Statistics coordinator for Airthings Cloud integration."""

import datetime
import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed
from homeassistant.util import dt as dt_util

from ..const import CONF_POLL_INTERVAL, DEFAULT_POLL_INTERVAL, DOMAIN, POLL_INTERVALS
from ..core.exceptions import AirthingsException, ApiException, ParseException
from ..core.pipeline import AirthingsPollPipeline
from ..models import DeviceState

_LOGGER = logging.getLogger(__name__)


def poll_interval_from_options(options) -> datetime.timedelta:
    """Return the configured poll interval, falling back to the default."""
    choice = options.get(CONF_POLL_INTERVAL, DEFAULT_POLL_INTERVAL)
    if choice not in POLL_INTERVALS:
        _LOGGER.warning(f"Unknown poll interval '{choice}', using {DEFAULT_POLL_INTERVAL}")
        choice = DEFAULT_POLL_INTERVAL
    return POLL_INTERVALS[choice]


class AirthingsStatsCoordinator(DataUpdateCoordinator[DeviceState]):
    """Coordinator running one poll cycle per update interval."""

    def __init__(
        self, hass: HomeAssistant, entry: ConfigEntry, pipeline: AirthingsPollPipeline
    ) -> None:
        """Initialize the coordinator.

        Args:
            hass: Home Assistant instance
            entry: Config entry of the device
            pipeline: Poll pipeline for the device
        """
        self.pipeline = pipeline
        self.device_id = pipeline.device_id
        update_interval = poll_interval_from_options(entry.options)

        super().__init__(
            hass,
            _LOGGER,
            config_entry=entry,
            name=f"{DOMAIN}_stats_{self.device_id}",
            update_interval=update_interval,
        )
        self.data = DeviceState()

        _LOGGER.info(
            f"Initialized stats coordinator for {self.device_id} with interval: {update_interval}"
        )

    async def _async_update_data(self) -> DeviceState:
        """Run one poll cycle.

        Returns:
            Device state after the cycle; the previous state if the tick
            was skipped

        Raises:
            UpdateFailed: If any stage of the cycle fails
        """
        previous = self.data or DeviceState()
        try:
            state = await self.pipeline.async_run_cycle(previous, dt_util.now())
        except ParseException as err:
            _LOGGER.error(f"Malformed statistics for {self.device_id}: {err}")
            raise UpdateFailed(f"Malformed statistics: {err}") from err
        except ApiException as err:
            _LOGGER.error(f"AirThings {err.stage or 'request'} failed for {self.device_id}: {err}")
            raise UpdateFailed(f"{err.stage or 'request'} failed: {err}") from err
        except AirthingsException as err:
            _LOGGER.error(f"Poll cycle failed for {self.device_id}: {err}")
            raise UpdateFailed(f"Poll cycle failed: {err}") from err

        if state is None:
            return previous
        return state
