"""Poll cycle for Airthings Cloud integration.

One cycle is login, authorize, authenticate and fetch, each stage awaiting
the previous one. Tokens live only for the duration of a cycle.
"""

import asyncio
import datetime
from typing import Optional
import logging

from ..models import Credentials, DeviceState, SampleWindow
from .api_client import AirthingsCloudApiClient
from .stats_parser import normalize_samples

_LOGGER = logging.getLogger(__name__)


class AirthingsPollPipeline:
    """Runs poll cycles for a single device, at most one at a time."""

    __slots__ = ("_api_client", "_credentials", "_lock")

    def __init__(self, api_client: AirthingsCloudApiClient, credentials: Credentials) -> None:
        """Initialize the pipeline.

        Args:
            api_client: API client for HTTP requests
            credentials: Account login and device ID
        """
        self._api_client = api_client
        self._credentials = credentials
        self._lock = asyncio.Lock()

    @property
    def device_id(self) -> str:
        return self._credentials.device_id

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    async def async_fetch_access_token(self) -> str:
        """Run the three authentication stages and return an access token."""
        bearer_token = await self._api_client.async_login(
            self._credentials.username, self._credentials.password
        )
        code = await self._api_client.async_authorize(bearer_token)
        return await self._api_client.async_authenticate(code)

    async def async_run_cycle(
        self, previous: DeviceState, now: datetime.datetime
    ) -> Optional[DeviceState]:
        """Run one poll cycle.

        Returns:
            The next device state, or None if a cycle was already in flight

        Raises:
            AirthingsException: If any stage fails; ``previous`` is untouched
        """
        if self._lock.locked():
            _LOGGER.debug("Poll cycle for %s already in flight, skipping tick", self.device_id)
            return None

        async with self._lock:
            access_token = await self.async_fetch_access_token()
            body = await self._api_client.async_fetch_samples(
                access_token, self.device_id, SampleWindow.around(now)
            )
            state = normalize_samples(body, previous, now)

        if state.data_fetched:
            _LOGGER.debug("Completed processing statistics for %s", self.device_id)
        else:
            _LOGGER.error(f"Unable to process statistics for device {self.device_id}")
        return state
