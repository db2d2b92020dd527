"""Configuration flow for Airthings Cloud integration."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.config_entries import ConfigFlowResult
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.util import dt as dt_util

from .const import (
    DOMAIN,
    CONF_DEBUG,
    CONF_DEVICE_ID,
    CONF_PASSWORD,
    CONF_POLL_INTERVAL,
    CONF_USERNAME,
    DEFAULT_POLL_INTERVAL,
    POLL_INTERVALS,
)
from .core.api_client import STAGE_LOGIN, AirthingsCloudApiClient
from .core.exceptions import AirthingsException, AuthException, MissingFieldException
from .core.pipeline import AirthingsPollPipeline
from .models import Credentials, DeviceState

_LOGGER = logging.getLogger(__name__)


async def async_validate_credentials(hass: HomeAssistant, credentials: Credentials) -> None:
    """Run one full poll cycle against the cloud.

    Raises:
        AirthingsException: If any stage fails
    """
    api = AirthingsCloudApiClient(async_get_clientsession(hass))
    pipeline = AirthingsPollPipeline(api, credentials)
    await pipeline.async_run_cycle(DeviceState(), dt_util.now())


def _error_for(exc: AirthingsException) -> str:
    if isinstance(exc, AuthException):
        return "invalid_auth"
    if isinstance(exc, MissingFieldException) and exc.stage == STAGE_LOGIN:
        return "invalid_auth"
    return "cannot_connect"


class AirthingsCloudConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Config flow for Airthings Cloud (dashboard login)."""

    VERSION = 1

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> AirthingsCloudOptionsFlow:
        """Return the options flow handler."""
        return AirthingsCloudOptionsFlow()

    async def async_step_user(self, user_input: Optional[Dict[str, Any]] = None) -> ConfigFlowResult:
        """Handle the initial step."""
        errors: Dict[str, str] = {}

        if user_input is not None:
            credentials = Credentials(
                username=user_input[CONF_USERNAME].strip(),
                password=user_input[CONF_PASSWORD],
                device_id=user_input[CONF_DEVICE_ID].strip(),
            )
            if not credentials.username or not credentials.device_id:
                errors["base"] = "missing_fields"
            else:
                await self.async_set_unique_id(credentials.device_id)
                self._abort_if_unique_id_configured()

                try:
                    await async_validate_credentials(self.hass, credentials)
                except AirthingsException as exc:
                    _LOGGER.warning(f"Validation failed for device {credentials.device_id}: {exc}")
                    errors["base"] = _error_for(exc)
                except Exception:
                    _LOGGER.exception(f"Unexpected validation error for device {credentials.device_id}")
                    errors["base"] = "unknown"
                else:
                    _LOGGER.info(f"Creating new entry for device: {credentials.device_id}")
                    return self.async_create_entry(
                        title=f"Airthings {credentials.device_id}",
                        data={
                            CONF_USERNAME: credentials.username,
                            CONF_PASSWORD: credentials.password,
                            CONF_DEVICE_ID: credentials.device_id,
                        },
                    )

        defaults = user_input or {}
        schema = vol.Schema(
            {
                vol.Required(CONF_USERNAME, default=defaults.get(CONF_USERNAME, "")): str,
                vol.Required(CONF_PASSWORD): str,
                vol.Required(CONF_DEVICE_ID, default=defaults.get(CONF_DEVICE_ID, "")): str,
            }
        )
        return self.async_show_form(step_id="user", data_schema=schema, errors=errors)

    async def async_step_reconfigure(
        self, user_input: Optional[Dict[str, Any]] = None
    ) -> ConfigFlowResult:
        """Change the account credentials of an existing entry."""
        errors: Dict[str, str] = {}
        entry = self.hass.config_entries.async_get_entry(self.context["entry_id"])
        if not entry:
            return self.async_abort(reason="unknown_entry")
        data = entry.data

        if user_input is not None:
            credentials = Credentials(
                username=user_input[CONF_USERNAME].strip(),
                password=user_input[CONF_PASSWORD],
                device_id=data[CONF_DEVICE_ID],
            )
            if not credentials.username:
                errors["base"] = "missing_fields"
            else:
                try:
                    await async_validate_credentials(self.hass, credentials)
                except AirthingsException as exc:
                    _LOGGER.warning(f"Reconfigure failed for device {credentials.device_id}: {exc}")
                    errors["base"] = _error_for(exc)
                except Exception:
                    _LOGGER.exception(f"Unexpected reconfigure error for device {credentials.device_id}")
                    errors["base"] = "unknown"
                else:
                    _LOGGER.info(f"Updating credentials of entry {entry.entry_id}")
                    self.hass.config_entries.async_update_entry(
                        entry,
                        data={
                            **data,
                            CONF_USERNAME: credentials.username,
                            CONF_PASSWORD: credentials.password,
                        },
                    )
                    await self.hass.config_entries.async_reload(entry.entry_id)
                    return self.async_abort(reason="reconfigure_successful")

        schema = vol.Schema(
            {
                vol.Required(CONF_USERNAME, default=data.get(CONF_USERNAME, "")): str,
                vol.Required(CONF_PASSWORD): str,
            }
        )
        return self.async_show_form(
            step_id="reconfigure",
            data_schema=schema,
            description_placeholders={CONF_DEVICE_ID: data.get(CONF_DEVICE_ID, "")},
            errors=errors,
        )


class AirthingsCloudOptionsFlow(config_entries.OptionsFlow):
    """Poll interval and debug logging options."""

    async def async_step_init(self, user_input: Optional[Dict[str, Any]] = None) -> ConfigFlowResult:
        """Manage the options."""
        if user_input is not None:
            return self.async_create_entry(title="", data=user_input)

        options = self.config_entry.options
        schema = vol.Schema(
            {
                vol.Required(
                    CONF_POLL_INTERVAL,
                    default=options.get(CONF_POLL_INTERVAL, DEFAULT_POLL_INTERVAL),
                ): vol.In(list(POLL_INTERVALS)),
                vol.Required(CONF_DEBUG, default=options.get(CONF_DEBUG, False)): bool,
            }
        )
        return self.async_show_form(step_id="init", data_schema=schema)
