"""Config flow for the Venue Events integration."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol
from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from .occurrences import TimezoneConfigurationError, resolve_timezone
from .venue_api import ApiConnectionError, VenueApiError, VenueEventsClient

from .const import CONF_BASE_URL, CONF_TIMEZONE, DEFAULT_TIMEZONE, DOMAIN

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_BASE_URL): str,
    }
)


class VenueEventsConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Venue Events.

    Step one probes the site's events endpoint; step two asks for the
    business timezone, prefilled from the site's own timezone setting.
    """

    VERSION = 1

    def __init__(self) -> None:
        self._base_url: str = ""
        self._site_timezone: str | None = None

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}

        if user_input is not None:
            base_url = user_input[CONF_BASE_URL].strip().rstrip("/")
            client = VenueEventsClient(base_url)
            try:
                await client.async_get_events(active_only=True)
                site_timezone = await self._async_read_site_timezone(client)
            except ApiConnectionError:
                errors["base"] = "cannot_connect"
            except VenueApiError:
                errors["base"] = "invalid_response"
            except Exception:  # noqa: BLE001
                _LOGGER.exception("Unexpected error while probing %s", base_url)
                errors["base"] = "unknown"
            else:
                await self.async_set_unique_id(base_url.lower())
                self._abort_if_unique_id_configured()
                self._base_url = base_url
                self._site_timezone = site_timezone
                return await self.async_step_timezone()
            finally:
                await client.async_close()

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )

    async def async_step_timezone(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Ask for the venue's business timezone."""
        errors: dict[str, str] = {}

        if user_input is not None:
            tz_name = user_input[CONF_TIMEZONE].strip()
            try:
                resolve_timezone(tz_name)
            except TimezoneConfigurationError:
                errors[CONF_TIMEZONE] = "invalid_timezone"
            else:
                return self.async_create_entry(
                    title=self._base_url,
                    data={CONF_BASE_URL: self._base_url, CONF_TIMEZONE: tz_name},
                )

        return self.async_show_form(
            step_id="timezone",
            data_schema=vol.Schema(
                {
                    vol.Required(
                        CONF_TIMEZONE,
                        default=self._site_timezone or DEFAULT_TIMEZONE,
                    ): str,
                }
            ),
            errors=errors,
        )

    async def _async_read_site_timezone(
        self, client: VenueEventsClient
    ) -> str | None:
        """Return the site's timezone setting if it names a valid zone."""
        try:
            site_timezone = await client.async_get_timezone()
        except VenueApiError as err:
            _LOGGER.debug("Could not read the site timezone: %s", err)
            return None
        if not site_timezone:
            return None
        try:
            resolve_timezone(site_timezone)
        except TimezoneConfigurationError:
            _LOGGER.debug("Ignoring invalid site timezone %r", site_timezone)
            return None
        return site_timezone
