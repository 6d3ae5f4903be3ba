"""The Venue Events integration."""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryError
from .occurrences import TimezoneConfigurationError, resolve_timezone
from .venue_api import VenueEventsClient

from .const import CONF_BASE_URL, CONF_TIMEZONE, DEFAULT_TIMEZONE
from .coordinator import VenueEventsCoordinator
from .models import VenueEventsRuntimeData

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [Platform.CALENDAR]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Venue Events from a config entry."""
    tz_name = entry.data.get(CONF_TIMEZONE, DEFAULT_TIMEZONE)
    try:
        resolve_timezone(tz_name)
    except TimezoneConfigurationError as err:
        _LOGGER.error("Business timezone %r is not a valid IANA timezone", tz_name)
        raise ConfigEntryError(f"Invalid business timezone: {tz_name}") from err

    client = VenueEventsClient(entry.data[CONF_BASE_URL])
    coordinator = VenueEventsCoordinator(
        hass, client, entry, business_timezone=tz_name
    )
    try:
        await coordinator.async_config_entry_first_refresh()
    except Exception:
        await client.async_close()
        raise

    entry.runtime_data = VenueEventsRuntimeData(
        client=client, coordinator=coordinator
    )

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a Venue Events config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        runtime_data: VenueEventsRuntimeData = entry.runtime_data
        await runtime_data.client.async_close()
    return unload_ok
