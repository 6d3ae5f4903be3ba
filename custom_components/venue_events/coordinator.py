"""DataUpdateCoordinator for a venue's events listing."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed
from .venue_api import (
    ApiConnectionError,
    ApiResponseError,
    Event,
    InvalidResponseError,
    VenueEventsClient,
)

from .const import DEFAULT_UPDATE_INTERVAL_SECONDS, DOMAIN

_LOGGER = logging.getLogger(__name__)


class VenueEventsCoordinator(DataUpdateCoordinator[dict[str, Event]]):
    """Coordinator that polls the venue's active events.

    Stores a dict of event_id → Event, replaced wholesale on every refresh.
    """

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: Any,
        client: VenueEventsClient,
        config_entry: ConfigEntry,
        business_timezone: str,
    ) -> None:
        super().__init__(
            hass,
            _LOGGER,
            config_entry=config_entry,
            name=f"{DOMAIN}_{client.base_url}",
            update_interval=timedelta(seconds=DEFAULT_UPDATE_INTERVAL_SECONDS),
        )
        self._client = client
        self._business_timezone = business_timezone

    @property
    def business_timezone(self) -> str:
        return self._business_timezone

    async def _async_update_data(self) -> dict[str, Event]:
        """Fetch the active events from the venue site."""
        try:
            events = await self._client.async_get_events(active_only=True)
        except ApiConnectionError as err:
            raise UpdateFailed(f"Connection error: {err}") from err
        except (ApiResponseError, InvalidResponseError) as err:
            raise UpdateFailed(f"API error: {err}") from err

        # The site may ignore the active filter; drop inactive rows here too.
        return {event.id: event for event in events if event.is_active}
