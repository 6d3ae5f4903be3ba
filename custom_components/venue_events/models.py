"""Runtime data models for the Venue Events integration."""

from __future__ import annotations

from dataclasses import dataclass

from .venue_api import VenueEventsClient

from .coordinator import VenueEventsCoordinator


@dataclass
class VenueEventsRuntimeData:
    """Data stored in config_entry.runtime_data."""

    client: VenueEventsClient
    coordinator: VenueEventsCoordinator
