"""Calendar entity for the Venue Events integration."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from homeassistant.components.calendar import CalendarEntity, CalendarEvent
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity
from .occurrences import (
    Occurrence,
    RecurringEventDefinition,
    expand_events,
    normalize_exception_dates,
    resolve_timezone,
)
from .venue_api import Event

from .const import DEFAULT_EVENT_DURATION, DOMAIN, UPCOMING_LOOKAHEAD_DAYS
from .coordinator import VenueEventsCoordinator
from .models import VenueEventsRuntimeData

_LOGGER = logging.getLogger(__name__)

# Recurring occurrences that started before a requested window may still
# overlap it.
_LOOKBEHIND = timedelta(days=1)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the venue calendar entity from a config entry."""
    runtime_data: VenueEventsRuntimeData = entry.runtime_data
    async_add_entities([VenueEventsCalendarEntity(runtime_data.coordinator)])


class VenueEventsCalendarEntity(
    CoordinatorEntity[VenueEventsCoordinator], CalendarEntity
):
    """A read-only calendar of a venue's public events."""

    _attr_has_entity_name = True

    def __init__(self, coordinator: VenueEventsCoordinator) -> None:
        super().__init__(coordinator)
        self._attr_unique_id = f"{DOMAIN}_{coordinator.config_entry.entry_id}"
        self._attr_name = coordinator.config_entry.title

    @property
    def event(self) -> CalendarEvent | None:
        """Return the current or next upcoming event."""
        return _upcoming_event(
            self.coordinator.data or {},
            datetime.now(tz=ZoneInfo("UTC")),
            self.coordinator.business_timezone,
        )

    async def async_get_events(
        self,
        hass: HomeAssistant,
        start_date: datetime,
        end_date: datetime,
    ) -> list[CalendarEvent]:
        """Return events overlapping the requested time range."""
        return _events_in_range(
            self.coordinator.data or {},
            start_date,
            end_date,
            self.coordinator.business_timezone,
        )


# --------------------------------------------------------------------------- #
#  Mapping helpers
# --------------------------------------------------------------------------- #


def _to_definition(event: Event, tz_name: str) -> RecurringEventDefinition:
    """Map a venue API Event to the occurrence engine's definition."""
    return RecurringEventDefinition(
        id=event.id,
        title=event.title,
        start_instant=event.start_at,
        end_instant=event.end_at,
        recurrence_rule=event.recurrence_rule,
        exceptions=normalize_exception_dates(event.exceptions, tz_name),
        is_active=event.is_active,
    )


def _sort_key(ev: CalendarEvent) -> datetime:
    """Normalise a CalendarEvent.start to a tz-aware datetime for sorting.

    All-day events store ``start`` as ``date``; timed events as ``datetime``.
    We convert ``date`` → midnight UTC so both types are comparable.
    """
    if isinstance(ev.start, datetime):
        return ev.start
    return datetime.combine(ev.start, datetime.min.time(), tzinfo=ZoneInfo("UTC"))


def _map_occurrence(occurrence: Occurrence, event: Event, tz_name: str) -> CalendarEvent:
    """Map an Occurrence of a venue event to a HA CalendarEvent."""
    zone = resolve_timezone(tz_name)
    start = occurrence.start_instant.astimezone(zone)
    end = occurrence.end_instant.astimezone(zone) if occurrence.end_instant else None

    if occurrence.is_recurring_occurrence:
        uid = f"{event.id}_{int(occurrence.start_instant.timestamp() * 1000)}"
    else:
        uid = event.id

    if event.is_all_day:
        start_day = start.date()
        end_day = end.date() if end is not None else start_day
        # HA expects an exclusive end date; a missing end covers one day.
        if end_day <= start_day:
            end_day = start_day + timedelta(days=1)
        return CalendarEvent(
            summary=event.title,
            start=start_day,
            end=end_day,
            description=event.description,
            location=event.venue_area,
            uid=uid,
        )

    if end is None or end <= start:
        end = start + DEFAULT_EVENT_DURATION
    return CalendarEvent(
        summary=event.title,
        start=start,
        end=end,
        description=event.description,
        location=event.venue_area,
        uid=uid,
    )


def _end_key(ev: CalendarEvent) -> datetime:
    if isinstance(ev.end, datetime):
        return ev.end
    return datetime.combine(ev.end, datetime.min.time(), tzinfo=ZoneInfo("UTC"))


def _events_in_range(
    events: Mapping[str, Event],
    range_start: datetime,
    range_end: datetime,
    tz_name: str,
) -> list[CalendarEvent]:
    """Expand and map every event that overlaps ``[range_start, range_end)``."""
    occurrences = expand_events(
        [_to_definition(ev, tz_name) for ev in events.values() if ev.is_recurring],
        range_start - _LOOKBEHIND,
        range_end,
        tz_name,
    )
    # One-time events are kept whole and judged by overlap below, however
    # long ago they started.
    occurrences.extend(
        Occurrence(
            source_event_id=ev.id,
            start_instant=ev.start_at,
            end_instant=ev.end_at,
            is_recurring_occurrence=False,
        )
        for ev in events.values()
        if ev.is_active and not ev.is_recurring
    )

    results: list[CalendarEvent] = []
    for occurrence in occurrences:
        event = events[occurrence.source_event_id]
        cal_ev = _map_occurrence(occurrence, event, tz_name)
        if _end_key(cal_ev) <= range_start or _sort_key(cal_ev) >= range_end:
            continue
        results.append(cal_ev)

    results.sort(key=_sort_key)
    return results


def _upcoming_event(
    events: Mapping[str, Event],
    now: datetime,
    tz_name: str,
) -> CalendarEvent | None:
    """Return the event in progress at *now*, or the next one to start."""
    candidates = _events_in_range(
        events, now, now + timedelta(days=UPCOMING_LOOKAHEAD_DAYS), tz_name
    )
    if not candidates:
        _LOGGER.debug("No events in the next %s days", UPCOMING_LOOKAHEAD_DAYS)
        return None
    return candidates[0]
