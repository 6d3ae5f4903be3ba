"""Reconstruction of occurrence instants at the event's wall-clock time."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from .const import DEFAULT_MONTH_DAY_POLICY
from .models import Occurrence, RecurringEventDefinition
from .normalize import month_day_for
from .rules import MonthDayPolicy, RecurrenceRule, days_until_weekday
from .wallclock import TimezoneLike, resolve_timezone, to_instant_on, wall_clock_parts

_LOGGER = logging.getLogger(__name__)


def materialize_occurrences(
    instants: Iterable[datetime],
    event: RecurringEventDefinition,
    rule: RecurrenceRule,
    tz: TimezoneLike,
    *,
    month_day_policy: MonthDayPolicy = DEFAULT_MONTH_DAY_POLICY,
) -> list[Occurrence]:
    """Turn raw recurrence instants into occurrences of *event*.

    Each instant contributes only its business-timezone calendar date; the
    day is corrected against the rule's BYMONTHDAY/BYDAY constraint and the
    start and end are rebuilt from the event's own wall-clock times. The end
    keeps the event's local date span and end time-of-day, so the displayed
    duration is stable across DST changes.

    Returns occurrences sorted by start, one per distinct start instant.
    """
    zone = resolve_timezone(tz)
    start_local = wall_clock_parts(event.start_instant, zone)
    start_clock = start_local.time_of_day()

    end_clock = None
    end_day_span = 0
    if event.end_instant is not None:
        end_local = wall_clock_parts(event.end_instant, zone)
        end_clock = end_local.time_of_day()
        end_day_span = (end_local.calendar_date() - start_local.calendar_date()).days

    by_start: dict[datetime, Occurrence] = {}
    for instant in instants:
        day = _corrected_day(
            wall_clock_parts(instant, zone).calendar_date(), rule, month_day_policy
        )
        start = to_instant_on(day, start_clock, zone)
        end = None
        if end_clock is not None:
            end = to_instant_on(day + timedelta(days=end_day_span), end_clock, zone)
        if start in by_start:
            _LOGGER.debug("Dropping duplicate occurrence of %s at %s", event.id, start)
            continue
        by_start[start] = Occurrence(
            source_event_id=event.id,
            start_instant=start,
            end_instant=end,
            is_recurring_occurrence=True,
        )

    return [by_start[start] for start in sorted(by_start)]


def _corrected_day(
    day: date, rule: RecurrenceRule, policy: MonthDayPolicy
) -> date:
    if rule.by_month_day is not None:
        expected = month_day_for(rule.by_month_day, day.year, day.month, policy)
        if expected is not None and day.day != expected:
            _LOGGER.debug(
                "Correcting %s to day %s of the month", day, expected
            )
            day = day.replace(day=expected)

    if rule.by_weekday and day.weekday() not in rule.by_weekday:
        shifted = day + timedelta(
            days=days_until_weekday(day.weekday(), rule.by_weekday)
        )
        _LOGGER.debug("Correcting %s to requested weekday %s", day, shifted)
        day = shifted

    return day
