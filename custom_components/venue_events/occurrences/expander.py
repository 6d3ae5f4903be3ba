"""Expansion of event definitions into concrete occurrences."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

from .const import DEFAULT_MONTH_DAY_POLICY, ENGINE_WINDOW_PADDING
from .engine import DateutilRecurrenceEngine, RecurrenceEngine
from .exceptions import RuleParseError
from .filters import filter_exceptions
from .materialize import materialize_occurrences
from .models import Occurrence, RecurringEventDefinition
from .normalize import normalize_dtstart
from .rules import MonthDayPolicy, parse_rule
from .wallclock import (
    TimezoneLike,
    ensure_aware,
    resolve_timezone,
)

_LOGGER = logging.getLogger(__name__)

_DEFAULT_ENGINE = DateutilRecurrenceEngine()


def expand_occurrences(
    event: RecurringEventDefinition,
    range_start: datetime,
    range_end: datetime,
    business_timezone: TimezoneLike,
    *,
    engine: RecurrenceEngine | None = None,
    month_day_policy: MonthDayPolicy = DEFAULT_MONTH_DAY_POLICY,
) -> list[Occurrence]:
    """Return every occurrence of a recurring *event* in ``[range_start, range_end]``.

    Each occurrence starts at the event's business-timezone wall-clock time.
    A malformed or unsupported rule is logged and yields no occurrences.

    Raises:
        TimezoneConfigurationError: If *business_timezone* cannot be resolved.
    """
    zone = resolve_timezone(business_timezone)
    range_start = ensure_aware(range_start)
    range_end = ensure_aware(range_end)

    if not event.is_active or not event.is_recurring or range_end < range_start:
        return []

    try:
        rule = parse_rule(event.recurrence_rule)
    except RuleParseError as err:
        _LOGGER.warning(
            "Skipping recurring event %s (%s): %s", event.id, event.title, err
        )
        return []

    event = _with_aware_instants(event)
    normalized = normalize_dtstart(
        rule, event.start_instant, zone, month_day_policy=month_day_policy
    )
    raw = (engine or _DEFAULT_ENGINE).enumerate(
        normalized.rule,
        normalized.reference,
        range_start - ENGINE_WINDOW_PADDING,
        range_end + ENGINE_WINDOW_PADDING,
    )
    occurrences = materialize_occurrences(
        raw, event, normalized.rule, zone, month_day_policy=month_day_policy
    )

    # Exceptions are judged on the corrected dates, not the raw instants.
    kept = set(
        filter_exceptions(
            [occ.start_instant for occ in occurrences], event.exceptions, zone
        )
    )
    return [
        occ
        for occ in occurrences
        if occ.start_instant in kept
        and range_start <= occ.start_instant <= range_end
    ]


def expand_events(
    events: Iterable[RecurringEventDefinition],
    range_start: datetime,
    range_end: datetime,
    business_timezone: TimezoneLike,
    *,
    engine: RecurrenceEngine | None = None,
    month_day_policy: MonthDayPolicy = DEFAULT_MONTH_DAY_POLICY,
) -> list[Occurrence]:
    """Return the occurrences of all active *events* within the range.

    Recurring events are expanded; one-time events are kept when their start
    falls inside the range. The result is ordered by start, then event id.

    Raises:
        TimezoneConfigurationError: If *business_timezone* cannot be resolved.
    """
    zone = resolve_timezone(business_timezone)
    range_start = ensure_aware(range_start)
    range_end = ensure_aware(range_end)

    results: list[Occurrence] = []
    for event in events:
        if not event.is_active:
            continue
        if event.is_recurring:
            results.extend(
                expand_occurrences(
                    event,
                    range_start,
                    range_end,
                    zone,
                    engine=engine,
                    month_day_policy=month_day_policy,
                )
            )
            continue

        event = _with_aware_instants(event)
        if range_start <= event.start_instant <= range_end:
            results.append(
                Occurrence(
                    source_event_id=event.id,
                    start_instant=event.start_instant,
                    end_instant=event.end_instant,
                    is_recurring_occurrence=False,
                )
            )

    results.sort(key=lambda occ: (occ.start_instant, occ.source_event_id))
    return results


def _with_aware_instants(event: RecurringEventDefinition) -> RecurringEventDefinition:
    start = ensure_aware(event.start_instant)
    end = ensure_aware(event.end_instant) if event.end_instant is not None else None
    if end is not None and end < start:
        _LOGGER.warning(
            "Ignoring end of event %s (%s): it precedes the start",
            event.id, event.title,
        )
        end = None
    if start is event.start_instant and end is event.end_instant:
        return event
    return replace(event, start_instant=start, end_instant=end)
