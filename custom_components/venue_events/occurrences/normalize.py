"""Alignment of the recurrence reference start with the intended local day."""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta

from .const import DEFAULT_MONTH_DAY_POLICY, MAX_MONTH_SCAN
from .rules import Frequency, MonthDayPolicy, RecurrenceRule, days_until_weekday
from .wallclock import (
    TimezoneLike,
    ensure_aware,
    resolve_timezone,
    to_instant_on,
    wall_clock_parts,
)

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedStart:
    """The rule and reference instant handed to the recurrence engine.

    ``reference`` is expressed in the business timezone.
    """

    rule: RecurrenceRule
    reference: datetime


def normalize_dtstart(
    rule: RecurrenceRule,
    start_instant: datetime,
    tz: TimezoneLike,
    *,
    month_day_policy: MonthDayPolicy = DEFAULT_MONTH_DAY_POLICY,
) -> NormalizedStart:
    """Make the engine's first pattern day match the event's local day."""
    zone = resolve_timezone(tz)
    start_instant = ensure_aware(start_instant)

    if rule.frequency is Frequency.MONTHLY and rule.by_month_day is not None:
        return _normalize_month_day(rule, start_instant, zone, month_day_policy)

    if rule.frequency is Frequency.WEEKLY and rule.by_weekday:
        return _normalize_weekday(rule, start_instant, zone)

    return NormalizedStart(rule, start_instant.astimezone(zone))


def month_day_for(
    target: int, year: int, month: int, policy: MonthDayPolicy
) -> int | None:
    """Return the day *target* lands on in the given month, or None if skipped."""
    last = calendar.monthrange(year, month)[1]
    if target <= last:
        return target
    if policy is MonthDayPolicy.CLAMP:
        return last
    return None


def _normalize_month_day(
    rule: RecurrenceRule,
    start_instant: datetime,
    zone,
    policy: MonthDayPolicy,
) -> NormalizedStart:
    rule = replace(rule, clamp_month_day=policy is MonthDayPolicy.CLAMP)
    local = wall_clock_parts(start_instant, zone)
    first_day = _first_month_day_on_or_after(
        local.calendar_date(), rule.by_month_day, policy
    )
    if first_day is None:
        return NormalizedStart(rule, start_instant.astimezone(zone))

    reference = to_instant_on(first_day, local.time_of_day(), zone)
    read_back = wall_clock_parts(reference, zone)
    if read_back.calendar_date() != first_day:
        _LOGGER.debug(
            "Reference for BYMONTHDAY=%s moved from %s to %s",
            rule.by_month_day, first_day, read_back.calendar_date(),
        )
        rule = rule.with_month_day(read_back.day)
        reference = to_instant_on(
            read_back.calendar_date(), local.time_of_day(), zone
        )
    return NormalizedStart(rule, reference.astimezone(zone))


def _normalize_weekday(
    rule: RecurrenceRule, start_instant: datetime, zone
) -> NormalizedStart:
    local = wall_clock_parts(start_instant, zone)
    if local.weekday in rule.by_weekday:
        return NormalizedStart(rule, start_instant.astimezone(zone))

    offset = days_until_weekday(local.weekday, rule.by_weekday)
    rolled = local.calendar_date() + timedelta(days=offset)
    _LOGGER.debug(
        "Rolling weekly reference from %s to %s", local.calendar_date(), rolled
    )
    reference = to_instant_on(rolled, local.time_of_day(), zone)
    return NormalizedStart(rule, reference.astimezone(zone))


def _first_month_day_on_or_after(
    start: date, target: int, policy: MonthDayPolicy
) -> date | None:
    year, month = start.year, start.month
    for _ in range(MAX_MONTH_SCAN):
        day = month_day_for(target, year, month, policy)
        if day is not None and date(year, month, day) >= start:
            return date(year, month, day)
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return None
