"""Raw recurrence enumeration backed by dateutil."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Protocol

from dateutil.rrule import DAILY, MONTHLY, WEEKLY, rrule

from .exceptions import RuleParseError
from .rules import Frequency, RecurrenceRule
from .wallclock import UTC, ensure_aware

_LOGGER = logging.getLogger(__name__)

_FREQUENCIES = {
    Frequency.DAILY: DAILY,
    Frequency.WEEKLY: WEEKLY,
    Frequency.MONTHLY: MONTHLY,
}


class RecurrenceEngine(Protocol):
    """Enumerates the raw instants of a recurrence rule."""

    def enumerate(
        self,
        rule: RecurrenceRule,
        reference: datetime,
        range_start: datetime,
        range_end: datetime,
    ) -> list[datetime]:
        """Return instants in ``[range_start, range_end]``, ascending, unique."""


class DateutilRecurrenceEngine:
    """``RecurrenceEngine`` built on ``dateutil.rrule``.

    dateutil steps in the wall-clock of the reference's ``tzinfo``, so a
    reference expressed in the business timezone keeps its local time-of-day
    across DST transitions. Failures never propagate: they are logged as
    :class:`RuleParseError` and yield no instants.
    """

    def enumerate(
        self,
        rule: RecurrenceRule,
        reference: datetime,
        range_start: datetime,
        range_end: datetime,
    ) -> list[datetime]:
        reference = ensure_aware(reference)
        try:
            recurrence = rrule(**self._rrule_kwargs(rule, reference))
            hits = recurrence.between(
                ensure_aware(range_start), ensure_aware(range_end), inc=True
            )
        except (ValueError, TypeError, OverflowError) as err:
            error = RuleParseError(
                f"Cannot enumerate rule: {err}", rule=rule.to_rrule_string()
            )
            _LOGGER.warning("%s", error, exc_info=True)
            return []

        return sorted({hit.astimezone(UTC) for hit in hits})

    @staticmethod
    def _rrule_kwargs(rule: RecurrenceRule, reference: datetime) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "freq": _FREQUENCIES[rule.frequency],
            "dtstart": reference,
            "interval": rule.interval,
            "wkst": rule.week_start,
        }
        if rule.by_weekday:
            kwargs["byweekday"] = rule.by_weekday
        if rule.by_month_day is not None:
            if rule.clamp_month_day and rule.by_month_day > 28:
                # Last of 28..N in each month: N where it exists, else month end.
                kwargs["bymonthday"] = tuple(range(28, rule.by_month_day + 1))
                kwargs["bysetpos"] = -1
            else:
                kwargs["bymonthday"] = rule.by_month_day
        if rule.count is not None:
            kwargs["count"] = rule.count
        if rule.until is not None:
            until = rule.until
            if until.tzinfo is None:
                until = until.replace(tzinfo=reference.tzinfo)
            kwargs["until"] = until
        return kwargs
