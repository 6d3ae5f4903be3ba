"""Exclusion of occurrences that fall on exception dates."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import date, datetime

from dateutil.parser import isoparse

from .wallclock import TimezoneLike, calendar_date_key, resolve_timezone

_LOGGER = logging.getLogger(__name__)

_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
_UTC_OFFSET = re.compile(r"T.*(Z|[+-]\d{2}:?\d{2})$")


def normalize_exception_dates(
    values: Iterable[object], tz: TimezoneLike | None = None
) -> frozenset[str]:
    """Return the ``YYYY-MM-DD`` keys for a collection of exception dates.

    Plain date strings and ``date`` values are used as-is. When *tz* is
    given, timestamps carrying a UTC offset (``2024-01-10T02:00:00Z``) and
    aware datetimes are read in that timezone before the date is taken.
    Without *tz*, and for floating timestamps, the written date is kept.
    """
    zone = resolve_timezone(tz) if tz is not None else None
    keys: set[str] = set()
    for value in values:
        if isinstance(value, str):
            text = value.strip()
            if not _DATE_PREFIX.match(text):
                _LOGGER.debug("Ignoring unrecognised exception date %r", value)
                continue
            if zone is None or not _UTC_OFFSET.search(text):
                keys.add(text[:10])
                continue
            try:
                value = isoparse(text)
            except ValueError:
                _LOGGER.debug("Ignoring unparseable exception date %r", text)
                continue

        if isinstance(value, datetime):
            if zone is not None and value.tzinfo is not None:
                value = value.astimezone(zone)
            keys.add(value.date().isoformat())
        elif isinstance(value, date):
            keys.add(value.isoformat())
        else:
            _LOGGER.debug("Ignoring unrecognised exception date %r", value)
    return frozenset(keys)


def filter_exceptions(
    instants: Iterable[datetime],
    exceptions: Iterable[object],
    tz: TimezoneLike,
) -> list[datetime]:
    """Drop instants whose business-timezone date is an exception date.

    Comparison is by calendar date only, independent of time-of-day.
    """
    zone = resolve_timezone(tz)
    excluded = normalize_exception_dates(exceptions, zone)
    instants = list(instants)
    if not excluded:
        return instants
    return [i for i in instants if calendar_date_key(i, zone) not in excluded]
