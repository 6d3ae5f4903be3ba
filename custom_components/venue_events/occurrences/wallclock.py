"""Conversion between wall-clock components and absolute instants.

Every function takes the timezone explicitly, either as an IANA name or as
a ``ZoneInfo``. Instants are returned as timezone-aware datetimes in UTC.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import TimezoneConfigurationError

UTC = ZoneInfo("UTC")

TimezoneLike = str | ZoneInfo


@dataclass(frozen=True)
class WallClock:
    """Date and time as read off a clock in a given timezone."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    weekday: int  # Monday == 0

    def calendar_date(self) -> date:
        return date(self.year, self.month, self.day)

    def time_of_day(self) -> time:
        return time(self.hour, self.minute, self.second)


def resolve_timezone(tz: TimezoneLike) -> ZoneInfo:
    """Return the ``ZoneInfo`` for *tz*.

    Raises:
        TimezoneConfigurationError: If the name is empty, malformed or not
            present in the timezone database.
    """
    if isinstance(tz, ZoneInfo):
        return tz
    if not isinstance(tz, str) or not tz.strip():
        raise TimezoneConfigurationError(
            f"Invalid business timezone: {tz!r}", timezone=tz
        )
    try:
        return ZoneInfo(tz.strip())
    except (ZoneInfoNotFoundError, ValueError, OSError) as err:
        raise TimezoneConfigurationError(
            f"Unknown business timezone: {tz}", timezone=tz
        ) from err


def ensure_aware(value: datetime) -> datetime:
    """Return *value* as an aware datetime, reading naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def to_instant(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    tz: TimezoneLike = UTC,
) -> datetime:
    """Return the UTC instant that displays as the given components in *tz*.

    A skipped local time (spring-forward gap) is moved forward by the size
    of the gap, so 02:30 on a 02:00 -> 03:00 transition becomes 03:30.
    An ambiguous local time (fall-back overlap) resolves to standard time.
    """
    zone = resolve_timezone(tz)
    naive = datetime(year, month, day, hour, minute, second)

    matches = _matching_instants(naive, zone)
    if not matches:
        gap = abs(_offset(naive, zone, fold=1) - _offset(naive, zone, fold=0))
        shifted = naive + gap
        matches = _matching_instants(shifted, zone)
        if not matches:
            return (naive - _offset(naive, zone, fold=0)).replace(tzinfo=UTC)

    if len(matches) > 1:
        matches.sort(key=lambda instant: _dst(instant, zone))
    return matches[0]


def to_instant_on(day: date, clock: time, tz: TimezoneLike) -> datetime:
    """Shorthand for :func:`to_instant` with a ``date`` and a ``time``."""
    return to_instant(
        day.year, day.month, day.day, clock.hour, clock.minute, clock.second, tz
    )


def wall_clock_parts(instant: datetime, tz: TimezoneLike) -> WallClock:
    """Return the wall-clock components of *instant* in *tz*."""
    local = ensure_aware(instant).astimezone(resolve_timezone(tz))
    return WallClock(
        year=local.year,
        month=local.month,
        day=local.day,
        hour=local.hour,
        minute=local.minute,
        second=local.second,
        weekday=local.weekday(),
    )


def calendar_date_key(instant: datetime, tz: TimezoneLike) -> str:
    """Return the ``YYYY-MM-DD`` date of *instant* in *tz*."""
    return wall_clock_parts(instant, tz).calendar_date().isoformat()


def _offset(naive: datetime, zone: ZoneInfo, *, fold: int) -> timedelta:
    return naive.replace(tzinfo=zone, fold=fold).utcoffset() or timedelta(0)


def _dst(instant: datetime, zone: ZoneInfo) -> timedelta:
    return instant.astimezone(zone).dst() or timedelta(0)


def _matching_instants(naive: datetime, zone: ZoneInfo) -> list[datetime]:
    """Return the UTC instants whose projection into *zone* equals *naive*."""
    offsets = {_offset(naive, zone, fold=0), _offset(naive, zone, fold=1)}
    matches = []
    for offset in sorted(offsets):
        candidate = (naive - offset).replace(tzinfo=UTC)
        if candidate.astimezone(zone).replace(tzinfo=None) == naive:
            matches.append(candidate)
    return matches
