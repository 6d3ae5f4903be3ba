"""Parsing of the supported RRULE subset."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Final

from dateutil.parser import isoparse

from .exceptions import RuleParseError

# Index matches datetime.weekday().
WEEKDAY_CODES: Final = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")

_UNTIL_RE = re.compile(r"^\d{8}(T\d{6}Z?)?$")
_ALLOWED_KEYS: Final = frozenset(
    {"FREQ", "INTERVAL", "COUNT", "UNTIL", "WKST", "BYDAY", "BYMONTHDAY"}
)


class Frequency(enum.Enum):
    """Recurrence frequencies understood by the engine."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class MonthDayPolicy(enum.Enum):
    """What a BYMONTHDAY beyond the length of a month produces.

    CLAMP moves the occurrence to the last day of the short month;
    SKIP drops that month, as RFC 5545 does.
    """

    CLAMP = "clamp"
    SKIP = "skip"


@dataclass(frozen=True)
class RecurrenceRule:
    """A parsed recurrence rule.

    ``until`` is naive when the rule text was floating (no ``Z``); it is then
    read in the business timezone.
    """

    frequency: Frequency
    interval: int = 1
    by_weekday: tuple[int, ...] = ()
    by_month_day: int | None = None
    count: int | None = None
    until: datetime | None = None
    week_start: int = 0
    clamp_month_day: bool = False

    def with_month_day(self, day: int) -> RecurrenceRule:
        return replace(self, by_month_day=day)

    def to_rrule_string(self) -> str:
        """Serialize back to RRULE text (without the ``RRULE:`` prefix)."""
        parts = [f"FREQ={self.frequency.value}"]
        if self.interval != 1:
            parts.append(f"INTERVAL={self.interval}")
        if self.by_weekday:
            parts.append("BYDAY=" + ",".join(WEEKDAY_CODES[d] for d in self.by_weekday))
        if self.by_month_day is not None:
            parts.append(f"BYMONTHDAY={self.by_month_day}")
        if self.count is not None:
            parts.append(f"COUNT={self.count}")
        if self.until is not None:
            suffix = "Z" if self.until.tzinfo is not None else ""
            parts.append(f"UNTIL={self.until.strftime('%Y%m%dT%H%M%S')}{suffix}")
        if self.week_start != 0:
            parts.append(f"WKST={WEEKDAY_CODES[self.week_start]}")
        return ";".join(parts)


def parse_rule(text: str) -> RecurrenceRule:
    """Parse an RRULE string into a :class:`RecurrenceRule`.

    Accepts an optional ``RRULE:`` prefix and case-insensitive keys.

    Raises:
        RuleParseError: If the rule is malformed or outside the supported
            subset (DAILY/WEEKLY/MONTHLY with BYDAY or a single BYMONTHDAY).
    """
    if not isinstance(text, str) or not text.strip():
        raise RuleParseError("Empty recurrence rule", rule=text)

    body = text.strip()
    if body.upper().startswith("RRULE:"):
        body = body[len("RRULE:"):]

    fields: dict[str, str] = {}
    for part in body.split(";"):
        part = part.strip()
        if not part:
            continue
        key, sep, value = part.partition("=")
        key = key.strip().upper()
        value = value.strip().upper()
        if not sep or not key or not value:
            raise RuleParseError(f"Malformed rule part {part!r}", rule=text)
        if key in fields:
            raise RuleParseError(f"Duplicate rule part {key}", rule=text)
        if key not in _ALLOWED_KEYS:
            raise RuleParseError(f"Unsupported rule part {key}", rule=text)
        fields[key] = value

    if "FREQ" not in fields:
        raise RuleParseError("Rule has no FREQ", rule=text)
    try:
        frequency = Frequency(fields["FREQ"])
    except ValueError as err:
        raise RuleParseError(
            f"Unsupported frequency {fields['FREQ']}", rule=text
        ) from err

    if "COUNT" in fields and "UNTIL" in fields:
        raise RuleParseError("COUNT and UNTIL are mutually exclusive", rule=text)

    by_weekday: tuple[int, ...] = ()
    if "BYDAY" in fields:
        if frequency is Frequency.MONTHLY:
            raise RuleParseError("BYDAY is not supported for MONTHLY", rule=text)
        by_weekday = _parse_weekdays(fields["BYDAY"], text)

    by_month_day = None
    if "BYMONTHDAY" in fields:
        if frequency is not Frequency.MONTHLY:
            raise RuleParseError("BYMONTHDAY requires FREQ=MONTHLY", rule=text)
        by_month_day = _parse_int(fields["BYMONTHDAY"], "BYMONTHDAY", text)
        if not 1 <= by_month_day <= 31:
            raise RuleParseError(
                f"BYMONTHDAY out of range: {by_month_day}", rule=text
            )

    interval = 1
    if "INTERVAL" in fields:
        interval = _parse_int(fields["INTERVAL"], "INTERVAL", text)
        if interval < 1:
            raise RuleParseError("INTERVAL must be positive", rule=text)

    count = None
    if "COUNT" in fields:
        count = _parse_int(fields["COUNT"], "COUNT", text)
        if count < 1:
            raise RuleParseError("COUNT must be positive", rule=text)

    week_start = 0
    if "WKST" in fields:
        if "," in fields["WKST"]:
            raise RuleParseError("WKST must name a single weekday", rule=text)
        week_start = _parse_weekdays(fields["WKST"], text)[0]

    return RecurrenceRule(
        frequency=frequency,
        interval=interval,
        by_weekday=by_weekday,
        by_month_day=by_month_day,
        count=count,
        until=_parse_until(fields["UNTIL"], text) if "UNTIL" in fields else None,
        week_start=week_start,
    )


def days_until_weekday(current: int, targets: tuple[int, ...]) -> int:
    """Return the smallest non-negative day offset from *current* to a target.

    Offsets wrap around the end of the week, so Saturday -> Monday is 2.
    """
    return min((target - current) % 7 for target in targets)


def _parse_int(value: str, name: str, text: str) -> int:
    try:
        return int(value)
    except ValueError as err:
        raise RuleParseError(f"{name} is not an integer: {value}", rule=text) from err


def _parse_weekdays(value: str, text: str) -> tuple[int, ...]:
    days: list[int] = []
    for code in value.split(","):
        code = code.strip()
        if code not in WEEKDAY_CODES:
            raise RuleParseError(f"Unsupported weekday {code!r}", rule=text)
        day = WEEKDAY_CODES.index(code)
        if day not in days:
            days.append(day)
    return tuple(sorted(days))


def _parse_until(value: str, text: str) -> datetime:
    """Parse an UNTIL value.

    A bare date covers that whole business day, so it becomes 23:59:59
    floating time. Values with a ``Z`` suffix are UTC.
    """
    if not _UNTIL_RE.match(value):
        raise RuleParseError(f"Malformed UNTIL {value!r}", rule=text)
    try:
        parsed = isoparse(value)
    except ValueError as err:
        raise RuleParseError(f"Malformed UNTIL {value!r}", rule=text) from err
    if "T" not in value:
        return parsed.replace(hour=23, minute=59, second=59)
    return parsed
