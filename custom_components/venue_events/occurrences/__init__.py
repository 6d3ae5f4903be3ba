"""Recurring event occurrence engine.

Expands recurring event definitions into concrete occurrences that always
start at the event's wall-clock time in the venue's business timezone.
"""

from .engine import DateutilRecurrenceEngine, RecurrenceEngine
from .exceptions import OccurrenceError, RuleParseError, TimezoneConfigurationError
from .expander import expand_events, expand_occurrences
from .filters import filter_exceptions, normalize_exception_dates
from .materialize import materialize_occurrences
from .models import Occurrence, RecurringEventDefinition
from .normalize import NormalizedStart, normalize_dtstart
from .rules import Frequency, MonthDayPolicy, RecurrenceRule, parse_rule
from .wallclock import (
    WallClock,
    calendar_date_key,
    resolve_timezone,
    to_instant,
    wall_clock_parts,
)

__all__ = [
    "DateutilRecurrenceEngine",
    "RecurrenceEngine",
    "OccurrenceError",
    "RuleParseError",
    "TimezoneConfigurationError",
    "expand_events",
    "expand_occurrences",
    "filter_exceptions",
    "normalize_exception_dates",
    "materialize_occurrences",
    "Occurrence",
    "RecurringEventDefinition",
    "NormalizedStart",
    "normalize_dtstart",
    "Frequency",
    "MonthDayPolicy",
    "RecurrenceRule",
    "parse_rule",
    "WallClock",
    "calendar_date_key",
    "resolve_timezone",
    "to_instant",
    "wall_clock_parts",
]
