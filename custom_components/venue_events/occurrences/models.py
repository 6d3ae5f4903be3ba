"""Data models for recurring event expansion."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RecurringEventDefinition:
    """An event row as supplied by the event store.

    ``exceptions`` holds business-timezone calendar dates (``YYYY-MM-DD``)
    on which the event does not take place.
    """

    id: str
    title: str
    start_instant: datetime
    end_instant: datetime | None = None
    recurrence_rule: str | None = None
    exceptions: frozenset[str] = field(default_factory=frozenset)
    is_active: bool = True

    @property
    def is_recurring(self) -> bool:
        """Whether this event carries a recurrence rule."""
        return bool(self.recurrence_rule and self.recurrence_rule.strip())


@dataclass(frozen=True)
class Occurrence:
    """One concrete appearance of an event within a queried range."""

    source_event_id: str
    start_instant: datetime
    end_instant: datetime | None = None
    is_recurring_occurrence: bool = True
