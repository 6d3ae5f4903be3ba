"""Data models for venue site API responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ._serialization import parse_string_list, parse_timestamp
from .const import DEFAULT_VENUE_AREA


@dataclass(frozen=True)
class Event:
    """An event row from the venue's public events listing."""

    id: str
    title: str
    start_at: datetime
    end_at: datetime | None = None
    description: str | None = None
    venue_area: str = DEFAULT_VENUE_AREA
    recurrence_rule: str | None = None
    exceptions: tuple[str, ...] = field(default_factory=tuple)
    is_all_day: bool = False
    tags: tuple[str, ...] = field(default_factory=tuple)
    is_active: bool = True
    updated_at: datetime | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> Event:
        """Construct from a decamelized API response dict.

        Raises:
            KeyError: If ``id`` or ``start_date_time`` is missing.
            ValueError: If a timestamp or list column cannot be parsed.
        """
        start_at = parse_timestamp(data["start_date_time"])
        if start_at is None:
            raise ValueError("Event has no start_date_time")
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            start_at=start_at,
            end_at=parse_timestamp(data.get("end_date_time")),
            description=data.get("description") or None,
            venue_area=data.get("venue_area") or DEFAULT_VENUE_AREA,
            recurrence_rule=data.get("recurrence_rule") or None,
            exceptions=parse_string_list(data.get("exceptions")),
            is_all_day=bool(data.get("is_all_day", False)),
            tags=parse_string_list(data.get("tags")),
            is_active=bool(data.get("is_active", True)),
            updated_at=parse_timestamp(data.get("updated_at")),
        )

    @property
    def is_recurring(self) -> bool:
        """Whether this event has a recurrence rule."""
        return bool(self.recurrence_rule and self.recurrence_rule.strip())


@dataclass(frozen=True)
class Setting:
    """A key/value site setting (e.g. the company timezone)."""

    key: str
    value: str | None = None
    description: str | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> Setting:
        """Construct from a decamelized API response dict."""
        return cls(
            key=str(data["key"]),
            value=data.get("value"),
            description=data.get("description"),
        )
