"""Decoding of the venue site's JSON payloads."""

from __future__ import annotations

import json
import re
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from dateutil.parser import isoparse

_CAMEL_TO_SNAKE = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _to_snake(name: str) -> str:
    return _CAMEL_TO_SNAKE.sub(r"_\1", name).lower()


def decamelize(data: Any) -> Any:
    """Recursively convert all dict keys from camelCase to snake_case."""
    if isinstance(data, dict):
        return {_to_snake(k): decamelize(v) for k, v in data.items()}
    if isinstance(data, list):
        return [decamelize(item) for item in data]
    return data


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp into an aware datetime.

    The site serializes instants as UTC (``2024-01-02T02:00:00.000Z``);
    values without an offset are read as UTC too.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = isoparse(value)
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=ZoneInfo("UTC"))
    return parsed


def parse_string_list(value: Any) -> tuple[str, ...]:
    """Parse a list column that may arrive JSON-encoded.

    The site stores ``exceptions`` and ``tags`` as JSON text
    (``'["2024-01-09"]'``); newer responses send real lists.
    """
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return tuple(v.strip() for v in value.split(",") if v.strip())
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list):
        raise ValueError(f"Expected a list, got {type(value).__name__}")
    return tuple(str(v) for v in value if v is not None and str(v).strip())
