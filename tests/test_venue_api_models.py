"""Tests for decoding venue site API payloads."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from custom_components.venue_events.venue_api._serialization import (
    decamelize,
    parse_string_list,
    parse_timestamp,
)
from custom_components.venue_events.venue_api.models import Event, Setting

UTC = ZoneInfo("UTC")


# =========================================================================== #
#  1. Serialization helpers
# =========================================================================== #


class TestDecamelize:

    def test_nested(self):
        assert decamelize({"startDateTime": 1, "rows": [{"isAllDay": True}]}) == {
            "start_date_time": 1,
            "rows": [{"is_all_day": True}],
        }

    def test_already_snake_case(self):
        assert decamelize({"venue_area": "bar"}) == {"venue_area": "bar"}


class TestParseTimestamp:

    def test_utc_z_suffix(self):
        assert parse_timestamp("2024-01-03T02:00:00.000Z") == datetime(
            2024, 1, 3, 2, 0, tzinfo=UTC
        )

    def test_offset(self):
        assert parse_timestamp("2024-01-02T19:00:00-07:00") == datetime(
            2024, 1, 3, 2, 0, tzinfo=UTC
        )

    def test_naive_is_utc(self):
        parsed = parse_timestamp("2024-01-03T02:00:00")
        assert parsed == datetime(2024, 1, 3, 2, 0, tzinfo=UTC)

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value):
        assert parse_timestamp(value) is None

    def test_unsupported_type(self):
        with pytest.raises(ValueError):
            parse_timestamp(1704247200)


class TestParseStringList:

    def test_json_text(self):
        assert parse_string_list('["2024-01-09", "2024-01-16"]') == (
            "2024-01-09",
            "2024-01-16",
        )

    def test_real_list(self):
        assert parse_string_list(["trivia", None, " ", "weekly"]) == ("trivia", "weekly")

    def test_comma_separated_fallback(self):
        assert parse_string_list("trivia, weekly") == ("trivia", "weekly")

    @pytest.mark.parametrize("value", [None, "", "[]"])
    def test_empty(self, value):
        assert parse_string_list(value) == ()

    def test_object_is_rejected(self):
        with pytest.raises(ValueError):
            parse_string_list('{"a": 1}')


# =========================================================================== #
#  2. Event.from_api_response
# =========================================================================== #


def _row(**overrides):
    row = {
        "id": 12,
        "title": "Trivia Night",
        "description": "Teams of up to six",
        "startDateTime": "2024-01-03T02:00:00.000Z",
        "endDateTime": "2024-01-03T06:00:00.000Z",
        "venueArea": "patio",
        "recurrenceRule": "FREQ=WEEKLY;BYDAY=TU",
        "exceptions": '["2024-01-09"]',
        "isAllDay": False,
        "tags": '["trivia"]',
        "isActive": True,
        "updatedAt": "2024-01-01T00:00:00Z",
    }
    row.update(overrides)
    return decamelize(row)


class TestEventFromApiResponse:

    def test_full_row(self):
        event = Event.from_api_response(_row())
        assert event.id == "12"
        assert event.title == "Trivia Night"
        assert event.start_at == datetime(2024, 1, 3, 2, 0, tzinfo=UTC)
        assert event.end_at == datetime(2024, 1, 3, 6, 0, tzinfo=UTC)
        assert event.venue_area == "patio"
        assert event.recurrence_rule == "FREQ=WEEKLY;BYDAY=TU"
        assert event.exceptions == ("2024-01-09",)
        assert event.tags == ("trivia",)
        assert event.is_recurring is True
        assert event.updated_at == datetime(2024, 1, 1, tzinfo=UTC)

    def test_defaults(self):
        event = Event.from_api_response(
            {"id": "a", "start_date_time": "2024-01-03T02:00:00Z"}
        )
        assert event.title == ""
        assert event.end_at is None
        assert event.venue_area == "bar"
        assert event.recurrence_rule is None
        assert event.is_recurring is False
        assert event.is_active is True
        assert event.exceptions == ()

    def test_blank_rule_is_not_recurring(self):
        assert Event.from_api_response(_row(recurrenceRule="")).is_recurring is False

    def test_missing_start_raises(self):
        with pytest.raises(KeyError):
            Event.from_api_response({"id": "a"})

    def test_null_start_raises(self):
        with pytest.raises(ValueError):
            Event.from_api_response(_row(startDateTime=None))


class TestSettingFromApiResponse:

    def test_timezone_setting(self):
        setting = Setting.from_api_response(
            {"key": "timezone", "value": "America/Denver", "description": None}
        )
        assert setting == Setting(key="timezone", value="America/Denver")
