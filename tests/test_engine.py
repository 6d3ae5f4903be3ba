"""Tests for the dateutil-backed recurrence engine."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from zoneinfo import ZoneInfo

from custom_components.venue_events.occurrences import engine as engine_module
from custom_components.venue_events.occurrences.engine import DateutilRecurrenceEngine
from custom_components.venue_events.occurrences.rules import parse_rule
from custom_components.venue_events.occurrences.wallclock import wall_clock_parts

UTC = ZoneInfo("UTC")
DENVER = ZoneInfo("America/Denver")


def _local(year, month, day, hour=0, minute=0, second=0):
    return datetime(year, month, day, hour, minute, second, tzinfo=DENVER)


def _enumerate(rule_text, reference, start, end):
    return DateutilRecurrenceEngine().enumerate(
        parse_rule(rule_text), reference, start, end
    )


JANUARY = (_local(2024, 1, 1), _local(2024, 1, 31, 23, 59, 59))


# =========================================================================== #
#  1. Weekly
# =========================================================================== #


class TestWeekly:

    def test_tuesday_and_saturday(self):
        hits = _enumerate("FREQ=WEEKLY;BYDAY=TU,SA", _local(2024, 1, 2, 19), *JANUARY)
        days = [wall_clock_parts(h, DENVER).day for h in hits]
        assert days == [2, 6, 9, 13, 16, 20, 23, 27, 30]
        assert {wall_clock_parts(h, DENVER).hour for h in hits} == {19}

    def test_results_are_utc_sorted_and_unique(self):
        hits = _enumerate("FREQ=WEEKLY;BYDAY=TU,SA", _local(2024, 1, 2, 19), *JANUARY)
        assert all(h.utcoffset().total_seconds() == 0 for h in hits)
        assert hits == sorted(set(hits))

    def test_interval(self):
        hits = _enumerate(
            "FREQ=WEEKLY;INTERVAL=2;BYDAY=TU", _local(2024, 1, 2, 19), *JANUARY
        )
        assert [wall_clock_parts(h, DENVER).day for h in hits] == [2, 16, 30]

    def test_range_bounds_are_inclusive(self):
        reference = _local(2024, 1, 2, 19)
        hits = _enumerate(
            "FREQ=WEEKLY;BYDAY=TU", reference, reference, _local(2024, 1, 9, 19)
        )
        assert len(hits) == 2


# =========================================================================== #
#  2. COUNT / UNTIL
# =========================================================================== #


class TestBounds:

    def test_bare_until_date_is_inclusive(self):
        hits = _enumerate(
            "FREQ=WEEKLY;BYDAY=TU;UNTIL=20240116", _local(2024, 1, 2, 19), *JANUARY
        )
        assert [wall_clock_parts(h, DENVER).day for h in hits] == [2, 9, 16]

    def test_utc_until(self):
        # Jan 9 19:00 MST is 02:00 UTC on Jan 10, after the UNTIL instant.
        hits = _enumerate(
            "FREQ=WEEKLY;BYDAY=TU;UNTIL=20240110T000000Z",
            _local(2024, 1, 2, 19),
            *JANUARY,
        )
        assert [wall_clock_parts(h, DENVER).day for h in hits] == [2]

    def test_count(self):
        hits = _enumerate(
            "FREQ=WEEKLY;BYDAY=TU;COUNT=3", _local(2024, 1, 2, 19), *JANUARY
        )
        assert [wall_clock_parts(h, DENVER).day for h in hits] == [2, 9, 16]

    def test_count_is_counted_from_reference_not_range(self):
        hits = _enumerate(
            "FREQ=WEEKLY;BYDAY=TU;COUNT=3",
            _local(2024, 1, 2, 19),
            _local(2024, 1, 10),
            _local(2024, 1, 31),
        )
        assert [wall_clock_parts(h, DENVER).day for h in hits] == [16]


# =========================================================================== #
#  3. Daily across DST
# =========================================================================== #


class TestDaily:

    def test_wall_clock_time_survives_spring_forward(self):
        hits = _enumerate(
            "FREQ=DAILY", _local(2024, 3, 8, 19), _local(2024, 3, 8), _local(2024, 3, 12)
        )
        parts = [wall_clock_parts(h, DENVER) for h in hits]
        assert [(p.day, p.hour) for p in parts] == [
            (8, 19), (9, 19), (10, 19), (11, 19),
        ]
        # 19:00 MST then 19:00 MDT
        assert hits[0] == datetime(2024, 3, 9, 2, 0, tzinfo=UTC)
        assert hits[-1] == datetime(2024, 3, 12, 1, 0, tzinfo=UTC)


# =========================================================================== #
#  4. Monthly BYMONTHDAY
# =========================================================================== #


class TestMonthly:

    HALF_YEAR = (_local(2024, 1, 1), _local(2024, 6, 30, 23, 59, 59))

    def test_clamped_month_day(self):
        rule = replace(parse_rule("FREQ=MONTHLY;BYMONTHDAY=31"), clamp_month_day=True)
        hits = DateutilRecurrenceEngine().enumerate(
            rule, _local(2024, 1, 31, 19), *self.HALF_YEAR
        )
        parts = [wall_clock_parts(h, DENVER) for h in hits]
        assert [p.day for p in parts] == [31, 29, 31, 30, 31, 30]
        assert {p.hour for p in parts} == {19}

    def test_unclamped_month_day_skips_short_months(self):
        hits = _enumerate(
            "FREQ=MONTHLY;BYMONTHDAY=31", _local(2024, 1, 31, 19), *self.HALF_YEAR
        )
        assert [(h.astimezone(DENVER).month, h.astimezone(DENVER).day) for h in hits] == [
            (1, 31), (3, 31), (5, 31),
        ]

    def test_plain_month_day(self):
        hits = _enumerate(
            "FREQ=MONTHLY;BYMONTHDAY=15", _local(2024, 1, 15, 19), *self.HALF_YEAR
        )
        assert len(hits) == 6
        assert {wall_clock_parts(h, DENVER).day for h in hits} == {15}


# =========================================================================== #
#  5. Failures
# =========================================================================== #


class TestFailures:

    def test_engine_error_yields_nothing_and_logs(self, monkeypatch, caplog):
        def _broken_rrule(**kwargs):
            raise ValueError("boom")

        monkeypatch.setattr(engine_module, "rrule", _broken_rrule)
        with caplog.at_level(logging.WARNING):
            hits = _enumerate("FREQ=DAILY", _local(2024, 1, 1, 19), *JANUARY)

        assert hits == []
        assert "Cannot enumerate rule" in caplog.text
        assert "boom" in caplog.text

    def test_empty_range(self):
        hits = _enumerate(
            "FREQ=DAILY", _local(2024, 1, 1, 19), _local(2024, 1, 5), _local(2024, 1, 5)
        )
        assert hits == []
