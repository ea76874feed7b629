"""
Unit tests for date helpers and id factories.
"""

from datetime import datetime, timezone

import pytest

from worklife_coach.utils.dates import (
    add_months,
    as_utc,
    end_of_month,
    end_of_week,
    parse_max_months,
    parse_mean_months,
    within_month_band,
)
from worklife_coach.utils.ids import SequentialIdFactory, uuid_id_factory


class TestDurationParsing:
    @pytest.mark.parametrize(
        "duration, expected",
        [
            ("6-12 months", 9.0),
            ("3 months", 3.0),
            ("18-24 months", 21.0),
            ("a while", 12.0),
            ("", 12.0),
        ],
    )
    def test_parse_mean_months(self, duration, expected):
        assert parse_mean_months(duration) == expected

    def test_parse_max_months(self):
        assert parse_max_months("9-15 months") == 15
        assert parse_max_months("6 months") == 6
        assert parse_max_months("soon") == 12


class TestCalendarHelpers:
    def test_end_of_week_is_upcoming_sunday(self, fixed_now):
        result = end_of_week(fixed_now)

        assert result.date() == datetime(2026, 3, 8).date()
        assert result.weekday() == 6
        assert result.tzinfo == timezone.utc

    def test_end_of_week_on_sunday_is_same_day(self):
        sunday = datetime(2026, 3, 8, 9, 0, tzinfo=timezone.utc)

        assert end_of_week(sunday).date() == sunday.date()

    def test_end_of_month(self, fixed_now):
        assert end_of_month(fixed_now).date() == datetime(2026, 3, 31).date()

    def test_add_months_clamps_day(self):
        jan_31 = datetime(2026, 1, 31, tzinfo=timezone.utc)

        assert add_months(jan_31, 1).date() == datetime(2026, 2, 28).date()

    def test_as_utc_attaches_utc_to_naive(self, fixed_now):
        assert as_utc(fixed_now.replace(tzinfo=None)) == fixed_now
        assert as_utc(fixed_now) is fixed_now

    def test_within_month_band_inclusive(self, fixed_now):
        assert within_month_band(fixed_now, add_months(fixed_now, 3), 3, 12)
        assert within_month_band(fixed_now, add_months(fixed_now, 12), 3, 12)
        assert not within_month_band(fixed_now, add_months(fixed_now, 2), 3, 12)
        assert not within_month_band(fixed_now, add_months(fixed_now, 13), 3, 12)


class TestIdFactories:
    def test_sequential_ids_per_prefix(self):
        factory = SequentialIdFactory()

        assert [factory("action"), factory("action"), factory("plan")] == [
            "action-1",
            "action-2",
            "plan-1",
        ]

    def test_uuid_ids_are_prefixed_and_unique(self):
        first, second = uuid_id_factory("session"), uuid_id_factory("session")

        assert first.startswith("session-")
        assert first != second
