"""Tests for the capacity ledger."""

from datetime import date

import pytest

from dayplanner.domain.calendar import HolidayCalendar
from dayplanner.domain.models import CategorySetting
from dayplanner.scheduling.ledger import CapacityLedger

MONDAY = date(2024, 1, 15)
SATURDAY = date(2024, 1, 20)


class TestCapacityLedger:
    """Tests for CapacityLedger limit lookup and bucket reuse."""

    @pytest.fixture
    def categories_map(self):
        return {
            "Work": CategorySetting(name="Work", daily_limit_hours=6, weekend_holiday_hours=2),
            "Study": CategorySetting(name="Study", daily_limit_hours=3),
            "Chores": CategorySetting(name="Chores"),
        }

    @pytest.fixture
    def ledger(self, categories_map):
        return CapacityLedger(
            categories_map,
            weekday_default_hours=8,
            weekend_holiday_default_hours=4,
        )

    def test_category_weekday_override(self, ledger):
        assert ledger.limit_for(MONDAY, "Work") == 6

    def test_category_weekend_override(self, ledger):
        assert ledger.limit_for(SATURDAY, "Work") == 2

    def test_weekend_falls_back_to_global_weekend(self, ledger):
        """A weekday override does not carry over to weekends."""
        assert ledger.limit_for(SATURDAY, "Study") == 4

    def test_weekend_falls_back_to_weekday_default(self, categories_map):
        ledger = CapacityLedger(categories_map, weekday_default_hours=8)
        assert ledger.limit_for(SATURDAY, "Study") == 8
        assert ledger.limit_for(SATURDAY, None) == 8

    def test_category_without_overrides_uses_globals(self, ledger):
        assert ledger.limit_for(MONDAY, "Chores") == 8
        assert ledger.limit_for(SATURDAY, "Chores") == 4

    def test_uncategorized_uses_globals(self, ledger):
        assert ledger.limit_for(MONDAY, None) == 8
        assert ledger.limit_for(SATURDAY, None) == 4

    def test_unknown_category_treated_as_uncategorized(self, ledger):
        assert ledger.category_key("Ghost") is None
        assert ledger.limit_for(MONDAY, "Ghost") == 8
        assert ledger.bucket_for(MONDAY, "Ghost") is ledger.bucket_for(MONDAY, None)

    def test_holiday_uses_reduced_limit(self, categories_map):
        holiday = date(2024, 1, 17)  # Wednesday
        ledger = CapacityLedger(
            categories_map,
            weekday_default_hours=8,
            weekend_holiday_default_hours=4,
            calendar=HolidayCalendar([holiday]),
        )
        assert ledger.limit_for(holiday, "Work") == 2
        assert ledger.limit_for(holiday, None) == 4

    def test_zero_override_is_respected(self):
        """A 0h override is a real limit, not a missing value."""
        ledger = CapacityLedger(
            {"Off": CategorySetting(name="Off", daily_limit_hours=0, weekend_holiday_hours=0)},
            weekday_default_hours=8,
            weekend_holiday_default_hours=4,
        )
        assert ledger.limit_for(MONDAY, "Off") == 0
        assert ledger.limit_for(SATURDAY, "Off") == 0

    def test_bucket_created_lazily(self, ledger):
        assert len(ledger) == 0
        ledger.limit_for(MONDAY, "Work")
        assert len(ledger) == 0

        bucket = ledger.bucket_for(MONDAY, "Work")
        assert len(ledger) == 1
        assert bucket.limit == 6
        assert bucket.remaining == 6

    def test_same_bucket_returned(self, ledger):
        """Consumption is cumulative within a run."""
        bucket = ledger.bucket_for(MONDAY, "Work")
        bucket.consume(2.5)

        again = ledger.bucket_for(MONDAY, "Work")
        assert again is bucket
        assert again.remaining == 3.5
        assert again.used == 2.5

    def test_buckets_are_per_category_and_day(self, ledger):
        work = ledger.bucket_for(MONDAY, "Work")
        study = ledger.bucket_for(MONDAY, "Study")
        next_day = ledger.bucket_for(date(2024, 1, 16), "Work")

        assert len({id(work), id(study), id(next_day)}) == 3
        assert set(ledger.buckets) == {
            (MONDAY, "Work"),
            (MONDAY, "Study"),
            (date(2024, 1, 16), "Work"),
        }

    def test_consume_rounds_to_hundredths(self, ledger):
        bucket = ledger.bucket_for(MONDAY, "Study")
        for _ in range(3):
            bucket.consume(0.1)
        assert bucket.remaining == 2.7
        assert bucket.has_capacity

    def test_national_holiday_by_default(self, ledger):
        """Without a calendar, Japanese national holidays are reduced-capacity days."""
        coming_of_age_day = date(2024, 1, 8)
        assert ledger.limit_for(coming_of_age_day, "Work") == 2
        assert ledger.limit_for(coming_of_age_day, None) == 4
        assert ledger.limit_for(date(2024, 1, 9), None) == 8
