"""Capacity ledger tracking remaining hours per day and category."""

from datetime import date
from typing import Optional

from dayplanner.domain.calendar import CapacityCalendar, is_reduced_capacity_day
from dayplanner.domain.models import CapacityBucket, CategorySetting, round_hours


class CapacityLedger:
    """Run-scoped ledger of capacity buckets.

    A bucket is created the first time a (date, category) pair is asked
    for and then returned on every later request, so consumption within a
    run is cumulative. Category names that do not resolve to a setting
    share the default bucket with uncategorized tasks.

    Example:
        >>> ledger = CapacityLedger(categories_map, weekday_default_hours=8)
        >>> bucket = ledger.bucket_for(date(2026, 10, 19), "Work")
        >>> bucket.consume(2.5)
    """

    def __init__(
        self,
        categories_map: dict[str, CategorySetting],
        weekday_default_hours: float,
        weekend_holiday_default_hours: Optional[float] = None,
        calendar: Optional[CapacityCalendar] = None,
    ):
        self.categories_map = categories_map
        self.weekday_default_hours = weekday_default_hours
        self.weekend_holiday_default_hours = weekend_holiday_default_hours
        self.calendar = calendar
        self._buckets: dict[tuple[date, Optional[str]], CapacityBucket] = {}

    def category_key(self, category_name: Optional[str]) -> Optional[str]:
        """Bucket key for a category name (None for the default bucket)."""
        if category_name is not None and category_name in self.categories_map:
            return category_name
        return None

    def limit_for(self, day: date, category_name: Optional[str] = None) -> float:
        """Daily hour limit for a category, without touching any bucket."""
        key = self.category_key(category_name)
        category = self.categories_map.get(key) if key is not None else None

        if is_reduced_capacity_day(day, self.calendar):
            candidates = (
                category.weekend_holiday_hours if category else None,
                self.weekend_holiday_default_hours,
                self.weekday_default_hours,
            )
        else:
            candidates = (
                category.daily_limit_hours if category else None,
                self.weekday_default_hours,
            )

        for value in candidates:
            if value is not None:
                return round_hours(max(0.0, value))
        return 0.0

    def bucket_for(self, day: date, category_name: Optional[str] = None) -> CapacityBucket:
        """Get the bucket for a day and category, creating it on first use."""
        key = (day, self.category_key(category_name))
        bucket = self._buckets.get(key)
        if bucket is None:
            limit = self.limit_for(day, category_name)
            bucket = CapacityBucket(
                date=day,
                category_name=key[1],
                limit=limit,
                remaining=limit,
            )
            self._buckets[key] = bucket
        return bucket

    @property
    def buckets(self) -> dict[tuple[date, Optional[str]], CapacityBucket]:
        """All buckets touched so far."""
        return dict(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)
