"""Calendar classification for daily capacity.

Weekends and holidays are "reduced-capacity" days that draw on the
weekend/holiday hour limits instead of the ordinary daily limits.
National holidays come from the ``holidays`` package; callers may add
their own dates (company closures, personal days) on top.
"""

import json
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional, Protocol, Union

from holidays import country_holidays

from dayplanner.domain.loader import PlanInputError
from dayplanner.domain.models import as_date

SATURDAY = 5
SUNDAY = 6

DEFAULT_COUNTRY = "JP"


class CapacityCalendar(Protocol):
    """Anything that can classify a date for capacity purposes."""

    def is_reduced_capacity_day(self, day: date) -> bool:
        ...


def is_weekend(day: date) -> bool:
    """Check if a date falls on Saturday or Sunday."""
    return as_date(day).weekday() in (SATURDAY, SUNDAY)


def _parse_holiday(entry, where: str) -> date:
    if isinstance(entry, date):
        return as_date(entry)
    if not isinstance(entry, str):
        raise PlanInputError(f"{where}: expected an ISO date string, got {entry!r}")
    try:
        return date.fromisoformat(entry)
    except ValueError:
        raise PlanInputError(f"{where}: invalid date {entry!r}")


class HolidayCalendar:
    """Weekend and holiday classifier.

    A date is a holiday if it is a national holiday of ``country`` or is
    listed in ``holidays``. Pass ``country=None`` to rely on the listed
    dates alone.

    Example:
        >>> calendar = HolidayCalendar([date(2026, 12, 29)])
        >>> calendar.is_reduced_capacity_day(date(2026, 1, 12))  # Coming of Age Day
        True
        >>> calendar.is_reduced_capacity_day(date(2026, 12, 29))
        True
    """

    def __init__(
        self,
        holidays: Optional[Iterable[date]] = None,
        country: Optional[str] = DEFAULT_COUNTRY,
    ):
        self.holidays: set[date] = {as_date(d) for d in holidays or ()}
        self.country = country
        self._national = None
        if country:
            try:
                self._national = country_holidays(country)
            except NotImplementedError:
                raise ValueError(f"no national holiday data for country {country!r}")

    @classmethod
    def from_mapping(
        cls,
        table: dict,
        country: Optional[str] = DEFAULT_COUNTRY,
    ) -> "HolidayCalendar":
        """Build from a {year: [ISO date strings or dates]} mapping."""
        holidays = []
        for year, entries in table.items():
            if not isinstance(entries, list):
                raise PlanInputError(f"holidays[{year!r}]: expected a list of dates")
            for i, entry in enumerate(entries):
                holidays.append(_parse_holiday(entry, f"holidays[{year!r}][{i}]"))
        return cls(holidays, country=country)

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        country: Optional[str] = DEFAULT_COUNTRY,
    ) -> "HolidayCalendar":
        """Load extra holidays from JSON.

        The file may hold either a flat list of ISO dates or a mapping of
        year to a list of ISO dates.
        """
        try:
            data = json.loads(Path(path).read_text())
        except json.JSONDecodeError as e:
            raise PlanInputError(f"{path}: invalid JSON ({e.msg} at line {e.lineno})")

        if isinstance(data, list):
            return cls(
                [_parse_holiday(d, f"holidays[{i}]") for i, d in enumerate(data)],
                country=country,
            )
        if isinstance(data, dict):
            return cls.from_mapping(data, country=country)
        raise PlanInputError(f"{path}: expected a list of dates or a year mapping")

    def is_holiday(self, day: date) -> bool:
        day = as_date(day)
        if day in self.holidays:
            return True
        return self._national is not None and day in self._national

    def is_reduced_capacity_day(self, day: date) -> bool:
        """True for Saturdays, Sundays and holidays."""
        return is_weekend(day) or self.is_holiday(day)

    def __len__(self) -> int:
        """Number of caller-supplied holidays."""
        return len(self.holidays)


@lru_cache(maxsize=None)
def default_calendar() -> HolidayCalendar:
    """Shared calendar of national holidays for DEFAULT_COUNTRY."""
    return HolidayCalendar()


def is_reduced_capacity_day(day: date, calendar: Optional[CapacityCalendar] = None) -> bool:
    """Classify a date, using the default national calendar when none is given."""
    if calendar is None:
        calendar = default_calendar()
    return calendar.is_reduced_capacity_day(as_date(day))
