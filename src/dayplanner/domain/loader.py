"""Loading planning input from JSON.

Expected document shape::

    {
      "settings": {"weekday_daily_hours": 8, "weekend_holiday_hours": 3},
      "categories": [{"name": "Work", "daily_limit_hours": 6}],
      "tasks": [
        {"id": "t1", "title": "Report", "estimated_hours": 10,
         "progress": 20, "category": "Work", "due_date": "2026-10-23",
         "priority": "HIGH", "status": "TODO"}
      ],
      "holidays": ["2026-11-03"]
    }

Everything except "tasks" is optional.
"""

import json
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional, Union

from dayplanner.domain.models import (
    CategorySetting,
    Priority,
    TaskSnapshot,
    TaskStatus,
    UserSettings,
)


class PlanInputError(ValueError):
    """Raised when planning input cannot be understood."""


@dataclass
class PlanInput:
    """Everything needed to build a planning request."""

    tasks: list[TaskSnapshot]
    categories: list[CategorySetting] = field(default_factory=list)
    settings: UserSettings = field(default_factory=UserSettings)
    holidays: list[date] = field(default_factory=list)


def _parse_date(value, where: str) -> Optional[date]:
    if value is None:
        return None
    try:
        # Accept full timestamps; only the date part matters
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise PlanInputError(f"{where}: invalid date {value!r}")


def _parse_number(value, where: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PlanInputError(f"{where}: expected a number, got {value!r}")
    return float(value)


def _parse_enum(enum_cls, value, where: str):
    if value is None:
        return None
    try:
        return enum_cls(str(value).upper())
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise PlanInputError(f"{where}: {value!r} is not one of {choices}")


def parse_task(data: dict, index: int) -> TaskSnapshot:
    where = f"tasks[{index}]"
    if not isinstance(data, dict):
        raise PlanInputError(f"{where}: expected an object")
    if "id" not in data:
        raise PlanInputError(f"{where}: missing 'id'")

    return TaskSnapshot(
        id=str(data["id"]),
        title=str(data.get("title", data["id"])),
        estimated_hours=_parse_number(data.get("estimated_hours"), f"{where}.estimated_hours"),
        progress=_parse_number(data.get("progress", 0), f"{where}.progress"),
        category_name=data.get("category"),
        due_date=_parse_date(data.get("due_date"), f"{where}.due_date"),
        priority=_parse_enum(Priority, data.get("priority"), f"{where}.priority"),
        status=_parse_enum(TaskStatus, data.get("status"), f"{where}.status") or TaskStatus.TODO,
    )


def parse_category(data: dict, index: int) -> CategorySetting:
    where = f"categories[{index}]"
    if not isinstance(data, dict) or not str(data.get("name", "")).strip():
        raise PlanInputError(f"{where}: 'name' is required")

    return CategorySetting(
        name=str(data["name"]).strip(),
        daily_limit_hours=_parse_number(
            data.get("daily_limit_hours"), f"{where}.daily_limit_hours"
        ),
        weekend_holiday_hours=_parse_number(
            data.get("weekend_holiday_hours"), f"{where}.weekend_holiday_hours"
        ),
        priority=_parse_enum(Priority, data.get("priority"), f"{where}.priority"),
    )


def parse_plan_input(data: dict) -> PlanInput:
    """Build a PlanInput from a decoded JSON document."""
    if not isinstance(data, dict):
        raise PlanInputError("top level: expected an object")
    tasks = data.get("tasks")
    if not isinstance(tasks, list):
        raise PlanInputError("tasks: expected a list")

    settings_data = data.get("settings") or {}
    if not isinstance(settings_data, dict):
        raise PlanInputError("settings: expected an object")
    categories = data.get("categories") or []
    if not isinstance(categories, list):
        raise PlanInputError("categories: expected a list")
    holiday_entries = data.get("holidays") or []
    if not isinstance(holiday_entries, list):
        raise PlanInputError("holidays: expected a list")

    settings = UserSettings(
        weekday_daily_hours=_parse_number(
            settings_data.get("weekday_daily_hours"), "settings.weekday_daily_hours"
        ),
        weekend_holiday_hours=_parse_number(
            settings_data.get("weekend_holiday_hours"), "settings.weekend_holiday_hours"
        ),
    )

    holidays = [_parse_date(d, f"holidays[{i}]") for i, d in enumerate(holiday_entries)]

    return PlanInput(
        tasks=[parse_task(t, i) for i, t in enumerate(tasks)],
        categories=[parse_category(c, i) for i, c in enumerate(categories)],
        settings=settings,
        holidays=holidays,
    )


def load_plan_input(path: Union[str, Path]) -> PlanInput:
    """Read and parse a planning input JSON file."""
    try:
        data = json.loads(Path(path).read_text())
    except json.JSONDecodeError as e:
        raise PlanInputError(f"{path}: invalid JSON ({e.msg} at line {e.lineno})")
    return parse_plan_input(data)
