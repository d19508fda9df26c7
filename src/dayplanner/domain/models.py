"""Domain models for the planning system.

This module contains the core data structures used throughout the
planner: tasks and their upstream snapshots, category capacity settings,
planning requests, and the allocations a planning run produces.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

# Hours are tracked to the hundredth; anything at or below this is noise.
HOURS_PRECISION = 2
NOISE_FLOOR_HOURS = 0.01

DEFAULT_DAILY_HOURS = 8.0


def round_hours(hours: float) -> float:
    """Round an hour quantity to the planner's precision."""
    return round(hours, HOURS_PRECISION)


def as_date(value: date) -> date:
    """Normalize a date or datetime to a plain date (time of day dropped)."""
    if isinstance(value, datetime):
        return value.date()
    return value


class Priority(Enum):
    """Priority tier for tasks and categories."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    NONE = "NONE"


class TaskStatus(Enum):
    """Workflow status of an upstream task record."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


@dataclass
class Task:
    """A task to be spread across days.

    Attributes:
        id: Stable identifier, unique per user.
        title: Display name (not used in computation).
        remaining_hours: Effort still required, in hours.
        category_name: Name of the CategorySetting this task draws capacity
            from. None (or an unknown name) means global defaults apply.
        due_date: Optional due date. A datetime is accepted; its time of
            day is ignored.
        priority: Priority tier of the task.
    """

    id: str
    title: str
    remaining_hours: float
    category_name: Optional[str] = None
    due_date: Optional[date] = None
    priority: Priority = Priority.NONE

    def __post_init__(self):
        if self.due_date is not None:
            self.due_date = as_date(self.due_date)
        if self.priority is None:
            self.priority = Priority.NONE


@dataclass
class TaskSnapshot:
    """A task as stored upstream, before remaining effort is derived.

    Attributes:
        id: Stable identifier.
        title: Display name.
        estimated_hours: Total estimated effort. None means unestimated.
        progress: Percent complete (0-100).
        category_name: Optional category reference.
        due_date: Optional due date.
        priority: Optional priority tier.
        status: Workflow status; DONE tasks are never planned.
    """

    id: str
    title: str
    estimated_hours: Optional[float] = None
    progress: Optional[float] = 0
    category_name: Optional[str] = None
    due_date: Optional[date] = None
    priority: Optional[Priority] = None
    status: TaskStatus = TaskStatus.TODO

    @property
    def remaining_hours(self) -> float:
        """Effort left, net of recorded progress (never negative)."""
        if self.estimated_hours is None:
            return 0.0
        progress = self.progress or 0
        return max(0.0, self.estimated_hours * (1 - progress / 100))

    def to_task(self) -> Task:
        """Convert to a planning Task."""
        return Task(
            id=self.id,
            title=self.title,
            remaining_hours=self.remaining_hours,
            category_name=self.category_name,
            due_date=self.due_date,
            priority=self.priority or Priority.NONE,
        )


@dataclass
class CategorySetting:
    """Daily capacity settings for a task category.

    Attributes:
        name: Unique key joining tasks to this setting.
        daily_limit_hours: Ordinary-day capacity override.
        weekend_holiday_hours: Weekend/holiday capacity override.
        priority: Optional category-level priority boost.
    """

    name: str
    daily_limit_hours: Optional[float] = None
    weekend_holiday_hours: Optional[float] = None
    priority: Optional[Priority] = None


@dataclass
class UserSettings:
    """A user's stored working-hour defaults.

    Either value may be unset; see the properties for how gaps are filled.
    """

    weekday_daily_hours: Optional[float] = None
    weekend_holiday_hours: Optional[float] = None

    @property
    def weekday_default_hours(self) -> float:
        if self.weekday_daily_hours is not None:
            return self.weekday_daily_hours
        return DEFAULT_DAILY_HOURS

    @property
    def weekend_holiday_default_hours(self) -> float:
        if self.weekend_holiday_hours is not None:
            return self.weekend_holiday_hours
        return self.weekday_default_hours


@dataclass
class ScheduleRequest:
    """Parameters for one planning run.

    Attributes:
        tasks: Tasks to plan, in caller order (ties keep this order).
        categories: Category settings, looked up by name.
        weekday_default_hours: Capacity for ordinary days when a category
            has no override.
        weekend_holiday_default_hours: Capacity for weekends and holidays
            when a category has no override. None falls back to the
            weekday default.
        start_date: First day allocations may be placed on. None means
            today.
    """

    tasks: list[Task]
    categories: list[CategorySetting] = field(default_factory=list)
    weekday_default_hours: float = DEFAULT_DAILY_HOURS
    weekend_holiday_default_hours: Optional[float] = None
    start_date: Optional[date] = None

    def __post_init__(self):
        if self.start_date is not None:
            self.start_date = as_date(self.start_date)

    @property
    def categories_map(self) -> dict[str, CategorySetting]:
        """Category settings keyed by name."""
        return {c.name: c for c in self.categories}

    @property
    def tasks_map(self) -> dict[str, Task]:
        """Tasks keyed by ID."""
        return {t.id: t for t in self.tasks}


@dataclass(frozen=True)
class Allocation:
    """Hours of one task placed on one day."""

    date: date
    task_id: str
    scheduled_hours: float
    category_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "task_id": self.task_id,
            "scheduled_hours": self.scheduled_hours,
            "category_name": self.category_name,
        }


@dataclass
class CapacityBucket:
    """Remaining allocatable hours for one category on one day.

    Attributes:
        date: The day this bucket covers.
        category_name: Category key, or None for the default bucket.
        limit: Capacity the bucket started the run with.
        remaining: Hours still allocatable; only ever decreases.
    """

    date: date
    category_name: Optional[str]
    limit: float
    remaining: float

    @property
    def used(self) -> float:
        return round_hours(self.limit - self.remaining)

    @property
    def has_capacity(self) -> bool:
        return self.remaining > 0

    def consume(self, hours: float) -> None:
        """Take hours out of the bucket."""
        self.remaining = round_hours(self.remaining - hours)


@dataclass(frozen=True)
class ScheduleShortfall:
    """A task that could not be fully placed before its deadline."""

    task_id: str
    title: str
    unscheduled_hours: float
    deadline: date

    def __str__(self) -> str:
        return (
            f'Task "{self.title}" (ID: {self.task_id}) could not be fully '
            f"scheduled. Remaining: {self.unscheduled_hours}h, "
            f"Deadline: {self.deadline.isoformat()}"
        )


@dataclass
class AllocationPlan:
    """Complete output of a planning run.

    Attributes:
        start_date: First day of the plan.
        allocations: Allocations ordered by date (same-day entries keep
            the order they were made in).
        shortfalls: Tasks left with unplaced hours.
        deadlines: Resolved deadline for each planned task ID.
        buckets: Every capacity bucket touched during the run, keyed by
            (date, category key).
    """

    start_date: date
    allocations: list[Allocation] = field(default_factory=list)
    shortfalls: list[ScheduleShortfall] = field(default_factory=list)
    deadlines: dict[str, date] = field(default_factory=dict)
    buckets: dict[tuple[date, Optional[str]], CapacityBucket] = field(
        default_factory=dict
    )

    @property
    def is_empty(self) -> bool:
        return not self.allocations

    @property
    def dates(self) -> list[date]:
        """Distinct dates carrying allocations, ascending."""
        return sorted({a.date for a in self.allocations})

    def get_allocations_on(self, day: date) -> list[Allocation]:
        return [a for a in self.allocations if a.date == day]

    def get_task_allocations(self, task_id: str) -> list[Allocation]:
        return [a for a in self.allocations if a.task_id == task_id]

    def get_task_hours(self, task_id: str) -> float:
        """Total hours allocated to a task."""
        return round_hours(
            sum(a.scheduled_hours for a in self.allocations if a.task_id == task_id)
        )

    def get_hours_by_task(self) -> dict[str, float]:
        totals: dict[str, float] = defaultdict(float)
        for allocation in self.allocations:
            totals[allocation.task_id] += allocation.scheduled_hours
        return {task_id: round_hours(h) for task_id, h in totals.items()}

    def get_hours_by_date(self) -> dict[date, float]:
        totals: dict[date, float] = defaultdict(float)
        for allocation in self.allocations:
            totals[allocation.date] += allocation.scheduled_hours
        return {d: round_hours(h) for d, h in sorted(totals.items())}

    def get_shortfall(self, task_id: str) -> Optional[ScheduleShortfall]:
        for shortfall in self.shortfalls:
            if shortfall.task_id == task_id:
                return shortfall
        return None

    def to_dict(self) -> dict:
        """JSON-ready representation of the plan."""
        return {
            "start_date": self.start_date.isoformat(),
            "allocations": [a.to_dict() for a in self.allocations],
            "shortfalls": [
                {
                    "task_id": s.task_id,
                    "title": s.title,
                    "unscheduled_hours": s.unscheduled_hours,
                    "deadline": s.deadline.isoformat(),
                }
                for s in self.shortfalls
            ],
        }
