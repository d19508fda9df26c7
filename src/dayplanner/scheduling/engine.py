"""Allocation engine spreading task hours across calendar days.

This module implements the two-pass allocation:
1. Score tasks and resolve each task's deadline
2. Fair-share pass: walk the horizon day by day, giving each open task
   its share of what remains in its bucket, divided by the open-task count
3. Mop-up pass: greedily place any leftover hours of each task between
   the start date and its deadline
4. Flatten allocations into date order
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from dayplanner.domain.calendar import CapacityCalendar
from dayplanner.domain.models import (
    NOISE_FLOOR_HOURS,
    Allocation,
    AllocationPlan,
    CapacityBucket,
    CategorySetting,
    ScheduleRequest,
    ScheduleShortfall,
    Task,
    round_hours,
)
from dayplanner.domain.policies import DefaultScoringPolicy, ScoringPolicy
from dayplanner.scheduling.ledger import CapacityLedger

logger = logging.getLogger(__name__)

MAX_HORIZON_DAYS = 365
DEFAULT_DEADLINE_DAYS = 7


def resolve_deadline(task: Task, start_date: date) -> date:
    """Last day a task may receive hours.

    A due date before the start date is clamped to the start date; a task
    without a due date gets start_date + 7 days.
    """
    if task.due_date is None:
        return start_date + timedelta(days=DEFAULT_DEADLINE_DAYS)
    return max(task.due_date, start_date)


@dataclass
class TaskState:
    """Tracks a task's progress through a planning run."""

    task: Task
    score: int
    deadline: date
    remaining: float

    @property
    def is_open(self) -> bool:
        return self.remaining > 0


class AllocationEngine:
    """Two-pass fair-share allocator.

    The engine holds no state between runs; every call to allocate()
    builds its own ledger and task states.

    Example:
        >>> engine = AllocationEngine()
        >>> plan = engine.allocate(request)
        >>> for allocation in plan.allocations:
        ...     print(allocation.date, allocation.task_id, allocation.scheduled_hours)
    """

    def __init__(
        self,
        scoring_policy: Optional[ScoringPolicy] = None,
        calendar: Optional[CapacityCalendar] = None,
    ):
        self.scoring_policy = scoring_policy or DefaultScoringPolicy()
        self.calendar = calendar

    def allocate(self, request: ScheduleRequest, today: Optional[date] = None) -> AllocationPlan:
        """Plan the request's tasks across days.

        Args:
            request: Tasks, category settings, defaults and start date.
            today: Wall-clock date used for deadline-proximity scoring.
                Defaults to date.today().

        Returns:
            AllocationPlan with date-ordered allocations and any
            shortfalls. Infeasible tasks never raise.
        """
        today = today or date.today()
        start_date = request.start_date or today
        plan = AllocationPlan(start_date=start_date)

        categories_map = request.categories_map
        states = self._prepare_states(request.tasks, categories_map, start_date, today)
        if not states:
            return plan

        ledger = CapacityLedger(
            categories_map,
            weekday_default_hours=request.weekday_default_hours,
            weekend_holiday_default_hours=request.weekend_holiday_default_hours,
            calendar=self.calendar,
        )

        allocations: list[Allocation] = []
        self._fair_share_pass(states, ledger, start_date, allocations)
        plan.shortfalls = self._mop_up_pass(states, ledger, start_date, allocations)

        # Stable sort keeps same-day entries in the order they were made
        plan.allocations = sorted(allocations, key=lambda a: a.date)
        plan.deadlines = {s.task.id: s.deadline for s in states}
        plan.buckets = ledger.buckets

        logger.debug(
            "Planned %d tasks into %d allocations across %d buckets (%d shortfalls)",
            len(states),
            len(plan.allocations),
            len(ledger),
            len(plan.shortfalls),
        )
        return plan

    def _prepare_states(
        self,
        tasks: list[Task],
        categories_map: dict[str, CategorySetting],
        start_date: date,
        today: date,
    ) -> list[TaskState]:
        """Filter out finished tasks, then score and sort the rest."""
        states = []
        for task in tasks:
            remaining = round_hours(task.remaining_hours)
            if remaining <= 0:
                continue
            category = categories_map.get(task.category_name) if task.category_name else None
            states.append(
                TaskState(
                    task=task,
                    score=self.scoring_policy.score(task, category, today),
                    deadline=resolve_deadline(task, start_date),
                    remaining=remaining,
                )
            )

        # sorted() is stable, so equal scores keep input order
        return sorted(states, key=lambda s: s.score, reverse=True)

    def _fair_share_pass(
        self,
        states: list[TaskState],
        ledger: CapacityLedger,
        start_date: date,
        allocations: list[Allocation],
    ) -> None:
        """Share each day's bucket capacity among the tasks open that day."""
        horizon_end = max(s.deadline for s in states)

        day = start_date
        guard = 0
        while guard < MAX_HORIZON_DAYS and day <= horizon_end:
            eligible = [s for s in states if s.is_open and day <= s.deadline]

            if eligible:
                for state in eligible:
                    bucket = ledger.bucket_for(day, state.task.category_name)
                    if not bucket.has_capacity:
                        continue

                    # Later tasks split whatever the earlier ones left
                    share = bucket.remaining / len(eligible)
                    assign = min(state.remaining, share, bucket.remaining)
                    self._assign(state, bucket, assign, allocations)

            day += timedelta(days=1)
            guard += 1

    def _mop_up_pass(
        self,
        states: list[TaskState],
        ledger: CapacityLedger,
        start_date: date,
        allocations: list[Allocation],
    ) -> list[ScheduleShortfall]:
        """Greedily place leftover hours of each task before its deadline."""
        shortfalls = []

        for state in states:
            if not state.is_open:
                continue

            day = start_date
            guard = 0
            while state.is_open and guard < MAX_HORIZON_DAYS and day <= state.deadline:
                bucket = ledger.bucket_for(day, state.task.category_name)
                assign = min(state.remaining, bucket.remaining)
                self._assign(state, bucket, assign, allocations)
                day += timedelta(days=1)
                guard += 1

            if state.is_open:
                shortfall = ScheduleShortfall(
                    task_id=state.task.id,
                    title=state.task.title,
                    unscheduled_hours=state.remaining,
                    deadline=state.deadline,
                )
                logger.warning(str(shortfall))
                shortfalls.append(shortfall)

        return shortfalls

    def _assign(
        self,
        state: TaskState,
        bucket: CapacityBucket,
        hours: float,
        allocations: list[Allocation],
    ) -> None:
        """Record an assignment if it clears the noise floor."""
        if hours <= NOISE_FLOOR_HOURS:
            return

        hours = round_hours(hours)
        allocations.append(
            Allocation(
                date=bucket.date,
                task_id=state.task.id,
                scheduled_hours=hours,
                category_name=state.task.category_name,
            )
        )
        bucket.consume(hours)
        state.remaining = round_hours(state.remaining - hours)


def schedule_tasks(
    tasks: list[Task],
    categories: list[CategorySetting],
    weekday_default_hours: float,
    weekend_holiday_default_hours: Optional[float] = None,
    start_date: Optional[date] = None,
    calendar: Optional[CapacityCalendar] = None,
    today: Optional[date] = None,
) -> list[Allocation]:
    """Plan tasks and return the flattened, date-ordered allocations.

    Shortfalls are logged as warnings; use AllocationEngine.allocate() to
    get them back as data.
    """
    request = ScheduleRequest(
        tasks=tasks,
        categories=categories,
        weekday_default_hours=weekday_default_hours,
        weekend_holiday_default_hours=weekend_holiday_default_hours,
        start_date=start_date,
    )
    engine = AllocationEngine(calendar=calendar)
    return engine.allocate(request, today=today).allocations
