"""Main scheduler interface.

This module provides the high-level Scheduler class that turns stored
task records and user settings into a planning request, runs the
allocation engine, and reports statistics.
"""

import logging
from datetime import date
from typing import Optional

from dayplanner.domain.calendar import CapacityCalendar
from dayplanner.domain.models import (
    AllocationPlan,
    CategorySetting,
    ScheduleRequest,
    TaskSnapshot,
    TaskStatus,
    UserSettings,
    round_hours,
)
from dayplanner.domain.policies import DefaultScoringPolicy, ScoringPolicy
from dayplanner.scheduling.engine import AllocationEngine

logger = logging.getLogger(__name__)


class Scheduler:
    """High-level scheduler for generating task plans.

    Example:
        >>> scheduler = Scheduler(calendar=HolidayCalendar(holidays))
        >>> request = scheduler.build_request(snapshots, categories, UserSettings())
        >>> plan, stats = scheduler.generate_plan_with_stats(request)
    """

    def __init__(
        self,
        scoring_policy: Optional[ScoringPolicy] = None,
        calendar: Optional[CapacityCalendar] = None,
    ):
        """Initialize scheduler.

        Args:
            scoring_policy: Policy ranking tasks for capacity.
            calendar: Weekend/holiday classifier. None uses weekends plus
                Japanese national holidays.
        """
        self.scoring_policy = scoring_policy or DefaultScoringPolicy()
        self.calendar = calendar
        self.engine = AllocationEngine(
            scoring_policy=self.scoring_policy,
            calendar=self.calendar,
        )

    def build_request(
        self,
        snapshots: list[TaskSnapshot],
        categories: list[CategorySetting],
        settings: Optional[UserSettings] = None,
        start_date: Optional[date] = None,
    ) -> ScheduleRequest:
        """Build a planning request from stored task records.

        Finished tasks and tasks with no remaining effort are left out.

        Args:
            snapshots: Task records as stored.
            categories: The user's category settings.
            settings: The user's working-hour defaults.
            start_date: First plannable day (None means today).
        """
        settings = settings or UserSettings()

        tasks = []
        for snapshot in snapshots:
            if snapshot.status == TaskStatus.DONE:
                continue
            task = snapshot.to_task()
            if task.remaining_hours <= 0:
                continue
            tasks.append(task)

        logger.info(
            "Built request with %d of %d tasks", len(tasks), len(snapshots)
        )

        return ScheduleRequest(
            tasks=tasks,
            categories=categories,
            weekday_default_hours=settings.weekday_default_hours,
            weekend_holiday_default_hours=settings.weekend_holiday_default_hours,
            start_date=start_date,
        )

    def generate_plan(
        self,
        request: ScheduleRequest,
        today: Optional[date] = None,
    ) -> AllocationPlan:
        """Generate a plan for the request.

        Args:
            request: Planning request.
            today: Reference date for deadline scoring (None means today).
        """
        return self.engine.allocate(request, today=today)

    def generate_plan_with_stats(
        self,
        request: ScheduleRequest,
        today: Optional[date] = None,
    ) -> tuple[AllocationPlan, dict]:
        """Generate plan and return statistics.

        Returns:
            Tuple of (plan, stats_dict).
        """
        plan = self.generate_plan(request, today=today)
        stats = self._calculate_stats(plan, request)
        return plan, stats

    def _calculate_stats(
        self,
        plan: AllocationPlan,
        request: ScheduleRequest,
    ) -> dict:
        """Calculate plan statistics."""
        hours_by_task = plan.get_hours_by_task()
        planned_tasks = [t for t in request.tasks if round_hours(t.remaining_hours) > 0]

        requested_hours = round_hours(sum(t.remaining_hours for t in planned_tasks))
        allocated_hours = round_hours(sum(hours_by_task.values()))
        shortfall_ids = {s.task_id for s in plan.shortfalls}
        fully_scheduled = [
            t for t in planned_tasks
            if t.id in hours_by_task and t.id not in shortfall_ids
        ]

        dates = plan.dates

        return {
            "total_tasks": len(planned_tasks),
            "scheduled_tasks": len(hours_by_task),
            "fully_scheduled_tasks": len(fully_scheduled),
            "requested_hours": requested_hours,
            "allocated_hours": allocated_hours,
            "unscheduled_hours": round_hours(sum(s.unscheduled_hours for s in plan.shortfalls)),
            "shortfall_count": len(plan.shortfalls),
            "days_with_allocations": len(dates),
            "first_date": dates[0] if dates else None,
            "last_date": dates[-1] if dates else None,
            "hours_by_date": plan.get_hours_by_date(),
        }
