"""Validation module for verifying plan correctness.

This module provides a single source of truth for plan constraints:
daily capacity per category, per-task conservation of hours, and the
start-date and deadline windows. Every generated plan should pass
validation before being output.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from dayplanner.domain.calendar import CapacityCalendar
from dayplanner.domain.models import (
    NOISE_FLOOR_HOURS,
    AllocationPlan,
    ScheduleRequest,
    round_hours,
)
from dayplanner.scheduling.engine import resolve_deadline
from dayplanner.scheduling.ledger import CapacityLedger


class ValidationErrorType(Enum):
    """Types of validation errors."""

    CAPACITY_EXCEEDED = "capacity_exceeded"
    TASK_OVER_ALLOCATED = "task_over_allocated"
    BEFORE_START_DATE = "before_start_date"
    AFTER_DEADLINE = "after_deadline"
    UNKNOWN_TASK = "unknown_task"
    NON_POSITIVE_HOURS = "non_positive_hours"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    task_id: Optional[str] = None
    day: Optional[date] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.task_id:
            parts.append(f"Task {self.task_id}:")
        parts.append(self.message)
        if self.day is not None:
            parts.append(f"({self.day.isoformat()})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a plan."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def errors_of_type(self, error_type: ValidationErrorType) -> list[ValidationError]:
        return [e for e in self.errors if e.error_type == error_type]


class PlanValidator:
    """Validates plans against all constraints.

    Example:
        >>> validator = PlanValidator(calendar)
        >>> result = validator.validate(plan, request)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def __init__(
        self,
        calendar: Optional[CapacityCalendar] = None,
        tolerance_hours: float = NOISE_FLOOR_HOURS,
    ):
        self.calendar = calendar
        self.tolerance_hours = tolerance_hours

    def validate(self, plan: AllocationPlan, request: ScheduleRequest) -> ValidationResult:
        """Validate a complete plan.

        Args:
            plan: The plan to validate.
            request: Original request the plan was generated from.

        Returns:
            ValidationResult with is_valid flag and any errors. Shortfalls
            are reported as warnings.
        """
        result = ValidationResult(is_valid=True)

        self._validate_allocations(plan, request, result)
        self._validate_capacity(plan, request, result)
        self._validate_conservation(plan, request, result)

        for shortfall in plan.shortfalls:
            result.add_warning(str(shortfall))

        return result

    def _validate_allocations(
        self,
        plan: AllocationPlan,
        request: ScheduleRequest,
        result: ValidationResult,
    ) -> None:
        """Check each allocation's task, size and date window."""
        tasks_map = request.tasks_map

        for allocation in plan.allocations:
            task = tasks_map.get(allocation.task_id)
            if task is None:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.UNKNOWN_TASK,
                        message=f"Unknown task ID: {allocation.task_id}",
                        task_id=allocation.task_id,
                        day=allocation.date,
                    )
                )
                continue

            if allocation.scheduled_hours <= 0:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.NON_POSITIVE_HOURS,
                        message=f"Allocation of {allocation.scheduled_hours}h",
                        task_id=task.id,
                        day=allocation.date,
                    )
                )

            if allocation.date < plan.start_date:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.BEFORE_START_DATE,
                        message=(
                            f"Allocated before start date {plan.start_date.isoformat()}"
                        ),
                        task_id=task.id,
                        day=allocation.date,
                    )
                )

            deadline = resolve_deadline(task, plan.start_date)
            if allocation.date > deadline:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.AFTER_DEADLINE,
                        message=f"Allocated after deadline {deadline.isoformat()}",
                        task_id=task.id,
                        day=allocation.date,
                    )
                )

    def _validate_capacity(
        self,
        plan: AllocationPlan,
        request: ScheduleRequest,
        result: ValidationResult,
    ) -> None:
        """Check no (date, category) total exceeds that day's limit."""
        ledger = CapacityLedger(
            request.categories_map,
            weekday_default_hours=request.weekday_default_hours,
            weekend_holiday_default_hours=request.weekend_holiday_default_hours,
            calendar=self.calendar,
        )

        totals: dict[tuple[date, Optional[str]], float] = defaultdict(float)
        for allocation in plan.allocations:
            key = (allocation.date, ledger.category_key(allocation.category_name))
            totals[key] += allocation.scheduled_hours

        for (day, category_key), hours in sorted(
            totals.items(), key=lambda item: (item[0][0], item[0][1] or "")
        ):
            limit = ledger.limit_for(day, category_key)
            if hours > limit + self.tolerance_hours:
                label = category_key or "default"
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.CAPACITY_EXCEEDED,
                        message=(
                            f"Category {label} has {round_hours(hours)}h "
                            f"against a {limit}h limit"
                        ),
                        day=day,
                        details={"category": category_key, "hours": hours, "limit": limit},
                    )
                )

    def _validate_conservation(
        self,
        plan: AllocationPlan,
        request: ScheduleRequest,
        result: ValidationResult,
    ) -> None:
        """Check no task receives more hours than it has remaining."""
        hours_by_task = plan.get_hours_by_task()

        for task in request.tasks:
            allocated = hours_by_task.get(task.id, 0.0)
            if allocated > max(0.0, task.remaining_hours) + self.tolerance_hours:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.TASK_OVER_ALLOCATED,
                        message=(
                            f"Allocated {allocated}h of {task.remaining_hours}h remaining"
                        ),
                        task_id=task.id,
                        details={"allocated": allocated, "remaining": task.remaining_hours},
                    )
                )
