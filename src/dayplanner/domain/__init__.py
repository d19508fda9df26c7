"""Domain models and business rules for planning."""

from dayplanner.domain.calendar import (
    CapacityCalendar,
    DEFAULT_COUNTRY,
    HolidayCalendar,
    default_calendar,
    is_reduced_capacity_day,
    is_weekend,
)
from dayplanner.domain.loader import (
    PlanInput,
    PlanInputError,
    load_plan_input,
    parse_plan_input,
)
from dayplanner.domain.models import (
    Allocation,
    AllocationPlan,
    CapacityBucket,
    CategorySetting,
    Priority,
    ScheduleRequest,
    ScheduleShortfall,
    Task,
    TaskSnapshot,
    TaskStatus,
    UserSettings,
)
from dayplanner.domain.policies import (
    DefaultScoringPolicy,
    ScoringPolicy,
)

__all__ = [
    # Models
    "Allocation",
    "AllocationPlan",
    "CapacityBucket",
    "CategorySetting",
    "Priority",
    "ScheduleRequest",
    "ScheduleShortfall",
    "Task",
    "TaskSnapshot",
    "TaskStatus",
    "UserSettings",
    # Calendar
    "CapacityCalendar",
    "DEFAULT_COUNTRY",
    "HolidayCalendar",
    "default_calendar",
    "is_reduced_capacity_day",
    "is_weekend",
    # Input
    "PlanInput",
    "PlanInputError",
    "load_plan_input",
    "parse_plan_input",
    # Policies
    "DefaultScoringPolicy",
    "ScoringPolicy",
]
