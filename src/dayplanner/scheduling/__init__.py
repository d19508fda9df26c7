"""Allocation engine for spreading task hours across days."""

from dayplanner.scheduling.engine import (
    AllocationEngine,
    resolve_deadline,
    schedule_tasks,
)
from dayplanner.scheduling.ledger import CapacityLedger
from dayplanner.scheduling.scheduler import Scheduler

__all__ = [
    "AllocationEngine",
    "CapacityLedger",
    "Scheduler",
    "resolve_deadline",
    "schedule_tasks",
]
