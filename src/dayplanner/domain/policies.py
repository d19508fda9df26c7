"""Policy definitions for planning rules.

This module contains the scoring policy that decides which tasks claim
capacity first. Policies are kept separate from the allocation engine to
allow independent testing and easy modification.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from dayplanner.domain.models import CategorySetting, Priority, Task


class ScoringPolicy(ABC):
    """Abstract base class for task scoring policies."""

    @abstractmethod
    def score(
        self,
        task: Task,
        category: Optional[CategorySetting],
        today: date,
    ) -> int:
        """Compute a task's priority score.

        Args:
            task: Task to score.
            category: The task's category setting, if it resolves to one.
            today: Reference date for deadline proximity. This is the
                wall-clock date, not the plan's start date.

        Returns:
            Score; higher scores are allocated first.
        """
        pass


@dataclass
class DefaultScoringPolicy(ScoringPolicy):
    """Default additive scoring.

    Score components:
    - Task priority: HIGH 100, MEDIUM 50, LOW 10
    - Deadline proximity: overdue 1000, <=1 day 500, <=3 days 200,
      <=7 days 100, later max(0, 100 - days)
    - Category priority: HIGH 50, MEDIUM 25
    """

    priority_points: dict[Priority, int] = field(
        default_factory=lambda: {
            Priority.HIGH: 100,
            Priority.MEDIUM: 50,
            Priority.LOW: 10,
            Priority.NONE: 0,
        }
    )
    category_priority_points: dict[Priority, int] = field(
        default_factory=lambda: {
            Priority.HIGH: 50,
            Priority.MEDIUM: 25,
        }
    )

    overdue_points: int = 1000
    within_1_day_points: int = 500
    within_3_days_points: int = 200
    within_7_days_points: int = 100
    distant_base_points: int = 100  # Decays by one point per day out

    def score(
        self,
        task: Task,
        category: Optional[CategorySetting],
        today: date,
    ) -> int:
        score = self.priority_points.get(task.priority, 0)
        score += self.deadline_points(task.due_date, today)
        if category is not None and category.priority is not None:
            score += self.category_priority_points.get(category.priority, 0)
        return score

    def deadline_points(self, due_date: Optional[date], today: date) -> int:
        """Points for how close a due date is to today."""
        if due_date is None:
            return 0

        days = (due_date - today).days
        if days < 0:
            return self.overdue_points
        elif days <= 1:
            return self.within_1_day_points
        elif days <= 3:
            return self.within_3_days_points
        elif days <= 7:
            return self.within_7_days_points
        else:
            return max(0, self.distant_base_points - days)
