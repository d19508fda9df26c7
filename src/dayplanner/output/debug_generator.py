"""Debug text output for plan analysis.

This module creates text-based debug output to analyze:
- Day-by-day allocations
- Capacity usage per day and category
- Per-task totals against remaining effort
- Tasks that could not be fully placed
"""

from pathlib import Path
from typing import Union

from dayplanner.domain.models import AllocationPlan, Task, round_hours


class DebugGenerator:
    """Generates debug text output for plan analysis."""

    def generate(
        self,
        plan: AllocationPlan,
        tasks_map: dict[str, Task],
        output_path: Union[str, Path],
    ) -> str:
        """Generate debug text output and save to file.

        Args:
            plan: The plan to analyze.
            tasks_map: Dict mapping task IDs to Task objects.
            output_path: Path to save the text file.

        Returns:
            The generated text content.
        """
        content = self._generate_content(plan, tasks_map)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(
        self,
        plan: AllocationPlan,
        tasks_map: dict[str, Task],
    ) -> str:
        """Generate debug text output and return as string."""
        return self._generate_content(plan, tasks_map)

    def _generate_content(
        self,
        plan: AllocationPlan,
        tasks_map: dict[str, Task],
    ) -> str:
        """Generate the full debug content."""
        lines = []

        # Header
        lines.append("=" * 80)
        lines.append(f"PLAN DEBUG OUTPUT - from {plan.start_date}")
        lines.append("=" * 80)
        lines.append("")

        hours_by_date = plan.get_hours_by_date()
        lines.append(f"Planned Tasks: {len(plan.deadlines)}")
        lines.append(f"Allocations: {len(plan.allocations)}")
        lines.append(f"Days With Work: {len(hours_by_date)}")
        lines.append(f"Total Hours: {round_hours(sum(hours_by_date.values()))}")
        lines.append("")

        # Daily allocations
        lines.append("-" * 80)
        lines.append("DAILY ALLOCATIONS")
        lines.append("-" * 80)
        lines.append(f"{'Date':<12} {'Day':<4} {'Task':<30} {'Category':<16} {'Hours':>8}")
        lines.append("-" * 80)

        for day in plan.dates:
            for allocation in plan.get_allocations_on(day):
                task = tasks_map.get(allocation.task_id)
                title = (task.title if task else allocation.task_id)[:30]
                category = (allocation.category_name or "-")[:16]
                lines.append(
                    f"{day.isoformat():<12} {day.strftime('%a'):<4} {title:<30} "
                    f"{category:<16} {allocation.scheduled_hours:>8.2f}"
                )
            lines.append(f"{'':<12} {'':<4} {'(day total)':<30} {'':<16} {hours_by_date[day]:>8.2f}")
        lines.append("")

        # Capacity usage
        lines.append("-" * 80)
        lines.append("CAPACITY USAGE (touched buckets)")
        lines.append("-" * 80)
        lines.append(f"{'Date':<12} {'Category':<20} {'Limit':>8} {'Used':>8} {'Left':>8}")
        for (day, _), bucket in sorted(
            plan.buckets.items(), key=lambda item: (item[0][0], item[0][1] or "")
        ):
            label = bucket.category_name or "(default)"
            marker = " FULL" if not bucket.has_capacity else ""
            lines.append(
                f"{day.isoformat():<12} {label[:20]:<20} {bucket.limit:>8.2f} "
                f"{bucket.used:>8.2f} {bucket.remaining:>8.2f}{marker}"
            )
        lines.append("")

        # Per-task totals
        lines.append("-" * 80)
        lines.append("TASK TOTALS")
        lines.append("-" * 80)
        lines.append(f"{'Task':<30} {'Remaining':>10} {'Planned':>10} {'Deadline':>12}")
        hours_by_task = plan.get_hours_by_task()
        for task_id, deadline in plan.deadlines.items():
            task = tasks_map.get(task_id)
            title = (task.title if task else task_id)[:30]
            remaining = task.remaining_hours if task else 0.0
            lines.append(
                f"{title:<30} {remaining:>10.2f} {hours_by_task.get(task_id, 0.0):>10.2f} "
                f"{deadline.isoformat():>12}"
            )
        lines.append("")

        if plan.shortfalls:
            lines.append("-" * 80)
            lines.append(f"SHORTFALLS ({len(plan.shortfalls)})")
            lines.append("-" * 80)
            for shortfall in plan.shortfalls:
                lines.append(f"  - {shortfall}")
            lines.append("")

        return "\n".join(lines)
