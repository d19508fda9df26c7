"""PDF generation for plan output.

This module creates printable PDF plans showing:
- Per-day rows with an hour bar for each task allocation
- A summary page with per-task totals and shortfalls
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from dayplanner.domain.calendar import CapacityCalendar, is_reduced_capacity_day
from dayplanner.domain.models import (
    Allocation,
    AllocationPlan,
    Priority,
    Task,
    round_hours,
)

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    Priority.HIGH: (0.85, 0.4, 0.4),  # Red
    Priority.MEDIUM: (0.9, 0.7, 0.3),  # Orange
    Priority.LOW: (0.4, 0.6, 0.85),  # Blue
    Priority.NONE: (0.6, 0.6, 0.6),  # Gray
    "reduced": (0.93, 0.93, 0.97),  # Pale lavender
    "shortfall": (0.8, 0.2, 0.2),
}


class PDFGenerator:
    """Generates printable PDF plans.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(plan, tasks_map, "plan.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
        max_bar_hours: float = 12.0,  # Hours spanned by a full-width bar
        calendar: Optional[CapacityCalendar] = None,
    ):
        """Initialize generator.

        Args:
            calendar: Classifier used to shade weekend and holiday rows.
                None uses the default national holiday calendar.
        """
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin
        self.max_bar_hours = max_bar_hours
        self.calendar = calendar

    def generate(
        self,
        plan: AllocationPlan,
        tasks_map: dict[str, Task],
        output_path: Union[str, Path],
        include_summary: bool = True,
    ) -> None:
        """Generate PDF plan and save to file.

        Args:
            plan: The plan to render.
            tasks_map: Dict mapping task IDs to Task objects.
            output_path: Path to save the PDF.
            include_summary: Whether to include the summary page.
        """
        try:
            from reportlab.lib.pagesizes import letter, landscape
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        c = canvas.Canvas(str(output_path), pagesize=landscape(letter))
        self._draw(c, plan, tasks_map, include_summary)
        c.save()

    def generate_to_buffer(
        self,
        plan: AllocationPlan,
        tasks_map: dict[str, Task],
        include_summary: bool = True,
    ) -> BytesIO:
        """Generate PDF and return as bytes buffer."""
        try:
            from reportlab.lib.pagesizes import letter, landscape
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=landscape(letter))
        self._draw(c, plan, tasks_map, include_summary)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw(
        self,
        c,
        plan: AllocationPlan,
        tasks_map: dict[str, Task],
        include_summary: bool,
    ) -> None:
        self._draw_plan_pages(c, plan, tasks_map)
        if include_summary:
            self._draw_summary_page(c, plan, tasks_map)

    def _draw_plan_pages(
        self,
        c,
        plan: AllocationPlan,
        tasks_map: dict[str, Task],
    ) -> None:
        """Draw plan pages, one row per allocation grouped by day."""
        row_height = 16
        header_height = 60
        footer_height = 40
        usable_height = self.page_height - 2 * self.margin - header_height - footer_height
        rows_per_page = int(usable_height / row_height)

        # Each day contributes a heading row plus one row per allocation
        rows: list[tuple] = []
        hours_by_date = plan.get_hours_by_date()
        for day in plan.dates:
            rows.append(("day", day, hours_by_date[day]))
            for allocation in plan.get_allocations_on(day):
                rows.append(("allocation", allocation, None))

        if not rows:
            self._draw_header(c, plan, 0)
            c.setFont("Helvetica", 11)
            c.drawString(
                self.margin,
                self.page_height - self.margin - header_height - 20,
                "Nothing to plan.",
            )
            c.showPage()
            return

        bar_left = self.margin + 330
        bar_width = self.page_width - self.margin - bar_left - 40
        total_pages = (len(rows) + rows_per_page - 1) // rows_per_page

        for page_start in range(0, len(rows), rows_per_page):
            page_rows = rows[page_start : page_start + rows_per_page]
            self._draw_header(c, plan, len(plan.allocations))

            y = self.page_height - self.margin - header_height - 10
            for kind, item, hours in page_rows:
                y -= row_height
                if kind == "day":
                    self._draw_day_row(c, item, hours, y, row_height)
                else:
                    self._draw_allocation_row(
                        c, item, tasks_map, bar_left, bar_width, y, row_height - 4
                    )

            self._draw_legend(c, self.margin, self.margin + 10)

            page_num = (page_start // rows_per_page) + 1
            c.setFont("Helvetica", 9)
            c.drawCentredString(
                self.page_width / 2,
                self.margin - 10,
                f"Page {page_num} of {total_pages}",
            )
            c.showPage()

    def _draw_header(self, c, plan: AllocationPlan, allocation_count: int) -> None:
        """Draw page header with start date and title."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Task Plan - from {plan.start_date.strftime('%A, %B %d, %Y')}",
        )

        c.setFont("Helvetica", 10)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 35,
            f"Allocations: {allocation_count}   Shortfalls: {len(plan.shortfalls)}",
        )

    def _draw_day_row(self, c, day, hours: float, y: float, height: float) -> None:
        """Draw the heading row for a day."""
        if is_reduced_capacity_day(day, self.calendar):
            c.setFillColorRGB(*COLORS["reduced"])
            c.rect(self.margin, y - 3, self.page_width - 2 * self.margin, height, fill=1, stroke=0)
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 10)
        c.drawString(self.margin, y, day.strftime("%a %Y-%m-%d"))
        c.drawRightString(self.page_width - self.margin, y, f"{hours:.2f}h")

    def _draw_allocation_row(
        self,
        c,
        allocation: Allocation,
        tasks_map: dict[str, Task],
        bar_x: float,
        bar_width: float,
        y: float,
        height: float,
    ) -> None:
        """Draw a single allocation with a proportional hour bar."""
        task = tasks_map.get(allocation.task_id)
        title = task.title if task else allocation.task_id
        priority = task.priority if task else Priority.NONE

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 9)
        c.drawString(self.margin + 20, y, title[:40])
        c.setFont("Helvetica", 8)
        c.drawString(self.margin + 230, y, (allocation.category_name or "-")[:16])

        fraction = min(1.0, allocation.scheduled_hours / self.max_bar_hours)
        c.setFillColorRGB(*COLORS.get(priority, COLORS[Priority.NONE]))
        c.rect(bar_x, y - 2, bar_width * fraction, height, fill=1, stroke=0)

        c.setFillColorRGB(0, 0, 0)
        c.drawString(bar_x + bar_width * fraction + 4, y, f"{allocation.scheduled_hours:.2f}h")

    def _draw_legend(self, c, x: float, y: float) -> None:
        """Draw legend for priority colors."""
        c.setFont("Helvetica-Bold", 8)
        c.drawString(x, y, "Legend:")

        items = [
            (Priority.HIGH, "High"),
            (Priority.MEDIUM, "Medium"),
            (Priority.LOW, "Low"),
            (Priority.NONE, "None"),
            ("reduced", "Weekend/holiday"),
        ]

        c.setFont("Helvetica", 7)
        current_x = x + 45

        for key, label in items:
            c.setFillColorRGB(*COLORS[key])
            c.rect(current_x, y - 2, 12, 10, fill=1, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(current_x + 15, y, label)
            current_x += 70

    def _draw_summary_page(
        self,
        c,
        plan: AllocationPlan,
        tasks_map: dict[str, Task],
    ) -> None:
        """Draw summary page with per-task totals."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Plan Summary - from {plan.start_date.strftime('%B %d, %Y')}",
        )

        y = self.page_height - self.margin - 60
        hours_by_task = plan.get_hours_by_task()

        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Overview")
        y -= 20

        c.setFont("Helvetica", 10)
        stats = [
            f"Tasks Planned: {len(plan.deadlines)}",
            f"Days With Work: {len(plan.dates)}",
            f"Total Hours: {round_hours(sum(hours_by_task.values())):.2f}",
        ]
        for stat in stats:
            c.drawString(self.margin + 20, y, stat)
            y -= 15

        y -= 15
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Tasks")
        y -= 18

        c.setFont("Helvetica", 9)
        for task_id, deadline in plan.deadlines.items():
            if y < self.margin + 20:
                c.showPage()
                y = self.page_height - self.margin - 20
                c.setFont("Helvetica", 9)

            task = tasks_map.get(task_id)
            title = task.title if task else task_id
            planned = hours_by_task.get(task_id, 0.0)
            shortfall = plan.get_shortfall(task_id)

            if shortfall:
                c.setFillColorRGB(*COLORS["shortfall"])
            else:
                c.setFillColorRGB(0, 0, 0)
            line = f"{title[:50]}: {planned:.2f}h planned, due {deadline.isoformat()}"
            if shortfall:
                line += f" ({shortfall.unscheduled_hours:.2f}h unplaced)"
            c.drawString(self.margin + 20, y, line)
            y -= 14

        c.setFillColorRGB(0, 0, 0)
        c.showPage()
