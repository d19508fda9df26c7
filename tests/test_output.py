"""Tests for plan output generators."""

from datetime import date

import pytest

from dayplanner.domain.calendar import HolidayCalendar
from dayplanner.domain.models import CategorySetting, Priority, ScheduleRequest, Task
from dayplanner.output.debug_generator import DebugGenerator
from dayplanner.output.pdf_generator import COLORS, PDFGenerator
from dayplanner.scheduling.engine import AllocationEngine

MONDAY = date(2024, 1, 15)


@pytest.fixture
def schedule_request():
    return ScheduleRequest(
        tasks=[
            Task(id="T1", title="Quarterly report", remaining_hours=9,
                 category_name="Work", due_date=date(2024, 1, 16), priority=Priority.HIGH),
            Task(id="T2", title="Errands", remaining_hours=2),
            Task(id="T3", title="Impossible", remaining_hours=30, due_date=MONDAY),
        ],
        categories=[CategorySetting(name="Work", daily_limit_hours=4)],
        weekday_default_hours=8,
        start_date=MONDAY,
    )


@pytest.fixture
def plan(schedule_request):
    return AllocationEngine().allocate(schedule_request, today=MONDAY)


class TestDebugGenerator:
    """Tests for DebugGenerator."""

    def test_sections(self, plan, schedule_request):
        content = DebugGenerator().generate_to_string(plan, schedule_request.tasks_map)

        assert "PLAN DEBUG OUTPUT - from 2024-01-15" in content
        assert "DAILY ALLOCATIONS" in content
        assert "CAPACITY USAGE" in content
        assert "TASK TOTALS" in content
        assert "Quarterly report" in content
        assert "(default)" in content
        assert "FULL" in content

    def test_shortfalls_listed(self, plan, schedule_request):
        content = DebugGenerator().generate_to_string(plan, schedule_request.tasks_map)

        assert "SHORTFALLS (2)" in content
        assert '"Impossible"' in content

    def test_no_shortfall_section_when_all_placed(self):
        request = ScheduleRequest(
            tasks=[Task(id="T1", title="Small", remaining_hours=1)],
            start_date=MONDAY,
        )
        plan = AllocationEngine().allocate(request, today=MONDAY)
        content = DebugGenerator().generate_to_string(plan, request.tasks_map)

        assert "SHORTFALLS" not in content

    def test_write_file(self, tmp_path, plan, schedule_request):
        path = tmp_path / "debug.txt"
        content = DebugGenerator().generate(plan, schedule_request.tasks_map, path)

        assert path.read_text() == content


class TestPDFGenerator:
    """Tests for PDFGenerator."""

    @pytest.fixture(autouse=True)
    def _require_reportlab(self):
        pytest.importorskip("reportlab")

    def test_buffer_is_pdf(self, plan, schedule_request):
        buffer = PDFGenerator().generate_to_buffer(plan, schedule_request.tasks_map)
        assert buffer.read(4) == b"%PDF"

    def test_write_file(self, tmp_path, plan, schedule_request):
        path = tmp_path / "plan.pdf"
        PDFGenerator().generate(plan, schedule_request.tasks_map, path, include_summary=False)
        assert path.read_bytes().startswith(b"%PDF")

    def test_empty_plan(self):
        request = ScheduleRequest(tasks=[], start_date=MONDAY)
        plan = AllocationEngine().allocate(request, today=MONDAY)

        buffer = PDFGenerator().generate_to_buffer(plan, {})
        assert buffer.getvalue().startswith(b"%PDF")

    def test_many_rows_paginate(self):
        tasks = [
            Task(id=f"T{i}", title=f"Task {i}", remaining_hours=1, priority=Priority.LOW)
            for i in range(60)
        ]
        request = ScheduleRequest(tasks=tasks, start_date=MONDAY)
        plan = AllocationEngine().allocate(request, today=MONDAY)

        buffer = PDFGenerator().generate_to_buffer(plan, request.tasks_map)
        assert buffer.getvalue().startswith(b"%PDF")


class RecordingCanvas:
    """Stands in for a reportlab canvas and records fill colors."""

    def __init__(self):
        self.fills = []

    def setFillColorRGB(self, r, g, b):
        self.fills.append((r, g, b))

    def __getattr__(self, name):
        return lambda *args, **kwargs: None


class TestDayRowShading:
    """Weekend and holiday rows are shaded."""

    def test_national_holiday_shaded_by_default(self):
        canvas = RecordingCanvas()
        PDFGenerator()._draw_day_row(canvas, date(2024, 1, 8), 2.0, 100, 16)
        assert COLORS["reduced"] in canvas.fills

    def test_supplied_holiday_shaded(self):
        generator = PDFGenerator(calendar=HolidayCalendar([MONDAY], country=None))
        canvas = RecordingCanvas()
        generator._draw_day_row(canvas, MONDAY, 2.0, 100, 16)
        assert COLORS["reduced"] in canvas.fills

    def test_ordinary_weekday_not_shaded(self):
        canvas = RecordingCanvas()
        PDFGenerator()._draw_day_row(canvas, MONDAY, 2.0, 100, 16)
        assert COLORS["reduced"] not in canvas.fills
