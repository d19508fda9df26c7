"""Command-line interface for the dayplanner task planning tool."""

import argparse
import json
import logging
import sys
from datetime import date, timedelta
from typing import Optional

from dayplanner.domain.calendar import DEFAULT_COUNTRY, HolidayCalendar
from dayplanner.domain.loader import PlanInput, load_plan_input
from dayplanner.domain.models import (
    AllocationPlan,
    CategorySetting,
    Priority,
    ScheduleRequest,
    TaskSnapshot,
    TaskStatus,
    UserSettings,
)
from dayplanner.output.debug_generator import DebugGenerator
from dayplanner.output.pdf_generator import PDFGenerator
from dayplanner.scheduling.scheduler import Scheduler
from dayplanner.validation.validator import PlanValidator

logger = logging.getLogger(__name__)


def create_sample_input(start_date: Optional[date] = None) -> PlanInput:
    """Create a sample task list for demos.

    Args:
        start_date: Date the due dates are laid out from. None uses today.
    """
    start_date = start_date or date.today()

    categories = [
        CategorySetting(name="Work", daily_limit_hours=6, weekend_holiday_hours=1),
        CategorySetting(name="Study", daily_limit_hours=2, weekend_holiday_hours=4),
        CategorySetting(name="Home"),
    ]

    specs = [
        # (title, estimate, progress, category, due in days, priority)
        ("Quarterly report", 12, 25, "Work", 4, Priority.HIGH),
        ("Client follow-ups", 3, 0, "Work", 1, Priority.MEDIUM),
        ("Code review backlog", 6, 50, "Work", None, Priority.LOW),
        ("Statistics course unit 3", 8, 10, "Study", 10, Priority.MEDIUM),
        ("Exam prep", 10, 0, "Study", 6, Priority.HIGH),
        ("Tax paperwork", 4, 0, "Home", -2, Priority.HIGH),
        ("Garage cleanup", 5, 0, "Home", None, Priority.NONE),
        ("Read design book", 6, 0, None, 20, Priority.LOW),
        ("Renew passport", 1, 100, None, 3, Priority.MEDIUM),
    ]

    tasks = []
    for i, (title, estimate, progress, category, due_in, priority) in enumerate(specs):
        due_date = start_date + timedelta(days=due_in) if due_in is not None else None
        if progress >= 100:
            status = TaskStatus.DONE
        elif progress:
            status = TaskStatus.IN_PROGRESS
        else:
            status = TaskStatus.TODO
        tasks.append(
            TaskSnapshot(
                id=f"T{i + 1:03d}",
                title=title,
                estimated_hours=estimate,
                progress=progress,
                category_name=category,
                due_date=due_date,
                priority=priority,
                status=status,
            )
        )

    return PlanInput(
        tasks=tasks,
        categories=categories,
        settings=UserSettings(weekday_daily_hours=3, weekend_holiday_hours=5),
    )


def run_plan(
    plan_input: PlanInput,
    start_date: Optional[date] = None,
    calendar: Optional[HolidayCalendar] = None,
    output_path: Optional[str] = None,
    debug_path: Optional[str] = None,
    as_json: bool = False,
) -> AllocationPlan:
    """Plan the input, validate it, and print/export the result."""
    if calendar is None:
        calendar = HolidayCalendar(plan_input.holidays)
    scheduler = Scheduler(calendar=calendar)
    request = scheduler.build_request(
        plan_input.tasks,
        plan_input.categories,
        plan_input.settings,
        start_date=start_date or date.today(),
    )
    plan, stats = scheduler.generate_plan_with_stats(request)

    validator = PlanValidator(calendar=calendar)
    result = validator.validate(plan, request)

    if as_json:
        print(json.dumps(plan.to_dict(), indent=2))
    else:
        print_summary(plan, stats, request)
        if result.is_valid:
            print("\nValidation: PASSED")
        else:
            print(f"\nValidation: FAILED ({len(result.errors)} errors)")
            for error in result.errors[:5]:
                print(f"    - {error}")
            if len(result.errors) > 5:
                print(f"    ... and {len(result.errors) - 5} more errors")

        if result.warnings:
            print(f"\nWarnings ({len(result.warnings)}):")
            for warning in result.warnings:
                print(f"    - {warning}")

    tasks_map = request.tasks_map
    if debug_path:
        DebugGenerator().generate(plan, tasks_map, debug_path)
        logger.info("Wrote debug report to %s", debug_path)
    if output_path:
        PDFGenerator(calendar=calendar).generate(plan, tasks_map, output_path)
        logger.info("Wrote PDF to %s", output_path)

    return plan


def print_summary(plan: AllocationPlan, stats: dict, request: ScheduleRequest) -> None:
    """Print a day-by-day summary of a plan."""
    print(f"\n{'=' * 60}")
    print(f"Plan from {plan.start_date}")
    print(f"{'=' * 60}")
    print(f"  Tasks: {stats['scheduled_tasks']}/{stats['total_tasks']} scheduled, "
          f"{stats['fully_scheduled_tasks']} fully")
    print(f"  Hours: {stats['allocated_hours']:.2f} of {stats['requested_hours']:.2f} placed")
    if stats["shortfall_count"]:
        print(f"  Unplaced: {stats['unscheduled_hours']:.2f}h across "
              f"{stats['shortfall_count']} tasks")

    tasks_map = request.tasks_map
    print("\nDaily Plan:")
    for day in plan.dates:
        print(f"  {day} ({day.strftime('%a')}): {stats['hours_by_date'][day]:.2f}h")
        for allocation in plan.get_allocations_on(day):
            task = tasks_map.get(allocation.task_id)
            title = task.title if task else allocation.task_id
            print(f"      {allocation.scheduled_hours:5.2f}h  {title}")


def _parse_start(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date: {value!r} (expected YYYY-MM-DD)")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="dayplanner - spread task hours across days",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo                          Plan the built-in sample tasks
  %(prog)s demo --output plan.pdf        Also write a PDF

  %(prog)s plan tasks.json               Plan tasks from a JSON file
  %(prog)s plan tasks.json --json        Print the plan as JSON
  %(prog)s plan tasks.json --holidays closures.json --start 2026-11-02
  %(prog)s plan tasks.json --country US  Use US national holidays
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show informational log messages",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    demo_parser = subparsers.add_parser("demo", help="Plan built-in sample tasks")
    demo_parser.add_argument(
        "--start", "-s",
        type=_parse_start,
        help="Plan start date, YYYY-MM-DD (default: today)",
    )
    demo_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output PDF file path",
    )

    plan_parser = subparsers.add_parser("plan", help="Plan tasks from a JSON file")
    plan_parser.add_argument("input", type=str, help="Planning input JSON file")
    plan_parser.add_argument(
        "--start", "-s",
        type=_parse_start,
        help="Plan start date, YYYY-MM-DD (default: today)",
    )
    plan_parser.add_argument(
        "--holidays", "-H",
        type=str,
        help="Extra holidays JSON (list of dates or {year: [dates]})",
    )
    plan_parser.add_argument(
        "--country", "-c",
        type=str,
        default=DEFAULT_COUNTRY,
        help=f"Country whose national holidays apply (default: {DEFAULT_COUNTRY}; 'none' to disable)",
    )
    plan_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output PDF file path",
    )
    plan_parser.add_argument(
        "--debug", "-d",
        type=str,
        help="Output debug text file path",
    )
    plan_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the plan as JSON instead of a summary",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "demo":
        start_date = args.start or date.today()
        run_plan(create_sample_input(start_date), start_date=start_date, output_path=args.output)
        return 0
    elif args.command == "plan":
        try:
            plan_input = load_plan_input(args.input)
            country = None if args.country.lower() == "none" else args.country
            if args.holidays:
                calendar = HolidayCalendar.from_file(args.holidays, country=country)
            else:
                calendar = HolidayCalendar(country=country)
            calendar.holidays.update(plan_input.holidays)
        except (OSError, ValueError) as e:
            print(f"error: {e}", file=sys.stderr)
            return 2
        run_plan(
            plan_input,
            start_date=args.start,
            calendar=calendar,
            output_path=args.output,
            debug_path=args.debug,
            as_json=args.json,
        )
        return 0
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
