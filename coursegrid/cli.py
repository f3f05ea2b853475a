"""
CLI (Command Line Interface).

This module provides quick terminal commands for power users and for testing, e.g.:

    coursegrid search <text>
    coursegrid list --branch CSE --type DC --window Mon=09:00-13:00
    coursegrid conflicts CS201 CS330
    coursegrid check CS425 --against CS201 CS330
    coursegrid grid CS201 CS330
    coursegrid recommend CS201
    coursegrid advise CS201 CS330
    coursegrid interactive

Note:
- The interactive UI lives in coursegrid/interactive.py
- Nothing is persisted: selections are passed as course codes on every call
"""

from __future__ import annotations

import argparse
from typing import List, Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from coursegrid.advisor import AdvisorClient
from coursegrid.catalog import Catalog, load_catalog
from coursegrid.config import get_config
from coursegrid.conflicts import check_clash, detect_conflicts
from coursegrid.errors import AdvisorError, CatalogError
from coursegrid.filters import filter_courses, recommend_courses, total_credits
from coursegrid.grid import build_grid, render_grid
from coursegrid.logging_config import setup_logging
from coursegrid.model import Course, DayTimeFilter, TimeWindow
from coursegrid.parse import DAY_CODES
from coursegrid.timeutil import parse_time_range


console = Console()


# ---------------------------------------------------------------------------
# Argument helpers
# ---------------------------------------------------------------------------


def _window_arg(text: str) -> TimeWindow:
    try:
        start, end = parse_time_range(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e
    return TimeWindow(start, end)


def _day_window_arg(text: str) -> tuple[str, TimeWindow]:
    """
    'Mon=09:00-12:00' -> ('Mon', TimeWindow(540, 720))
    """
    if "=" not in text:
        raise argparse.ArgumentTypeError(f"Expected DAY=HH:MM-HH:MM, got {text!r}")
    day_s, range_s = text.split("=", 1)
    day_s = day_s.strip()
    day = DAY_CODES.get(day_s) or DAY_CODES.get(day_s.capitalize())
    if day is None:
        raise argparse.ArgumentTypeError(f"Unknown day: {day_s!r}")
    return day, _window_arg(range_s)


def build_day_filter(
    all_days: Optional[TimeWindow], day_windows: Optional[List[tuple[str, TimeWindow]]]
) -> DayTimeFilter:
    """
    --all-days sets every weekday, --window then overrides single days.
    """
    day_filter = DayTimeFilter.uniform(all_days) if all_days else DayTimeFilter()
    for day, window in day_windows or []:
        day_filter = day_filter.with_window(day, window)
    return day_filter


def _resolve_courses(catalog: Catalog, codes: List[str]) -> List[Course]:
    """
    Look up course codes in input order, skipping unknown and repeated codes.
    """
    out: List[Course] = []
    for code in codes:
        course = catalog.get(code)
        if course is None:
            print(f"Warning: course '{code.strip()}' not found in catalog (ignored).")
            continue
        if course not in out:
            out.append(course)
    return out


def _course_line(c: Course) -> str:
    types = ",".join(c.course_types)
    bits = [c.code, c.name or "(no name)", c.branch, f"{c.credits} cr"]
    if types:
        bits.append(types)
    return " | ".join(bits)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_search(args: argparse.Namespace, catalog: Catalog) -> int:
    """
    Search courses by substring match in code, name, or instructor.
    """
    query = (args.text or "").strip()
    if not query:
        print("Please provide a search text.")
        return 1

    matches = catalog.search(query)
    if not matches:
        print("No results.")
        return 0

    # show max 20
    for c in matches[:20]:
        print(_course_line(c))
    if len(matches) > 20:
        print(f"... and {len(matches) - 20} more results")

    return 0


def _cmd_list(args: argparse.Namespace, catalog: Catalog) -> int:
    """
    List catalog courses matching branch / type / day-time filters.
    """
    day_filter = build_day_filter(args.all_days, args.window)
    courses = filter_courses(catalog.courses, branch=args.branch, course_type=args.type, day_filter=day_filter)

    if not courses:
        print("No courses available for this branch/type/time filter.")
        return 0

    for c in courses:
        print(_course_line(c))
    print(f"{len(courses)} of {len(catalog)} courses")
    return 0


def _cmd_conflicts(args: argparse.Namespace, catalog: Catalog) -> int:
    """
    Print all detected clashes among the given courses.
    """
    courses = _resolve_courses(catalog, args.codes)
    report = detect_conflicts(courses)
    if not report:
        print("No conflicts found.")
        return 0

    print(f"Conflicts found: {len(report.descriptions)}")
    for line in sorted(report.descriptions):
        print(f"- {line}")
    return 0


def _cmd_check(args: argparse.Namespace, catalog: Catalog) -> int:
    """
    Would adding one course clash with an existing selection?
    """
    candidate = catalog.get(args.code)
    if candidate is None:
        print(f"Course not found: {args.code}")
        return 1

    existing = _resolve_courses(catalog, args.against)
    clashing = check_clash(candidate, existing)
    if not clashing:
        print(f"{candidate.code} fits: no clashes.")
        return 0

    print(f"{candidate.code} clashes with: {', '.join(clashing)}")
    return 0


def _cmd_grid(args: argparse.Namespace, catalog: Catalog) -> int:
    """
    Render the weekly timetable of the given courses.
    """
    courses = _resolve_courses(catalog, args.codes)
    if not courses:
        print("No courses selected.")
        return 0

    report = detect_conflicts(courses)
    window = args.window if args.window else None
    console.print(render_grid(build_grid(courses, report, window), twelve_hour=args.twelve_hour))
    console.print(f"Total credits: {total_credits(courses)}")
    if report:
        console.print("[bold red]Conflicts:[/]")
        for line in sorted(report.descriptions):
            console.print(f"  - {escape(line)}")
    return 0


def _cmd_recommend(args: argparse.Namespace, catalog: Catalog) -> int:
    selected = _resolve_courses(catalog, args.codes)
    recs = recommend_courses(selected, catalog.courses, limit=args.limit)
    if not recs:
        print("No recommendations.")
        return 0

    for c in recs:
        print(_course_line(c))
    return 0


def _cmd_advise(args: argparse.Namespace, catalog: Catalog) -> int:
    """
    Send the selection to the advisory service and print the markdown answer.
    """
    courses = _resolve_courses(catalog, args.codes)
    if not courses:
        print("No courses selected.")
        return 1

    try:
        text = AdvisorClient().analyze(courses)
    except AdvisorError as e:
        print(f"An error occurred during analysis: {e}")
        return 1

    console.print(Markdown(text))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="coursegrid", description="Course planner CLI")
    parser.add_argument("--catalog", type=str, default=None, help="Catalog JSON file (default: configured path)")
    parser.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING, ...")
    sub = parser.add_subparsers(dest="command", required=True)

    p_search = sub.add_parser("search", help="Search for courses")
    p_search.add_argument("text", type=str, help="Search text")

    p_list = sub.add_parser("list", help="List courses matching filters")
    p_list.add_argument("--branch", type=str, default=None, help="Branch code (e.g. CSE)")
    p_list.add_argument("--type", type=str, default=None, help="Course type tag (e.g. DC), ALL for any")
    p_list.add_argument(
        "--all-days", type=_window_arg, default=None, metavar="HH:MM-HH:MM", help="Same window for every day"
    )
    p_list.add_argument(
        "--window",
        type=_day_window_arg,
        action="append",
        metavar="DAY=HH:MM-HH:MM",
        help="Window for one day (repeatable)",
    )

    p_conf = sub.add_parser("conflicts", help="Show clashes among courses")
    p_conf.add_argument("codes", nargs="+", help="Course codes (e.g. CS201 PH401)")

    p_check = sub.add_parser("check", help="Check whether a course clashes with a selection")
    p_check.add_argument("code", type=str, help="Course to add")
    p_check.add_argument("--against", nargs="+", required=True, help="Already selected course codes")

    p_grid = sub.add_parser("grid", help="Show weekly timetable")
    p_grid.add_argument("codes", nargs="+", help="Course codes")
    p_grid.add_argument("--window", type=_window_arg, default=None, metavar="HH:MM-HH:MM", help="Fixed grid hours")
    p_grid.add_argument("--12h", dest="twelve_hour", action="store_true", help="Show hours as 09:00 AM")

    p_rec = sub.add_parser("recommend", help="Suggest related courses")
    p_rec.add_argument("codes", nargs="+", help="Selected course codes")
    p_rec.add_argument("--limit", type=int, default=10)

    p_adv = sub.add_parser("advise", help="Course load analysis (external service)")
    p_adv.add_argument("codes", nargs="+", help="Selected course codes")

    sub.add_parser("interactive", help="Interactive menu mode")

    return parser


COMMANDS = {
    "search": _cmd_search,
    "list": _cmd_list,
    "conflicts": _cmd_conflicts,
    "check": _cmd_check,
    "grid": _cmd_grid,
    "recommend": _cmd_recommend,
    "advise": _cmd_advise,
}


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level or get_config().log_level)

    try:
        catalog = load_catalog(args.catalog)
    except CatalogError as e:
        print(f"Error: {e}")
        raise SystemExit(1)

    if args.command == "interactive":
        from coursegrid.interactive import run_interactive

        run_interactive(catalog)
        raise SystemExit(0)

    handler = COMMANDS.get(args.command)
    if handler is None:
        raise SystemExit(2)
    raise SystemExit(handler(args, catalog))
