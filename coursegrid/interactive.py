from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from coursegrid.advisor import AdvisorClient
from coursegrid.catalog import Catalog
from coursegrid.conflicts import check_clash, detect_conflicts, group_by_pair
from coursegrid.errors import AdvisorError
from coursegrid.filters import ALL_TYPES, filter_courses, recommend_courses, total_credits
from coursegrid.grid import build_grid, render_grid
from coursegrid.model import WEEKDAYS, Course, DayTimeFilter, TimeWindow
from coursegrid.timeutil import parse_time_range


console = Console()


@dataclass
class PlannerState:
    """
    Everything the interactive session remembers. Lives only in memory.
    """

    selected: List[str] = field(default_factory=list)
    branch: Optional[str] = None
    course_type: Optional[str] = None
    day_filter: DayTimeFilter = field(default_factory=DayTimeFilter)

    def selected_courses(self, catalog: Catalog) -> List[Course]:
        out: List[Course] = []
        for code in self.selected:
            c = catalog.get(code)
            if c is not None:
                out.append(c)
        return out

    def available_courses(self, catalog: Catalog) -> List[Course]:
        return filter_courses(catalog.courses, self.branch, self.course_type, self.day_filter)

    def clear_filters(self) -> None:
        self.branch = None
        self.course_type = None
        self.day_filter = DayTimeFilter()

    def reset(self) -> None:
        """Drop the selection and every filter."""
        self.selected.clear()
        self.clear_filters()


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    return console.input(escape(msg))


def _course_label(course: Course) -> str:
    bits = [f"[bold cyan]{escape(course.code)}[/]", escape(course.name) if course.name else "(no name)"]
    if course.instructor:
        bits.append(f"[magenta]{escape(course.instructor)}[/]")
    if course.course_types:
        bits.append(f"[green]{escape(','.join(course.course_types))}[/]")
    bits.append(f"[yellow]{course.credits}[/] cr")
    return " | ".join(bits)


def _filter_label(state: PlannerState) -> str:
    bits = []
    if state.branch:
        bits.append(f"branch={state.branch}")
    if state.course_type and state.course_type != ALL_TYPES:
        bits.append(f"type={state.course_type}")
    for day in WEEKDAYS:
        window = state.day_filter.window_for(day)
        if window is not None:
            bits.append(f"{day} {window}")
    return ", ".join(bits) if bits else "none"


def run_interactive(catalog: Catalog, state: Optional[PlannerState] = None) -> PlannerState:
    """
    Interactive menu loop. Returns the final state (handy for tests).
    """
    state = state or PlannerState()

    while True:
        _print_header(catalog, state)

        choice = _prompt(
            "\n[1] Search + add course\n"
            "[2] Browse available courses (filtered)\n"
            "[3] View selected courses\n"
            "[4] Remove a course\n"
            "[5] Set filters (branch / type / time)\n"
            "[6] Clear filters\n"
            "[7] Show conflicts\n"
            "[8] Timetable\n"
            "[9] Recommendations\n"
            "[10] Course load analysis\n"
            "[11] Reset (clear selection and filters)\n"
            "[0] Exit\n"
            "Select: "
        ).strip()

        if choice == "0":
            _println("Bye.")
            return state

        if choice == "1":
            _flow_search_add(catalog, state)
        elif choice == "2":
            _flow_browse_add(catalog, state)
        elif choice == "3":
            _flow_view_selected(catalog, state)
        elif choice == "4":
            _flow_remove(catalog, state)
        elif choice == "5":
            _flow_set_filters(catalog, state)
        elif choice == "6":
            state.clear_filters()
            _println("Filters cleared.")
        elif choice == "7":
            _flow_conflicts(catalog, state)
        elif choice == "8":
            _flow_timetable(catalog, state)
        elif choice == "9":
            _flow_recommendations(catalog, state)
        elif choice == "10":
            _flow_advise(catalog, state)
        elif choice == "11":
            state.reset()
            _println("Selection and filters cleared.")
        else:
            _println("Invalid choice.")


def _print_header(catalog: Catalog, state: PlannerState) -> None:
    selected = state.selected_courses(catalog)
    _println("\n=== Course planner (interactive) ===")
    _println(f"Catalog: {len(catalog)} courses | Filters: {escape(_filter_label(state))}")
    _println(f"Selected courses: {len(selected)} | Total credits: {total_credits(selected)}")


def _pick(courses: List[Course], title: str) -> Optional[Course]:
    """
    Show a numbered table and return the chosen course (None = cancelled).
    """
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Course")
    for i, c in enumerate(courses, start=1):
        table.add_row(str(i), _course_label(c))
    console.print(table)

    while True:
        pick = _prompt("Enter number [blank = back]: ").strip()
        if not pick:
            return None
        if not pick.isdigit():
            _println("Not a number.")
            continue
        i = int(pick)
        if not (1 <= i <= len(courses)):
            _println("Out of range.")
            continue
        return courses[i - 1]


def _add_course(catalog: Catalog, state: PlannerState, course: Course) -> bool:
    """
    Add `course` after warning about clashes. Returns True if it was added.
    """
    if course.code in state.selected:
        _println(f"Already selected: {escape(course.code)}")
        return False

    clashing = check_clash(course, state.selected_courses(catalog))
    if clashing:
        _println(f"[bold red]Warning:[/] {escape(course.code)} clashes with {escape(', '.join(clashing))}")
        if _prompt("Add anyway? [y/N]: ").strip().lower() != "y":
            _println("Not added.")
            return False

    state.selected.append(course.code)
    _println(f"Added: {escape(course.code)}")
    return True


def _flow_search_add(catalog: Catalog, state: PlannerState) -> None:
    while True:
        query = _prompt("Search text or code (e.g., 'networks' or 'CS201') [blank = back]: ").strip()
        if not query:
            return

        matches = catalog.search(query, limit=20)
        if not matches:
            _println("No results.")
            continue

        course = _pick(matches, "Search results (max 20)")
        if course is None:
            continue
        _add_course(catalog, state, course)

        more = _prompt("Add another course? [Y/n]: ").strip().lower()
        if more == "n":
            return


def _flow_browse_add(catalog: Catalog, state: PlannerState) -> None:
    available = [c for c in state.available_courses(catalog) if c.code not in state.selected]
    if not available:
        _println("No courses available in this branch/type/time filter.")
        return

    course = _pick(available, f"Available courses ({len(available)})")
    if course is not None:
        _add_course(catalog, state, course)


def _flow_view_selected(catalog: Catalog, state: PlannerState) -> None:
    courses = state.selected_courses(catalog)
    if not courses:
        _println("No courses selected.")
        return

    report = detect_conflicts(courses)
    table = Table(title="Selected courses", box=box.SIMPLE)
    table.add_column("Course")
    table.add_column("Lecture")
    table.add_column("Tutorial")
    table.add_column("Practical")
    for c in courses:
        table.add_row(
            _course_label(c),
            escape(c.lecture_schedule),
            escape(c.tutorial_schedule),
            escape(c.practical_schedule),
        )
    console.print(table)
    _println(f"Total credits: {total_credits(courses)}")
    if report:
        _println(f"[bold red]{len(report.descriptions)} conflict(s)[/] - see [7]")


def _flow_remove(catalog: Catalog, state: PlannerState) -> None:
    while True:
        courses = state.selected_courses(catalog)
        if not courses:
            _println("No courses selected.")
            return

        course = _pick(courses, "Remove course")
        if course is None:
            return
        state.selected.remove(course.code)
        _println(f"Removed: {escape(course.code)}")

        more = _prompt("Remove another course? [Y/n]: ").strip().lower()
        if more == "n":
            return


def _read_window(label: str) -> Optional[TimeWindow]:
    """
    Ask for 'HH:MM-HH:MM'. Blank means no window; invalid input asks again.
    """
    while True:
        text = _prompt(f"{label} window HH:MM-HH:MM [blank = none]: ").strip()
        if not text:
            return None
        try:
            start, end = parse_time_range(text)
        except ValueError as e:
            _println(f"Invalid time range: {escape(str(e))}")
            continue
        return TimeWindow(start, end)


def _flow_set_filters(catalog: Catalog, state: PlannerState) -> None:
    branches = catalog.branches()
    _println(f"Branches: {escape(', '.join(branches)) if branches else '(none)'}")
    branch = _prompt("Branch [blank = all]: ").strip()
    if branch and branch not in branches:
        _println(f"Unknown branch: {escape(branch)}")
    else:
        state.branch = branch or None

    types = catalog.course_types()
    _println(f"Course types: {escape(', '.join(types)) if types else '(none)'}")
    ctype = _prompt("Course type [blank = all]: ").strip()
    if ctype and ctype != ALL_TYPES and ctype not in types:
        _println(f"Unknown course type: {escape(ctype)}")
    else:
        state.course_type = ctype or None

    mode = _prompt("Time filter: [1] same window every day  [2] per day  [blank = keep]: ").strip()
    if mode == "1":
        window = _read_window("All days")
        state.day_filter = DayTimeFilter.uniform(window) if window else DayTimeFilter()
    elif mode == "2":
        day_filter = DayTimeFilter()
        for day in WEEKDAYS:
            day_filter = day_filter.with_window(day, _read_window(day))
        state.day_filter = day_filter

    _println(f"Filters: {escape(_filter_label(state))}")


def _flow_conflicts(catalog: Catalog, state: PlannerState) -> None:
    courses = state.selected_courses(catalog)
    if not courses:
        _println("No courses selected.")
        return

    report = detect_conflicts(courses)
    if not report:
        _println("No conflicts found.")
        return

    _println(f"Conflicts found: {len(report.descriptions)}")
    table = Table(box=box.SIMPLE, title="Conflict pairs")
    table.add_column("Pair")
    table.add_column("Clashes")
    for (a, b), lines in group_by_pair(report):
        pair = f"[bold cyan]{escape(a)}[/]  ↔  [bold cyan]{escape(b)}[/]"
        table.add_row(pair, escape("\n".join(lines)))
    console.print(table)


def _flow_timetable(catalog: Catalog, state: PlannerState) -> None:
    courses = state.selected_courses(catalog)
    if not courses:
        _println("No courses selected.")
        return
    # a per-day filter has no single set of grid hours
    window = state.day_filter.common_window()
    console.print(render_grid(build_grid(courses, window=window)))


def _flow_recommendations(catalog: Catalog, state: PlannerState) -> None:
    recs = recommend_courses(state.selected_courses(catalog), catalog.courses)
    if not recs:
        _println("No recommendations (select some courses first).")
        return

    course = _pick(recs, "Recommended courses")
    if course is not None:
        _add_course(catalog, state, course)


def _flow_advise(catalog: Catalog, state: PlannerState) -> None:
    courses = state.selected_courses(catalog)
    if not courses:
        _println("No courses selected.")
        return

    _println("Analyzing course load...")
    try:
        text = AdvisorClient().analyze(courses)
    except AdvisorError as e:
        _println(f"[bold red]An error occurred during analysis:[/] {escape(str(e))}")
        return
    console.print(Markdown(text))
