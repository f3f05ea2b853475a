"""
Weekly timetable grid.

- get_time_range(): earliest/latest bounds (whole hours) of a set of courses
- build_grid(): per-day lists of slots inside those bounds
- render_grid(): rich Table with one row per hour
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from rich import box
from rich.markup import escape
from rich.table import Table

from coursegrid.conflicts import detect_conflicts
from coursegrid.model import WEEKDAYS, ConflictReport, Course, TimeSlot, TimeWindow
from coursegrid.parse import get_all_time_slots
from coursegrid.timeutil import MINUTES_PER_HOUR, ceil_hour, floor_hour, format_minutes


DEFAULT_EARLIEST = 8 * MINUTES_PER_HOUR
DEFAULT_LATEST = 18 * MINUTES_PER_HOUR

KIND_LABELS = {"lecture": "L", "tutorial": "T", "practical": "P"}


@dataclass(frozen=True)
class TimeRange:
    earliest: int
    latest: int

    @property
    def hours(self) -> List[int]:
        """Start minute of every hour row."""
        return list(range(self.earliest, self.latest, MINUTES_PER_HOUR))


def get_time_range(courses: Iterable[Course], window: Optional[TimeWindow] = None) -> TimeRange:
    """
    Bounds of the grid in minutes since midnight.

    With an explicit window, its bounds are used as-is. Otherwise the
    slots of `courses` are scanned and snapped outward to whole hours;
    no slots at all gives 08:00-18:00.
    """
    if window is not None:
        earliest, latest = window.start_minutes, window.end_minutes
    else:
        starts: List[int] = []
        ends: List[int] = []
        for course in courses:
            for slot in get_all_time_slots(course):
                starts.append(slot.start_minutes)
                ends.append(slot.end_minutes)

        if starts:
            earliest = floor_hour(min(starts))
            latest = ceil_hour(max(ends))
        else:
            earliest, latest = DEFAULT_EARLIEST, DEFAULT_LATEST

    if latest <= earliest:
        latest = earliest + MINUTES_PER_HOUR

    return TimeRange(earliest=earliest, latest=latest)


@dataclass(frozen=True)
class GridEntry:
    course: Course
    slot: TimeSlot
    conflicting: bool


@dataclass(frozen=True)
class WeekGrid:
    time_range: TimeRange
    days: List[str]
    entries: Dict[str, List[GridEntry]]

    def entries_starting_in(self, day: str, hour_start: int) -> List[GridEntry]:
        hour_end = hour_start + MINUTES_PER_HOUR
        out: List[GridEntry] = []
        for entry in self.entries.get(day, []):
            # slots starting before the grid begins are shown in the first row
            start = max(entry.slot.start_minutes, self.time_range.earliest)
            if hour_start <= start < hour_end:
                out.append(entry)
        return out


def build_grid(
    courses: Sequence[Course],
    report: Optional[ConflictReport] = None,
    window: Optional[TimeWindow] = None,
) -> WeekGrid:
    """
    Lay out the slots of `courses` by day.

    Slots outside the time range are left out. Saturday and any
    unrecognized day labels only get a column when something is on them.
    """
    if report is None:
        report = detect_conflicts(courses)
    time_range = get_time_range(courses, window)

    entries: Dict[str, List[GridEntry]] = defaultdict(list)
    for course in courses:
        for slot in get_all_time_slots(course):
            if slot.start_minutes < time_range.latest and slot.end_minutes > time_range.earliest:
                entries[slot.day].append(GridEntry(course, slot, report.involves(slot)))

    for day_entries in entries.values():
        day_entries.sort(key=lambda e: (e.slot.start_minutes, e.course.code))

    days = [d for d in WEEKDAYS if d != "Sat" or entries.get(d)]
    days.extend(sorted(d for d in entries if d not in WEEKDAYS))

    return WeekGrid(time_range=time_range, days=days, entries=dict(entries))


def _cell_text(entry: GridEntry) -> str:
    kind = KIND_LABELS.get(entry.slot.kind, entry.slot.kind)
    text = escape(f"{entry.course.code} ({kind}) {entry.slot.start}-{entry.slot.end}")
    if entry.conflicting:
        return f"[bold red]{text}[/]"
    return text


def render_grid(grid: WeekGrid, title: str = "Weekly timetable", twelve_hour: bool = False) -> Table:
    table = Table(title=title, box=box.SIMPLE, show_lines=True)
    table.add_column("Time", justify="right", style="dim")
    for day in grid.days:
        table.add_column(day)

    for hour in grid.time_range.hours:
        row = [format_minutes(hour, twelve_hour=twelve_hour)]
        for day in grid.days:
            cells = grid.entries_starting_in(day, hour)
            row.append("\n".join(_cell_text(e) for e in cells))
        table.add_row(*row)

    return table
