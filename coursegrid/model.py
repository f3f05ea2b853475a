"""
Central data model definitions used across the project.

This module defines the canonical structure of Course and TimeSlot objects so that:
- all modules share the same field names
- the catalog loader, the scheduling engine and the UI agree on one shape
- values are immutable: the engine only ever derives new data from them
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, Tuple

from coursegrid.timeutil import format_minutes


LECTURE = "lecture"
TUTORIAL = "tutorial"
PRACTICAL = "practical"
SLOT_KINDS = (LECTURE, TUTORIAL, PRACTICAL)

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass(frozen=True)
class Course:
    """
    Represents one catalog course as stored in courses.json.
    """

    code: str
    branch: str
    name: str
    course_types: Tuple[str, ...] = ()
    credits: int = 0
    instructor: str = ""
    instructor_email: str = ""
    slot: str = ""
    lecture_schedule: str = ""
    tutorial_schedule: str = ""
    practical_schedule: str = ""

    def schedule_for(self, kind: str) -> str:
        if kind == LECTURE:
            return self.lecture_schedule
        if kind == TUTORIAL:
            return self.tutorial_schedule
        if kind == PRACTICAL:
            return self.practical_schedule
        raise ValueError(f"Unknown slot kind: {kind!r}")


@dataclass(frozen=True)
class TimeSlot:
    """
    One weekly meeting of a course component (lecture, tutorial or practical).

    start/end are canonical 'HH:MM' strings; start_minutes/end_minutes are
    what all comparisons use. end_minutes > start_minutes always holds for
    slots produced by the parser.
    """

    day: str
    start_minutes: int
    end_minutes: int
    kind: str
    course_code: str

    @property
    def start(self) -> str:
        return format_minutes(self.start_minutes)

    @property
    def end(self) -> str:
        return format_minutes(self.end_minutes)

    @property
    def duration(self) -> int:
        """Length in minutes."""
        return self.end_minutes - self.start_minutes

    @property
    def key(self) -> str:
        """Lookup key used for cell highlighting: '<code>-<day>-<start>'."""
        return f"{self.course_code}-{self.day}-{self.start}"


@dataclass(frozen=True)
class TimeWindow:
    start_minutes: int
    end_minutes: int

    def __post_init__(self) -> None:
        if self.end_minutes <= self.start_minutes:
            raise ValueError(
                f"Time window must end after it starts: {self.start_minutes}-{self.end_minutes}"
            )

    def contains(self, slot: TimeSlot) -> bool:
        return self.start_minutes <= slot.start_minutes and slot.end_minutes <= self.end_minutes

    def __str__(self) -> str:
        return f"{format_minutes(self.start_minutes)}-{format_minutes(self.end_minutes)}"


@dataclass(frozen=True)
class DayTimeFilter:
    """
    Availability constraint: at most one window per day.

    Days without a window are unconstrained. A single window for the
    whole week is built with DayTimeFilter.uniform().
    """

    windows: Mapping[str, TimeWindow] = field(default_factory=dict)

    @classmethod
    def uniform(cls, window: TimeWindow, days: Iterable[str] = WEEKDAYS) -> "DayTimeFilter":
        return cls(windows={day: window for day in days})

    def window_for(self, day: str) -> Optional[TimeWindow]:
        return self.windows.get(day)

    def with_window(self, day: str, window: Optional[TimeWindow]) -> "DayTimeFilter":
        """Return a copy with the window for `day` replaced (or removed when None)."""
        windows: Dict[str, TimeWindow] = dict(self.windows)
        if window is None:
            windows.pop(day, None)
        else:
            windows[day] = window
        return DayTimeFilter(windows=windows)

    def common_window(self) -> Optional[TimeWindow]:
        """The window shared by every weekday, or None if the days differ."""
        windows = {self.windows.get(day) for day in WEEKDAYS}
        if len(windows) != 1:
            return None
        return windows.pop()

    def __bool__(self) -> bool:
        return bool(self.windows)


@dataclass(frozen=True)
class ConflictReport:
    """
    Result of conflict detection.

    keys: '<code>-<day>-<start>' for every slot involved in a clash
    clashes: (codeA, codeB, description) per unique clash, codes sorted
    """

    keys: frozenset = frozenset()
    clashes: frozenset = frozenset()

    @property
    def descriptions(self) -> frozenset:
        return frozenset(text for _, _, text in self.clashes)

    def __bool__(self) -> bool:
        return bool(self.clashes)

    def involves(self, slot: TimeSlot) -> bool:
        return slot.key in self.keys
