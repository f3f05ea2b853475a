"""
Course filters used by the selection views.

Availability policy: a course passes a DayTimeFilter only if EVERY one of
its slots is acceptable. A slot is acceptable when its day has no window,
or when it lies entirely inside that day's window. Courses without any
slots always pass.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from coursegrid.model import Course, DayTimeFilter
from coursegrid.parse import get_all_time_slots


ALL_TYPES = "ALL"


def is_within_filter(course: Course, day_filter: Optional[DayTimeFilter]) -> bool:
    if not day_filter:
        return True

    for slot in get_all_time_slots(course):
        window = day_filter.window_for(slot.day)
        if window is not None and not window.contains(slot):
            return False
    return True


def filter_courses(
    courses: Iterable[Course],
    branch: Optional[str] = None,
    course_type: Optional[str] = None,
    day_filter: Optional[DayTimeFilter] = None,
) -> List[Course]:
    """
    Apply branch, course type and availability filters in that order.
    Empty / None / "ALL" means "do not filter on this".
    """
    out: List[Course] = []
    for course in courses:
        if branch and course.branch != branch:
            continue
        if course_type and course_type != ALL_TYPES and course_type not in course.course_types:
            continue
        if not is_within_filter(course, day_filter):
            continue
        out.append(course)
    return out


def total_credits(courses: Iterable[Course]) -> int:
    return sum(c.credits for c in courses)


def recommend_courses(
    selected: Sequence[Course],
    catalog: Iterable[Course],
    limit: int = 10,
) -> List[Course]:
    """
    Suggest courses whose names share a keyword with the selection.

    Keywords are words longer than 4 letters taken from the selected
    course names; a course matches if its name contains any of them.
    """
    if not selected:
        return []

    keywords: set[str] = set()
    for course in selected:
        for word in course.name.lower().split():
            if len(word) > 4:
                keywords.add(word)

    selected_codes = {c.code for c in selected}
    out: List[Course] = []
    for course in catalog:
        if course.code in selected_codes:
            continue
        name = course.name.lower()
        if any(k in name for k in keywords):
            out.append(course)
            if len(out) >= limit:
                break
    return out
