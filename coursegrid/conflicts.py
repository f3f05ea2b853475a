"""
Conflict detection.

Given selected courses, detect overlapping weekly slots on the same day.
Overlap rule:
    start < other_end AND end > other_start
Touching endpoints (10:00-11:00 and 11:00-12:00) are not a conflict.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from coursegrid.model import ConflictReport, Course, TimeSlot
from coursegrid.parse import get_all_time_slots


def slots_overlap(a: TimeSlot, b: TimeSlot) -> bool:
    return a.day == b.day and a.start_minutes < b.end_minutes and b.start_minutes < a.end_minutes


def describe_clash(code_a: str, code_b: str, slot: TimeSlot) -> str:
    first, second = sorted((code_a, code_b))
    return f"{first} clashes with {second} on {slot.day} ({slot.start}-{slot.end})"


def detect_conflicts(courses: Iterable[Course]) -> ConflictReport:
    """
    Find all clashing slots among `courses`.

    Every slot is compared with the slots already seen on the same day,
    so each unordered pair is found exactly once. The description quotes
    the time range of the slot processed later.
    """
    keys: set[str] = set()
    clashes: set[Tuple[str, str, str]] = set()
    seen_by_day: Dict[str, List[Tuple[Course, TimeSlot]]] = defaultdict(list)

    # O(n^2) per day is fine for a student's selection
    for course in courses:
        for slot in get_all_time_slots(course):
            day_slots = seen_by_day[slot.day]
            for other_course, other_slot in day_slots:
                if not slots_overlap(slot, other_slot):
                    continue
                keys.add(slot.key)
                keys.add(other_slot.key)
                first, second = sorted((course.code, other_course.code))
                clashes.add((first, second, describe_clash(first, second, slot)))
            day_slots.append((course, slot))

    return ConflictReport(keys=frozenset(keys), clashes=frozenset(clashes))


def check_clash(candidate: Course, existing: Iterable[Course]) -> List[str]:
    """
    Codes of courses in `existing` that `candidate` would clash with.

    Used before adding a course to a selection, without re-running the
    full detection. Entries with the candidate's own code are ignored.
    """
    candidate_slots = get_all_time_slots(candidate)
    if not candidate_slots:
        return []

    clashing: List[str] = []
    for course in existing:
        if course.code == candidate.code or course.code in clashing:
            continue
        for slot in get_all_time_slots(course):
            if any(slots_overlap(slot, own) for own in candidate_slots):
                clashing.append(course.code)
                break
    return clashing


def group_by_pair(report: ConflictReport) -> List[Tuple[Tuple[str, str], List[str]]]:
    """
    Group descriptions by course pair, most conflicts first.
    """
    by_pair: Dict[Tuple[str, str], List[str]] = defaultdict(list)
    for first, second, text in report.clashes:
        by_pair[(first, second)].append(text)

    return sorted(
        ((pair, sorted(lines)) for pair, lines in by_pair.items()),
        key=lambda item: (-len(item[1]), item[0]),
    )
