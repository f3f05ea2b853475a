"""
Parsing (raw catalog strings -> structured data).

- Parses weekly schedule strings like "MWF 08:00-09:00, TuTh 14:00-15:30"
  into TimeSlot objects
- Collects all slots (lecture / tutorial / practical) of a course
- Splits composite course-type strings like "DC,Minor / REGULAR" into tags

Important rules:
- Malformed segments are dropped, never raised
- An empty schedule means "no meetings", not an error
"""

from __future__ import annotations

import logging
import re
from typing import List, Tuple

from coursegrid.model import SLOT_KINDS, Course, TimeSlot
from coursegrid.timeutil import time_to_minutes


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Day codes
# ---------------------------------------------------------------------------

DAY_CODES = {
    "M": "Mon",
    "Mo": "Mon",
    "Mon": "Mon",
    "T": "Tue",
    "Tu": "Tue",
    "Tue": "Tue",
    "W": "Wed",
    "We": "Wed",
    "Wed": "Wed",
    "Th": "Thu",
    "Thu": "Thu",
    "F": "Fri",
    "Fr": "Fri",
    "Fri": "Fri",
    "S": "Sat",
    "Sa": "Sat",
    "Sat": "Sat",
}

EMPTY_SCHEDULE_MARKERS = {"", "nan", "nil"}

# One capital letter plus any lowercase letters: "TuTh" -> ["Tu", "Th"]
_DAY_CHUNK = re.compile(r"[A-Z][a-z]*")


def parse_days(token: str) -> List[str]:
    """
    Split a concatenated day token ("MWF", "TuTh") into day labels.

    Unknown chunks are kept verbatim so unexpected abbreviations still
    show up somewhere instead of crashing the parser.
    """
    days: List[str] = []
    for chunk in _DAY_CHUNK.findall(token):
        day = DAY_CODES.get(chunk)
        if day is None:
            logger.debug("Unknown day code %r in %r", chunk, token)
            day = chunk
        days.append(day)
    return days


# ---------------------------------------------------------------------------
# Schedule parsing (CORE LOGIC)
# ---------------------------------------------------------------------------


def _parse_segment(segment: str) -> Tuple[List[str], int, int] | None:
    """
    Parse one "<days> <start>-<end>" segment.
    Returns None for anything that cannot be turned into a positive interval.
    """
    parts = segment.split()
    if len(parts) < 2:
        return None

    days = parse_days(parts[0])
    if not days:
        return None

    # tolerate "09:00 - 10:00"
    time_range = "".join(parts[1:])
    if "-" not in time_range:
        return None
    start_s, end_s = time_range.split("-", 1)

    try:
        start = time_to_minutes(start_s)
        end = time_to_minutes(end_s)
    except ValueError:
        return None

    if end <= start:
        return None

    return days, start, end


def parse_schedule(raw: str | None, kind: str, course_code: str) -> List[TimeSlot]:
    """
    Parse one raw schedule string into TimeSlots tagged with `kind`.
    """
    text = (raw or "").strip()
    if text.lower() in EMPTY_SCHEDULE_MARKERS:
        return []

    slots: List[TimeSlot] = []
    for segment in text.split(","):
        segment = segment.strip()
        if not segment:
            continue

        parsed = _parse_segment(segment)
        if parsed is None:
            logger.debug("Dropping malformed schedule segment %r of %s", segment, course_code)
            continue

        days, start, end = parsed
        for day in days:
            slots.append(
                TimeSlot(
                    day=day,
                    start_minutes=start,
                    end_minutes=end,
                    kind=kind,
                    course_code=course_code,
                )
            )

    return slots


def get_all_time_slots(course: Course) -> List[TimeSlot]:
    """
    All slots of a course: lecture, then tutorial, then practical.

    An empty result means the course has no fixed meetings
    (project, thesis, ...) and is treated as always available.
    """
    slots: List[TimeSlot] = []
    for kind in SLOT_KINDS:
        slots.extend(parse_schedule(course.schedule_for(kind), kind, course.code))
    return slots


# ---------------------------------------------------------------------------
# Course types
# ---------------------------------------------------------------------------


def parse_course_types(raw: str | None) -> Tuple[str, ...]:
    """
    "DC,Minor / REGULAR" -> ("DC", "Minor", "REGULAR")
    """
    tags: List[str] = []
    for part in (raw or "").split(","):
        for tag in part.split("/"):
            tag = tag.strip()
            if not tag or tag.lower() == "nan":
                continue
            if tag not in tags:
                tags.append(tag)
    return tuple(tags)
