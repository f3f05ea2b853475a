"""
Clock-time helpers.

All schedule computations work on integer minutes since midnight.
Strings are only used at the edges (parsing catalog data, printing).
"""

from __future__ import annotations


MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR


def time_to_minutes(hhmm: str) -> int:
    """
    Convert 'HH:MM' to minutes since midnight.
    Raises ValueError for invalid formats.
    """
    parts = hhmm.strip().split(":")
    if len(parts) != 2:
        raise ValueError(f"Invalid time format: {hhmm!r}")
    h = int(parts[0])
    m = int(parts[1])
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise ValueError(f"Invalid time value: {hhmm!r}")
    return h * MINUTES_PER_HOUR + m


def format_minutes(minutes: int, twelve_hour: bool = False) -> str:
    """
    Convert minutes since midnight back to 'HH:MM'.

    The 12-hour form ('09:30 AM') is for display only; everything stored
    or compared uses the 24-hour form. 1440 is allowed so a grid can end at 24:00.
    """
    if not (0 <= minutes <= MINUTES_PER_DAY):
        raise ValueError(f"Minutes out of range: {minutes!r}")

    h, m = divmod(minutes, MINUTES_PER_HOUR)
    if not twelve_hour:
        return f"{h:02d}:{m:02d}"

    suffix = "AM" if h < 12 or h == 24 else "PM"
    h12 = h % 12 or 12
    return f"{h12:02d}:{m:02d} {suffix}"


def floor_hour(minutes: int) -> int:
    return (minutes // MINUTES_PER_HOUR) * MINUTES_PER_HOUR


def ceil_hour(minutes: int) -> int:
    return -(-minutes // MINUTES_PER_HOUR) * MINUTES_PER_HOUR


def parse_time_range(text: str) -> tuple[int, int]:
    """
    Parse 'HH:MM-HH:MM' into (start, end) minutes.
    Raises ValueError if either side is invalid or the range is empty.
    """
    if "-" not in text:
        raise ValueError(f"Invalid time range: {text!r}")
    start_s, end_s = text.split("-", 1)
    start = time_to_minutes(start_s)
    end = time_to_minutes(end_s)
    if end <= start:
        raise ValueError(f"Time range must end after it starts: {text!r}")
    return start, end
