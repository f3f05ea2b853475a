"""
Course catalog loading.

Reads the catalog JSON (an array of course objects) and turns each record
into an immutable Course. This is the only place where raw records are
interpreted; everything downstream works with Course objects.

Loader rules:
- missing file -> small built-in sample catalog (so the tool always starts)
- unreadable / non-list file -> CatalogError
- records without a course code are skipped
- duplicate course codes keep the first record
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from coursegrid.config import get_config
from coursegrid.errors import CatalogError
from coursegrid.model import Course
from coursegrid.parse import parse_course_types


logger = logging.getLogger(__name__)


FALLBACK_RECORDS: List[Dict[str, Any]] = [
    {
        "branch": "CSE",
        "course_name": "DATA STRUCTURES AND ALGORITHMS",
        "course_code": "CS201",
        "slot": "A1",
        "credits": 12,
        "course_type": "DC",
        "instructor": "A. Fallback",
        "instructor_email": "a.f@example.edu",
        "lecture_schedule": "TuTh 10:30-12:00",
        "tutorial_schedule": "nan",
        "practical_schedule": "W 14:00-16:00",
    },
    {
        "branch": "PH",
        "course_name": "QUANTUM MECHANICS I",
        "course_code": "PH401",
        "slot": "B1",
        "credits": 9,
        "course_type": "DC",
        "instructor": "B. Fallback",
        "instructor_email": "b.f@example.edu",
        "lecture_schedule": "MWF 11:00-12:00",
        "tutorial_schedule": "nan",
        "practical_schedule": "nan",
    },
    {
        "branch": "CE",
        "course_name": "STRUCTURAL ANALYSIS",
        "course_code": "CE343",
        "slot": "C1",
        "credits": 10,
        "course_type": "DC",
        "instructor": "C. Fallback",
        "instructor_email": "c.f@example.edu",
        "lecture_schedule": "MW 13:00-14:30",
        "tutorial_schedule": "nan",
        "practical_schedule": "nan",
    },
]


def _safe_str(x: Any) -> str:
    return "" if x is None else str(x).strip()


def _credits(x: Any) -> int:
    try:
        value = int(float(x))
    except (TypeError, ValueError):
        return 0
    return max(value, 0)


def course_from_record(record: Dict[str, Any]) -> Course:
    """
    Build a Course from one catalog record.
    Missing fields become empty strings; course_type is split into tags here.
    """
    return Course(
        code=_safe_str(record.get("course_code")),
        branch=_safe_str(record.get("branch")),
        name=_safe_str(record.get("course_name")),
        course_types=parse_course_types(_safe_str(record.get("course_type"))),
        credits=_credits(record.get("credits")),
        instructor=_safe_str(record.get("instructor")),
        instructor_email=_safe_str(record.get("instructor_email")),
        slot=_safe_str(record.get("slot")),
        lecture_schedule=_safe_str(record.get("lecture_schedule")),
        tutorial_schedule=_safe_str(record.get("tutorial_schedule")),
        practical_schedule=_safe_str(record.get("practical_schedule")),
    )


@dataclass
class Catalog:
    courses: List[Course]
    by_code: Dict[str, Course] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.by_code:
            self.by_code = {c.code: c for c in self.courses}

    def __len__(self) -> int:
        return len(self.courses)

    def get(self, code: str) -> Optional[Course]:
        return self.by_code.get(code.strip().upper()) or self.by_code.get(code.strip())

    def branches(self) -> List[str]:
        return sorted({c.branch for c in self.courses if c.branch})

    def course_types(self) -> List[str]:
        return sorted({t for c in self.courses for t in c.course_types})

    def search(self, text: str, limit: Optional[int] = None) -> List[Course]:
        """
        Substring match (case-insensitive) in code, name or instructor.
        """
        query = text.strip().lower()
        if not query:
            return []
        matches = [c for c in self.courses if query in f"{c.code} {c.name} {c.instructor}".lower()]
        return matches[:limit] if limit is not None else matches


def build_catalog(records: List[Any]) -> Catalog:
    courses: List[Course] = []
    by_code: Dict[str, Course] = {}
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning("Skipping catalog entry #%d: not an object", i)
            continue
        course = course_from_record(record)
        if not course.code:
            logger.warning("Skipping catalog entry #%d: no course_code", i)
            continue
        if course.code in by_code:
            logger.warning("Duplicate course_code %s in catalog, keeping the first one", course.code)
            continue
        by_code[course.code] = course
        courses.append(course)
    return Catalog(courses=courses, by_code=by_code)


def load_catalog(path: str | Path | None = None) -> Catalog:
    """
    Load the catalog from `path` (default: configured catalog_path).
    """
    catalog_path = Path(path) if path is not None else get_config().catalog_path

    if not catalog_path.exists():
        logger.warning("Catalog %s not found, using built-in sample courses", catalog_path)
        return build_catalog(FALLBACK_RECORDS)

    try:
        data = json.loads(catalog_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CatalogError(f"Cannot read catalog {catalog_path}: {e}") from e

    if not isinstance(data, list):
        raise CatalogError(f"Catalog {catalog_path} must contain a JSON array of courses")

    catalog = build_catalog(data)
    logger.info("Loaded %d courses from %s", len(catalog), catalog_path)
    return catalog
