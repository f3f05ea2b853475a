"""
Unit tests for catalog loading.

Loader contract:
- Missing file -> built-in sample catalog
- Broken JSON / non-list -> CatalogError
- Records without course_code skipped, duplicate codes keep the first
"""

import json
import tempfile
import unittest
from pathlib import Path

from coursegrid.catalog import FALLBACK_RECORDS, course_from_record, load_catalog
from coursegrid.errors import CatalogError


RECORD = {
    "branch": "CSE",
    "course_name": "OPERATING SYSTEMS",
    "course_code": "CS330",
    "slot": "A2",
    "credits": "12",
    "course_type": "DC,Minor / REGULAR",
    "instructor": "S. Iyer",
    "instructor_email": "siyer@example.edu",
    "lecture_schedule": "MWF 09:00-10:00",
    "tutorial_schedule": "nan",
    "practical_schedule": None,
}


class TestCourseFromRecord(unittest.TestCase):
    def test_fields_are_mapped(self) -> None:
        c = course_from_record(RECORD)
        self.assertEqual(c.code, "CS330")
        self.assertEqual(c.name, "OPERATING SYSTEMS")
        self.assertEqual(c.course_types, ("DC", "Minor", "REGULAR"))
        self.assertEqual(c.credits, 12)
        self.assertEqual(c.practical_schedule, "")

    def test_bad_credits_become_zero(self) -> None:
        self.assertEqual(course_from_record({"course_code": "X", "credits": "n/a"}).credits, 0)
        self.assertEqual(course_from_record({"course_code": "X", "credits": -3}).credits, 0)


class TestLoadCatalog(unittest.TestCase):
    def write(self, d: str, data) -> Path:
        p = Path(d) / "courses.json"
        p.write_text(json.dumps(data), encoding="utf-8")
        return p

    def test_missing_file_uses_fallback(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            catalog = load_catalog(Path(d) / "missing.json")
        self.assertEqual(len(catalog), len(FALLBACK_RECORDS))
        self.assertIsNotNone(catalog.get("CS201"))

    def test_invalid_json_raises(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "courses.json"
            p.write_text("{not json", encoding="utf-8")
            with self.assertRaises(CatalogError):
                load_catalog(p)

    def test_non_list_raises(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            with self.assertRaises(CatalogError):
                load_catalog(self.write(d, {"courses": []}))

    def test_skips_bad_and_duplicate_records(self) -> None:
        dup = dict(RECORD, course_name="SECOND COPY")
        with tempfile.TemporaryDirectory() as d:
            catalog = load_catalog(self.write(d, [RECORD, {"course_name": "no code"}, "junk", dup]))
        self.assertEqual([c.code for c in catalog.courses], ["CS330"])
        self.assertEqual(catalog.get("cs330").name, "OPERATING SYSTEMS")

    def test_branches_types_and_search(self) -> None:
        catalog = load_catalog(Path(__file__).resolve().parent.parent / "coursegrid" / "data" / "courses.json")
        self.assertIn("CSE", catalog.branches())
        self.assertIn("REGULAR", catalog.course_types())
        self.assertEqual([c.code for c in catalog.search("mechanics")], ["PH401", "PH421"])
        self.assertEqual(catalog.search("   "), [])
        self.assertEqual(len(catalog.search("cs", limit=2)), 2)


if __name__ == "__main__":
    unittest.main()
