"""
Unit tests for catalog filters.

Availability policy under test:
- every slot must be acceptable
- acceptable = no window for that day, or slot entirely inside the window
"""

import unittest

from coursegrid.filters import filter_courses, is_within_filter, recommend_courses, total_credits
from coursegrid.model import Course, DayTimeFilter, TimeWindow


def course(code: str, lecture: str = "", branch: str = "CSE", types: tuple = ("DC",), name: str = "", credits: int = 9) -> Course:
    return Course(
        code=code,
        branch=branch,
        name=name or code,
        course_types=types,
        credits=credits,
        lecture_schedule=lecture,
    )


MORNING = TimeWindow(8 * 60, 12 * 60)


class TestIsWithinFilter(unittest.TestCase):
    def test_unscheduled_course_always_passes(self) -> None:
        c = Course(code="P", branch="CE", name="Project", lecture_schedule="nan", tutorial_schedule="", practical_schedule="nan")
        self.assertTrue(is_within_filter(c, DayTimeFilter.uniform(MORNING)))
        self.assertTrue(is_within_filter(c, DayTimeFilter({"Mon": TimeWindow(0, 1)})))

    def test_empty_filter_passes_everything(self) -> None:
        self.assertTrue(is_within_filter(course("A", "Mon 20:00-22:00"), DayTimeFilter()))
        self.assertTrue(is_within_filter(course("A", "Mon 20:00-22:00"), None))

    def test_containment_required(self) -> None:
        f = DayTimeFilter.uniform(MORNING)
        self.assertTrue(is_within_filter(course("A", "MWF 08:00-09:00"), f))
        self.assertTrue(is_within_filter(course("A", "Mon 11:00-12:00"), f))
        # overlapping the edge is not enough
        self.assertFalse(is_within_filter(course("A", "Mon 11:30-12:30"), f))
        self.assertFalse(is_within_filter(course("A", "Mon 07:30-08:30"), f))

    def test_all_slots_must_fit(self) -> None:
        f = DayTimeFilter.uniform(MORNING)
        self.assertFalse(is_within_filter(course("A", "M 09:00-10:00, W 14:00-15:00"), f))

    def test_day_without_window_is_unconstrained(self) -> None:
        f = DayTimeFilter({"Mon": MORNING})
        self.assertTrue(is_within_filter(course("A", "Tue 18:00-20:00"), f))
        self.assertTrue(is_within_filter(course("A", "M 09:00-10:00, Tu 18:00-20:00"), f))
        self.assertFalse(is_within_filter(course("A", "M 13:00-14:00, Tu 09:00-10:00"), f))

    def test_uniform_covers_saturday(self) -> None:
        f = DayTimeFilter.uniform(MORNING)
        self.assertFalse(is_within_filter(course("A", "S 13:00-15:00"), f))


class TestDayTimeFilter(unittest.TestCase):
    def test_with_window_returns_copy(self) -> None:
        f = DayTimeFilter()
        g = f.with_window("Mon", MORNING)
        self.assertIsNone(f.window_for("Mon"))
        self.assertEqual(g.window_for("Mon"), MORNING)
        self.assertFalse(g.with_window("Mon", None))

    def test_common_window(self) -> None:
        self.assertEqual(DayTimeFilter.uniform(MORNING).common_window(), MORNING)
        self.assertIsNone(DayTimeFilter().common_window())
        self.assertIsNone(DayTimeFilter.uniform(MORNING).with_window("Wed", None).common_window())
        self.assertIsNone(DayTimeFilter.uniform(MORNING, days=("Mon", "Tue")).common_window())

    def test_invalid_window_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TimeWindow(600, 600)


class TestFilterCourses(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = [
            course("CS201", "TuTh 10:30-12:00", branch="CSE", types=("DC",)),
            course("CS685", "TuTh 14:00-15:30", branch="CSE", types=("OE", "REGULAR")),
            course("PH421", "TuTh 09:00-10:30", branch="PH", types=("DE", "Minor")),
            course("CE499", "nan", branch="CE", types=("PROJECT",)),
        ]

    def codes(self, courses) -> list:
        return [c.code for c in courses]

    def test_no_filters(self) -> None:
        self.assertEqual(self.codes(filter_courses(self.catalog)), ["CS201", "CS685", "PH421", "CE499"])

    def test_branch(self) -> None:
        self.assertEqual(self.codes(filter_courses(self.catalog, branch="CSE")), ["CS201", "CS685"])
        self.assertEqual(self.codes(filter_courses(self.catalog, branch="")), ["CS201", "CS685", "PH421", "CE499"])

    def test_type_tag(self) -> None:
        self.assertEqual(self.codes(filter_courses(self.catalog, course_type="REGULAR")), ["CS685"])
        self.assertEqual(self.codes(filter_courses(self.catalog, course_type="Minor")), ["PH421"])
        self.assertEqual(len(filter_courses(self.catalog, course_type="ALL")), 4)

    def test_combined_with_time(self) -> None:
        f = DayTimeFilter.uniform(MORNING)
        self.assertEqual(self.codes(filter_courses(self.catalog, day_filter=f)), ["CS201", "PH421", "CE499"])
        self.assertEqual(self.codes(filter_courses(self.catalog, branch="CSE", day_filter=f)), ["CS201"])


class TestSelectionHelpers(unittest.TestCase):
    def test_total_credits(self) -> None:
        self.assertEqual(total_credits([]), 0)
        self.assertEqual(total_credits([course("A", credits=12), course("B", credits=9)]), 21)

    def test_recommend_by_keyword(self) -> None:
        selected = [course("PH401", name="QUANTUM MECHANICS I")]
        catalog = [
            selected[0],
            course("PH421", name="STATISTICAL MECHANICS"),
            course("CS201", name="DATA STRUCTURES"),
            course("PH501", name="QUANTUM FIELD THEORY"),
        ]
        self.assertEqual([c.code for c in recommend_courses(selected, catalog)], ["PH421", "PH501"])
        self.assertEqual(len(recommend_courses(selected, catalog, limit=1)), 1)

    def test_recommend_nothing_without_selection(self) -> None:
        self.assertEqual(recommend_courses([], [course("A")]), [])


if __name__ == "__main__":
    unittest.main()
