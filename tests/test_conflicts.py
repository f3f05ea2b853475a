"""
Unit tests for conflict detection.

Definition used here:
- A conflict exists if two slots overlap in time on the same weekday.
- Touching endpoints (end == start) is NOT a conflict.
"""

import unittest

from coursegrid.conflicts import check_clash, detect_conflicts, group_by_pair, slots_overlap
from coursegrid.model import Course, TimeSlot


def course(code: str, lecture: str = "", tutorial: str = "", practical: str = "") -> Course:
    return Course(
        code=code,
        branch="CSE",
        name=code,
        lecture_schedule=lecture,
        tutorial_schedule=tutorial,
        practical_schedule=practical,
    )


def slot(day: str, start: int, end: int, code: str = "X") -> TimeSlot:
    return TimeSlot(day=day, start_minutes=start, end_minutes=end, kind="lecture", course_code=code)


class TestSlotsOverlap(unittest.TestCase):
    def test_overlap_is_symmetric(self) -> None:
        cases = [
            (slot("Mon", 600, 660), slot("Mon", 630, 720)),
            (slot("Mon", 600, 660), slot("Mon", 660, 720)),
            (slot("Mon", 600, 720), slot("Mon", 630, 660)),
            (slot("Mon", 600, 660), slot("Tue", 600, 660)),
            (slot("Wed", 480, 540), slot("Wed", 900, 960)),
        ]
        for a, b in cases:
            with self.subTest(a=a, b=b):
                self.assertEqual(slots_overlap(a, b), slots_overlap(b, a))

    def test_touching_endpoints_do_not_overlap(self) -> None:
        self.assertFalse(slots_overlap(slot("Mon", 600, 660), slot("Mon", 660, 720)))

    def test_containment_overlaps(self) -> None:
        self.assertTrue(slots_overlap(slot("Mon", 600, 720), slot("Mon", 630, 660)))

    def test_different_day_never_overlaps(self) -> None:
        self.assertFalse(slots_overlap(slot("Mon", 600, 660), slot("Tue", 600, 660)))


class TestDetectConflicts(unittest.TestCase):
    def test_no_conflict_when_touching(self) -> None:
        report = detect_conflicts([course("A", "Mon 09:00-10:00"), course("B", "Mon 10:00-11:00")])
        self.assertEqual(report.keys, frozenset())
        self.assertEqual(report.descriptions, frozenset())
        self.assertFalse(report)

    def test_conflict_keys_and_description(self) -> None:
        report = detect_conflicts([course("A", "Mon 09:00-10:30"), course("B", "Mon 10:00-11:00")])
        self.assertIn("A-Mon-09:00", report.keys)
        self.assertIn("B-Mon-10:00", report.keys)
        self.assertEqual(report.descriptions, {"A clashes with B on Mon (10:00-11:00)"})

    def test_one_description_regardless_of_input_order(self) -> None:
        a = course("A", "Mon 09:00-10:30")
        b = course("B", "Mon 10:00-11:00")
        for courses in ([a, b], [b, a]):
            with self.subTest(order=[c.code for c in courses]):
                report = detect_conflicts(courses)
                self.assertEqual(len(report.descriptions), 1)
                self.assertTrue(next(iter(report.descriptions)).startswith("A clashes with B on Mon"))

    def test_later_slot_time_is_quoted(self) -> None:
        report = detect_conflicts([course("B", "Mon 10:00-11:00"), course("A", "Mon 09:00-10:30")])
        self.assertEqual(report.descriptions, {"A clashes with B on Mon (09:00-10:30)"})

    def test_multiple_days_and_components(self) -> None:
        report = detect_conflicts(
            [
                course("CS201", "TuTh 10:30-12:00", practical="W 14:00-16:00"),
                course("CS330", "MWF 09:00-10:00", tutorial="W 15:00-16:00"),
                course("PH421", "TuTh 09:00-10:30"),
            ]
        )
        self.assertEqual(report.descriptions, {"CS201 clashes with CS330 on Wed (15:00-16:00)"})
        self.assertEqual(report.keys, {"CS201-Wed-14:00", "CS330-Wed-15:00"})

    def test_empty_inputs(self) -> None:
        self.assertEqual(detect_conflicts([]).keys, frozenset())
        report = detect_conflicts([course("P", "nan", "nan", "nan"), course("A", "Mon 09:00-10:00")])
        self.assertEqual(report.descriptions, frozenset())

    def test_three_way_clash(self) -> None:
        report = detect_conflicts(
            [course("A", "Mon 09:00-11:00"), course("B", "Mon 10:00-11:00"), course("C", "Mon 10:30-12:00")]
        )
        self.assertEqual(
            report.descriptions,
            {
                "A clashes with B on Mon (10:00-11:00)",
                "A clashes with C on Mon (10:30-12:00)",
                "B clashes with C on Mon (10:30-12:00)",
            },
        )

    def test_group_by_pair(self) -> None:
        report = detect_conflicts([course("A", "MW 09:00-10:30"), course("B", "MW 10:00-11:00"), course("C", "F 08:00-09:00")])
        groups = group_by_pair(report)
        self.assertEqual(len(groups), 1)
        pair, lines = groups[0]
        self.assertEqual(pair, ("A", "B"))
        self.assertEqual(len(lines), 2)

    def test_group_by_pair_keeps_codes_with_separator_words(self) -> None:
        report = detect_conflicts([course("LAB on Mon", "M 09:00-10:00"), course("Z clashes with Y", "M 09:30-10:30")])
        self.assertEqual(
            report.clashes,
            {("LAB on Mon", "Z clashes with Y", "LAB on Mon clashes with Z clashes with Y on Mon (09:30-10:30)")},
        )
        groups = group_by_pair(report)
        self.assertEqual([pair for pair, _ in groups], [("LAB on Mon", "Z clashes with Y")])


class TestCheckClash(unittest.TestCase):
    def test_returns_clashing_codes_once(self) -> None:
        existing = [
            course("A", "MWF 09:00-10:00"),
            course("B", "TuTh 09:00-10:00"),
            course("C", "F 09:30-10:30"),
        ]
        candidate = course("N", "MF 09:30-10:00")
        self.assertEqual(check_clash(candidate, existing), ["A", "C"])

    def test_no_clash(self) -> None:
        self.assertEqual(check_clash(course("N", "Mon 10:00-11:00"), [course("A", "Mon 09:00-10:00")]), [])

    def test_unscheduled_candidate_never_clashes(self) -> None:
        self.assertEqual(check_clash(course("N", "nan"), [course("A", "Mon 09:00-10:00")]), [])

    def test_same_code_is_ignored(self) -> None:
        a = course("A", "Mon 09:00-10:00")
        self.assertEqual(check_clash(a, [a]), [])

    def test_does_not_modify_input(self) -> None:
        existing = [course("A", "Mon 09:00-10:00")]
        check_clash(course("N", "Mon 09:30-10:30"), existing)
        self.assertEqual([c.code for c in existing], ["A"])


if __name__ == "__main__":
    unittest.main()
