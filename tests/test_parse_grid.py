"""
Unit tests for walking the timetable body.

Contract:
- a cell with colspan=n shifts all following cells of the row by n - 1 columns
- rows without a weekday cell keep the weekday of the previous row
- cells without title are empty slots
- malformed cells raise ParseError, there are no partial results
"""

import unittest
from datetime import timedelta

from fbnd.errors import ParseError
from fbnd.model import Lesson, Weekday
from fbnd.parse import parse_cell, parse_hours, parse_row, parse_timetable, walk_course_grid
from pages import course_cell, row, soup, timetable_table, weekday_cell

TWO_HOURS = ["08-10", "10-12"]
FOUR_HOURS = ["08-10", "10-12", "12-14", "14-16"]


def _walk(header, rows):
    doc = soup(timetable_table(header, rows))
    return walk_course_grid(doc, parse_hours(doc))


class TestParseCell(unittest.TestCase):
    def test_colspan_two_covers_both_columns(self) -> None:
        doc = soup(timetable_table(TWO_HOURS, []))
        hours = parse_hours(doc)
        cell = soup(
            "<table><tr>" + course_cell("Analysis I/Prof. Mustermann", "ANA1 V Must R101", "2") + "</tr></table>"
        ).td

        course, offset = parse_cell(cell, 1, 0, Weekday.MONDAY, hours)

        assert course is not None
        self.assertEqual(course.name_short, "ANA1")
        self.assertEqual(course.name_long, "Analysis I")
        self.assertEqual(course.professor_short, "Must")
        self.assertEqual(course.professor_long, "Prof. Mustermann")
        self.assertEqual(course.room, "R101")
        self.assertEqual(course.lesson, Lesson.LECTURE)
        self.assertEqual(course.weekday, Weekday.MONDAY)
        self.assertEqual(course.hour_start, timedelta(hours=8))
        self.assertEqual(course.hour_end, timedelta(hours=12))
        self.assertEqual(offset, 1)

    def test_empty_slot_keeps_offset(self) -> None:
        cell = soup("<table><tr><td></td></tr></table>").td
        course, offset = parse_cell(cell, 2, 3, Weekday.MONDAY, {})
        self.assertIsNone(course)
        self.assertEqual(offset, 3)


class TestWalkCourseGrid(unittest.TestCase):
    def test_offsets_follow_colspans(self) -> None:
        courses = _walk(
            FOUR_HOURS,
            [
                row(
                    weekday_cell("Mo"),
                    course_cell("Analysis I/Prof. Mustermann", "ANA1 V Must R101", "2"),
                    "<td></td>",
                    course_cell("Programmierung/Dr. Beispiel", "PR1 P Beis L2", "1"),
                )
            ],
        )

        self.assertEqual(len(courses), 2)
        self.assertEqual((courses[0].hour_start, courses[0].hour_end), (timedelta(hours=8), timedelta(hours=12)))
        self.assertEqual((courses[1].hour_start, courses[1].hour_end), (timedelta(hours=14), timedelta(hours=16)))
        self.assertEqual(courses[1].lesson, Lesson.INTERNSHIP)

    def test_offsets_rederived_from_spans(self) -> None:
        spans = [1, 2, 3, 1]
        header = [f"{h:02d}-{h + 1:02d}" for h in range(8, 8 + sum(spans))]
        cells = [course_cell(f"Kurs {i}/Prof {i}", f"K{i} V P{i} R{i}", str(s)) for i, s in enumerate(spans)]
        courses = _walk(header, [row(weekday_cell("Di"), *cells)])

        consumed = 0
        for i, (course, span) in enumerate(zip(courses, spans), start=1):
            left = i + consumed
            right = left + span - 1
            self.assertEqual(course.hour_start, timedelta(hours=8 + left - 1))
            self.assertEqual(course.hour_end, timedelta(hours=8 + right))
            consumed += span - 1

    def test_default_colspan_is_one(self) -> None:
        courses = _walk(TWO_HOURS, [row(weekday_cell("Mi"), "<td></td>", course_cell("Physik/Dr. X", "PHY S Xx R2"))])
        self.assertEqual(len(courses), 1)
        self.assertEqual(courses[0].hour_start, timedelta(hours=10))
        self.assertEqual(courses[0].hour_end, timedelta(hours=12))
        self.assertEqual(courses[0].weekday, Weekday.WEDNESDAY)

    def test_weekday_carries_over_to_unmarked_rows(self) -> None:
        courses = _walk(
            TWO_HOURS,
            [
                row(weekday_cell("Do"), course_cell("A/Prof A", "A V PA R1")),
                row("<td></td>", course_cell("B/Prof B", "B Ü PB R2")),
                row(weekday_cell("Fr"), course_cell("C/Prof C", "C T PC R3")),
            ],
        )
        self.assertEqual([c.weekday for c in courses], [Weekday.THURSDAY, Weekday.THURSDAY, Weekday.FRIDAY])
        self.assertEqual(courses[1].lesson, Lesson.EXERCISE)

    def test_spacer_rows_are_ignored(self) -> None:
        courses = _walk(
            TWO_HOURS,
            [
                row(weekday_cell("Mo"), course_cell("A/Prof A", "A V PA R1")),
                row(weekday_cell("Sa"), style="height: 2px"),
                row("<td></td>", course_cell("B/Prof B", "B V PB R2")),
            ],
        )
        self.assertEqual([c.weekday for c in courses], [Weekday.MONDAY, Weekday.MONDAY])

    def test_room_with_spaces_is_kept(self) -> None:
        courses = _walk(TWO_HOURS, [row(weekday_cell("Mo"), course_cell("A/Prof A", "A V PA R 101"))])
        self.assertEqual(courses[0].room, "R 101")

    def test_parse_row_returns_weekday(self) -> None:
        doc = soup(timetable_table(TWO_HOURS, [row(weekday_cell("Sa"))]))
        weekday, courses = parse_row(doc.select_one("tbody tr"), Weekday.MONDAY, parse_hours(doc))
        self.assertEqual(weekday, Weekday.SATURDAY)
        self.assertEqual(courses, [])


class TestWalkCourseGridErrors(unittest.TestCase):
    def _assert_fails(self, *cells: str, header=TWO_HOURS) -> None:
        with self.assertRaises(ParseError):
            _walk(header, [row(weekday_cell("Mo"), *cells)])

    def test_invalid_colspan(self) -> None:
        self._assert_fails(course_cell("A/Prof A", "A V PA R1", "zwei"))

    def test_negative_colspan(self) -> None:
        self._assert_fails(course_cell("A/Prof A", "A V PA R1", "-1"))

    def test_zero_colspan(self) -> None:
        self._assert_fails(course_cell("A/Prof A", "A V PA R1", "0"))

    def test_title_without_slash(self) -> None:
        self._assert_fails(course_cell("Analysis I", "A V PA R1"))

    def test_too_few_text_fields(self) -> None:
        self._assert_fails(course_cell("A/Prof A", "A V PA"))

    def test_span_beyond_last_column(self) -> None:
        self._assert_fails(course_cell("A/Prof A", "A V PA R1", "3"))

    def test_unknown_lesson_code(self) -> None:
        self._assert_fails(course_cell("A/Prof A", "A Q PA R1"))

    def test_unknown_weekday(self) -> None:
        with self.assertRaises(ParseError):
            _walk(TWO_HOURS, [row(weekday_cell("Xx"), course_cell("A/Prof A", "A V PA R1"))])

    def test_course_before_any_weekday(self) -> None:
        with self.assertRaises(ParseError):
            _walk(TWO_HOURS, [row("<td></td>", course_cell("A/Prof A", "A V PA R1"))])

    def test_error_in_later_row_fails_whole_document(self) -> None:
        doc = soup(
            timetable_table(
                TWO_HOURS,
                [
                    row(weekday_cell("Mo"), course_cell("A/Prof A", "A V PA R1")),
                    row(weekday_cell("Di"), course_cell("B/Prof B", "B V PB R2", "x")),
                ],
            )
        )
        with self.assertRaises(ParseError):
            parse_timetable(doc)


if __name__ == "__main__":
    unittest.main()
