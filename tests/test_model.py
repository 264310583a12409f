"""
Unit tests for the data model: ID normalization, enums, JSON structure.
"""

import json
import unittest
from datetime import timedelta

from fbnd.errors import ParseError
from fbnd.model import (
    Course,
    DaySchedule,
    Degree,
    DegreeProgram,
    Lesson,
    Semester,
    SemesterCycle,
    Timetable,
    Weekday,
    normalize_id,
)


class TestNormalizeId(unittest.TestCase):
    def test_uppercase_and_strip(self) -> None:
        self.assertEqual(normalize_id(" ab12 "), "AB12")

    def test_idempotent(self) -> None:
        for raw in ("ab12", "AB12", " Bi-3x ", ""):
            once = normalize_id(raw)
            self.assertEqual(normalize_id(once), once)

    def test_case_insensitive_equality(self) -> None:
        self.assertEqual(normalize_id("bInF1"), normalize_id("BINF1"))


class TestEnums(unittest.TestCase):
    def test_other_cycle(self) -> None:
        self.assertIs(SemesterCycle.WINTER.other(), SemesterCycle.SUMMER)
        self.assertIs(SemesterCycle.SUMMER.other(), SemesterCycle.WINTER)

    def test_weekday_matches_date_weekday(self) -> None:
        self.assertEqual(Weekday.MONDAY, 0)
        self.assertEqual(str(Weekday.SATURDAY), "Saturday")

    def test_lesson_codes(self) -> None:
        self.assertIs(Lesson.from_code("V"), Lesson.LECTURE)
        self.assertIs(Lesson.from_code("Ü"), Lesson.EXERCISE)
        self.assertIs(Lesson.from_code("su"), Lesson.SEMINAR_LECTURE)
        self.assertIs(Lesson.from_code("SL"), Lesson.SEMINAR_LECTURE)
        self.assertEqual(str(Lesson.LANGUAGE_LECTURE), "LanguageLecture")

    def test_unknown_lesson_code(self) -> None:
        with self.assertRaises(ParseError):
            Lesson.from_code("X")


class TestToDict(unittest.TestCase):
    def test_timetable_is_json_serializable(self) -> None:
        course = Course(
            name_short="ANA1",
            name_long="Analysis I",
            professor_short="Must",
            professor_long="Prof. Mustermann",
            room="R101",
            lesson=Lesson.LECTURE,
            weekday=Weekday.MONDAY,
            hour_start=timedelta(hours=8),
            hour_end=timedelta(hours=12),
        )
        program = DegreeProgram(
            id="AB12",
            name="Informatik",
            degree=Degree.BACHELOR,
            semester=Semester(cycle=SemesterCycle.WINTER, year=2023, term=3),
        )
        timetable = Timetable(
            program_id="AB12",
            cycle=SemesterCycle.WINTER,
            days=[DaySchedule(weekday=Weekday.MONDAY, courses=[course])],
            degree_program=program,
        )

        data = json.loads(json.dumps(timetable.to_dict()))

        self.assertEqual(data["id"], "AB12")
        self.assertEqual(data["cycle"], "Winter")
        self.assertEqual(
            data["degree_program"],
            {
                "id": "AB12",
                "name": "Informatik",
                "degree": "Bachelor",
                "semester": {"cycle": "Winter", "year": 2023, "term": 3},
            },
        )
        self.assertEqual(data["days"][0]["weekday"], "Monday")
        self.assertEqual(
            data["days"][0]["courses"][0],
            {
                "name_short": "ANA1",
                "name_long": "Analysis I",
                "professor_short": "Must",
                "professor_long": "Prof. Mustermann",
                "room": "R101",
                "lesson": "Lecture",
                "weekday": "Monday",
                "hour_start": 8,
                "hour_end": 12,
            },
        )

    def test_unresolved_timetable(self) -> None:
        data = Timetable(program_id="X", cycle=SemesterCycle.SUMMER).to_dict()
        self.assertIsNone(data["degree_program"])
        self.assertEqual(data["days"], [])


if __name__ == "__main__":
    unittest.main()
