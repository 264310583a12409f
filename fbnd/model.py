"""
Central data model definitions used across the project.

This module defines the canonical structure of degree programs, courses and
timetables so that:
- the parsers, the fetch layer and the CLI share the same field names
- JSON output (to_dict) keeps stable keys no matter how it is rendered
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional

from fbnd.errors import ParseError


def normalize_id(value: str) -> str:
    """
    Normalize a degree program ID (strip + uppercase).

    Upstream IDs are compared case-insensitively, so every ID is normalized
    before it is stored or looked up. Applying this twice changes nothing.
    """
    return str(value).strip().upper()


def _hours(value: timedelta) -> int:
    return int(value.total_seconds()) // 3600


class Weekday(IntEnum):
    # Same numbering as datetime.date.weekday()
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5

    def __str__(self) -> str:
        return self.name.capitalize()


class Degree(str, Enum):
    BACHELOR = "Bachelor"
    MASTER = "Master"

    def __str__(self) -> str:
        return self.value


class SemesterCycle(str, Enum):
    SUMMER = "Summer"
    WINTER = "Winter"

    def __str__(self) -> str:
        return self.value

    def other(self) -> "SemesterCycle":
        return SemesterCycle.WINTER if self is SemesterCycle.SUMMER else SemesterCycle.SUMMER

    @property
    def form_value(self) -> str:
        """Value of the 'Lage' form field that selects this cycle."""
        return "SS" if self is SemesterCycle.SUMMER else "WS"


class Lesson(str, Enum):
    """
    Type of a course occurrence.

    The values are the codes the original command-line tool printed;
    the timetable page itself uses German codes, see from_code().
    """

    LECTURE = "L"
    EXERCISE = "E"
    INTERNSHIP = "P"
    SEMINAR = "S"
    SEMINAR_LECTURE = "SL"
    LANGUAGE_LECTURE = "F"
    TUTORIAL = "T"

    def __str__(self) -> str:
        return _LESSON_NAMES[self]

    @classmethod
    def from_code(cls, code: str) -> "Lesson":
        lesson = _LESSON_CODES.get(code.strip().upper())
        if lesson is None:
            raise ParseError(f"unknown lesson code {code!r}")
        return lesson


_LESSON_NAMES = {
    Lesson.LECTURE: "Lecture",
    Lesson.EXERCISE: "Exercise",
    Lesson.INTERNSHIP: "Internship",
    Lesson.SEMINAR: "Seminar",
    Lesson.SEMINAR_LECTURE: "SeminarLecture",
    Lesson.LANGUAGE_LECTURE: "LanguageLecture",
    Lesson.TUTORIAL: "Tutorial",
}

_LESSON_CODES = {
    # German codes as printed in the timetable cells
    "V": Lesson.LECTURE,
    "Ü": Lesson.EXERCISE,
    "U": Lesson.EXERCISE,
    "P": Lesson.INTERNSHIP,
    "S": Lesson.SEMINAR,
    "SU": Lesson.SEMINAR_LECTURE,
    "F": Lesson.LANGUAGE_LECTURE,
    "T": Lesson.TUTORIAL,
    # English codes
    "L": Lesson.LECTURE,
    "E": Lesson.EXERCISE,
    "SL": Lesson.SEMINAR_LECTURE,
}


@dataclass(frozen=True)
class HourSlot:
    """One column of the timetable header, e.g. '08-10'."""

    column: int
    start: timedelta
    end: timedelta


@dataclass(frozen=True)
class Semester:
    cycle: SemesterCycle
    year: int
    term: int

    def to_dict(self) -> Dict[str, Any]:
        return {"cycle": self.cycle.value, "year": self.year, "term": self.term}


@dataclass(frozen=True)
class DegreeProgram:
    """
    A degree program for which a timetable is available.

    The ID is needed to fetch the timetable of the program.
    """

    id: str
    name: str
    degree: Degree
    semester: Semester

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "degree": self.degree.value,
            "semester": self.semester.to_dict(),
        }


@dataclass(frozen=True)
class Course:
    """
    One course occurrence of a weekly timetable.

    hour_start and hour_end are durations since midnight.
    """

    name_short: str
    name_long: str
    professor_short: str
    professor_long: str
    room: str
    lesson: Lesson
    weekday: Weekday
    hour_start: timedelta
    hour_end: timedelta

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name_short": self.name_short,
            "name_long": self.name_long,
            "professor_short": self.professor_short,
            "professor_long": self.professor_long,
            "room": self.room,
            "lesson": str(self.lesson),
            "weekday": str(self.weekday),
            "hour_start": _hours(self.hour_start),
            "hour_end": _hours(self.hour_end),
        }


@dataclass(frozen=True)
class DaySchedule:
    weekday: Weekday
    courses: List[Course]

    def to_dict(self) -> Dict[str, Any]:
        return {"weekday": str(self.weekday), "courses": [c.to_dict() for c in self.courses]}


@dataclass
class Timetable:
    """
    The weekly schedule of one degree program.

    cycle is the semester cycle the schedule was fetched under. degree_program
    stays None until the program was found in a catalog; it is set once
    (see fbnd.resolve) and never changed afterwards. cycle_searched is True
    once the catalog of cycle itself was searched for the program.
    """

    program_id: str
    cycle: SemesterCycle
    days: List[DaySchedule] = field(default_factory=list)
    degree_program: Optional[DegreeProgram] = None
    cycle_searched: bool = False

    @property
    def resolved(self) -> bool:
        return self.degree_program is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.program_id,
            "cycle": self.cycle.value,
            "degree_program": self.degree_program.to_dict() if self.degree_program else None,
            "days": [d.to_dict() for d in self.days],
        }
