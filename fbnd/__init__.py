"""
fbnd – timetables of FB03 (Hochschule Niederrhein) as Python objects.

    from fbnd import SemesterCycle, fetch_degree_programs, fetch_timetable

    programs = fetch_degree_programs(SemesterCycle.WINTER)
    timetable = fetch_timetable(programs[0].id)
"""

from pathlib import Path

from fbnd.errors import FbndError, ParseError, ResolutionInvariantViolation, TransportError
from fbnd.model import (
    Course,
    DaySchedule,
    Degree,
    DegreeProgram,
    HourSlot,
    Lesson,
    Semester,
    SemesterCycle,
    Timetable,
    Weekday,
    normalize_id,
)
from fbnd.resolve import resolve_degree_program
from fbnd.scrape import fetch_degree_programs, fetch_degree_programs_for_cycles, fetch_timetable

__version__ = (Path(__file__).parent / "VERSION").read_text(encoding="utf-8").strip()
