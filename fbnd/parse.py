"""
Parsing of the timetable page (HTML -> Timetable days).

The timetable is one big <table>:
- thead: one label cell, then one cell per hour column ("08-10", "10-12", ...)
- tbody: one row per weekday (sometimes several); the first cell of a row
  carries the class "text-center" and the weekday abbreviation ("Mo", "Di", ...)
- every course is a <td title="<long name>/<long professor>"> whose text is
  "<short name> <lesson> <short professor> <room>". Courses longer than one
  hour column use colspan.

Important rules:
- cell indices in a row are per <td>, not per hour column. A cell with
  colspan=n consumes n hour columns, so every following cell is shifted by
  n - 1 columns (the "offset").
- a failure anywhere aborts the whole parse, there are no partial results.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from fbnd.errors import ParseError
from fbnd.model import Course, DaySchedule, HourSlot, Lesson, Weekday

log = logging.getLogger(__name__)

WEEKDAYS = {
    "Mo": Weekday.MONDAY,
    "Di": Weekday.TUESDAY,
    "Mi": Weekday.WEDNESDAY,
    "Do": Weekday.THURSDAY,
    "Fr": Weekday.FRIDAY,
    "Sa": Weekday.SATURDAY,
}

WEEKDAY_CLASS = "text-center"


# ---------------------------------------------------------------------------
# Hour grid (thead)
# ---------------------------------------------------------------------------


def parse_hour_range(text: str, column: int) -> HourSlot:
    """
    Parse one header cell like '08-10' into an HourSlot.
    """
    fields = text.strip().split("-")
    if len(fields) != 2:
        raise ParseError(f"invalid hour range {text!r} in header column {column}")

    try:
        start, end = int(fields[0]), int(fields[1])
    except ValueError as e:
        raise ParseError(f"invalid hour range {text!r} in header column {column}") from e

    if end <= start:
        raise ParseError(f"hour range {text!r} in header column {column} ends before it starts")

    return HourSlot(column=column, start=timedelta(hours=start), end=timedelta(hours=end))


def parse_hours(doc: BeautifulSoup) -> Dict[int, HourSlot]:
    """
    Map the position of each hour column to its HourSlot.

    The first header cell is a label and is skipped. Positions start at 1
    because position 0 is the weekday cell of every body row, so a body cell
    can be looked up with its own index (plus offset).
    """
    hours: Dict[int, HourSlot] = {}
    for column, th in enumerate(doc.select("thead tr th:not(:first-child)"), start=1):
        hours[column] = parse_hour_range(th.get_text(), column)
    return hours


# ---------------------------------------------------------------------------
# Course grid (tbody)
# ---------------------------------------------------------------------------


def _parse_span(cell: Tag) -> int:
    raw = cell.get("colspan", "1")
    try:
        span = int(str(raw).strip())
    except ValueError as e:
        raise ParseError(f"invalid colspan {raw!r} in cell {cell.get_text(strip=True)!r}") from e
    if span < 1:
        raise ParseError(f"invalid colspan {raw!r} in cell {cell.get_text(strip=True)!r}")
    return span


def _slot(hours: Dict[int, HourSlot], position: int, cell: Tag) -> HourSlot:
    slot = hours.get(position)
    if slot is None:
        raise ParseError(f"no hour column at position {position} for cell {cell.get_text(strip=True)!r}")
    return slot


def parse_cell(
    cell: Tag,
    index: int,
    offset: int,
    weekday: Optional[Weekday],
    hours: Dict[int, HourSlot],
) -> Tuple[Optional[Course], int]:
    """
    Parse one <td> of a body row.

    Returns the course (None for an empty slot) and the offset to use for the
    next cell of the same row.
    """
    title = cell.get("title")
    if title is None:
        return None, offset

    if weekday is None:
        raise ParseError(f"course cell {cell.get_text(strip=True)!r} appears before any weekday")

    title_fields = str(title).split("/", 1)
    if len(title_fields) < 2:
        raise ParseError(f"expected '<name>/<professor>' in title {title!r}")
    name_long, professor_long = (f.strip() for f in title_fields)

    fields = cell.get_text(" ", strip=True).split()
    if len(fields) < 4:
        raise ParseError(f"expected '<name> <lesson> <professor> <room>' in cell {cell.get_text(strip=True)!r}")
    name_short, lesson_code, professor_short = fields[:3]
    # Rooms like "R 101" are kept in one piece
    room = " ".join(fields[3:])

    span = _parse_span(cell)
    start = _slot(hours, index + offset, cell)
    end = _slot(hours, index + offset + span - 1, cell)

    course = Course(
        name_short=name_short,
        name_long=name_long,
        professor_short=professor_short,
        professor_long=professor_long,
        room=room,
        lesson=Lesson.from_code(lesson_code),
        weekday=weekday,
        hour_start=start.start,
        hour_end=end.end,
    )
    return course, offset + span - 1


def parse_row(
    row: Tag,
    weekday: Optional[Weekday],
    hours: Dict[int, HourSlot],
) -> Tuple[Optional[Weekday], List[Course]]:
    """
    Parse one body row.

    weekday is the weekday of the previous row; it is kept unless the first
    cell of this row names a new one. Returns the weekday in effect after the
    row and the courses found in it.
    """
    courses: List[Course] = []
    offset = 0

    for index, cell in enumerate(row.find_all("td", recursive=False)):
        # Only the first cell may contain a weekday
        if index == 0 and WEEKDAY_CLASS in (cell.get("class") or []):
            text = cell.get_text(strip=True)
            if text not in WEEKDAYS:
                raise ParseError(f"unknown weekday {text!r}")
            weekday = WEEKDAYS[text]
            continue

        course, offset = parse_cell(cell, index, offset, weekday, hours)
        if course is not None:
            courses.append(course)

    return weekday, courses


def walk_course_grid(doc: BeautifulSoup, hours: Dict[int, HourSlot]) -> List[Course]:
    """
    Collect all courses of the timetable body in document order.
    """
    courses: List[Course] = []
    weekday: Optional[Weekday] = None

    # Rows with a style attribute are spacer rows
    for row in doc.select("tbody tr:not([style])"):
        weekday, row_courses = parse_row(row, weekday, hours)
        courses.extend(row_courses)

    return courses


# ---------------------------------------------------------------------------
# Schedule assembly
# ---------------------------------------------------------------------------


def assemble_schedule(courses: Iterable[Course]) -> List[DaySchedule]:
    """
    Group courses by weekday (Monday first) and sort each day by start hour.

    The sort is stable, so courses starting at the same hour keep their
    document order. Days without courses are left out; identical courses are
    kept only once.
    """
    by_day: Dict[Weekday, List[Course]] = {}
    for course in courses:
        day = by_day.setdefault(course.weekday, [])
        if course not in day:
            day.append(course)

    return [
        DaySchedule(weekday=weekday, courses=sorted(by_day[weekday], key=lambda c: c.hour_start))
        for weekday in sorted(by_day)
    ]


def parse_timetable(doc: BeautifulSoup) -> List[DaySchedule]:
    """
    Parse a timetable page into its weekday schedule.
    """
    hours = parse_hours(doc)
    courses = walk_course_grid(doc, hours)
    log.debug("parsed %d hour columns and %d courses", len(hours), len(courses))
    return assemble_schedule(courses)
