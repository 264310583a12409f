"""
Parsing of the degree program catalog (HTML -> list of DegreeProgram).

All available degree programs are listed in one <select>:

    <select id="select_S">
        <optgroup label="Bachelor">
            <option value="<ID>">Bachelor <name> (<term> Semester)</option>
            ...
        </optgroup>
        <optgroup label="Master">
            <option value="<ID>">Master <name> (<term> Semester)</option>
            ...
        </optgroup>
    </select>

The semester year is not part of the options; it is read from the label of
the semester radio buttons ("Wintersemester 2023", "Sommersemester 2024").
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup

from fbnd.errors import ParseError
from fbnd.model import Degree, DegreeProgram, Semester, SemesterCycle, normalize_id

log = logging.getLogger(__name__)

SELECT_ID = "select_S"

_OPTION_RE = re.compile(r"(Bachelor|Master) +(.*?) +\((\d+)")
_SEMESTER_RE = re.compile(r"^(Winter|Sommer)semester (\d{4})")

_CYCLE_INPUT_IDS = {
    SemesterCycle.WINTER: "inlineWintersemester",
    SemesterCycle.SUMMER: "inlineSommersemester",
}


def checked_cycle(doc: BeautifulSoup) -> Optional[SemesterCycle]:
    """
    Return the cycle whose radio button is checked, or None.
    """
    for cycle, input_id in _CYCLE_INPUT_IDS.items():
        radio = doc.find("input", id=input_id)
        if radio is not None and radio.has_attr("checked"):
            return cycle
    return None


def parse_current_semester(
    doc: BeautifulSoup, cycle: Optional[SemesterCycle] = None
) -> Tuple[SemesterCycle, int]:
    """
    Parse the semester label and return (cycle, year).

    If cycle is omitted, the label of the checked radio button is used
    (the server selects winter when nothing else was asked for).
    """
    if cycle is None:
        cycle = checked_cycle(doc) or SemesterCycle.WINTER

    label = doc.find("label", attrs={"for": _CYCLE_INPUT_IDS[cycle]})
    if label is None:
        raise ParseError(f"could not find the label of the {cycle.value.lower()} semester")

    text = label.get_text(strip=True)
    m = _SEMESTER_RE.match(text)
    if not m:
        raise ParseError(f"could not parse semester label {text!r}")

    parsed = SemesterCycle.SUMMER if m.group(1) == "Sommer" else SemesterCycle.WINTER
    return parsed, int(m.group(2))


def parse_degree_programs(
    doc: BeautifulSoup, cycle: Optional[SemesterCycle] = None
) -> List[DegreeProgram]:
    """
    Parse all degree programs of the catalog page.

    Missing IDs or option texts that do not match the expected pattern should
    never happen unless the structure of the site changes; they raise a
    ParseError instead of producing incomplete programs.
    """
    select = doc.find("select", id=SELECT_ID)
    if select is None:
        raise ParseError(f"could not find the degree program selection #{SELECT_ID}")

    semester_cycle, year = parse_current_semester(doc, cycle)

    programs: List[DegreeProgram] = []
    for degree in (Degree.BACHELOR, Degree.MASTER):
        group = select.find("optgroup", attrs={"label": degree.value}, recursive=False)
        if group is None:
            continue

        for option in group.find_all("option"):
            text = option.get_text(strip=True)

            program_id = option.get("value")
            if program_id is None:
                raise ParseError(f"could not get ID of degree program {text!r}")

            m = _OPTION_RE.search(text)
            if not m:
                raise ParseError(f"could not parse degree program {text!r}")

            programs.append(
                DegreeProgram(
                    id=normalize_id(program_id),
                    name=m.group(2),
                    degree=degree,
                    semester=Semester(cycle=semester_cycle, year=year, term=int(m.group(3))),
                )
            )

    log.debug("parsed %d degree programs for %s %d", len(programs), semester_cycle.value, year)
    return programs
