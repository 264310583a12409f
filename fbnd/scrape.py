"""
Fetching (HTTP -> parsed documents -> typed records).

Every page of the FB03 timetable is served by the same PHP script and selected
with form fields. The transport is a plain callable taking the form fields and
returning the parsed document; post_form is the real one, tests pass their own.

- fetch_degree_programs: catalog of one semester cycle
- fetch_degree_programs_for_cycles: catalogs of several cycles, in parallel
- fetch_timetable: weekly schedule of one degree program
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, Iterable, List, Optional

import requests
from bs4 import BeautifulSoup

from fbnd.catalog import checked_cycle, parse_degree_programs, SELECT_ID
from fbnd.errors import FbndError, TransportError
from fbnd.model import DegreeProgram, SemesterCycle, Timetable, normalize_id
from fbnd.parse import parse_timetable

log = logging.getLogger(__name__)

Fetch = Callable[[Dict[str, str]], BeautifulSoup]


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

TIMETABLE_URL = "https://mpl-server.kr.hs-niederrhein.de/fb03/sp/stundenplan.php"
REQUEST_TIMEOUT = 30


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


def post_form(
    form: Dict[str, str],
    url: str = TIMETABLE_URL,
    timeout: float = REQUEST_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> BeautifulSoup:
    """
    POST the form fields and return the parsed response.

    Any request failure (connection, timeout, HTTP status) is raised as
    TransportError. There are no retries.
    """
    log.debug("POST %s %s", url, form)
    post = session.post if session is not None else requests.post
    try:
        resp = post(url, data=form, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise TransportError(f"request to {url} failed: {e}") from e

    return BeautifulSoup(resp.text, "html.parser")


def catalog_form(cycle: SemesterCycle) -> Dict[str, str]:
    return {"Lage": cycle.form_value, "fkt": "SR", "clear": "false"}


def timetable_form(program_id: str) -> Dict[str, str]:
    return {"fkt": "SR", "SR": normalize_id(program_id), "mode": "SR", "clear": "false"}


# ---------------------------------------------------------------------------
# Degree programs
# ---------------------------------------------------------------------------


def fetch_degree_programs(cycle: SemesterCycle, fetch: Fetch = post_form) -> List[DegreeProgram]:
    """
    Return all degree programs with a timetable in the given cycle.

    Errors are raised unchanged, with their cycle attribute set.
    """
    try:
        doc = fetch(catalog_form(cycle))
        return parse_degree_programs(doc, cycle)
    except FbndError as e:
        if e.cycle is None:
            e.cycle = cycle
        raise


def fetch_degree_programs_for_cycles(
    cycles: Iterable[SemesterCycle], fetch: Fetch = post_form
) -> List[DegreeProgram]:
    """
    Return the degree programs of all requested cycles.

    Two cycles are fetched concurrently. The result is all-or-nothing: the
    first failure that is observed is raised and the outcome of the other
    request is ignored. The other request is not cancelled.
    """
    # dict.fromkeys keeps the requested order and drops duplicates
    wanted = list(dict.fromkeys(cycles))
    if len(wanted) <= 1:
        return [p for cycle in wanted for p in fetch_degree_programs(cycle, fetch)]

    results: Dict[SemesterCycle, List[DegreeProgram]] = {}
    executor = ThreadPoolExecutor(max_workers=len(wanted))
    try:
        future_map = {executor.submit(fetch_degree_programs, c, fetch): c for c in wanted}
        for fut in as_completed(future_map):
            # Raises the first failure that completes
            results[future_map[fut]] = fut.result()
    finally:
        executor.shutdown(wait=False)

    return [p for cycle in wanted for p in results[cycle]]


# ---------------------------------------------------------------------------
# Timetable
# ---------------------------------------------------------------------------


def find_degree_program(programs: Iterable[DegreeProgram], program_id: str) -> Optional[DegreeProgram]:
    """
    Find a program by ID, ignoring case.
    """
    wanted = normalize_id(program_id)
    for program in programs:
        if normalize_id(program.id) == wanted:
            return program
    return None


def fetch_timetable(program_id: str, fetch: Fetch = post_form) -> Timetable:
    """
    Return the weekly timetable for the degree program with the given ID.

    The timetable page also contains the catalog of the cycle it was rendered
    for. If the program is listed there, it is attached right away; otherwise
    the timetable stays unresolved (see fbnd.resolve). Pages without a
    catalog leave the lookup to fbnd.resolve as well.
    """
    program_id = normalize_id(program_id)
    doc = fetch(timetable_form(program_id))

    days = parse_timetable(doc)
    # The server falls back to winter for IDs it cannot place
    cycle = checked_cycle(doc) or SemesterCycle.WINTER
    timetable = Timetable(program_id=program_id, cycle=cycle, days=days)

    if doc.find("select", id=SELECT_ID) is not None:
        timetable.degree_program = find_degree_program(parse_degree_programs(doc, cycle), program_id)
        timetable.cycle_searched = True

    log.debug(
        "timetable %s fetched under %s: %d days, resolved=%s",
        program_id,
        cycle.value,
        len(days),
        timetable.resolved,
    )
    return timetable
