"""
Resolution of the degree program behind a timetable.

The timetable page does not say reliably which semester cycle a program ID
belongs to: IDs the server cannot place are shown under the winter semester.
When the program is missing from the catalog of the cycle the timetable was
fetched under, it has to be in the catalog of the other cycle.
"""

from __future__ import annotations

import logging

from fbnd.errors import ResolutionInvariantViolation
from fbnd.model import DegreeProgram, Timetable
from fbnd.scrape import Fetch, fetch_degree_programs, find_degree_program, post_form

log = logging.getLogger(__name__)


def resolve_degree_program(timetable: Timetable, fetch: Fetch = post_form) -> DegreeProgram:
    """
    Attach and return the degree program of the timetable.

    An already resolved timetable is returned as is, without a request.
    Otherwise the catalogs are searched: the one of the cycle the timetable
    was fetched under (unless fetch_timetable already did that), then the
    one of the other cycle. If the program is listed in neither, the site no
    longer works the way we expect and ResolutionInvariantViolation is raised;
    this is not worth retrying.
    """
    if timetable.degree_program is not None:
        return timetable.degree_program

    other = timetable.cycle.other()
    cycles = [other] if timetable.cycle_searched else [timetable.cycle, other]

    for cycle in cycles:
        log.debug("searching program %s in the %s catalog", timetable.program_id, cycle.value)
        program = find_degree_program(fetch_degree_programs(cycle, fetch), timetable.program_id)
        if cycle is timetable.cycle:
            timetable.cycle_searched = True
        if program is not None:
            timetable.degree_program = program
            return program

    raise ResolutionInvariantViolation(
        f"degree program {timetable.program_id} is listed in neither the "
        f"{timetable.cycle.value.lower()} nor the {other.value.lower()} semester"
    )
