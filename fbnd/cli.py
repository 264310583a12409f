"""
CLI (Command Line Interface).

Timetables of FB03 inside your terminal:

    fbnd list [--summer | --winter]
    fbnd time <id>
    fbnd --json list

Note:
- Tables are rendered with rich; --json prints machine readable output instead
- fetching and parsing live in fbnd.scrape / fbnd.parse, this module only
  renders their results
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from functools import partial
from typing import Any, List

from rich import box
from rich.console import Console
from rich.table import Table

from fbnd import __version__
from fbnd.errors import FbndError
from fbnd.model import DegreeProgram, SemesterCycle, Timetable
from fbnd.resolve import resolve_degree_program
from fbnd.scrape import Fetch, fetch_degree_programs_for_cycles, fetch_timetable, post_form

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"


def _print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False))


def _error(msg: str) -> int:
    print(msg, file=sys.stderr)
    return 1


def _format_hour(hours: int) -> str:
    return f"{hours:02d}"


def _cmd_list(args: argparse.Namespace, console: Console, fetch: Fetch) -> int:
    """
    List all degree programs for which timetables are available.
    """
    if args.summer:
        cycles = [SemesterCycle.SUMMER]
    elif args.winter:
        cycles = [SemesterCycle.WINTER]
    else:
        # By default both cycles are listed
        cycles = [SemesterCycle.SUMMER, SemesterCycle.WINTER]

    try:
        programs = fetch_degree_programs_for_cycles(cycles, fetch)
    except FbndError as e:
        cycle = e.cycle or cycles[0]
        return _error(f"could not fetch degree programs for the {cycle.value.lower()} semester: {e}")

    if args.json:
        _print_json([p.to_dict() for p in programs])
        return 0

    console.print(_programs_table(programs))
    return 0


def _programs_table(programs: List[DegreeProgram]) -> Table:
    table = Table(box=box.SIMPLE, header_style="bold")
    for column in ("ID", "Cycle", "Semester", "Degree", "Name"):
        table.add_column(column)

    for p in programs:
        table.add_row(
            p.id,
            f"{p.semester.cycle} {p.semester.year}",
            f"Semester {p.semester.term}",
            str(p.degree),
            p.name,
        )
    return table


def _cmd_time(args: argparse.Namespace, console: Console, fetch: Fetch) -> int:
    """
    Display the timetable for a specific degree program.
    """
    try:
        timetable = fetch_timetable(args.id, fetch)
    except FbndError as e:
        return _error(f"could not fetch timetable for degree program {args.id}: {e}")

    if not timetable.days:
        return _error(f"could find no courses for degree program with id {timetable.program_id}")

    if args.json:
        # JSON output includes the degree program, so it has to be known
        try:
            resolve_degree_program(timetable, fetch)
        except FbndError as e:
            return _error(f"could not fetch degree program {timetable.program_id}: {e}")
        _print_json(timetable.to_dict())
        return 0

    _print_timetable(timetable, console)
    return 0


def _print_timetable(timetable: Timetable, console: Console) -> None:
    today = date.today().weekday()

    for day in timetable.days:
        style = "bold underline green" if day.weekday == today else "bold underline"
        console.print(str(day.weekday), style=style)

        table = Table(box=box.SIMPLE, show_header=False)
        for _ in range(5):
            table.add_column()
        for c in day.courses:
            data = c.to_dict()
            table.add_row(
                f"{_format_hour(data['hour_start'])} - {_format_hour(data['hour_end'])}",
                c.name_short,
                str(c.lesson),
                c.professor_short,
                c.room,
            )
        console.print(table)


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="fbnd", description="Timetables of FB03 inside your terminal")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--json", action="store_true", help="Enable printing results in JSON format")
    parser.add_argument("--no-color", action="store_true", help="Disable colorized output")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests and parsing steps")

    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List all degree programs for which timetables are available")
    cycle = p_list.add_mutually_exclusive_group()
    cycle.add_argument("-s", "--summer", action="store_true", help="List degree programs for summer semesters only")
    cycle.add_argument("-w", "--winter", action="store_true", help="List degree programs for winter semesters only")

    p_time = sub.add_parser("time", help="Display the timetable for a specific degree program")
    p_time.add_argument("id", type=str, help="Degree program ID (see 'fbnd list')")

    return parser


def main(argv: list[str] | None = None, fetch: Fetch | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT)

    if fetch is None:
        fetch = partial(post_form, timeout=args.timeout) if args.timeout else post_form

    console = Console(no_color=args.no_color, highlight=False)

    if args.command == "list":
        raise SystemExit(_cmd_list(args, console, fetch))
    if args.command == "time":
        raise SystemExit(_cmd_time(args, console, fetch))

    raise SystemExit(2)
