"""
CLI (Command Line Interface).

This module provides quick terminal commands for power users and for testing, e.g.:

    mytimetable courses
    mytimetable batch <batch> [<batch> ...]
    mytimetable search <text>
    mytimetable conflicts <course_code> [...] [--batch <batch> ...]
    mytimetable fetch <url>
    mytimetable interactive

Note:
- The interactive UI lives in mytimetable/interactive.py
- This CLI is intentionally simple and prints plain text (no rich formatting)
- The timetable is read from --data (file or directory) or the default data directory
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional

from mytimetable.conflicts import find_conflicts, get_conflicts
from mytimetable.fetch import fetch_timetable
from mytimetable.model import Course
from mytimetable.parse import TimetableSourceError, load_timetable
from mytimetable.queries import MIN_QUERY_LENGTH, batch_courses, search_courses


_FILE_SUFFIXES = (".xlsx", ".xlsm", ".xls", ".csv", ".txt")


def _course_line(c: Course) -> str:
    """
    One-line plain-text summary of a course.
    """
    bits = [c.course_code, c.course_name or "(no name)"]
    if c.faculty:
        bits.append(c.faculty)
    if c.has_schedule:
        bits.append(f"{c.day} {c.start_time}-{c.end_time}")
    if c.room:
        bits.append(f"@ {c.room}")
    return " | ".join(bits)


def _print_courses(courses: list[Course], as_json: bool = False) -> None:
    if as_json:
        print(json.dumps([c.to_dict() for c in courses], ensure_ascii=False, indent=2))
        return
    for c in courses:
        print(_course_line(c))


def _cmd_courses(args: argparse.Namespace, courses: list[Course]) -> int:
    """
    List every course of the loaded timetable.
    """
    if not courses:
        print("No courses in timetable.")
        return 0
    _print_courses(courses, as_json=args.json)
    return 0


def _cmd_batch(args: argparse.Namespace, courses: list[Course]) -> int:
    """
    List the courses allocated to the given batch codes.
    """
    matches = batch_courses(courses, args.batches)
    if not matches:
        print("No courses for this batch.")
        return 0
    _print_courses(matches, as_json=args.json)
    return 0


def _cmd_search(args: argparse.Namespace, courses: list[Course]) -> int:
    """
    Search courses by substring match in course code, name or faculty.
    """
    query = (args.text or "").strip()
    if len(query) < MIN_QUERY_LENGTH:
        print(f"Please provide at least {MIN_QUERY_LENGTH} characters of search text.")
        return 1

    matches = search_courses(courses, query)
    if not matches:
        print("No results.")
        return 0

    _print_courses(matches, as_json=args.json)
    return 0


def _select(courses: list[Course], codes: list[str]) -> list[Course]:
    """
    Map course codes typed by the user to courses (case-insensitive).
    """
    by_code: dict[str, Course] = {}
    for c in courses:
        by_code.setdefault(c.course_code.upper(), c)

    selected: list[Course] = []
    for code in codes:
        cid = code.strip().upper()
        if not cid:
            continue
        course = by_code.get(cid)
        if course is None:
            print(f"Warning: course code '{cid}' not found in timetable (ignored).")
            continue
        if course not in selected:
            selected.append(course)
    return selected


def _cmd_conflicts(args: argparse.Namespace, courses: list[Course]) -> int:
    """
    Print conflicts of the selected courses against the batch and against each other.
    """
    selected = _select(courses, args.codes)
    if not selected:
        print("No known course selected.")
        return 1

    context = batch_courses(courses, args.batch or [])

    found = 0
    for course in selected:
        others: list[Course] = []
        # a course can sit in both the batch and the selection
        for other in get_conflicts(course, context, selected):
            if other not in others:
                others.append(other)
        if not others:
            continue
        found += len(others)
        print(f"{_course_line(course)}")
        for other in others:
            print(f"    <-> {_course_line(other)}")

    pairs = find_conflicts(selected)
    if pairs:
        print(f"Conflicts within selection: {len(pairs)}")
        for a, b in pairs:
            print(f"- {a.course_code}  <->  {b.course_code}")

    if not found and not pairs:
        print("No conflicts found.")
    return 0


def _cmd_fetch(args: argparse.Namespace) -> int:
    """
    Download a timetable file into the data directory.
    """
    out_dir: Optional[Path] = None
    if args.data is not None:
        # a file path means "save next to it"
        is_file = not args.data.is_dir() and args.data.suffix.lower() in _FILE_SUFFIXES
        out_dir = args.data.parent if is_file else args.data
    path = fetch_timetable(args.url.strip(), out_dir=out_dir, refresh=args.refresh)
    print(f"Timetable saved to: {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="mytimetable", description="MyTimetable CLI")
    parser.add_argument("--data", type=Path, default=None, help="Timetable file or directory")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug log output")
    sub = parser.add_subparsers(dest="command", required=True)

    p_courses = sub.add_parser("courses", help="List all courses")
    p_courses.add_argument("--json", action="store_true", help="Print JSON instead of text")

    p_batch = sub.add_parser("batch", help="Courses allocated to a batch")
    p_batch.add_argument("batches", nargs="+", help="Batch codes (e.g. CSE 2024)")
    p_batch.add_argument("--json", action="store_true", help="Print JSON instead of text")

    p_search = sub.add_parser("search", help="Search for courses")
    p_search.add_argument("text", type=str, help="Search text")
    p_search.add_argument("--json", action="store_true", help="Print JSON instead of text")

    p_conf = sub.add_parser("conflicts", help="Show time conflicts of selected courses")
    p_conf.add_argument("codes", nargs="+", help="Course codes (e.g. CS101-LEC1)")
    p_conf.add_argument("--batch", nargs="*", default=None, help="Batch codes to check against")

    p_fetch = sub.add_parser("fetch", help="Download a timetable file")
    p_fetch.add_argument("url", type=str, help="Link to an .xlsx or .csv file")
    p_fetch.add_argument("--refresh", action="store_true", help="Overwrite an existing download")

    sub.add_parser("interactive", help="Interactive menu mode")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "fetch":
            raise SystemExit(_cmd_fetch(args))

        if args.command == "interactive":
            from mytimetable.interactive import run_interactive

            run_interactive(args.data)
            raise SystemExit(0)

        courses = load_timetable(args.data)
    except TimetableSourceError as exc:
        print(f"Error: {exc}")
        raise SystemExit(1)

    if args.command == "courses":
        raise SystemExit(_cmd_courses(args, courses))
    if args.command == "batch":
        raise SystemExit(_cmd_batch(args, courses))
    if args.command == "search":
        raise SystemExit(_cmd_search(args, courses))
    if args.command == "conflicts":
        raise SystemExit(_cmd_conflicts(args, courses))

    raise SystemExit(2)
