"""
Parsing (timetable file -> canonical Course list).

- Reads a timetable either as an .xlsx workbook (first sheet only) or as
  comma-delimited text with a header line
- Turns every data row into a mapping {header: cell}
- Normalizes each mapping into one Course using the header synonyms

Important rules (DO NOT CHANGE):
- serial = 1-based position of the row in the sheet, BEFORE filtering
- rows without a usable course code are dropped silently
- missing columns / bad numbers never raise; only an unreadable source does
"""

from __future__ import annotations

import io
import logging
import os
import zipfile
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from mytimetable.headers import (
    FIELD_SYNONYMS,
    MissingColumnsError,
    REQUIRED_FIELDS,
    missing_fields,
    resolve_flag,
    resolve_number,
    resolve_value,
)
from mytimetable.model import Course


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

PACKAGE_DIR = Path(__file__).resolve().parent

SPREADSHEET = "spreadsheet"
DELIMITED_TEXT = "delimited-text"

_SPREADSHEET_SUFFIXES = (".xlsx", ".xlsm")
_LEGACY_SUFFIXES = (".xls",)
_TEXT_SUFFIXES = (".csv", ".txt")


class TimetableSourceError(Exception):
    """
    The timetable could not be found or read at all (zero data, not partial data).
    """


def default_data_dir() -> Path:
    """
    Directory searched for a timetable file when no path is given.

    MYTIMETABLE_DATA_DIR overrides the package-local data/ folder.
    """
    env = os.environ.get("MYTIMETABLE_DATA_DIR", "").strip()
    if env:
        return Path(env)
    return PACKAGE_DIR / "data"


# ---------------------------------------------------------------------------
# Delimited text
# ---------------------------------------------------------------------------


def parse_csv_line(line: str) -> list[str]:
    """
    Split one CSV line on commas, honoring double quotes.

    Inside quotes commas are literal and "" stands for one ".
    """
    result: list[str] = []
    current: list[str] = []
    in_quotes = False

    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and line[i + 1 : i + 2] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            result.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    result.append("".join(current))
    return result


def _unique_headers(raw_headers: Iterable[Any]) -> list[str]:
    """
    Make header names usable as dict keys: blanks become __EMPTY, repeats get _1, _2, ...
    """
    out: list[str] = []
    seen: dict[str, int] = {}
    for raw in raw_headers:
        name = "" if raw is None else str(raw)
        if not name.strip():
            name = "__EMPTY"
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 0
        out.append(name)
    return out


def parse_csv_text(text: str) -> list[dict[str, str]]:
    """
    Header line + data lines -> list of {header: value} rows.

    Blank lines are ignored. Short lines get "" for missing cells, extra
    cells beyond the header are dropped. Quoted fields cannot span lines.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = [line.rstrip("\r") for line in text.split("\n")]
    lines = [line for line in lines if line.strip()]
    if not lines:
        return []

    headers = _unique_headers(parse_csv_line(lines[0]))

    rows: list[dict[str, str]] = []
    for line in lines[1:]:
        values = parse_csv_line(line)
        rows.append({h: (values[i] if i < len(values) else "") for i, h in enumerate(headers)})
    return rows


# ---------------------------------------------------------------------------
# Workbook
# ---------------------------------------------------------------------------

# what openpyxl raises for a damaged or non-xlsx archive;
# XML parse errors (ElementTree and lxml) subclass SyntaxError
_WORKBOOK_ERRORS = (zipfile.BadZipFile, InvalidFileException, SyntaxError, KeyError, ValueError, OSError)


def read_workbook_rows(data: bytes) -> list[dict[str, Any]]:
    """
    First sheet of an .xlsx workbook -> list of {header: cell} rows.

    Empty cells are left out of the mapping, fully empty rows are skipped.
    """
    try:
        wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except _WORKBOOK_ERRORS as exc:
        raise TimetableSourceError(f"Cannot read workbook: {exc}") from exc

    try:
        if not wb.worksheets:
            return []
        sheet = wb.worksheets[0]
        values = sheet.iter_rows(values_only=True)

        header_row = next(values, None)
        if header_row is None:
            return []
        headers = _unique_headers(header_row)

        rows: list[dict[str, Any]] = []
        for cells in values:
            row = {
                headers[i]: cell
                for i, cell in enumerate(cells)
                if i < len(headers) and cell is not None and cell != ""
            }
            if row:
                rows.append(row)
        return rows
    except _WORKBOOK_ERRORS as exc:
        raise TimetableSourceError(f"Cannot read workbook sheet: {exc}") from exc
    finally:
        wb.close()


# ---------------------------------------------------------------------------
# Row normalization (CORE LOGIC)
# ---------------------------------------------------------------------------


def normalize_row(row: Mapping[Any, Any], serial: int) -> Course:
    """
    Build one Course from one raw row. Never raises for bad content.
    """
    syn = FIELD_SYNONYMS

    code = resolve_value(row, syn["course_code"])
    section = resolve_value(row, syn["section"])
    component = resolve_value(row, syn["component"])

    # LEC1 / TUT1 sections of the same course must stay distinguishable
    if section:
        full_code = f"{code}-{section}"
    elif component:
        full_code = f"{code}-{component}"
    else:
        full_code = code

    return Course(
        serial=serial,
        course_code=full_code,
        course_name=resolve_value(row, syn["course_name"]),
        credits=resolve_number(row, syn["credits"]),
        faculty=resolve_value(row, syn["faculty"]),
        slot=section,
        room=resolve_value(row, syn["room"]),
        major=resolve_value(row, syn["major"]),
        day=resolve_value(row, syn["day"]),
        start_time=resolve_value(row, syn["start_time"]),
        end_time=resolve_value(row, syn["end_time"]),
        course_type=resolve_value(row, syn["course_type"]),
        component=component,
        open_as_uwe=resolve_flag(row, syn["open_as_uwe"]),
        remarks=resolve_value(row, syn["remarks"]),
    )


def _is_usable(course: Course) -> bool:
    return bool(course.course_code) and course.course_code != "-"


def normalize_rows(rows: list[Mapping[Any, Any]], strict: bool = False) -> list[Course]:
    """
    Normalize all rows, dropping those without a usable course code.

    With strict=True, a sheet in which no header matches a required field
    raises MissingColumnsError instead of silently producing nothing.
    """
    if strict and rows:
        headers: dict[Any, None] = {}
        for row in rows:
            headers.update(dict.fromkeys(row.keys()))
        missing = missing_fields(headers, REQUIRED_FIELDS)
        if missing:
            raise MissingColumnsError(missing)

    courses: list[Course] = []
    for index, row in enumerate(rows):
        course = normalize_row(row, serial=index + 1)
        if _is_usable(course):
            courses.append(course)

    dropped = len(rows) - len(courses)
    if dropped:
        logger.debug("Dropped %d of %d rows without a course code", dropped, len(rows))

    return courses


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _decode(data: Union[bytes, str]) -> str:
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise TimetableSourceError(f"Timetable text is not valid UTF-8: {exc}") from exc


def parse_source(data: Union[bytes, str], fmt: str, strict: bool = False) -> list[Course]:
    """
    Parse raw file content. fmt is 'spreadsheet' or 'delimited-text'.
    """
    if fmt == SPREADSHEET:
        if isinstance(data, str):
            raise TypeError("spreadsheet content must be bytes")
        rows: list[Mapping[Any, Any]] = read_workbook_rows(data)
    elif fmt == DELIMITED_TEXT:
        rows = parse_csv_text(_decode(data))
    else:
        raise ValueError(f"Unknown timetable format: {fmt!r}")

    return normalize_rows(rows, strict=strict)


def find_timetable_file(data_dir: Union[str, Path]) -> Path:
    """
    Pick the timetable file inside data_dir: a workbook wins over CSV.
    """
    directory = Path(data_dir)
    if not directory.is_dir():
        raise TimetableSourceError(f"Data directory not found: {directory}")

    files = sorted(p for p in directory.iterdir() if p.is_file())
    for suffixes in (_SPREADSHEET_SUFFIXES + _LEGACY_SUFFIXES, (".csv",)):
        for p in files:
            if p.suffix.lower() in suffixes:
                return p

    raise TimetableSourceError(f"No timetable file (.xlsx/.xls/.csv) found in {directory}")


def format_for_path(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix in _SPREADSHEET_SUFFIXES:
        return SPREADSHEET
    if suffix in _TEXT_SUFFIXES:
        return DELIMITED_TEXT
    if suffix in _LEGACY_SUFFIXES:
        raise TimetableSourceError(f"Legacy .xls workbooks are not supported, save {path.name} as .xlsx")
    raise TimetableSourceError(f"Unsupported timetable file type: {path.name}")


def load_timetable(path: Optional[Union[str, Path]] = None, strict: bool = False) -> list[Course]:
    """
    Load and normalize a timetable from a file or a directory.

    Without a path the default data directory is searched.
    """
    target = Path(path) if path is not None else default_data_dir()
    if target.is_dir():
        target = find_timetable_file(target)
    elif not target.exists():
        raise TimetableSourceError(f"Timetable not found: {target}")

    fmt = format_for_path(target)
    logger.info("Loading timetable %s (%s)", target, fmt)

    try:
        data = target.read_bytes()
    except OSError as exc:
        raise TimetableSourceError(f"Cannot read {target}: {exc}") from exc

    courses = parse_source(data, fmt, strict=strict)
    logger.info("Loaded %d courses from %s", len(courses), target.name)
    return courses
