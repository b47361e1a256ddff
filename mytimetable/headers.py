"""
Header resolution (spreadsheet column name -> semantic field).

Timetable exports from different offices never agree on column names:
"Course Code", "coursecode", "Code" and "course_code" all mean the same
thing. Instead of requiring an exact schema, every semantic field has an
ordered list of synonyms and each row is searched for the first header that
matches one of them.

Matching rule:
- header and synonym are normalized (lower-case, no whitespace / . / _ / -)
- a raw exact lookup is tried first, then a substring scan where the
  normalized header must CONTAIN the normalized synonym
- synonyms are tried in order; the first synonym with any hit wins

A field that no header matches resolves to "" (or 0 for numbers).
Missing columns are never an error unless strict checking is asked for.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, time
from typing import Any, Iterable, Mapping, Sequence


_STRIP_RE = re.compile(r"[\s._-]")

_TRUE_FLAGS = {"yes", "y", "true", "1", "x"}


# ---------------------------------------------------------------------------
# Synonym table
# ---------------------------------------------------------------------------

# Order matters: the first synonym that hits any header wins.
FIELD_SYNONYMS: dict[str, tuple[str, ...]] = {
    "course_code": ("Course Code", "CourseCode", "Code", "coursenumber", "course_code"),
    "course_name": ("Course Name", "CourseName", "Name", "Title", "coursetitle"),
    "section": ("Section", "Sec"),
    "credits": ("Credits", "Credit", "Cr"),
    "faculty": ("Faculty", "Instructor", "Teacher", "Professor", "facultyname"),
    "room": ("Room", "Venue", "Location", "Classroom", "roomno"),
    "major": ("Batch", "Major", "Batches", "Program", "Department", "Dept"),
    "day": ("Day", "Days", "Weekday"),
    "start_time": ("Start Time", "StartTime", "Start", "From"),
    "end_time": ("End Time", "EndTime", "End", "To"),
    "course_type": ("Course Type", "CourseType", "Type", "Category"),
    "component": ("Component", "Comp", "ComponentType"),
    "open_as_uwe": ("Open as UWE", "OpenAsUWE", "UWE"),
    "remarks": ("Remarks", "Remark", "Notes", "Comments"),
}

# Fields that strict mode insists on
REQUIRED_FIELDS: tuple[str, ...] = ("course_code",)


class MissingColumnsError(ValueError):
    """
    Raised only in strict mode when required fields have no matching header.
    """

    def __init__(self, fields: Sequence[str]) -> None:
        self.fields = list(fields)
        super().__init__(f"No column found for required field(s): {', '.join(self.fields)}")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def normalize_header(text: Any) -> str:
    """
    'Course Code' -> 'coursecode', 'course_code' -> 'coursecode'
    """
    return _STRIP_RE.sub("", str(text).lower())


def cell_to_text(value: Any) -> str:
    """
    Turn one cell value into trimmed text.

    Workbook cells arrive typed: 3.0 should read "3", a time cell should read
    like something the time parser understands.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        # times typed into Excel often come back with a date attached
        if value.time() == time(0):
            return value.date().isoformat()
        return value.strftime("%H:%M")
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return str(value).strip()


def _find_header(headers: Iterable[Any], key: str) -> Any:
    """
    First header whose normalized form contains the normalized key, else None.
    """
    norm_key = normalize_header(key)
    if not norm_key:
        return None
    for header in headers:
        if norm_key in normalize_header(header):
            return header
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def resolve_value(row: Mapping[Any, Any], keys: Sequence[str], exact_first: bool = True) -> str:
    """
    Return the trimmed value of the best matching column, or "".

    For each synonym (in order) an exact raw-key lookup is attempted first,
    then the fuzzy contains-scan over the row's headers. A cell holding None
    counts as missing and the search goes on.
    """
    for key in keys:
        if exact_first and row.get(key) is not None:
            return cell_to_text(row[key])

        norm_key = normalize_header(key)
        if not norm_key:
            continue
        for header, value in row.items():
            if norm_key in normalize_header(header) and value is not None:
                return cell_to_text(value)

    return ""


def resolve_number(row: Mapping[Any, Any], keys: Sequence[str]) -> float:
    """
    Numeric wrapper around resolve_value(). Anything unparsable becomes 0.
    """
    text = resolve_value(row, keys)
    try:
        number = float(text)
    except ValueError:
        return 0.0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return number


def resolve_flag(row: Mapping[Any, Any], keys: Sequence[str]) -> bool:
    return resolve_value(row, keys).lower() in _TRUE_FLAGS


def missing_fields(
    headers: Iterable[Any],
    required: Sequence[str] = REQUIRED_FIELDS,
    synonyms: Mapping[str, Sequence[str]] = FIELD_SYNONYMS,
) -> list[str]:
    """
    List the required fields for which none of the headers matches any synonym.
    """
    headers = list(headers)
    out: list[str] = []
    for field in required:
        keys = synonyms.get(field, ())
        if not any(_find_header(headers, key) is not None for key in keys):
            out.append(field)
    return out
