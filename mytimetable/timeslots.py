"""
Day codes and clock times.

Timetables write days as abbreviation codes ("MWF", "TTh"), as full names
("Monday, Wednesday") or as something in between. Times show up as
"9:00 AM", "14:30" or "0930". Both are turned into comparable values here:
- days  -> ordered list of canonical weekday names (see model.DAYS)
- times -> minutes since midnight
"""

from __future__ import annotations

import re
from typing import Optional

from mytimetable.model import DAYS


DAY_ABBREV: dict[str, tuple[str, ...]] = {
    "M": ("Monday",),
    "T": ("Tuesday",),
    "W": ("Wednesday",),
    "Th": ("Thursday",),
    "F": ("Friday",),
    "S": ("Saturday",),
    "MW": ("Monday", "Wednesday"),
    "MWF": ("Monday", "Wednesday", "Friday"),
    "TTh": ("Tuesday", "Thursday"),
    "TT": ("Tuesday", "Thursday"),
    "MF": ("Monday", "Friday"),
    "WF": ("Wednesday", "Friday"),
    "MT": ("Monday", "Tuesday"),
    "WTh": ("Wednesday", "Thursday"),
}

# single letters used by the left-to-right fallback tokenizer
_LETTER_DAYS = {
    "M": "Monday",
    "T": "Tuesday",
    "W": "Wednesday",
    "F": "Friday",
    "S": "Saturday",
}

_WS_RE = re.compile(r"\s+")
_TIME_RE = re.compile(r"(\d{1,2}):?(\d{2})?\s*(AM|PM)?", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Days
# ---------------------------------------------------------------------------


def parse_days(raw: Optional[str]) -> list[str]:
    """
    Convert a free-form day string into weekday names.

    Priority:
    1. whole string (whitespace removed) is a known code -> its days
    2. any full weekday names in the text -> those, Monday..Saturday order
    3. greedy scan: "Th" = Thursday, M/T/W/F/S = single day, rest skipped

    Result has no duplicates and keeps first-seen order.
    """
    if not raw:
        return []

    cleaned = _WS_RE.sub("", raw)
    if cleaned in DAY_ABBREV:
        return list(DAY_ABBREV[cleaned])

    lowered = raw.lower()
    full_days = [d for d in DAYS if d.lower() in lowered]
    if full_days:
        return full_days

    result: list[str] = []
    i = 0
    while i < len(cleaned):
        if cleaned[i : i + 2] == "Th":
            day = "Thursday"
            i += 2
        else:
            day = _LETTER_DAYS.get(cleaned[i])
            i += 1
        if day and day not in result:
            result.append(day)

    return result


# ---------------------------------------------------------------------------
# Times
# ---------------------------------------------------------------------------


def time_to_minutes(raw: Optional[str]) -> int:
    """
    '9:00 AM' -> 540, '2:30 PM' -> 870, '14:30' -> 870, '' -> 0.

    Not clamped: garbage like '99:99' gives an out-of-range number.
    """
    if not raw:
        return 0

    match = _TIME_RE.search(raw.strip().upper())
    if not match:
        return 0

    hours = int(match.group(1))
    minutes = int(match.group(2)) if match.group(2) else 0
    suffix = match.group(3)

    if suffix == "PM" and hours < 12:
        hours += 12
    if suffix == "AM" and hours == 12:
        hours = 0

    return hours * 60 + minutes


def minutes_to_time(mins: int) -> str:
    """
    540 -> '9:00 AM'. Display only.
    """
    hours, minutes = divmod(mins, 60)
    h = hours % 12 or 12
    ampm = "AM" if hours < 12 else "PM"
    return f"{h}:{minutes:02d} {ampm}"


def _overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    # half-open intervals: touching endpoints do not overlap
    return a_start < b_end and b_start < a_end


def times_overlap(start1: str, end1: str, start2: str, end2: str) -> bool:
    return _overlaps(
        time_to_minutes(start1),
        time_to_minutes(end1),
        time_to_minutes(start2),
        time_to_minutes(end2),
    )
