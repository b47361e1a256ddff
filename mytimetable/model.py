"""
Central data model definitions used across the project.

This module defines the canonical structure of a Course so that:
- all modules share the same field names
- CSV and workbook rows end up in exactly the same shape
- query and conflict code never has to know which spreadsheet a course came from
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


# 6-day academic week, Sunday is not representable
DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


@dataclass(frozen=True)
class Course:
    """
    Represents one timetable row after normalization.

    serial is the 1-based position of the row in the source sheet. It is
    NOT an identity key: it changes on every re-parse and may have gaps,
    because rejected rows keep their position.
    course_code is the identity key used for conflict comparisons.
    """

    serial: int
    course_code: str
    course_name: str = ""
    credits: float = 0.0
    faculty: str = ""
    slot: str = ""
    room: str = ""
    major: str = ""
    day: str = ""
    start_time: str = ""
    end_time: str = ""
    course_type: str = ""
    component: str = ""
    open_as_uwe: bool = False
    remarks: str = ""

    @property
    def has_schedule(self) -> bool:
        return bool(self.day and self.start_time and self.end_time)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
