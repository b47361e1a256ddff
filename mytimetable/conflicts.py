"""
Conflict detection.

Two courses conflict when they share at least one weekday AND their time
intervals overlap:
    start < other_end AND other_start < end

Touching endpoints (one class ends at 10:00, the next starts at 10:00) are
NOT a conflict. A course without day, start or end never conflicts.
"""

from __future__ import annotations

from typing import Iterable

from mytimetable.model import Course
from mytimetable.timeslots import parse_days, times_overlap


def has_time_conflict(a: Course, b: Course) -> bool:
    """
    True if a and b meet on a common day at overlapping times.
    """
    if not a.has_schedule or not b.has_schedule:
        return False

    days_b = set(parse_days(b.day))
    if not any(d in days_b for d in parse_days(a.day)):
        return False

    return times_overlap(a.start_time, a.end_time, b.start_time, b.end_time)


def get_conflicts(candidate: Course, *contexts: Iterable[Course]) -> list[Course]:
    """
    All courses from the given context lists that clash with candidate.

    Contexts are concatenated in the order given (typically batch courses,
    then the current selection). Courses with the candidate's course_code
    are skipped so a course never conflicts with itself.
    """
    out: list[Course] = []
    for context in contexts:
        for existing in context:
            if existing.course_code == candidate.course_code:
                continue
            if has_time_conflict(candidate, existing):
                out.append(existing)
    return out


def find_conflicts(courses: list[Course]) -> list[tuple[Course, Course]]:
    """
    Find conflicting course pairs (A,B) in one working set, each pair once (i<j).
    """
    conflicts: list[tuple[Course, Course]] = []

    # O(n^2) is fine for a personal selection
    for i in range(len(courses)):
        a = courses[i]
        for j in range(i + 1, len(courses)):
            b = courses[j]
            if a.course_code == b.course_code:
                continue
            if has_time_conflict(a, b):
                conflicts.append((a, b))

    return conflicts
