"""
Batch and search filters over the canonical course list.

These are plain functions: the shell calls them again whenever the course
list, the batch input or the search text changes.
"""

from __future__ import annotations

import re
from typing import Iterable, Union

from mytimetable.model import Course


MIN_QUERY_LENGTH = 2
SEARCH_LIMIT = 30

_SPLIT_RE = re.compile(r"[\s,]+")


def split_batches(text: str) -> list[str]:
    """
    'cse, ece 2024' -> ['CSE', 'ECE', '2024']
    """
    return [t for t in _SPLIT_RE.split((text or "").upper()) if t]


def _batch_tokens(batches: Union[str, Iterable[str]]) -> list[str]:
    if isinstance(batches, str):
        return split_batches(batches)
    out: list[str] = []
    for b in batches:
        out.extend(split_batches(b))
    return out


def matches_batch(course: Course, batches: Union[str, Iterable[str]]) -> bool:
    """
    Bidirectional containment: major token inside a user token or the other
    way round. Intentionally loose ("A" matches every major with an A in it).
    """
    tokens = _batch_tokens(batches)
    if not tokens:
        return False
    majors = split_batches(course.major)
    return any(m in t or t in m for m in majors for t in tokens)


def batch_courses(courses: Iterable[Course], batches: Union[str, Iterable[str]]) -> list[Course]:
    """
    Courses allocated to any of the given batch codes, in course-list order.
    """
    tokens = _batch_tokens(batches)
    if not tokens:
        return []
    return [c for c in courses if matches_batch(c, tokens)]


def search_courses(courses: Iterable[Course], query: str, limit: int = SEARCH_LIMIT) -> list[Course]:
    """
    Case-insensitive substring search in course code, name and faculty.

    Queries shorter than MIN_QUERY_LENGTH (after trimming) return nothing.
    """
    q = (query or "").strip().lower()
    if len(q) < MIN_QUERY_LENGTH:
        return []

    matches: list[Course] = []
    for c in courses:
        if q in c.course_code.lower() or q in c.course_name.lower() or q in c.faculty.lower():
            matches.append(c)
            if len(matches) >= limit:
                break
    return matches


def total_credits(courses: Iterable[Course]) -> float:
    return sum(c.credits for c in courses)
