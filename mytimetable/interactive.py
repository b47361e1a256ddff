from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from mytimetable.conflicts import get_conflicts
from mytimetable.model import DAYS, Course
from mytimetable.parse import TimetableSourceError, load_timetable
from mytimetable.queries import SEARCH_LIMIT, batch_courses, search_courses, split_batches, total_credits
from mytimetable.timeslots import parse_days, time_to_minutes


console = Console()


@dataclass
class Session:
    """
    Everything the menu loop works with. Derived lists (batch courses,
    conflicts) are recomputed from this on every pass, never stored.
    """

    courses: list[Course]
    data_path: Optional[Path] = None
    batches: list[str] = field(default_factory=list)
    selected: list[Course] = field(default_factory=list)

    @property
    def batch_courses(self) -> list[Course]:
        return batch_courses(self.courses, self.batches)

    def conflicts_for(self, course: Course) -> list[Course]:
        return get_conflicts(course, self.batch_courses, self.selected)

    def add(self, course: Course) -> bool:
        if any(c.course_code == course.course_code for c in self.selected):
            return False
        self.selected.append(course)
        return True

    def remove(self, course_code: str) -> bool:
        before = len(self.selected)
        self.selected = [c for c in self.selected if c.course_code != course_code]
        return len(self.selected) != before

    def reload(self) -> None:
        """
        Replace the course list wholesale and re-bind the selection by course code.
        """
        self.courses = load_timetable(self.data_path)
        by_code = {c.course_code: c for c in self.courses}
        self.selected = [by_code[c.course_code] for c in self.selected if c.course_code in by_code]


def weekly_grid(courses: list[Course]) -> dict[str, list[Course]]:
    """
    Bucket courses per weekday, each day sorted by start time.
    Courses without day/time are left out.
    """
    grid: dict[str, list[Course]] = {day: [] for day in DAYS}
    for c in courses:
        if not c.has_schedule:
            continue
        for day in parse_days(c.day):
            grid[day].append(c)
    for day in grid:
        grid[day].sort(key=lambda c: time_to_minutes(c.start_time))
    return grid


def _course_table(title: str, courses: list[Course], session: Session, numbered: bool = True) -> Table:
    table = Table(title=title, box=box.SIMPLE)
    if numbered:
        table.add_column("#", justify="right")
    table.add_column("Code", style="bold cyan")
    table.add_column("Name")
    table.add_column("Cr", justify="right")
    table.add_column("Faculty", style="magenta")
    table.add_column("When")
    table.add_column("Room")
    table.add_column("")

    for i, c in enumerate(courses, start=1):
        when = f"{c.day} {c.start_time}-{c.end_time}" if c.has_schedule else ""
        clash = "[red]conflict[/]" if session.conflicts_for(c) else ""
        cells = [c.course_code, c.course_name, f"{c.credits:g}", c.faculty, when, c.room, clash]
        if numbered:
            cells.insert(0, str(i))
        table.add_row(*cells)
    return table


def _pick(courses: list[Course], prompt: str) -> Optional[Course]:
    pick = console.input(prompt).strip()
    if not pick:
        return None
    if not pick.isdigit() or not (1 <= int(pick) <= len(courses)):
        console.print("Invalid choice.")
        return None
    return courses[int(pick) - 1]


def _add_with_warning(session: Session, course: Course) -> None:
    clashes = session.conflicts_for(course)
    if not session.add(course):
        console.print(f"Already selected: {course.course_code}")
        return
    console.print(f"Added: [bold cyan]{course.course_code}[/]")
    for other in clashes:
        console.print(f"  [red]Conflicts with[/] {other.course_code} ({other.day} {other.start_time}-{other.end_time})")


# ---------------------------------------------------------------------------
# Flows
# ---------------------------------------------------------------------------


def _flow_set_batch(session: Session) -> None:
    text = console.input("Batch code(s), e.g. 'CSE 2024' [blank = clear]: ")
    session.batches = split_batches(text)
    console.print(f"{len(session.batch_courses)} courses allocated to {' '.join(session.batches) or '(none)'}")


def _flow_batch(session: Session) -> None:
    courses = session.batch_courses
    if not courses:
        console.print("No batch courses. Set a batch first.")
        return
    console.print(_course_table("Batch courses", courses, session))
    course = _pick(courses, "Enter number to add [blank = back]: ")
    if course is not None:
        _add_with_warning(session, course)


def _flow_search_add(session: Session) -> None:
    while True:
        query = console.input("Search code, name or faculty [blank = back]: ").strip()
        if not query:
            return
        matches = search_courses(session.courses, query)
        if not matches:
            console.print("No results (type at least 2 characters).")
            continue
        console.print(_course_table(f"Search results (max {SEARCH_LIMIT})", matches, session))
        course = _pick(matches, "Enter number to add [blank = new search]: ")
        if course is not None:
            _add_with_warning(session, course)


def _flow_view_selected(session: Session) -> None:
    if not session.selected:
        console.print("No courses selected.")
        return
    console.print(_course_table("Selected courses", session.selected, session, numbered=False))
    console.print(f"Total credits: [bold]{total_credits(session.selected):g}[/]")


def _flow_remove(session: Session) -> None:
    if not session.selected:
        console.print("No courses selected.")
        return
    console.print(_course_table("Remove course", session.selected, session))
    course = _pick(session.selected, "Enter number to remove [blank = back]: ")
    if course is not None and session.remove(course.course_code):
        console.print(f"Removed: {course.course_code}")


def _flow_timetable(session: Session) -> None:
    courses = session.batch_courses + [c for c in session.selected if c not in session.batch_courses]
    grid = weekly_grid(courses)
    if not any(grid.values()):
        console.print("Nothing scheduled yet.")
        return

    table = Table(title="Weekly timetable", box=box.SIMPLE)
    for day in DAYS:
        table.add_column(day[:3])

    def cell(c: Course) -> str:
        label = f"{c.start_time}-{c.end_time}\n{c.course_code}"
        if get_conflicts(c, courses):
            return f"[red]{label}[/]"
        return label

    depth = max(len(v) for v in grid.values())
    for r in range(depth):
        table.add_row(*[cell(grid[d][r]) if r < len(grid[d]) else "" for d in DAYS])
    console.print(table)


def run_interactive(data_path: Optional[Path] = None) -> None:
    """
    Interactive menu loop. Raises TimetableSourceError if nothing can be loaded.
    """
    session = Session(courses=load_timetable(data_path), data_path=data_path)

    while True:
        console.print("\n=== MyTimetable (interactive) ===")
        console.print(
            f"Courses: {len(session.courses)} | Batch: {' '.join(session.batches) or '-'} "
            f"({len(session.batch_courses)}) | Selected: {len(session.selected)}"
        )
        choice = console.input(
            "\n[1] Set batch\n"
            "[2] Batch courses\n"
            "[3] Search + add course\n"
            "[4] View selected courses\n"
            "[5] Remove a course\n"
            "[6] Weekly timetable\n"
            "[7] Reload data\n"
            "[0] Exit\n"
            "Select: "
        ).strip()

        if choice == "0":
            console.print("Bye.")
            return

        if choice == "1":
            _flow_set_batch(session)
        elif choice == "2":
            _flow_batch(session)
        elif choice == "3":
            _flow_search_add(session)
        elif choice == "4":
            _flow_view_selected(session)
        elif choice == "5":
            _flow_remove(session)
        elif choice == "6":
            _flow_timetable(session)
        elif choice == "7":
            try:
                session.reload()
                console.print(f"Reloaded {len(session.courses)} courses.")
            except TimetableSourceError as exc:
                console.print(f"[red]Reload failed:[/] {exc}")
        else:
            console.print("Invalid choice.")
