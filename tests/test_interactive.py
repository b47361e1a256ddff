"""
Tests for the interactive session state (no terminal needed).
"""

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from mytimetable import interactive
from mytimetable.interactive import Session, run_interactive, weekly_grid
from mytimetable.model import Course


def _course(code: str, day: str = "", start: str = "", end: str = "", major: str = "") -> Course:
    return Course(serial=1, course_code=code, day=day, start_time=start, end_time=end, major=major)


class TestSession(unittest.TestCase):
    def setUp(self) -> None:
        self.courses = [
            _course("CS101", "MW", "9:00", "10:00", "CSE"),
            _course("MA201", "M", "9:30", "10:30", "MATH"),
            _course("PH100", "F", "9:00", "10:00", "PHY"),
        ]
        self.session = Session(courses=self.courses)

    def test_batch_is_derived(self) -> None:
        self.assertEqual(self.session.batch_courses, [])
        self.session.batches = ["CSE"]
        self.assertEqual([c.course_code for c in self.session.batch_courses], ["CS101"])

    def test_add_remove(self) -> None:
        self.assertTrue(self.session.add(self.courses[0]))
        self.assertFalse(self.session.add(self.courses[0]))
        self.assertTrue(self.session.remove("CS101"))
        self.assertFalse(self.session.remove("CS101"))

    def test_conflicts_against_batch_and_selection(self) -> None:
        self.session.batches = ["CSE"]
        self.assertEqual([c.course_code for c in self.session.conflicts_for(self.courses[1])], ["CS101"])
        self.assertEqual(self.session.conflicts_for(self.courses[2]), [])

    def test_reload_rebinds_selection(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "tt.csv"
            p.write_text("Code,Name\nCS101,Renamed\n", encoding="utf-8")
            self.session.data_path = p
            self.session.add(self.courses[0])
            self.session.add(self.courses[2])
            self.session.reload()
        self.assertEqual([c.course_name for c in self.session.selected], ["Renamed"])


class TestWeeklyGrid(unittest.TestCase):
    def test_buckets_sorted(self) -> None:
        grid = weekly_grid(
            [
                _course("B", "M", "11:00", "12:00"),
                _course("A", "MW", "9:00 AM", "10:00 AM"),
                _course("X"),
            ]
        )
        self.assertEqual([c.course_code for c in grid["Monday"]], ["A", "B"])
        self.assertEqual([c.course_code for c in grid["Wednesday"]], ["A"])
        self.assertEqual(grid["Saturday"], [])


class TestRunInteractive(unittest.TestCase):
    def test_menu_round(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "tt.csv"
            p.write_text("Code,Name,Batch,Day,Start,End\nCS101,Intro,CSE,MW,9:00,10:00\n", encoding="utf-8")
            fake = mock.MagicMock()
            # set batch, add course #1 from batch list, view, timetable, exit
            fake.input.side_effect = ["1", "cse", "2", "1", "4", "6", "9", "0"]
            with mock.patch.object(interactive, "console", fake):
                run_interactive(p)
            printed = " ".join(str(call.args[0]) for call in fake.print.call_args_list if call.args)
            self.assertIn("Added", printed)
            self.assertIn("Invalid choice.", printed)
            self.assertIn("Bye.", printed)


if __name__ == "__main__":
    unittest.main()
