"""
Unit tests for header resolution.

Resolution contract:
- header names are compared lower-case without whitespace / . / _ / -
- exact key first, then "normalized header contains normalized synonym"
- synonyms are tried in order, first hit wins
- no match -> "" (numbers: 0)
"""

import unittest
from datetime import datetime, time

from mytimetable.headers import (
    FIELD_SYNONYMS,
    MissingColumnsError,
    cell_to_text,
    missing_fields,
    normalize_header,
    resolve_flag,
    resolve_number,
    resolve_value,
)


class TestNormalizeHeader(unittest.TestCase):
    def test_strips_case_space_and_punctuation(self) -> None:
        self.assertEqual(normalize_header("Course Code"), "coursecode")
        self.assertEqual(normalize_header("course_code"), "coursecode")
        self.assertEqual(normalize_header(" Course.Code-No "), "coursecodeno")


class TestResolveValue(unittest.TestCase):
    def test_every_synonym_resolves_alone(self) -> None:
        for field, keys in FIELD_SYNONYMS.items():
            for header in keys:
                for spelling in (header, header.upper(), header.lower().replace(" ", "_")):
                    with self.subTest(field=field, header=spelling):
                        self.assertEqual(resolve_value({spelling: " value "}, keys), "value")

    def test_contains_match(self) -> None:
        row = {"Course Code (new)": "CS101", "Course Title": "Intro"}
        self.assertEqual(resolve_value(row, FIELD_SYNONYMS["course_code"]), "CS101")
        self.assertEqual(resolve_value(row, FIELD_SYNONYMS["course_name"]), "Intro")

    def test_first_synonym_wins(self) -> None:
        row = {"Code": "OLD", "Course Code": "CS101"}
        self.assertEqual(resolve_value(row, FIELD_SYNONYMS["course_code"]), "CS101")

    def test_none_cells_are_skipped(self) -> None:
        row = {"Course Code": None, "Code": "CS9"}
        self.assertEqual(resolve_value(row, FIELD_SYNONYMS["course_code"]), "CS9")

    def test_empty_string_is_a_match(self) -> None:
        # "" is a real value (not None), so the search stops there
        row = {"Course Code": "", "Code": "CS9"}
        self.assertEqual(resolve_value(row, FIELD_SYNONYMS["course_code"]), "")

    def test_no_match_returns_empty(self) -> None:
        self.assertEqual(resolve_value({"Foo": "bar"}, FIELD_SYNONYMS["faculty"]), "")
        self.assertEqual(resolve_value({}, FIELD_SYNONYMS["faculty"]), "")


class TestResolveNumberAndFlag(unittest.TestCase):
    def test_numbers(self) -> None:
        keys = FIELD_SYNONYMS["credits"]
        self.assertEqual(resolve_number({"Credits": "3"}, keys), 3.0)
        self.assertEqual(resolve_number({"Credit Hours": "1.5"}, keys), 1.5)
        self.assertEqual(resolve_number({"Credits": 4.0}, keys), 4.0)

    def test_bad_numbers_become_zero(self) -> None:
        keys = FIELD_SYNONYMS["credits"]
        self.assertEqual(resolve_number({"Credits": "abc"}, keys), 0.0)
        self.assertEqual(resolve_number({"Credits": ""}, keys), 0.0)
        self.assertEqual(resolve_number({"Credits": "nan"}, keys), 0.0)
        self.assertEqual(resolve_number({"Credits": "-2"}, keys), 0.0)
        self.assertEqual(resolve_number({}, keys), 0.0)

    def test_flag(self) -> None:
        keys = FIELD_SYNONYMS["open_as_uwe"]
        self.assertTrue(resolve_flag({"Open as UWE": "Yes"}, keys))
        self.assertTrue(resolve_flag({"UWE": "x"}, keys))
        self.assertFalse(resolve_flag({"UWE": "No"}, keys))
        self.assertFalse(resolve_flag({}, keys))


class TestCellToText(unittest.TestCase):
    def test_typed_cells(self) -> None:
        self.assertEqual(cell_to_text(None), "")
        self.assertEqual(cell_to_text(3.0), "3")
        self.assertEqual(cell_to_text(2.5), "2.5")
        self.assertEqual(cell_to_text(101), "101")
        self.assertEqual(cell_to_text(time(9, 30)), "09:30")
        self.assertEqual(cell_to_text(datetime(2024, 1, 1, 14, 30)), "14:30")
        self.assertEqual(cell_to_text(datetime(2024, 3, 5)), "2024-03-05")
        self.assertEqual(cell_to_text("  LEC1 "), "LEC1")


class TestMissingFields(unittest.TestCase):
    def test_required_fields(self) -> None:
        self.assertEqual(missing_fields(["Code", "Name"]), [])
        self.assertEqual(missing_fields(["Title", "Faculty"]), ["course_code"])

    def test_error_lists_fields(self) -> None:
        err = MissingColumnsError(["course_code"])
        self.assertIn("course_code", str(err))
        self.assertIsInstance(err, ValueError)


if __name__ == "__main__":
    unittest.main()
