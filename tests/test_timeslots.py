import unittest

from mytimetable.timeslots import minutes_to_time, parse_days, time_to_minutes, times_overlap


class TestParseDays(unittest.TestCase):
    def test_abbreviation_codes(self) -> None:
        self.assertEqual(parse_days("MWF"), ["Monday", "Wednesday", "Friday"])
        self.assertEqual(parse_days("TTh"), ["Tuesday", "Thursday"])
        self.assertEqual(parse_days("TT"), ["Tuesday", "Thursday"])
        self.assertEqual(parse_days("Th"), ["Thursday"])
        self.assertEqual(parse_days("S"), ["Saturday"])

    def test_whitespace_is_ignored_for_codes(self) -> None:
        self.assertEqual(parse_days(" M W F "), ["Monday", "Wednesday", "Friday"])

    def test_empty(self) -> None:
        self.assertEqual(parse_days(""), [])
        self.assertEqual(parse_days(None), [])

    def test_full_names_in_week_order(self) -> None:
        self.assertEqual(parse_days("Monday, Wednesday"), ["Monday", "Wednesday"])
        self.assertEqual(parse_days("friday / TUESDAY"), ["Tuesday", "Friday"])

    def test_greedy_tokenizer(self) -> None:
        self.assertEqual(parse_days("MTh"), ["Monday", "Thursday"])
        self.assertEqual(parse_days("Tu"), ["Tuesday"])
        self.assertEqual(parse_days("M/W"), ["Monday", "Wednesday"])

    def test_tokenizer_deduplicates(self) -> None:
        self.assertEqual(parse_days("MWM"), ["Monday", "Wednesday"])

    def test_sunday_is_not_a_day(self) -> None:
        self.assertEqual(parse_days("Sunday"), ["Saturday"])  # capital S of Sunday
        self.assertEqual(parse_days("sun"), [])


class TestTimeToMinutes(unittest.TestCase):
    def test_twelve_hour_clock(self) -> None:
        self.assertEqual(time_to_minutes("9:00 AM"), 540)
        self.assertEqual(time_to_minutes("2:30 PM"), 870)
        self.assertEqual(time_to_minutes("12:00 AM"), 0)
        self.assertEqual(time_to_minutes("12:30 PM"), 750)
        self.assertEqual(time_to_minutes("1pm"), 780)

    def test_twenty_four_hour_clock(self) -> None:
        self.assertEqual(time_to_minutes("14:30"), 870)
        self.assertEqual(time_to_minutes("14:30 PM"), 870)
        self.assertEqual(time_to_minutes("0930"), 570)
        self.assertEqual(time_to_minutes("8"), 480)

    def test_garbage(self) -> None:
        self.assertEqual(time_to_minutes(""), 0)
        self.assertEqual(time_to_minutes("TBA"), 0)

    def test_not_clamped(self) -> None:
        self.assertEqual(time_to_minutes("99:99"), 99 * 60 + 99)


class TestMinutesToTime(unittest.TestCase):
    def test_format(self) -> None:
        self.assertEqual(minutes_to_time(0), "12:00 AM")
        self.assertEqual(minutes_to_time(540), "9:00 AM")
        self.assertEqual(minutes_to_time(720), "12:00 PM")
        self.assertEqual(minutes_to_time(870), "2:30 PM")


class TestTimesOverlap(unittest.TestCase):
    def test_half_open(self) -> None:
        self.assertTrue(times_overlap("9:00", "10:00", "9:59", "11:00"))
        self.assertFalse(times_overlap("9:00", "10:00", "10:00", "11:00"))
        self.assertTrue(times_overlap("9:00 AM", "12:00 PM", "10:00", "10:30"))


if __name__ == "__main__":
    unittest.main()
