"""
MyTimetable: course timetable spreadsheets -> batch lists, search and clash checks.
"""
