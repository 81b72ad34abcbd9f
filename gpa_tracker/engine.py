"""
SGPA / CGPA computation.

Both averages are credit weighted. A set of courses with no credits has a
GPA of 0 so an empty semester shows "0.00" instead of failing.
"""

from typing import Iterable

import pandas as pd

from gpa_tracker.grades import points_of
from gpa_tracker.transcript import Course, Semester, Transcript

SUMMARY_COLUMNS = ["Semester", "Courses", "Credits", "SGPA", "CGPA"]
HISTORY_COLUMNS = ["Semester", "Course", "Credits", "Grade", "Points"]


def _weighted_gpa(courses: Iterable[Course]) -> float:
    total_credits = 0
    total_points = 0.0
    for course in courses:
        total_credits += course.credits
        total_points += points_of(course.grade) * course.credits
    return total_points / total_credits if total_credits > 0 else 0


def compute_sgpa(semester: Semester) -> float:
    return _weighted_gpa(semester.courses)


def compute_cgpa(semesters: Iterable[Semester]) -> float:
    """GPA over the courses of all given semesters.

    Pass ``transcript[:i + 1]`` to get the running CGPA shown at row ``i``.
    """
    return _weighted_gpa(course for semester in semesters for course in semester.courses)


def total_credits(semesters: Iterable[Semester]) -> int:
    return sum(semester.credits for semester in semesters)


def summary_frame(transcript: Transcript) -> pd.DataFrame:
    sem_data = []
    for index, semester in enumerate(transcript):
        sem_data.append({
            "Semester": semester.name,
            "Courses": len(semester.courses),
            "Credits": semester.credits,
            "SGPA": float(compute_sgpa(semester)),
            "CGPA": float(compute_cgpa(transcript[:index + 1])),
        })
    return pd.DataFrame(sem_data, columns=SUMMARY_COLUMNS)


def history_frame(transcript: Transcript) -> pd.DataFrame:
    rows = [
        {
            "Semester": semester.name,
            "Course": course.name,
            "Credits": course.credits,
            "Grade": course.grade,
            "Points": points_of(course.grade),
        }
        for semester in transcript
        for course in semester.courses
    ]
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)
