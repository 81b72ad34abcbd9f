import random

import pytest

from gpa_tracker.engine import (
    HISTORY_COLUMNS,
    SUMMARY_COLUMNS,
    compute_cgpa,
    compute_sgpa,
    history_frame,
    summary_frame,
    total_credits,
)
from gpa_tracker.grades import GRADE_SYMBOLS, points_of
from gpa_tracker.transcript import Course, Semester


def make_semester(name, *courses):
    return Semester(name, tuple(Course(*c) for c in courses))


def test_sgpa_two_courses():
    semester = make_semester("Semester 1", ("Course A", 3, "A"), ("Course B", 4, "B"))
    assert compute_sgpa(semester) == pytest.approx(24 / 7, abs=1e-9)


def test_empty_semester_is_zero():
    assert compute_sgpa(Semester("Semester 1")) == 0
    assert compute_cgpa([]) == 0
    assert compute_cgpa([Semester("Semester 1"), Semester("Semester 2")]) == 0


def test_sgpa_matches_weighted_formula():
    rng = random.Random(7)
    for _ in range(50):
        courses = [
            (f"C{i}", rng.randint(1, 6), rng.choice(GRADE_SYMBOLS))
            for i in range(rng.randint(1, 8))
        ]
        semester = make_semester("S", *courses)
        expected = sum(c * points_of(g) for _, c, g in courses) / sum(c for _, c, _ in courses)
        assert compute_sgpa(semester) == pytest.approx(expected, abs=1e-9)


def test_cgpa_weights_by_credits_not_by_semester():
    s1 = make_semester("Semester 1", ("A", 1, "A"))
    s2 = make_semester("Semester 2", ("B", 3, "C"))
    # (1*4 + 3*2) / 4, not the mean of the two SGPAs
    assert compute_cgpa([s1, s2]) == pytest.approx(2.5)


def test_cgpa_ignores_empty_semesters():
    s1 = make_semester("Semester 1", ("A", 3, "B"))
    assert compute_cgpa([s1, Semester("Semester 2")]) == pytest.approx(3.0)


def test_running_cgpa_is_idempotent():
    transcript = (
        make_semester("Semester 1", ("A", 3, "A-"), ("B", 2, "B+")),
        make_semester("Semester 2", ("C", 4, "C")),
        make_semester("Semester 3", ("D", 3, "F"), ("E", 1, "A+")),
    )
    forward = [compute_cgpa(transcript[:i + 1]) for i in range(len(transcript))]
    backward = [compute_cgpa(transcript[:i + 1]) for i in reversed(range(len(transcript)))]
    assert forward == list(reversed(backward))
    assert compute_cgpa(transcript[:2]) == compute_cgpa(transcript[:2])


def test_total_credits():
    transcript = (make_semester("S1", ("A", 3, "A")), make_semester("S2", ("B", 4, "B"), ("C", 2, "F")))
    assert total_credits(transcript) == 9


def test_summary_frame():
    transcript = (
        make_semester("Semester 1", ("Course A", 3, "A"), ("Course B", 4, "B")),
        Semester("Semester 2"),
        make_semester("Semester 3", ("Course C", 3, "C")),
    )
    df = summary_frame(transcript)
    assert list(df.columns) == SUMMARY_COLUMNS
    assert list(df["Semester"]) == ["Semester 1", "Semester 2", "Semester 3"]
    assert list(df["Credits"]) == [7, 0, 3]
    assert df["SGPA"].tolist() == pytest.approx([24 / 7, 0.0, 2.0])
    assert df["CGPA"].tolist() == pytest.approx([24 / 7, 24 / 7, 30 / 10])


def test_summary_frame_empty_transcript():
    df = summary_frame(())
    assert df.empty
    assert list(df.columns) == SUMMARY_COLUMNS


def test_history_frame():
    transcript = (make_semester("Semester 1", ("Calculus", 3, "A-")),)
    df = history_frame(transcript)
    assert list(df.columns) == HISTORY_COLUMNS
    assert df.iloc[0].to_dict() == {
        "Semester": "Semester 1", "Course": "Calculus", "Credits": 3, "Grade": "A-", "Points": 3.667,
    }
