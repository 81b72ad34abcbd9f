import pytest

from gpa_tracker.errors import UnknownGradeError, ValidationError
from gpa_tracker.grades import GRADE_POINTS, GRADE_SYMBOLS, points_of, validate_grade


def test_table_covers_the_fixed_symbol_set():
    assert GRADE_SYMBOLS == ("A+", "A", "A-", "B+", "B", "B-", "C+", "C", "C-", "D+", "D", "F")
    assert all(0.0 <= p <= 4.0 for p in GRADE_POINTS.values())


@pytest.mark.parametrize("grade,points", [
    ("A+", 4.0), ("A", 4.0), ("A-", 3.667), ("B+", 3.333), ("B", 3.0),
    ("C", 2.0), ("D+", 1.333), ("F", 0.0),
])
def test_points_of(grade, points):
    assert points_of(grade) == points


def test_points_never_increase_down_the_table():
    values = [GRADE_POINTS[g] for g in GRADE_SYMBOLS]
    assert values == sorted(values, reverse=True)


def test_table_is_read_only():
    with pytest.raises(TypeError):
        GRADE_POINTS["E"] = 0.5


@pytest.mark.parametrize("grade", ["E", "a", "", None, 4.0])
def test_unknown_grade_fails_closed(grade):
    with pytest.raises(UnknownGradeError):
        points_of(grade)


def test_unknown_grade_error_is_a_validation_error():
    with pytest.raises(ValidationError, match="Unknown grade"):
        points_of("Z")


def test_validate_grade_strips_whitespace():
    assert validate_grade(" B+ ") == "B+"


@pytest.mark.parametrize("value", [None, "", "   ", "a", "A++", 3])
def test_validate_grade_rejects(value):
    with pytest.raises(ValidationError):
        validate_grade(value)

