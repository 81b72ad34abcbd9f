"""Letter grade to grade-point table on a 4.0 scale."""

from types import MappingProxyType
from typing import Any

from gpa_tracker.errors import UnknownGradeError, ValidationError

GRADE_POINTS = MappingProxyType({
    "A+": 4.0,
    "A": 4.0,
    "A-": 3.667,
    "B+": 3.333,
    "B": 3.0,
    "B-": 2.667,
    "C+": 2.333,
    "C": 2.0,
    "C-": 1.667,
    "D+": 1.333,
    "D": 1.0,
    "F": 0.0,
})

# Best grade first, the order the select boxes show them in
GRADE_SYMBOLS = tuple(GRADE_POINTS)


def points_of(grade: str) -> float:
    try:
        return GRADE_POINTS[grade]
    except (KeyError, TypeError):
        raise UnknownGradeError(f"Unknown grade: {grade!r}") from None


def validate_grade(value: Any) -> str:
    """Return the grade symbol for ``value`` or raise ``ValidationError``.

    Surrounding whitespace is ignored; case is significant ("a" is not "A").
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Grade is required")
    if not isinstance(value, str):
        raise ValidationError(f"Grade must be text, got {type(value).__name__}")
    symbol = value.strip()
    if symbol not in GRADE_POINTS:
        raise ValidationError(
            f"Unknown grade {symbol!r}; expected one of {', '.join(GRADE_SYMBOLS)}"
        )
    return symbol
