"""
Transcript data model.

Courses and semesters are immutable values. Every edit below returns a new
``Transcript`` tuple and leaves its input untouched, so a session only ever
swaps the whole collection.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Tuple

from gpa_tracker.errors import ValidationError
from gpa_tracker.grades import validate_grade

DEFAULT_CREDITS = 3
DEFAULT_GRADE = "A"


def validate_credits(value: Any) -> int:
    """Credits must be a positive whole number; bools are rejected."""
    if isinstance(value, bool) or value is None:
        raise ValidationError("Credits must be a positive whole number")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"Credits must be a whole number, got {value}")
        value = int(value)
    if not isinstance(value, int):
        raise ValidationError(f"Credits must be a whole number, got {value!r}")
    if value <= 0:
        raise ValidationError(f"Credits must be positive, got {value}")
    return value


def validate_name(value: Any, what: str = "Name") -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{what} must be text")
    return value


@dataclass(frozen=True)
class Course:
    name: str
    credits: int
    grade: str

    @classmethod
    def create(cls, name: str, credits: Any, grade: Any) -> "Course":
        """Build a course, validating every field."""
        return cls(
            name=validate_name(name, "Course name"),
            credits=validate_credits(credits),
            grade=validate_grade(grade),
        )


@dataclass(frozen=True)
class Semester:
    name: str
    courses: Tuple[Course, ...] = field(default_factory=tuple)

    @property
    def credits(self) -> int:
        return sum(course.credits for course in self.courses)


Transcript = Tuple[Semester, ...]


def _check_index(items, index, what):
    if not 0 <= index < len(items):
        raise IndexError(f"{what} index {index} out of range")


def _replace_at(items, index, value):
    return items[:index] + (value,) + items[index + 1:]


def _remove_at(items, index):
    return items[:index] + items[index + 1:]


# --- semesters ---

def add_semester(transcript: Transcript) -> Transcript:
    semester = Semester(name=f"Semester {len(transcript) + 1}")
    return tuple(transcript) + (semester,)


def remove_semester(transcript: Transcript, index: int) -> Transcript:
    transcript = tuple(transcript)
    _check_index(transcript, index, "Semester")
    return _remove_at(transcript, index)


def rename_semester(transcript: Transcript, index: int, name: str) -> Transcript:
    transcript = tuple(transcript)
    _check_index(transcript, index, "Semester")
    semester = replace(transcript[index], name=validate_name(name, "Semester name"))
    return _replace_at(transcript, index, semester)


# --- courses ---

def add_course(
    transcript: Transcript,
    semester_index: int,
    credits: int = DEFAULT_CREDITS,
    grade: str = DEFAULT_GRADE,
) -> Transcript:
    transcript = tuple(transcript)
    _check_index(transcript, semester_index, "Semester")
    semester = transcript[semester_index]
    course = Course.create(f"Course {len(semester.courses) + 1}", credits, grade)
    semester = replace(semester, courses=semester.courses + (course,))
    return _replace_at(transcript, semester_index, semester)


def remove_course(transcript: Transcript, semester_index: int, course_index: int) -> Transcript:
    transcript = tuple(transcript)
    _check_index(transcript, semester_index, "Semester")
    semester = transcript[semester_index]
    _check_index(semester.courses, course_index, "Course")
    semester = replace(semester, courses=_remove_at(semester.courses, course_index))
    return _replace_at(transcript, semester_index, semester)


def _update_course(transcript, semester_index, course_index, **changes):
    transcript = tuple(transcript)
    _check_index(transcript, semester_index, "Semester")
    semester = transcript[semester_index]
    _check_index(semester.courses, course_index, "Course")
    course = replace(semester.courses[course_index], **changes)
    semester = replace(semester, courses=_replace_at(semester.courses, course_index, course))
    return _replace_at(transcript, semester_index, semester)


def set_course_name(transcript: Transcript, semester_index: int, course_index: int, name: str) -> Transcript:
    return _update_course(
        transcript, semester_index, course_index, name=validate_name(name, "Course name")
    )


def set_course_credits(transcript: Transcript, semester_index: int, course_index: int, credits: Any) -> Transcript:
    return _update_course(
        transcript, semester_index, course_index, credits=validate_credits(credits)
    )


def set_course_grade(transcript: Transcript, semester_index: int, course_index: int, grade: Any) -> Transcript:
    return _update_course(
        transcript, semester_index, course_index, grade=validate_grade(grade)
    )


def course_count(transcript: Transcript) -> int:
    return sum(len(semester.courses) for semester in transcript)
