"""
"What-if" grade improvement simulator.

The baseline (current CGPA and credits completed) is entered by hand and is
not derived from a transcript. Every output is ``None`` while the baseline is
incomplete so the UI can show "N/A" instead of a made-up number.
"""

import math
from dataclasses import dataclass, replace
from numbers import Real
from typing import Any, Iterable, Optional, Sequence, Tuple

import pandas as pd

from gpa_tracker.errors import ValidationError
from gpa_tracker.grades import points_of, validate_grade

IMPACT_COLUMNS = ["Course", "Current CGPA", "New CGPA", "GPA Improvement"]


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


@dataclass(frozen=True)
class Baseline:
    current_cgpa: Optional[float] = None
    total_credits: Optional[float] = None

    @property
    def is_available(self) -> bool:
        credits = _as_number(self.total_credits)
        return _as_number(self.current_cgpa) is not None and credits is not None and credits > 0

    @property
    def total_points(self) -> Optional[float]:
        if not self.is_available:
            return None
        return float(self.current_cgpa) * float(self.total_credits)


@dataclass(frozen=True)
class ImprovementEntry:
    name: str
    credits: float
    old_grade: str
    new_grade: str

    @property
    def point_delta(self) -> float:
        return (points_of(self.new_grade) - points_of(self.old_grade)) * self.credits


def _validate_entry_credits(value: Any) -> float:
    number = _as_number(value)
    if number is None or number <= 0:
        raise ValidationError("Credits must be a number greater than zero")
    return value


def _validate_entry_name(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Course name is required")
    return value


def make_entry(name: Any, credits: Any, old_grade: Any, new_grade: Any) -> ImprovementEntry:
    """Validate the add-course form and build an entry."""
    return ImprovementEntry(
        name=_validate_entry_name(name),
        credits=_validate_entry_credits(credits),
        old_grade=validate_grade(old_grade),
        new_grade=validate_grade(new_grade),
    )


# --- computations ---

def projected_cgpa(baseline: Baseline, entry: ImprovementEntry) -> Optional[float]:
    """CGPA if only ``entry`` changed, starting from the untouched baseline."""
    if not baseline.is_available:
        return None
    return _apply_delta(baseline, entry.point_delta)


def final_cgpa(baseline: Baseline, entries: Iterable[ImprovementEntry]) -> Optional[float]:
    """CGPA after applying every entry to the same running point total."""
    if not baseline.is_available:
        return None
    delta = 0.0
    for entry in entries:
        delta -= points_of(entry.old_grade) * entry.credits
        delta += points_of(entry.new_grade) * entry.credits
    return _apply_delta(baseline, delta)


def _apply_delta(baseline, delta):
    # cgpa * credits / credits is not always cgpa in floating point
    if delta == 0:
        return float(baseline.current_cgpa)
    return (baseline.total_points + delta) / float(baseline.total_credits)


def improvement_delta(baseline: Baseline, entry: ImprovementEntry) -> Optional[float]:
    projected = projected_cgpa(baseline, entry)
    if projected is None:
        return None
    return projected - float(baseline.current_cgpa)


def total_improvement(baseline: Baseline, entries: Iterable[ImprovementEntry]) -> Optional[float]:
    final = final_cgpa(baseline, entries)
    if final is None:
        return None
    return final - float(baseline.current_cgpa)


def impact_frame(baseline: Baseline, entries: Sequence[ImprovementEntry]) -> pd.DataFrame:
    if not baseline.is_available:
        return pd.DataFrame(columns=IMPACT_COLUMNS)
    current = float(baseline.current_cgpa)
    chart_data = [
        {
            "Course": entry.name,
            "Current CGPA": current,
            "New CGPA": projected_cgpa(baseline, entry),
            "GPA Improvement": improvement_delta(baseline, entry),
        }
        for entry in entries
    ]
    return pd.DataFrame(chart_data, columns=IMPACT_COLUMNS)


# --- entry list, owned by the page ---

Entries = Tuple[ImprovementEntry, ...]


def _check_index(entries, index):
    if not 0 <= index < len(entries):
        raise IndexError(f"Entry index {index} out of range")


def append_entry(entries: Entries, entry: ImprovementEntry) -> Entries:
    return tuple(entries) + (entry,)


def remove_entry(entries: Entries, index: int) -> Entries:
    entries = tuple(entries)
    _check_index(entries, index)
    return entries[:index] + entries[index + 1:]


def _update_entry(entries, index, **changes):
    entries = tuple(entries)
    _check_index(entries, index)
    entry = replace(entries[index], **changes)
    return entries[:index] + (entry,) + entries[index + 1:]


def set_entry_name(entries: Entries, index: int, name: Any) -> Entries:
    return _update_entry(entries, index, name=_validate_entry_name(name))


def set_entry_credits(entries: Entries, index: int, credits: Any) -> Entries:
    return _update_entry(entries, index, credits=_validate_entry_credits(credits))


def set_entry_old_grade(entries: Entries, index: int, grade: Any) -> Entries:
    return _update_entry(entries, index, old_grade=validate_grade(grade))


def set_entry_new_grade(entries: Entries, index: int, grade: Any) -> Entries:
    return _update_entry(entries, index, new_grade=validate_grade(grade))
