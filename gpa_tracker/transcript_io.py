"""
Transcript import / export.

Export is always JSON. Import accepts the same structure as JSON or YAML
and rejects anything that does not match it exactly::

    [{"name": "Semester 1", "subjects": [{"name": "Calculus", "grade": "A", "credits": 3}]}]
"""

import json
import logging
from pathlib import PurePath
from typing import Any, Union

import yaml

from gpa_tracker.errors import TranscriptFormatError, ValidationError
from gpa_tracker.transcript import Course, Semester, Transcript

logger = logging.getLogger(__name__)

SEMESTER_KEYS = {"name", "subjects"}
SUBJECT_KEYS = {"name", "grade", "credits"}
FORMATS_BY_SUFFIX = {".json": "json", ".yml": "yaml", ".yaml": "yaml"}
EXPORT_FILE_NAME = "transcript.json"


# --- export ---

def transcript_to_data(transcript: Transcript) -> list:
    return [
        {
            "name": semester.name,
            "subjects": [
                {"name": course.name, "grade": course.grade, "credits": course.credits}
                for course in semester.courses
            ],
        }
        for semester in transcript
    ]


def dumps_transcript(transcript: Transcript, indent: Union[int, None] = 2) -> str:
    return json.dumps(transcript_to_data(transcript), ensure_ascii=False, indent=indent)


# --- import ---

def _check_keys(obj: dict, expected: set, where: str) -> None:
    missing = expected - obj.keys()
    if missing:
        raise TranscriptFormatError(f"{where}: missing field(s) {', '.join(sorted(missing))}")
    extra = set(obj) - expected
    if extra:
        raise TranscriptFormatError(
            f"{where}: unexpected field(s) {', '.join(sorted(map(str, extra)))}"
        )


def _subject_from_data(data: Any, where: str) -> Course:
    if not isinstance(data, dict):
        raise TranscriptFormatError(f"{where}: expected an object")
    _check_keys(data, SUBJECT_KEYS, where)
    if not isinstance(data["name"], str):
        raise TranscriptFormatError(f"{where}: name must be text")
    # 3.0 is not accepted as 3; the file must carry whole numbers
    if isinstance(data["credits"], float):
        raise TranscriptFormatError(f"{where}: credits must be a whole number")
    try:
        return Course.create(data["name"], data["credits"], data["grade"])
    except ValidationError as e:
        raise TranscriptFormatError(f"{where}: {e}") from e


def _semester_from_data(data: Any, where: str) -> Semester:
    if not isinstance(data, dict):
        raise TranscriptFormatError(f"{where}: expected an object")
    _check_keys(data, SEMESTER_KEYS, where)
    if not isinstance(data["name"], str):
        raise TranscriptFormatError(f"{where}: name must be text")
    subjects = data["subjects"]
    if not isinstance(subjects, list):
        raise TranscriptFormatError(f"{where}: subjects must be a list")
    courses = tuple(
        _subject_from_data(subject, f"{where}, subject {i + 1}")
        for i, subject in enumerate(subjects)
    )
    return Semester(name=data["name"], courses=courses)


def transcript_from_data(data: Any) -> Transcript:
    if not isinstance(data, list):
        raise TranscriptFormatError("Expected a list of semesters at the top level")
    return tuple(
        _semester_from_data(semester, f"Semester {i + 1}")
        for i, semester in enumerate(data)
    )


def loads_transcript(text: Union[str, bytes], fmt: str = "json") -> Transcript:
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise TranscriptFormatError("File is not UTF-8 text") from e
    if fmt == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise TranscriptFormatError(f"Invalid JSON: {e}") from e
    elif fmt == "yaml":
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise TranscriptFormatError(f"Invalid YAML: {e}") from e
    else:
        raise TranscriptFormatError(f"Unsupported format: {fmt}")
    return transcript_from_data(data)


def format_for_filename(filename: str) -> str:
    suffix = PurePath(filename or "").suffix.lower()
    try:
        return FORMATS_BY_SUFFIX[suffix]
    except KeyError:
        raise TranscriptFormatError("Unsupported file format") from None


def parse_upload(filename: str, payload: Union[str, bytes]) -> Transcript:
    """Parse an uploaded transcript, picking the dialect from the file name."""
    fmt = format_for_filename(filename)
    try:
        transcript = loads_transcript(payload, fmt)
    except TranscriptFormatError as e:
        logger.warning("Rejected transcript upload %s: %s", filename, e)
        raise
    logger.info("Imported %s: %d semester(s)", filename, len(transcript))
    return transcript
