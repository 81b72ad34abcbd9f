"""
Local transcript cache.

The tracker reads the cache once when a session starts and rewrites it
whenever the transcript changes and is not empty. Entries older than
``max_age_days`` are treated as absent.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Union

from gpa_tracker.errors import StorageError, TranscriptFormatError
from gpa_tracker.transcript import Transcript
from gpa_tracker.transcript_io import dumps_transcript, loads_transcript

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_DAYS = 365
SECONDS_PER_DAY = 24 * 60 * 60


class TranscriptStore:
    """Interface for the transcript cache used by the tracker view."""

    def load(self) -> Optional[Transcript]:
        raise NotImplementedError

    def save(self, transcript: Transcript) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemoryTranscriptStore(TranscriptStore):
    """Keeps the transcript for the lifetime of the process only."""

    def __init__(self, transcript: Optional[Transcript] = None):
        self._transcript = tuple(transcript) if transcript is not None else None

    def load(self):
        return self._transcript

    def save(self, transcript):
        self._transcript = tuple(transcript)

    def clear(self):
        self._transcript = None


class FileTranscriptStore(TranscriptStore):
    """Stores the transcript as JSON in a file with a fixed lifetime."""

    def __init__(self, path: Union[str, Path], max_age_days: float = DEFAULT_MAX_AGE_DAYS, clock=time.time):
        self.path = Path(path).expanduser()
        self.max_age_days = max_age_days
        self._clock = clock

    @property
    def temp_path(self) -> Path:
        return self.path.with_suffix(self.path.suffix + ".tmp")

    def is_expired(self) -> bool:
        age = self._clock() - self.path.stat().st_mtime
        return age > self.max_age_days * SECONDS_PER_DAY

    def load(self):
        if not self.path.exists():
            logger.debug("No cached transcript at %s", self.path)
            return None
        try:
            if self.is_expired():
                logger.info("Cached transcript at %s is older than %s days, ignoring", self.path, self.max_age_days)
                return None
            transcript = loads_transcript(self.path.read_text(encoding="utf-8"))
        except (OSError, TranscriptFormatError) as e:
            logger.warning("Could not read cached transcript %s: %s", self.path, e)
            return None
        logger.info("Loaded %d semester(s) from %s", len(transcript), self.path)
        return transcript

    def save(self, transcript):
        # the cache is only ever replaced whole, never left half written
        temp = self.temp_path
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp.write_text(dumps_transcript(transcript), encoding="utf-8")
            temp.replace(self.path)
        except OSError as e:
            self._discard(temp)
            raise StorageError(f"Could not write {self.path}: {e}") from e
        logger.debug("Saved %d semester(s) to %s", len(transcript), self.path)

    def _discard(self, temp):
        try:
            temp.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove temporary file %s: %s", temp, e)

    def clear(self):
        if self.path.exists():
            self.path.unlink()
            logger.info("Removed cached transcript %s", self.path)
