class GpaTrackerError(Exception):
    """Base class for all tracker errors."""


class ValidationError(GpaTrackerError):
    """Raised when a user-supplied value is rejected."""


class TranscriptFormatError(ValidationError):
    """Raised when an imported file does not match the transcript shape."""


class UnknownGradeError(ValidationError, KeyError):
    """Raised when a grade symbol is not in the grade-point table."""

    def __str__(self):
        return Exception.__str__(self)


class StorageError(GpaTrackerError):
    """Raised when the local transcript cache cannot be written."""


class ConfigError(GpaTrackerError):
    """Raised when settings cannot be loaded."""
