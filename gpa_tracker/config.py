"""
Settings and logging setup.

Values come from the defaults below, then an optional YAML file
(``GPA_TRACKER_CONFIG``, default ``config.yaml``), then environment variables.
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Mapping, Optional

import yaml

from gpa_tracker.errors import ConfigError, ValidationError
from gpa_tracker.grades import validate_grade
from gpa_tracker.storage import FileTranscriptStore, MemoryTranscriptStore, TranscriptStore

logger = logging.getLogger(__name__)

CONFIG_ENV = "GPA_TRACKER_CONFIG"
DEFAULT_CONFIG_FILE = "config.yaml"

ENV_KEYS = {
    "GPA_TRACKER_STORAGE_PATH": "storage_path",
    "GPA_TRACKER_PERSIST": "persist",
    "GPA_TRACKER_MAX_AGE_DAYS": "max_age_days",
    "GPA_TRACKER_LOG_LEVEL": "log_level",
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    storage_path: str = "~/.gpa_tracker/transcript.json"
    persist: bool = True
    max_age_days: int = 365
    log_level: str = "INFO"
    default_credits: int = 3
    default_grade: str = "A"
    max_credits: int = 6


def _to_bool(value, key):
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"{key} must be true or false, got {value!r}")


def _to_positive_int(value, key):
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be a whole number, got {value!r}") from None
    if isinstance(value, bool) or number <= 0:
        raise ConfigError(f"{key} must be a positive whole number, got {value!r}")
    return number


def _coerce(settings: Settings, values: Mapping) -> Settings:
    known = {f.name for f in fields(Settings)}
    unknown = set(values) - known
    if unknown:
        raise ConfigError(f"Unknown setting(s): {', '.join(sorted(map(str, unknown)))}")

    changes = {}
    for key, value in values.items():
        if key == "persist":
            changes[key] = _to_bool(value, key)
        elif key in ("max_age_days", "default_credits", "max_credits"):
            changes[key] = _to_positive_int(value, key)
        elif key == "log_level":
            level = str(value).upper()
            if not isinstance(logging.getLevelName(level), int):
                raise ConfigError(f"Unknown log level {value!r}")
            changes[key] = level
        elif key == "default_grade":
            try:
                changes[key] = validate_grade(value)
            except ValidationError as e:
                raise ConfigError(f"default_grade: {e}") from e
        else:
            changes[key] = str(value)
    settings = replace(settings, **changes)
    if settings.default_credits > settings.max_credits:
        raise ConfigError("default_credits cannot exceed max_credits")
    return settings


def _read_config_file(path: Path) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_settings(config_file: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    environ = os.environ if environ is None else environ
    settings = Settings()

    path = Path(config_file or environ.get(CONFIG_ENV) or DEFAULT_CONFIG_FILE)
    if path.exists():
        settings = _coerce(settings, _read_config_file(path))
        logger.debug("Loaded settings from %s", path)
    elif config_file or environ.get(CONFIG_ENV):
        raise ConfigError(f"Config file {path} does not exist")

    overrides = {name: environ[env] for env, name in ENV_KEYS.items() if env in environ}
    if overrides:
        settings = _coerce(settings, overrides)
    return settings


def make_store(settings: Settings) -> TranscriptStore:
    if not settings.persist:
        return MemoryTranscriptStore()
    return FileTranscriptStore(settings.storage_path, max_age_days=settings.max_age_days)


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the package logger.

    Streamlit re-executes the page script on every interaction, so this must
    be safe to call repeatedly.
    """
    package_logger = logging.getLogger("gpa_tracker")
    package_logger.setLevel(level)
    if not any(getattr(h, "_gpa_tracker", False) for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._gpa_tracker = True
        package_logger.addHandler(handler)
