"""Field normalization shared by Template and TaskInstance.

Every normalizer returns the canonical value or raises InvalidTaskFieldError,
so an update dict can be fully checked before anything is assigned.
"""
from datetime import datetime
from collections.abc import Iterable
from typing import Any, Dict, List, Optional

from planner.domain.errors import InvalidTaskFieldError
from planner.utilities.constants import (
    DAYS, MIN_DURATION, MAX_DURATION, MAX_HIERARCHY_DEPTH, TIME_FORMAT,
)

TEMPLATE_FIELDS = ("title", "goal", "hierarchy", "duration", "notes", "scheduled_day", "scheduled_time")
TASK_FIELDS = TEMPLATE_FIELDS + ("completed",)


def normalize_title(value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidTaskFieldError("title", value, "must be a non-empty string")
    return value.strip()


def normalize_text(value, field: str = "text") -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidTaskFieldError(field, value, "must be a string")
    return value


def normalize_day(value) -> Optional[str]:
    """Map a day name (any case) to its canonical form; None/'' means unscheduled."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        wanted = value.strip().lower()
        for day in DAYS:
            if day.lower() == wanted:
                return day
    raise InvalidTaskFieldError("scheduled_day", value, "expected a day name such as 'Monday'")


def normalize_time(value) -> Optional[str]:
    """Accept 'H:MM' or 'HH:MM' (24h) and return 'HH:MM'; None/'' means unscheduled."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), TIME_FORMAT).strftime(TIME_FORMAT)
        except ValueError:
            pass
    raise InvalidTaskFieldError("scheduled_time", value, "expected HH:MM")


def normalize_duration(value, bounded: bool = True) -> int:
    """Duration in minutes.

    Stored data only needs a positive integer; user input must also fall
    within MIN_DURATION..MAX_DURATION.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidTaskFieldError("duration", value, "must be an integer number of minutes")
    if value <= 0:
        raise InvalidTaskFieldError("duration", value, "must be positive")
    if bounded and not MIN_DURATION <= value <= MAX_DURATION:
        raise InvalidTaskFieldError("duration", value, f"must be between {MIN_DURATION} and {MAX_DURATION}")
    return value


def normalize_hierarchy(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise InvalidTaskFieldError("hierarchy", value, "must be a list of category labels")
    labels = []
    for label in value:
        if not isinstance(label, str):
            raise InvalidTaskFieldError("hierarchy", value, "labels must be strings")
        if label.strip():
            labels.append(label.strip())
    if len(labels) > MAX_HIERARCHY_DEPTH:
        raise InvalidTaskFieldError("hierarchy", value, f"at most {MAX_HIERARCHY_DEPTH} levels")
    return labels


def normalize_completed(value) -> bool:
    if not isinstance(value, bool):
        raise InvalidTaskFieldError("completed", value, "must be true or false")
    return value


_NORMALIZERS = {
    "title": normalize_title,
    "goal": lambda v: normalize_text(v, "goal"),
    "notes": lambda v: normalize_text(v, "notes"),
    "hierarchy": normalize_hierarchy,
    "duration": normalize_duration,
    "scheduled_day": normalize_day,
    "scheduled_time": normalize_time,
    "completed": normalize_completed,
}


def clean_fields(fields: Dict[str, Any], allowed: Iterable[str]) -> Dict[str, Any]:
    """Validate a partial update; unknown keys are rejected rather than ignored."""
    if not isinstance(fields, dict):
        raise InvalidTaskFieldError("fields", fields, "expected a mapping of field names to values")
    allowed = tuple(allowed)
    cleaned = {}
    for key, value in fields.items():
        if key not in allowed:
            raise InvalidTaskFieldError(key, value, "unknown field")
        cleaned[key] = _NORMALIZERS[key](value)
    return cleaned
