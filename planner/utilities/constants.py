from typing import Final

DAYS: Final[tuple[str, ...]] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)
DAY_LABELS: Final[dict[str, str]] = {day: day[:3] for day in DAYS}

# Task duration bounds, in minutes
DEFAULT_DURATION: Final[int] = 60
MIN_DURATION: Final[int] = 15
MAX_DURATION: Final[int] = 480

MAX_HIERARCHY_DEPTH: Final[int] = 4
TIME_FORMAT: Final[str] = "%H:%M"

WEEK_ID_PATTERN: Final[str] = r"([0-9]{4})-W([0-9]{2})"
# Weeks of year 1 and 9999 have neighbours (or Sundays) outside datetime.date
MIN_YEAR: Final[int] = 2
MAX_YEAR: Final[int] = 9998
LEGACY_SEARCH_ATTEMPTS: Final[int] = 10

CHECKBOX_OPEN: Final[str] = "[ ]"
CHECKBOX_DONE: Final[str] = "[x]"

EXPORT_VERSION: Final[str] = "1.0"
