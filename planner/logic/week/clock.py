"""Week arithmetic: week start, week identifier and week navigation.

All functions are pure. Navigation is closed-form: the Monday of a WeekId is
first_monday(year) + 7 * (week - 1), so previous/next are exact for every
valid identifier, across year boundaries included.
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple, Union

from planner.domain.WeekId import WeekId, first_monday, weeks_in_year
from planner.utilities.constants import LEGACY_SEARCH_ATTEMPTS

logger = logging.getLogger(__name__)

WeekIdLike = Union[WeekId, str]


def get_week_start(value: date) -> date:
    """Monday on or before the given date. Sunday maps back six days, not forward."""
    if isinstance(value, datetime):
        value = value.date()
    return value - timedelta(days=value.weekday())


def get_week_identifier(value: date) -> WeekId:
    monday = get_week_start(value)
    year = monday.year
    week = (monday - date(year, 1, 1)).days // 7 + 1
    return WeekId(year, week)


def current_week_id(today: Optional[date] = None) -> WeekId:
    return get_week_identifier(today or date.today())


def get_previous_week_id(week_id: WeekIdLike) -> WeekId:
    return get_week_identifier(WeekId.parse(week_id).monday() - timedelta(days=7))


def get_next_week_id(week_id: WeekIdLike) -> WeekId:
    return get_week_identifier(WeekId.parse(week_id).monday() + timedelta(days=7))


def week_days(week_id: WeekIdLike) -> List[date]:
    monday = WeekId.parse(week_id).monday()
    return [monday + timedelta(days=i) for i in range(7)]


def search_previous_week_id(week_id: WeekIdLike, max_attempts: int = LEGACY_SEARCH_ATTEMPTS) -> Tuple[WeekId, bool]:
    """Bounded fixed-point search used by earlier releases to find the previous week.

    Guesses Jan 1 + 7 * week days, aligns to Monday, then nudges by one week
    toward the target until the forward formula agrees or max_attempts is hit.
    A year mismatch for target weeks 6..49 stops the search early.

    Returns (previous week, converged). When converged is False the result is
    only approximate; get_previous_week_id() is always exact and should be used
    for navigation.
    """
    target = WeekId.parse(week_id)
    monday = get_week_start(date(target.year, 1, 1) + timedelta(days=target.week * 7))
    found = get_week_identifier(monday)

    attempts = 0
    while found != target and attempts < max_attempts:
        if found.year != target.year and 5 < target.week < 50:
            break
        if found.week > target.week:
            monday -= timedelta(days=7)
        elif found.week < target.week:
            monday += timedelta(days=7)
        found = get_week_identifier(monday)
        attempts += 1

    converged = found == target
    if not converged:
        logger.warning("Week search for %s did not converge after %d attempts (stopped at %s)",
                       target, attempts, found)
    return get_week_identifier(monday - timedelta(days=7)), converged


__all__ = [
    "get_week_start", "get_week_identifier", "current_week_id", "get_previous_week_id",
    "get_next_week_id", "week_days", "search_previous_week_id", "first_monday", "weeks_in_year",
]
