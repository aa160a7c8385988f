"""WeekId value type: one Monday-to-Sunday week, written "YYYY-Www".

Numbering rule: week 1 of a year is the week whose Monday is the first Monday
on or after January 1st, and each following Monday starts the next week.
January days before that first Monday belong to the last week of the previous
year. This is NOT ISO-8601 (which keys week 1 on the first Thursday); stored
plans are keyed with this convention, so do not switch rules without migrating
them.
"""
import re
from datetime import date, timedelta
from functools import total_ordering

from planner.domain.errors import InvalidWeekIdError
from planner.utilities.constants import MAX_YEAR, MIN_YEAR, WEEK_ID_PATTERN

_WEEK_ID_RE = re.compile(WEEK_ID_PATTERN)


def first_monday(year: int) -> date:
    """Monday of week 1: the first Monday on or after January 1st."""
    jan1 = date(year, 1, 1)
    return jan1 + timedelta(days=(7 - jan1.weekday()) % 7)


def weeks_in_year(year: int) -> int:
    """Number of Mondays in the year, i.e. 52 or 53."""
    return (date(year, 12, 31) - first_monday(year)).days // 7 + 1


@total_ordering
class WeekId:
    __slots__ = ("year", "week")

    def __init__(self, year: int, week: int):
        label = f"{year}-W{week}"
        if not isinstance(year, int) or isinstance(year, bool):
            raise InvalidWeekIdError(label, "year must be an integer")
        if not isinstance(week, int) or isinstance(week, bool):
            raise InvalidWeekIdError(label, "week must be an integer")
        if not MIN_YEAR <= year <= MAX_YEAR:
            raise InvalidWeekIdError(label, f"year must be between {MIN_YEAR} and {MAX_YEAR}")
        last = weeks_in_year(year)
        if not 1 <= week <= last:
            raise InvalidWeekIdError(label, f"{year} has weeks 1..{last}")
        self.year = year
        self.week = week

    @classmethod
    def parse(cls, value) -> "WeekId":
        """Decode "YYYY-Www". WeekId instances are returned unchanged."""
        if isinstance(value, WeekId):
            return value
        if not isinstance(value, str):
            raise InvalidWeekIdError(value, "expected a string")
        match = _WEEK_ID_RE.fullmatch(value)
        if match is None:
            raise InvalidWeekIdError(value)
        return cls(int(match.group(1)), int(match.group(2)))

    def monday(self) -> date:
        return first_monday(self.year) + timedelta(weeks=self.week - 1)

    def sunday(self) -> date:
        return self.monday() + timedelta(days=6)

    def __str__(self) -> str:
        return f"{self.year}-W{self.week:02d}"

    def __repr__(self) -> str:
        return f"WeekId('{self}')"

    def __eq__(self, other):
        if not isinstance(other, WeekId):
            return NotImplemented
        return (self.year, self.week) == (other.year, other.week)

    def __lt__(self, other):
        if not isinstance(other, WeekId):
            return NotImplemented
        return (self.year, self.week) < (other.year, other.week)

    def __hash__(self):
        return hash((self.year, self.week))
