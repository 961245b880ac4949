"""Recurrence rules: a closed union of daily, weekly and monthly patterns.

Rules are immutable and validated on construction. Build them from loose
form or database fields with ``make_rule``; the variants can also be built
directly and run the same checks.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import ClassVar, Union

from utils.constants import PATTERN_DAILY, PATTERN_MONTHLY, PATTERN_WEEKLY, PATTERNS
from utils.date_helpers import parse_date


class InvalidRule(ValueError):
    """A recurrence rule that breaks its structural invariants."""


def _check_start_date(start_date) -> None:
    # datetime is a date subclass but carries a time component
    if not isinstance(start_date, date) or isinstance(start_date, datetime):
        raise InvalidRule("Start date is required.")


def _check_int(value, name: str, low: int, high: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRule(f"{name} is required for this pattern.")
    if not low <= value <= high:
        raise InvalidRule(f"{name} must be between {low} and {high}, got {value}.")


@dataclass(frozen=True)
class DailyRule:
    start_date: date
    pattern: ClassVar[str] = PATTERN_DAILY

    def __post_init__(self):
        _check_start_date(self.start_date)


@dataclass(frozen=True)
class WeeklyRule:
    start_date: date
    day_of_week: int    # 0=Sun..6=Sat
    pattern: ClassVar[str] = PATTERN_WEEKLY

    def __post_init__(self):
        _check_start_date(self.start_date)
        _check_int(self.day_of_week, "Day of week", 0, 6)


@dataclass(frozen=True)
class MonthlyRule:
    start_date: date
    day_of_month: int   # 1-31, clamped to the month's last day on expansion
    pattern: ClassVar[str] = PATTERN_MONTHLY

    def __post_init__(self):
        _check_start_date(self.start_date)
        _check_int(self.day_of_month, "Day of month", 1, 31)


RecurrenceRule = Union[DailyRule, WeeklyRule, MonthlyRule]


def make_rule(
    pattern: str,
    start_date: date | str | None,
    day_of_week: int | None = None,
    day_of_month: int | None = None,
) -> RecurrenceRule:
    """Build a rule from loose fields, rejecting any shape that doesn't match the pattern.

    start_date may be a date or a YYYY-MM-DD string. Only the day field that
    belongs to the pattern may be set.
    """
    if isinstance(start_date, str):
        parsed = parse_date(start_date)
        if parsed is None:
            raise InvalidRule(f"Invalid start date: {start_date!r}.")
        start_date = parsed

    if pattern == PATTERN_DAILY:
        if day_of_week is not None or day_of_month is not None:
            raise InvalidRule("A daily rule takes no day of week or day of month.")
        return DailyRule(start_date)
    if pattern == PATTERN_WEEKLY:
        if day_of_month is not None:
            raise InvalidRule("A weekly rule takes a day of week, not a day of month.")
        return WeeklyRule(start_date, day_of_week)
    if pattern == PATTERN_MONTHLY:
        if day_of_week is not None:
            raise InvalidRule("A monthly rule takes a day of month, not a day of week.")
        return MonthlyRule(start_date, day_of_month)
    raise InvalidRule(f"Unknown pattern {pattern!r}; expected one of {', '.join(PATTERNS)}.")
