"""Occurrence expansion for recurrence rules.

Every function here is a pure function of its arguments: the same rule and
count always give the same dates, so the schedule preview and the task
materializer agree on every occurrence.
"""
from datetime import date, timedelta
from itertools import islice
from typing import Iterator

from models.recurrence_rule import DailyRule, MonthlyRule, RecurrenceRule, WeeklyRule
from utils.date_helpers import first_weekday_on_or_after, month_day, shift_month


def iter_occurrences(rule: RecurrenceRule, from_date: date | None = None) -> Iterator[date]:
    """Yield the rule's occurrences in increasing order, starting at or after from_date.

    Occurrences before the rule's start date are never produced. The
    iterator is unbounded; callers slice it.
    """
    first = rule.start_date if from_date is None else max(rule.start_date, from_date)

    if isinstance(rule, DailyRule):
        current = first
        while True:
            yield current
            current += timedelta(days=1)

    elif isinstance(rule, WeeklyRule):
        current = first_weekday_on_or_after(first, rule.day_of_week)
        while True:
            yield current
            current += timedelta(days=7)

    elif isinstance(rule, MonthlyRule):
        year, month = first.year, first.month
        # The clamped candidate in the first month may fall before the window
        if month_day(year, month, rule.day_of_month) < first:
            year, month = shift_month(year, month, 1)
        while True:
            yield month_day(year, month, rule.day_of_month)
            year, month = shift_month(year, month, 1)

    else:
        raise TypeError(f"Not a recurrence rule: {rule!r}")


def expand(rule: RecurrenceRule, count: int) -> list[date]:
    """Return exactly `count` occurrences of `rule`, earliest first."""
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    return list(islice(iter_occurrences(rule), count))


def occurrences_between(rule: RecurrenceRule, start: date, end: date) -> list[date]:
    """All occurrences d with start <= d <= end."""
    result = []
    if start > end:
        return result
    for d in iter_occurrences(rule, start):
        if d > end:
            break
        result.append(d)
    return result


def next_occurrence(rule: RecurrenceRule, on_or_after: date) -> date:
    return next(iter_occurrences(rule, on_or_after))
