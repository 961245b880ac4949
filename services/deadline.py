"""Deadline and overdue derivation for tasks, audits and maintenance visits.

Works on anything exposing ``due_at`` (datetime or None) and ``status``.
The current instant is always passed in; nothing here reads the clock.
"""
from datetime import datetime, timedelta
from typing import Iterable, Protocol, TypeVar

from models.task import DeadlineVerdict
from utils.constants import CLOSED_STATUSES, STATUS_COMPLETED


class TaskLike(Protocol):
    due_at: datetime | None
    status: str


T = TypeVar("T", bound=TaskLike)


def is_closed(status: str) -> bool:
    return status in CLOSED_STATUSES


def _check_instant(value, name: str) -> None:
    if not isinstance(value, datetime):
        raise TypeError(f"{name} must be a datetime, got {type(value).__name__}")


def resolve(task: TaskLike, now: datetime) -> DeadlineVerdict:
    """Effective deadline and overdue flag for one task at instant `now`.

    Closed tasks and tasks without a deadline are never overdue. Otherwise a
    task is overdue only once `now` is strictly past its deadline.
    """
    _check_instant(now, "now")
    deadline = task.due_at
    if deadline is not None:
        _check_instant(deadline, "due_at")

    if is_closed(task.status) or deadline is None:
        return DeadlineVerdict(effective_deadline=deadline, is_overdue=False)
    return DeadlineVerdict(effective_deadline=deadline, is_overdue=now > deadline)


def urgency_key(verdict: DeadlineVerdict) -> tuple:
    deadline = verdict.effective_deadline
    return (
        not verdict.is_overdue,
        deadline is None,
        deadline or datetime.min,
    )


def urgency_sort(tasks: Iterable[T], now: datetime) -> list[T]:
    """Overdue first, then earliest deadline, undated last; stable for ties."""
    # sorted() is stable, so equal keys keep their input order
    return sorted(tasks, key=lambda t: urgency_key(resolve(t, now)))


def day_bucket(task: TaskLike, now: datetime) -> str | None:
    """'overdue' | 'past' | 'today' | 'tomorrow' | 'later', or None without a deadline.

    Only closed tasks land in 'past'; open ones past their deadline are overdue.
    """
    verdict = resolve(task, now)
    deadline = verdict.effective_deadline
    if deadline is None:
        return None
    if verdict.is_overdue:
        return "overdue"
    days = (deadline.date() - now.date()).days
    if days < 0:
        return "past"
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    return "later"


def badge_for(task: TaskLike, now: datetime, date_fmt: str = "%b %d") -> str:
    """Chip text for task lists: 'Overdue', 'Due today', or the due date."""
    bucket = day_bucket(task, now)
    if bucket is None:
        return "No deadline"
    if bucket == "overdue":
        return "Overdue"
    if bucket == "today" and not is_closed(task.status):
        return "Due today"
    return task.due_at.strftime(date_fmt)


def completed_late(task) -> bool:
    """True when a completed task was finished after its deadline."""
    if task.status != STATUS_COMPLETED or task.completed_at is None or task.due_at is None:
        return False
    return task.completed_at > task.due_at


def time_remaining(task: TaskLike, now: datetime) -> timedelta | None:
    """Time left until the deadline (negative when overdue), None when not applicable."""
    verdict = resolve(task, now)
    if verdict.effective_deadline is None or is_closed(task.status):
        return None
    return verdict.effective_deadline - now
