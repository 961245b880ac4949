from datetime import date, datetime, timedelta

import pytest

from models.task import Task
from services.deadline import (
    badge_for, completed_late, day_bucket, resolve, time_remaining, urgency_sort,
)

NOW = datetime(2024, 3, 15, 12, 0, 0)


def make_task(task_id=1, due_at=None, status="pending", completed_at=None):
    return Task(
        id=task_id, title=f"Task {task_id}", kind="task", status=status,
        due_at=due_at, completed_at=completed_at,
    )


def test_no_deadline_is_never_overdue():
    verdict = resolve(make_task(), NOW)
    assert verdict.effective_deadline is None
    assert verdict.is_overdue is False


def test_future_deadline_is_not_overdue():
    due = NOW + timedelta(hours=1)
    verdict = resolve(make_task(due_at=due), NOW)
    assert verdict.effective_deadline == due
    assert not verdict.is_overdue


def test_past_deadline_is_overdue():
    assert resolve(make_task(due_at=NOW - timedelta(seconds=1)), NOW).is_overdue


def test_deadline_equal_to_now_is_not_overdue():
    assert not resolve(make_task(due_at=NOW), NOW).is_overdue


@pytest.mark.parametrize("status", ["completed", "cancelled"])
def test_closed_tasks_are_never_overdue(status):
    due = NOW - timedelta(days=30)
    verdict = resolve(make_task(due_at=due, status=status), NOW)
    assert verdict.effective_deadline == due
    assert not verdict.is_overdue


def test_in_progress_task_can_be_overdue():
    assert resolve(make_task(due_at=NOW - timedelta(days=1), status="in_progress"), NOW).is_overdue


def test_overdue_flips_exactly_once_as_now_advances():
    task = make_task(due_at=NOW)
    instants = [NOW + timedelta(minutes=m) for m in range(-3, 4)]
    flags = [resolve(task, t).is_overdue for t in instants]
    assert flags == [False, False, False, False, True, True, True]


def test_resolve_rejects_non_datetime_now():
    with pytest.raises(TypeError):
        resolve(make_task(due_at=NOW), date(2024, 3, 15))


def test_resolve_rejects_non_datetime_deadline():
    with pytest.raises(TypeError):
        resolve(make_task(due_at="2024-03-15"), NOW)


def test_urgency_sort_orders_overdue_dated_undated():
    undated = make_task(1)
    later = make_task(2, due_at=NOW + timedelta(days=3))
    soon = make_task(3, due_at=NOW + timedelta(hours=2))
    overdue_old = make_task(4, due_at=NOW - timedelta(days=5))
    overdue_new = make_task(5, due_at=NOW - timedelta(hours=1))
    done = make_task(6, due_at=NOW - timedelta(days=10), status="completed")

    ranked = urgency_sort([undated, later, soon, overdue_new, done, overdue_old], NOW)
    assert [t.id for t in ranked] == [4, 5, 6, 3, 2, 1]


def test_urgency_sort_keeps_input_order_for_ties():
    due = NOW + timedelta(days=1)
    tasks = [make_task(i, due_at=due) for i in (7, 3, 9)] + [make_task(i) for i in (2, 8)]
    assert [t.id for t in urgency_sort(tasks, NOW)] == [7, 3, 9, 2, 8]


def test_urgency_sort_does_not_mutate_input():
    tasks = [make_task(1), make_task(2, due_at=NOW - timedelta(days=1))]
    urgency_sort(tasks, NOW)
    assert [t.id for t in tasks] == [1, 2]


@pytest.mark.parametrize("due_at, status, expected", [
    (None, "pending", None),
    (NOW - timedelta(hours=1), "pending", "overdue"),
    (NOW + timedelta(hours=2), "pending", "today"),
    (NOW.replace(hour=8) + timedelta(days=1), "pending", "tomorrow"),
    (NOW + timedelta(days=4), "pending", "later"),
    (NOW - timedelta(days=2), "completed", "past"),
    (NOW - timedelta(hours=1), "cancelled", "today"),
])
def test_day_bucket(due_at, status, expected):
    assert day_bucket(make_task(due_at=due_at, status=status), NOW) == expected


def test_badge_for_open_and_closed_tasks():
    assert badge_for(make_task(), NOW) == "No deadline"
    assert badge_for(make_task(due_at=NOW - timedelta(hours=1)), NOW) == "Overdue"
    assert badge_for(make_task(due_at=NOW + timedelta(hours=1)), NOW) == "Due today"
    assert badge_for(make_task(due_at=datetime(2024, 3, 20, 9, 0)), NOW, "%Y-%m-%d") == "2024-03-20"
    done_today = make_task(due_at=NOW + timedelta(hours=1), status="completed")
    assert badge_for(done_today, NOW, "%Y-%m-%d") == "2024-03-15"


def test_completed_late():
    due = NOW
    assert completed_late(make_task(due_at=due, status="completed", completed_at=due + timedelta(minutes=1)))
    assert not completed_late(make_task(due_at=due, status="completed", completed_at=due))
    assert not completed_late(make_task(due_at=None, status="completed", completed_at=due))
    assert not completed_late(make_task(due_at=due, status="pending"))


def test_time_remaining():
    assert time_remaining(make_task(due_at=NOW + timedelta(hours=3)), NOW) == timedelta(hours=3)
    assert time_remaining(make_task(due_at=NOW - timedelta(hours=1)), NOW) == timedelta(hours=-1)
    assert time_remaining(make_task(), NOW) is None
    assert time_remaining(make_task(due_at=NOW, status="cancelled"), NOW) is None


def test_overdue_one_second_after_deadline():
    task = make_task(due_at=NOW)
    assert not resolve(task, NOW).is_overdue
    assert resolve(task, NOW + timedelta(seconds=1)).is_overdue
