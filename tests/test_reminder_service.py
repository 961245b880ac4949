from datetime import date, datetime, timedelta

from services.reminder_service import Reminder


def add_weekly(schedule_service, **overrides):
    fields = dict(
        name="Safety walk", kind="audit", pattern="weekly",
        start_date="2024-01-01", start_time="10:00", duration_minutes=45,
        day_of_week=1,
    )
    fields.update(overrides)
    return schedule_service.create(**fields)


def test_reminders_by_severity(task_service, schedule_service, reminder_service, fixed_now):
    # fixed_now is Friday 2024-03-15; next Monday is 3 days away
    add_weekly(schedule_service)
    today_task = task_service.create("Sign off logs", due_at=fixed_now + timedelta(hours=4))
    late_task = task_service.create("Renew permit", due_at=fixed_now - timedelta(days=1))
    task_service.create("Someday", due_at=fixed_now + timedelta(days=5))

    reminders = reminder_service.get_reminders(fixed_now, upcoming_days=7)
    assert [(r.type, r.severity) for r in reminders] == [
        ("overdue_task", "error"),
        ("due_today_task", "warning"),
        ("upcoming_schedule", "info"),
    ]
    assert reminders[0].key == f"task:{late_task.id}"
    assert reminders[1].key == f"task:{today_task.id}"
    assert "in 3 days" in reminders[2].title


def test_closed_tasks_raise_no_reminders(task_service, reminder_service, fixed_now):
    task = task_service.create("Old", due_at=fixed_now - timedelta(days=3))
    task_service.cancel(task.id)
    assert reminder_service.get_reminders(fixed_now) == []


def test_schedule_outside_window_is_quiet(schedule_service, reminder_service, fixed_now):
    add_weekly(schedule_service)
    assert reminder_service.get_reminders(fixed_now, upcoming_days=2) == []


def test_schedule_due_today(schedule_service, reminder_service, fixed_now):
    add_weekly(schedule_service, day_of_week=5)  # Friday
    [reminder] = reminder_service.get_reminders(fixed_now)
    assert "today" in reminder.title


def test_paused_schedule_is_quiet(schedule_service, reminder_service, fixed_now):
    s = add_weekly(schedule_service)
    schedule_service.set_active(s.id, False)
    assert reminder_service.get_reminders(fixed_now) == []


def test_dismissed_keys_are_filtered(task_service, reminder_service, fixed_now):
    task = task_service.create("Renew permit", due_at=fixed_now - timedelta(days=1))
    assert reminder_service.get_reminders(fixed_now, dismissed_keys={f"task:{task.id}"}) == []


def test_compute_expiry(task_service, schedule_service, reminder_service, fixed_now):
    ref = fixed_now.date()
    late = task_service.create("Late", due_at=fixed_now - timedelta(days=4))
    ahead = task_service.create("Ahead", due_at=fixed_now + timedelta(days=2))
    s = add_weekly(schedule_service)
    reminders = {r.key: r for r in reminder_service.get_reminders(fixed_now, upcoming_days=7)}

    assert reminder_service.compute_expiry(reminders[f"task:{late.id}"], ref) == date(2024, 3, 16)
    assert reminder_service.compute_expiry(reminders[f"schedule:{s.id}"], ref) == date(2024, 3, 18)

    ahead_reminder = Reminder("due_today_task", "warning", "x", "y", key=f"task:{ahead.id}")
    assert reminder_service.compute_expiry(ahead_reminder, ref) == date(2024, 3, 18)
    assert reminder_service.compute_expiry(Reminder("other", "info", "x", "y"), ref) == date(2024, 3, 22)


def test_snoozes_expire_after_their_last_day(dismissed_dao):
    dismissed_dao.snooze("task:1", date(2024, 3, 16))
    dismissed_dao.snooze("schedule:2", date(2024, 3, 10))
    assert dismissed_dao.active_keys(date(2024, 3, 15)) == {"task:1"}
    assert dismissed_dao.active_keys(date(2024, 3, 16)) == {"task:1"}
    assert dismissed_dao.active_keys(date(2024, 3, 17)) == set()


def test_snoozing_again_moves_the_expiry(dismissed_dao):
    dismissed_dao.snooze("task:1", date(2024, 3, 16))
    dismissed_dao.snooze("task:1", date(2024, 3, 20))
    assert dismissed_dao.active_keys(date(2024, 3, 18)) == {"task:1"}


def test_broken_schedule_row_is_skipped(db, task_service, schedule_service, materializer,
                                        reminder_service, fixed_now):
    good = add_weekly(schedule_service, name="Good")
    broken = add_weekly(schedule_service, name="Broken")
    db.get_connection().execute(
        "UPDATE recurring_schedules SET pattern = 'monthly', day_of_week = NULL WHERE id = ?",
        (broken.id,),
    )
    db.get_connection().commit()
    materializer.materialize_due(reference_date=fixed_now.date(), horizon_days=7)

    reminders = reminder_service.get_reminders(fixed_now, upcoming_days=7)
    assert f"schedule:{good.id}" in {r.key for r in reminders}
    assert f"schedule:{broken.id}" not in {r.key for r in reminders}

    snoozed = Reminder("upcoming_schedule", "info", "x", "y", key=f"schedule:{broken.id}")
    assert reminder_service.compute_expiry(snoozed, fixed_now.date()) == date(2024, 3, 22)


def test_schedule_on_its_occurrence_day_comes_up_today(schedule_service, reminder_service):
    add_weekly(schedule_service)
    monday = datetime(2024, 3, 11, 7, 0)
    [reminder] = reminder_service.get_reminders(monday, upcoming_days=7)
    assert reminder.title == "Safety walk comes up today"
    assert "Mar 11" in reminder.detail


def test_due_today_detail_shows_time_left(task_service, reminder_service, fixed_now):
    task_service.create("Sign off logs", due_at=fixed_now + timedelta(hours=4, minutes=5))
    [reminder] = reminder_service.get_reminders(fixed_now)
    assert reminder.detail == "Due at 16:05, 4h 05m left"
