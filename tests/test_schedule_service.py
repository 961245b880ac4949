from datetime import date

import pytest

from models.recurrence_rule import InvalidRule, WeeklyRule


def make_schedule(svc, **overrides):
    fields = dict(
        name="Fire extinguisher check", kind="audit", pattern="monthly",
        start_date="2024-01-15", start_time="09:00", duration_minutes=60,
        day_of_month=31, location="Warehouse B", assignee="Dana",
    )
    fields.update(overrides)
    return svc.create(**fields)


def test_create_persists_and_strips(schedule_service):
    s = make_schedule(schedule_service, name="  Boiler service  ", kind="maintenance")
    stored = schedule_service.get_by_id(s.id)
    assert stored.name == "Boiler service"
    assert stored.is_active
    assert stored.day_of_month == 31
    assert stored.last_generated_date is None


@pytest.mark.parametrize("overrides, message", [
    ({"name": "  "}, "Name"),
    ({"kind": "party"}, "Kind"),
    ({"pattern": "yearly", "day_of_month": None}, "pattern"),
    ({"start_time": "9am"}, "HH:MM"),
    ({"duration_minutes": 0}, "Duration"),
    ({"duration_minutes": True}, "Duration"),
    ({"end_date": "2023-12-31"}, "End date"),
    ({"end_date": "someday"}, "end date"),
])
def test_create_rejects_bad_fields(schedule_service, overrides, message):
    with pytest.raises(ValueError, match=message):
        make_schedule(schedule_service, **overrides)
    assert schedule_service.get_all() == []


def test_create_rejects_invalid_rule(schedule_service):
    with pytest.raises(InvalidRule):
        make_schedule(schedule_service, day_of_month=32)
    with pytest.raises(InvalidRule):
        make_schedule(schedule_service, pattern="weekly", day_of_month=None)


def test_update_and_pause(schedule_service):
    s = make_schedule(schedule_service)
    updated = schedule_service.update(
        s.id, name="Weekly walk-through", kind="audit", pattern="weekly",
        start_date="2024-01-01", start_time="07:30", duration_minutes=30,
        day_of_week=1,
    )
    assert updated.pattern == "weekly"
    assert updated.day_of_week == 1
    assert updated.day_of_month is None

    schedule_service.set_active(s.id, False)
    assert schedule_service.get_active() == []
    schedule_service.set_active(s.id, True)
    assert [x.id for x in schedule_service.get_active()] == [s.id]


def test_get_all_is_ordered_by_name(schedule_service):
    make_schedule(schedule_service, name="Zulu")
    make_schedule(schedule_service, name="Alpha")
    assert [s.name for s in schedule_service.get_all()] == ["Alpha", "Zulu"]


def test_delete(schedule_service):
    s = make_schedule(schedule_service)
    schedule_service.delete(s.id)
    assert schedule_service.get_by_id(s.id) is None


def test_preview_from_schedule_and_rule(schedule_service):
    s = make_schedule(schedule_service)
    assert schedule_service.preview(s, 3) == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]
    rule = WeeklyRule(date(2024, 1, 3), 0)
    assert schedule_service.preview(rule, 2) == [date(2024, 1, 7), date(2024, 1, 14)]


def test_preview_strings(schedule_service):
    s = make_schedule(schedule_service)
    lines = schedule_service.preview_strings(s, 2, "YYYY-MM-DD")
    assert [line.split()[-1] for line in lines] == ["2024-01-31", "2024-02-29"]


def test_next_due_date_is_strictly_after(schedule_service):
    s = make_schedule(schedule_service)
    assert schedule_service.next_due_date(s, after=date(2024, 2, 28)) == date(2024, 2, 29)
    assert schedule_service.next_due_date(s, after=date(2024, 2, 29)) == date(2024, 3, 31)
    assert schedule_service.next_due_date(s, after=date(2023, 6, 1)) == date(2024, 1, 31)


def test_next_due_date_respects_end_date(schedule_service):
    s = make_schedule(schedule_service, end_date="2024-03-01")
    assert schedule_service.next_due_date(s, after=date(2024, 2, 1)) == date(2024, 2, 29)
    assert schedule_service.next_due_date(s, after=date(2024, 2, 29)) is None


def test_next_due_on_or_after_includes_the_occurrence_day(schedule_service):
    s = make_schedule(
        schedule_service, pattern="weekly", start_date="2024-03-04",
        day_of_week=1, day_of_month=None,
    )
    # 2024-03-11 is a Monday
    assert schedule_service.next_due_on_or_after(s, date(2024, 3, 11)) == date(2024, 3, 11)
    assert schedule_service.next_due_on_or_after(s, date(2024, 3, 12)) == date(2024, 3, 18)
    assert schedule_service.next_due_date(s, after=date(2024, 3, 11)) == date(2024, 3, 18)


def test_next_due_on_or_after_respects_end_date(schedule_service):
    s = make_schedule(schedule_service, end_date="2024-03-01")
    assert schedule_service.next_due_on_or_after(s, date(2024, 2, 29)) == date(2024, 2, 29)
    assert schedule_service.next_due_on_or_after(s, date(2024, 3, 1)) is None
