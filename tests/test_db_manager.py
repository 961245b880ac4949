import sqlite3
from datetime import date, datetime

import pytest

from database.db_manager import DatabaseManager


def test_defaults_are_seeded(db):
    assert db.get_setting("date_format") == "MM/DD/YYYY"
    assert db.get_int_setting("preview_count", 0) == 5
    assert db.get_int_setting("generation_horizon_days", 0) == 30
    assert db.get_int_setting("upcoming_days", 0) == 7


def test_settings_round_trip_and_bad_int(db):
    db.set_setting("preview_count", "oops")
    assert db.get_int_setting("preview_count", 5) == 5
    assert db.get_setting("missing", "fallback") == "fallback"


def test_initialize_is_idempotent(db):
    db.set_setting("appearance_mode", "dark")
    db.initialize()
    assert db.get_setting("appearance_mode") == "dark"


def test_open_creates_folder(tmp_path):
    folder = tmp_path / "data"
    db = DatabaseManager.open(db_folder=str(folder))
    try:
        assert (folder / "ops_scheduler.db").exists()
    finally:
        db.close()


def test_schema_rejects_unknown_status(db, task_dao):
    task = task_dao.create("Audit", "audit")
    with pytest.raises(sqlite3.IntegrityError):
        task_dao.set_status(task.id, "archived")


def test_deleting_schedule_keeps_its_tasks(schedule_service, materializer, task_dao):
    s = schedule_service.create(
        name="Daily sweep", kind="task", pattern="daily",
        start_date="2024-03-14", start_time="06:00", duration_minutes=15,
    )
    materializer.materialize_due(reference_date=date(2024, 3, 15), horizon_days=1)
    schedule_service.delete(s.id)
    tasks = task_dao.get_all()
    assert len(tasks) == 3
    assert all(t.schedule_id is None for t in tasks)


def test_fresh_schema_has_every_task_column(db):
    cols = {row[1] for row in db.get_connection().execute("PRAGMA table_info(tasks)")}
    assert {"notes", "schedule_id", "occurrence_date", "completed_at"} <= cols


def test_occurrence_insert_only_absorbs_duplicates(schedule_service, task_dao):
    s = schedule_service.create(
        name="Daily sweep", kind="task", pattern="daily",
        start_date="2024-03-14", start_time="06:00", duration_minutes=15,
    )
    due = datetime(2024, 3, 14, 6, 15)
    assert task_dao.create_for_occurrence(s.id, "2024-03-14", "Daily sweep", "task", due)
    assert task_dao.create_for_occurrence(s.id, "2024-03-14", "Daily sweep", "task", due) is None
    with pytest.raises(sqlite3.IntegrityError):
        task_dao.create_for_occurrence(s.id, "2024-03-15", "Daily sweep", "party", due)
    assert len(task_dao.get_by_schedule(s.id)) == 1
