from typing import Optional
from database.db_manager import DatabaseManager
from models.schedule import RecurringSchedule


class ScheduleDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> RecurringSchedule:
        return RecurringSchedule(
            id=row["id"],
            name=row["name"],
            kind=row["kind"],
            pattern=row["pattern"],
            start_date=row["start_date"],
            start_time=row["start_time"],
            duration_minutes=row["duration_minutes"],
            is_active=bool(row["is_active"]),
            day_of_week=row["day_of_week"],
            day_of_month=row["day_of_month"],
            end_date=row["end_date"],
            last_generated_date=row["last_generated_date"],
            location=row["location"],
            assignee=row["assignee"],
        )

    def get_all(self) -> list[RecurringSchedule]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM recurring_schedules ORDER BY name"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_active(self) -> list[RecurringSchedule]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM recurring_schedules WHERE is_active = 1 ORDER BY name"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, schedule_id: int) -> Optional[RecurringSchedule]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM recurring_schedules WHERE id = ?", (schedule_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        name: str,
        kind: str,
        pattern: str,
        start_date: str,
        start_time: str,
        duration_minutes: int,
        day_of_week: int | None = None,
        day_of_month: int | None = None,
        end_date: str | None = None,
        location: str = "",
        assignee: str = "",
    ) -> RecurringSchedule:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO recurring_schedules
               (name, kind, pattern, start_date, start_time, duration_minutes,
                day_of_week, day_of_month, end_date, location, assignee)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                name, kind, pattern, start_date, start_time, duration_minutes,
                day_of_week, day_of_month, end_date, location, assignee,
            ),
        )
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(
        self,
        schedule_id: int,
        name: str,
        kind: str,
        pattern: str,
        start_date: str,
        start_time: str,
        duration_minutes: int,
        day_of_week: int | None = None,
        day_of_month: int | None = None,
        end_date: str | None = None,
        location: str = "",
        assignee: str = "",
        is_active: bool = True,
    ) -> RecurringSchedule:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE recurring_schedules SET
               name=?, kind=?, pattern=?, start_date=?, start_time=?,
               duration_minutes=?, day_of_week=?, day_of_month=?, end_date=?,
               location=?, assignee=?, is_active=?
               WHERE id=?""",
            (
                name, kind, pattern, start_date, start_time, duration_minutes,
                day_of_week, day_of_month, end_date, location, assignee,
                1 if is_active else 0, schedule_id,
            ),
        )
        conn.commit()
        return self.get_by_id(schedule_id)

    def set_active(self, schedule_id: int, is_active: bool):
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE recurring_schedules SET is_active = ? WHERE id = ?",
            (1 if is_active else 0, schedule_id),
        )
        conn.commit()

    def update_last_generated(self, schedule_id: int, date_str: str):
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE recurring_schedules SET last_generated_date = ? WHERE id = ?",
            (date_str, schedule_id),
        )
        conn.commit()

    def delete(self, schedule_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM recurring_schedules WHERE id = ?", (schedule_id,))
        conn.commit()
