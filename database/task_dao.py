import logging
import sqlite3
from datetime import datetime
from typing import Optional
from database.db_manager import DatabaseManager
from models.task import Task
from utils.date_helpers import parse_timestamp, format_timestamp

logger = logging.getLogger(__name__)


class TaskDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Task:
        return Task(
            id=row["id"],
            title=row["title"],
            kind=row["kind"],
            status=row["status"],
            due_at=parse_timestamp(row["due_at"]),
            schedule_id=row["schedule_id"],
            occurrence_date=row["occurrence_date"],
            location=row["location"],
            assignee=row["assignee"],
            notes=row["notes"],
            completed_at=parse_timestamp(row["completed_at"]),
            created_at=row["created_at"],
        )

    def get_all(self) -> list[Task]:
        conn = self._db.get_connection()
        rows = conn.execute("SELECT * FROM tasks ORDER BY id ASC").fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_open(self) -> list[Task]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT * FROM tasks
               WHERE status NOT IN ('completed', 'cancelled')
               ORDER BY id ASC"""
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_schedule(self, schedule_id: int) -> list[Task]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM tasks WHERE schedule_id = ? ORDER BY occurrence_date ASC",
            (schedule_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, task_id: int) -> Optional[Task]:
        conn = self._db.get_connection()
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        title: str,
        kind: str,
        due_at: datetime | None = None,
        location: str = "",
        assignee: str = "",
        notes: str = "",
    ) -> Task:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO tasks (title, kind, due_at, location, assignee, notes)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (title, kind, format_timestamp(due_at), location, assignee, notes),
        )
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def create_for_occurrence(
        self,
        schedule_id: int,
        occurrence_date: str,
        title: str,
        kind: str,
        due_at: datetime,
        location: str = "",
        assignee: str = "",
        notes: str = "",
    ) -> Optional[Task]:
        """Insert the task for one schedule occurrence.

        Returns None when that occurrence already has a task.
        """
        conn = self._db.get_connection()
        try:
            cursor = conn.execute(
                """INSERT INTO tasks
                   (title, kind, due_at, schedule_id, occurrence_date,
                    location, assignee, notes)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    title, kind, format_timestamp(due_at), schedule_id,
                    occurrence_date, location, assignee, notes,
                ),
            )
        except sqlite3.IntegrityError as e:
            conn.rollback()
            # Only the (schedule_id, occurrence_date) index is unique on tasks
            if not str(e).startswith("UNIQUE constraint failed"):
                raise
            logger.debug(
                "Task for schedule %s on %s already exists", schedule_id, occurrence_date
            )
            return None
        conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(
        self,
        task_id: int,
        title: str,
        kind: str,
        due_at: datetime | None,
        location: str = "",
        assignee: str = "",
        notes: str = "",
    ) -> Task:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE tasks SET title=?, kind=?, due_at=?, location=?, assignee=?, notes=?
               WHERE id=?""",
            (title, kind, format_timestamp(due_at), location, assignee, notes, task_id),
        )
        conn.commit()
        return self.get_by_id(task_id)

    def set_status(self, task_id: int, status: str, completed_at: datetime | None = None):
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE tasks SET status = ?, completed_at = ? WHERE id = ?",
            (status, format_timestamp(completed_at), task_id),
        )
        conn.commit()

    def delete(self, task_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        conn.commit()
