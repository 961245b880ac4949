import logging
import os
import sqlite3
from utils.constants import (
    DB_FILE, PREVIEW_COUNT, GENERATION_HORIZON_DAYS, UPCOMING_REMINDER_DAYS,
)

logger = logging.getLogger(__name__)


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._seed_defaults(conn)
        conn.commit()

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS recurring_schedules (
                id                  INTEGER PRIMARY KEY AUTOINCREMENT,
                name                TEXT    NOT NULL,
                kind                TEXT    NOT NULL CHECK(kind IN ('audit','maintenance','task')),
                pattern             TEXT    NOT NULL CHECK(pattern IN ('daily','weekly','monthly')),
                day_of_week         INTEGER CHECK(day_of_week BETWEEN 0 AND 6),
                day_of_month        INTEGER CHECK(day_of_month BETWEEN 1 AND 31),
                start_date          TEXT    NOT NULL,
                start_time          TEXT    NOT NULL DEFAULT '09:00',
                duration_minutes    INTEGER NOT NULL DEFAULT 60 CHECK(duration_minutes > 0),
                end_date            TEXT,
                is_active           INTEGER NOT NULL DEFAULT 1,
                last_generated_date TEXT,
                location            TEXT    NOT NULL DEFAULT '',
                assignee            TEXT    NOT NULL DEFAULT ''
            );

            CREATE TABLE IF NOT EXISTS tasks (
                id              INTEGER PRIMARY KEY AUTOINCREMENT,
                title           TEXT NOT NULL,
                kind            TEXT NOT NULL CHECK(kind IN ('audit','maintenance','task')),
                status          TEXT NOT NULL DEFAULT 'pending'
                                CHECK(status IN ('pending','in_progress','completed','cancelled')),
                due_at          TEXT,
                schedule_id     INTEGER REFERENCES recurring_schedules(id) ON DELETE SET NULL,
                occurrence_date TEXT,
                location        TEXT NOT NULL DEFAULT '',
                assignee        TEXT NOT NULL DEFAULT '',
                notes           TEXT NOT NULL DEFAULT '',
                completed_at    TEXT,
                created_at      TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE UNIQUE INDEX IF NOT EXISTS idx_tasks_schedule_occurrence
                ON tasks(schedule_id, occurrence_date);
            CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status);
            CREATE INDEX IF NOT EXISTS idx_tasks_due_at ON tasks(due_at);

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS dismissed_reminders (
                key     TEXT PRIMARY KEY,
                expires TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        defaults = [
            ("appearance_mode", "system"),
            ("date_format", "MM/DD/YYYY"),
            ("preview_count", str(PREVIEW_COUNT)),
            ("generation_horizon_days", str(GENERATION_HORIZON_DAYS)),
            ("upcoming_days", str(UPCOMING_REMINDER_DAYS)),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def get_int_setting(self, key: str, default: int) -> int:
        raw = self.get_setting(key, str(default))
        try:
            return int(raw)
        except ValueError:
            logger.warning("Setting %s=%r is not an integer; using %d", key, raw, default)
            return default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    @staticmethod
    def open(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (and initializes) the DB file, in db_folder if given."""
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            path = os.path.join(db_folder, DB_FILE)
        else:
            path = DB_FILE
        logger.info("Opening database %s", path)
        db = DatabaseManager(path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
