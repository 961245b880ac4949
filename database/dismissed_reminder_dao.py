import logging
from datetime import date
from database.db_manager import DatabaseManager
from utils.date_helpers import format_date

logger = logging.getLogger(__name__)


class DismissedReminderDAO:
    """Snoozed reminder keys ('task:12', 'schedule:3'), each hidden through a last day."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def snooze(self, key: str, until: date) -> None:
        """Hide `key` through `until` (inclusive). Snoozing again moves the date."""
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO dismissed_reminders(key, expires) VALUES (?, ?)
               ON CONFLICT(key) DO UPDATE SET expires = excluded.expires""",
            (key, format_date(until)),
        )
        conn.commit()
        logger.debug("Snoozed reminder %s until %s", key, until)

    def active_keys(self, on: date) -> set[str]:
        """Keys still snoozed on `on`. Snoozes that ran out earlier are purged."""
        conn = self._db.get_connection()
        cursor = conn.execute(
            "DELETE FROM dismissed_reminders WHERE expires < ?", (format_date(on),)
        )
        if cursor.rowcount:
            logger.debug("Purged %d expired snooze(s)", cursor.rowcount)
        conn.commit()
        return {row["key"] for row in conn.execute("SELECT key FROM dismissed_reminders")}
