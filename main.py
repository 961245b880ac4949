import logging
import os
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.dismissed_reminder_dao import DismissedReminderDAO
from database.schedule_dao import ScheduleDAO
from database.task_dao import TaskDAO

from services.materialization_service import MaterializationService
from services.reminder_service import ReminderService
from services.schedule_service import ScheduleService
from services.task_service import TaskService

from ui.app_window import AppWindow
from utils.app_config import get_db_folder, get_log_level
from utils.constants import GENERATION_HORIZON_DAYS, PREVIEW_COUNT, UPCOMING_REMINDER_DAYS
from utils.date_helpers import now

logger = logging.getLogger(__name__)


def main():
    # ── Bootstrap: logging + DB folder from pre-DB config ─────────────────────
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    db = DatabaseManager.open(db_folder=get_db_folder())

    # ── DAOs ─────────────────────────────────────────────────────────────────
    schedule_dao = ScheduleDAO(db)
    task_dao = TaskDAO(db)
    dismissed_reminder_dao = DismissedReminderDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    schedule_svc = ScheduleService(schedule_dao)
    task_svc = TaskService(task_dao)
    materialization_svc = MaterializationService(schedule_dao, task_dao)
    reminder_svc = ReminderService(task_svc, schedule_svc)

    # ── Materialize due schedule occurrences ─────────────────────────────────
    started = now()
    new_tasks = materialization_svc.materialize_due(
        reference_date=started.date(),
        horizon_days=db.get_int_setting("generation_horizon_days", GENERATION_HORIZON_DAYS),
    )

    # ── Startup reminders, minus snoozed ones ────────────────────────────────
    dismissed_keys = dismissed_reminder_dao.active_keys(started.date())
    reminders = reminder_svc.get_reminders(
        started,
        upcoming_days=db.get_int_setting("upcoming_days", UPCOMING_REMINDER_DAYS),
        dismissed_keys=dismissed_keys,
    )
    logger.info("%d reminder(s) at startup", len(reminders))

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(db.get_setting("appearance_mode", "system"))
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        task_service=task_svc,
        schedule_service=schedule_svc,
        reminder_service=reminder_svc,
        dismissed_reminder_dao=dismissed_reminder_dao,
        startup_reminders=reminders,
        startup_tasks=new_tasks,
        date_format=db.get_setting("date_format", "MM/DD/YYYY"),
        preview_count=db.get_int_setting("preview_count", PREVIEW_COUNT),
    )

    def on_close():
        db.close()
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_close)
    app.mainloop()


if __name__ == "__main__":
    main()
