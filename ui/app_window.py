import customtkinter as ctk
from database.dismissed_reminder_dao import DismissedReminderDAO
from models.task import Task
from services.reminder_service import Reminder, ReminderService
from services.schedule_service import ScheduleService
from services.task_service import TaskService
from ui.components.alert_banner import AlertBanner
from ui.components.reminder_dialog import ReminderDialog
from ui.tabs.schedules_tab import SchedulesTab
from ui.tabs.tasks_tab import TasksTab
from utils.constants import APP_NAME, APP_WIDTH, APP_HEIGHT, PREVIEW_COUNT


_REFRESH_SCOPES: dict[str, set[str]] = {
    "task":     {"tasks"},
    "schedule": {"tasks", "schedules"},
    "full":     {"tasks", "schedules"},
}


class AppWindow(ctk.CTk):
    def __init__(
        self,
        task_service: TaskService,
        schedule_service: ScheduleService,
        reminder_service: ReminderService,
        dismissed_reminder_dao: DismissedReminderDAO | None = None,
        startup_reminders: list[Reminder] | None = None,
        startup_tasks: list[Task] | None = None,
        date_format: str = "MM/DD/YYYY",
        preview_count: int = PREVIEW_COUNT,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._task_svc = task_service
        self._schedule_svc = schedule_service
        self._reminder_svc = reminder_service
        self._dismissed_dao = dismissed_reminder_dao
        self._startup_reminders = startup_reminders or []
        self._startup_tasks = startup_tasks or []
        self._date_format = date_format
        self._preview_count = preview_count

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=0, column=0, sticky="ew", padx=8)
        self._build_tabs()

        if self._startup_tasks:
            count = len(self._startup_tasks)
            self.after(300, lambda: self._show_materialized_banner(count))
        if self._startup_reminders:
            self.after(200, self._show_reminder_dialog)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=1, column=0, sticky="nsew", padx=8, pady=(0, 8))
        for tab_name in ("Tasks", "Schedules"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._tasks_tab = TasksTab(
            self._tabview.tab("Tasks"),
            task_service=self._task_svc,
            notify_refresh=self.notify_tabs_refresh,
            date_format=self._date_format,
        )
        self._tasks_tab.grid(row=0, column=0, sticky="nsew")

        self._schedules_tab = SchedulesTab(
            self._tabview.tab("Schedules"),
            schedule_service=self._schedule_svc,
            notify_refresh=self.notify_tabs_refresh,
            date_format=self._date_format,
            preview_count=self._preview_count,
        )
        self._schedules_tab.grid(row=0, column=0, sticky="nsew")

    def notify_tabs_refresh(self, scope: str = "full"):
        tabs = _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"])
        if "tasks" in tabs: self._tasks_tab.refresh()
        if "schedules" in tabs: self._schedules_tab.refresh()

    # ── Banners & dialogs ────────────────────────────────────────────────────
    def _show_materialized_banner(self, count: int):
        for w in self._banner_frame.winfo_children():
            w.destroy()
        AlertBanner(
            self._banner_frame,
            message=f"{count} task{'s' if count != 1 else ''} generated from recurring schedules.",
            color="#2196F3",
            action_text="View",
            action_cmd=lambda: self._tabview.set("Tasks"),
            timeout_ms=15000,
        ).pack(fill="x", pady=2)

    def _show_reminder_dialog(self):
        ReminderDialog(
            self,
            self._startup_reminders,
            dismissed_reminder_dao=self._dismissed_dao,
            reminder_service=self._reminder_svc,
        )
