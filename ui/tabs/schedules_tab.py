import logging
import customtkinter as ctk
from models.recurrence_rule import InvalidRule
from services.schedule_service import ScheduleService
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.schedule_form import ScheduleForm
from utils.constants import DAYS_OF_WEEK, PATTERN_MONTHLY, PATTERN_WEEKLY, PREVIEW_COUNT
from utils.date_helpers import format_display_date, format_date, today

logger = logging.getLogger(__name__)


def describe_pattern(schedule) -> str:
    if schedule.pattern == PATTERN_WEEKLY and schedule.day_of_week is not None:
        return f"Weekly on {DAYS_OF_WEEK[schedule.day_of_week]}"
    if schedule.pattern == PATTERN_MONTHLY:
        return f"Monthly on day {schedule.day_of_month}"
    return schedule.pattern.title()


class SchedulesTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        schedule_service: ScheduleService,
        notify_refresh,
        date_format: str = "MM/DD/YYYY",
        preview_count: int = PREVIEW_COUNT,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = schedule_service
        self._notify_refresh = notify_refresh
        self._date_format = date_format
        self._preview_count = preview_count

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Recurring Schedules", font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)
        ctk.CTkButton(bar, text="+ Add Schedule", command=self._open_add).pack(
            side="right", padx=8, pady=6
        )

        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)
        self._load()

    def refresh(self):
        self._load()

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        schedules = self._svc.get_all()
        if not schedules:
            ctk.CTkLabel(
                self._scroll,
                text="No schedules yet. Click '+ Add Schedule' to create one.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        ref = today()
        for idx, schedule in enumerate(schedules):
            self._add_row(idx, schedule, ref)

    def _add_row(self, idx, schedule, ref):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)
        row.grid_columnconfigure(1, weight=1)

        status_color = "#4CAF50" if schedule.is_active else "gray60"
        ctk.CTkLabel(
            row, text="●", text_color=status_color, width=20,
        ).grid(row=0, column=0, rowspan=2, padx=(8, 4))

        header = f"{schedule.name}  ·  {schedule.kind.title()}  ·  {describe_pattern(schedule)}"
        ctk.CTkLabel(row, text=header, anchor="w", font=ctk.CTkFont(weight="bold")).grid(
            row=0, column=1, sticky="ew", padx=4, pady=(4, 0)
        )
        detail, detail_color = self._describe_dates(schedule, ref)
        ctk.CTkLabel(
            row, text=detail,
            anchor="w", text_color=detail_color, font=ctk.CTkFont(size=11),
        ).grid(row=1, column=1, sticky="ew", padx=4, pady=(0, 4))

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=2, rowspan=2, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Edit", width=40, height=24,
            command=lambda s=schedule: self._open_edit(s),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Pause" if schedule.is_active else "Resume", width=56, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda s=schedule: self._toggle_active(s),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Delete", width=56, height=24,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda s=schedule: self._delete(s),
        ).pack(side="left", padx=2)

    def _describe_dates(self, schedule, ref) -> tuple[str, str]:
        try:
            next_due = self._svc.next_due_on_or_after(schedule, ref) if schedule.is_active else None
            preview = self._svc.preview_strings(schedule, self._preview_count, self._date_format)
        except InvalidRule as e:
            logger.error("Schedule %r (id=%s) has a broken rule: %s", schedule.name, schedule.id, e)
            return f"Broken rule: {e} Edit the schedule to fix it.", "#F44336"
        next_text = format_display_date(format_date(next_due), self._date_format) if next_due else "—"
        dates = ", ".join(preview)
        return f"Next due {next_text} at {schedule.start_time}  ·  First dates: {dates}", "gray60"

    def _open_add(self):
        form = ScheduleForm(
            self.winfo_toplevel(), self._svc,
            date_format=self._date_format, preview_count=self._preview_count,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("schedule")

    def _open_edit(self, schedule):
        form = ScheduleForm(
            self.winfo_toplevel(), self._svc, schedule=schedule,
            date_format=self._date_format, preview_count=self._preview_count,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("schedule")

    def _toggle_active(self, schedule):
        self._svc.set_active(schedule.id, not schedule.is_active)
        self._notify_refresh("schedule")

    def _delete(self, schedule):
        dialog = ConfirmDialog(
            self.winfo_toplevel(), "Delete schedule",
            f"Delete '{schedule.name}'? Tasks it already created are kept.",
            confirm_text="Delete",
        )
        if dialog.result:
            self._svc.delete(schedule.id)
            self._notify_refresh("schedule")
