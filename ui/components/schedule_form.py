import customtkinter as ctk
from models.recurrence_rule import make_rule
from models.schedule import RecurringSchedule
from services.schedule_service import ScheduleService
from ui.components.date_picker import DatePickerWidget
from utils.constants import (
    DAYS_OF_WEEK, DEFAULT_DURATION_MINUTES, DEFAULT_START_TIME, PATTERNS,
    PATTERN_MONTHLY, PATTERN_WEEKLY, PREVIEW_COUNT, TASK_KINDS,
)
from utils.date_helpers import today_str


class ScheduleForm(ctk.CTkToplevel):
    """Add or edit a recurring audit / maintenance / task schedule."""

    def __init__(
        self,
        master,
        schedule_service: ScheduleService,
        schedule: RecurringSchedule | None = None,
        date_format: str = "MM/DD/YYYY",
        preview_count: int = PREVIEW_COUNT,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = schedule_service
        self._schedule = schedule
        self._date_format = date_format
        self._preview_count = preview_count
        self.saved = False

        self.title("Edit Schedule" if schedule else "New Schedule")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0
        self._name_var = ctk.StringVar(value=schedule.name if schedule else "")
        r = self._add_entry("Name:", self._name_var, r)

        self._add_label("Kind:", r)
        self._kind_var = ctk.StringVar(value=schedule.kind if schedule else "audit")
        ctk.CTkComboBox(
            self, values=TASK_KINDS, variable=self._kind_var, width=220, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._location_var = ctk.StringVar(value=schedule.location if schedule else "")
        r = self._add_entry("Location:", self._location_var, r)
        self._assignee_var = ctk.StringVar(value=schedule.assignee if schedule else "")
        r = self._add_entry("Assignee:", self._assignee_var, r)

        # Pattern
        self._add_label("Repeats:", r)
        self._pattern_var = ctk.StringVar(value=schedule.pattern if schedule else PATTERN_WEEKLY)
        ctk.CTkComboBox(
            self, values=PATTERNS, variable=self._pattern_var,
            width=220, state="readonly", command=self._on_pattern_change,
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        # Day fields (dynamic)
        self._day_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._day_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=2, sticky="ew")
        r += 1
        dow = schedule.day_of_week if schedule and schedule.day_of_week is not None else 1
        self._dow_var = ctk.StringVar(value=DAYS_OF_WEEK[dow])
        self._dom_var = ctk.StringVar(
            value=str(schedule.day_of_month) if schedule and schedule.day_of_month else "1"
        )
        self._refresh_day_fields()

        self._add_label("Start Date:", r)
        self._start_picker = DatePickerWidget(
            self,
            initial_date=schedule.start_date if schedule else today_str(),
            date_format=self._date_format,
            on_change=self._refresh_preview,
        )
        self._start_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._add_label("End Date:", r)
        self._end_picker = DatePickerWidget(
            self,
            initial_date=schedule.end_date if schedule else "",
            date_format=self._date_format,
        )
        self._end_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        ctk.CTkLabel(self, text="(optional)", text_color="gray60", font=ctk.CTkFont(size=11)).grid(
            row=r, column=1, padx=(160, 0), pady=4, sticky="w"
        )
        r += 1

        self._time_var = ctk.StringVar(value=schedule.start_time if schedule else DEFAULT_START_TIME)
        r = self._add_entry("Start Time:", self._time_var, r, placeholder="HH:MM")
        self._duration_var = ctk.StringVar(
            value=str(schedule.duration_minutes if schedule else DEFAULT_DURATION_MINUTES)
        )
        r = self._add_entry("Duration (min):", self._duration_var, r)

        # Preview
        self._add_label("Next dates:", r)
        self._preview_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._preview_var, justify="left", anchor="w",
            text_color=("gray30", "gray70"),
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=280, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self._refresh_preview()
        self.transient(master)
        self.grab_set()
        self._center()

    def _add_label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(row=row, column=0, padx=(16, 8), pady=4, sticky="e")

    def _add_entry(self, label, var, row, placeholder=None) -> int:
        self._add_label(label, row)
        ctk.CTkEntry(self, textvariable=var, width=220, placeholder_text=placeholder).grid(
            row=row, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        return row + 1

    def _on_pattern_change(self, value=None):
        self._refresh_day_fields()
        self._refresh_preview()

    def _refresh_day_fields(self):
        for w in self._day_frame.winfo_children():
            w.destroy()

        pattern = self._pattern_var.get()
        if pattern == PATTERN_WEEKLY:
            ctk.CTkLabel(self._day_frame, text="Day of Week:").grid(
                row=0, column=0, padx=(0, 8), sticky="e"
            )
            ctk.CTkComboBox(
                self._day_frame, values=DAYS_OF_WEEK, variable=self._dow_var,
                width=120, state="readonly", command=lambda _v: self._refresh_preview(),
            ).grid(row=0, column=1, sticky="w")
        elif pattern == PATTERN_MONTHLY:
            ctk.CTkLabel(self._day_frame, text="Day of Month:").grid(
                row=0, column=0, padx=(0, 8), sticky="e"
            )
            ctk.CTkComboBox(
                self._day_frame, values=[str(i) for i in range(1, 32)], variable=self._dom_var,
                width=80, state="readonly", command=lambda _v: self._refresh_preview(),
            ).grid(row=0, column=1, sticky="w")
            ctk.CTkLabel(
                self._day_frame, text="(last day in shorter months)",
                text_color="gray60", font=ctk.CTkFont(size=11),
            ).grid(row=0, column=2, padx=(8, 0), sticky="w")

    def _day_fields(self) -> tuple[int | None, int | None]:
        pattern = self._pattern_var.get()
        if pattern == PATTERN_WEEKLY:
            return DAYS_OF_WEEK.index(self._dow_var.get()), None
        if pattern == PATTERN_MONTHLY:
            return None, int(self._dom_var.get())
        return None, None

    def _refresh_preview(self):
        day_of_week, day_of_month = self._day_fields()
        try:
            rule = make_rule(
                self._pattern_var.get(), self._start_picker.get(), day_of_week, day_of_month
            )
        except ValueError as e:
            self._preview_var.set(f"({e})")
            return
        lines = self._svc.preview_strings(rule, self._preview_count, self._date_format)
        self._preview_var.set("\n".join(lines))

    def _on_save(self):
        try:
            duration = int(self._duration_var.get())
        except ValueError:
            self._error_var.set("Duration must be a whole number of minutes.")
            return

        if not self._start_picker.is_valid():
            self._error_var.set("Invalid start date.")
            return
        end_date = None
        if self._end_picker.get():
            if not self._end_picker.is_valid():
                self._error_var.set("Invalid end date.")
                return
            end_date = self._end_picker.get()

        day_of_week, day_of_month = self._day_fields()
        fields = dict(
            name=self._name_var.get(),
            kind=self._kind_var.get(),
            pattern=self._pattern_var.get(),
            start_date=self._start_picker.get(),
            start_time=self._time_var.get().strip(),
            duration_minutes=duration,
            day_of_week=day_of_week,
            day_of_month=day_of_month,
            end_date=end_date,
            location=self._location_var.get(),
            assignee=self._assignee_var.get(),
        )
        try:
            if self._schedule:
                self._svc.update(
                    self._schedule.id, is_active=self._schedule.is_active, **fields
                )
            else:
                self._svc.create(**fields)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
