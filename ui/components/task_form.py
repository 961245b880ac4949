import customtkinter as ctk
from models.task import Task
from services.task_service import TaskService
from ui.components.date_picker import DatePickerWidget
from utils.constants import DEFAULT_START_TIME, TASK_KINDS
from utils.date_helpers import at_time, format_date, parse_date, today_str


class TaskForm(ctk.CTkToplevel):
    """Add or edit a one-off task. Leave the due date empty for no deadline."""

    def __init__(
        self,
        master,
        task_service: TaskService,
        task: Task | None = None,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = task_service
        self._task = task
        self.saved = False

        self.title("Edit Task" if task else "New Task")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0
        self._title_var = ctk.StringVar(value=task.title if task else "")
        r = self._add_entry("Title:", self._title_var, r)

        ctk.CTkLabel(self, text="Kind:").grid(row=r, column=0, padx=(16, 8), pady=4, sticky="e")
        self._kind_var = ctk.StringVar(value=task.kind if task else "task")
        ctk.CTkComboBox(
            self, values=TASK_KINDS, variable=self._kind_var, width=220, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        self._location_var = ctk.StringVar(value=task.location if task else "")
        r = self._add_entry("Location:", self._location_var, r)
        self._assignee_var = ctk.StringVar(value=task.assignee if task else "")
        r = self._add_entry("Assignee:", self._assignee_var, r)

        ctk.CTkLabel(self, text="Due Date:").grid(row=r, column=0, padx=(16, 8), pady=4, sticky="e")
        if task:
            initial = format_date(task.due_at.date()) if task.due_at else ""
        else:
            initial = today_str()
        self._due_picker = DatePickerWidget(self, initial_date=initial, date_format=date_format)
        self._due_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        time_init = task.due_at.strftime("%H:%M") if task and task.due_at else DEFAULT_START_TIME
        self._time_var = ctk.StringVar(value=time_init)
        r = self._add_entry("Due Time:", self._time_var, r)

        self._notes_var = ctk.StringVar(value=task.notes if task else "")
        r = self._add_entry("Notes:", self._notes_var, r)

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

        self.transient(master)
        self.grab_set()

    def _add_entry(self, label, var, row) -> int:
        ctk.CTkLabel(self, text=label).grid(row=row, column=0, padx=(16, 8), pady=4, sticky="e")
        ctk.CTkEntry(self, textvariable=var, width=220).grid(
            row=row, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        return row + 1

    def _on_save(self):
        due_at = None
        if self._due_picker.get():
            if not self._due_picker.is_valid():
                self._error_var.set("Invalid due date.")
                return
            try:
                due_at = at_time(parse_date(self._due_picker.get()), self._time_var.get())
            except ValueError:
                self._error_var.set("Due time must be HH:MM.")
                return

        fields = dict(
            title=self._title_var.get(),
            kind=self._kind_var.get(),
            due_at=due_at,
            location=self._location_var.get(),
            assignee=self._assignee_var.get(),
            notes=self._notes_var.get(),
        )
        try:
            if self._task:
                self._svc.update(self._task.id, **fields)
            else:
                self._svc.create(**fields)
        except ValueError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()
