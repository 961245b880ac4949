import logging
import customtkinter as ctk
from services.deadline import badge_for, day_bucket
from services.task_service import TaskService
from ui.components.task_form import TaskForm
from utils.constants import BADGE_COLORS, STATUS_IN_PROGRESS, STATUS_LABELS
from utils.date_helpers import format_display_timestamp, now

logger = logging.getLogger(__name__)


class TasksTab(ctk.CTkFrame):
    """Open tasks in attention order: overdue first, then by deadline."""

    def __init__(
        self,
        master,
        task_service: TaskService,
        notify_refresh,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = task_service
        self._notify_refresh = notify_refresh
        self._date_format = date_format

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_toolbar()
        self._card_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._card_frame.grid(row=1, column=0, sticky="ew", padx=16, pady=8)
        self._card_frame.grid_columnconfigure((0, 1, 2, 3), weight=1)
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=2, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Open Tasks", font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)
        ctk.CTkButton(bar, text="+ Add Task", command=self._open_add).pack(
            side="right", padx=8, pady=6
        )
        ctk.CTkButton(
            bar, text="Refresh", width=80,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._load,
        ).pack(side="right", padx=4, pady=6)

    def _load(self):
        ref = now()
        for w in self._card_frame.winfo_children():
            w.destroy()
        stats = self._svc.stats(ref)
        for i, (label, value, color) in enumerate([
            ("Open", stats.open, "#2196F3"),
            ("Overdue", stats.overdue, BADGE_COLORS["overdue"]),
            ("Due today", stats.due_today, BADGE_COLORS["today"]),
            ("Completed late", stats.completed_late, "gray60"),
        ]):
            self._make_card(i, label, value, color)

        for w in self._scroll.winfo_children():
            w.destroy()
        tasks = self._svc.urgent_tasks(ref, limit=None)
        if not tasks:
            ctk.CTkLabel(
                self._scroll, text="Nothing open. Enjoy the quiet.", text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return
        for idx, task in enumerate(tasks):
            self._add_row(idx, task, ref)

    def _add_row(self, idx, task, ref):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)
        row.grid_columnconfigure(1, weight=1)

        color = BADGE_COLORS.get(day_bucket(task, ref), "gray60")
        ctk.CTkLabel(
            row, text=badge_for(task, ref), width=90, text_color=color,
            font=ctk.CTkFont(weight="bold"), anchor="w",
        ).grid(row=0, column=0, padx=6, pady=4)

        subtitle = " · ".join(
            part for part in (
                task.kind.title(), task.location, task.assignee,
                format_display_timestamp(task.due_at, self._date_format),
                STATUS_LABELS.get(task.status, task.status),
            ) if part
        )
        text_frame = ctk.CTkFrame(row, fg_color="transparent")
        text_frame.grid(row=0, column=1, sticky="ew", padx=4)
        ctk.CTkLabel(text_frame, text=task.title, anchor="w").pack(fill="x")
        ctk.CTkLabel(
            text_frame, text=subtitle, anchor="w",
            text_color="gray60", font=ctk.CTkFont(size=11),
        ).pack(fill="x")

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=2, padx=(4, 6))
        if task.status != STATUS_IN_PROGRESS:
            ctk.CTkButton(
                acts, text="Start", width=52, height=24,
                command=lambda t=task: self._act(self._svc.start, t.id),
            ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Done", width=52, height=24,
            fg_color="#4CAF50", hover_color="#388E3C",
            command=lambda t=task: self._act(lambda i: self._svc.complete(i, now()), t.id),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Cancel", width=56, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda t=task: self._act(self._svc.cancel, t.id),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Edit", width=40, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda t=task: self._open_edit(t),
        ).pack(side="left", padx=2)

    def _act(self, action, task_id: int):
        try:
            action(task_id)
        except ValueError as e:
            # Row was stale (closed elsewhere); the reload below shows the truth
            logger.warning("Task %s: %s", task_id, e)
        self._notify_refresh("task")

    def _make_card(self, col, label, value, color):
        card = ctk.CTkFrame(self._card_frame, fg_color=("gray90", "gray20"), corner_radius=10)
        card.grid(row=0, column=col, padx=6, sticky="ew")
        card.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(card, text=label, font=ctk.CTkFont(size=12), text_color="gray60").grid(
            row=0, column=0, pady=(12, 0), padx=16
        )
        ctk.CTkLabel(
            card, text=str(value), font=ctk.CTkFont(size=20, weight="bold"), text_color=color,
        ).grid(row=1, column=0, pady=(4, 12), padx=16)

    def _open_add(self):
        form = TaskForm(self.winfo_toplevel(), self._svc, date_format=self._date_format)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("task")

    def _open_edit(self, task):
        form = TaskForm(self.winfo_toplevel(), self._svc, task=task, date_format=self._date_format)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("task")
