import logging
from dataclasses import dataclass
from datetime import datetime
from database.task_dao import TaskDAO
from models.task import DeadlineVerdict, Task
from services.deadline import completed_late, day_bucket, is_closed, resolve, urgency_sort
from utils.constants import (
    STATUS_CANCELLED, STATUS_COMPLETED, STATUS_IN_PROGRESS, STATUS_PENDING, TASK_KINDS,
)

logger = logging.getLogger(__name__)


@dataclass
class TaskStats:
    open: int = 0
    overdue: int = 0
    due_today: int = 0
    completed: int = 0
    completed_late: int = 0


class TaskService:
    def __init__(self, task_dao: TaskDAO):
        self._dao = task_dao

    def get_all(self) -> list[Task]:
        return self._dao.get_all()

    def get_open(self) -> list[Task]:
        return self._dao.get_open()

    def get_by_id(self, task_id: int) -> Task | None:
        return self._dao.get_by_id(task_id)

    def create(
        self,
        title: str,
        kind: str = "task",
        due_at: datetime | None = None,
        location: str = "",
        assignee: str = "",
        notes: str = "",
    ) -> Task:
        self._validate(title, kind, due_at)
        task = self._dao.create(
            title=title.strip(), kind=kind, due_at=due_at,
            location=location.strip(), assignee=assignee.strip(), notes=notes,
        )
        logger.info("Created %s %r (id=%s, due %s)", kind, task.title, task.id, due_at)
        return task

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
        self._validate(title, kind, due_at)
        return self._dao.update(
            task_id, title.strip(), kind, due_at,
            location=location.strip(), assignee=assignee.strip(), notes=notes,
        )

    def delete(self, task_id: int):
        logger.info("Deleting task id=%s", task_id)
        self._dao.delete(task_id)

    # ── Status transitions ───────────────────────────────────────────────────
    def start(self, task_id: int) -> Task:
        task = self._get_open(task_id)
        if task.status == STATUS_IN_PROGRESS:
            return task
        self._dao.set_status(task.id, STATUS_IN_PROGRESS)
        return self._dao.get_by_id(task.id)

    def complete(self, task_id: int, now: datetime) -> Task:
        task = self._get_open(task_id)
        self._dao.set_status(task.id, STATUS_COMPLETED, completed_at=now)
        logger.info("Completed task id=%s at %s", task.id, now)
        return self._dao.get_by_id(task.id)

    def cancel(self, task_id: int) -> Task:
        task = self._get_open(task_id)
        self._dao.set_status(task.id, STATUS_CANCELLED)
        logger.info("Cancelled task id=%s", task.id)
        return self._dao.get_by_id(task.id)

    def reopen(self, task_id: int) -> Task:
        task = self._dao.get_by_id(task_id)
        if task is None:
            raise ValueError(f"Task {task_id} not found.")
        self._dao.set_status(task.id, STATUS_PENDING)
        return self._dao.get_by_id(task.id)

    # ── Deadlines ────────────────────────────────────────────────────────────
    def verdicts(self, tasks: list[Task], now: datetime) -> dict[int, DeadlineVerdict]:
        return {t.id: resolve(t, now) for t in tasks}

    def urgent_tasks(self, now: datetime, limit: int | None = 5) -> list[Task]:
        """Open tasks in attention order, overdue first."""
        ranked = urgency_sort(self._dao.get_open(), now)
        return ranked if limit is None else ranked[:limit]

    def stats(self, now: datetime) -> TaskStats:
        stats = TaskStats()
        for task in self._dao.get_all():
            if task.status == STATUS_COMPLETED:
                stats.completed += 1
                if completed_late(task):
                    stats.completed_late += 1
            if is_closed(task.status):
                continue
            stats.open += 1
            bucket = day_bucket(task, now)
            if bucket == "overdue":
                stats.overdue += 1
            elif bucket == "today":
                stats.due_today += 1
        return stats

    def _get_open(self, task_id: int) -> Task:
        task = self._dao.get_by_id(task_id)
        if task is None:
            raise ValueError(f"Task {task_id} not found.")
        if is_closed(task.status):
            raise ValueError(f"Task '{task.title}' is already {task.status}.")
        return task

    def _validate(self, title, kind, due_at):
        if not title or not title.strip():
            raise ValueError("Title cannot be empty.")
        if kind not in TASK_KINDS:
            raise ValueError(f"Kind must be one of: {', '.join(TASK_KINDS)}.")
        if due_at is not None and not isinstance(due_at, datetime):
            raise ValueError("Due date must include a time.")
