import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from models.recurrence_rule import InvalidRule
from services.deadline import day_bucket, time_remaining, urgency_sort
from services.schedule_service import ScheduleService
from services.task_service import TaskService
from utils.constants import UPCOMING_REMINDER_DAYS

logger = logging.getLogger(__name__)


@dataclass
class Reminder:
    type: str       # 'overdue_task' | 'due_today_task' | 'upcoming_schedule'
    severity: str   # 'info' | 'warning' | 'error'
    title: str
    detail: str
    key: str = ""   # e.g. "task:3" or "schedule:5"; empty means not dismissable


class ReminderService:
    def __init__(self, task_service: TaskService, schedule_service: ScheduleService):
        self._tasks = task_service
        self._schedules = schedule_service

    def get_reminders(
        self,
        now: datetime,
        upcoming_days: int = UPCOMING_REMINDER_DAYS,
        dismissed_keys: set[str] | None = None,
    ) -> list[Reminder]:
        reminders: list[Reminder] = []
        reminders += self._check_tasks(now)
        reminders += self._check_schedules(now.date(), upcoming_days)
        order = {"error": 0, "warning": 1, "info": 2}
        sorted_reminders = sorted(reminders, key=lambda r: order[r.severity])
        if dismissed_keys:
            sorted_reminders = [r for r in sorted_reminders if r.key not in dismissed_keys]
        return sorted_reminders

    def compute_expiry(self, reminder: Reminder, ref: date) -> date:
        """Last day a dismissed reminder stays hidden.

        Task reminders come back the day after the task's due date, schedule
        reminders at the schedule's next due date, anything else after 7 days.
        """
        kind, _, raw_id = reminder.key.partition(":")
        if raw_id.isdigit():
            if kind == "task":
                task = self._tasks.get_by_id(int(raw_id))
                if task and task.due_at:
                    return max(task.due_at.date(), ref) + timedelta(days=1)
            elif kind == "schedule":
                schedule = self._schedules.get_by_id(int(raw_id))
                if schedule:
                    try:
                        next_due = self._schedules.next_due_date(schedule, after=ref)
                    except InvalidRule as e:
                        logger.warning("Schedule id=%s has a broken rule (%s); snoozing 7 days", schedule.id, e)
                        next_due = None
                    if next_due:
                        return next_due

        return ref + timedelta(days=7)

    def _check_tasks(self, now: datetime) -> list[Reminder]:
        reminders = []
        for task in urgency_sort(self._tasks.get_open(), now):
            bucket = day_bucket(task, now)
            where = f" · {task.location}" if task.location else ""
            who = f" · {task.assignee}" if task.assignee else ""
            if bucket == "overdue":
                reminders.append(Reminder(
                    type="overdue_task",
                    severity="error",
                    title=f"{task.title} is overdue",
                    detail=f"Was due {task.due_at.strftime('%b %d %H:%M')}{where}{who}",
                    key=f"task:{task.id}",
                ))
            elif bucket == "today":
                reminders.append(Reminder(
                    type="due_today_task",
                    severity="warning",
                    title=f"{task.title} due today",
                    detail=(
                        f"Due at {task.due_at.strftime('%H:%M')}, "
                        f"{_remaining_text(time_remaining(task, now))}{where}{who}"
                    ),
                    key=f"task:{task.id}",
                ))
        return reminders

    def _check_schedules(self, ref: date, upcoming_days: int) -> list[Reminder]:
        reminders = []
        for schedule in self._schedules.get_active():
            try:
                next_due = self._schedules.next_due_on_or_after(schedule, ref)
            except InvalidRule as e:
                logger.error("Skipping schedule %r (id=%s): %s", schedule.name, schedule.id, e)
                continue
            if next_due is None or next_due > ref + timedelta(days=upcoming_days):
                continue
            days_away = (next_due - ref).days
            day_label = "today" if days_away == 0 else (
                "tomorrow" if days_away == 1 else f"in {days_away} days"
            )
            reminders.append(Reminder(
                type="upcoming_schedule",
                severity="info",
                title=f"{schedule.name} comes up {day_label}",
                detail=(
                    f"Next {schedule.kind} on {next_due.strftime('%b %d')} "
                    f"at {schedule.start_time} · {schedule.pattern}"
                ),
                key=f"schedule:{schedule.id}",
            ))
        return reminders


def _remaining_text(remaining: timedelta) -> str:
    minutes = max(int(remaining.total_seconds()), 0) // 60
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes:02d}m left" if hours else f"{minutes}m left"
