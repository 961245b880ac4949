import logging
from datetime import date, timedelta
from database.schedule_dao import ScheduleDAO
from models.recurrence_rule import RecurrenceRule, make_rule
from models.schedule import RecurringSchedule
from services.recurrence import expand, next_occurrence
from utils.constants import PATTERNS, PREVIEW_COUNT, TASK_KINDS
from utils.date_helpers import format_schedule_preview, parse_date, parse_time

logger = logging.getLogger(__name__)


class ScheduleService:
    def __init__(self, schedule_dao: ScheduleDAO):
        self._dao = schedule_dao

    def get_all(self) -> list[RecurringSchedule]:
        return self._dao.get_all()

    def get_active(self) -> list[RecurringSchedule]:
        return self._dao.get_active()

    def get_by_id(self, schedule_id: int) -> RecurringSchedule | None:
        return self._dao.get_by_id(schedule_id)

    def create(
        self,
        name: str,
        kind: str,
        pattern: str,
        start_date: str,
        start_time: str,
        duration_minutes: int,
        day_of_week: int | None = None,
        day_of_month: int | None = None,
        end_date: str | None = None,
        location: str = "",
        assignee: str = "",
    ) -> RecurringSchedule:
        self._validate(
            name, kind, pattern, start_date, start_time, duration_minutes,
            day_of_week, day_of_month, end_date,
        )
        schedule = self._dao.create(
            name=name.strip(), kind=kind, pattern=pattern, start_date=start_date,
            start_time=start_time, duration_minutes=duration_minutes,
            day_of_week=day_of_week, day_of_month=day_of_month,
            end_date=end_date, location=location.strip(), assignee=assignee.strip(),
        )
        logger.info("Created %s schedule %r (id=%s)", pattern, schedule.name, schedule.id)
        return schedule

    def update(
        self,
        schedule_id: int,
        name: str,
        kind: str,
        pattern: str,
        start_date: str,
        start_time: str,
        duration_minutes: int,
        day_of_week: int | None = None,
        day_of_month: int | None = None,
        end_date: str | None = None,
        location: str = "",
        assignee: str = "",
        is_active: bool = True,
    ) -> RecurringSchedule:
        self._validate(
            name, kind, pattern, start_date, start_time, duration_minutes,
            day_of_week, day_of_month, end_date,
        )
        logger.info("Updating schedule id=%s", schedule_id)
        return self._dao.update(
            schedule_id=schedule_id, name=name.strip(), kind=kind, pattern=pattern,
            start_date=start_date, start_time=start_time,
            duration_minutes=duration_minutes, day_of_week=day_of_week,
            day_of_month=day_of_month, end_date=end_date,
            location=location.strip(), assignee=assignee.strip(), is_active=is_active,
        )

    def set_active(self, schedule_id: int, is_active: bool):
        logger.info("%s schedule id=%s", "Resuming" if is_active else "Pausing", schedule_id)
        self._dao.set_active(schedule_id, is_active)

    def delete(self, schedule_id: int):
        logger.info("Deleting schedule id=%s", schedule_id)
        self._dao.delete(schedule_id)

    # ── Preview ──────────────────────────────────────────────────────────────
    def preview(
        self, schedule: RecurringSchedule | RecurrenceRule, count: int = PREVIEW_COUNT
    ) -> list[date]:
        """The first `count` occurrences, counted from the rule's start date."""
        rule = schedule.rule if isinstance(schedule, RecurringSchedule) else schedule
        return expand(rule, count)

    def preview_strings(
        self,
        schedule: RecurringSchedule | RecurrenceRule,
        count: int = PREVIEW_COUNT,
        date_format: str = "MM/DD/YYYY",
    ) -> list[str]:
        return format_schedule_preview(self.preview(schedule, count), date_format)

    def next_due_on_or_after(self, schedule: RecurringSchedule, on_or_after: date) -> date | None:
        """First occurrence on or after `on_or_after`, or None once the end date has passed."""
        candidate = next_occurrence(schedule.rule, on_or_after)
        end = parse_date(schedule.end_date) if schedule.end_date else None
        if end and candidate > end:
            return None
        return candidate

    def next_due_date(self, schedule: RecurringSchedule, after: date) -> date | None:
        """First occurrence strictly after `after`."""
        return self.next_due_on_or_after(schedule, after + timedelta(days=1))

    def _validate(
        self, name, kind, pattern, start_date, start_time, duration_minutes,
        day_of_week, day_of_month, end_date,
    ):
        if not name or not name.strip():
            raise ValueError("Name cannot be empty.")
        if kind not in TASK_KINDS:
            raise ValueError(f"Kind must be one of: {', '.join(TASK_KINDS)}.")
        if pattern not in PATTERNS:
            raise ValueError("Invalid recurrence pattern.")
        if parse_time(start_time) is None:
            raise ValueError("Start time must be HH:MM.")
        if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int) \
                or duration_minutes <= 0:
            raise ValueError("Duration must be a positive number of minutes.")
        # InvalidRule is a ValueError, so the form shows its message as-is
        rule = make_rule(pattern, start_date, day_of_week, day_of_month)
        if end_date:
            end = parse_date(end_date)
            if end is None:
                raise ValueError("Invalid end date.")
            if end < rule.start_date:
                raise ValueError("End date cannot be before the start date.")
