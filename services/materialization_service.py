import logging
from datetime import date, timedelta
from database.schedule_dao import ScheduleDAO
from database.task_dao import TaskDAO
from models.recurrence_rule import InvalidRule
from models.schedule import RecurringSchedule
from models.task import Task
from services.recurrence import occurrences_between
from utils.constants import GENERATION_CATCHUP_DAYS, GENERATION_HORIZON_DAYS
from utils.date_helpers import at_time, format_date, parse_date, today

logger = logging.getLogger(__name__)


class MaterializationService:
    """Turns schedule occurrences into pending task rows."""

    def __init__(self, schedule_dao: ScheduleDAO, task_dao: TaskDAO):
        self._schedules = schedule_dao
        self._tasks = task_dao

    def materialize_due(
        self,
        reference_date: date | None = None,
        horizon_days: int = GENERATION_HORIZON_DAYS,
    ) -> list[Task]:
        """
        Create tasks for every active schedule's occurrences up to
        reference_date + horizon_days (default reference: today).
        Returns the newly created tasks; occurrences that already have a
        task are left alone.
        """
        ref = reference_date or today()
        created: list[Task] = []
        schedules = self._schedules.get_active()
        logger.info("Materializing %d active schedule(s) as of %s", len(schedules), ref)

        for schedule in schedules:
            try:
                created += self._materialize_schedule(schedule, ref, horizon_days)
            except InvalidRule as e:
                logger.error("Skipping schedule %r (id=%s): %s", schedule.name, schedule.id, e)

        logger.info("Materialization complete: %d new task(s)", len(created))
        return created

    def generation_window(
        self, schedule: RecurringSchedule, ref: date, horizon_days: int
    ) -> tuple[date, date]:
        """[first, last] dates still to generate for schedule; first > last means nothing to do."""
        rule_start = schedule.rule.start_date
        first = max(rule_start, ref - timedelta(days=GENERATION_CATCHUP_DAYS))
        last_generated = parse_date(schedule.last_generated_date) if schedule.last_generated_date else None
        if last_generated:
            first = max(first, last_generated + timedelta(days=1))

        last = ref + timedelta(days=horizon_days)
        end = parse_date(schedule.end_date) if schedule.end_date else None
        if end:
            last = min(last, end)
        return first, last

    def _materialize_schedule(
        self, schedule: RecurringSchedule, ref: date, horizon_days: int
    ) -> list[Task]:
        first, last = self.generation_window(schedule, ref, horizon_days)
        if first > last:
            logger.debug("Schedule %r has nothing to generate", schedule.name)
            return []

        created = []
        due_dates = occurrences_between(schedule.rule, first, last)
        for d in due_dates:
            due_at = at_time(d, schedule.start_time) + timedelta(minutes=schedule.duration_minutes)
            task = self._tasks.create_for_occurrence(
                schedule_id=schedule.id,
                occurrence_date=format_date(d),
                title=schedule.name,
                kind=schedule.kind,
                due_at=due_at,
                location=schedule.location,
                assignee=schedule.assignee,
                notes=f"Auto-generated from recurring schedule: {schedule.name}",
            )
            if task:
                created.append(task)

        if due_dates:
            self._schedules.update_last_generated(schedule.id, format_date(due_dates[-1]))
        logger.info(
            "Schedule %r: %d occurrence(s) in %s..%s, %d new task(s)",
            schedule.name, len(due_dates), first, last, len(created),
        )
        return created
