from dataclasses import dataclass
from typing import Optional
from models.recurrence_rule import RecurrenceRule, make_rule


@dataclass
class RecurringSchedule:
    id: int
    name: str
    kind: str               # 'audit' | 'maintenance' | 'task'
    pattern: str            # 'daily' | 'weekly' | 'monthly'
    start_date: str         # 'YYYY-MM-DD'
    start_time: str         # 'HH:MM'
    duration_minutes: int
    is_active: bool
    day_of_week: Optional[int] = None    # 0=Sun..6=Sat
    day_of_month: Optional[int] = None   # 1-31, clamped to month end
    end_date: Optional[str] = None
    last_generated_date: Optional[str] = None
    location: str = ""
    assignee: str = ""

    @property
    def rule(self) -> RecurrenceRule:
        return make_rule(self.pattern, self.start_date, self.day_of_week, self.day_of_month)
