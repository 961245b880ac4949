from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Task:
    id: int
    title: str
    kind: str                        # 'audit' | 'maintenance' | 'task'
    status: str                      # 'pending' | 'in_progress' | 'completed' | 'cancelled'
    due_at: Optional[datetime] = None
    schedule_id: Optional[int] = None
    occurrence_date: Optional[str] = None   # 'YYYY-MM-DD' of the generating occurrence
    location: str = ""
    assignee: str = ""
    notes: str = ""
    completed_at: Optional[datetime] = None
    created_at: str = ""


@dataclass(frozen=True)
class DeadlineVerdict:
    effective_deadline: Optional[datetime]
    is_overdue: bool
