APP_NAME = "Ops Scheduler"
APP_WIDTH = 1100
APP_HEIGHT = 700
DB_FILE = "ops_scheduler.db"

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

PREVIEW_COUNT = 5
GENERATION_HORIZON_DAYS = 30
GENERATION_CATCHUP_DAYS = 90
UPCOMING_REMINDER_DAYS = 7
DEFAULT_START_TIME = "09:00"
DEFAULT_DURATION_MINUTES = 60

# ── Recurrence ───────────────────────────────────────────────────────────────
PATTERN_DAILY = "daily"
PATTERN_WEEKLY = "weekly"
PATTERN_MONTHLY = "monthly"
PATTERNS = [PATTERN_DAILY, PATTERN_WEEKLY, PATTERN_MONTHLY]

# 0 = Sunday
DAYS_OF_WEEK = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

# ── Work items ───────────────────────────────────────────────────────────────
TASK_KINDS = ["audit", "maintenance", "task"]

STATUS_PENDING = "pending"
STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
CLOSED_STATUSES = frozenset({STATUS_COMPLETED, STATUS_CANCELLED})

STATUS_LABELS = {
    STATUS_PENDING:     "Pending",
    STATUS_IN_PROGRESS: "In progress",
    STATUS_COMPLETED:   "Completed",
    STATUS_CANCELLED:   "Cancelled",
}

BADGE_COLORS = {
    "overdue":  "#F44336",
    "past":     "gray60",
    "today":    "#FF9800",
    "tomorrow": "#2196F3",
    "later":    "gray60",
    None:       "gray60",
}

SEVERITY_COLORS = {
    "error":   "#F44336",
    "warning": "#FF9800",
    "info":    "#2196F3",
}

SEVERITY_ICONS = {
    "error":   "❗",
    "warning": "⚠",
    "info":    "ℹ",
}
