from datetime import date, datetime, time, timedelta
import calendar
from utils.constants import DATE_FORMAT, TIME_FORMAT, TIMESTAMP_FORMAT

# ── Display date formats ──────────────────────────────────────────────────────

_STRFTIME_MAP = {
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD.MM.YYYY": "%d.%m.%Y",
    "MM-DD-YYYY": "%m-%d-%Y",
}


# Wall-clock readers. Only the UI and bootstrap call these; the recurrence
# and deadline modules take dates and instants as arguments.
def today() -> date:
    return date.today()


def now() -> datetime:
    return datetime.now().replace(microsecond=0)


# ── Calendar arithmetic ───────────────────────────────────────────────────────

def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    return min(day, days_in_month(year, month))


def shift_month(year: int, month: int, n: int) -> tuple[int, int]:
    """Return the (year, month) that is n calendar months after year/month."""
    month = month - 1 + n
    return year + month // 12, month % 12 + 1


def month_day(year: int, month: int, day: int) -> date:
    """The given day of year/month, or the month's last day if it is shorter."""
    return date(year, month, clamp_day_to_month(year, month, day))


def weekday_index(d: date) -> int:
    """Weekday of d with Sunday = 0 .. Saturday = 6."""
    return (d.weekday() + 1) % 7


def first_weekday_on_or_after(d: date, day_of_week: int) -> date:
    """First date >= d whose Sunday-based weekday is day_of_week."""
    return d + timedelta(days=(day_of_week - weekday_index(d)) % 7)


# ── Parsing / formatting ──────────────────────────────────────────────────────

def today_str() -> str:
    return date.today().strftime(DATE_FORMAT)


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def parse_time(time_str: str) -> time | None:
    """Parse an HH:MM wall-clock time, returning None on failure."""
    if not time_str:
        return None
    try:
        return datetime.strptime(time_str.strip(), TIME_FORMAT).time()
    except ValueError:
        return None


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a stored ISO timestamp. Empty values mean 'no timestamp'."""
    if not value:
        return None
    return datetime.fromisoformat(value)


def format_timestamp(dt: datetime | None) -> str | None:
    return dt.strftime(TIMESTAMP_FORMAT) if dt else None


def at_time(d: date, start_time: str) -> datetime:
    """Combine a date with an HH:MM string into a naive local timestamp."""
    t = parse_time(start_time)
    if t is None:
        raise ValueError(f"Invalid time: {start_time}")
    return datetime.combine(d, t)


def format_display_date(date_str: str, fmt_key: str = "MM/DD/YYYY") -> str:
    """Convert a YYYY-MM-DD storage string to the user-facing display format."""
    if not date_str:
        return date_str
    d = parse_date(date_str)
    if d is None:
        return date_str
    return d.strftime(_STRFTIME_MAP.get(fmt_key, "%m/%d/%Y"))


def format_display_timestamp(dt: datetime | None, fmt_key: str = "MM/DD/YYYY") -> str:
    if dt is None:
        return ""
    return f"{dt.strftime(_STRFTIME_MAP.get(fmt_key, '%m/%d/%Y'))} {dt.strftime(TIME_FORMAT)}"


def format_schedule_preview(dates: list[date], fmt_key: str = "MM/DD/YYYY") -> list[str]:
    """Render occurrence dates for a read-only preview list, e.g. 'Mon 01/08/2024'."""
    fmt = _STRFTIME_MAP.get(fmt_key, "%m/%d/%Y")
    return [d.strftime(f"%a {fmt}") for d in dates]


def parse_display_date(display_str: str, fmt_key: str) -> date | None:
    """Parse a date in the given display format. Returns None on failure.

    Falls back to ISO 8601 parse if the display format doesn't match.
    """
    if not display_str:
        return None
    fmt = _STRFTIME_MAP.get(fmt_key, "%m/%d/%Y")
    try:
        return datetime.strptime(display_str.strip(), fmt).date()
    except ValueError:
        return parse_date(display_str)
