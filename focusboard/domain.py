"""Vocabulary shared by the API and the sync client."""
from datetime import date, datetime, timezone


SESSION_TYPES = ("work", "short_break", "long_break")
GOAL_CATEGORIES = ("short", "long", "life")
TIME_OF_DAY_BUCKETS = ("Morning", "Afternoon", "Evening", "Night")

ACTIVITY_LOG_LIMIT = 30
SESSION_HISTORY_LIMIT = 100


def utc_now():
    return datetime.now(timezone.utc)


def utc_today():
    return utc_now().date()


def iso_utc(value):
    """ISO string with a trailing Z for an aware or naive-UTC datetime."""
    if value.tzinfo:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


def parse_iso_datetime(value):
    """Parse '2025-09-07T18:30:00Z' or an offset form; None when unparseable."""
    if not value or not isinstance(value, str):
        return None
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_iso_date(value):
    """Parse the leading YYYY-MM-DD of a string; None when unparseable."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def iso_week(day):
    """(ISO year, ISO week number) of a date."""
    iso = day.isocalendar()
    return iso[0], iso[1]


def time_of_day_bucket(hour):
    if 5 <= hour < 12:
        return "Morning"
    if 12 <= hour < 17:
        return "Afternoon"
    if 17 <= hour < 22:
        return "Evening"
    return "Night"


def default_time_of_day_stats():
    return [{"time": bucket, "completed": 0} for bucket in TIME_OF_DAY_BUCKETS]
