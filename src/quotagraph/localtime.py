import time
from datetime import date, datetime

HOUR_MS = 3_600_000
DAY_MS = 24 * HOUR_MS
WEEK_MS = 7 * DAY_MS


def now_ms() -> "int":
    return time.time_ns() // 1_000_000


def midnight_ms(day: "date") -> "int":
    """
    unix milliseconds of local midnight at the start of the given date.
    """
    midnight = datetime(day.year, day.month, day.day)
    return int(midnight.timestamp()) * 1000


def local_date(timestamp_ms: "int") -> "date":
    return datetime.fromtimestamp(timestamp_ms / 1000).date()


def local_midnight_ms(timestamp_ms: "int") -> "int":
    """
    unix milliseconds of local midnight at or before the timestamp.
    """
    return midnight_ms(local_date(timestamp_ms))
