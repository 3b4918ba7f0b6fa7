from datetime import date, timedelta

from quotagraph.localtime import local_date, midnight_ms, now_ms
from quotagraph.models import PeriodKind, TimeRange


def _short_date(day: "date") -> "str":
    return f"{day:%b} {day.day}"


def _day_range(today: "date", offset: "int") -> "TimeRange":
    start = today - timedelta(days=offset)
    end = start + timedelta(days=1)
    return TimeRange(
        start_ms=midnight_ms(start),
        end_ms=midnight_ms(end),
        label=f"{start:%a} {_short_date(start)}",
    )


def _week_range(today: "date", offset: "int") -> "TimeRange":
    # weekday() counts from Monday = 0, so Sunday is 6
    last_sunday = today - timedelta(days=(today.weekday() + 1) % 7)
    end = last_sunday - timedelta(weeks=offset - 1)
    start = end - timedelta(weeks=1)
    return TimeRange(
        start_ms=midnight_ms(start),
        end_ms=midnight_ms(end),
        label=f"{_short_date(start)} - {_short_date(end)}",
    )


def resolve_range(
    kind: "PeriodKind", offset: "int", now: "int | None" = None
) -> "TimeRange | None":
    """
    resolves "offset periods ago" into a calendar-aligned range in
    local time. Offset 0 is the rolling window and returns None;
    offset 1 is yesterday or the last complete Sunday-to-Sunday week.

    Ranges are computed on calendar dates, so a day spanning a DST
    change is 23 or 25 hours long.
    """
    if offset < 0:
        raise ValueError(f"offset must not be negative, got {offset}")
    if offset == 0:
        return None

    today = local_date(now_ms() if now is None else now)

    if kind is PeriodKind.DAY:
        return _day_range(today, offset)
    if kind is PeriodKind.WEEK:
        return _week_range(today, offset)
    raise ValueError(f"unknown period kind: {kind!r}")
