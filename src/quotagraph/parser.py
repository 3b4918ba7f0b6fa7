import json
import math
from datetime import datetime, timedelta, timezone
from typing import Iterator

import structlog

from quotagraph.models import Field, RawSample

logger = structlog.get_logger()

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def parse_timestamp(value: "str") -> "int | None":
    """
    parses an ISO-8601 timestamp into unix milliseconds. Timestamps
    without an offset are taken as local time.
    """
    # dates near the ends of the datetime range overflow once
    # shifted to UTC
    try:
        dt = datetime.fromisoformat(value)
        if dt.tzinfo is None:
            dt = dt.astimezone()
        return (dt - _EPOCH) // _ONE_MS
    except (ValueError, OverflowError, OSError):
        return None


def _numeric(value: "object") -> "float | None":
    # bool is an int subclass but never a utilization value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        logger.debug("log_line_skipped", reason="value_out_of_range")
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_line(line: "str", budget: "Field") -> "RawSample | None":
    """
    parses one line of the history log into a RawSample for the
    given field. Returns None for anything that can't be used:
    blank lines, broken or partially written JSON, records without
    a timestamp or without a numeric value for the field.
    """
    line = line.strip()
    if not line:
        return None

    try:
        entry = json.loads(line)
    except (ValueError, RecursionError):
        logger.debug("log_line_skipped", reason="invalid_json")
        return None

    if not isinstance(entry, dict):
        logger.debug("log_line_skipped", reason="not_an_object")
        return None

    ts = entry.get("ts")
    if not ts or not isinstance(ts, str):
        logger.debug("log_line_skipped", reason="missing_timestamp")
        return None

    timestamp_ms = parse_timestamp(ts)
    if timestamp_ms is None:
        logger.debug("log_line_skipped", reason="invalid_timestamp", ts=ts)
        return None

    percent = _numeric(entry.get(budget.value))
    if percent is None:
        return None
    if percent < 0:
        logger.debug("log_line_skipped", reason="negative_utilization", ts=ts)
        return None

    tier = entry.get("tier")
    if not isinstance(tier, str) or not tier:
        tier = None

    return RawSample(timestamp_ms=timestamp_ms, percent=percent, tier=tier)


def parse_lines(text: "str", budget: "Field") -> "Iterator[RawSample]":
    """
    yields every usable sample from the full contents of the log.
    """
    for line in text.split("\n"):
        sample = parse_line(line, budget)
        if sample is not None:
            yield sample
