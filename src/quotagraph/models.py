import enum
from dataclasses import dataclass, field


class Field(enum.Enum):
    """
    Field names the quota budget a sample belongs to. The
    value is the key used for it in the JSONL log.
    """

    FIVE_HOUR = "5h"
    SEVEN_DAY = "7d"


class PeriodKind(enum.Enum):
    DAY = "day"
    WEEK = "week"


class HistoryError(enum.Enum):
    NO_FILE = "no-file"
    READ_FAILED = "read-failed"


@dataclass(frozen=True, slots=True)
class RawSample:
    """
    RawSample represents a single parsed line
    of the usage history log.
    """

    # unix timestamp in milliseconds
    timestamp_ms: "int"
    # utilization percentage, may exceed 100
    percent: "float"
    tier: "str | None" = None


@dataclass(frozen=True, slots=True)
class CreditLimits:
    """
    CreditLimits holds the absolute credit ceilings of
    a subscription tier for both budget windows.
    """

    five_hour: "int"
    seven_day: "int"

    def for_field(self, budget: "Field") -> "int":
        if budget is Field.FIVE_HOUR:
            return self.five_hour
        if budget is Field.SEVEN_DAY:
            return self.seven_day
        raise ValueError(f"unknown field: {budget!r}")


@dataclass(frozen=True, slots=True)
class ConsumptionPoint:
    timestamp_ms: "int"
    credits: "float"


@dataclass(frozen=True, slots=True)
class ConsumptionDelta:
    """
    ConsumptionDelta is the amount of credits consumed
    between two consecutive samples. Never negative.
    """

    # timestamp of the later sample of the pair
    timestamp_ms: "int"
    credits: "float"


@dataclass(frozen=True, slots=True)
class Bucket:
    start_ms: "int"
    # actual duration, shorter than the bucket width
    # only for a trailing partial bucket
    duration_ms: "int"
    total: "float"
    scaled_rate: "float"


@dataclass(frozen=True, slots=True)
class RateStats:
    total: "int" = 0
    average_rate: "int" = 0
    peak_rate: "int" = 0


@dataclass(frozen=True, slots=True)
class TimeRange:
    start_ms: "int"
    end_ms: "int"
    label: "str"


@dataclass(frozen=True, slots=True)
class HistoryPoint:
    """
    HistoryPoint is a single displayable point. Bucketed output
    carries the bucket duration, raw or downsampled deltas don't.
    """

    timestamp_ms: "int"
    value: "float"
    duration_ms: "int | None" = None


@dataclass(frozen=True, slots=True)
class HistoryResult:
    """
    HistoryResult is returned by every history query. ok is False
    only when the log could not be read at all, in which case
    error holds the reason.
    """

    ok: "bool"
    points: "list[HistoryPoint]" = field(default_factory=list)
    total: "int" = 0
    average_rate: "int" = 0
    peak_rate: "int" = 0
    window_start_ms: "int" = 0
    window_end_ms: "int" = 0
    error: "HistoryError | None" = None
