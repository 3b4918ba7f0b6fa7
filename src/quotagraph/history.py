from pathlib import Path
from typing import Callable, Sequence

import structlog

from quotagraph.buckets import align_start, bucket_range, bucket_rolling
from quotagraph.converter import sort_points, to_deltas, to_points
from quotagraph.localtime import DAY_MS, HOUR_MS, WEEK_MS, now_ms
from quotagraph.lttb import downsample
from quotagraph.models import (
    Bucket,
    ConsumptionDelta,
    Field,
    HistoryError,
    HistoryPoint,
    HistoryResult,
    PeriodKind,
    RawSample,
)
from quotagraph.parser import parse_lines
from quotagraph.ranges import resolve_range
from quotagraph.stats import rate_stats

logger = structlog.get_logger()

# rolling window used for a period kind when no offset is given
_ROLLING_WINDOWS: "dict[PeriodKind, int]" = {
    PeriodKind.DAY: DAY_MS,
    PeriodKind.WEEK: WEEK_MS,
}

_ROLLING_LABELS: "dict[PeriodKind, str]" = {
    PeriodKind.DAY: "Last 24 hours",
    PeriodKind.WEEK: "Last 7 days",
}


def _bucket_points(buckets: "Sequence[Bucket]") -> "list[HistoryPoint]":
    return [
        HistoryPoint(
            timestamp_ms=b.start_ms, value=b.scaled_rate, duration_ms=b.duration_ms
        )
        for b in buckets
    ]


def _delta_points(deltas: "Sequence[ConsumptionDelta]") -> "list[HistoryPoint]":
    return [HistoryPoint(timestamp_ms=d.timestamp_ms, value=d.credits) for d in deltas]


class HistoryReader:
    """
    HistoryReader answers history queries against the JSONL usage
    log. It keeps no state between calls: every query reads the full
    file, so results always reflect what has been appended so far and
    concurrent queries don't need any coordination.

    Log problems are reported through HistoryResult.ok/error, never
    raised. Malformed lines are skipped.
    """

    def __init__(
        self,
        log_path: "Path",
        clock: "Callable[[], int]" = now_ms,
    ) -> "None":
        self._log_path = log_path
        self._clock = clock

    @property
    def log_path(self) -> "Path":
        return self._log_path

    def _load(self) -> "tuple[str | None, HistoryError | None]":
        if not self._log_path.exists():
            logger.debug("history_file_missing", path=str(self._log_path))
            return None, HistoryError.NO_FILE

        try:
            return self._log_path.read_text(encoding="utf-8"), None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(
                "history_read_failed", path=str(self._log_path), error=str(e)
            )
            return None, HistoryError.READ_FAILED

    def _deltas(
        self, samples: "Sequence[RawSample]", budget: "Field"
    ) -> "list[ConsumptionDelta]":
        return to_deltas(sort_points(to_points(samples, budget)))

    def read_history(
        self,
        window_ms: "int",
        budget: "Field",
        max_points: "int",
        bucket_ms: "int" = 0,
        rate_bucket_ms: "int" = HOUR_MS,
        now: "int | None" = None,
    ) -> "HistoryResult":
        """
        reads the rolling window ending now.

        With a positive bucket_ms the points are clock-aligned buckets
        and the window start moves back to the first bucket boundary.
        Otherwise the raw deltas are returned, downsampled with LTTB
        when there are more than max_points of them.
        """
        now = self._clock() if now is None else now
        cutoff = now - window_ms

        text, error = self._load()
        if text is None:
            return HistoryResult(
                ok=False, window_start_ms=cutoff, window_end_ms=now, error=error
            )

        samples = [s for s in parse_lines(text, budget) if s.timestamp_ms >= cutoff]
        if len(samples) < 2:
            return HistoryResult(ok=True, window_start_ms=cutoff, window_end_ms=now)

        deltas = self._deltas(samples, budget)
        stats = rate_stats(deltas, cutoff, window_ms, rate_bucket_ms)

        window_start = cutoff
        if bucket_ms > 0:
            window_start = align_start(cutoff, bucket_ms)
            points = _bucket_points(bucket_rolling(deltas, cutoff, now, bucket_ms))
        elif len(deltas) > max_points:
            points = _delta_points(downsample(deltas, max_points))
        else:
            points = _delta_points(deltas)

        logger.debug(
            "history_query_done",
            field=budget.value,
            samples=len(samples),
            points=len(points),
            total=stats.total,
        )
        return HistoryResult(
            ok=True,
            points=points,
            total=stats.total,
            average_rate=stats.average_rate,
            peak_rate=stats.peak_rate,
            window_start_ms=window_start,
            window_end_ms=now,
        )

    def read_history_range(
        self,
        start_ms: "int",
        end_ms: "int",
        budget: "Field",
        bucket_ms: "int",
        rate_bucket_ms: "int" = HOUR_MS,
    ) -> "HistoryResult":
        """
        reads a fixed, calendar-aligned range [start_ms, end_ms). A
        sample stamped exactly at end_ms belongs to the next period,
        so the bucket sums always add up to the total. Buckets are
        never rescaled.
        """
        text, error = self._load()
        if text is None:
            return HistoryResult(
                ok=False, window_start_ms=start_ms, window_end_ms=end_ms, error=error
            )

        samples = [
            s for s in parse_lines(text, budget) if start_ms <= s.timestamp_ms < end_ms
        ]
        if len(samples) < 2:
            return HistoryResult(
                ok=True, window_start_ms=start_ms, window_end_ms=end_ms
            )

        deltas = self._deltas(samples, budget)
        stats = rate_stats(deltas, start_ms, end_ms - start_ms, rate_bucket_ms)

        points: "list[HistoryPoint]" = []
        if bucket_ms > 0:
            points = _bucket_points(bucket_range(deltas, start_ms, end_ms, bucket_ms))

        logger.debug(
            "history_range_query_done",
            field=budget.value,
            samples=len(samples),
            points=len(points),
            total=stats.total,
        )
        return HistoryResult(
            ok=True,
            points=points,
            total=stats.total,
            average_rate=stats.average_rate,
            peak_rate=stats.peak_rate,
            window_start_ms=start_ms,
            window_end_ms=end_ms,
        )

    def read_period(
        self,
        kind: "PeriodKind",
        offset: "int",
        budget: "Field",
        bucket_ms: "int",
        rate_bucket_ms: "int" = HOUR_MS,
        max_points: "int" = 100,
        now: "int | None" = None,
    ) -> "tuple[HistoryResult, str]":
        """
        reads "offset periods ago" and returns the result together with
        a label for the period. Offset 0 reads the rolling day or week.
        """
        now = self._clock() if now is None else now
        period = resolve_range(kind, offset, now)

        if period is None:
            window_ms = _ROLLING_WINDOWS[kind]
            result = self.read_history(
                window_ms, budget, max_points, bucket_ms, rate_bucket_ms, now
            )
            return result, _ROLLING_LABELS[kind]

        result = self.read_history_range(
            period.start_ms, period.end_ms, budget, bucket_ms, rate_bucket_ms
        )
        return result, period.label
