import math
from typing import Sequence

from quotagraph.models import ConsumptionDelta, RateStats


def round_half_up(value: "float") -> "int":
    """
    rounds to the nearest integer with halves going up, unlike
    the builtin round() which rounds halves to even.
    """
    return math.floor(value + 0.5)


def bucket_count(window_ms: "int", rate_bucket_ms: "int") -> "int":
    """
    number of whole rate buckets in the window, at least one.
    """
    if rate_bucket_ms <= 0:
        raise ValueError(f"rate bucket width must be positive, got {rate_bucket_ms}")
    if window_ms < 0:
        raise ValueError(f"window must not be negative, got {window_ms}")
    return max(1, window_ms // rate_bucket_ms)


def rate_stats(
    deltas: "Sequence[ConsumptionDelta]",
    window_start_ms: "int",
    window_ms: "int",
    rate_bucket_ms: "int",
) -> "RateStats":
    """
    computes total, average and peak consumption per rate bucket.

    Rate buckets are fixed slices of rate_bucket_ms starting at
    window_start_ms, independent of how the points are displayed,
    so "per hour" figures stay stable whatever the bar width is.
    A delta belongs to the bucket whose [start, end) contains it.
    """
    n = bucket_count(window_ms, rate_bucket_ms)
    total = round_half_up(sum(d.credits for d in deltas))

    sums = [0.0] * n
    for d in deltas:
        offset = d.timestamp_ms - window_start_ms
        if offset < 0:
            continue
        idx = offset // rate_bucket_ms
        if idx < n:
            sums[idx] += d.credits

    peak = max(sums) if deltas else 0.0

    return RateStats(
        total=total,
        average_rate=round_half_up(total / n),
        peak_rate=round_half_up(peak),
    )
