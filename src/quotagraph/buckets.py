from typing import Sequence

from quotagraph.localtime import DAY_MS, local_midnight_ms
from quotagraph.models import Bucket, ConsumptionDelta


def _check_width(bucket_ms: "int") -> "None":
    if bucket_ms <= 0:
        raise ValueError(f"bucket width must be positive, got {bucket_ms}")


def _sum_between(
    deltas: "Sequence[ConsumptionDelta]", start_ms: "int", end_ms: "int"
) -> "float":
    return sum(d.credits for d in deltas if start_ms <= d.timestamp_ms < end_ms)


def align_start(cutoff_ms: "int", bucket_ms: "int") -> "int":
    """
    aligns the start of a rolling window to a clock boundary in local
    time. Day-wide (or wider) buckets start at midnight, narrower ones
    on the bucket grid counted from midnight of the cutoff's day.
    """
    _check_width(bucket_ms)
    day_start = local_midnight_ms(cutoff_ms)
    if bucket_ms >= DAY_MS:
        return day_start

    into_day = cutoff_ms - day_start
    return day_start + (into_day // bucket_ms) * bucket_ms


def bucket_rolling(
    deltas: "Sequence[ConsumptionDelta]",
    cutoff_ms: "int",
    now_ms: "int",
    bucket_ms: "int",
) -> "list[Bucket]":
    """
    groups deltas into clock-aligned buckets covering the rolling
    window up to now.

    The last bucket is cut short at now. Its sum is projected to a
    full bucket width so a bucket that just started doesn't show up
    as an artificially short bar.
    """
    buckets: "list[Bucket]" = []
    start = align_start(cutoff_ms, bucket_ms)

    while start < now_ms:
        end = min(start + bucket_ms, now_ms)
        duration = end - start
        total = _sum_between(deltas, start, end)

        scaled = total * (bucket_ms / duration) if duration < bucket_ms else total
        buckets.append(
            Bucket(
                start_ms=start, duration_ms=duration, total=total, scaled_rate=scaled
            )
        )
        start += bucket_ms

    return buckets


def bucket_range(
    deltas: "Sequence[ConsumptionDelta]",
    start_ms: "int",
    end_ms: "int",
    bucket_ms: "int",
) -> "list[Bucket]":
    """
    groups deltas into buckets starting exactly at start_ms. Historical
    periods are complete, so no bucket is rescaled.
    """
    _check_width(bucket_ms)
    buckets: "list[Bucket]" = []
    start = start_ms

    while start < end_ms:
        total = _sum_between(deltas, start, start + bucket_ms)
        buckets.append(
            Bucket(
                start_ms=start, duration_ms=bucket_ms, total=total, scaled_rate=total
            )
        )
        start += bucket_ms

    return buckets
