from typing import Iterable, Sequence

from quotagraph.models import ConsumptionDelta, ConsumptionPoint, Field, RawSample
from quotagraph.tiers import limits_for


def to_points(
    samples: "Iterable[RawSample]", budget: "Field"
) -> "list[ConsumptionPoint]":
    """
    converts utilization percentages into absolute credits. Each
    sample uses the limits of the tier in effect when it was taken.
    """
    return [
        ConsumptionPoint(
            timestamp_ms=s.timestamp_ms,
            credits=s.percent * limits_for(s.tier).for_field(budget) / 100,
        )
        for s in samples
    ]


def sort_points(points: "Iterable[ConsumptionPoint]") -> "list[ConsumptionPoint]":
    # sorted() is stable so duplicate timestamps keep log order
    return sorted(points, key=lambda p: p.timestamp_ms)


def to_deltas(points: "Sequence[ConsumptionPoint]") -> "list[ConsumptionDelta]":
    """
    turns consecutive points (sorted by time) into the credits
    consumed between them.

    A drop in credits is treated as a window reset: the budget counter
    restarted from zero, so the lower value is itself what was consumed
    since the reset. A downward correction from upstream within the
    same window looks identical and is counted the same way.
    """
    deltas: "list[ConsumptionDelta]" = []

    for prev, curr in zip(points, points[1:]):
        if curr.credits >= prev.credits:
            consumed = curr.credits - prev.credits
        else:
            consumed = curr.credits

        deltas.append(
            ConsumptionDelta(timestamp_ms=curr.timestamp_ms, credits=consumed)
        )

    return deltas
