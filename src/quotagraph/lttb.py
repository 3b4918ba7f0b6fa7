import math
from typing import Sequence

from quotagraph.models import ConsumptionDelta


def downsample(
    points: "Sequence[ConsumptionDelta]", target: "int"
) -> "list[ConsumptionDelta]":
    """
    reduces points to target points with Largest-Triangle-Three-Buckets.

    The first and last points are always kept. The interior is split
    into target - 2 buckets and from each bucket the point forming the
    largest triangle with the previously selected point and the average
    of the next bucket is kept. That keeps peaks and the overall shape
    far better than averaging each bucket.

    Returns a copy of points when there is nothing to reduce.
    """
    length = len(points)
    if target >= length or target < 3:
        return list(points)

    selected: "list[ConsumptionDelta]" = [points[0]]
    bucket_size = (length - 2) / (target - 2)
    prev = 0

    for i in range(target - 2):
        start = math.floor(i * bucket_size) + 1
        end = math.floor((i + 1) * bucket_size) + 1

        # centroid of the next bucket, or of the tail for the last one
        next_start = end
        next_end = min(math.floor((i + 2) * bucket_size) + 1, length)
        span = points[next_start:next_end]
        avg_t = sum(p.timestamp_ms for p in span) / len(span)
        avg_v = sum(p.credits for p in span) / len(span)

        p_t = points[prev].timestamp_ms
        p_v = points[prev].credits
        best = start
        max_area = -1.0

        for j in range(start, end):
            area = abs(
                (p_t - avg_t) * (points[j].credits - p_v)
                - (p_t - points[j].timestamp_ms) * (avg_v - p_v)
            )
            # strict comparison so ties keep the earliest point
            if area > max_area:
                max_area = area
                best = j

        selected.append(points[best])
        prev = best

    selected.append(points[-1])
    return selected
