import pytest

from quotagraph.converter import sort_points, to_deltas, to_points
from quotagraph.models import ConsumptionDelta, ConsumptionPoint, Field, RawSample

HOUR = 3_600_000


def _points(*pairs: "tuple[int, float]") -> "list[ConsumptionPoint]":
    return [ConsumptionPoint(timestamp_ms=t, credits=c) for t, c in pairs]


class TestToPoints:
    def test_converts_with_default_limits(self) -> "None":
        samples = [RawSample(timestamp_ms=0, percent=10.0)]
        assert to_points(samples, Field.FIVE_HOUR) == _points((0, 55_000.0))
        assert to_points(samples, Field.SEVEN_DAY) == _points((0, 500_000.0))

    def test_uses_tier_of_each_sample(self) -> "None":
        samples = [
            RawSample(timestamp_ms=0, percent=10.0, tier=None),
            RawSample(timestamp_ms=1, percent=10.0, tier="default_claude_max_20x"),
        ]
        points = to_points(samples, Field.FIVE_HOUR)
        assert [p.credits for p in points] == [55_000.0, 1_100_000.0]


class TestSortPoints:
    def test_stable_for_duplicate_timestamps(self) -> "None":
        points = _points((2, 1.0), (1, 5.0), (2, 3.0), (1, 4.0))
        assert sort_points(points) == _points((1, 5.0), (1, 4.0), (2, 1.0), (2, 3.0))


class TestToDeltas:
    def test_accumulation_and_reset(self) -> "None":
        # 10% -> 20% -> 5% of the Pro 5h limit
        points = _points((0, 55_000.0), (HOUR, 110_000.0), (2 * HOUR, 27_500.0))
        assert to_deltas(points) == [
            ConsumptionDelta(timestamp_ms=HOUR, credits=55_000.0),
            ConsumptionDelta(timestamp_ms=2 * HOUR, credits=27_500.0),
        ]

    def test_equal_values_yield_zero(self) -> "None":
        deltas = to_deltas(_points((0, 10.0), (1, 10.0)))
        assert deltas == [ConsumptionDelta(timestamp_ms=1, credits=0.0)]

    def test_n_points_yield_n_minus_one_deltas(self) -> "None":
        points = _points(*[(i, float(i % 7)) for i in range(50)])
        deltas = to_deltas(points)
        assert len(deltas) == 49
        assert all(d.credits >= 0 for d in deltas)

    @pytest.mark.parametrize("count", [0, 1])
    def test_fewer_than_two_points_yield_nothing(self, count: "int") -> "None":
        assert to_deltas(_points(*[(0, 5.0)] * count)) == []
