from quotagraph.models import CreditLimits, Field
from quotagraph.tiers import DEFAULT_LIMITS, limits_for


class TestLimitsFor:
    def test_known_tier(self) -> "None":
        limits = limits_for("default_claude_max_5x")
        assert limits == CreditLimits(five_hour=3_300_000, seven_day=41_666_700)

    def test_max_20x_tier(self) -> "None":
        limits = limits_for("default_claude_max_20x")
        assert limits.five_hour == 11_000_000
        assert limits.seven_day == 83_333_300

    def test_missing_tier_falls_back_to_pro(self) -> "None":
        assert limits_for(None) == DEFAULT_LIMITS
        assert limits_for("") == DEFAULT_LIMITS

    def test_unknown_tier_falls_back_to_pro(self) -> "None":
        assert limits_for("enterprise_unknown") == DEFAULT_LIMITS
        assert DEFAULT_LIMITS == CreditLimits(five_hour=550_000, seven_day=5_000_000)


class TestCreditLimitsForField:
    def test_selects_field(self) -> "None":
        assert DEFAULT_LIMITS.for_field(Field.FIVE_HOUR) == 550_000
        assert DEFAULT_LIMITS.for_field(Field.SEVEN_DAY) == 5_000_000
