from quotagraph.models import CreditLimits

# credit ceilings per subscription tier, keyed by the tier
# identifier written to the history log
TIER_LIMITS: "dict[str, CreditLimits]" = {
    "default_claude_max_5x": CreditLimits(five_hour=3_300_000, seven_day=41_666_700),
    "default_claude_max_20x": CreditLimits(
        five_hour=11_000_000, seven_day=83_333_300
    ),
}

# Pro tier, used whenever the tier is missing or unknown
DEFAULT_LIMITS = CreditLimits(five_hour=550_000, seven_day=5_000_000)


def limits_for(tier: "str | None") -> "CreditLimits":
    """
    returns the credit limits for the given tier, falling back
    to the default limits.
    """
    if tier and tier in TIER_LIMITS:
        return TIER_LIMITS[tier]
    return DEFAULT_LIMITS
