from quotagraph.stats import round_half_up


def format_credits(value: "float") -> "str":
    """
    formats a credit value for display, e.g. 1500000 -> "1.5M",
    2000000 -> "2M" and 350000 -> "350K". Every branch rounds
    half up, so 1250000 shows as "1.3M".
    """
    if value >= 1_000_000:
        tenths = round_half_up(value / 100_000)
        if tenths % 10 == 0:
            return f"{tenths // 10}M"
        return f"{tenths // 10}.{tenths % 10}M"

    if value >= 1000:
        return f"{round_half_up(value / 1000)}K"

    return str(round_half_up(value))
