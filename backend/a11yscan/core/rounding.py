import math


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative scores (round() would round to even)."""
    return int(math.floor(value + 0.5))
