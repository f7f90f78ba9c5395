import math


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round like a kitchen scale: halves go up (149.5 -> 150, 1.25 -> 1.3).

    Python's round() uses banker's rounding, which would turn 148.5 into 148.
    """
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(math.floor(value + 0.5))
