import math

RED = "#ef4444"
AMBER = "#f59e0b"
BLUE = "#3b82f6"
GREEN = "#22c55e"

_HEX = {"red": RED, "amber": AMBER, "blue": BLUE, "green": GREEN}


def score_bucket(score) -> str:
    """[0,3] red, (3,5] amber, (5,7] blue, (7,10] green."""
    try:
        value = float(score)
    except (TypeError, ValueError):
        value = 0.0
    if not math.isfinite(value) or value <= 3:
        return "red"
    if value <= 5:
        return "amber"
    if value <= 7:
        return "blue"
    return "green"


def score_color(score) -> str:
    return _HEX[score_bucket(score)]
