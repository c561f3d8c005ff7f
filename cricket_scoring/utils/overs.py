"""
Overs and rate utility functions.

Cricket uses two overs representations side by side:

- over.ball notation: 7 balls is written 1.1 (one over, one ball). This is
  the divisor used for bowling economy.
- decimal overs: 7 balls is 1.1666... overs. This is the divisor used for
  run rates.

Both are kept as separate named conversions.
"""

from __future__ import annotations

import math
from typing import Any, Optional

BALLS_PER_OVER = 6


def over_ball_notation(balls: int, balls_per_over: int = BALLS_PER_OVER) -> float:
    """Convert a legal ball count to over.ball notation (7 -> 1.1)."""
    return balls // balls_per_over + (balls % balls_per_over) / 10


def over_ball_str(overs: int, balls: int) -> str:
    """Human-readable over.ball string, e.g. '5.3'."""
    return f"{overs}.{balls}"


def decimal_overs(overs: int, balls: int, balls_per_over: int = BALLS_PER_OVER) -> float:
    """Completed overs plus the current over's balls as a true fraction."""
    return overs + balls / balls_per_over


def strike_rate(runs: float, balls: float) -> float:
    """Runs per 100 balls faced, 0 when no balls have been faced."""
    if balls <= 0:
        return 0.0
    return runs / balls * 100


def economy_rate(runs_conceded: float, overs: float) -> float:
    """Runs conceded per over, 0 when no overs have been bowled."""
    if overs <= 0:
        return 0.0
    return runs_conceded / overs


def run_rate(runs: float, overs: float) -> float:
    """Runs per decimal over, 0 before the first legal ball."""
    if overs <= 0:
        return 0.0
    return runs / overs


def required_run_rate(
    target: int, runs: int, overs_done: float, max_overs: int
) -> Optional[float]:
    """Rate needed over the remaining overs.

    Returns None when no overs remain, so callers never divide by a
    zero or negative horizon.
    """
    remaining_overs = max_overs - overs_done
    if remaining_overs <= 0:
        return None
    return (target - runs + 1) / remaining_overs


def round_half_up(value: float, places: int = 0) -> float:
    """Round with halves going up (2.5 -> 3, -2.5 -> -2)."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def to_number(value: Any) -> float:
    """Coerce an API field to a number; absent, unparseable or non-finite -> 0."""
    if value is None or value == "":
        return 0.0
    try:
        parsed = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def balls_from_over_ball(overs: float, balls_per_over: int = BALLS_PER_OVER) -> int:
    """Inverse of over_ball_notation (1.1 -> 7)."""
    whole = int(overs)
    return whole * balls_per_over + round((overs - whole) * 10)
