"""
Impact Score Calculator.

Maps batting, bowling and fielding figures to a single comparable
score. Two families of formulas exist side by side:

- match formulas (``calculate_match_impact_score`` and
  ``calculate_aggregated_impact_score``) clamp the economy penalty at zero
  and return whole numbers;
- leaderboard formulas (``calculate_*_impact_score`` on career totals)
  apply the economy term unclamped, so a tight economy earns a bonus, and
  return two-decimal scores.

Every function is pure and floors its result at zero.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable

from cricket_scoring.impact.models import (
    AggregatedPerformance,
    PlayerContribution,
    PlayerStats,
)
from cricket_scoring.utils.overs import (
    economy_rate,
    round_half_up,
    strike_rate,
    to_number,
)

logger = logging.getLogger(__name__)

# Scoring weights
STRIKE_RATE_BASELINE = 100.0
STRIKE_RATE_WEIGHT = 0.1
SIX_WEIGHT = 2  # A six counts double a four
NOT_OUT_BONUS = 5  # Per-match, innings over NOT_OUT_MIN_RUNS
NOT_OUT_MIN_RUNS = 20
CAREER_NOT_OUT_BONUS = 10

WICKET_VALUE = 25
ECONOMY_BASELINE = 6.0
ECONOMY_WEIGHT = 2
OVERS_BONUS_MIN = 3
OVERS_BONUS_PER_OVER = 2

CATCH_VALUE = 15
RUN_OUT_VALUE = 10
STUMPING_VALUE = 12
MULTI_FIELDING_BONUS = 5

FIELDING_ACTIONS = {
    "catch": "catches",
    "run out": "run_outs",
    "stumping": "stumpings",
}


def fielding_impact(catches: float, run_outs: float, stumpings: float) -> float:
    """Shared fielding formula, with a bonus for more than one dismissal."""
    catches = max(0.0, to_number(catches))
    run_outs = max(0.0, to_number(run_outs))
    stumpings = max(0.0, to_number(stumpings))

    impact = catches * CATCH_VALUE + run_outs * RUN_OUT_VALUE + stumpings * STUMPING_VALUE
    if catches + run_outs + stumpings > 1:
        impact += MULTI_FIELDING_BONUS
    return impact


def _batting_impact(
    runs: float, sr: float, fours: float, sixes: float
) -> float:
    impact = runs
    if sr > 0:
        impact += (sr - STRIKE_RATE_BASELINE) * STRIKE_RATE_WEIGHT
    impact += fours + sixes * SIX_WEIGHT
    return impact


def _bowling_impact(wickets: float, overs: float, economy: float) -> float:
    impact = wickets * WICKET_VALUE
    if economy > 0:
        impact -= max(0.0, (economy - ECONOMY_BASELINE) * ECONOMY_WEIGHT)
    if overs >= OVERS_BONUS_MIN:
        impact += math.floor(overs) * OVERS_BONUS_PER_OVER
    return impact


def _contribution_batting(c: PlayerContribution) -> float:
    runs = to_number(c.runs)
    balls = to_number(c.balls)
    if c.strike_rate not in (None, ""):
        sr = to_number(c.strike_rate)
    else:
        sr = strike_rate(runs, balls)

    impact = _batting_impact(runs, sr, to_number(c.fours), to_number(c.sixes))
    is_not_out = not c.dismissal or c.dismissal == "not out"
    if is_not_out and runs > NOT_OUT_MIN_RUNS:
        impact += NOT_OUT_BONUS
    return impact


def _contribution_bowling(c: PlayerContribution) -> float:
    overs = to_number(c.overs)
    if c.economy not in (None, ""):
        economy = to_number(c.economy)
    else:
        economy = economy_rate(to_number(c.runs), overs)
    return _bowling_impact(to_number(c.wickets), overs, economy)


def calculate_match_impact_score(contributions: Iterable[PlayerContribution]) -> int:
    """Impact of one player's contributions in a single match.

    Fielding contributions are tallied per action first and scored once,
    so the multi-dismissal bonus applies at most once per match.
    """
    total = 0.0
    fielding = {"catches": 0.0, "run_outs": 0.0, "stumpings": 0.0}

    for c in contributions:
        if c.type == "batting":
            total += _contribution_batting(c)
        elif c.type == "bowling":
            total += _contribution_bowling(c)
        elif c.type == "fielding":
            key = FIELDING_ACTIONS.get(c.action or "")
            if key is not None:
                fielding[key] += to_number(c.count)
        else:
            logger.debug("Skipping contribution of unknown type %r", c.type)

    if any(fielding.values()):
        total += fielding_impact(**fielding)

    return max(0, int(round_half_up(total)))


def calculate_aggregated_impact_score(performance: AggregatedPerformance) -> int:
    """Impact of a player's summed match figures.

    Strike rate and economy are derived from the totals.
    """
    bat = performance.batting
    runs = to_number(bat.runs)
    total = _batting_impact(
        runs,
        strike_rate(runs, to_number(bat.balls)),
        to_number(bat.fours),
        to_number(bat.sixes),
    )

    bowl = performance.bowling
    overs = to_number(bowl.overs)
    total += _bowling_impact(
        to_number(bowl.wickets), overs, economy_rate(to_number(bowl.runs), overs)
    )

    if performance.fielding is not None:
        f = performance.fielding
        total += fielding_impact(f.catches, f.run_outs, f.stumpings)

    return max(0, int(round_half_up(total)))


def calculate_batting_impact_score(player: PlayerStats) -> float:
    runs = to_number(player.total_runs)
    sr = strike_rate(runs, to_number(player.total_balls))
    impact = (
        runs
        + (sr - STRIKE_RATE_BASELINE) * STRIKE_RATE_WEIGHT
        + to_number(player.total_fours)
        + to_number(player.total_sixes) * SIX_WEIGHT
        + to_number(player.total_not_outs) * CAREER_NOT_OUT_BONUS
    )
    return max(0.0, round_half_up(impact, 2))


def calculate_bowling_impact_score(player: PlayerStats) -> float:
    """Career bowling impact.

    The economy term is not clamped: economies under the baseline add to
    the score, and a player with no overs scores the full baseline bonus.
    """
    overs = to_number(player.total_overs)
    economy = economy_rate(to_number(player.total_runs_conceded), overs)
    impact = (
        to_number(player.total_wickets) * WICKET_VALUE
        - (economy - ECONOMY_BASELINE) * ECONOMY_WEIGHT
    )
    if overs >= OVERS_BONUS_MIN:
        impact += math.floor(overs) * OVERS_BONUS_PER_OVER
    return max(0.0, round_half_up(impact, 2))


def calculate_fielding_impact_score(player: PlayerStats) -> float:
    impact = fielding_impact(
        player.total_catches, player.total_run_outs, player.total_stumpings
    )
    return max(0.0, round_half_up(impact, 2))


def calculate_overall_impact_score(player: PlayerStats) -> float:
    return round_half_up(
        calculate_batting_impact_score(player)
        + calculate_bowling_impact_score(player)
        + calculate_fielding_impact_score(player),
        2,
    )


calculate_impact_score = calculate_match_impact_score
