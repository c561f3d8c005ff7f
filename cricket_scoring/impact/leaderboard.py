"""
Career leaderboards.

Ranks players by career totals into four tables: top batters (runs),
top bowlers (wickets), top fielders (fielding impact) and rising stars
(overall impact).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from cricket_scoring.impact.calculator import (
    FIELDING_ACTIONS,
    calculate_batting_impact_score,
    calculate_bowling_impact_score,
    calculate_fielding_impact_score,
    calculate_match_impact_score,
    calculate_overall_impact_score,
)
from cricket_scoring.impact.models import MatchHistoryEntry, PlayerStats
from cricket_scoring.utils.overs import to_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    name: str
    impact_score: float
    matches: int = 0

    # Role-specific figures; unused ones stay None
    runs: Optional[int] = None
    average: Optional[float] = None
    wickets: Optional[int] = None
    economy: Optional[float] = None
    catches: Optional[int] = None
    run_outs: Optional[int] = None
    stumpings: Optional[int] = None

    @property
    def total_dismissals(self) -> int:
        return (self.catches or 0) + (self.run_outs or 0) + (self.stumpings or 0)


@dataclass
class Leaderboard:
    top_batsmen: list[LeaderboardEntry] = field(default_factory=list)
    top_bowlers: list[LeaderboardEntry] = field(default_factory=list)
    top_fielders: list[LeaderboardEntry] = field(default_factory=list)
    rising_stars: list[LeaderboardEntry] = field(default_factory=list)


def aggregate_fielding_totals(player: PlayerStats) -> PlayerStats:
    """Career fielding and boundary totals rebuilt from match history.

    Players without match history come back with zeroed fielding and
    boundary totals.
    """
    totals = {"catches": 0.0, "run_outs": 0.0, "stumpings": 0.0}
    fours = 0.0
    sixes = 0.0

    for match in player.match_history:
        for c in match.contributions:
            if c.type == "fielding":
                key = FIELDING_ACTIONS.get(c.action or "")
                if key is not None:
                    totals[key] += to_number(c.count)
            elif c.type == "batting":
                fours += to_number(c.fours)
                sixes += to_number(c.sixes)

    return replace(
        player,
        total_catches=int(totals["catches"]),
        total_run_outs=int(totals["run_outs"]),
        total_stumpings=int(totals["stumpings"]),
        total_fours=int(fours),
        total_sixes=int(sixes),
    )


def highest_match_impact(match_history: Iterable[MatchHistoryEntry]) -> int:
    """Best single-match impact score, 0 with no history."""
    best = 0
    for match in match_history:
        if match.contributions:
            best = max(best, calculate_match_impact_score(match.contributions))
    return best


def _rounded(value, places: int = 2) -> float:
    return round(to_number(value), places)


def build_leaderboard(players: Iterable[PlayerStats], limit: int = 5) -> Leaderboard:
    """Rank players into the four leaderboard tables, ``limit`` rows each."""
    players = [aggregate_fielding_totals(p) for p in players]

    batting = [
        (p, calculate_batting_impact_score(p))
        for p in players
        if to_number(p.total_runs) > 0
    ]
    batting.sort(key=lambda item: to_number(item[0].total_runs), reverse=True)

    bowling = [
        (p, calculate_bowling_impact_score(p))
        for p in players
        if to_number(p.total_wickets) > 0
    ]
    bowling.sort(key=lambda item: to_number(item[0].total_wickets), reverse=True)

    fielding = [(p, calculate_fielding_impact_score(p)) for p in players]
    fielding = [item for item in fielding if item[1] > 0]
    fielding.sort(key=lambda item: item[1], reverse=True)

    overall = [(p, calculate_overall_impact_score(p)) for p in players]
    overall = [item for item in overall if item[1] > 0]
    overall.sort(key=lambda item: item[1], reverse=True)

    board = Leaderboard(
        top_batsmen=[
            LeaderboardEntry(
                rank=i,
                name=p.name,
                impact_score=score,
                matches=int(to_number(p.matches_played)),
                runs=int(to_number(p.total_runs)),
                average=_rounded(p.batting_average),
            )
            for i, (p, score) in enumerate(batting[:limit], start=1)
        ],
        top_bowlers=[
            LeaderboardEntry(
                rank=i,
                name=p.name,
                impact_score=score,
                matches=int(to_number(p.matches_played)),
                wickets=int(to_number(p.total_wickets)),
                economy=_rounded(p.bowling_economy),
            )
            for i, (p, score) in enumerate(bowling[:limit], start=1)
        ],
        top_fielders=[
            LeaderboardEntry(
                rank=i,
                name=p.name,
                impact_score=score,
                matches=int(to_number(p.matches_played)),
                catches=int(to_number(p.total_catches)),
                run_outs=int(to_number(p.total_run_outs)),
                stumpings=int(to_number(p.total_stumpings)),
            )
            for i, (p, score) in enumerate(fielding[:limit], start=1)
        ],
        rising_stars=[
            LeaderboardEntry(
                rank=i,
                name=p.name,
                impact_score=score,
                matches=int(to_number(p.matches_played)),
            )
            for i, (p, score) in enumerate(overall[:limit], start=1)
        ],
    )
    logger.debug(
        "Leaderboard built from %d players: %d batters, %d bowlers, %d fielders, %d stars",
        len(players), len(board.top_batsmen), len(board.top_bowlers),
        len(board.top_fielders), len(board.rising_stars),
    )
    return board
