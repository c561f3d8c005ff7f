"""
Input shapes for impact scoring.

These records are read-only inputs to the calculator. Each can be built
from the camelCase payloads the league API returns via ``from_dict``;
missing numeric fields come through as None and are scored as 0.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

Numeric = Union[int, float, str, None]


@dataclass(frozen=True)
class PlayerContribution:
    """One batting, bowling or fielding contribution in a match."""

    type: str  # batting | bowling | fielding
    innings_number: int = 1

    # Batting
    runs: Numeric = None
    balls: Numeric = None
    fours: Numeric = None
    sixes: Numeric = None
    dismissal: Optional[str] = None  # None or "not out" means not out
    strike_rate: Numeric = None

    # Bowling (runs above is runs conceded)
    overs: Numeric = None
    maidens: Numeric = None
    wickets: Numeric = None
    economy: Numeric = None

    # Fielding
    action: Optional[str] = None  # catch | run out | stumping
    count: Numeric = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlayerContribution":
        return cls(
            type=data.get("type", ""),
            innings_number=int(data.get("inningNumber", data.get("innings_number", 1)) or 1),
            runs=data.get("runs"),
            balls=data.get("balls"),
            fours=data.get("fours"),
            sixes=data.get("sixes"),
            dismissal=data.get("dismissal"),
            strike_rate=data.get("strikeRate", data.get("strike_rate")),
            overs=data.get("overs"),
            maidens=data.get("maidens"),
            wickets=data.get("wickets"),
            economy=data.get("economy"),
            action=data.get("action"),
            count=data.get("count"),
        )


@dataclass(frozen=True)
class BattingTotals:
    runs: Numeric = 0
    balls: Numeric = 0
    fours: Numeric = 0
    sixes: Numeric = 0


@dataclass(frozen=True)
class BowlingTotals:
    wickets: Numeric = 0
    runs: Numeric = 0  # Conceded
    overs: Numeric = 0


@dataclass(frozen=True)
class FieldingTotals:
    catches: Numeric = 0
    run_outs: Numeric = 0
    stumpings: Numeric = 0


@dataclass(frozen=True)
class AggregatedPerformance:
    """A player's summed figures for one match."""

    batting: BattingTotals = field(default_factory=BattingTotals)
    bowling: BowlingTotals = field(default_factory=BowlingTotals)
    fielding: Optional[FieldingTotals] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AggregatedPerformance":
        batting = data.get("batting") or {}
        bowling = data.get("bowling") or {}
        fielding = data.get("fielding")
        return cls(
            batting=BattingTotals(
                runs=batting.get("runs"),
                balls=batting.get("balls"),
                fours=batting.get("fours"),
                sixes=batting.get("sixes"),
            ),
            bowling=BowlingTotals(
                wickets=bowling.get("wickets"),
                runs=bowling.get("runs"),
                overs=bowling.get("overs"),
            ),
            fielding=FieldingTotals(
                catches=fielding.get("catches"),
                run_outs=fielding.get("runOuts", fielding.get("run_outs")),
                stumpings=fielding.get("stumpings"),
            ) if fielding else None,
        )


@dataclass(frozen=True)
class MatchHistoryEntry:
    match_id: str = ""
    contributions: tuple[PlayerContribution, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MatchHistoryEntry":
        return cls(
            match_id=str(data.get("matchId", data.get("match_id", ""))),
            contributions=tuple(
                PlayerContribution.from_dict(c) for c in data.get("contributions") or []
            ),
        )


@dataclass(frozen=True)
class PlayerStats:
    """Career totals for one player, as used by the leaderboards."""

    name: str = ""
    player_id: str = ""
    matches_played: Numeric = 0

    total_runs: Numeric = 0
    total_balls: Numeric = 0
    total_fours: Numeric = 0
    total_sixes: Numeric = 0
    total_not_outs: Numeric = 0
    batting_average: Numeric = None

    total_wickets: Numeric = 0
    total_overs: Numeric = 0
    total_runs_conceded: Numeric = 0
    bowling_economy: Numeric = None

    total_catches: Numeric = 0
    total_run_outs: Numeric = 0
    total_stumpings: Numeric = 0

    match_history: tuple[MatchHistoryEntry, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlayerStats":
        return cls(
            name=data.get("name", ""),
            player_id=str(data.get("id", data.get("player_id", ""))),
            matches_played=data.get("matchesPlayed"),
            total_runs=data.get("totalRuns"),
            total_balls=data.get("totalBalls"),
            total_fours=data.get("totalFours"),
            total_sixes=data.get("totalSixes"),
            total_not_outs=data.get("totalNotOuts"),
            batting_average=data.get("battingAverage"),
            total_wickets=data.get("totalWickets"),
            total_overs=data.get("totalOvers"),
            total_runs_conceded=data.get("totalRunsConceded"),
            bowling_economy=data.get("bowlingEconomy"),
            total_catches=data.get("totalCatches"),
            total_run_outs=data.get("totalRunOuts"),
            total_stumpings=data.get("totalStumpings"),
            match_history=tuple(
                MatchHistoryEntry.from_dict(m) for m in data.get("matchHistory") or []
            ),
        )
