"""
Bridges scored innings to impact inputs.

Sums each player's ledger figures across the innings of a match into an
AggregatedPerformance, crediting fielders from the recorded dismissals,
and ranks the match by aggregated impact. Also rolls several scored
matches up into career PlayerStats for the leaderboards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from cricket_scoring.data.ball_event import WicketType
from cricket_scoring.impact.calculator import (
    FIELDING_ACTIONS,
    calculate_aggregated_impact_score,
)
from cricket_scoring.impact.models import (
    AggregatedPerformance,
    BattingTotals,
    BowlingTotals,
    FieldingTotals,
    MatchHistoryEntry,
    PlayerContribution,
    PlayerStats,
)
from cricket_scoring.state.innings_ledger import InningsState, PlayerStat
from cricket_scoring.utils.overs import (
    balls_from_over_ball,
    economy_rate,
    over_ball_notation,
    to_number,
)

FIELDING_DISMISSALS = {
    WicketType.CAUGHT: "catches",
    WicketType.RUN_OUT: "run_outs",
    WicketType.STUMPED: "stumpings",
}
FIELDING_ACTION_NAMES = {key: action for action, key in FIELDING_ACTIONS.items()}


@dataclass
class _Tally:
    name: str = ""
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    wickets: int = 0
    runs_conceded: int = 0
    balls_bowled: int = 0
    fielding: dict[str, int] = field(
        default_factory=lambda: {"catches": 0, "run_outs": 0, "stumpings": 0}
    )


@dataclass(frozen=True)
class MatchImpact:
    player_id: str
    name: str
    impact_score: int
    performance: AggregatedPerformance


def aggregate_innings(innings: Iterable[InningsState]) -> dict[str, AggregatedPerformance]:
    """Sum per-player figures across innings, keyed by player id.

    Overs are carried in over.ball notation of the combined balls bowled.
    """
    tallies: dict[str, _Tally] = {}

    for inn in innings:
        for pid, stat in inn.player_stats.items():
            t = tallies.setdefault(pid, _Tally(name=stat.name))
            t.runs += stat.runs
            t.balls += stat.balls_faced
            t.fours += stat.fours
            t.sixes += stat.sixes
            t.wickets += stat.wickets_taken
            t.runs_conceded += stat.runs_conceded
            t.balls_bowled += stat.balls_bowled

        for fow in inn.fall_of_wickets:
            details = fow.details
            if details is None or details.kind not in FIELDING_DISMISSALS:
                continue
            key = FIELDING_DISMISSALS[details.kind]
            for fielder in details.fielders:
                t = tallies.setdefault(fielder.id, _Tally(name=fielder.name))
                t.fielding[key] += 1

    return {
        pid: AggregatedPerformance(
            batting=BattingTotals(runs=t.runs, balls=t.balls, fours=t.fours, sixes=t.sixes),
            bowling=BowlingTotals(
                wickets=t.wickets,
                runs=t.runs_conceded,
                overs=over_ball_notation(t.balls_bowled),
            ),
            fielding=FieldingTotals(**t.fielding) if any(t.fielding.values()) else None,
        )
        for pid, t in tallies.items()
    }


def _player_names(innings: list[InningsState]) -> dict[str, str]:
    names: dict[str, str] = {}
    for inn in innings:
        for pid, stat in inn.player_stats.items():
            names.setdefault(pid, stat.name)
        for fow in inn.fall_of_wickets:
            for fielder in fow.details.fielders if fow.details else ():
                names.setdefault(fielder.id, fielder.name)
    return names


def rank_match_impact(innings: Iterable[InningsState]) -> list[MatchImpact]:
    """Players of a match ordered by aggregated impact, best first."""
    innings = list(innings)
    names = _player_names(innings)

    ranked = [
        MatchImpact(
            player_id=pid,
            name=names.get(pid, "") or pid,
            impact_score=calculate_aggregated_impact_score(perf),
            performance=perf,
        )
        for pid, perf in aggregate_innings(innings).items()
    ]
    ranked.sort(key=lambda m: (-m.impact_score, m.name))
    return ranked


def _how_out(stat: PlayerStat) -> str:
    if not stat.is_out:
        return "not out"
    return stat.dismissal.value if stat.dismissal else "out"


def match_contributions(
    innings: Iterable[InningsState],
) -> dict[str, list[PlayerContribution]]:
    """Per-player contributions for one match, keyed by player id.

    Everyone on an innings' batting card gets a batting contribution,
    everyone on its bowling card a bowling one, and fielders one fielding
    contribution per action per innings.
    """
    contributions: dict[str, list[PlayerContribution]] = {}

    for inn in innings:
        for stat in inn.batting_card():
            contributions.setdefault(stat.player_id, []).append(
                PlayerContribution(
                    type="batting",
                    innings_number=inn.innings_number,
                    runs=stat.runs,
                    balls=stat.balls_faced,
                    fours=stat.fours,
                    sixes=stat.sixes,
                    dismissal=_how_out(stat),
                    strike_rate=stat.strike_rate,
                )
            )

        for stat in inn.bowling_card():
            contributions.setdefault(stat.player_id, []).append(
                PlayerContribution(
                    type="bowling",
                    innings_number=inn.innings_number,
                    runs=stat.runs_conceded,
                    overs=stat.overs_bowled,
                    maidens=stat.maidens,
                    wickets=stat.wickets_taken,
                    economy=stat.economy,
                )
            )

        fielding: dict[tuple[str, str], int] = {}
        for fow in inn.fall_of_wickets:
            details = fow.details
            if details is None or details.kind not in FIELDING_DISMISSALS:
                continue
            action = FIELDING_ACTION_NAMES[FIELDING_DISMISSALS[details.kind]]
            for fielder in details.fielders:
                fielding[(fielder.id, action)] = fielding.get((fielder.id, action), 0) + 1
        for (pid, action), count in fielding.items():
            contributions.setdefault(pid, []).append(
                PlayerContribution(
                    type="fielding",
                    innings_number=inn.innings_number,
                    action=action,
                    count=count,
                )
            )

    return contributions


@dataclass
class _Career:
    name: str = ""
    matches: int = 0
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    innings_batted: int = 0
    not_outs: int = 0
    wickets: int = 0
    balls_bowled: int = 0
    runs_conceded: int = 0
    fielding: dict[str, int] = field(
        default_factory=lambda: {"catches": 0, "run_outs": 0, "stumpings": 0}
    )
    history: list[MatchHistoryEntry] = field(default_factory=list)


def career_stats(
    matches: Iterable[tuple[str, Iterable[InningsState]]],
) -> list[PlayerStats]:
    """Career totals across scored matches, one PlayerStats per player.

    Each match is a ``(match_id, innings)`` pair. Only players with a
    contribution in a match are credited with playing it. Batting average
    is runs per dismissal and stays None for a player never dismissed.
    """
    careers: dict[str, _Career] = {}

    for match_id, innings in matches:
        innings = list(innings)
        names = _player_names(innings)
        for pid, contribs in match_contributions(innings).items():
            c = careers.setdefault(pid, _Career(name=names.get(pid, "") or pid))
            c.matches += 1
            c.history.append(MatchHistoryEntry(match_id=match_id, contributions=tuple(contribs)))
            for x in contribs:
                if x.type == "batting":
                    c.runs += int(to_number(x.runs))
                    c.balls += int(to_number(x.balls))
                    c.fours += int(to_number(x.fours))
                    c.sixes += int(to_number(x.sixes))
                    c.innings_batted += 1
                    if x.dismissal == "not out":
                        c.not_outs += 1
                elif x.type == "bowling":
                    c.wickets += int(to_number(x.wickets))
                    c.runs_conceded += int(to_number(x.runs))
                    c.balls_bowled += balls_from_over_ball(to_number(x.overs))
                else:
                    c.fielding[FIELDING_ACTIONS[x.action]] += int(to_number(x.count))

    stats = []
    for pid, c in careers.items():
        outs = c.innings_batted - c.not_outs
        overs = over_ball_notation(c.balls_bowled)
        stats.append(
            PlayerStats(
                name=c.name,
                player_id=pid,
                matches_played=c.matches,
                total_runs=c.runs,
                total_balls=c.balls,
                total_fours=c.fours,
                total_sixes=c.sixes,
                total_not_outs=c.not_outs,
                batting_average=round(c.runs / outs, 2) if outs else None,
                total_wickets=c.wickets,
                total_overs=overs,
                total_runs_conceded=c.runs_conceded,
                bowling_economy=(
                    round(economy_rate(c.runs_conceded, overs), 2) if c.balls_bowled else None
                ),
                total_catches=c.fielding["catches"],
                total_run_outs=c.fielding["run_outs"],
                total_stumpings=c.fielding["stumpings"],
                match_history=tuple(c.history),
            )
        )
    return stats
