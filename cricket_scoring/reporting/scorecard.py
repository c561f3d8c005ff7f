"""
Scorecard and leaderboard tables.

Flattens innings state and leaderboards into pandas DataFrames for
display and CSV export.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from cricket_scoring.impact.aggregation import MatchImpact
from cricket_scoring.impact.leaderboard import Leaderboard, LeaderboardEntry
from cricket_scoring.state.innings_ledger import InningsState

BATTING_COLUMNS = ["batter", "how_out", "runs", "balls", "fours", "sixes", "strike_rate"]
BOWLING_COLUMNS = ["bowler", "overs", "maidens", "runs", "wickets", "economy"]
PARTNERSHIP_COLUMNS = ["wicket", "batters", "runs", "balls", "strike_rate"]


def batting_frame(state: InningsState) -> pd.DataFrame:
    """Batting card in order of appearance."""
    rows = [
        {
            "batter": stat.name or stat.player_id,
            "how_out": (
                (stat.dismissal.value if stat.dismissal else "out")
                if stat.is_out else "not out"
            ),
            "runs": stat.runs,
            "balls": stat.balls_faced,
            "fours": stat.fours,
            "sixes": stat.sixes,
            "strike_rate": round(stat.strike_rate, 2),
        }
        for stat in state.batting_card()
    ]
    return pd.DataFrame(rows, columns=BATTING_COLUMNS)


def bowling_frame(state: InningsState) -> pd.DataFrame:
    """Bowling card in order of first delivery."""
    rows = [
        {
            "bowler": stat.name or stat.player_id,
            "overs": stat.overs_bowled,
            "maidens": stat.maidens,
            "runs": stat.runs_conceded,
            "wickets": stat.wickets_taken,
            "economy": round(stat.economy, 2),
        }
        for stat in state.bowling_card()
    ]
    return pd.DataFrame(rows, columns=BOWLING_COLUMNS)


def fall_of_wickets_frame(state: InningsState) -> pd.DataFrame:
    rows = [
        {
            "wicket": fow.wicket_number,
            "score": fow.score,
            "overs": fow.overs,
            "batter": fow.player.name if fow.player else "",
        }
        for fow in state.fall_of_wickets
    ]
    return pd.DataFrame(rows, columns=["wicket", "score", "overs", "batter"])


def partnerships_frame(state: InningsState) -> pd.DataFrame:
    """Completed partnerships by wicket, then the unbroken one if it has begun."""
    pairs = list(state.partnerships)
    current = state.partnership
    if current.runs or current.balls:
        pairs.append(current)
    rows = [
        {
            "wicket": i,
            "batters": " & ".join(
                p.name for p in (pair.batter_one, pair.batter_two) if p is not None
            ),
            "runs": pair.runs,
            "balls": pair.balls,
            "strike_rate": round(pair.strike_rate, 2),
        }
        for i, pair in enumerate(pairs, start=1)
    ]
    return pd.DataFrame(rows, columns=PARTNERSHIP_COLUMNS)


def match_impact_frame(ranking: Iterable[MatchImpact]) -> pd.DataFrame:
    rows = [
        {"player": m.name, "player_id": m.player_id, "impact": m.impact_score}
        for m in ranking
    ]
    return pd.DataFrame(rows, columns=["player", "player_id", "impact"])


def _entries_frame(entries: list[LeaderboardEntry], columns: list[str]) -> pd.DataFrame:
    frame = pd.DataFrame([vars(e) for e in entries], columns=columns)
    return frame.set_index("rank") if not frame.empty else frame


def leaderboard_frames(board: Leaderboard) -> dict[str, pd.DataFrame]:
    """One DataFrame per leaderboard table, indexed by rank."""
    base = ["rank", "name", "matches", "impact_score"]
    return {
        "top_batsmen": _entries_frame(board.top_batsmen, base + ["runs", "average"]),
        "top_bowlers": _entries_frame(board.top_bowlers, base + ["wickets", "economy"]),
        "top_fielders": _entries_frame(
            board.top_fielders, base + ["catches", "run_outs", "stumpings"]
        ),
        "rising_stars": _entries_frame(board.rising_stars, base),
    }


def innings_summary(state: InningsState) -> str:
    """Printable scorecard for one innings."""
    team = state.batting_team.name if state.batting_team else f"Innings {state.innings_number}"
    extras = state.extras
    lines = [
        f"{team}: {state.runs}/{state.wickets} ({state.over_ball_str} ov)",
        "",
        batting_frame(state).to_string(index=False),
        "",
        (
            f"Extras: {extras.total} (w {extras.wides}, nb {extras.no_balls}, "
            f"b {extras.byes}, lb {extras.leg_byes}, pen {extras.penalties})"
        ),
        "",
        bowling_frame(state).to_string(index=False),
    ]
    fow = fall_of_wickets_frame(state)
    if not fow.empty:
        lines += ["", "Fall of wickets:", fow.to_string(index=False)]
    pairs = partnerships_frame(state)
    if not pairs.empty:
        lines += ["", "Partnerships:", pairs.to_string(index=False)]
    return "\n".join(lines)


def export_innings(state: InningsState, directory: Path, prefix: str = "") -> list[Path]:
    """Write batting, bowling, fall-of-wickets and partnership CSVs; returns the paths."""
    directory.mkdir(parents=True, exist_ok=True)
    stem = f"{prefix}innings{state.innings_number}"
    written = []
    for name, frame in (
        ("batting", batting_frame(state)),
        ("bowling", bowling_frame(state)),
        ("fall_of_wickets", fall_of_wickets_frame(state)),
        ("partnerships", partnerships_frame(state)),
    ):
        path = directory / f"{stem}_{name}.csv"
        frame.to_csv(path, index=False)
        written.append(path)
    return written
