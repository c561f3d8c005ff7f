"""Tests for scorecard and leaderboard tables."""

from __future__ import annotations

import pandas as pd
import pytest

from cricket_scoring.data.ball_event import WicketDetails, WicketType
from cricket_scoring.impact.aggregation import rank_match_impact
from cricket_scoring.impact.leaderboard import Leaderboard, build_leaderboard
from cricket_scoring.impact.models import PlayerStats
from cricket_scoring.reporting.scorecard import (
    BATTING_COLUMNS,
    BOWLING_COLUMNS,
    PARTNERSHIP_COLUMNS,
    batting_frame,
    bowling_frame,
    export_innings,
    fall_of_wickets_frame,
    innings_summary,
    leaderboard_frames,
    match_impact_frame,
    partnerships_frame,
)


@pytest.fixture
def scored(ledger, thunder):
    """Thunder 5/1 after 0.2 overs: a four, bowled, then a wide."""
    ledger.record_ball(4)
    ledger.record_ball(0, is_wicket=True, wicket_details=WicketDetails(kind=WicketType.BOWLED))
    ledger.change_batsman(thunder.players[2])
    ledger.record_ball(0, extras={"wide": 1})
    return ledger.state


class TestInningsFrames:
    def test_batting_frame(self, scored):
        frame = batting_frame(scored)
        assert list(frame.columns) == BATTING_COLUMNS
        assert list(frame["batter"]) == ["Thunder 1", "Thunder 2", "Thunder 3"]
        first = frame.iloc[0]
        assert first["how_out"] == "bowled"
        assert first["runs"] == 4
        assert first["balls"] == 2
        assert first["strike_rate"] == pytest.approx(200.0)
        assert frame.iloc[1]["how_out"] == "not out"

    def test_bowling_frame(self, scored):
        frame = bowling_frame(scored)
        assert list(frame.columns) == BOWLING_COLUMNS
        assert len(frame) == 1
        row = frame.iloc[0]
        assert row["bowler"] == "Strikers 11"
        assert row["overs"] == pytest.approx(0.2)
        assert row["runs"] == 4
        assert row["wickets"] == 1
        assert row["economy"] == pytest.approx(20.0)

    def test_fall_of_wickets_frame(self, scored):
        frame = fall_of_wickets_frame(scored)
        assert frame.to_dict("records") == [
            {"wicket": 1, "score": 4, "overs": "0.2", "batter": "Thunder 1"}
        ]

    def test_partnerships_frame(self, scored):
        frame = partnerships_frame(scored)
        assert list(frame.columns) == PARTNERSHIP_COLUMNS
        assert frame.to_dict("records") == [
            {
                "wicket": 1,
                "batters": "Thunder 1 & Thunder 2",
                "runs": 4,
                "balls": 2,
                "strike_rate": 200.0,
            },
            {
                "wicket": 2,
                "batters": "Thunder 3 & Thunder 2",
                "runs": 1,
                "balls": 0,
                "strike_rate": 0.0,
            },
        ]

    def test_frames_before_first_ball(self, ledger):
        assert batting_frame(ledger.state).empty
        assert partnerships_frame(ledger.state).empty
        assert bowling_frame(ledger.state).empty
        assert fall_of_wickets_frame(ledger.state).empty

    def test_innings_summary(self, scored):
        text = innings_summary(scored)
        assert text.startswith("Thunder: 5/1 (0.2 ov)")
        assert "Extras: 1 (w 1, nb 0, b 0, lb 0, pen 0)" in text
        assert "Fall of wickets:" in text
        assert "Partnerships:" in text

    def test_export_innings(self, scored, tmp_path):
        paths = export_innings(scored, tmp_path / "out", prefix="m1_")
        assert [p.name for p in paths] == [
            "m1_innings1_batting.csv",
            "m1_innings1_bowling.csv",
            "m1_innings1_fall_of_wickets.csv",
            "m1_innings1_partnerships.csv",
        ]
        batting = pd.read_csv(paths[0])
        assert list(batting["runs"]) == [4, 0, 0]


class TestImpactFrames:
    def test_match_impact_frame(self, scored):
        frame = match_impact_frame(rank_match_impact([scored]))
        assert list(frame.columns) == ["player", "player_id", "impact"]
        assert frame.iloc[0]["player_id"] == "thunder_1"
        assert frame.iloc[0]["impact"] == 15

    def test_leaderboard_frames(self):
        board = build_leaderboard([
            PlayerStats(name="Ace", total_runs=300, total_balls=250, batting_average=37.5),
            PlayerStats(name="Bolt", total_wickets=15, total_overs=40, total_runs_conceded=240),
        ])
        frames = leaderboard_frames(board)
        assert set(frames) == {"top_batsmen", "top_bowlers", "top_fielders", "rising_stars"}
        assert frames["top_batsmen"].loc[1, "name"] == "Ace"
        assert frames["top_batsmen"].loc[1, "runs"] == 300
        assert frames["top_bowlers"].loc[1, "wickets"] == 15
        assert frames["top_fielders"].empty

    def test_empty_leaderboard(self):
        frames = leaderboard_frames(Leaderboard())
        assert all(frame.empty for frame in frames.values())
