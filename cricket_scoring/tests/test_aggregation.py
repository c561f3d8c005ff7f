"""Tests for rolling innings up into impact inputs."""

from __future__ import annotations

import pytest

from cricket_scoring.data.ball_event import WicketDetails, WicketType
from cricket_scoring.impact.aggregation import (
    aggregate_innings,
    career_stats,
    match_contributions,
    rank_match_impact,
)
from cricket_scoring.impact.leaderboard import build_leaderboard


@pytest.fixture
def two_innings(ledger, thunder, strikers):
    """Thunder 1 makes 10 off 3 then bowls a maiden to Strikers 1."""
    ledger.record_ball(4)
    ledger.record_ball(6)
    ledger.record_ball(
        0,
        is_wicket=True,
        wicket_details=WicketDetails(kind=WicketType.CAUGHT, fielders=(strikers.players[2],)),
    )
    ledger.end_innings("declared")

    ledger.initialize_innings(strikers, thunder, 2)
    ledger.set_batsmen(strikers.players[0], strikers.players[1])
    ledger.set_bowler(thunder.players[0])
    for _ in range(6):
        ledger.record_ball(0)
    return [*ledger.innings_history, ledger.state]


class TestAggregateInnings:
    def test_batting_and_bowling_summed_across_innings(self, two_innings):
        perf = aggregate_innings(two_innings)["thunder_1"]
        assert perf.batting.runs == 10
        assert perf.batting.balls == 3
        assert perf.batting.fours == 1
        assert perf.batting.sixes == 1
        assert perf.bowling.overs == 1.0
        assert perf.bowling.runs == 0
        assert perf.fielding is None

    def test_overs_in_over_ball_notation(self, two_innings):
        perf = aggregate_innings(two_innings)["strikers_11"]
        assert perf.bowling.overs == pytest.approx(0.3)
        assert perf.bowling.wickets == 1
        assert perf.bowling.runs == 10

    def test_fielder_credited_from_dismissal(self, two_innings):
        perf = aggregate_innings(two_innings)["strikers_3"]
        assert perf.fielding.catches == 1
        assert perf.fielding.run_outs == 0

    def test_every_rostered_player_present(self, two_innings):
        assert len(aggregate_innings(two_innings)) == 22

    def test_bowled_credits_no_fielder(self, ledger):
        ledger.record_ball(0, is_wicket=True, wicket_details=WicketDetails(kind=WicketType.BOWLED))
        performances = aggregate_innings([ledger.state])
        assert all(p.fielding is None for p in performances.values())


class TestRankMatchImpact:
    def test_best_first(self, two_innings):
        ranking = rank_match_impact(two_innings)
        assert ranking[0].player_id == "thunder_1"
        assert ranking[0].impact_score == 36
        assert ranking[1].player_id == "strikers_3"
        assert ranking[1].impact_score == 15

    def test_ties_ordered_by_name(self, two_innings):
        ranking = rank_match_impact(two_innings)
        zeros = [m.name for m in ranking if m.impact_score == 0]
        assert zeros == sorted(zeros)

    def test_scores_never_negative(self, two_innings):
        assert all(m.impact_score >= 0 for m in rank_match_impact(two_innings))


class TestMatchContributions:
    def test_roles(self, two_innings):
        contributions = match_contributions(two_innings)
        assert [c.type for c in contributions["thunder_1"]] == ["batting", "bowling"]
        batting, bowling = contributions["thunder_1"]
        assert batting.dismissal == "caught"
        assert batting.runs == 10
        assert bowling.innings_number == 2
        assert bowling.maidens == 1
        assert bowling.overs == 1.0

    def test_not_out_and_fielding(self, two_innings):
        contributions = match_contributions(two_innings)
        assert contributions["thunder_2"][0].dismissal == "not out"
        (catch,) = contributions["strikers_3"]
        assert (catch.type, catch.action, catch.count) == ("fielding", "catch", 1)

    def test_bystanders_left_out(self, two_innings):
        assert "thunder_7" not in match_contributions(two_innings)


class TestCareerStats:
    def test_single_match(self, two_innings):
        stats = {p.player_id: p for p in career_stats([("m1", two_innings)])}
        assert len(stats) == 6

        thunder_1 = stats["thunder_1"]
        assert thunder_1.name == "Thunder 1"
        assert thunder_1.matches_played == 1
        assert thunder_1.total_runs == 10
        assert thunder_1.batting_average == 10.0
        assert thunder_1.total_overs == 1.0
        assert thunder_1.bowling_economy == 0.0
        assert [m.match_id for m in thunder_1.match_history] == ["m1"]

        assert stats["thunder_2"].total_not_outs == 1
        assert stats["thunder_2"].batting_average is None
        assert stats["strikers_3"].total_catches == 1
        assert stats["strikers_3"].bowling_economy is None

    def test_totals_across_matches(self, two_innings):
        stats = {
            p.player_id: p
            for p in career_stats([("m1", two_innings), ("m2", two_innings)])
        }
        thunder_1 = stats["thunder_1"]
        assert thunder_1.matches_played == 2
        assert thunder_1.total_runs == 20
        assert thunder_1.total_overs == 2.0
        assert stats["strikers_11"].total_overs == pytest.approx(1.0)
        assert stats["strikers_11"].total_wickets == 2

    def test_feeds_leaderboard(self, two_innings):
        board = build_leaderboard(career_stats([("m1", two_innings)]))
        assert [e.name for e in board.top_batsmen] == ["Thunder 1"]
        assert [e.name for e in board.top_bowlers] == ["Strikers 11"]
        assert [e.name for e in board.top_fielders] == ["Strikers 3"]
        assert board.top_fielders[0].catches == 1
