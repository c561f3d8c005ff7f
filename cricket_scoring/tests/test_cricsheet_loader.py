"""Tests for loading and replaying Cricsheet CSV files."""

from __future__ import annotations

from pathlib import Path

import pytest

from cricket_scoring.config import MatchFormat, ScoringConfig, scoring_config_for
from cricket_scoring.data.ball_event import WicketType
from cricket_scoring.data.cricsheet_loader import (
    load_match_from_csv,
    load_matches_from_directory,
    replay_match,
)

HEADER = (
    "match_id,season,start_date,venue,innings,ball,batting_team,bowling_team,"
    "striker,non_striker,bowler,runs_off_bat,extras,wides,noballs,byes,legbyes,"
    "penalty,wicket_type,player_dismissed"
)

ROWS = [
    "1001,2024,2024-03-01,Eden Park,1,0.1,Alpha,Beta,Ann,Bob,Yan,4,0,,,,,,,",
    "1001,2024,2024-03-01,Eden Park,1,0.2,Alpha,Beta,Ann,Bob,Yan,0,1,1,,,,,,",
    "1001,2024,2024-03-01,Eden Park,1,0.2,Alpha,Beta,Ann,Bob,Yan,1,0,,,,,,,",
    "1001,2024,2024-03-01,Eden Park,1,0.3,Alpha,Beta,Bob,Ann,Yan,0,0,,,,,,caught,Bob",
    "1001,2024,2024-03-01,Eden Park,1,0.4,Alpha,Beta,Cal,Ann,Yan,0,1,,,,1,,,",
    "1001,2024,2024-03-01,Eden Park,2,0.1,Beta,Alpha,Zed,Yoe,Ann,6,0,,,,,,,",
    "1001,2024,2024-03-01,Eden Park,2,0.2,Beta,Alpha,Zed,Yoe,Ann,2,0,,,,,,,",
]


def write_csv(path: Path, rows: list[str], header: str = HEADER) -> Path:
    path.write_text("\n".join([header, *rows]) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def match_csv(tmp_path) -> Path:
    return write_csv(tmp_path / "1001.csv", ROWS)


class TestLoadMatch:
    def test_match_info(self, match_csv):
        info, innings = load_match_from_csv(match_csv)
        assert info.match_id == "1001"
        assert info.format == "t20"
        assert (info.team_a, info.team_b) == ("Alpha", "Beta")
        assert info.venue == "Eden Park"
        assert (info.date, info.season) == ("2024-03-01", "2024")
        assert len(innings) == 2

    def test_deliveries(self, match_csv):
        _, innings = load_match_from_csv(match_csv)
        first = innings[0].deliveries
        assert len(first) == 5
        assert first[1].extras.wide == 1
        assert first[3].wicket_type == WicketType.CAUGHT
        assert first[3].player_dismissed == "Bob"
        assert first[4].extras.leg_bye == 1

    def test_rosters_cover_whole_match(self, match_csv):
        _, innings = load_match_from_csv(match_csv)
        alpha = {p.id for p in innings[0].batting_team.players}
        assert alpha == {"Ann", "Bob", "Cal"}
        # Ann bowls in the second innings and appears once
        assert {p.id for p in innings[1].bowling_team.players} == alpha

    def test_retired_hurt_is_not_a_wicket(self, tmp_path):
        path = write_csv(
            tmp_path / "rh.csv",
            ["9,2024,,,1,0.1,Alpha,Beta,Ann,Bob,Yan,0,0,,,,,,retired hurt,Ann"],
        )
        _, innings = load_match_from_csv(path)
        assert innings[0].deliveries[0].wicket_type == WicketType.RETIRED_HURT
        assert not innings[0].deliveries[0].is_wicket

    def test_long_innings_inferred_as_odi(self, tmp_path):
        path = write_csv(tmp_path / "odi.csv", ["9,2024,,,1,35.2,Alpha,Beta,Ann,Bob,Yan,1,0,,,,,,,"])
        info, _ = load_match_from_csv(path)
        assert info.format == "odi"


class TestLoadErrors:
    def test_empty_file(self, tmp_path):
        path = write_csv(tmp_path / "empty.csv", [])
        with pytest.raises(ValueError, match="Empty CSV"):
            load_match_from_csv(path)

    def test_missing_columns(self, tmp_path):
        path = write_csv(tmp_path / "odd.csv", ["1,2"], header="a,b")
        with pytest.raises(ValueError, match="missing columns"):
            load_match_from_csv(path)

    def test_unparseable_row_reports_line(self, tmp_path):
        rows = [ROWS[0], ROWS[1].replace(",0,1,1,", ",zero,1,1,")]
        path = write_csv(tmp_path / "bad.csv", rows)
        with pytest.raises(ValueError, match=r"bad\.csv:3: unparseable row"):
            load_match_from_csv(path)


class TestLoadDirectory:
    def test_skips_bad_files(self, tmp_path, match_csv):
        write_csv(tmp_path / "0000.csv", [])
        matches = load_matches_from_directory(tmp_path)
        assert [info.match_id for info, _ in matches] == ["1001"]

    def test_format_filter(self, tmp_path, match_csv):
        assert load_matches_from_directory(tmp_path, match_format="odi") == []
        assert len(load_matches_from_directory(tmp_path, match_format="t20")) == 1

    def test_max_matches(self, tmp_path, match_csv):
        write_csv(tmp_path / "1002.csv", [r.replace("1001", "1002") for r in ROWS])
        assert len(load_matches_from_directory(tmp_path, max_matches=1)) == 1

    def test_empty_directory(self, tmp_path):
        assert load_matches_from_directory(tmp_path) == []


class TestReplay:
    def test_first_innings(self, match_csv):
        _, innings = load_match_from_csv(match_csv)
        first, _ = replay_match(innings, ScoringConfig())

        assert first.runs == 7
        assert first.wickets == 1
        assert first.over_ball_str == "0.4"
        assert first.extras.wides == 1
        assert first.extras.leg_byes == 1
        assert first.close_reason == "innings complete"
        assert first.runs == sum(b.total_runs for b in first.ball_by_ball)

    def test_first_innings_players(self, match_csv):
        _, innings = load_match_from_csv(match_csv)
        first, _ = replay_match(innings)

        assert first.player_stats["Ann"].runs == 5
        assert first.player_stats["Bob"].is_out
        assert first.player_stats["Bob"].dismissal == WicketType.CAUGHT
        assert first.player_stats["Cal"].balls_faced == 0
        yan = first.player_stats["Yan"]
        assert yan.runs_conceded == 5
        assert yan.balls_bowled == 4
        assert yan.wickets_taken == 1
        assert first.fall_of_wickets[0].player.id == "Bob"

    def test_chase(self, match_csv):
        _, innings = load_match_from_csv(match_csv)
        _, second = replay_match(innings)

        assert second.target == 7
        assert second.runs == 8
        assert second.close_reason == "target reached"
        assert second.is_closed

    def test_unlimited_format_has_no_overs_limit(self, tmp_path):
        rows = [
            f"7,2024,,,1,{over}.{ball},Alpha,Beta,Ann,Bob,Yan,1,0,,,,,,,"
            for over in range(21)
            for ball in range(1, 7)
        ]
        _, innings = load_match_from_csv(write_csv(tmp_path / "long.csv", rows))

        (limited,) = replay_match(innings)
        (unlimited,) = replay_match(innings, scoring_config_for(MatchFormat.TEST))

        assert limited.close_reason == "overs complete"
        assert unlimited.close_reason == "innings complete"
        assert unlimited.overs == 21
