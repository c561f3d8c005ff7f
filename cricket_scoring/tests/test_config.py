"""Tests for engine configuration."""

from __future__ import annotations

import dataclasses

import pytest

from cricket_scoring.config import (
    EngineConfig,
    MatchFormat,
    ScoringConfig,
    scoring_config_for,
)


class TestEngineConfig:
    def test_defaults(self, monkeypatch):
        for var in ("CRICKET_OVERS_PER_INNINGS", "CRICKET_LEADERBOARD_LIMIT", "LOG_LEVEL"):
            monkeypatch.delenv(var, raising=False)
        config = EngineConfig.from_env()
        assert config.scoring.overs_per_innings == 20
        assert config.scoring.wickets_per_innings == 10
        assert config.leaderboard.limit == 5
        assert config.log_level == "INFO"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CRICKET_OVERS_PER_INNINGS", "50")
        monkeypatch.setenv("CRICKET_LEADERBOARD_LIMIT", "10")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        config = EngineConfig.from_env()
        assert config.scoring.overs_per_innings == 50
        assert config.leaderboard.limit == 10
        assert config.log_level == "DEBUG"

    def test_scoring_config_is_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            ScoringConfig().overs_per_innings = 50


class TestFormats:
    def test_limited_overs(self):
        assert scoring_config_for(MatchFormat.T20).overs_per_innings == 20
        assert scoring_config_for(MatchFormat.ODI).overs_per_innings == 50

    def test_unlimited_format_has_no_horizon(self):
        assert scoring_config_for(MatchFormat.TEST).overs_per_innings is None
