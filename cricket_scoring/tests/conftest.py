"""Shared test fixtures for cricket scoring engine tests."""

from __future__ import annotations

import pytest

from cricket_scoring.config import ScoringConfig
from cricket_scoring.data.ball_event import Player, Team
from cricket_scoring.state.innings_ledger import InningsLedger


def make_team(name: str, size: int = 11) -> Team:
    return Team(
        id=name.lower(),
        name=name,
        players=[
            Player(id=f"{name.lower()}_{i}", name=f"{name} {i}")
            for i in range(1, size + 1)
        ],
    )


@pytest.fixture
def thunder() -> Team:
    return make_team("Thunder")


@pytest.fixture
def strikers() -> Team:
    return make_team("Strikers")


@pytest.fixture
def ledger(thunder: Team, strikers: Team) -> InningsLedger:
    """First innings in progress: Thunder 1 & 2 batting, Strikers 11 bowling."""
    engine = InningsLedger(ScoringConfig())
    engine.initialize_innings(thunder, strikers, 1)
    engine.set_batsmen(thunder.players[0], thunder.players[1])
    engine.set_bowler(strikers.players[10])
    return engine
