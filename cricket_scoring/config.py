"""
Configuration management for the Cricket Scoring Engine.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class MatchFormat(Enum):
    T20 = "t20"
    ODI = "odi"
    TEST = "test"


@dataclass(frozen=True)
class ScoringConfig:
    """Innings scoring rules."""
    overs_per_innings: Optional[int] = 20  # Required run rate horizon; None is unlimited
    wickets_per_innings: int = 10
    track_maidens: bool = True


@dataclass(frozen=True)
class LeaderboardConfig:
    """Leaderboard presentation settings."""
    limit: int = 5  # Entries per leaderboard table


@dataclass
class EngineConfig:
    """Top-level engine configuration."""
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    leaderboard: LeaderboardConfig = field(default_factory=LeaderboardConfig)

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Load configuration from environment variables."""
        return cls(
            scoring=ScoringConfig(
                overs_per_innings=int(os.getenv("CRICKET_OVERS_PER_INNINGS", "20")),
            ),
            leaderboard=LeaderboardConfig(
                limit=int(os.getenv("CRICKET_LEADERBOARD_LIMIT", "5")),
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


# Format-specific constants
FORMAT_OVERS: dict[MatchFormat, Optional[int]] = {
    MatchFormat.T20: 20,
    MatchFormat.ODI: 50,
    MatchFormat.TEST: None,  # Unlimited
}


def scoring_config_for(match_format: MatchFormat) -> ScoringConfig:
    """Scoring rules for a format; unlimited formats have no overs horizon."""
    return ScoringConfig(
        overs_per_innings=FORMAT_OVERS.get(match_format, ScoringConfig.overs_per_innings)
    )
