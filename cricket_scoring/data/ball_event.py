"""
Ball-by-ball event data model.

Defines the delivery record appended to an innings ledger, along with
the extras, wicket and roster records it references.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from cricket_scoring.utils.overs import to_number


class WicketType(Enum):
    BOWLED = "bowled"
    CAUGHT = "caught"
    LBW = "lbw"
    RUN_OUT = "run_out"
    STUMPED = "stumped"
    HIT_WICKET = "hit_wicket"
    RETIRED_HURT = "retired_hurt"
    RETIRED_OUT = "retired_out"
    OBSTRUCTING = "obstructing_the_field"
    TIMED_OUT = "timed_out"
    HANDLED_BALL = "handled_the_ball"


@dataclass(frozen=True)
class Player:
    """A rostered player."""

    id: str
    name: str = ""
    role: str = ""  # batter, bowler, all-rounder, wicket-keeper


@dataclass
class Team:
    """A side and its roster for one match."""

    id: str
    name: str = ""
    players: list[Player] = field(default_factory=list)


@dataclass(frozen=True)
class Extras:
    """Extras conceded on a single delivery, one counter per kind."""

    wide: int = 0
    no_ball: int = 0
    bye: int = 0
    leg_bye: int = 0
    penalty: int = 0

    @property
    def total(self) -> int:
        return self.wide + self.no_ball + self.bye + self.leg_bye + self.penalty

    @property
    def is_legal(self) -> bool:
        """Wides and no-balls do not count towards the over."""
        return not self.wide and not self.no_ball

    @property
    def is_bye(self) -> bool:
        return bool(self.bye or self.leg_bye)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Extras":
        """Build from a scorer payload such as {"wide": 1, "noBall": 0}.

        Unknown keys are ignored; true flags count as 1 and unparseable
        values as 0.
        """
        if not data:
            return NO_EXTRAS
        values = {}
        for name, aliases in _EXTRAS_KEYS.items():
            for key in aliases:
                if data.get(key):
                    values[name] = max(0, int(to_number(data[key])))
                    break
        return cls(**values)


NO_EXTRAS = Extras()

_EXTRAS_KEYS = {
    "wide": ("wide", "wides"),
    "no_ball": ("no_ball", "noBall", "noBalls", "noballs"),
    "bye": ("bye", "byes"),
    "leg_bye": ("leg_bye", "legBye", "legByes", "legbyes"),
    "penalty": ("penalty", "penalties"),
}


@dataclass(frozen=True)
class WicketDetails:
    """How a batter was dismissed."""

    kind: Optional[WicketType] = None
    player_dismissed: Optional[Player] = None
    fielders: tuple[Player, ...] = ()
    description: str = ""  # Free-text scorer note, e.g. "c Smith b Jones"


@dataclass(frozen=True)
class BallEvent:
    """A single delivery as recorded in the innings ledger."""

    sequence: int  # 1-based position in the ledger
    over: int  # Completed overs after this ball
    ball: int  # Balls into the current over after this ball
    runs: int = 0  # Off the bat (or run for byes when flagged)
    extras: Extras = NO_EXTRAS
    is_wicket: bool = False
    wicket_details: Optional[WicketDetails] = None

    striker: Optional[Player] = None
    non_striker: Optional[Player] = None
    bowler: Optional[Player] = None

    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_runs(self) -> int:
        return self.runs + self.extras.total

    @property
    def over_ball_str(self) -> str:
        """Human-readable over.ball string, e.g. '5.3'."""
        return f"{self.over}.{self.ball}"

    @property
    def is_legal_delivery(self) -> bool:
        return self.extras.is_legal

    @property
    def is_dot_ball(self) -> bool:
        return self.total_runs == 0 and not self.is_wicket

    @property
    def is_boundary_four(self) -> bool:
        return self.runs == 4

    @property
    def is_boundary_six(self) -> bool:
        return self.runs == 6


@dataclass
class MatchInfo:
    """Pre-match metadata."""

    match_id: str
    format: str  # t20, odi, test
    team_a: str
    team_b: str
    venue: str = ""
    date: str = ""
    season: str = ""
