"""
Innings Ledger - ball-by-ball scoring state.

Maintains the running score, extras, partnerships, fall of wickets and
per-player batting/bowling figures for one innings. Every delivery is
appended to an ordered ledger; the over/ball counters are a cache of the
ledger's legal deliveries.

The ledger never raises on numeric input. Validation of what the scorer
enters belongs to whatever front-end feeds it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from cricket_scoring.config import ScoringConfig
from cricket_scoring.data.ball_event import (
    BallEvent,
    Extras,
    Player,
    Team,
    WicketDetails,
    WicketType,
)
from cricket_scoring.utils.overs import (
    BALLS_PER_OVER,
    decimal_overs,
    economy_rate,
    over_ball_notation,
    over_ball_str,
    required_run_rate,
    run_rate,
    strike_rate,
)

logger = logging.getLogger(__name__)


@dataclass
class PlayerStat:
    """Batting and bowling figures for one player in one innings."""

    player_id: str
    name: str = ""

    # Batting
    runs: int = 0
    balls_faced: int = 0
    fours: int = 0
    sixes: int = 0
    strike_rate: float = 0.0
    is_out: bool = False
    dismissal: Optional[WicketType] = None

    # Bowling
    balls_bowled: int = 0
    runs_conceded: int = 0
    wickets_taken: int = 0
    maidens: int = 0
    economy: float = 0.0

    @property
    def overs_bowled(self) -> float:
        """Overs in over.ball notation, e.g. 7 balls -> 1.1."""
        return over_ball_notation(self.balls_bowled)


@dataclass
class ExtrasTally:
    """Innings extras breakdown."""

    wides: int = 0
    no_balls: int = 0
    byes: int = 0
    leg_byes: int = 0
    penalties: int = 0

    @property
    def total(self) -> int:
        return self.wides + self.no_balls + self.byes + self.leg_byes + self.penalties

    def add(self, extras: Extras) -> None:
        if extras.wide:
            self.wides += extras.wide
        if extras.no_ball:
            self.no_balls += extras.no_ball
        if extras.bye:
            self.byes += extras.bye
        if extras.leg_bye:
            self.leg_byes += extras.leg_bye
        if extras.penalty:
            self.penalties += extras.penalty


@dataclass
class FallOfWicket:
    wicket_number: int
    score: int
    overs: str  # over.ball at the fall, e.g. "12.4"
    player: Optional[Player] = None
    details: Optional[WicketDetails] = None


@dataclass
class Partnership:
    """Runs added by one batting pair."""
    runs: int = 0
    balls: int = 0
    batter_one: Optional[Player] = None
    batter_two: Optional[Player] = None

    @property
    def strike_rate(self) -> float:
        return strike_rate(self.runs, self.balls)


@dataclass
class InningsState:
    """State for a single innings."""

    innings_number: int = 1
    batting_team: Optional[Team] = None
    bowling_team: Optional[Team] = None

    runs: int = 0
    wickets: int = 0
    overs: int = 0  # Completed overs
    balls: int = 0  # Legal balls in the current over

    extras: ExtrasTally = field(default_factory=ExtrasTally)
    ball_by_ball: list[BallEvent] = field(default_factory=list)
    fall_of_wickets: list[FallOfWicket] = field(default_factory=list)
    partnership: Partnership = field(default_factory=Partnership)
    partnerships: list[Partnership] = field(default_factory=list)  # Completed
    player_stats: dict[str, PlayerStat] = field(default_factory=dict)

    striker: Optional[Player] = None
    non_striker: Optional[Player] = None
    bowler: Optional[Player] = None

    target: Optional[int] = None  # Score to beat, 2nd innings only
    current_run_rate: Optional[float] = None
    required_run_rate: Optional[float] = None

    is_closed: bool = False
    close_reason: Optional[str] = None

    @property
    def legal_balls(self) -> int:
        return self.overs * BALLS_PER_OVER + self.balls

    @property
    def decimal_overs(self) -> float:
        return decimal_overs(self.overs, self.balls)

    @property
    def over_ball_str(self) -> str:
        return over_ball_str(self.overs, self.balls)

    @property
    def runs_needed(self) -> Optional[int]:
        if self.target is None:
            return None
        return max(0, self.target - self.runs + 1)

    def batting_card(self) -> list[PlayerStat]:
        """Batters in order of first appearance at the crease."""
        order: list[str] = []
        for ball in self.ball_by_ball:
            for player in (ball.striker, ball.non_striker):
                if player is not None and player.id not in order:
                    order.append(player.id)
        return [self.player_stats[pid] for pid in order if pid in self.player_stats]

    def bowling_card(self) -> list[PlayerStat]:
        """Bowlers in order of first delivery."""
        order: list[str] = []
        for ball in self.ball_by_ball:
            if ball.bowler is not None and ball.bowler.id not in order:
                order.append(ball.bowler.id)
        return [self.player_stats[pid] for pid in order if pid in self.player_stats]


class InningsLedger:
    """Processes deliveries and maintains one InningsState.

    The ledger exclusively owns its state. Callers that share a ledger
    across sessions must serialise access themselves.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()
        self._state = InningsState()
        self.innings_history: list[InningsState] = []
        self._over_runs = 0
        self._over_bowlers: set[Optional[str]] = set()

    @property
    def state(self) -> InningsState:
        return self._state

    # ------------------------------------------------------------------
    # Innings lifecycle
    # ------------------------------------------------------------------

    def initialize_innings(
        self,
        batting_team: Team,
        bowling_team: Team,
        innings_number: int = 1,
    ) -> InningsState:
        """Start a fresh innings, seeding zeroed stats for both rosters.

        The second innings keeps nothing from the first except the target,
        which is the first innings total when this ledger scored it, or
        whatever was set explicitly otherwise.
        """
        previous = self._state
        target: Optional[int] = None

        if innings_number == 1:
            self.innings_history = []
        else:
            if innings_number == 2:
                if previous.innings_number == 1 and previous.ball_by_ball:
                    target = previous.runs
                else:
                    target = previous.target
            if previous.ball_by_ball:
                if not previous.is_closed:
                    previous.is_closed = True
                    previous.close_reason = "superseded"
                self.innings_history.append(previous)

        self._state = InningsState(
            innings_number=innings_number,
            batting_team=batting_team,
            bowling_team=bowling_team,
            target=target,
        )
        self._reset_over()

        if not batting_team.players or not bowling_team.players:
            logger.warning(
                "Innings %d initialized with an empty roster (%s: %d, %s: %d)",
                innings_number,
                batting_team.name or batting_team.id, len(batting_team.players),
                bowling_team.name or bowling_team.id, len(bowling_team.players),
            )

        for player in [*batting_team.players, *bowling_team.players]:
            if player.id not in self._state.player_stats:
                self._state.player_stats[player.id] = PlayerStat(
                    player_id=player.id, name=player.name
                )

        logger.info(
            "Innings %d started: %s batting, %s bowling%s",
            innings_number,
            batting_team.name or batting_team.id,
            bowling_team.name or bowling_team.id,
            f" (target {target})" if target is not None else "",
        )
        return self._state

    def end_innings(self, reason: str = "declared") -> InningsState:
        """Close the innings; later mutations are ignored."""
        if not self._state.is_closed:
            self._state.is_closed = True
            self._state.close_reason = reason
            logger.info(
                "Innings %d closed (%s): %s",
                self._state.innings_number, reason, self.summary(),
            )
        return self._state

    def reset_scoring(self) -> InningsState:
        """Return to the pristine initial state."""
        self._state = InningsState()
        self.innings_history = []
        self._reset_over()
        return self._state

    # ------------------------------------------------------------------
    # Actors
    # ------------------------------------------------------------------

    def set_batsmen(self, striker: Optional[Player], non_striker: Optional[Player]) -> None:
        if self._ignored("set_batsmen"):
            return
        self._state.striker = striker
        self._state.non_striker = non_striker

    def set_bowler(self, bowler: Optional[Player]) -> None:
        if self._ignored("set_bowler"):
            return
        self._state.bowler = bowler

    def change_batsman(self, new_batsman: Optional[Player], position: str = "striker") -> None:
        """Replace the striker, or the non-striker for any other position."""
        if self._ignored("change_batsman"):
            return
        if position == "striker":
            self._state.striker = new_batsman
        else:
            self._state.non_striker = new_batsman

    def swap_batsmen(self) -> None:
        if self._ignored("swap_batsmen"):
            return
        s = self._state
        s.striker, s.non_striker = s.non_striker, s.striker

    def set_target(self, value: Optional[int]) -> None:
        if self._ignored("set_target"):
            return
        self._state.target = value
        self._refresh_rates()

    # ------------------------------------------------------------------
    # Deliveries
    # ------------------------------------------------------------------

    def record_ball(
        self,
        runs: int = 0,
        extras: Union[Extras, dict, None] = None,
        is_wicket: bool = False,
        wicket_details: Optional[WicketDetails] = None,
    ) -> InningsState:
        """Apply one delivery and return the updated state."""
        if self._ignored("record_ball"):
            return self._state

        if not isinstance(extras, Extras):
            extras = Extras.from_dict(extras)

        s = self._state
        striker = s.striker
        bowler = s.bowler

        # Team score
        s.runs += runs + extras.total
        if is_wicket:
            s.wickets += 1

        # Over progression (legal deliveries only)
        over_completed = False
        if extras.is_legal:
            s.balls += 1
            if s.balls == BALLS_PER_OVER:
                s.overs += 1
                s.balls = 0
                over_completed = True

        # Striker
        if striker is not None and not extras.is_bye:
            bat = self._stat_for(striker)
            bat.runs += runs
            bat.balls_faced += 1
            if runs == 4:
                bat.fours += 1
            if runs == 6:
                bat.sixes += 1
            bat.strike_rate = strike_rate(bat.runs, bat.balls_faced)

        # Bowler
        if bowler is not None:
            bowl = self._stat_for(bowler)
            bowl.runs_conceded += runs
            if extras.is_legal:
                bowl.balls_bowled += 1
            if is_wicket:
                bowl.wickets_taken += 1
            bowl.economy = economy_rate(bowl.runs_conceded, bowl.overs_bowled)
        self._track_maiden(bowler, runs + extras.wide + extras.no_ball, over_completed)

        s.extras.add(extras)

        # Partnership
        s.partnership.runs += runs + extras.total
        if extras.is_legal:
            s.partnership.balls += 1
        s.partnership.batter_one = striker
        s.partnership.batter_two = s.non_striker

        # Dismissal
        if is_wicket:
            dismissed = (
                wicket_details.player_dismissed
                if wicket_details and wicket_details.player_dismissed
                else striker
            )
            if dismissed is not None:
                out = self._stat_for(dismissed)
                out.is_out = True
                out.dismissal = wicket_details.kind if wicket_details else None
            s.fall_of_wickets.append(
                FallOfWicket(
                    wicket_number=s.wickets,
                    score=s.runs,
                    overs=s.over_ball_str,
                    player=dismissed,
                    details=wicket_details,
                )
            )
            s.partnerships.append(s.partnership)
            s.partnership = Partnership()

        event = BallEvent(
            sequence=len(s.ball_by_ball) + 1,
            over=s.overs,
            ball=s.balls,
            runs=runs,
            extras=extras,
            is_wicket=is_wicket,
            wicket_details=wicket_details,
            striker=striker,
            non_striker=s.non_striker,
            bowler=bowler,
        )
        s.ball_by_ball.append(event)

        self._refresh_rates()

        logger.debug(
            "Ball %d (%s): %d run(s) + %d extra(s)%s -> %s",
            event.sequence, event.over_ball_str, runs, extras.total,
            " WICKET" if is_wicket else "", self.summary(),
        )
        return s

    def undo_last_ball(self) -> InningsState:
        """Remove the last delivery from the ledger.

        Only the team score, wicket count and over/ball counters are
        reversed. Player figures, extras breakdown, fall of wickets and
        partnerships keep the undone ball's contribution.
        """
        if self._ignored("undo_last_ball"):
            return self._state

        s = self._state
        if not s.ball_by_ball:
            logger.debug("Undo requested on an empty ledger")
            return s

        last = s.ball_by_ball.pop()

        s.runs -= last.total_runs
        if last.is_wicket:
            s.wickets -= 1

        if last.is_legal_delivery:
            if s.balls == 0:
                s.overs -= 1
                s.balls = BALLS_PER_OVER - 1
            else:
                s.balls -= 1

        self._refresh_rates()
        logger.info("Undid ball %d, score now %s", last.sequence, self.summary())
        return s

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def is_all_out(self) -> bool:
        return self._state.wickets >= self.config.wickets_per_innings

    @property
    def overs_exhausted(self) -> bool:
        """Never true for unlimited-overs innings."""
        if self.config.overs_per_innings is None:
            return False
        max_balls = self.config.overs_per_innings * BALLS_PER_OVER
        return self._state.legal_balls >= max_balls

    @property
    def target_reached(self) -> bool:
        s = self._state
        return s.innings_number == 2 and s.target is not None and s.runs > s.target

    @property
    def is_complete(self) -> bool:
        return (
            self._state.is_closed
            or self.is_all_out
            or self.overs_exhausted
            or self.target_reached
        )

    def summary(self) -> str:
        """Score line, e.g. '45/2 (6.3 ov)'."""
        s = self._state
        return f"{s.runs}/{s.wickets} ({s.over_ball_str} ov)"

    def batting_card(self) -> list[PlayerStat]:
        return self._state.batting_card()

    def bowling_card(self) -> list[PlayerStat]:
        return self._state.bowling_card()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ignored(self, operation: str) -> bool:
        if self._state.is_closed:
            logger.warning(
                "Ignoring %s on closed innings %d",
                operation, self._state.innings_number,
            )
            return True
        return False

    def _stat_for(self, player: Player) -> PlayerStat:
        stats = self._state.player_stats
        if player.id not in stats:
            # Not on either roster; scored anyway.
            logger.debug("Creating stats for unrostered player %s", player.id)
            stats[player.id] = PlayerStat(player_id=player.id, name=player.name)
        return stats[player.id]

    def _track_maiden(
        self, bowler: Optional[Player], conceded: int, over_completed: bool
    ) -> None:
        if not self.config.track_maidens:
            return
        self._over_bowlers.add(bowler.id if bowler is not None else None)
        self._over_runs += conceded

        if over_completed:
            # A maiden is a whole over from one bowler with nothing conceded.
            if bowler is not None and self._over_runs == 0 and len(self._over_bowlers) == 1:
                self._stat_for(bowler).maidens += 1
            self._reset_over()

    def _reset_over(self) -> None:
        self._over_runs = 0
        self._over_bowlers = set()

    def _refresh_rates(self) -> None:
        s = self._state
        overs = s.decimal_overs
        s.current_run_rate = run_rate(s.runs, overs)
        if s.innings_number == 2 and s.target and self.config.overs_per_innings is not None:
            s.required_run_rate = required_run_rate(
                s.target, s.runs, overs, self.config.overs_per_innings
            )
        else:
            s.required_run_rate = None
