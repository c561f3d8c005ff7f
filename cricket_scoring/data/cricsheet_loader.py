"""
Cricsheet.org data loader.

Loads historical ball-by-ball match data from Cricsheet CSV files and
replays it through an InningsLedger, giving scorecards and impact
rankings for real matches.

Data source: https://cricsheet.org/downloads/
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from cricket_scoring.config import ScoringConfig
from cricket_scoring.data.ball_event import (
    Extras,
    MatchInfo,
    Player,
    Team,
    WicketDetails,
    WicketType,
)
from cricket_scoring.state.innings_ledger import InningsLedger, InningsState

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"innings", "ball", "batting_team", "bowling_team"}

WICKET_MAP = {
    "bowled": WicketType.BOWLED,
    "caught": WicketType.CAUGHT,
    "caught and bowled": WicketType.CAUGHT,
    "lbw": WicketType.LBW,
    "run out": WicketType.RUN_OUT,
    "stumped": WicketType.STUMPED,
    "hit wicket": WicketType.HIT_WICKET,
    "retired hurt": WicketType.RETIRED_HURT,
    "retired out": WicketType.RETIRED_OUT,
    "obstructing the field": WicketType.OBSTRUCTING,
    "timed out": WicketType.TIMED_OUT,
    "handled the ball": WicketType.HANDLED_BALL,
}


@dataclass(frozen=True)
class Delivery:
    """One CSV row, before it is scored."""

    over: int
    ball: int
    striker: str
    non_striker: str
    bowler: str
    runs_off_bat: int = 0
    extras: Extras = field(default_factory=Extras)
    wicket_type: Optional[WicketType] = None
    player_dismissed: Optional[str] = None

    @property
    def is_wicket(self) -> bool:
        return self.wicket_type is not None and self.wicket_type != WicketType.RETIRED_HURT


@dataclass
class InningsData:
    innings_number: int
    batting_team: Team
    bowling_team: Team
    deliveries: list[Delivery] = field(default_factory=list)


def load_match_from_csv(csv_path: Path) -> tuple[MatchInfo, list[InningsData]]:
    """Load a single match from a Cricsheet CSV file.

    Cricsheet CSV format has columns:
    match_id, season, start_date, venue, innings, ball, batting_team,
    bowling_team, striker, non_striker, bowler, runs_off_bat, extras,
    wides, noballs, byes, legbyes, penalty, wicket_type, player_dismissed

    Rosters are the players seen in the file; player ids are their names.

    Raises:
        ValueError: the file is empty or a row cannot be parsed
    """
    with open(csv_path, "r", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))

    if not rows:
        raise ValueError(f"Empty CSV file: {csv_path}")

    missing = REQUIRED_COLUMNS - set(rows[0])
    if missing:
        raise ValueError(f"{csv_path}: missing columns {sorted(missing)}")

    first = rows[0]
    match_id = first.get("match_id") or csv_path.stem
    team_names: list[str] = []
    for row in rows:
        for key in ("batting_team", "bowling_team"):
            if row[key] not in team_names:
                team_names.append(row[key])

    match_info = MatchInfo(
        match_id=str(match_id),
        format=_infer_format(rows),
        team_a=team_names[0] if len(team_names) > 0 else "",
        team_b=team_names[1] if len(team_names) > 1 else "",
        venue=first.get("venue", ""),
        date=first.get("start_date", ""),
        season=first.get("season", ""),
    )

    rosters: dict[str, dict[str, Player]] = {name: {} for name in team_names}
    innings: dict[int, InningsData] = {}

    for line_no, row in enumerate(rows, start=2):
        try:
            number = int(row["innings"])
            over, ball_num = _parse_ball(row["ball"])
            extras = Extras(
                wide=_int(row.get("wides")),
                no_ball=_int(row.get("noballs")),
                bye=_int(row.get("byes")),
                leg_bye=_int(row.get("legbyes")),
                penalty=_int(row.get("penalty")),
            )
            runs_off_bat = _int(row.get("runs_off_bat"))
        except (KeyError, ValueError) as e:
            raise ValueError(f"{csv_path}:{line_no}: unparseable row: {e}") from e

        batting, bowling = row["batting_team"], row["bowling_team"]
        for name in (row.get("striker", ""), row.get("non_striker", "")):
            if name:
                rosters[batting].setdefault(name, Player(id=name, name=name))
        if row.get("bowler"):
            rosters[bowling].setdefault(row["bowler"], Player(id=row["bowler"], name=row["bowler"]))

        if number not in innings:
            innings[number] = InningsData(
                innings_number=number,
                batting_team=Team(id=batting, name=batting),
                bowling_team=Team(id=bowling, name=bowling),
            )

        wicket_type_str = (row.get("wicket_type") or "").strip()
        innings[number].deliveries.append(
            Delivery(
                over=over,
                ball=ball_num,
                striker=row.get("striker", ""),
                non_striker=row.get("non_striker", ""),
                bowler=row.get("bowler", ""),
                runs_off_bat=runs_off_bat,
                extras=extras,
                wicket_type=(
                    WICKET_MAP.get(wicket_type_str.lower(), WicketType.BOWLED)
                    if wicket_type_str else None
                ),
                player_dismissed=(row.get("player_dismissed") or "").strip() or None,
            )
        )

    # Rosters cover the whole match, not just the innings they appear in.
    for data in innings.values():
        data.batting_team.players = list(rosters[data.batting_team.id].values())
        data.bowling_team.players = list(rosters[data.bowling_team.id].values())

    ordered = [innings[k] for k in sorted(innings)]
    logger.info(
        "Loaded match %s: %s vs %s, %d innings, %d deliveries",
        match_info.match_id, match_info.team_a, match_info.team_b,
        len(ordered), sum(len(i.deliveries) for i in ordered),
    )
    return match_info, ordered


def load_matches_from_directory(
    directory: Path,
    match_format: Optional[str] = None,
    max_matches: Optional[int] = None,
) -> list[tuple[MatchInfo, list[InningsData]]]:
    """Load all matches from a directory of Cricsheet CSV files.

    Files that fail to load are logged and skipped.
    """
    csv_files = sorted(directory.glob("*.csv"))
    if not csv_files:
        logger.warning("No CSV files found in %s", directory)
        return []

    matches = []
    for csv_file in csv_files:
        if max_matches and len(matches) >= max_matches:
            break
        try:
            info, innings = load_match_from_csv(csv_file)
        except ValueError as e:
            logger.warning("Failed to load %s: %s", csv_file.name, e)
            continue
        if match_format and info.format != match_format:
            continue
        matches.append((info, innings))

    logger.info("Loaded %d matches from %s", len(matches), directory)
    return matches


def replay_innings(ledger: InningsLedger, data: InningsData) -> InningsState:
    """Score one loaded innings through the ledger and close it."""
    players = {
        p.id: p for p in [*data.batting_team.players, *data.bowling_team.players]
    }

    def player(name: str) -> Optional[Player]:
        if not name:
            return None
        return players.get(name) or Player(id=name, name=name)

    ledger.initialize_innings(data.batting_team, data.bowling_team, data.innings_number)

    for d in data.deliveries:
        state = ledger.state
        striker, non_striker = player(d.striker), player(d.non_striker)
        if state.striker != striker or state.non_striker != non_striker:
            ledger.set_batsmen(striker, non_striker)
        bowler = player(d.bowler)
        if state.bowler != bowler:
            ledger.set_bowler(bowler)

        details = None
        if d.wicket_type is not None:
            details = WicketDetails(
                kind=d.wicket_type,
                player_dismissed=player(d.player_dismissed or ""),
            )
        ledger.record_ball(
            runs=d.runs_off_bat,
            extras=d.extras,
            is_wicket=d.is_wicket,
            wicket_details=details if d.is_wicket else None,
        )

    if ledger.is_all_out:
        reason = "all out"
    elif ledger.overs_exhausted:
        reason = "overs complete"
    elif ledger.target_reached:
        reason = "target reached"
    else:
        reason = "innings complete"
    return ledger.end_innings(reason)


def replay_match(
    innings: list[InningsData], config: Optional[ScoringConfig] = None
) -> list[InningsState]:
    """Replay every innings of a match through one ledger."""
    ledger = InningsLedger(config)
    return [replay_innings(ledger, data) for data in innings]


def _parse_ball(ball_str: str) -> tuple[int, int]:
    """'5.3' -> (5, 3)."""
    if "." in ball_str:
        over, ball = ball_str.split(".", 1)
        return int(over), int(ball)
    return int(float(ball_str)), 0


def _int(value: Optional[str]) -> int:
    return int(value) if value not in (None, "") else 0


def _infer_format(rows: list[dict]) -> str:
    """Infer match format from ball-by-ball data."""
    max_over = 0
    innings_set = set()
    for row in rows:
        over, _ = _parse_ball(row.get("ball", "0"))
        max_over = max(max_over, over)
        innings_set.add(int(row.get("innings", 1)))

    if len(innings_set) > 2:
        return "test"
    if max_over >= 20:
        return "odi"
    return "t20"
