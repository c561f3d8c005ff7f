"""
Cricket Scoring Engine entry point.

Drives the innings ledger end to end and prints scorecards and the
match impact ranking.

Supports two modes:
1. Demo: score a synthetic T20 match ball by ball
2. Replay: score Cricsheet CSV match files (a file or a directory)

Usage:
    python -m cricket_scoring.orchestrator --demo
    python -m cricket_scoring.orchestrator --replay data/cricsheet/t20s/
    python -m cricket_scoring.orchestrator --replay match.csv --export out/
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Optional

from cricket_scoring.config import (
    EngineConfig,
    MatchFormat,
    ScoringConfig,
    scoring_config_for,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("cricket_scoring.orchestrator")


def print_match(innings: list, export_dir: Optional[Path] = None, prefix: str = "") -> None:
    """Print every innings scorecard followed by the impact ranking."""
    from cricket_scoring.impact.aggregation import rank_match_impact
    from cricket_scoring.reporting.scorecard import (
        export_innings,
        innings_summary,
        match_impact_frame,
    )

    for state in innings:
        print("\n" + innings_summary(state))
        if export_dir is not None:
            for path in export_innings(state, export_dir, prefix=prefix):
                logger.info("Wrote %s", path)

    ranking = rank_match_impact(innings)
    print("\nMatch impact:")
    print(match_impact_frame(ranking[:10]).to_string(index=False))


def print_leaderboard(matches: list, limit: int) -> None:
    """Print career leaderboards across scored (match_id, innings) pairs."""
    from cricket_scoring.impact.aggregation import career_stats
    from cricket_scoring.impact.leaderboard import build_leaderboard
    from cricket_scoring.reporting.scorecard import leaderboard_frames

    board = build_leaderboard(career_stats(matches), limit=limit)
    for title, frame in leaderboard_frames(board).items():
        print(f"\n{title.replace('_', ' ').title()}:")
        print(frame.to_string() if not frame.empty else "  (none)")


def run_demo(config: EngineConfig, seed: Optional[int] = None) -> None:
    """Score a synthetic two-innings match through the ledger."""
    from cricket_scoring.data.ball_event import Player, Team, WicketDetails, WicketType
    from cricket_scoring.state.innings_ledger import InningsLedger

    rng = random.Random(seed)

    logger.info("=" * 60)
    logger.info("CRICKET SCORING ENGINE - DEMO MODE")
    logger.info("=" * 60)

    def make_team(name: str) -> Team:
        return Team(
            id=name.lower(),
            name=name,
            players=[Player(id=f"{name.lower()}_{i}", name=f"{name} {i}") for i in range(1, 12)],
        )

    thunder, strikers = make_team("Thunder"), make_team("Strikers")
    ledger = InningsLedger(config.scoring)

    for innings_number, (batting, bowling) in enumerate(
        [(thunder, strikers), (strikers, thunder)], start=1
    ):
        ledger.initialize_innings(batting, bowling, innings_number)
        order = list(batting.players)
        bowlers = bowling.players[-5:]
        fielders = bowling.players
        next_in = 2
        ledger.set_batsmen(order[0], order[1])
        ledger.set_bowler(bowlers[0])

        while not ledger.is_complete:
            r = rng.random()
            extras = None
            runs = 0
            is_wicket = False
            details = None
            if r < 0.04:
                extras = {"wide": 1}
            elif r < 0.34:
                runs = 0
            elif r < 0.62:
                runs = 1
            elif r < 0.72:
                runs = 2
            elif r < 0.84:
                runs = 4
            elif r < 0.90:
                runs = 6
            elif r < 0.94:
                extras = {"legBye": 1}
            else:
                is_wicket = True
                kind = rng.choice([WicketType.BOWLED, WicketType.CAUGHT, WicketType.LBW])
                details = WicketDetails(
                    kind=kind,
                    fielders=(rng.choice(fielders),) if kind == WicketType.CAUGHT else (),
                )

            state = ledger.record_ball(runs, extras, is_wicket, details)

            if is_wicket:
                if ledger.is_all_out or next_in >= len(order):
                    break
                ledger.change_batsman(order[next_in], "striker")
                next_in += 1
            elif runs % 2 == 1 or (extras == {"legBye": 1}):
                ledger.swap_batsmen()

            if state.balls == 0 and state.ball_by_ball[-1].is_legal_delivery:
                ledger.swap_batsmen()
                ledger.set_bowler(bowlers[state.overs % len(bowlers)])
                if state.overs % 5 == 0:
                    logger.info(
                        "  Over %d: %s (RR %.2f)",
                        state.overs, ledger.summary(), state.current_run_rate or 0.0,
                    )

        ledger.end_innings("all out" if ledger.is_all_out else "innings complete")

    innings = [*ledger.innings_history, ledger.state]
    print_match(innings)
    print_leaderboard([("demo", innings)], config.leaderboard.limit)


def run_replay(
    config: EngineConfig,
    path: str,
    match_format: Optional[str] = None,
    max_matches: Optional[int] = None,
    export_dir: Optional[str] = None,
) -> None:
    """Replay Cricsheet CSV files through the ledger."""
    from cricket_scoring.data.cricsheet_loader import (
        load_match_from_csv,
        load_matches_from_directory,
        replay_match,
    )

    target = Path(path)
    if target.is_dir():
        matches = load_matches_from_directory(target, match_format, max_matches)
    else:
        matches = [load_match_from_csv(target)]

    logger.info("=" * 60)
    logger.info("CRICKET SCORING ENGINE - REPLAY MODE (%d matches)", len(matches))
    logger.info("=" * 60)

    scored = []
    for info, innings in matches:
        scoring = _scoring_for(info.format, config.scoring)
        print("\n" + "=" * 60)
        print(f"{info.team_a} vs {info.team_b} ({info.format.upper()}) {info.venue} {info.date}")
        print("=" * 60)
        states = replay_match(innings, scoring)
        scored.append((info.match_id, states))
        print_match(
            states,
            Path(export_dir) if export_dir else None,
            prefix=f"{info.match_id}_",
        )

    if scored:
        print("\n" + "=" * 60)
        print(f"LEADERBOARD ({len(scored)} matches)")
        print("=" * 60)
        print_leaderboard(scored, config.leaderboard.limit)


def _scoring_for(match_format: str, default: ScoringConfig) -> ScoringConfig:
    try:
        return scoring_config_for(MatchFormat(match_format))
    except ValueError:
        return default


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Cricket Scoring Engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m cricket_scoring.orchestrator --demo --seed 7
  python -m cricket_scoring.orchestrator --replay data/cricsheet/t20s/ --max-matches 3
        """,
    )

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--demo", action="store_true", help="Score a synthetic match")
    mode.add_argument("--replay", type=str, metavar="PATH", help="Cricsheet CSV file or directory")

    parser.add_argument("--format", type=str, choices=["t20", "odi", "test"], help="Match format filter")
    parser.add_argument("--max-matches", type=int, help="Maximum matches to replay")
    parser.add_argument("--export", type=str, metavar="DIR", help="Write scorecard CSVs to DIR")
    parser.add_argument("--seed", type=int, help="Random seed for --demo")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    config = EngineConfig.from_env()
    logging.getLogger().setLevel(logging.DEBUG if args.verbose else config.log_level)

    try:
        if args.demo:
            run_demo(config, seed=args.seed)
        else:
            run_replay(
                config,
                args.replay,
                match_format=args.format,
                max_matches=args.max_matches,
                export_dir=args.export,
            )
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
