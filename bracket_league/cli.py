#!/usr/bin/env python
"""
Bracket League - developer CLI over a local league directory.
"""
import argparse
import json
import sys
import time
import uuid
from pathlib import Path

from bracket_league.config import settings
from bracket_league.core import LocalLeagueRepository, ServiceContainer
from bracket_league.exceptions import BracketLeagueError
from bracket_league.game_types import GameTypeRegistry
from bracket_league.league import LeagueService
from bracket_league.utils.logging import setup_logging
from bracket_league.utils.observability import CORRELATION_ID, Logger, initialize_observability, league_context

logger = Logger(__name__)


def _service(args) -> LeagueService:
    if args.data_dir:
        ServiceContainer.register_repository(LocalLeagueRepository(Path(args.data_dir)))
    return LeagueService(ServiceContainer.get_repository())


def cmd_validate_config(args):
    """Report region-matchup problems for a league."""
    service = _service(args)
    problems = service.validate_config(args.league)

    if not problems:
        print(f"[OK] Region matchup config for {args.league} is valid")
        return 0

    print(f"Region matchup config for {args.league} has {len(problems)} problem(s):")
    for problem in problems:
        print(f"  - {problem.message}")
    return 1


def cmd_leaderboard(args):
    """Print the leaderboard as the given viewer sees it."""
    service = _service(args)
    rows = service.leaderboard(args.league, viewer_id=args.viewer, is_admin=args.admin or None)

    if not rows:
        print("No visible entries")
        return 0

    print(f"\n{'':=^60}")
    print(f"LEADERBOARD - {args.league}".center(60))
    print(f"{'':=^60}")
    print(f"| {'Rank':>4} | {'Owner':<20} | {'Score':>7} | {'Correct':>7} | {'Max':>7} |")
    print(f"|{'-'*6}|{'-'*22}|{'-'*9}|{'-'*9}|{'-'*9}|")
    for row in rows:
        b = row.breakdown
        print(
            f"| {row.rank:>4} | {row.owner_id[:20]:<20} | {b.total:7.1f} | "
            f"{b.correct_picks:>7} | {b.possible_total:7.1f} |"
        )
    print()
    return 0


def cmd_winners(args):
    """Show stored winners, or determine them with --finalize."""
    service = _service(args)
    winners = service.finalize(args.league) if args.finalize else service.winners(args.league)

    if winners is None:
        print(f"League {args.league} has not been finalized")
        return 1

    names = ", ".join(sorted(winners.owner_ids))
    print(f"Winners ({winners.winning_score:g} pts): {names}")
    return 0


def cmd_status(args):
    service = _service(args)
    print(json.dumps(service.metadata(args.league), indent=2, default=str))
    return 0


def cmd_game_types(args):
    """List enabled tournament formats."""
    for info in GameTypeRegistry.list_game_types():
        print(f"{info['id']:<16} {info['name']}")
        print(f"{'':<16} {len(info['regions'])} regions x {info['seed_count']} seeds: "
              f"{', '.join(info['rounds'])}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Bracket League")
    parser.add_argument("--data-dir", help="League data directory (default: settings.data_dir)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate-config", help="Check a league's region matchup config")
    validate.add_argument("league")
    validate.set_defaults(func=cmd_validate_config)

    leaderboard = subparsers.add_parser("leaderboard", help="Show the leaderboard")
    leaderboard.add_argument("league")
    leaderboard.add_argument("--viewer", help="Viewer user id (fog of war applies)")
    leaderboard.add_argument("--admin", action="store_true", help="View as a league admin")
    leaderboard.set_defaults(func=cmd_leaderboard)

    winners = subparsers.add_parser("winners", help="Show or determine league winners")
    winners.add_argument("league")
    winners.add_argument("--finalize", action="store_true", help="Determine and store winners")
    winners.set_defaults(func=cmd_winners)

    status = subparsers.add_parser("status", help="Show league metadata")
    status.add_argument("league")
    status.set_defaults(func=cmd_status)

    game_types = subparsers.add_parser("game-types", help="List available game types")
    game_types.set_defaults(func=cmd_game_types)

    args = parser.parse_args()

    setup_logging(level=settings.observability.log_level)
    initialize_observability(environment=settings.observability.environment)
    GameTypeRegistry.load_config(settings.game_types_config)
    CORRELATION_ID.set(str(uuid.uuid4()))
    start_time = time.time()

    try:
        with league_context(getattr(args, "league", None)):
            code = args.func(args)
    except BracketLeagueError as e:
        logger.log_error("command_failed", error=str(e), command=args.command)
        print(f"ERROR: {e}")
        sys.exit(1)
    finally:
        logger.log_event("command_completed", command=args.command, duration_seconds=time.time() - start_time)

    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
