# Area: Shared
"""
scrim_manager.cli — Command-line interface
==========================================

Provides a CLI entry point for managing scrims against a local store.

Usage:
    python -m scrim_manager init-db
    python -m scrim_manager add-user admin@example.com Admin --role admin
    python -m scrim_manager create "Friday scrim" --creator admin@example.com
    python -m scrim_manager act SCRIM_ID apply --actor p1@example.com \\
        --payload '{"tier": "Gold", "positions": ["MID"]}'
    python -m scrim_manager show SCRIM_ID

Settings come from --config, the environment and a .env file; see
scrim_manager._config for the variable names.
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from ._config import load_config, log_level, validate_config
from ._scrim.champions import ChampionCatalog
from ._scrim.coordinator import ActionResult, TransactionCoordinator
from ._scrim.database import DocumentStore, init_database
from ._scrim.enums import Role, ScrimStatus, ScrimType, Team
from ._scrim.repo_matches import MatchRepository
from ._scrim.repo_scrims import ScrimRepository
from ._scrim.repo_users import UserRepository
from ._scrim.roles import UserRoleProvider
from ._scrim.stats import StatsProjector
from ._shared.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="scrim-manager",
        description="Scrim Manager - run the scrim lifecycle against a local store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m scrim_manager init-db
  python -m scrim_manager create "Friday scrim" --creator admin@example.com --type fearless
  python -m scrim_manager act SCRIM_ID start_team_building --actor admin@example.com
  SCRIM_DB_PATH=/tmp/scrims.db python -m scrim_manager list
        """,
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument("--db", type=str, help="Override the database path")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the database schema")

    add_user = sub.add_parser("add-user", help="Create or update a player profile")
    add_user.add_argument("email")
    add_user.add_argument("nickname")
    add_user.add_argument("--role", default=Role.MEMBER.value,
                          choices=[r.value for r in Role])

    create = sub.add_parser("create", help="Create a scrim")
    create.add_argument("name")
    create.add_argument("--creator", required=True)
    create.add_argument("--type", default=ScrimType.NORMAL.value,
                        choices=[t.value for t in ScrimType])

    show = sub.add_parser("show", help="Print one scrim")
    show.add_argument("scrim_id")

    list_cmd = sub.add_parser("list", help="List scrims, newest first")
    list_cmd.add_argument("--status", choices=[s.value for s in ScrimStatus])

    act = sub.add_parser("act", help="Apply an action to a scrim")
    act.add_argument("scrim_id")
    act.add_argument("action")
    act.add_argument("--actor", required=True)
    act.add_argument("--payload", default="{}", help="JSON payload")

    champions = sub.add_parser("champions", help="Search the champion catalog")
    champions.add_argument("query", nargs="?", default="")

    stats = sub.add_parser("stats", help="Print one player's stats")
    stats.add_argument("email")

    sub.add_parser("hall-of-fame", help="Print the hall of fame")

    correct = sub.add_parser("correct-champion", help="Fix a champion in a match record")
    correct.add_argument("match_id")
    correct.add_argument("team", choices=[t.value for t in Team])
    correct.add_argument("player_email")
    correct.add_argument("champion")
    correct.add_argument("--requester", required=True)

    return parser


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _print_result(result: ActionResult) -> int:
    _print_json(result.to_dict())
    return 0 if result.ok else 1


def _parse_payload(raw: str) -> Optional[Dict[str, Any]]:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        print(f"Error: --payload is not valid JSON: {e}", file=sys.stderr)
        return None
    if not isinstance(payload, dict):
        print("Error: --payload must be a JSON object", file=sys.stderr)
        return None
    return payload


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    if args.db:
        config["db_path"] = args.db
    try:
        validate_config(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config["log_file"], log_level(config))
    db_path = config["db_path"]

    if args.command == "init-db":
        init_database(db_path)
        print(f"Initialized {db_path}")
        return 0

    store = DocumentStore(db_path, max_attempts=config["max_transaction_attempts"])
    users = UserRepository(store)
    catalog = ChampionCatalog(
        ttl_seconds=config["champion_cache_seconds"],
        locale=config["champion_locale"],
    )
    coordinator = TransactionCoordinator(
        store,
        roles=UserRoleProvider(users, config["admin_emails"]),
        catalog=catalog,
        users=users,
    )

    if args.command == "add-user":
        users.save_user(args.email, args.nickname, Role(args.role))
        _print_json(users.get_user(args.email))
        return 0

    if args.command == "create":
        return _print_result(coordinator.create_scrim(args.name, args.creator, args.type))

    if args.command == "show":
        state = coordinator.get_state(args.scrim_id)
        if state is None:
            print(f"Error: scrim {args.scrim_id} not found", file=sys.stderr)
            return 1
        _print_json({"scrimId": state.scrim_id, **state.to_document()})
        return 0

    if args.command == "list":
        status = ScrimStatus(args.status) if args.status else None
        for state in ScrimRepository(store).list_scrims(status):
            print(f"{state.scrim_id}  {state.status.value:<13}  {state.scrim_type.value:<8}  "
                  f"{len(state.applicants):>2}/10  {state.name}")
        return 0

    if args.command == "act":
        payload = _parse_payload(args.payload)
        if payload is None:
            return 1
        return _print_result(coordinator.execute(args.scrim_id, args.action, args.actor, payload))

    if args.command == "champions":
        found = catalog.lookup(args.query)
        if not found and not catalog.champions():
            print("Error: champion catalog unavailable", file=sys.stderr)
            return 1
        _print_json([{"id": c.id, "name": c.name, "imageUrl": c.image_url} for c in found])
        return 0

    if args.command == "correct-champion":
        return _print_result(coordinator.correct_match_champion(
            args.match_id, args.team, args.player_email, args.champion, args.requester,
        ))

    projector = StatsProjector.from_store(MatchRepository(store), users)
    if args.command == "stats":
        _print_json(projector.user_stats(args.email))
    else:
        _print_json(projector.hall_of_fame())
    return 0
