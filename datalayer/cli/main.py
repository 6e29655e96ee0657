"""CLI for the TryTag data layer."""

from __future__ import annotations

import argparse
import json
import logging

from dotenv import load_dotenv

from datalayer.trytag_data import DivisionNotFoundError, SyncOrchestrator, load_config
from datalayer.trytag_data.queries import get_division_fixtures, get_division_standings

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="trytagdl")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default INFO).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("sync", help="Run a full sync of every league division.")

    division = subparsers.add_parser(
        "sync-division", help="Resync a single known division."
    )
    division.add_argument("--league-id", type=int, required=True, help="External league id.")
    division.add_argument("--season-id", type=int, required=True, help="External season id.")
    division.add_argument(
        "--division-id", type=int, required=True, help="External division id."
    )

    profile = subparsers.add_parser("team-profile", help="Fetch and print a team profile.")
    profile.add_argument("--team-id", type=int, required=True, help="External team id.")
    profile.add_argument("--league-id", type=int, help="External league id for context.")
    profile.add_argument("--season-id", type=int, help="External season id for context.")
    profile.add_argument("--division-id", type=int, help="External division id for context.")

    standings = subparsers.add_parser("standings", help="Print a stored division table.")
    standings.add_argument("--division-id", type=int, required=True, help="Internal division id.")

    fixtures = subparsers.add_parser("fixtures", help="Print stored division fixtures.")
    fixtures.add_argument("--division-id", type=int, required=True, help="Internal division id.")

    return parser


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True, default=str))


def _team_profile(orchestrator: SyncOrchestrator, args: argparse.Namespace) -> int:
    profile = orchestrator.fetch_team_profile(
        args.team_id,
        league_id=args.league_id,
        season_id=args.season_id,
        division_id=args.division_id,
    )
    if profile is None:
        _print_json({"found": False, "team_id": args.team_id, "errors": orchestrator.errors})
        return 1

    if args.league_id and args.season_id and args.division_id:
        store = orchestrator.store
        league = store.find_league_by_external_id(args.league_id)
        season = store.find_season_by_external_id(args.season_id)
        division = (
            store.find_division_by_external_id(args.division_id, league.id, season.id)
            if league is not None and season is not None
            else None
        )
        if division is not None:
            profile = orchestrator.reconcile_team_fixtures(profile, division.id)
        else:
            logger.warning("Division %s is not stored; fixtures left unverified", args.division_id)

    _print_json(profile.model_dump())
    return 0


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config()
    orchestrator = SyncOrchestrator.from_config(config)

    if args.command == "sync":
        result = orchestrator.run_full_sync()
        _print_json(result.to_dict())
        return 0 if result.success else 1
    if args.command == "sync-division":
        try:
            result = orchestrator.sync_single_division(
                args.league_id, args.season_id, args.division_id
            )
        except DivisionNotFoundError as exc:
            print(f"Error: {exc}")
            return 1
        except Exception as exc:
            print(f"Sync failed: {exc}")
            return 1
        _print_json(result.to_dict())
        return 0
    if args.command == "team-profile":
        return _team_profile(orchestrator, args)
    if args.command == "standings":
        payload = get_division_standings(orchestrator.store, args.division_id)
        _print_json(payload)
        return 0 if payload["found"] else 1
    if args.command == "fixtures":
        payload = get_division_fixtures(orchestrator.store, args.division_id)
        _print_json(payload)
        return 0 if payload["found"] else 1

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
