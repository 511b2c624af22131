# Area: Shared
# PRD: docs/prd-phase-sync.md
"""
trivia_client.cli — Command-line interface
==========================================

Provides the CLI entry point for running a host display or a player.

Usage:
    python -m trivia_client host --max-players 4 --rounds 1 --questions 5
    python -m trivia_client player --code ABCD --name ana
    python -m trivia_client login --username ana
    python -m trivia_client logout

Configuration comes from an optional JSON file (--config), then a .env
file, then the environment (TRIVIA_SERVER_URL, ...).
"""

import argparse
import asyncio
import getpass
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ._runner_config import ENV_MAPPINGS, apply_defaults, coerce_env_value, validate_config
from ._shared import AuthClient, SessionStore, log_client_error, setup_logging
from ._state import Role
from .errors import AuthError, RequestTimeout
from .runner import ClientRunner


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="trivia-client",
        description="Trivia party game client - host display or player device",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m trivia_client host --max-players 6 --rounds 2
  python -m trivia_client player --code ABCD --name ana
  TRIVIA_SERVER_URL=http://192.168.1.20:3000 python -m trivia_client player
        """,
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")

    sub = parser.add_subparsers(dest="command", required=True)

    host = sub.add_parser("host", help="Run the host (big screen) display")
    host.add_argument("--max-players", default=4, help="Players (2-8)")
    host.add_argument("--rounds", default=1, help="Rounds per player (1-5)")
    host.add_argument("--questions", default=5, help="Questions per round (3-10)")
    host.add_argument(
        "--resume-only",
        action="store_true",
        help="Do not create a game; only resume the stored one",
    )

    player = sub.add_parser("player", help="Run a player device")
    player.add_argument("--code", type=str, help="4-character game code")
    player.add_argument("--name", type=str, help="Display name (defaults to the stored one)")

    for name in ("login", "signup"):
        auth = sub.add_parser(name, help=f"{name.capitalize()} and store the token")
        auth.add_argument("--username", type=str, required=True)
        auth.add_argument("--password", type=str, help="Prompted for when omitted")

    sub.add_parser("logout", help="Forget the stored token and game")
    sub.add_parser("info", help="Show the address players should join")

    return parser.parse_args(argv)


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load config from file, .env and environment."""
    config: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config = json.load(f)

    load_dotenv()
    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            config[config_key] = coerce_env_value(config_key, os.environ[env_key])

    return apply_defaults(config)


def _auth_client(config: Dict[str, Any]) -> AuthClient:
    return AuthClient(
        config["api_url"],
        SessionStore(config["session_db"]),
        timeout=config["auth_timeout_seconds"],
    )


def run_auth(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    """Run login or signup and report the outcome."""
    password = args.password or getpass.getpass("Password: ")
    client = _auth_client(config)
    operation = client.login if args.command == "login" else client.signup
    try:
        identity = asyncio.run(operation(args.username, password))
    except RequestTimeout as e:
        log_client_error(e)
        print(f"Error: {e.user_message}", file=sys.stderr)
        return 1
    except AuthError as e:
        log_client_error(e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"Logged in as {identity.username}")
    return 0


def run_info(config: Dict[str, Any]) -> int:
    address = asyncio.run(_auth_client(config).fetch_join_address())
    if address is None:
        print(f"Join at: {config['server_url']}")
        return 0
    print(f"Join at: {address.url}")
    if address.alt_url:
        print(f"     or: {address.alt_url}")
    return 0


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    config = load_config(args.config)

    try:
        validate_config(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Set via config file or environment variables.", file=sys.stderr)
        return 1

    if args.command == "logout":
        _auth_client(config).logout()
        print("Logged out")
        return 0

    setup_logging(log_file_path=config["log_file"])
    if args.command in ("login", "signup"):
        return run_auth(args, config)
    if args.command == "info":
        return run_info(config)

    if args.command == "host":
        settings = None if args.resume_only else {
            "max_players": args.max_players,
            "rounds_per_player": args.rounds,
            "questions_per_round": args.questions,
        }
        runner = ClientRunner(config, Role.HOST, host_settings=settings)
    else:
        join_args = None
        name = args.name or config.get("display_name")
        if args.code and name:
            join_args = (args.code, name)
        elif args.code:
            print("Error: --name is required with --code", file=sys.stderr)
            return 1
        runner = ClientRunner(config, Role.PLAYER, join_args=join_args)

    runner.run()
    return 0
