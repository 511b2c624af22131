#!/usr/bin/env python3
# Area: Shared
# PRD: docs/prd-phase-sync.md
"""
Trivia Party Client - Configuration Setup Script
================================================

Interactive script to generate config.json and .env files.

Usage:
    python setup_config.py
"""

import json
from pathlib import Path

from trivia_client._runner_config import DEFAULTS, ENV_MAPPINGS


def prompt(question: str, default: str = "", required: bool = True) -> str:
    """Prompt user for input with optional default value."""
    if default:
        display = f"{question} [{default}]: "
    else:
        display = f"{question}: "

    while True:
        value = input(display).strip()
        if not value and default:
            return default
        if value:
            return value
        if not required:
            return ""
        print("  This field is required. Please enter a value.")


def print_header():
    print()
    print("=" * 60)
    print("  Trivia Party Client - Configuration Setup")
    print("=" * 60)
    print()
    print("This script will help you create config.json and .env files.")
    print("Press Enter to accept default values shown in [brackets].")
    print()


def print_section(title: str):
    print()
    print(f"--- {title} ---")
    print()


def get_config_values() -> dict:
    """Interactively collect configuration values."""
    config = {}

    print_section("Game Server")
    print("The host screen shows the address players should use,")
    print("usually http://<host-lan-ip>:3000")
    print()
    config["server_url"] = prompt("Game server URL", default="http://localhost:3000")
    config["api_url"] = prompt(
        "Auth API URL (blank = same as server)", required=False
    )

    print_section("Player Identity")
    config["display_name"] = prompt("Display name", required=False)

    print_section("Optional Settings")
    config["session_db"] = prompt(
        "Session database file", default=DEFAULTS["session_db"], required=False
    )
    config["log_file"] = prompt(
        "Log file", default=DEFAULTS["log_file"], required=False
    )
    timeout = prompt(
        "Auth request timeout in seconds",
        default=str(DEFAULTS["auth_timeout_seconds"]),
        required=False,
    )
    if timeout:
        config["auth_timeout_seconds"] = float(timeout)

    return {key: value for key, value in config.items() if value != ""}


def write_config_json(config: dict, path: Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4)
    print(f"  Created: {path}")


def write_env_file(config: dict, path: Path) -> None:
    """Write .env file using the same variable names the client reads."""
    lines = []
    for env_key, config_key in ENV_MAPPINGS.items():
        if config.get(config_key):
            lines.append(f"{env_key}={config[config_key]}")

    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
    print(f"  Created: {path}")


def main():
    """Main entry point."""
    print_header()

    try:
        config = get_config_values()
    except KeyboardInterrupt:
        print("\n\nSetup cancelled.")
        return 1

    print_section("Generating Files")

    base_path = Path.cwd()
    write_config_json(config, base_path / "config.json")
    write_env_file(config, base_path / ".env")

    print()
    print("=" * 60)
    print("  Setup Complete!")
    print("=" * 60)
    print()
    print("Next steps:")
    print()
    print("  1. Optionally log in so the server knows who you are:")
    print("     python -m trivia_client login --username <name>")
    print()
    print("  2. On the big screen, start a game:")
    print("     python -m trivia_client host --max-players 4")
    print()
    print("  3. On each player device, join with the code shown:")
    print("     python -m trivia_client player --code ABCD --name <name>")
    print()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
