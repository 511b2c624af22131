# Area: Runner
# PRD: docs/prd-phase-sync.md
"""
trivia_client.runner — Client Runner
====================================

Runs one device (host display or player) against the game server.

Builds the session store, the connection and the phase controller,
mounts the controller, then reads typed commands from stdin until the
game ends or the user quits.

Host commands:   create [players rounds questions], players, status, quit
Player commands: join CODE NAME, answer N, topic TEXT, players, leave,
                 status, quit
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from enum import Enum
from typing import Any, Dict, Optional, TextIO, Union

from ._runner_config import apply_defaults, validate_config
from ._shared import (
    ConnectionManager,
    SessionStore,
    enable_trace_mode,
    get_event_logger,
    setup_logging,
)
from ._state import HostPhase, PlayerPhase, Role
from ._sync import HostPhaseController, PlayerPhaseController
from ._sync.controller_base import ROUTE_JOIN, ROUTE_SUMMARY

logger = logging.getLogger("trivia_client")

Controller = Union[HostPhaseController, PlayerPhaseController]

OPTION_LETTERS = "ABCDEFGH"

# Countdown values announced on the terminal
ANNOUNCED_SECONDS = {30, 20, 10, 5, 3, 2, 1, 0}


def parse_answer(token: str) -> Optional[int]:
    """
    Parse a typed answer into a 0-based option index.

    Accepts a letter (``B``) or a 1-based number (``2``).
    """
    token = token.strip().upper()
    if len(token) == 1 and token in OPTION_LETTERS:
        return OPTION_LETTERS.index(token)
    try:
        number = int(token)
    except ValueError:
        return None
    return number - 1 if number >= 1 else None


class ClientRunner:
    """
    Terminal front end for one device.

    Usage:
        runner = ClientRunner(config, Role.PLAYER, join_args=("ABCD", "ana"))
        runner.run()
    """

    def __init__(
        self,
        config: Dict[str, Any],
        role: Role,
        host_settings: Optional[Dict[str, Any]] = None,
        join_args: Optional[tuple] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        self.config = apply_defaults(config)
        self.role = role
        self.host_settings = host_settings
        self.join_args = join_args
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout

        setup_logging(log_file_path=self.config["log_file"])
        validate_config(self.config)

        self.session_store = SessionStore(self.config["session_db"])
        self.connection: Optional[ConnectionManager] = None
        self.controller: Optional[Controller] = None
        self._done: Optional[asyncio.Event] = None

        if self.config.get("trace"):
            enable_trace_mode()
        self._event_logger = get_event_logger()
        self._event_logger.set_role(role.value)

    # ── Lifecycle ────────────────────────────────────────────

    def run(self) -> None:
        """Run until the game ends or the user quits. Blocks."""
        try:
            asyncio.run(self.run_async())
        except KeyboardInterrupt:
            pass
        logger.info("Client runner stopped.")

    async def run_async(self) -> None:
        loop = asyncio.get_running_loop()
        self._done = asyncio.Event()
        # Token captured once; a later login needs a new runner
        self.connection = ConnectionManager(
            self.config["server_url"], auth_token=self.session_store.auth_token
        )
        self.controller = self.build_controller(self.connection, loop)

        self._log_startup()
        self._install_signal_handler(loop)
        reading = self._attach_stdin(loop)

        if self.role is Role.PLAYER and self.join_args:
            try:
                self.controller.join(*self.join_args)
            except ValueError as e:
                self._print(str(e))
        self.controller.mount()

        try:
            await self.connection.start()
            self._after_connect()
            await self._done.wait()
        finally:
            if reading:
                loop.remove_reader(self._stdin.fileno())
            if self.controller.mounted:
                self.controller.unmount()
            await self.connection.close()

    def build_controller(self, connection: ConnectionManager, scheduler: Any) -> Controller:
        """Create the controller for this runner's role."""
        controller_class = HostPhaseController if self.role is Role.HOST else PlayerPhaseController
        return controller_class(
            connection,
            self.session_store,
            scheduler,
            navigate=self._navigate,
            event_logger=self._event_logger,
            on_phase_change=self._on_phase_change,
            on_countdown=self._on_countdown,
        )

    def stop(self) -> None:
        if self._done is not None:
            self._done.set()

    def _log_startup(self) -> None:
        """Log startup information."""
        logger.info("=" * 60)
        logger.info(f"  Trivia Client ({self.role.value}) — Starting")
        logger.info(f"  Server:  {self.config['server_url']}")
        logger.info(f"  Session: {self.config['session_db']}")
        logger.info(f"  Stored game: {self.session_store.game_code or 'none'}")
        logger.info("=" * 60)

    def _install_signal_handler(self, loop: asyncio.AbstractEventLoop) -> None:
        try:
            loop.add_signal_handler(signal.SIGINT, self.stop)
        except (NotImplementedError, RuntimeError):
            logger.debug("Signal handlers not supported; Ctrl+C ends the loop")

    def _attach_stdin(self, loop: asyncio.AbstractEventLoop) -> bool:
        try:
            loop.add_reader(self._stdin.fileno(), self._on_stdin_ready)
        except (NotImplementedError, ValueError, OSError) as e:
            logger.warning(f"Interactive commands unavailable: {e}")
            return False
        return True

    def _on_stdin_ready(self) -> None:
        line = self._stdin.readline()
        if not line:
            # EOF: keep following the game, stop reading
            asyncio.get_running_loop().remove_reader(self._stdin.fileno())
            return
        try:
            self.handle_command(line)
        except Exception as e:
            logger.error(f"Command error: {e}", exc_info=True)

    def _after_connect(self) -> None:
        """Host: start a new game unless a stored one is being resumed."""
        if self.role is not Role.HOST or self.host_settings is None:
            return
        if self.controller.phase is HostPhase.UNCONFIGURED and not self.session_store.game_code:
            self.controller.create_game(**self.host_settings)

    # ── Commands ─────────────────────────────────────────────

    def handle_command(self, line: str) -> None:
        """Apply one typed command to the controller."""
        parts = line.strip().split(maxsplit=1)
        if not parts:
            return
        command, rest = parts[0].lower(), (parts[1] if len(parts) > 1 else "")

        if command == "quit":
            self.stop()
        elif command == "status":
            self._print(self.describe())
        elif command == "players":
            self.controller.request_player_list()
        elif self.role is Role.HOST and command == "create":
            self._create_command(rest)
        elif self.role is Role.PLAYER and command == "join":
            self._join_command(rest)
        elif self.role is Role.PLAYER and command == "answer":
            self._answer_command(rest)
        elif self.role is Role.PLAYER and command == "topic":
            if not self.controller.submit_topic(rest):
                self._print("Topic ignored (empty)")
        elif self.role is Role.PLAYER and command == "leave":
            self.controller.leave()
        else:
            self._print(f"Unknown command: {command}")

    def _create_command(self, rest: str) -> None:
        settings = dict(self.host_settings or {})
        values = rest.split()
        for key, value in zip(("max_players", "rounds_per_player", "questions_per_round"), values):
            settings[key] = value
        self.controller.create_game(
            settings.get("max_players", 4),
            settings.get("rounds_per_player", 1),
            settings.get("questions_per_round", 5),
        )

    def _join_command(self, rest: str) -> None:
        values = rest.split(maxsplit=1)
        if len(values) != 2:
            self._print("Usage: join CODE NAME")
            return
        try:
            self.controller.join(values[0], values[1])
        except ValueError as e:
            self._print(str(e))

    def _answer_command(self, rest: str) -> None:
        index = parse_answer(rest)
        question = self.controller.question
        if index is None or question is None or index >= len(question.options):
            self._print("Usage: answer N (or a letter)")
            return
        if not self.controller.submit_answer(index):
            self._print("Answer ignored")

    # ── Controller hooks ─────────────────────────────────────

    def _on_phase_change(self, old: Enum, new: Enum) -> None:
        self._print(self.describe())

    def _on_countdown(self, remaining: int) -> None:
        if remaining in ANNOUNCED_SECONDS:
            self._print(f"  ⏱ {remaining}s")

    def _navigate(self, route: str, data: Dict[str, Any]) -> None:
        if route == ROUTE_SUMMARY:
            self._print("Final scores:")
            for rank, row in enumerate(data.get("final_scores") or [], start=1):
                self._print(f"  {rank}. {row.name}  {row.score if row.score is not None else '-'}")
            self.stop()
        elif route == ROUTE_JOIN:
            self._print(f"{data.get('message')}. Use 'join CODE NAME' to join a game.")

    # ── Display ──────────────────────────────────────────────

    def describe(self) -> str:
        """One-screen text view of the controller state."""
        c = self.controller
        code = c.game_code or "----"
        phase = c.phase

        if phase in (HostPhase.LOBBY, PlayerPhase.WAITING, PlayerPhase.JOINING):
            return f"[{code}] {phase.value}: {', '.join(c.names) or 'no players yet'}"
        if phase in (HostPhase.TOPIC_SELECTION, PlayerPhase.TOPIC_WAITING):
            return f"[{code}] {c.round.picker_username} is choosing a topic..."
        if phase is PlayerPhase.TOPIC_INPUT:
            return f"[{code}] Your turn: type 'topic TEXT'"
        if phase in (HostPhase.TOPIC_CHOSEN, PlayerPhase.TOPIC_CHOSEN):
            return f"[{code}] Topic: {c.round.topic} (chosen by {c.round.picker_username})"
        if phase in (HostPhase.QUESTION, PlayerPhase.QUESTION) and c.question is not None:
            lines = [f"[{code}] {c.question.text} ({c.question.time_limit}s)"]
            for letter, option in zip(OPTION_LETTERS, c.question.options):
                lines.append(f"  {letter}) {option}")
            return "\n".join(lines)
        if phase is HostPhase.REVEAL:
            return f"[{code}] Answer: {c.correct_answer_display or c.correct_index}"
        if phase is PlayerPhase.RESULT:
            verdict = c.verdict or "no answer"
            return f"[{code}] {verdict} (score {c.score})"
        if phase is HostPhase.ROUND_OVER:
            rows = ", ".join(f"{row.name}: {row.score}" for row in c.leaderboard)
            return f"[{code}] Round {c.round.round_number} over. {rows}"
        if phase is HostPhase.UNCONFIGURED and c.last_error is not None:
            return f"{c.last_error}. Type 'create' to start a new game."
        return f"[{code}] {phase.value}"

    def _print(self, text: str) -> None:
        print(text, file=self._stdout, flush=True)
