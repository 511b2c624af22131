# Area: Sync Tests
# PRD: docs/prd-phase-sync.md
"""Tests for the host phase controller."""

import pytest
from unittest.mock import Mock

from trivia_client._state import HostPhase
from trivia_client._sync.host_controller import HostPhaseController, clamp_int
from trivia_client._sync.leaderboard import LeaderboardRow
from trivia_client.errors import ServerError, SessionInvalid

QUESTION = {
    "text": "Largest planet?",
    "options": ["Mars", "Venus", "Jupiter", "Earth"],
    "timeLimit": 10,
}


@pytest.fixture
def navigate():
    return Mock()


@pytest.fixture
def host(connection, store, scheduler, navigate):
    controller = HostPhaseController(connection, store, scheduler, navigate=navigate)
    controller.mount()
    yield controller
    if controller.mounted:
        controller.unmount()


def in_lobby(host, connection, code="ABCD"):
    host.create_game(4, 1, 5)
    connection.fire("game_created", {
        "gameCode": code, "maxPlayers": 4, "roundsPerPlayer": 1, "questionsPerRound": 5,
    })


class TestClampInt:
    """Tests for clamp_int()."""

    def test_within_range(self):
        assert clamp_int(4, 2, 8) == 4

    def test_clamped(self):
        assert clamp_int(20, 2, 8) == 8
        assert clamp_int(0, 2, 8) == 2

    def test_typed_text(self):
        assert clamp_int(" 5 ", 3, 10) == 5

    def test_unparseable_is_minimum(self):
        assert clamp_int("lots", 3, 10) == 3
        assert clamp_int(None, 1, 5) == 1


class TestCreateGame:
    """Creating a game and entering the lobby."""

    def test_create_emits_clamped_settings(self, host, connection):
        host.create_game("12", 0, "x")
        assert connection.sent("create_game") == [
            {"maxPlayers": 8, "roundsPerPlayer": 1, "questionsPerRound": 3}
        ]
        assert host.phase is HostPhase.CREATING

    def test_game_created_enters_lobby(self, host, connection, store):
        in_lobby(host, connection)

        assert host.phase is HostPhase.LOBBY
        assert host.game_code == "ABCD"
        assert host.session.max_players == 4
        assert store.game_code == "ABCD"
        assert store.role == "host"

    def test_ready_to_start_when_lobby_full(self, host, connection):
        in_lobby(host, connection)
        connection.fire("update_player_list", ["a", "b", "c"])
        assert not host.ready_to_start
        connection.fire("update_player_list", ["a", "b", "c", "d"])
        assert host.ready_to_start
        assert host.names == ["a", "b", "c", "d"]

    def test_roster_is_replaced_not_merged(self, host, connection):
        in_lobby(host, connection)
        connection.fire("update_player_list", ["a", "b"])
        connection.fire("update_player_list", [{"username": "c", "id": "s3"}])
        assert host.names == ["c"]

    def test_error_while_creating_returns_to_form(self, host, connection):
        host.create_game(4, 1, 5)
        connection.fire("error", "Server busy")
        assert host.phase is HostPhase.UNCONFIGURED
        assert isinstance(host.last_error, ServerError)


class TestResume:
    """Resuming a stored host session."""

    def test_mount_resumes_stored_game(self, connection, store, scheduler):
        store.save_game("WXYZ", "host")
        host = HostPhaseController(connection, store, scheduler)
        host.mount()
        assert host.previous_code == "WXYZ"
        assert connection.sent("reconnect_host") == [{"gameCode": "WXYZ"}]

    def test_resume_on_connect(self, offline_connection, store, scheduler):
        connection = offline_connection
        store.save_game("WXYZ", "host")
        host = HostPhaseController(connection, store, scheduler)
        host.mount()
        assert connection.sent("reconnect_host") == []

        connection.connect()
        assert connection.sent("reconnect_host") == [{"gameCode": "WXYZ"}]

    def test_no_resume_without_stored_game(self, host, connection):
        connection.connect()
        assert connection.sent("reconnect_host") == []

    def test_resumed_game_enters_lobby(self, connection, store, scheduler):
        store.save_game("WXYZ", "host")
        host = HostPhaseController(connection, store, scheduler)
        host.mount()
        connection.fire("host_reconnected", {"gameCode": "WXYZ", "gameState": "LOBBY", "maxPlayers": 6})
        assert host.phase is HostPhase.LOBBY
        assert host.game_code == "WXYZ"
        assert host.session.max_players == 6

    def test_finished_game_is_purged(self, connection, store, scheduler):
        store.save_game("WXYZ", "host")
        host = HostPhaseController(connection, store, scheduler)
        host.mount()
        connection.fire("host_reconnected", {"gameCode": "WXYZ", "gameState": "GAME_OVER"})

        assert store.game_code is None
        assert host.phase is HostPhase.UNCONFIGURED
        assert host.game_code is None

    def test_invalid_code_error_clears_store(self, connection, store, scheduler):
        store.save_game("WXYZ", "host")
        host = HostPhaseController(connection, store, scheduler)
        host.mount()
        connection.fire("error", "Invalid game code")

        assert store.game_code is None
        assert isinstance(host.last_error, SessionInvalid)
        assert host.last_error.message == "Invalid game code"

    def test_other_error_keeps_store(self, host, connection, store):
        in_lobby(host, connection)
        connection.fire("error", "Not enough players")
        assert store.game_code == "ABCD"
        assert host.phase is HostPhase.LOBBY


class TestRoundFlow:
    """Rounds, topics, questions and reveals."""

    def test_round_start_and_topic_selection(self, host, connection):
        in_lobby(host, connection)
        connection.fire("game_started", {})
        assert host.started
        assert host.phase is HostPhase.LOBBY

        connection.fire("round_start", {"roundNumber": 1})
        assert host.phase is HostPhase.INTERMISSION
        assert host.round.round_number == 1

        connection.fire("topic_waiting", {"pickerUsername": "ana", "round": 1})
        assert host.phase is HostPhase.TOPIC_SELECTION
        assert host.round.picker_username == "ana"

        connection.fire("topic_chosen", {"topic": "Space", "pickerUsername": "ana"})
        assert host.phase is HostPhase.TOPIC_CHOSEN
        assert host.round.topic == "Space"

    def test_topic_waiting_default_picker(self, host, connection):
        in_lobby(host, connection)
        connection.fire("topic_waiting", {})
        assert host.round.picker_username == "a player"

    def test_question_then_reveal(self, host, connection, scheduler):
        in_lobby(host, connection)
        connection.fire("question_start", QUESTION)
        assert host.phase is HostPhase.QUESTION
        assert host.question.options[2] == "Jupiter"
        assert host.remaining_seconds == 10

        scheduler.advance(3)
        assert host.remaining_seconds == 7

        connection.fire("round_reveal", {
            "correctIndex": 2,
            "correctAnswerDisplay": "Jupiter",
            "scores": [{"username": "ana", "score": 5}, {"username": "bo", "score": 9}],
        })
        assert host.phase is HostPhase.REVEAL
        assert host.correct_index == 2
        assert host.leaderboard == [LeaderboardRow("bo", 9), LeaderboardRow("ana", 5)]

        scheduler.advance(3)
        assert host.remaining_seconds == 7
        assert scheduler.pending == []

    def test_reveal_with_malformed_score_entries(self, host, connection):
        in_lobby(host, connection)
        connection.fire("question_start", QUESTION)
        connection.fire("round_reveal", {
            "correctIndex": 1,
            "scores": [{"username": "ana", "score": 10}, None, {"score": 3}],
        })
        assert host.phase is HostPhase.REVEAL
        assert host.leaderboard == [LeaderboardRow("ana", 10)]

    def test_fractional_time_limit_still_opens_question(self, host, connection):
        in_lobby(host, connection)
        connection.fire("question_start", {"text": "q", "options": ["x", "y"], "timeLimit": 12.5})
        assert host.phase is HostPhase.QUESTION
        assert host.remaining_seconds == 12

    def test_question_without_time_limit(self, host, connection):
        in_lobby(host, connection)
        connection.fire("question_start", {"text": "Q", "options": ["a", "b"]})
        assert host.remaining_seconds == 30

    def test_new_question_replaces_the_old(self, host, connection, scheduler):
        in_lobby(host, connection)
        connection.fire("question_start", QUESTION)
        scheduler.advance(4)
        connection.fire("question_start", {"text": "Next?", "options": ["x"], "timeLimit": 20})
        assert host.question.text == "Next?"
        assert host.remaining_seconds == 20
        assert len(scheduler.pending) == 1

    def test_answered_is_a_set(self, host, connection):
        in_lobby(host, connection)
        connection.fire("question_start", QUESTION)
        connection.fire("player_answered", {"playerId": "s1"})
        connection.fire("player_answered", {"playerId": "s1"})
        connection.fire("player_answered", {"playerId": "s2"})
        assert host.answered_count == 2

        connection.fire("question_start", QUESTION)
        assert host.answered_count == 0

    def test_round_over_without_scores_keeps_leaderboard(self, host, connection):
        in_lobby(host, connection)
        connection.fire("update_leaderboard", {"scores": [{"username": "ana", "score": 3}]})
        connection.fire("round_over", {"round": 1})
        assert host.phase is HostPhase.ROUND_OVER
        assert host.leaderboard == [LeaderboardRow("ana", 3)]

    def test_invalid_payload_leaves_state(self, host, connection):
        in_lobby(host, connection)
        connection.fire("question_start", {"text": "Q", "options": "not-a-list"})
        assert host.phase is HostPhase.LOBBY
        assert host.question is None


class TestGameOver:
    """The terminal transition."""

    def test_game_over_summarizes_and_leaves(self, host, connection, store, navigate):
        in_lobby(host, connection)
        connection.fire("question_start", QUESTION)
        connection.fire("game_over", {"scores": [{"username": "ana", "score": 1}, {"username": "bo", "score": 4}]})

        assert host.phase is HostPhase.GAME_OVER
        assert host.final_scores == [LeaderboardRow("bo", 4), LeaderboardRow("ana", 1)]
        assert store.game_code is None
        assert not host.mounted
        assert connection.handler_count("round_start") == 0
        navigate.assert_called_once_with("summary", {"final_scores": host.final_scores})

    def test_events_after_game_over_are_ignored(self, host, connection):
        in_lobby(host, connection)
        connection.fire("game_over", {"scores": []})
        connection.fire("round_start", {"roundNumber": 2})
        assert host.phase is HostPhase.GAME_OVER


class TestMounting:
    """Subscription scope."""

    def test_mount_twice_does_not_duplicate(self, host, connection):
        host.mount()
        assert connection.handler_count("question_start") == 1
        assert connection.handler_count("connect") == 1

    def test_remount_after_unmount(self, host, connection):
        host.unmount()
        assert connection.handler_count("question_start") == 0
        host.mount()
        assert connection.handler_count("question_start") == 1

    def test_phase_change_hook(self, connection, store, scheduler):
        changes = []
        host = HostPhaseController(
            connection, store, scheduler,
            on_phase_change=lambda old, new: changes.append((old, new)),
        )
        host.mount()
        host.create_game(4, 1, 5)
        assert changes == [(HostPhase.UNCONFIGURED, HostPhase.CREATING)]
