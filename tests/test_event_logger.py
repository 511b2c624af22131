# Area: Shared Tests
# PRD: docs/LOGGER_OUTPUT_CLIENT.md
"""Tests for the event trace logger."""

from trivia_client._shared.event_logger import (
    EXPECTED_NEXT,
    GREEN,
    ORANGE,
    RECEIVE_DISPLAY_NAMES,
    RED,
    RESET,
    SEND_DISPLAY_NAMES,
    EventLogger,
    get_event_logger,
)
from trivia_client._sync.schemas import EVENT_SCHEMAS


class TestEventNameMappings:
    """Tests for event name → display name mappings."""

    def test_every_consumed_event_has_display_name(self):
        for event in EVENT_SCHEMAS:
            assert event in RECEIVE_DISPLAY_NAMES
        assert "error" in RECEIVE_DISPLAY_NAMES

    def test_sent_events(self):
        assert set(SEND_DISPLAY_NAMES) == {
            "create_game",
            "reconnect_host",
            "join_game",
            "submit_answer",
            "submit_topic",
            "request_player_list",
        }

    def test_expected_next_defined(self):
        for event in list(RECEIVE_DISPLAY_NAMES) + list(SEND_DISPLAY_NAMES):
            assert event in EXPECTED_NEXT


class TestEventLogger:
    """Tests for EventLogger class."""

    def test_defaults(self):
        event_logger = EventLogger()
        assert event_logger._game_code == "----"
        assert event_logger._get_role() == "UNKNOWN"

    def test_set_game_code_none(self):
        event_logger = EventLogger(game_code="ABCD")
        event_logger.set_game_code(None)
        assert event_logger._game_code == "----"

    def test_role_upper_case(self):
        event_logger = EventLogger()
        event_logger.set_role("player")
        assert event_logger._get_role() == "PLAYER"

    def test_log_received_output(self, capsys):
        event_logger = EventLogger(role="host", game_code="ABCD")
        event_logger.log_received("round_reveal")
        output = capsys.readouterr().out

        assert "RECEIVED" in output
        assert "REVEAL" in output
        assert "ABCD" in output
        assert "HOST" in output
        assert GREEN in output
        assert RESET in output

    def test_log_sent_output(self, capsys):
        event_logger = EventLogger(role="player", game_code="WXYZ")
        event_logger.log_sent("submit_answer")
        output = capsys.readouterr().out

        assert "SENT" in output
        assert "ANSWER" in output
        assert "EXPECTED-NEXT: REVEAL" in output

    def test_log_phase_output(self, capsys):
        event_logger = EventLogger(role="player")
        event_logger.log_phase("question", "answered")
        output = capsys.readouterr().out

        assert "PHASE" in output
        assert "question → answered" in output
        assert ORANGE in output

    def test_unknown_event_uses_raw_name(self, capsys):
        EventLogger().log_received("brand_new_event")
        assert "brand_new_event" in capsys.readouterr().out

    def test_log_error_output(self, capsys):
        EventLogger().log_error("Invalid 'round_reveal' payload")
        output = capsys.readouterr().err

        assert "[ERROR]" in output
        assert "round_reveal" in output
        assert RED in output


class TestGetEventLogger:
    def test_returns_same_instance(self):
        assert get_event_logger() is get_event_logger()
