# Area: Sync Tests
# PRD: docs/prd-phase-sync.md
"""Tests for leaderboard aggregation."""

import pytest

from trivia_client._sync.leaderboard import LeaderboardRow, aggregate, score_for
from trivia_client._sync.schemas import parse_player_list
from trivia_client._state import Player
from trivia_client.errors import PayloadError


class TestAggregate:
    """Tests for aggregate()."""

    def test_sorts_by_score_descending(self):
        rows = aggregate([
            {"username": "ana", "score": 3},
            {"username": "bo", "score": 9},
            {"username": "cy", "score": 5},
        ])
        assert rows == [
            LeaderboardRow("bo", 9),
            LeaderboardRow("cy", 5),
            LeaderboardRow("ana", 3),
        ]

    def test_bare_usernames_have_no_score(self):
        rows = aggregate(["ana", "bo"])
        assert rows == [LeaderboardRow("ana", None), LeaderboardRow("bo", None)]

    def test_non_numeric_score_becomes_none(self):
        """A string or boolean score is not a score."""
        rows = aggregate([
            {"username": "ana", "score": "7"},
            {"username": "bo", "score": True},
        ])
        assert [row.score for row in rows] == [None, None]

    def test_unknown_score_sorts_as_zero(self):
        rows = aggregate([
            {"username": "ana"},
            {"username": "bo", "score": 2},
            {"username": "cy", "score": -1},
        ])
        assert [row.name for row in rows] == ["bo", "ana", "cy"]
        assert rows[1].score is None

    def test_entries_without_name_are_dropped(self):
        rows = aggregate([
            {"score": 4},
            {"username": "", "score": 8},
            {"username": 12, "score": 8},
            {"username": "ana", "score": 1},
        ])
        assert rows == [LeaderboardRow("ana", 1)]

    def test_ties_keep_incoming_order(self):
        rows = aggregate([
            {"username": "zed", "score": 5},
            {"username": "amy", "score": 5},
            {"username": "kim", "score": 5},
        ])
        assert [row.name for row in rows] == ["zed", "amy", "kim"]

    def test_name_key_is_accepted(self):
        rows = aggregate([{"name": "ana", "score": 2}])
        assert rows == [LeaderboardRow("ana", 2)]

    def test_wrapped_players_object(self):
        rows = aggregate({"players": [{"username": "ana", "score": 1}]})
        assert rows == [LeaderboardRow("ana", 1)]

    def test_wrapped_scores_object(self):
        rows = aggregate({"scores": ["ana"]})
        assert rows == [LeaderboardRow("ana", None)]

    def test_dataclass_players_are_accepted(self):
        rows = aggregate([Player(username="ana", score=4)])
        assert rows == [LeaderboardRow("ana", 4)]

    def test_empty_list(self):
        assert aggregate([]) == []

    def test_same_payload_same_result(self):
        payload = [{"username": "ana", "score": 3}, "bo", {"username": "cy", "score": 3}]
        assert aggregate(payload) == aggregate(payload)

    def test_aggregating_rows_again_changes_nothing(self):
        payload = [
            {"username": "ana", "score": 3},
            "bo",
            {"name": "cy", "score": 3},
            {"username": "dee", "score": 8},
            {"name": "eli"},
        ]
        rows = aggregate(payload)
        assert aggregate(rows) == rows
        assert [row.name for row in rows] == ["dee", "ana", "cy", "bo", "eli"]

    def test_entries_of_other_types_are_dropped(self):
        rows = aggregate([{"username": "ana", "score": 2}, None, 7, ["bo"], "cy"])
        assert rows == [LeaderboardRow("ana", 2), LeaderboardRow("cy", None)]

    def test_non_finite_score_becomes_none(self):
        rows = aggregate([
            {"username": "ana", "score": 1},
            {"username": "bo", "score": float("nan")},
            {"username": "cy", "score": 5},
            {"username": "dee", "score": float("-inf")},
        ])
        assert rows == [
            LeaderboardRow("cy", 5),
            LeaderboardRow("ana", 1),
            LeaderboardRow("bo", None),
            LeaderboardRow("dee", None),
        ]

    def test_input_not_mutated(self):
        payload = [{"username": "ana", "score": "x"}]
        aggregate(payload)
        assert payload == [{"username": "ana", "score": "x"}]


class TestAggregateInvalidShapes:
    """Unrecognised payloads fail at the boundary."""

    @pytest.mark.parametrize("payload", [42, "ana", None, {"foo": []}, {"players": "ana"}])
    def test_not_a_player_list(self, payload):
        with pytest.raises(PayloadError):
            aggregate(payload)



class TestScoreFor:
    """Tests for score_for()."""

    def test_finds_player_score(self):
        entries = parse_player_list([{"username": "ana", "score": 12}, "bo"])
        assert score_for(entries, "ana") == 12

    def test_missing_player(self):
        entries = parse_player_list(["bo"])
        assert score_for(entries, "ana") is None
