"""
Tests for envelope decoding and command encoding.
"""

import orjson
import pytest

from twentyone_client.errors import MalformedEnvelopeError, UnknownEventTypeError
from twentyone_client.ws.events import (
    CreateRoomCommand, EventType, GetRoomsCommand, HitResultEvent, JoinRoomCommand,
    RoundEndEvent, RoundStartEvent, decode_frame, parse_inbound_event
)


def test_parse_round_start_aliases():
    """Test camelCase fields and the opponentCardHand alias."""
    parsed = parse_inbound_event({
        "type": "round_start",
        "yourHand": ["1", 7],
        "opponentCardHand": ["2"],
        "yourValue": 8,
        "currentTurnPlayerId": 5,
    })
    assert isinstance(parsed, RoundStartEvent)
    assert parsed.your_hand == ["1", "7"]
    assert parsed.opponent_hand == ["2"]
    assert parsed.health is None
    assert parsed.round == 1


def test_parse_game_start_keeps_type():
    """Test game_start decodes to the round start model."""
    parsed = parse_inbound_event({
        "type": "game_start", "yourHand": [], "yourValue": 0, "currentTurnPlayerId": 1
    })
    assert isinstance(parsed, RoundStartEvent)
    assert parsed.type == EventType.GAME_START


def test_round_start_null_own_hand_rejected():
    """Test an explicit null yourHand is malformed, a null opponent hand is empty."""
    base = {"type": "round_start", "yourValue": 8, "currentTurnPlayerId": 5}
    with pytest.raises(MalformedEnvelopeError):
        parse_inbound_event({**base, "yourHand": None})
    parsed = parse_inbound_event({**base, "yourHand": ["1", "7"], "opponentHand": None})
    assert parsed.opponent_hand == []


def test_room_list_numeric_player_names():
    """Test numeric player names are read as text instead of dropping the listing."""
    parsed = parse_inbound_event({
        "type": "room_list",
        "rooms": [{"roomId": 3, "players": ["Ada", 42], "state": "waiting", "mode": "pvp"}],
    })
    assert parsed.rooms[0].players == ["Ada", "42"]


def test_parse_hit_result_numeric_card():
    """Test a numeric card is read as its rank string."""
    parsed = parse_inbound_event({"type": "hit_result", "playerId": 5, "card": 9, "newValue": 17})
    assert isinstance(parsed, HitResultEvent)
    assert parsed.card == "9"


def test_round_end_requires_health():
    """Test health is mandatory on round_end."""
    with pytest.raises(MalformedEnvelopeError):
        parse_inbound_event({"type": "round_end", "winnerId": 5})


def test_round_end_default_winner():
    """Test a missing winnerId means a draw."""
    parsed = parse_inbound_event({"type": "round_end", "health": {"you": 3, "opponent": 4}})
    assert isinstance(parsed, RoundEndEvent)
    assert parsed.winner_id == -1


def test_missing_required_field():
    """Test a missing required field is a malformed envelope."""
    with pytest.raises(MalformedEnvelopeError):
        parse_inbound_event({"type": "hit_result", "playerId": 5, "card": "9"})


def test_negative_value_rejected():
    """Test totals can't be negative."""
    with pytest.raises(MalformedEnvelopeError):
        parse_inbound_event({"type": "hit_result", "playerId": 5, "card": "9", "newValue": -1})


def test_missing_type():
    """Test envelopes without a type are malformed."""
    with pytest.raises(MalformedEnvelopeError):
        parse_inbound_event({"playerId": 5})


def test_unknown_type():
    """Test unknown types are reported separately from malformed ones."""
    with pytest.raises(UnknownEventTypeError) as excinfo:
        parse_inbound_event({"type": "chat", "text": "hi"})
    assert excinfo.value.event_type == "chat"


def test_decode_frame_rejects_bad_json():
    """Test parse failures and non-object frames."""
    with pytest.raises(MalformedEnvelopeError):
        decode_frame("{not json")
    with pytest.raises(MalformedEnvelopeError):
        decode_frame("[1, 2]")


def test_command_frames():
    """Test outbound envelopes use the wire field names."""
    assert orjson.loads(GetRoomsCommand().to_frame()) == {"type": "get_rooms"}
    assert orjson.loads(CreateRoomCommand(name="Player 5").to_frame()) == {
        "type": "create_room", "name": "Player 5"
    }
    assert orjson.loads(JoinRoomCommand(room_id=3, name="Player 5").to_frame()) == {
        "type": "join_room", "roomId": 3, "name": "Player 5"
    }
