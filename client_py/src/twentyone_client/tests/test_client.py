"""
Tests for the client facade with an in-memory transport.
"""

import asyncio

import orjson

from twentyone_client.client import TwentyOneClient
from twentyone_client.config import create_config
from twentyone_client.constants import (
    PHASE_IN_ROUND, PHASE_LOBBY, STATUS_CONNECTED, STATUS_DISCONNECTED, STATUS_LEFT_ROOM
)

from twentyone_client.tests.helpers import ManualClock, frame, sent_types


class FakeTransport:
    def __init__(self, on_open, on_message, on_error, on_closed, **options):
        self.on_open = on_open
        self.on_message = on_message
        self.on_error = on_error
        self.on_closed = on_closed
        self.options = options
        self.sent = []
        self.url = None
        self.closed_with = None
        self.connected = True

    def send(self, text):
        if not self.connected:
            self.on_error("Not connected")
            return
        self.sent.append(text)

    def drop(self, code=1006, reason=""):
        self.connected = False
        self.on_closed(code, reason)

    async def connect(self, url):
        self.url = url
        self.on_open()

    async def close(self, code=1000, reason=""):
        self.closed_with = (code, reason)


def make_client(clock=None, **overrides):
    return TwentyOneClient(
        create_config(**overrides),
        transport_factory=FakeTransport,
        sleep=clock.sleep if clock else asyncio.sleep,
    )


def start_round(client):
    client.transport.on_message(frame("welcome", playerId=5))
    client.transport.on_message(frame(
        "round_start", yourHand=["1", "7"], opponentCardHand=["2"], yourValue=8, currentTurnPlayerId=5
    ))


def test_requests_rooms_on_open():
    """Test get_rooms goes out as soon as the connection opens."""
    client = make_client(server_url="ws://localhost:9999")
    asyncio.run(client.run())
    assert client.transport.url == "ws://localhost:9999"
    assert sent_types(client.transport.sent) == ["get_rooms"]
    assert client.state.match.status_text == STATUS_CONNECTED


def test_transport_options_from_config():
    """Test keepalive settings are passed to the transport."""
    client = make_client(ping_interval=5, ping_timeout=2)
    assert client.transport.options["ping_interval"] == 5
    assert client.transport.options["ping_timeout"] == 2


def test_create_and_join_use_default_name():
    """Test room commands default to 'Player <id>'."""
    client = make_client()
    client.transport.on_message(frame("welcome", playerId=5))
    client.create_room()
    client.join_room(12)
    first, second = (orjson.loads(f) for f in client.transport.sent)
    assert first == {"type": "create_room", "name": "Player 5"}
    assert second == {"type": "join_room", "roomId": 12, "name": "Player 5"}


def test_default_name_before_welcome():
    """Test room commands before the identity arrives use a plain name."""
    client = make_client()
    client.create_room()
    assert orjson.loads(client.transport.sent[0]) == {"type": "create_room", "name": "Player"}


def test_configured_player_name():
    """Test a configured player name is used for room commands."""
    client = make_client(player_name="Ada")
    client.create_room()
    assert orjson.loads(client.transport.sent[0])["name"] == "Ada"


def test_hit_and_stand_are_fire_and_forget():
    """Test hit/stand only send, the state waits for the server."""
    client = make_client()
    start_round(client)
    before = client.state
    client.hit()
    client.stand()
    assert sent_types(client.transport.sent) == ["hit", "stand"]
    assert client.state is before


def test_rematch_resets_optimistically():
    """Test rematch sends and clears the finished round before the server answers."""
    async def scenario():
        client = make_client()
        start_round(client)
        client.transport.on_message(frame("round_end", health={"you": 0, "opponent": 4}, winnerId=8))
        assert client.router.timer.active
        client.rematch()
        return client

    client = asyncio.run(scenario())
    assert sent_types(client.transport.sent) == ["rematch"]
    match = client.state.match
    assert client.state.phase == PHASE_IN_ROUND
    assert match.your_hand == () and match.opponent_hand == ()
    assert match.disconnect_countdown is None
    assert not client.router.timer.active


def test_leave_room_resets_to_lobby():
    """Test leaving sends leave_room, resets and refreshes the lobby."""
    client = make_client()
    start_round(client)
    client.leave_room()
    assert sent_types(client.transport.sent) == ["leave_room", "get_rooms"]
    assert client.state.phase == PHASE_LOBBY
    assert client.state.match.status_text == STATUS_LEFT_ROOM


def test_transport_failures_surface_as_status():
    """Test errors and closure only change the status text."""
    client = make_client()
    start_round(client)
    hand = client.state.match.your_hand
    client.transport.on_error("boom")
    assert client.state.match.status_text == "Connection error: boom"
    client.transport.on_closed(1006, "")
    assert client.state.match.status_text == "Disconnected"
    assert client.state.match.your_hand == hand


def test_close_cancels_countdown():
    """Test closing the client stops a pending auto-leave."""
    async def scenario():
        client = make_client()
        start_round(client)
        client.transport.on_message(frame("round_end", health={"you": 5, "opponent": 4}, winnerId=5))
        await client.close()
        return client

    client = asyncio.run(scenario())
    assert not client.router.timer.active
    assert client.transport.closed_with == (1000, "Client closing")


def test_countdown_expiry_after_connection_lost():
    """Test the auto-leave still ends on 'Disconnected' when the socket is gone."""
    async def scenario():
        clock = ManualClock()
        client = make_client(clock)
        start_round(client)
        client.transport.on_message(frame("round_end", health={"you": 6, "opponent": 7}, winnerId=8))
        client.transport.drop()
        assert client.state.match.status_text == "Disconnected"

        await clock.advance(10)
        return client

    client = asyncio.run(scenario())
    assert client.transport.sent == []
    assert client.state.phase == PHASE_LOBBY
    assert client.state.match.status_text == STATUS_DISCONNECTED
    assert client.state.match.disconnect_countdown is None


def test_leave_room_after_connection_lost():
    """Test an explicit leave ends on 'Left room' even when the sends fail."""
    client = make_client()
    start_round(client)
    client.transport.drop()
    client.leave_room()
    assert client.transport.sent == []
    assert client.state.phase == PHASE_LOBBY
    assert client.state.match.status_text == STATUS_LEFT_ROOM
