"""
Shared fixtures for the client tests.
"""

import pytest

from twentyone_client.commands import CommandEncoder
from twentyone_client.models import ClientState
from twentyone_client.tests.helpers import ManualClock, RecordingPresenter, apply_all, event


@pytest.fixture
def sent():
    return []


@pytest.fixture
def commands(sent):
    return CommandEncoder(sent.append)


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def welcomed():
    """Client state after welcome{playerId: 5}."""
    return apply_all(ClientState(), event("welcome", playerId=5))


@pytest.fixture
def in_round(welcomed):
    """Client state in a round where it is our turn."""
    return apply_all(
        welcomed,
        event(
            "round_start",
            yourHand=["1", "7"],
            opponentCardHand=["2"],
            yourValue=8,
            currentTurnPlayerId=5,
        ),
    )
