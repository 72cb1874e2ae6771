"""Client-side state synchronizer for the Twenty-One card duel"""

from .client import TwentyOneClient
from .config import ClientConfig
from .models import Card, ClientState, MatchState, RoomSummary
from .reducer import TransitionResult, reduce
from .router import EventRouter

__all__ = [
    "Card",
    "ClientConfig",
    "ClientState",
    "EventRouter",
    "MatchState",
    "RoomSummary",
    "TransitionResult",
    "TwentyOneClient",
    "reduce",
]
