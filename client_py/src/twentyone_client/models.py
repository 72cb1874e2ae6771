"""Client-side game models and data structures"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from .constants import (
    DEFAULT_DAMAGE, DEFAULT_HEALTH, DEFAULT_ROUND, PHASE_IN_ROUND, PHASE_LOBBY,
    PHASE_ROUND_OVER, STATUS_CONNECTING, rank_value
)

PlayerId = int


@dataclass(frozen=True)
class Card:
    rank: str  # numeric string, 1-11 for this variant

    @property
    def value(self) -> int:
        return rank_value(self.rank)


Hand = Tuple[Card, ...]


@dataclass(frozen=True)
class RoomSummary:
    room_id: int
    player_names: Tuple[str, ...] = ()
    state: str = ''  # waiting|playing
    mode: str = ''


@dataclass(frozen=True)
class MatchState:
    your_hand: Hand = ()
    opponent_hand: Hand = ()
    your_value: int = 0
    opponent_value: int = 0
    your_health: int = DEFAULT_HEALTH
    opponent_health: int = DEFAULT_HEALTH
    round: int = DEFAULT_ROUND
    damage: int = DEFAULT_DAMAGE
    current_turn_player_id: Optional[PlayerId] = None
    in_game: bool = False
    round_over: bool = False
    match_over: bool = False
    winner_label: Optional[str] = None
    disconnect_countdown: Optional[int] = None  # only set while round_over
    status_text: str = STATUS_CONNECTING

    @property
    def phase(self) -> str:
        if not self.in_game:
            return PHASE_LOBBY
        if self.round_over:
            return PHASE_ROUND_OVER
        return PHASE_IN_ROUND

    def cleared(self, status_text: str) -> 'MatchState':
        """Back to the lobby: empty hands, zero values, no winner, no countdown.

        Health, round and damage keep their last values until the next round
        start overwrites them.
        """
        return replace(
            self,
            your_hand=(),
            opponent_hand=(),
            your_value=0,
            opponent_value=0,
            current_turn_player_id=None,
            in_game=False,
            round_over=False,
            match_over=False,
            winner_label=None,
            disconnect_countdown=None,
            status_text=status_text,
        )


@dataclass(frozen=True)
class ClientState:
    """Snapshot handed to the presenter after every transition."""
    player_id: Optional[PlayerId] = None
    opponent_id: Optional[PlayerId] = None  # learned from turn/hit events
    match: MatchState = field(default_factory=MatchState)
    rooms: Tuple[RoomSummary, ...] = ()

    @property
    def phase(self) -> str:
        return self.match.phase

    @property
    def is_your_turn(self) -> bool:
        return (
            self.player_id is not None
            and self.match.current_turn_player_id == self.player_id
        )

    def is_known_player(self, player_id: PlayerId) -> bool:
        return player_id in (self.player_id, self.opponent_id)
