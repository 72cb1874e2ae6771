"""
Pure state transitions for the client-side match state.

Every change to ``ClientState`` goes through :func:`reduce`. Server envelopes
and local happenings (countdown ticks, optimistic rematch, leaving, transport
status) are both expressed as events so there is a single writer.
"""

from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple, Union

from .constants import (
    DISCONNECT_COUNTDOWN_SECONDS, PHASE_IN_ROUND, PHASE_LOBBY, STATUS_GAME_OVER,
    STATUS_WAITING, turn_status, winner_label
)
from .errors import ACTION_NOT_ALLOWED, INVARIANT_VIOLATION
from .models import Card, ClientState, PlayerId, RoomSummary
from .ws.events import (
    EventType, GameOverEvent, HitResultEvent, InboundEvent, RoomListEvent,
    RoundEndEvent, RoundStartEvent, TurnChangeEvent, WelcomeEvent
)


# Local events
@dataclass(frozen=True)
class ConnectionOpened:
    status_text: str


@dataclass(frozen=True)
class ConnectionStatus:
    """Transport trouble or closure, surfaced as status text only."""
    status_text: str


@dataclass(frozen=True)
class CountdownTick:
    remaining: int


@dataclass(frozen=True)
class RematchRequested:
    pass


@dataclass(frozen=True)
class ReturnToLobby:
    """Full reset after leaving the room or after the countdown expired."""
    status_text: str


LocalEvent = Union[ConnectionOpened, ConnectionStatus, CountdownTick, RematchRequested, ReturnToLobby]


class TransitionResult:
    """Result of applying one event."""

    def __init__(
        self,
        success: bool,
        state: ClientState,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None
    ):
        self.success = success
        self.state = state
        self.error_code = error_code
        self.error_message = error_message

    @classmethod
    def ok(cls, state: ClientState) -> 'TransitionResult':
        return cls(success=True, state=state)

    @classmethod
    def error(cls, state: ClientState, error_code: str, error_message: str) -> 'TransitionResult':
        """Rejected transition; ``state`` is the unchanged input state."""
        return cls(success=False, state=state, error_code=error_code, error_message=error_message)


def _hand(ranks) -> Tuple[Card, ...]:
    return tuple(Card(rank) for rank in ranks)


def _identify(state: ClientState, player_id: PlayerId) -> Tuple[Optional[str], Optional[PlayerId]]:
    """
    Work out which side a player id refers to.

    Returns:
        ``('you' | 'opponent', opponent_id)`` or ``(None, None)`` when the id
        matches neither known identity. An unknown opponent is learned from
        the first foreign id seen.
    """
    if state.player_id is not None and player_id == state.player_id:
        return 'you', state.opponent_id
    if state.opponent_id is None or player_id == state.opponent_id:
        return 'opponent', player_id
    return None, None


def apply_welcome(state: ClientState, event: WelcomeEvent, **_) -> TransitionResult:
    if state.player_id is None:
        return TransitionResult.ok(replace(state, player_id=event.player_id))
    if state.player_id == event.player_id:
        return TransitionResult.ok(state)
    return TransitionResult.error(
        state, INVARIANT_VIOLATION,
        f"Identity already assigned ({state.player_id}), ignoring {event.player_id}"
    )


def apply_room_list(state: ClientState, event: RoomListEvent, **_) -> TransitionResult:
    if state.phase != PHASE_LOBBY:
        return TransitionResult.error(state, ACTION_NOT_ALLOWED, "Room listing outside the lobby")
    rooms = tuple(
        RoomSummary(
            room_id=room.room_id,
            player_names=tuple(room.players),
            state=room.state,
            mode=room.mode,
        )
        for room in event.rooms
    )
    return TransitionResult.ok(replace(state, rooms=rooms))


def apply_round_start(state: ClientState, event: RoundStartEvent, **_) -> TransitionResult:
    """Lobby/RoundOver -> InRound. Hands and values are replaced, never appended."""
    turn_id = event.current_turn_player_id
    opponent_id = state.opponent_id if state.match.in_game else None
    if state.player_id is not None and turn_id != state.player_id:
        opponent_id = turn_id

    match = state.match
    if event.health is not None:
        match = replace(match, your_health=event.health.you, opponent_health=event.health.opponent)
    match = replace(
        match,
        your_hand=_hand(event.your_hand),
        opponent_hand=_hand(event.opponent_hand),
        your_value=event.your_value,
        opponent_value=event.opponent_value,
        round=event.round,
        damage=event.damage,
        current_turn_player_id=turn_id,
        in_game=True,
        round_over=False,
        match_over=False,
        winner_label=None,
        disconnect_countdown=None,
        status_text=turn_status(turn_id, state.player_id),
    )
    return TransitionResult.ok(replace(state, opponent_id=opponent_id, match=match))


def apply_hit_result(state: ClientState, event: HitResultEvent, **_) -> TransitionResult:
    """
    Append one card to exactly one side and overwrite that side's total.

    A ``newValue`` of 0 means "no update" on this protocol, so the previous
    total is kept. No legitimate total is 0 once a card has been dealt.
    """
    if state.phase != PHASE_IN_ROUND:
        return TransitionResult.error(state, ACTION_NOT_ALLOWED, "hit_result outside a round")
    if state.player_id is None:
        return TransitionResult.error(state, INVARIANT_VIOLATION, "hit_result before identity assignment")

    side, opponent_id = _identify(state, event.player_id)
    if side is None:
        return TransitionResult.error(
            state, INVARIANT_VIOLATION, f"hit_result for unknown player {event.player_id}"
        )

    match = state.match
    card = Card(event.card)
    if side == 'you':
        match = replace(
            match,
            your_hand=match.your_hand + (card,),
            your_value=event.new_value or match.your_value,
        )
    else:
        match = replace(
            match,
            opponent_hand=match.opponent_hand + (card,),
            opponent_value=event.new_value or match.opponent_value,
        )
    return TransitionResult.ok(replace(state, opponent_id=opponent_id, match=match))


def apply_turn_change(state: ClientState, event: TurnChangeEvent, **_) -> TransitionResult:
    if state.phase != PHASE_IN_ROUND:
        return TransitionResult.error(state, ACTION_NOT_ALLOWED, "turn_change outside a round")

    turn_id = event.current_turn_player_id
    side, opponent_id = _identify(state, turn_id)
    if side is None:
        return TransitionResult.error(state, INVARIANT_VIOLATION, f"turn_change to unknown player {turn_id}")

    match = replace(
        state.match,
        current_turn_player_id=turn_id,
        status_text=turn_status(turn_id, state.player_id),
    )
    return TransitionResult.ok(replace(state, opponent_id=opponent_id, match=match))


def apply_round_end(
    state: ClientState,
    event: RoundEndEvent,
    countdown_seconds: int = DISCONNECT_COUNTDOWN_SECONDS,
    **_
) -> TransitionResult:
    """InRound -> RoundOver. Health is authoritative and overwrites both sides."""
    if state.phase != PHASE_IN_ROUND:
        return TransitionResult.error(state, ACTION_NOT_ALLOWED, "round_end outside a round")
    match = replace(
        state.match,
        your_health=event.health.you,
        opponent_health=event.health.opponent,
        round_over=True,
        winner_label=winner_label(event.winner_id, state.player_id),
        disconnect_countdown=countdown_seconds,
    )
    return TransitionResult.ok(replace(state, match=match))


def apply_game_over(state: ClientState, event: GameOverEvent, **_) -> TransitionResult:
    if not state.match.in_game:
        return TransitionResult.error(state, ACTION_NOT_ALLOWED, "game_over while not in a game")
    match = replace(state.match, match_over=True, status_text=STATUS_GAME_OVER)
    return TransitionResult.ok(replace(state, match=match))


def apply_connection_opened(state: ClientState, event: ConnectionOpened, **_) -> TransitionResult:
    # A new connection starts from scratch; identity comes with the next welcome.
    fresh = ClientState()
    return TransitionResult.ok(replace(fresh, match=replace(fresh.match, status_text=event.status_text)))


def apply_connection_status(state: ClientState, event: ConnectionStatus, **_) -> TransitionResult:
    return TransitionResult.ok(replace(state, match=replace(state.match, status_text=event.status_text)))


def apply_countdown_tick(state: ClientState, event: CountdownTick, **_) -> TransitionResult:
    if not state.match.round_over:
        return TransitionResult.error(state, ACTION_NOT_ALLOWED, "Countdown tick while no round is over")
    match = replace(state.match, disconnect_countdown=max(event.remaining, 0))
    return TransitionResult.ok(replace(state, match=match))


def apply_rematch(state: ClientState, event: RematchRequested, **_) -> TransitionResult:
    """Optimistic reset ahead of the server's next round start."""
    if not state.match.in_game:
        return TransitionResult.error(state, ACTION_NOT_ALLOWED, "Rematch while not in a game")
    match = replace(
        state.match,
        your_hand=(),
        opponent_hand=(),
        your_value=0,
        opponent_value=0,
        round_over=False,
        match_over=False,
        winner_label=None,
        disconnect_countdown=None,
        status_text=STATUS_WAITING,
    )
    return TransitionResult.ok(replace(state, match=match))


def apply_return_to_lobby(state: ClientState, event: ReturnToLobby, **_) -> TransitionResult:
    return TransitionResult.ok(
        replace(state, opponent_id=None, match=state.match.cleared(event.status_text))
    )


EVENT_HANDLERS: Dict[EventType, Callable[..., TransitionResult]] = {
    EventType.WELCOME: apply_welcome,
    EventType.ROOM_LIST: apply_room_list,
    EventType.GAME_START: apply_round_start,
    EventType.ROUND_START: apply_round_start,
    EventType.HIT_RESULT: apply_hit_result,
    EventType.TURN_CHANGE: apply_turn_change,
    EventType.ROUND_END: apply_round_end,
    EventType.GAME_OVER: apply_game_over,
}

LOCAL_HANDLERS: Dict[type, Callable[..., TransitionResult]] = {
    ConnectionOpened: apply_connection_opened,
    ConnectionStatus: apply_connection_status,
    CountdownTick: apply_countdown_tick,
    RematchRequested: apply_rematch,
    ReturnToLobby: apply_return_to_lobby,
}


def reduce(
    state: ClientState,
    event: Union[InboundEvent, LocalEvent],
    countdown_seconds: int = DISCONNECT_COUNTDOWN_SECONDS
) -> TransitionResult:
    """
    Apply one event to a state.

    Args:
        state: Current client state
        event: Parsed server envelope or local event
        countdown_seconds: Starting value of the disconnect countdown

    Returns:
        TransitionResult; on rejection ``result.state is state``
    """
    event_type = getattr(event, "type", None)
    if isinstance(event_type, EventType):
        handler = EVENT_HANDLERS.get(event_type)
    else:
        handler = LOCAL_HANDLERS.get(type(event))
    if handler is None:
        return TransitionResult.error(state, ACTION_NOT_ALLOWED, f"No transition for {event!r}")
    return handler(state, event, countdown_seconds=countdown_seconds)
