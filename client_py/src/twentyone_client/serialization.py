"""
Snapshot serialization into render-ready view data.
"""

from typing import Any, Dict, List, Optional, Sequence

from .constants import (
    PHASE_LOBBY, ROOM_STATE_WAITING, hidden_value, revealed_sum
)
from .models import Card, ClientState, MatchState, RoomSummary

HIDDEN_MARKER = "??"


def waiting_rooms(rooms: Sequence[RoomSummary]) -> List[RoomSummary]:
    """Rooms a player can still join."""
    return [room for room in rooms if room.state == ROOM_STATE_WAITING]


def can_rematch(match: MatchState) -> bool:
    """A rematch is offered once a round is over and one side is out of health."""
    return match.round_over and (match.your_health <= 0 or match.opponent_health <= 0)


def serialize_room(room: RoomSummary) -> Dict[str, Any]:
    return {
        "room_id": room.room_id,
        "label": f"Room #{room.room_id}",
        "players": list(room.player_names),
        "state": room.state,
        "mode": room.mode,
    }


def serialize_hand(hand: Sequence[Card], reveal_all: bool, show_hidden_rank: bool) -> List[Optional[str]]:
    """
    Ranks of a hand as they should be drawn.

    Args:
        hand: Cards in deal order
        reveal_all: Whether the first card is face up (after round end)
        show_hidden_rank: Whether the face-down rank is known to the viewer

    Returns:
        List of ranks, with ``None`` for a face-down card the viewer can't see
    """
    ranks: List[Optional[str]] = [card.rank for card in hand]
    if ranks and not reveal_all and not show_hidden_rank:
        ranks[0] = None
    return ranks


def render_view(state: ClientState) -> Dict[str, Any]:
    """
    Build the dictionary a presenter needs to draw one frame.

    Args:
        state: Snapshot published by the router

    Returns:
        View data; ``screen`` selects lobby or game
    """
    match = state.match

    if match.phase == PHASE_LOBBY:
        return {
            "screen": "lobby",
            "status": match.status_text,
            "player_id": state.player_id,
            "rooms": [serialize_room(room) for room in waiting_rooms(state.rooms)],
        }

    reveal = match.round_over
    your_ranks = [card.rank for card in match.your_hand]
    opponent_ranks = [card.rank for card in match.opponent_hand]
    opponent_revealed = revealed_sum(opponent_ranks)
    opponent_hidden = hidden_value(opponent_ranks)

    view = {
        "screen": "game",
        "status": match.status_text,
        "player_id": state.player_id,
        "health_line": (
            f"Health: You {match.your_health} | Opponent {match.opponent_health} | "
            f"Round {match.round} | Damage {match.damage}"
        ),
        "your_health": match.your_health,
        "opponent_health": match.opponent_health,
        "round": match.round,
        "damage": match.damage,
        "your_hand": serialize_hand(match.your_hand, reveal_all=reveal, show_hidden_rank=True),
        "your_value": match.your_value,
        "your_revealed": revealed_sum(your_ranks),
        "your_hidden": hidden_value(your_ranks),
        "opponent_hand": serialize_hand(match.opponent_hand, reveal_all=reveal, show_hidden_rank=False),
        "opponent_card_count": len(match.opponent_hand),
        "opponent_value": match.opponent_value if reveal else HIDDEN_MARKER,
        "opponent_line": (
            f"Opponent: {opponent_revealed + opponent_hidden}" if reveal
            else f"Opponent: {HIDDEN_MARKER} + {opponent_revealed}"
        ),
        "is_your_turn": state.is_your_turn,
        "can_hit": state.is_your_turn and not match.round_over,
        "round_over": match.round_over,
        "match_over": match.match_over,
        "winner": match.winner_label,
        "can_rematch": can_rematch(match),
        "countdown": match.disconnect_countdown,
        "countdown_text": (
            f"Auto-disconnect in {match.disconnect_countdown} seconds"
            if match.disconnect_countdown is not None else None
        ),
    }

    if reveal:
        view["opponent_revealed"] = opponent_revealed
        view["opponent_hidden"] = opponent_hidden

    return view
