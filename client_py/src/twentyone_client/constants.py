"""Game constants and card utilities"""

from typing import Iterable

# Phases
PHASE_LOBBY = 'lobby'
PHASE_IN_ROUND = 'in_round'
PHASE_ROUND_OVER = 'round_over'

# Round outcome labels
LABEL_DRAW = 'Draw'
LABEL_WIN = 'You Win'
LABEL_LOSE = 'You Lose'
DRAW_WINNER_ID = -1

# Status text
STATUS_CONNECTING = 'Connecting…'
STATUS_CONNECTED = 'Connected'
STATUS_YOUR_TURN = 'Your turn'
STATUS_OPPONENT_TURN = "Opponent's turn"
STATUS_GAME_OVER = 'Game over – rematch?'
STATUS_DISCONNECTED = 'Disconnected'
STATUS_LEFT_ROOM = 'Left room'
STATUS_WAITING = 'Waiting for next round…'

ROOM_STATE_WAITING = 'waiting'

DEFAULT_HEALTH = 7
DEFAULT_ROUND = 1
DEFAULT_DAMAGE = 1
DISCONNECT_COUNTDOWN_SECONDS = 10

DEFAULT_PLAYER_NAME = 'Player'

DEFAULT_SERVER_URL = 'wss://superawesomeblackjackgame-production.up.railway.app'


def rank_value(rank: str) -> int:
    """Integer value of a numeric rank, 0 for anything non-numeric."""
    try:
        return int(rank)
    except (TypeError, ValueError):
        return 0


def hidden_value(ranks: Iterable[str]) -> int:
    """Value of the first (face-down) card of a hand."""
    for rank in ranks:
        return rank_value(rank)
    return 0


def revealed_sum(ranks: Iterable[str]) -> int:
    """Sum of every card except the face-down first one."""
    return sum(rank_value(rank) for rank in list(ranks)[1:])


def turn_status(turn_player_id, own_player_id) -> str:
    if own_player_id is not None and turn_player_id == own_player_id:
        return STATUS_YOUR_TURN
    return STATUS_OPPONENT_TURN


def winner_label(winner_id: int, own_player_id) -> str:
    if winner_id == DRAW_WINNER_ID:
        return LABEL_DRAW
    if own_player_id is not None and winner_id == own_player_id:
        return LABEL_WIN
    return LABEL_LOSE
