"""
WebSocket envelope models and validation.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator, model_validator

from ..constants import DEFAULT_DAMAGE, DEFAULT_ROUND, DRAW_WINNER_ID
from ..errors import MalformedEnvelopeError, UnknownEventTypeError


class EventType(str, Enum):
    """Inbound (server to client) event types."""
    WELCOME = "welcome"
    ROOM_LIST = "room_list"
    GAME_START = "game_start"
    ROUND_START = "round_start"
    HIT_RESULT = "hit_result"
    TURN_CHANGE = "turn_change"
    ROUND_END = "round_end"
    GAME_OVER = "game_over"


class CommandType(str, Enum):
    """Outbound (client to server) command types."""
    GET_ROOMS = "get_rooms"
    CREATE_ROOM = "create_room"
    JOIN_ROOM = "join_room"
    LEAVE_ROOM = "leave_room"
    HIT = "hit"
    STAND = "stand"
    REMATCH = "rematch"


def _to_rank(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Invalid card rank: {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


class WireModel(BaseModel):
    """Base for all envelopes: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


# Inbound event models
class BaseEvent(WireModel):
    """Base event model."""
    type: EventType


class WelcomeEvent(BaseEvent):
    """Identity assignment, sent once per connection."""
    type: EventType = EventType.WELCOME
    player_id: int = Field(..., alias="playerId")


class RoomInfo(WireModel):
    """One entry of a room listing."""
    room_id: int = Field(..., alias="roomId")
    players: List[str] = Field(default_factory=list)
    state: str
    mode: str

    @field_validator("players", mode="before")
    @classmethod
    def coerce_names(cls, v):
        if v is None:
            return []
        if not isinstance(v, (list, tuple)):
            raise ValueError("Players must be a list of names")
        return [str(name) if isinstance(name, (int, float)) else name for name in v]


class RoomListEvent(BaseEvent):
    """Full room listing."""
    type: EventType = EventType.ROOM_LIST
    rooms: List[RoomInfo] = Field(default_factory=list)


class Health(WireModel):
    """Health of both sides, always reported together."""
    you: int
    opponent: int


class RoundStartEvent(BaseEvent):
    """Start of a match or of a following round.

    The opponent's hand arrives as either ``opponentHand`` or
    ``opponentCardHand``; the former wins when both are present.
    """
    type: EventType = EventType.ROUND_START
    your_hand: List[str] = Field(..., alias="yourHand")
    opponent_hand: List[str] = Field(default_factory=list, alias="opponentHand")
    your_value: int = Field(..., ge=0, alias="yourValue")
    opponent_value: int = Field(default=0, ge=0, alias="opponentValue")
    health: Optional[Health] = None
    round: int = Field(default=DEFAULT_ROUND, ge=1)
    damage: int = Field(default=DEFAULT_DAMAGE, ge=0)
    current_turn_player_id: int = Field(..., alias="currentTurnPlayerId")

    @model_validator(mode="before")
    @classmethod
    def merge_opponent_hand_alias(cls, data: Any) -> Any:
        if isinstance(data, dict) and "opponentHand" not in data and "opponentCardHand" in data:
            data = dict(data)
            data["opponentHand"] = data.pop("opponentCardHand")
        return data

    @field_validator("your_hand", "opponent_hand", mode="before")
    @classmethod
    def coerce_ranks(cls, v, info: ValidationInfo):
        if v is None and info.field_name == "opponent_hand":
            return []
        if not isinstance(v, (list, tuple)):
            raise ValueError("Hand must be a list of ranks")
        return [_to_rank(item) for item in v]


class HitResultEvent(BaseEvent):
    """A card drawn by one player and that player's new total."""
    type: EventType = EventType.HIT_RESULT
    player_id: int = Field(..., alias="playerId")
    card: str
    new_value: int = Field(..., ge=0, alias="newValue")

    @field_validator("card", mode="before")
    @classmethod
    def coerce_card(cls, v):
        return _to_rank(v)


class TurnChangeEvent(BaseEvent):
    """Turn handed to a player."""
    type: EventType = EventType.TURN_CHANGE
    current_turn_player_id: int = Field(..., alias="currentTurnPlayerId")


class RoundEndEvent(BaseEvent):
    """Round settled: authoritative health and the winner (-1 for a draw)."""
    type: EventType = EventType.ROUND_END
    health: Health
    winner_id: int = Field(default=DRAW_WINNER_ID, alias="winnerId")


class GameOverEvent(BaseEvent):
    """Match finished."""
    type: EventType = EventType.GAME_OVER


# Union type for all inbound events
InboundEvent = Union[
    WelcomeEvent,
    RoomListEvent,
    RoundStartEvent,
    HitResultEvent,
    TurnChangeEvent,
    RoundEndEvent,
    GameOverEvent,
]


# Outbound command models
class BaseCommand(WireModel):
    """Base command model."""
    type: CommandType

    def to_frame(self) -> str:
        """Encode as a JSON text frame."""
        return orjson.dumps(self.model_dump(by_alias=True, mode="json")).decode()


class GetRoomsCommand(BaseCommand):
    type: CommandType = CommandType.GET_ROOMS


class CreateRoomCommand(BaseCommand):
    type: CommandType = CommandType.CREATE_ROOM
    name: str = Field(..., min_length=1, max_length=30)


class JoinRoomCommand(BaseCommand):
    type: CommandType = CommandType.JOIN_ROOM
    room_id: int = Field(..., alias="roomId")
    name: str = Field(..., min_length=1, max_length=30)


class LeaveRoomCommand(BaseCommand):
    type: CommandType = CommandType.LEAVE_ROOM


class HitCommand(BaseCommand):
    type: CommandType = CommandType.HIT


class StandCommand(BaseCommand):
    type: CommandType = CommandType.STAND


class RematchCommand(BaseCommand):
    type: CommandType = CommandType.REMATCH


# Union type for all outbound commands
OutboundCommand = Union[
    GetRoomsCommand,
    CreateRoomCommand,
    JoinRoomCommand,
    LeaveRoomCommand,
    HitCommand,
    StandCommand,
    RematchCommand,
]


EVENT_MAP = {
    EventType.WELCOME: WelcomeEvent,
    EventType.ROOM_LIST: RoomListEvent,
    EventType.GAME_START: RoundStartEvent,
    EventType.ROUND_START: RoundStartEvent,
    EventType.HIT_RESULT: HitResultEvent,
    EventType.TURN_CHANGE: TurnChangeEvent,
    EventType.ROUND_END: RoundEndEvent,
    EventType.GAME_OVER: GameOverEvent,
}


def decode_frame(text: Union[str, bytes]) -> Dict[str, Any]:
    """
    Decode a raw text frame into an envelope dictionary.

    Raises:
        MalformedEnvelopeError: If the frame is not a JSON object
    """
    try:
        data = orjson.loads(text)
    except orjson.JSONDecodeError as e:
        raise MalformedEnvelopeError(f"Invalid JSON: {e}")
    if not isinstance(data, dict):
        raise MalformedEnvelopeError("Envelope must be a JSON object")
    return data


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw envelope data into the appropriate event model.

    Args:
        data: Decoded envelope from the WebSocket

    Returns:
        Parsed event model

    Raises:
        MalformedEnvelopeError: If the type is missing or required fields are invalid
        UnknownEventTypeError: If the type is not one this client consumes
    """
    event_type = data.get("type")

    if not isinstance(event_type, str) or not event_type:
        raise MalformedEnvelopeError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise UnknownEventTypeError(event_type)

    event_class = EVENT_MAP[event_type]

    try:
        return event_class(**{**data, "type": event_type})
    except ValidationError as e:
        raise MalformedEnvelopeError(f"Invalid {event_type.value} data: {e.errors(include_url=False)}")
