"""Command encoder: user intents to outbound envelopes"""

import logging
from typing import Callable

from .ws.events import (
    BaseCommand, CreateRoomCommand, GetRoomsCommand, HitCommand, JoinRoomCommand,
    LeaveRoomCommand, RematchCommand, StandCommand
)

logger = logging.getLogger(__name__)


class CommandEncoder:
    """Fire-and-forget mapping of intents to frames handed to ``send``."""

    def __init__(self, send: Callable[[str], None]):
        self.send = send

    def _emit(self, command: BaseCommand) -> str:
        frame = command.to_frame()
        self.send(frame)
        logger.info(f"Sent: {command.type.value}")
        return frame

    def get_rooms(self) -> str:
        return self._emit(GetRoomsCommand())

    def create_room(self, name: str) -> str:
        return self._emit(CreateRoomCommand(name=name))

    def join_room(self, room_id: int, name: str) -> str:
        return self._emit(JoinRoomCommand(room_id=room_id, name=name))

    def leave_room(self) -> str:
        return self._emit(LeaveRoomCommand())

    def hit(self) -> str:
        return self._emit(HitCommand())

    def stand(self) -> str:
        return self._emit(StandCommand())

    def rematch(self) -> str:
        return self._emit(RematchCommand())
