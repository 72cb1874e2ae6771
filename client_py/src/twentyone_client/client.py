"""Client facade wiring transport, router and command encoder together"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .commands import CommandEncoder
from .config import ClientConfig, default_config
from .constants import DEFAULT_PLAYER_NAME, STATUS_CONNECTED, STATUS_LEFT_ROOM
from .models import ClientState
from .reducer import ConnectionOpened, ConnectionStatus, RematchRequested, ReturnToLobby
from .router import EventRouter, Presenter
from .ws.transport import WebSocketTransport

logger = logging.getLogger(__name__)


class TwentyOneClient:
    """
    One connection to the game server.

    Transport callbacks and user intents both run on the same event loop and
    go through the router, so state is only ever touched by the reducer.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        presenter: Optional[Presenter] = None,
        transport_factory: Callable[..., WebSocketTransport] = WebSocketTransport,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config or default_config
        self.transport = transport_factory(
            on_open=self._on_open,
            on_message=self._on_message,
            on_error=self._on_error,
            on_closed=self._on_closed,
            ping_interval=self.config.ping_interval,
            ping_timeout=self.config.ping_timeout,
            close_timeout=self.config.close_timeout,
        )
        self.commands = CommandEncoder(self.transport.send)
        self.router = EventRouter(
            self.commands,
            presenter=presenter,
            countdown_seconds=self.config.disconnect_countdown,
            sleep=sleep,
        )

    @property
    def state(self) -> ClientState:
        return self.router.state

    @property
    def player_name(self) -> str:
        if self.config.player_name:
            return self.config.player_name
        if self.state.player_id is None:
            return DEFAULT_PLAYER_NAME
        return f"{DEFAULT_PLAYER_NAME} {self.state.player_id}"

    # Transport callbacks
    def _on_open(self):
        self.router.apply(ConnectionOpened(STATUS_CONNECTED))
        self.commands.get_rooms()

    def _on_message(self, frame):
        self.router.dispatch(frame)

    def _on_error(self, message: str):
        self.router.apply(ConnectionStatus(f"Connection error: {message}"))

    def _on_closed(self, code: Optional[int], reason: str):
        self.router.apply(ConnectionStatus(f"Disconnected: {reason}" if reason else "Disconnected"))

    # User intents
    def refresh_rooms(self):
        self.commands.get_rooms()

    def create_room(self, name: Optional[str] = None):
        self.commands.create_room(name or self.player_name)

    def join_room(self, room_id: int, name: Optional[str] = None):
        self.commands.join_room(room_id, name or self.player_name)

    def leave_room(self):
        self.commands.leave_room()
        self.commands.get_rooms()
        self.router.apply(ReturnToLobby(STATUS_LEFT_ROOM))

    def hit(self):
        self.commands.hit()

    def stand(self):
        self.commands.stand()

    def rematch(self):
        self.commands.rematch()
        # Clear the finished round right away instead of waiting for round_start
        self.router.apply(RematchRequested())

    async def run(self):
        """Connect and process messages until the connection closes."""
        logger.info(f"Connecting to {self.config.server_url}")
        await self.transport.connect(self.config.server_url)

    async def close(self):
        self.router.timer.cancel()
        await self.transport.close(1000, "Client closing")
