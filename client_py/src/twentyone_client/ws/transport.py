"""
WebSocket transport adapter for the Twenty-One client.
"""

import asyncio
import logging
from typing import Callable, Optional, Set, Union

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

logger = logging.getLogger(__name__)


class WebSocketTransport:
    """Owns the socket and reports open/message/error/closed to callbacks.

    Sends are fire-and-forget; failures are reported through ``on_error``.
    There is no automatic reconnect.
    """

    def __init__(
        self,
        on_open: Callable[[], None],
        on_message: Callable[[Union[str, bytes]], None],
        on_error: Callable[[str], None],
        on_closed: Callable[[Optional[int], str], None],
        ping_interval: float = 20,
        ping_timeout: float = 10,
        close_timeout: float = 5,
    ):
        self.on_open = on_open
        self.on_message = on_message
        self.on_error = on_error
        self.on_closed = on_closed
        self.ping_interval = ping_interval
        self.ping_timeout = ping_timeout
        self.close_timeout = close_timeout
        self.websocket = None
        self._send_tasks: Set[asyncio.Task] = set()

    @property
    def connected(self) -> bool:
        return self.websocket is not None

    async def connect(self, url: str):
        """Open the connection and deliver messages until it closes."""
        websocket = None
        try:
            async with websockets.connect(
                url,
                ping_interval=self.ping_interval,
                ping_timeout=self.ping_timeout,
                close_timeout=self.close_timeout,
            ) as websocket:
                self.websocket = websocket
                logger.info(f"Connected to server {url}")
                self.on_open()
                async for message in websocket:
                    self.on_message(message)
        except (OSError, WebSocketException) as e:
            logger.error(f"WebSocket error: {e}")
            self.on_error(str(e))
        finally:
            self.websocket = None
            code = getattr(websocket, "close_code", None)
            reason = getattr(websocket, "close_reason", None) or ""
            logger.info(f"Disconnected: {code} {reason}")
            self.on_closed(code, reason)

    def send(self, text: str):
        websocket = self.websocket
        if websocket is None:
            logger.error("Cannot send, not connected")
            self.on_error("Not connected")
            return
        task = asyncio.get_running_loop().create_task(self._send(websocket, text))
        self._send_tasks.add(task)
        task.add_done_callback(self._send_tasks.discard)

    async def _send(self, websocket, text: str):
        try:
            await websocket.send(text)
        except (ConnectionClosed, OSError) as e:
            logger.error(f"Error sending message: {e}")
            self.on_error(str(e))

    async def close(self, code: int = 1000, reason: str = "Client closing"):
        websocket = self.websocket
        if websocket is not None:
            await websocket.close(code, reason)
            logger.info("Socket closed")
