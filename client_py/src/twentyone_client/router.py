"""Event router: owns the client state and applies one transition per envelope"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Union

from .constants import DISCONNECT_COUNTDOWN_SECONDS, STATUS_DISCONNECTED
from .errors import MalformedEnvelopeError, UnknownEventTypeError
from .models import ClientState
from .reducer import CountdownTick, LocalEvent, ReturnToLobby, reduce
from .timer import DisconnectTimer
from .ws.events import InboundEvent, decode_frame, parse_inbound_event

logger = logging.getLogger(__name__)

Presenter = Callable[[ClientState], None]


class EventRouter:
    """
    Single owner of ``ClientState``.

    All transitions run on one event loop, strictly in delivery order. Each
    accepted transition is published to the presenter exactly once. The
    disconnect countdown is started when a round ends and cancelled as soon as
    a transition leaves the round-over phase.
    """

    def __init__(
        self,
        commands,
        presenter: Optional[Presenter] = None,
        countdown_seconds: int = DISCONNECT_COUNTDOWN_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.commands = commands
        self.presenter = presenter
        self.countdown_seconds = countdown_seconds
        self.state = ClientState()
        self.timer = DisconnectTimer(
            on_tick=self._on_countdown_tick,
            on_expire=self._on_countdown_expired,
            seconds=countdown_seconds,
            sleep=sleep,
        )
        self._loop = loop
        self._queue: Optional[asyncio.Queue] = None

    def dispatch(self, frame: Union[str, bytes]) -> bool:
        """Decode one raw frame and apply it. Returns whether a transition was applied."""
        logger.debug(f"Received frame: {frame!r}")
        try:
            event = parse_inbound_event(decode_frame(frame))
        except UnknownEventTypeError as e:
            logger.debug(f"Ignoring envelope: {e.message}")
            return False
        except MalformedEnvelopeError as e:
            logger.warning(f"Discarding malformed envelope: {e.message}")
            return False
        return self.apply(event)

    def apply(self, event: Union[InboundEvent, LocalEvent]) -> bool:
        """Run one transition through the reducer and publish the result."""
        result = reduce(self.state, event, countdown_seconds=self.countdown_seconds)
        if not result.success:
            logger.warning(f"Rejected transition [{result.error_code}] {result.error_message}")
            return False

        # Timer side effects run before the commit
        try:
            self._sync_timer(self.state, result.state)
        except RuntimeError as e:
            logger.error(f"Rejected transition: cannot run disconnect countdown ({e})")
            return False

        self.state = result.state
        self._publish()
        return True

    def _sync_timer(self, previous: ClientState, current: ClientState):
        if not previous.match.round_over and current.match.round_over:
            self.timer.start(self._loop)
        elif previous.match.round_over and not current.match.round_over:
            self.timer.cancel()

    def _publish(self):
        if self.presenter is None:
            return
        try:
            self.presenter(self.state)
        except Exception as e:
            logger.error(f"Presenter failed to render snapshot: {e}")

    def _on_countdown_tick(self, remaining: int):
        self.apply(CountdownTick(remaining))

    def _on_countdown_expired(self):
        # Sends precede the reset: its "Disconnected" status is final
        self.commands.leave_room()
        self.commands.get_rooms()
        self.apply(ReturnToLobby(STATUS_DISCONNECTED))

    # Hand-off for deliveries from other threads
    def submit(self, frame: Union[str, bytes]):
        """Queue a frame for the router's loop. Safe to call from any thread."""
        if self._loop is None or self._queue is None:
            raise RuntimeError("EventRouter.run() has not been started")
        self._loop.call_soon_threadsafe(self._queue.put_nowait, frame)

    async def run(self):
        """Drain submitted frames one at a time until cancelled."""
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        try:
            while True:
                frame = await self._queue.get()
                try:
                    self.dispatch(frame)
                finally:
                    self._queue.task_done()
        finally:
            self.timer.cancel()

    async def join(self):
        """Wait until every submitted frame has been applied."""
        if self._queue is not None:
            await self._queue.join()
