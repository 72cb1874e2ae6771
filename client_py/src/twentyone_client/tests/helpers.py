"""
Frame builders and fakes shared by the client tests.
"""

import asyncio
from typing import List

import orjson

from twentyone_client.models import ClientState
from twentyone_client.reducer import reduce
from twentyone_client.ws.events import parse_inbound_event


def frame(event_type: str, **fields) -> str:
    """Build a raw text frame."""
    return orjson.dumps({"type": event_type, **fields}).decode()


def event(event_type: str, **fields):
    """Build a parsed inbound event."""
    return parse_inbound_event({"type": event_type, **fields})


def apply_all(state: ClientState, *events) -> ClientState:
    """Reduce a sequence of events, failing on any rejected transition."""
    for e in events:
        result = reduce(state, e)
        assert result.success, result.error_message
        state = result.state
    return state


def sent_types(frames: List[str]) -> List[str]:
    return [orjson.loads(f)["type"] for f in frames]


class ManualClock:
    """Logical time for countdown tests: sleeps only end on ``advance()``."""

    def __init__(self):
        self.sleeps = 0
        self._waiters = []

    async def sleep(self, seconds: float):
        self.sleeps += 1
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        await waiter

    async def settle(self):
        for _ in range(5):
            await asyncio.sleep(0)

    async def advance(self, seconds: int = 1):
        for _ in range(seconds):
            # Let freshly started countdowns reach their first sleep
            await self.settle()
            waiters, self._waiters = self._waiters, []
            for waiter in waiters:
                if not waiter.done():
                    waiter.set_result(None)
            await self.settle()


class RecordingPresenter:
    def __init__(self):
        self.snapshots: List[ClientState] = []

    def __call__(self, state: ClientState):
        self.snapshots.append(state)
