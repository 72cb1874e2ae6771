"""
WebSocket envelopes and transport for the Twenty-One client.
"""

from .events import *
from .transport import WebSocketTransport

__all__ = ["WebSocketTransport", "parse_inbound_event", "decode_frame"]
