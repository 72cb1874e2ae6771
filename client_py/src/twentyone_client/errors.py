# client_py/src/twentyone_client/errors.py

class ClientError(Exception):
    """Base exception for client-side synchronization errors."""
    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

# Specific error codes
MALFORMED_ENVELOPE = "MALFORMED_ENVELOPE"
UNKNOWN_EVENT_TYPE = "UNKNOWN_EVENT_TYPE"
INVARIANT_VIOLATION = "INVARIANT_VIOLATION"
ACTION_NOT_ALLOWED = "ACTION_NOT_ALLOWED"
TRANSPORT_FAILURE = "TRANSPORT_FAILURE"


class MalformedEnvelopeError(ClientError):
    """Frame could not be parsed or misses a required field."""
    def __init__(self, message: str):
        super().__init__(MALFORMED_ENVELOPE, message)


class UnknownEventTypeError(ClientError):
    """Frame carries a type this client does not consume."""
    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(UNKNOWN_EVENT_TYPE, f"Unknown event type: {event_type}")
