"""
Client configuration.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .constants import DEFAULT_SERVER_URL, DISCONNECT_COUNTDOWN_SECONDS


class ClientConfig(BaseModel):
    """Connection and timing settings for the client."""

    server_url: str = Field(
        default=DEFAULT_SERVER_URL,
        description="WebSocket URL of the game server"
    )
    player_name: Optional[str] = Field(
        default=None,
        max_length=30,
        description="Name used when creating/joining rooms (defaults to 'Player <id>')"
    )
    disconnect_countdown: int = Field(
        default=DISCONNECT_COUNTDOWN_SECONDS,
        ge=1,
        le=60,
        description="Seconds before leaving the room after a round ends"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level name"
    )
    ping_interval: float = Field(
        default=20,
        gt=0,
        description="Seconds between keepalive pings"
    )
    ping_timeout: float = Field(
        default=10,
        gt=0,
        description="Seconds to wait for a pong before dropping the connection"
    )
    close_timeout: float = Field(
        default=5,
        gt=0,
        description="Seconds to wait for the closing handshake"
    )

    @field_validator('server_url')
    @classmethod
    def validate_server_url(cls, v):
        if not v.startswith(('ws://', 'wss://')):
            raise ValueError(f'server_url must be a ws:// or wss:// URL, got {v!r}')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'Unknown log level: {v}')
        return level

    @classmethod
    def from_env(cls, **overrides) -> 'ClientConfig':
        """Build a config from TWENTYONE_* environment variables."""
        values = {}
        if os.getenv("TWENTYONE_SERVER_URL"):
            values["server_url"] = os.getenv("TWENTYONE_SERVER_URL")
        if os.getenv("TWENTYONE_PLAYER_NAME"):
            values["player_name"] = os.getenv("TWENTYONE_PLAYER_NAME")
        if os.getenv("TWENTYONE_COUNTDOWN"):
            values["disconnect_countdown"] = int(os.getenv("TWENTYONE_COUNTDOWN"))
        if os.getenv("LOG_LEVEL"):
            values["log_level"] = os.getenv("LOG_LEVEL")
        values.update(overrides)
        return cls(**values)


# Default configuration instance
default_config = ClientConfig()


def create_config(**overrides) -> ClientConfig:
    """Create a ClientConfig with optional overrides."""
    config_dict = default_config.model_dump()
    config_dict.update(overrides)
    return ClientConfig(**config_dict)
