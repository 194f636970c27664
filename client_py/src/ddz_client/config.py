"""
Client configuration and validation.
"""

import os

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import INVALID_CONFIG, raise_error


class ClientConfig(BaseModel):
    """Configuration for the connection and advisory settings."""

    server_url: str = Field(
        default="ws://127.0.0.1:33030/ws",
        description="WebSocket endpoint of the game server"
    )
    reconnect_base_ms: int = Field(
        default=1500,
        ge=100,
        le=60000,
        description="First reconnect delay; doubles on each consecutive failure"
    )
    reconnect_ceiling_ms: int = Field(
        default=12000,
        ge=100,
        le=600000,
        description="Upper bound for the reconnect delay"
    )
    room_list_poll_ms: int = Field(
        default=500,
        ge=100,
        le=60000,
        description="Room list refresh interval while connected"
    )
    max_recommendations: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum number of recommended plays"
    )
    open_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Seconds to wait for the WebSocket handshake"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level for the entry point"
    )

    @field_validator('server_url')
    @classmethod
    def validate_server_url(cls, v):
        """Only ws:// and wss:// endpoints are supported."""
        if not v.startswith(("ws://", "wss://")):
            raise ValueError(f'server_url must start with ws:// or wss:// (got {v})')
        return v

    @field_validator('reconnect_ceiling_ms')
    @classmethod
    def validate_ceiling(cls, v, info):
        """Validate the ceiling isn't below the base delay."""
        base = info.data.get('reconnect_base_ms', 1500)
        if v < base:
            raise ValueError(f'reconnect_ceiling_ms ({v}) must be >= reconnect_base_ms ({base})')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        return v.upper()

    def reconnect_delay_ms(self, attempts: int) -> int:
        """Backoff delay before reconnect number `attempts` (0-based)."""
        return min(self.reconnect_ceiling_ms, self.reconnect_base_ms * 2 ** attempts)


# Default configuration instance
default_config = ClientConfig()


def create_config(**overrides) -> ClientConfig:
    """Create a ClientConfig with optional overrides."""
    config_dict = default_config.model_dump()
    config_dict.update(overrides)
    try:
        return ClientConfig(**config_dict)
    except ValidationError as e:
        raise_error(INVALID_CONFIG, str(e))


def config_from_env() -> ClientConfig:
    """Build a config from DDZ_* / LOG_LEVEL environment variables."""
    overrides = {}
    if os.getenv("DDZ_SERVER_URL"):
        overrides["server_url"] = os.getenv("DDZ_SERVER_URL")
    if os.getenv("DDZ_POLL_MS"):
        overrides["room_list_poll_ms"] = os.getenv("DDZ_POLL_MS")
    if os.getenv("LOG_LEVEL"):
        overrides["log_level"] = os.getenv("LOG_LEVEL")
    return create_config(**overrides)
