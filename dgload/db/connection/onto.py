"""Connection settings for Dgraph clusters.

Settings are read from ``DGRAPH_*`` environment variables (or a ``.env``
file) and may be overridden with keyword arguments::

    config = DgraphConfig(addresses=["alpha1:9080", "alpha2:9080"])
    lake = DgraphConfig.from_env(prefix="LAKE")  # reads LAKE_DGRAPH_*
"""

from __future__ import annotations

from typing import Self

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ADDRESS = "127.0.0.1:9080"
MAX_MESSAGE_SIZE = 1024 * 1024 * 1024


class DgraphConfig(BaseSettings):
    """Dgraph cluster endpoints, dial options and retry policy."""

    model_config = SettingsConfigDict(
        env_prefix="DGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    addresses: list[str] = Field(
        default_factory=lambda: [DEFAULT_ADDRESS],
        description="host:port of every Dgraph alpha; one channel per address.",
    )

    # dial
    connect_timeout: float = Field(
        default=600.0,
        description="Seconds to block waiting for each channel to become ready.",
    )
    min_connect_timeout: float = Field(
        default=20.0, description="Minimum seconds granted to one connect attempt."
    )
    max_backoff_delay: float = Field(
        default=30.0, description="Cap in seconds on the reconnect backoff of a dial."
    )
    max_message_size: int = Field(
        default=MAX_MESSAGE_SIZE,
        description="Send and receive message size limit in bytes.",
    )

    # retry
    max_retries: int = Field(default=10, ge=0)
    retry_base_delay: float = Field(
        default=10.0, description="First retry wait in seconds; doubles every retry."
    )
    reconnect_cooldown: float = Field(
        default=5.0,
        description="Pause in seconds between closing and reopening a dead pool.",
    )

    @classmethod
    def from_env(cls, prefix: str | None = None, **overrides) -> Self:
        """Load settings from ``{PREFIX}_DGRAPH_*`` environment variables."""
        if prefix:
            return cls(_env_prefix=f"{prefix.upper()}_DGRAPH_", **overrides)
        return cls(**overrides)

    def channel_options(self) -> list[tuple[str, int]]:
        """grpc channel arguments derived from the dial settings."""
        return [
            ("grpc.max_send_message_length", self.max_message_size),
            ("grpc.max_receive_message_length", self.max_message_size),
            ("grpc.min_reconnect_backoff_ms", int(self.min_connect_timeout * 1000)),
            ("grpc.max_reconnect_backoff_ms", int(self.max_backoff_delay * 1000)),
        ]
