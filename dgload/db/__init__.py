"""Dgraph connectivity: connection pool, retrying transactor and errors."""

from .conn import DgraphConnection
from .connection import DgraphConfig
from .errors import (
    ConfigError,
    DgloadError,
    DialError,
    ExhaustedFailure,
    ReconnectFailure,
    TransactionFailure,
    UnclassifiedFailure,
)
from .pool import ChannelPool, ConnectionManager
from .retry import RetryPolicy, classify_error

__all__ = [
    "ChannelPool",
    "ConfigError",
    "ConnectionManager",
    "DgloadError",
    "DgraphConfig",
    "DgraphConnection",
    "DialError",
    "ExhaustedFailure",
    "ReconnectFailure",
    "RetryPolicy",
    "TransactionFailure",
    "UnclassifiedFailure",
    "classify_error",
]
