"""Error classification and backoff for Dgraph alter/mutate retries."""

from __future__ import annotations

from dataclasses import dataclass

import grpc
from pydgraph import errors as dgraph_errors

from dgload.onto import FailureKind

from .connection.onto import DgraphConfig

RETRYABLE_MARKERS = ("aborted", "transaction is too old", "less than mints")
TRANSPORT_MARKERS = ("transport is closing", "unhealthy connection")


def _is_unavailable(error: BaseException) -> bool:
    if isinstance(error, dgraph_errors.ConnectionError):
        return True
    if not isinstance(error, grpc.RpcError):
        return False
    code = getattr(error, "code", None)
    return callable(code) and code() == grpc.StatusCode.UNAVAILABLE


def classify_error(error: BaseException) -> FailureKind:
    """Decide how the retry loop treats ``error``.

    Write conflicts and stale read timestamps are retried in place; a dead
    transport (grpc ``UNAVAILABLE``, pydgraph ``ConnectionError`` or a known
    transport message) is retried after the pool is rebuilt; anything else
    is fatal. Retryable markers win over transport ones.
    """
    if isinstance(error, dgraph_errors.AbortedError):
        return FailureKind.RETRYABLE
    text = str(error).lower()
    if any(marker in text for marker in RETRYABLE_MARKERS):
        return FailureKind.RETRYABLE
    if _is_unavailable(error):
        return FailureKind.TRANSPORT
    if any(marker in text for marker in TRANSPORT_MARKERS):
        return FailureKind.TRANSPORT
    return FailureKind.UNCLASSIFIED


@dataclass(frozen=True)
class RetryPolicy:
    """Retry cap and wait schedule.

    The wait before retry ``n`` (1-based) is ``base_delay * 2 ** (n - 1)``;
    there is no jitter and no ceiling on the wait.
    """

    max_retries: int = 10
    base_delay: float = 10.0
    reconnect_cooldown: float = 5.0

    @classmethod
    def from_config(cls, config: DgraphConfig) -> RetryPolicy:
        return cls(
            max_retries=config.max_retries,
            base_delay=config.retry_base_delay,
            reconnect_cooldown=config.reconnect_cooldown,
        )

    def delay(self, retry: int) -> float:
        return self.base_delay * 2 ** (retry - 1)

    def exhausted(self, retry: int) -> bool:
        return retry >= self.max_retries
