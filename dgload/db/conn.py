"""Dgraph schema and mutation operations with retry and reconnect.

:class:`DgraphConnection` submits schema alters and quad batches over a
:class:`~dgload.db.pool.ConnectionManager`. Failures are classified by
:func:`~dgload.db.retry.classify_error`:

* write conflicts / stale transactions are resubmitted after an exponentially
  growing wait,
* a dead transport closes the pool, pauses, reopens it, then resubmits,
* anything else is raised at once.

The same request object is resubmitted on every attempt.

Example::

    with DgraphConnection(DgraphConfig(addresses=["alpha:9080"])) as conn:
        conn.apply_schema(schema_text)
        conn.mutate(quads)
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Callable

from pydgraph import DgraphClient
from pydgraph.proto import api_pb2 as api

from dgload.onto import FailureKind

from .connection.onto import DgraphConfig
from .errors import (
    DialError,
    ExhaustedFailure,
    ReconnectFailure,
    UnclassifiedFailure,
)
from .pool import ConnectionManager
from .retry import RetryPolicy, classify_error

if TYPE_CHECKING:
    from dgload.quads.batch import Quads

logger = logging.getLogger(__name__)


class DgraphConnection:
    """Resilient alter/mutate front end of a Dgraph cluster."""

    def __init__(
        self,
        config: DgraphConfig,
        manager: ConnectionManager | None = None,
        policy: RetryPolicy | None = None,
    ):
        self.config = config
        self.manager = manager if manager is not None else ConnectionManager(config)
        self.policy = policy if policy is not None else RetryPolicy.from_config(config)

    @classmethod
    def connect(cls, config: DgraphConfig) -> DgraphConnection:
        """Create a connection and dial every endpoint."""
        conn = cls(config)
        conn.open()
        return conn

    def open(self) -> None:
        self.manager.open()

    def ready(self) -> bool:
        return self.manager.ready()

    def close(self) -> None:
        self.manager.close()

    def __enter__(self) -> DgraphConnection:
        self.open()
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        self.close()

    def apply_schema(self, schema: str, timeout: float | None = None) -> None:
        """Alter the cluster schema."""
        op = api.Operation(schema=schema)
        self._run_with_retry(
            "alter schema", lambda client: client.alter(op, timeout=timeout)
        )

    def mutate(self, quads: Quads, timeout: float | None = None) -> Any:
        """Submit a quad batch as one commit-now transaction.

        Returns:
            The pydgraph response of the successful attempt
        """
        request = quads.request()
        logger.debug("Submitting %d quads", quads.size())
        return self._run_with_retry(
            "transaction",
            lambda client: client.txn().do_request(request, timeout=timeout),
        )

    def _run_with_retry(
        self, operation: str, call: Callable[[DgraphClient], Any]
    ) -> Any:
        retry = 0
        while True:
            try:
                result = call(self.manager.client)
            except Exception as e:
                kind = classify_error(e)
                if kind is FailureKind.UNCLASSIFIED:
                    raise UnclassifiedFailure(operation, e) from e
                if self.policy.exhausted(retry):
                    raise ExhaustedFailure(operation, retry, e) from e
                if kind is FailureKind.TRANSPORT:
                    self._reconnect(operation, e)
                retry += 1
                wait = self.policy.delay(retry)
                logger.warning(
                    "dgraph %s failed, retrying in %.1fs (attempt %d): %s",
                    operation,
                    wait,
                    retry,
                    e,
                )
                time.sleep(wait)
                continue

            if retry > 0:
                logger.warning(
                    "dgraph %s retry successful (attempt %d)", operation, retry
                )
            return result

    def _reconnect(self, operation: str, error: Exception) -> None:
        logger.warning(
            "dgraph transport failed during %s, reconnecting in %.1fs: %s",
            operation,
            self.policy.reconnect_cooldown,
            error,
        )
        self.manager.close()
        time.sleep(self.policy.reconnect_cooldown)
        try:
            self.manager.open()
        except DialError as e:
            raise ReconnectFailure(
                f"unable to reconnect to dgraph: {error}", operation=operation
            ) from e
