"""Connection pool lifecycle for a Dgraph cluster.

A :class:`ChannelPool` holds one grpc channel per alpha endpoint and a single
``pydgraph.DgraphClient`` fronting all of them. Pools are immutable once
dialed: :class:`ConnectionManager` replaces its pool wholesale, publishing a
new one only after every endpoint has been dialed, so readers never observe a
mix of old and new channels.

Example::

    with ConnectionManager(DgraphConfig(addresses=["alpha:9080"])) as manager:
        manager.client.alter(api.Operation(schema=schema))
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import grpc
from pydgraph import DgraphClient, DgraphClientStub

from .connection.onto import DgraphConfig
from .errors import ConfigError, DialError

logger = logging.getLogger(__name__)


FAILED_STATES = (
    grpc.ChannelConnectivity.TRANSIENT_FAILURE,
    grpc.ChannelConnectivity.SHUTDOWN,
)


class Channel:
    """A pydgraph stub plus the last connectivity state of its grpc channel."""

    def __init__(self, endpoint: str, stub: Any):
        self.endpoint = endpoint
        self.stub = stub
        self.state = grpc.ChannelConnectivity.IDLE
        self._settled = threading.Event()
        self.stub.channel.subscribe(self._on_state, try_to_connect=True)

    def _on_state(self, state: grpc.ChannelConnectivity) -> None:
        self.state = state
        if state is grpc.ChannelConnectivity.READY or state in FAILED_STATES:
            self._settled.set()

    def ready(self) -> bool:
        return self.state is grpc.ChannelConnectivity.READY

    def wait_ready(self, timeout: float) -> grpc.ChannelConnectivity:
        """Block until the first connection attempt settles.

        Returns as soon as the channel is ready or has failed; otherwise
        after ``timeout`` seconds.

        Returns:
            The connectivity state the channel was left in
        """
        self._settled.wait(timeout)
        return self.state

    def close(self) -> None:
        self.stub.channel.unsubscribe(self._on_state)
        self.stub.close()


def dial_endpoint(endpoint: str, config: DgraphConfig) -> Channel:
    """Open a channel to one alpha and block until it is ready.

    Errors raised while the channel is created are not retried, and a
    refused or shut down first attempt fails at once. A channel that does
    not settle within ``config.connect_timeout`` is closed.

    Raises:
        DialError: If the endpoint cannot be reached
    """
    try:
        stub = DgraphClientStub(endpoint, options=config.channel_options())
    except (ValueError, grpc.RpcError) as e:
        raise DialError([endpoint], reason=str(e)) from e

    channel = Channel(endpoint, stub)
    state = channel.wait_ready(config.connect_timeout)
    if state is grpc.ChannelConnectivity.READY:
        return channel

    channel.close()
    if state in FAILED_STATES:
        reason = f"channel entered {state.name}"
    else:
        reason = f"not ready after {config.connect_timeout}s"
    raise DialError([endpoint], reason=reason)


class ChannelPool:
    """Immutable set of channels plus the aggregated client over them."""

    def __init__(self, channels: list[Channel]):
        self.channels: tuple[Channel, ...] = tuple(channels)
        self.client = DgraphClient(*(c.stub for c in self.channels))

    @property
    def endpoints(self) -> list[str]:
        return [c.endpoint for c in self.channels]

    @classmethod
    def dial(cls, config: DgraphConfig) -> ChannelPool:
        """Dial every configured endpoint; all-or-nothing.

        Raises:
            DialError: Naming every endpoint that could not be reached; the
                channels that did open are closed first
        """
        opened: list[Channel] = []
        unreachable: list[str] = []
        reasons: list[str] = []
        for endpoint in config.addresses:
            try:
                opened.append(dial_endpoint(endpoint, config))
            except DialError as e:
                logger.error("Unable to dial dgraph alpha server %s: %s", endpoint, e)
                unreachable.extend(e.endpoints)
                if e.reason:
                    reasons.append(f"{endpoint}: {e.reason}")

        if len(opened) != len(config.addresses):
            for channel in opened:
                channel.close()
            raise DialError(unreachable, reason="; ".join(reasons) or None)

        return cls(opened)

    def ready(self) -> bool:
        return all(c.ready() for c in self.channels)

    def close(self) -> None:
        for channel in self.channels:
            channel.close()


class ConnectionManager:
    """Owns the channel pool of one Dgraph cluster.

    Attributes:
        config: Endpoints and dial settings
    """

    def __init__(self, config: DgraphConfig):
        self.config = config
        self._pool: ChannelPool | None = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    @property
    def client(self) -> DgraphClient:
        pool = self._pool
        assert pool is not None, "Not connected"
        return pool.client

    def open(self) -> None:
        """Dial all endpoints and publish the resulting pool.

        Raises:
            ConfigError: If no endpoints are configured
            DialError: If any endpoint is unreachable
        """
        if not self.config.addresses:
            raise ConfigError("must provide at least one dgraph connection URL")
        pool = ChannelPool.dial(self.config)
        self._pool = pool
        logger.info("Connected to dgraph alpha servers %s", pool.endpoints)

    def ready(self) -> bool:
        """True only if every channel of the current pool is ready."""
        pool = self._pool
        return pool is not None and pool.ready()

    def close(self) -> None:
        pool, self._pool = self._pool, None
        if pool is None:
            return
        pool.close()
        logger.info("Closed dgraph connections to %s", pool.endpoints)

    def __enter__(self) -> ConnectionManager:
        self.open()
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        self.close()
