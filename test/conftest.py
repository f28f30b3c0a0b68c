import logging

import grpc
import pytest

from dgload.db import DgraphConfig, DialError

logger = logging.getLogger(__name__)


class FakeRpcError(grpc.RpcError):
    """A failed grpc call carrying a status code, as grpcio raises them."""

    def __init__(self, code, details=""):
        super().__init__(details)
        self._code = code
        self._details = details

    def code(self):
        return self._code

    def details(self):
        return self._details


class FakeTxn:
    def __init__(self, client):
        self.client = client

    def do_request(self, request, timeout=None):
        return self.client.respond(("do_request", request, timeout))


class FakeClient:
    """Stands in for ``pydgraph.DgraphClient``; replays scripted outcomes.

    Each call pops the next outcome: an exception instance is raised,
    anything else is returned. Once the script is empty calls return "ok".
    """

    def __init__(self, outcomes=None):
        self.outcomes = list(outcomes or [])
        self.calls = []

    def respond(self, call):
        self.calls.append(call)
        outcome = self.outcomes.pop(0) if self.outcomes else "ok"
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def alter(self, op, timeout=None):
        return self.respond(("alter", op, timeout))

    def txn(self):
        return FakeTxn(self)


class FakeManager:
    """Stands in for ``ConnectionManager``; every reopen keeps the same client."""

    def __init__(self, client, reopen_error=None):
        self._client = client
        self.reopen_error = reopen_error
        self.opened = 0
        self.closed = 0
        self.events = []

    @property
    def client(self):
        return self._client

    def open(self):
        self.events.append("open")
        if self.opened and self.reopen_error is not None:
            raise self.reopen_error
        self.opened += 1

    def close(self):
        self.events.append("close")
        self.closed += 1

    def ready(self):
        return self.opened > self.closed


@pytest.fixture(scope="function")
def sleeps(monkeypatch):
    """Record retry waits instead of sleeping."""
    recorded = []
    monkeypatch.setattr("dgload.db.conn.time.sleep", recorded.append)
    return recorded


@pytest.fixture(scope="function")
def db_config():
    return DgraphConfig(
        addresses=["alpha1:9080", "alpha2:9080"],
        max_retries=3,
        retry_base_delay=10.0,
        reconnect_cooldown=5.0,
    )


@pytest.fixture(scope="function")
def fake_client():
    return FakeClient()


@pytest.fixture(scope="function")
def fake_manager(fake_client):
    manager = FakeManager(fake_client)
    manager.open()
    return manager


@pytest.fixture(scope="function")
def dial_error():
    return DialError(["alpha1:9080"], reason="connection refused")


@pytest.fixture(scope="function")
def make_client():
    return FakeClient


@pytest.fixture(scope="function")
def make_manager():
    return FakeManager


@pytest.fixture(scope="function")
def unavailable_error():
    return FakeRpcError(
        grpc.StatusCode.UNAVAILABLE,
        "failed to connect to all addresses; last error: Connection refused",
    )


@pytest.fixture(scope="function")
def make_rpc_error():
    return FakeRpcError
