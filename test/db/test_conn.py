"""Retry/reconnect behaviour of DgraphConnection against fake clients."""

import logging

import pytest
from pydgraph import errors as dgraph_errors

from dgload.db import (
    DgraphConnection,
    ExhaustedFailure,
    ReconnectFailure,
    UnclassifiedFailure,
)
from dgload.quads import Quads


def _conn(db_config, manager):
    return DgraphConnection(db_config, manager=manager)


def _batch():
    quads = Quads()
    quads.set_str("_:a", "name", "A")
    return quads


def test_mutate_success_first_try(db_config, fake_manager, fake_client, sleeps):
    conn = _conn(db_config, fake_manager)
    assert conn.mutate(_batch()) == "ok"
    assert len(fake_client.calls) == 1
    assert sleeps == []


def test_mutate_submits_batch_request(db_config, fake_manager, fake_client, sleeps):
    quads = _batch()
    _conn(db_config, fake_manager).mutate(quads, timeout=3.0)
    name, request, timeout = fake_client.calls[0]
    assert name == "do_request"
    assert request == quads.request()
    assert timeout == 3.0


def test_apply_schema_sends_operation(db_config, fake_manager, fake_client, sleeps):
    _conn(db_config, fake_manager).apply_schema("name: string .")
    name, op, _ = fake_client.calls[0]
    assert name == "alter"
    assert op.schema == "name: string ."


def test_aborted_retries_without_reconnect(
    db_config, make_client, make_manager, sleeps
):
    client = make_client([Exception("Transaction has been ABORTED. Please retry")])
    manager = make_manager(client)
    manager.open()
    assert _conn(db_config, manager).mutate(_batch()) == "ok"
    assert len(client.calls) == 2
    assert manager.closed == 0
    assert sleeps == [10.0]


@pytest.mark.parametrize(
    "error",
    [
        dgraph_errors.AbortedError(),
        Exception("readTs: 5 less than minTs: 9"),
        Exception("Transaction is too old"),
    ],
)
def test_retryable_errors(db_config, make_client, make_manager, sleeps, error):
    client = make_client([error])
    manager = make_manager(client)
    manager.open()
    _conn(db_config, manager).mutate(_batch())
    assert len(client.calls) == 2


def test_unhealthy_connection_reconnects_then_retries(
    db_config, make_client, make_manager, sleeps
):
    client = make_client([Exception("rpc error: unhealthy connection")])
    manager = make_manager(client)
    manager.open()
    assert _conn(db_config, manager).mutate(_batch()) == "ok"
    assert manager.events == ["open", "close", "open"]
    assert sleeps == [5.0, 10.0]
    assert len(client.calls) == 2


def test_transport_closing_reconnects(db_config, make_client, make_manager, sleeps):
    client = make_client([Exception("transport is closing")])
    manager = make_manager(client)
    manager.open()
    _conn(db_config, manager).apply_schema("x: int .")
    assert manager.closed == 1


def test_unavailable_rpc_error_reconnects_then_retries(
    db_config, make_client, make_manager, sleeps, unavailable_error
):
    client = make_client([unavailable_error])
    manager = make_manager(client)
    manager.open()
    assert _conn(db_config, manager).mutate(_batch()) == "ok"
    assert manager.events == ["open", "close", "open"]
    assert sleeps == [5.0, 10.0]
    assert len(client.calls) == 2


def test_transport_error_at_cap_is_exhausted_without_reconnect(
    db_config, make_client, make_manager, sleeps, unavailable_error
):
    # max_retries=3: three aborts use up the retries, the transport error
    # arrives on the last attempt
    client = make_client([Exception("aborted")] * 3 + [unavailable_error])
    manager = make_manager(client)
    manager.open()
    with pytest.raises(ExhaustedFailure) as exc:
        _conn(db_config, manager).mutate(_batch())
    assert manager.closed == 0
    assert manager.events == ["open"]
    assert exc.value.last_error is unavailable_error
    assert sleeps == [10.0, 20.0, 40.0]


def test_failed_reopen_is_fatal(
    db_config, make_client, make_manager, sleeps, dial_error
):
    client = make_client([Exception("unhealthy connection")])
    manager = make_manager(client, reopen_error=dial_error)
    manager.open()
    with pytest.raises(ReconnectFailure) as exc:
        _conn(db_config, manager).mutate(_batch())
    assert exc.value.__cause__ is dial_error
    assert len(client.calls) == 1
    assert sleeps == [5.0]


def test_syntax_error_fails_immediately(db_config, make_client, make_manager, sleeps):
    client = make_client([Exception("line 1 column 3: syntax error")])
    manager = make_manager(client)
    manager.open()
    with pytest.raises(UnclassifiedFailure) as exc:
        _conn(db_config, manager).mutate(_batch())
    assert str(exc.value) == "line 1 column 3: syntax error"
    assert exc.value.operation == "transaction"
    assert len(client.calls) == 1
    assert sleeps == []


def test_exhausted_after_max_retries(db_config, make_client, make_manager, sleeps):
    # max_retries=3 in the db_config fixture
    client = make_client([Exception("aborted")] * 10)
    manager = make_manager(client)
    manager.open()
    with pytest.raises(ExhaustedFailure) as exc:
        _conn(db_config, manager).mutate(_batch())
    assert len(client.calls) == 4
    assert exc.value.retries == 3
    assert exc.value.attempts == 4
    assert "aborted" in str(exc.value.last_error)
    assert "4 attempts" in str(exc.value)


def test_backoff_doubles_without_ceiling(db_config, make_client, make_manager, sleeps):
    db_config.max_retries = 6
    client = make_client([Exception("aborted")] * 6)
    manager = make_manager(client)
    manager.open()
    _conn(db_config, manager).mutate(_batch())
    assert sleeps == [10.0, 20.0, 40.0, 80.0, 160.0, 320.0]


def test_same_request_resubmitted(db_config, make_client, make_manager, sleeps):
    client = make_client([Exception("aborted"), Exception("aborted")])
    manager = make_manager(client)
    manager.open()
    _conn(db_config, manager).mutate(_batch())
    requests = [call[1] for call in client.calls]
    assert requests[0] is requests[1] is requests[2]


def test_recovery_is_logged(db_config, make_client, make_manager, sleeps, caplog):
    client = make_client([Exception("aborted")])
    manager = make_manager(client)
    manager.open()
    with caplog.at_level(logging.WARNING, logger="dgload.db.conn"):
        _conn(db_config, manager).mutate(_batch())
    assert any("retry successful (attempt 1)" in r.getMessage() for r in caplog.records)


def test_context_manager_opens_and_closes(db_config, fake_client, make_manager):
    manager = make_manager(fake_client)
    with DgraphConnection(db_config, manager=manager) as conn:
        assert conn.ready()
    assert manager.events == ["open", "close"]
