"""Workload drivers: build synthetic batches, submit them, print CSV timings.

Each driver writes a ``# Test ...`` header, a CSV header and one CSV line per
round to ``out`` (stdout by default). Only the mutate call is timed.
"""

from __future__ import annotations

import logging
import random
import sys
from typing import Callable, Protocol, TextIO

from suthing import Timer

from dgload.db import DgraphConfig, DgraphConnection
from dgload.onto import ScenarioType
from dgload.quads import Quads

from .onto import WorkloadConfig
from .schema import (
    DGRAPH_TYPE,
    NAME,
    NEXT,
    build_schema,
    link_name,
    pred_name,
    type_name,
)
from .strings import less_random_string, random_string

logger = logging.getLogger(__name__)


class Mutator(Protocol):
    def mutate(self, quads: Quads): ...


def init_connection(
    db_config: DgraphConfig, workload: WorkloadConfig, out: TextIO | None = None
) -> DgraphConnection:
    """Connect to the cluster and apply the schema of the synthetic types."""
    out = out or sys.stdout
    conn = DgraphConnection.connect(db_config)
    schema = build_schema(workload.node_type_count, workload.node_pred_count)
    print(f"Schema:\n{schema}", file=out)
    try:
        conn.apply_schema(schema)
    except Exception:
        conn.close()
        raise
    return conn


def _timed_mutate(conn: Mutator, quads: Quads) -> int:
    with Timer() as timer:
        conn.mutate(quads)
    return int(timer.elapsed * 1000)


def _blank_nodes(quads: Quads, workload: WorkloadConfig, rng) -> list[str]:
    subjects = []
    for i in range(workload.node_type_count):
        subj = f"_:{i}"
        quads.set_str(subj, DGRAPH_TYPE, type_name(i))
        quads.set_str(subj, NAME, type_name(i))
        for j in range(workload.node_pred_count):
            quads.set_str(
                subj, pred_name(j), random_string(workload.pred_string_len, rng)
            )
        subjects.append(subj)
    return subjects


def _resubmit(conn: Mutator, quads: Quads, workload: WorkloadConfig, out) -> None:
    if workload.show_batches:
        logger.info("Batch:\n%s", quads.describe())
    print("round,time (ms)", file=out)
    for r in range(workload.rounds):
        elapsed_ms = _timed_mutate(conn, quads)
        print(f"{r},{elapsed_ms}", file=out)


def run_unconnected(
    conn: Mutator,
    workload: WorkloadConfig,
    out: TextIO | None = None,
    rng: random.Random | None = None,
) -> None:
    """Resubmit one batch of unconnected nodes every round."""
    out = out or sys.stdout
    quads = Quads()
    _blank_nodes(quads, workload, rng)
    print(
        f"# Test Unconnected: {workload.rounds} rounds; "
        f"{workload.node_type_count} node types; "
        f"{workload.node_pred_count} predicates",
        file=out,
    )
    _resubmit(conn, quads, workload, out)


def run_connected_subgraphs(
    conn: Mutator,
    workload: WorkloadConfig,
    out: TextIO | None = None,
    rng: random.Random | None = None,
) -> None:
    """Resubmit one fully connected subgraph every round; subgraphs stay disjoint."""
    out = out or sys.stdout
    quads = Quads()
    subjects = _blank_nodes(quads, workload, rng)
    for subj in subjects:
        for k, target in enumerate(subjects):
            quads.set_rel(subj, link_name(k), target)
    print(
        f"# Test Connected Subgraphs: {workload.rounds} rounds; "
        f"{workload.node_type_count} node types; "
        f"{workload.node_pred_count} predicates",
        file=out,
    )
    _resubmit(conn, quads, workload, out)


def run_fully_connected(
    conn: Mutator,
    workload: WorkloadConfig,
    out: TextIO | None = None,
    rng: random.Random | None = None,
) -> None:
    """Grow one connected graph, locating earlier nodes through upserts.

    Round ``r`` upserts ``Node-<r>.<i>`` for every type ``i``, links each to
    every other node of the round, and chains ``Node-<r>.0`` to
    ``Node-<r+1>.0`` through ``NEXT``.
    """
    out = out or sys.stdout
    quads = Quads()
    print(
        f"# Test Fully Connected: {workload.rounds} rounds; "
        f"{workload.node_type_count} node types; "
        f"{workload.node_pred_count} predicates of "
        f"{workload.pred_string_len} length",
        file=out,
    )
    print("round,quad-count,time (ms)", file=out)
    for r in range(workload.rounds):
        for i in range(workload.node_type_count):
            node_name = f"Node-{r}.{i}"
            node_type = type_name(i)
            current = quads.add_upsert_query(NAME, node_name, node_type)

            quads.set_str(current, DGRAPH_TYPE, node_type)
            quads.set_str(current, NAME, node_name)
            for j in range(workload.node_pred_count):
                quads.set_str(
                    current,
                    pred_name(j),
                    less_random_string(workload.pred_string_len, rng),
                )

            if i == 0:
                next_name = f"Node-{r + 1}.{i}"
                upcoming = quads.add_upsert_query(NAME, next_name, node_type)
                quads.set_str(upcoming, DGRAPH_TYPE, node_type)
                quads.set_str(upcoming, NAME, next_name)
                quads.set_rel(current, NEXT, upcoming)

            for k in range(workload.node_type_count):
                link = quads.add_upsert_query(NAME, f"Node-{r}.{k}", type_name(k))
                quads.set_rel(current, link_name(k), link)

        if workload.show_batches:
            logger.info("Round %d batch:\n%s", r, quads.describe())

        elapsed_ms = _timed_mutate(conn, quads)
        print(f"{r},{quads.size()},{elapsed_ms}", file=out)
        quads.clear()


SCENARIOS: dict[ScenarioType, Callable[..., None]] = {
    ScenarioType.UNCONNECTED: run_unconnected,
    ScenarioType.CONNECTED_SUBGRAPHS: run_connected_subgraphs,
    ScenarioType.FULLY_CONNECTED: run_fully_connected,
}
