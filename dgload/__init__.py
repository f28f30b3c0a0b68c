"""dgload: synthetic workload generator and load harness for Dgraph.

dgload builds batches of quads (facts and edges), some of which refer to
nodes located by upsert queries, and submits them as commit-now transactions
while measuring latency.

Key Features:
    - Connection pool over every alpha of a cluster with all-or-nothing dialing
    - Retry of conflicting transactions and reconnect on dead transport
    - Deduplicating quad/upsert batch builder
    - Three synthetic graph scenarios with CSV timing output

Example:
    >>> from dgload import DgraphConfig, DgraphConnection, Quads
    >>> quads = Quads()
    >>> quads.set_str("_:a", "name", "A")
    >>> with DgraphConnection(DgraphConfig(addresses=["localhost:9080"])) as conn:
    ...     conn.mutate(quads)
"""

# --- Database --------------------------------------------------------------
from .db import (
    ConfigError,
    ConnectionManager,
    DgloadError,
    DgraphConfig,
    DgraphConnection,
    DialError,
    ExhaustedFailure,
    ReconnectFailure,
    RetryPolicy,
    TransactionFailure,
    UnclassifiedFailure,
)

# --- Batches ---------------------------------------------------------------
from .quads import Facet, Quad, Quads, UpsertVar

# --- Workload --------------------------------------------------------------
from .workload import SCENARIOS, WorkloadConfig, build_schema

# --- Enums & utilities -----------------------------------------------------
from .onto import FacetType, FailureKind, ScenarioType
from .sanitize import remove_invalid_chars

__all__ = [
    # Database
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
    # Batches
    "Facet",
    "Quad",
    "Quads",
    "UpsertVar",
    # Workload
    "SCENARIOS",
    "WorkloadConfig",
    "build_schema",
    # Enums & utilities
    "FacetType",
    "FailureKind",
    "ScenarioType",
    "remove_invalid_chars",
]
