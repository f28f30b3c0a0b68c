from .onto import WorkloadConfig
from .scenarios import (
    SCENARIOS,
    init_connection,
    run_connected_subgraphs,
    run_fully_connected,
    run_unconnected,
)
from .schema import build_schema
from .strings import less_random_string, random_string

__all__ = [
    "SCENARIOS",
    "WorkloadConfig",
    "build_schema",
    "init_connection",
    "less_random_string",
    "random_string",
    "run_connected_subgraphs",
    "run_fully_connected",
    "run_unconnected",
]
