"""Command line entry point: ``dgload``.

Example::

    dgload --dgraph-addr alpha1:9080 --dgraph-addr alpha2:9080 \\
        --node-type-count 10 --node-pred-count 5 --rounds 100
"""

from __future__ import annotations

import argparse
import logging
import sys

from dgload.db import DgloadError, DgraphConfig
from dgload.onto import ScenarioType
from dgload.workload import SCENARIOS, WorkloadConfig, init_connection

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dgload", description="create a synthetic graph"
    )
    parser.add_argument(
        "--dgraph-addr",
        action="append",
        dest="addresses",
        help="connection string (host:port) for Dgraph DB; "
        "repeat for multiple servers",
    )
    parser.add_argument(
        "--node-type-count", type=int, help="number of node types"
    )
    parser.add_argument(
        "--node-pred-count", type=int, help="number of predicates per node"
    )
    parser.add_argument(
        "--pred-string-len",
        type=int,
        help="length of the string stored in each predicate",
    )
    parser.add_argument("--rounds", type=int, help="number of rounds to perform")
    parser.add_argument(
        "--scenario",
        choices=[str(s) for s in ScenarioType],
        help="graph shape to generate",
    )
    parser.add_argument(
        "-c", "--config", help="YAML file with workload settings; flags override it"
    )
    parser.add_argument(
        "--show-batches",
        action="store_true",
        default=None,
        help="log every batch before it is submitted",
    )
    parser.add_argument("--log-level", default="INFO")
    return parser


def load_workload(args: argparse.Namespace) -> WorkloadConfig:
    workload = (
        WorkloadConfig.from_yaml(args.config) if args.config else WorkloadConfig()
    )
    for name in (
        "node_type_count",
        "node_pred_count",
        "pred_string_len",
        "rounds",
        "scenario",
        "show_batches",
    ):
        value = getattr(args, name)
        if value is not None:
            setattr(workload, name, value)
    return workload


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    workload = load_workload(args)
    db_config = (
        DgraphConfig(addresses=args.addresses) if args.addresses else DgraphConfig()
    )
    print(f"# dgraph-addr(s): {db_config.addresses}")

    try:
        conn = init_connection(db_config, workload)
        try:
            SCENARIOS[workload.scenario](conn, workload)
        finally:
            conn.close()
    except DgloadError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
