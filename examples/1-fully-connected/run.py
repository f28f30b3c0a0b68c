from dgload import DgraphConfig, WorkloadConfig
from dgload.workload import SCENARIOS, init_connection

workload = WorkloadConfig.from_yaml("workload.yaml")

# Reads DGRAPH_ADDRESSES, DGRAPH_MAX_RETRIES, etc. from the environment
# Or specify directly:
# db_config = DgraphConfig(addresses=["localhost:9080", "localhost:9081"])
db_config = DgraphConfig()

conn = init_connection(db_config, workload)
try:
    SCENARIOS[workload.scenario](conn, workload)
finally:
    conn.close()
