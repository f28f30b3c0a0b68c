from __future__ import annotations

from pydantic import Field

from dgload.base import ConfigBaseModel
from dgload.onto import ScenarioType


class WorkloadConfig(ConfigBaseModel):
    """Shape and length of a synthetic workload.

    Attributes:
        node_type_count: Number of node types (``Node0`` ... ``Node<T-1>``)
        node_pred_count: Number of string predicates per node type
        pred_string_len: Length of the generated predicate values
        rounds: Number of batches submitted
        scenario: Graph shape to generate
        show_batches: Log every batch before it is submitted
    """

    node_type_count: int = Field(default=50)
    node_pred_count: int = Field(default=50)
    pred_string_len: int = Field(default=20)
    rounds: int = Field(default=500000)
    scenario: ScenarioType = Field(default=ScenarioType.FULLY_CONNECTED)
    show_batches: bool = Field(default=False)
