"""Core enumerations shared across dgload.

Key Components:
    - BaseEnum: Base class for string-based enumerations
    - FacetType: Value types supported for facets attached to quads
    - FailureKind: Classification outcomes of a failed Dgraph operation
    - ScenarioType: Workload scenarios the harness can drive
"""

from strenum import StrEnum


class BaseEnum(StrEnum):
    """Base class for string-based enumerations."""

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return self.value


class FacetType(BaseEnum):
    """Value types of a facet.

    Attributes:
        STRING: Free-form text, sanitized before transmission
        DATETIME: RFC 3339 timestamp, transmitted verbatim
    """

    STRING = "string"
    DATETIME = "datetime"


class FailureKind(BaseEnum):
    """How a failed alter/mutate is handled by the retry loop.

    Attributes:
        RETRYABLE: Write conflict or stale transaction; resubmit after a wait
        TRANSPORT: Dead channel; rebuild the connection pool, then resubmit
        UNCLASSIFIED: Anything else; fatal, never retried
    """

    RETRYABLE = "retryable"
    TRANSPORT = "transport"
    UNCLASSIFIED = "unclassified"


class ScenarioType(BaseEnum):
    """Synthetic graph shapes generated by the workload drivers."""

    UNCONNECTED = "unconnected"
    CONNECTED_SUBGRAPHS = "connected-subgraphs"
    FULLY_CONNECTED = "fully-connected"
