from .batch import UPSERT_ID_PREFIX, Quads, UpsertQuery
from .onto import (
    STAR_ALL,
    BoolObject,
    Facet,
    IntObject,
    NodeObject,
    Quad,
    StarObject,
    StrObject,
    UpsertVar,
    VarObject,
)

__all__ = [
    "STAR_ALL",
    "UPSERT_ID_PREFIX",
    "BoolObject",
    "Facet",
    "IntObject",
    "NodeObject",
    "Quad",
    "Quads",
    "StarObject",
    "StrObject",
    "UpsertQuery",
    "UpsertVar",
    "VarObject",
]
