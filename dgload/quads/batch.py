"""Accumulation of one mutation batch, including upsert lookups.

:class:`Quads` collects the set and delete quads of one transaction. Nodes
whose uid is not known to the caller are referenced through
:meth:`Quads.add_upsert_query`, which registers a filtered lookup executed by
Dgraph right before the mutation; the returned :class:`UpsertVar` can be used
as a subject or edge object anywhere in the same batch.

Example:
    >>> quads = Quads()
    >>> quads.set_str("_:a", "name", "A")
    >>> b = quads.add_upsert_query("name", "B", "Node1")
    >>> quads.set_rel("_:a", "LINK1", b)
    >>> quads.size()
    2

The builder is not thread-safe; one batch belongs to one workload round.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from pydgraph.proto import api_pb2 as api

from dgload.sanitize import remove_invalid_chars

from .onto import (
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

logger = logging.getLogger(__name__)

UPSERT_ID_PREFIX = "upsert_id_"


class UpsertQuery(NamedTuple):
    """Lookup binding ``var`` to nodes with ``field == value`` of ``node_type``."""

    var: UpsertVar
    field: str
    value: str
    node_type: str

    def stanza(self, index: int) -> str:
        return (
            f'\tqu{index}(func: eq({self.field}, "{self.value}")) '
            f"@filter(type({self.node_type})) {{\n"
            f"\t\t{self.var.id} as uid\n"
            "\t}\n"
        )


def _edge_target(obj: str | UpsertVar) -> NodeObject | VarObject:
    if isinstance(obj, UpsertVar):
        return VarObject(var=obj)
    return NodeObject(id=obj)


class Quads:
    """Set/delete quads and upsert lookups of one transaction."""

    def __init__(self):
        self.set_quads: list[Quad] = []
        self.del_quads: list[Quad] = []
        self.upserts: dict[tuple[str, str, str], UpsertQuery] = {}

    # ------------------------------------------------------------------
    # Set quads
    # ------------------------------------------------------------------

    def set_str(
        self, subject: str | UpsertVar, predicate: str, value: str, *facets: Facet
    ) -> None:
        """Add a string property; dropped if the value sanitizes to ``""``."""
        value = remove_invalid_chars(value)
        if not value:
            return
        self._set(subject, predicate, StrObject(value=value), facets)

    def set_int(
        self, subject: str | UpsertVar, predicate: str, value: int, *facets: Facet
    ) -> None:
        self._set(subject, predicate, IntObject(value=value), facets)

    def set_bool(
        self, subject: str | UpsertVar, predicate: str, value: bool, *facets: Facet
    ) -> None:
        self._set(subject, predicate, BoolObject(value=value), facets)

    def set_rel(
        self,
        subject: str | UpsertVar,
        predicate: str,
        obj: str | UpsertVar,
        *facets: Facet,
    ) -> None:
        """Add an edge; either end may be a literal id or an upsert variable."""
        self._set(subject, predicate, _edge_target(obj), facets)

    def _set(self, subject, predicate, obj, facets) -> None:
        self.set_quads.append(
            Quad(subject=subject, predicate=predicate, obj=obj, facets=facets)
        )

    # ------------------------------------------------------------------
    # Delete quads
    # ------------------------------------------------------------------

    def del_prop(self, subject: str | UpsertVar, predicate: str) -> None:
        """Remove every value of a node property."""
        self.del_quads.append(
            Quad(subject=subject, predicate=predicate, obj=StarObject())
        )

    def del_rel(
        self, subject: str | UpsertVar, predicate: str, obj: str | UpsertVar
    ) -> None:
        """Remove one edge."""
        self.del_quads.append(
            Quad(subject=subject, predicate=predicate, obj=_edge_target(obj))
        )

    # ------------------------------------------------------------------
    # Upserts
    # ------------------------------------------------------------------

    def add_upsert_query(self, field: str, value: str, node_type: str) -> UpsertVar:
        """Return the variable bound to nodes of ``node_type`` with ``field == value``.

        Requests with the same sanitized value, field and node type share a
        variable; new keys get the next sequential id.
        """
        value = remove_invalid_chars(value)
        key = (value, field, node_type)
        query = self.upserts.get(key)
        if query is None:
            var = UpsertVar(id=f"{UPSERT_ID_PREFIX}{len(self.upserts)}")
            query = UpsertQuery(var, field, value, node_type)
            self.upserts[key] = query
        return query.var

    def upsert_query(self) -> str:
        """Query block binding every registered upsert variable."""
        stanzas = "".join(q.stanza(i) for i, q in enumerate(self.upserts.values()))
        return "query {\n" + stanzas + "}"

    # ------------------------------------------------------------------
    # Batch lifecycle
    # ------------------------------------------------------------------

    def size(self) -> int:
        """Number of set and delete quads; upsert lookups are not counted."""
        return len(self.set_quads) + len(self.del_quads)

    def __len__(self) -> int:
        return self.size()

    def clear(self) -> None:
        self.set_quads = []
        self.del_quads = []
        self.upserts = {}

    def request(self) -> api.Request:
        """Commit-now request carrying the whole batch."""
        mutation = api.Mutation(
            **{
                "set": [q.to_proto() for q in self.set_quads],
                "del": [q.to_proto() for q in self.del_quads],
            },
            commit_now=True,
        )
        request = api.Request(mutations=[mutation], commit_now=True)
        if self.upserts:
            request.query = self.upsert_query()
        return request

    def describe(self) -> str:
        """Human-readable dump of the batch, for logging only."""
        lines: list[str] = []
        if self.upserts:
            lines += ["# Upsert Query", self.upsert_query(), ""]
        if self.set_quads:
            lines.append("# Set Quads")
            lines += [q.render() for q in self.set_quads]
        if self.del_quads:
            lines.append("# Del Quads")
            lines += [q.render() for q in self.del_quads]
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()
