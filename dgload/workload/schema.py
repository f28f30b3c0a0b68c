"""Dgraph schema text for the synthetic node types."""

from __future__ import annotations


def type_name(i: int) -> str:
    return f"Node{i}"


def pred_name(j: int) -> str:
    return f"pred{j}"


def link_name(k: int) -> str:
    return f"LINK{k}"


NAME = "name"
NEXT = "NEXT"
DGRAPH_TYPE = "dgraph.type"


def build_schema(node_type_count: int, node_pred_count: int) -> str:
    """Render type definitions and predicate declarations.

    Every type lists ``name``, the string predicates, the ``NEXT`` chain edge
    and one ``LINK<k>`` edge per node type, so any node can link to any type.
    """
    parts: list[str] = []
    for i in range(node_type_count):
        parts.append(f"type {type_name(i)} {{\n")
        parts.append(f"\t{NAME}\n")
        for j in range(node_pred_count):
            parts.append(f"\t{pred_name(j)}\n")
        parts.append(f"\t{NEXT}\n")
        for k in range(node_type_count):
            parts.append(f"\t{link_name(k)}\n")
        parts.append("}\n\n")

    parts.append(f"{NAME}: string @index(term) .\n")
    for j in range(node_pred_count):
        parts.append(f"{pred_name(j)}: string @index(hash) .\n")
    parts.append(f"{NEXT}: [uid] .\n")
    for k in range(node_type_count):
        parts.append(f"{link_name(k)}: [uid] .\n")
    return "".join(parts)
