"""Tests for quad, facet and object-term models."""

import pytest
from pydantic import ValidationError
from pydgraph.proto import api_pb2 as api

from dgload.onto import FacetType
from dgload.quads.onto import (
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


# ── Object terms ─────────────────────────────────────────────────────────


def test_int_object_rejects_bool():
    with pytest.raises(ValidationError):
        IntObject(value=True)


def test_int_object_rejects_str():
    with pytest.raises(ValidationError):
        IntObject(value="5")


def test_bool_object_rejects_int():
    with pytest.raises(ValidationError):
        BoolObject(value=1)


def test_str_object_rejects_int():
    with pytest.raises(ValidationError):
        StrObject(value=3)


def test_object_kind_cannot_be_mixed():
    with pytest.raises(ValidationError):
        Quad(subject="_:a", predicate="p", obj={"kind": "int", "value": "x"})


def test_object_from_tagged_dict():
    q = Quad(subject="_:a", predicate="p", obj={"kind": "node", "id": "_:b"})
    assert isinstance(q.obj, NodeObject)


def test_objects_are_frozen():
    obj = StrObject(value="a")
    with pytest.raises(ValidationError):
        obj.value = "b"


# ── Proto conversion ─────────────────────────────────────────────────────


def test_str_quad_proto():
    nq = Quad(subject="_:a", predicate="name", obj=StrObject(value="A")).to_proto()
    assert nq.subject == "_:a"
    assert nq.predicate == "name"
    assert nq.object_value.str_val == "A"
    assert nq.object_id == ""


def test_int_quad_proto():
    nq = Quad(subject="_:a", predicate="age", obj=IntObject(value=42)).to_proto()
    assert nq.object_value.int_val == 42


def test_bool_quad_proto():
    nq = Quad(subject="_:a", predicate="ok", obj=BoolObject(value=True)).to_proto()
    assert nq.object_value.bool_val is True


def test_var_subject_and_object_proto():
    a, b = UpsertVar(id="upsert_id_0"), UpsertVar(id="upsert_id_1")
    nq = Quad(subject=a, predicate="LINK0", obj=VarObject(var=b)).to_proto()
    assert nq.subject == "uid(upsert_id_0)"
    assert nq.object_id == "uid(upsert_id_1)"


def test_star_object_proto():
    nq = Quad(subject="0x1", predicate="name", obj=StarObject()).to_proto()
    assert nq.object_value.default_val == STAR_ALL


# ── Facets ───────────────────────────────────────────────────────────────


def test_string_facet_is_sanitized():
    f = Facet.string("source", ' "web" ')
    assert f.value == "web"
    assert f.type == FacetType.STRING


def test_datetime_facet_is_verbatim():
    f = Facet.datetime("since", "2020-01-01T00:00:00Z")
    assert f.value == "2020-01-01T00:00:00Z"
    assert f.type == FacetType.DATETIME


def test_facet_proto():
    pf = Facet.datetime("since", "2020-01-01T00:00:00Z").to_proto()
    assert pf.key == "since"
    assert pf.value == b"2020-01-01T00:00:00Z"
    assert pf.val_type == api.Facet.DATETIME
    assert list(pf.tokens) == ["2020-01-01T00:00:00Z"]


def test_quad_carries_facets_in_order():
    facets = (Facet.string("a", "1"), Facet.string("b", "2"))
    nq = Quad(
        subject="_:a", predicate="p", obj=StrObject(value="v"), facets=facets
    ).to_proto()
    assert [f.key for f in nq.facets] == ["a", "b"]


# ── Rendering ────────────────────────────────────────────────────────────


def test_render_literal():
    q = Quad(subject="_:a", predicate="name", obj=StrObject(value="A"))
    assert q.render() == '_:a name "A" .'


def test_render_edge_with_facet():
    q = Quad(
        subject=UpsertVar(id="upsert_id_0"),
        predicate="NEXT",
        obj=NodeObject(id="_:b"),
        facets=(Facet.string("w", "x"),),
    )
    assert q.render() == 'uid(upsert_id_0) NEXT _:b (w="x") .'


def test_render_star():
    q = Quad(subject="0x1", predicate="name", obj=StarObject())
    assert q.render() == "0x1 name * ."
