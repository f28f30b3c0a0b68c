"""Data model of quads: facts and edges submitted in a mutation batch.

A :class:`Quad` has a subject, a predicate, exactly one object term and an
ordered tuple of facets. The object is a tagged variant; each variant knows
how to fill the object fields of an ``api.NQuad`` and how to render itself
for diagnostics.

Example:
    >>> q = Quad(subject="_:a", predicate="name", obj=StrObject(value="A"))
    >>> q.render()
    '_:a name "A" .'
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import ConfigDict, Field, StrictBool, StrictInt, StrictStr
from pydgraph.proto import api_pb2 as api

from dgload.base import ConfigBaseModel
from dgload.onto import FacetType
from dgload.sanitize import remove_invalid_chars

STAR_ALL = "_STAR_ALL"


class FrozenModel(ConfigBaseModel):
    model_config = ConfigDict(frozen=True)


class UpsertVar(FrozenModel):
    """Query variable bound server-side to the uid of a looked-up node."""

    id: StrictStr

    def ref(self) -> str:
        return f"uid({self.id})"

    def __str__(self) -> str:
        return self.ref()


class Facet(FrozenModel):
    """Typed key/value metadata attached to one quad."""

    key: StrictStr
    value: StrictStr
    type: FacetType = FacetType.STRING

    @classmethod
    def string(cls, key: str, value: str) -> Facet:
        """String facet; the value is sanitized."""
        return cls(key=key, value=remove_invalid_chars(value), type=FacetType.STRING)

    @classmethod
    def datetime(cls, key: str, value: str) -> Facet:
        """Datetime facet; the value is passed through untouched."""
        return cls(key=key, value=value, type=FacetType.DATETIME)

    def to_proto(self) -> api.Facet:
        return api.Facet(
            key=self.key,
            value=self.value.encode(),
            val_type=_FACET_VAL_TYPES[self.type],
            tokens=[self.value],
        )

    def render(self) -> str:
        if self.type == FacetType.STRING:
            return f'{self.key}="{self.value}"'
        return f"{self.key}={self.value}"


_FACET_VAL_TYPES = {
    FacetType.STRING: api.Facet.STRING,
    FacetType.DATETIME: api.Facet.DATETIME,
}


class StrObject(FrozenModel):
    kind: Literal["str"] = "str"
    value: StrictStr

    def proto_fields(self) -> dict[str, Any]:
        return {"object_value": api.Value(str_val=self.value)}

    def render(self) -> str:
        return f'"{self.value}"'


class IntObject(FrozenModel):
    kind: Literal["int"] = "int"
    value: StrictInt

    def proto_fields(self) -> dict[str, Any]:
        return {"object_value": api.Value(int_val=self.value)}

    def render(self) -> str:
        return f'"{self.value}"^^<xs:int>'


class BoolObject(FrozenModel):
    kind: Literal["bool"] = "bool"
    value: StrictBool

    def proto_fields(self) -> dict[str, Any]:
        return {"object_value": api.Value(bool_val=self.value)}

    def render(self) -> str:
        return f'"{str(self.value).lower()}"^^<xs:boolean>'


class NodeObject(FrozenModel):
    """Edge target given by a literal blank-node or uid."""

    kind: Literal["node"] = "node"
    id: StrictStr

    def proto_fields(self) -> dict[str, Any]:
        return {"object_id": self.id}

    def render(self) -> str:
        return self.id


class VarObject(FrozenModel):
    """Edge target given by an upsert variable."""

    kind: Literal["var"] = "var"
    var: UpsertVar

    def proto_fields(self) -> dict[str, Any]:
        return {"object_id": self.var.ref()}

    def render(self) -> str:
        return self.var.ref()


class StarObject(FrozenModel):
    """Wildcard matching every value of a predicate; only valid in deletes."""

    kind: Literal["star"] = "star"

    def proto_fields(self) -> dict[str, Any]:
        return {"object_value": api.Value(default_val=STAR_ALL)}

    def render(self) -> str:
        return "*"


ObjectTerm = Annotated[
    Union[StrObject, IntObject, BoolObject, NodeObject, VarObject, StarObject],
    Field(discriminator="kind"),
]


class Quad(FrozenModel):
    """One subject-predicate-object fact or edge."""

    subject: StrictStr | UpsertVar
    predicate: StrictStr
    obj: ObjectTerm
    facets: tuple[Facet, ...] = ()

    @property
    def subject_ref(self) -> str:
        if isinstance(self.subject, UpsertVar):
            return self.subject.ref()
        return self.subject

    def to_proto(self) -> api.NQuad:
        return api.NQuad(
            subject=self.subject_ref,
            predicate=self.predicate,
            facets=[f.to_proto() for f in self.facets],
            **self.obj.proto_fields(),
        )

    def render(self) -> str:
        line = f"{self.subject_ref} {self.predicate} {self.obj.render()}"
        if self.facets:
            line += " (" + ", ".join(f.render() for f in self.facets) + ")"
        return line + " ."
