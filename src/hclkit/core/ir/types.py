"""
Type-expression nodes (the ``type = ...`` sublanguage of variable blocks).
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import Field

from .base import Node


class PrimitiveKind(StrEnum):
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"


class PrimitiveType(Node):
    kind: Literal["primitive"] = "primitive"
    name: PrimitiveKind

    def __str__(self) -> str:
        return self.name.value


class ListType(Node):
    kind: Literal["list_type"] = "list_type"
    element: TypeExpr

    def __str__(self) -> str:
        return f"list({self.element})"


class SetType(Node):
    kind: Literal["set_type"] = "set_type"
    element: TypeExpr

    def __str__(self) -> str:
        return f"set({self.element})"


class MapType(Node):
    kind: Literal["map_type"] = "map_type"
    element: TypeExpr

    def __str__(self) -> str:
        return f"map({self.element})"


class TupleType(Node):
    """tuple([T, T, ...]); the element list may be empty."""

    kind: Literal["tuple_type"] = "tuple_type"
    elements: list[TypeExpr] = Field(default_factory=list)

    def __str__(self) -> str:
        return "tuple([" + ", ".join(str(e) for e in self.elements) + "])"


class ObjectType(Node):
    """
    object({ field = T, ... }).

    Field order follows the source. Duplicate names are rejected by the
    parser, so the mapping is unambiguous.
    """

    kind: Literal["object_type"] = "object_type"
    field_types: dict[str, TypeExpr] = Field(default_factory=dict)

    def __str__(self) -> str:
        body = ", ".join(f"{name} = {ty}" for name, ty in self.field_types.items())
        return "object({" + body + "})"


TypeExpr = PrimitiveType | ListType | SetType | MapType | TupleType | ObjectType

ListType.model_rebuild()
SetType.model_rebuild()
MapType.model_rebuild()
TupleType.model_rebuild()
ObjectType.model_rebuild()
