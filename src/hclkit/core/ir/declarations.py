"""
Top-level declarations, blocks and attributes.

A Configuration is the ordered list of declarations of one source buffer.
Nothing is merged or deduplicated here: repeated attributes and repeated
variable entries are kept in source order for downstream tooling.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from .base import Node, quote
from .expressions import Expr, QueryExpr
from .types import TypeExpr

# ---------------------------------------------------------------------------
# Blocks and attributes
# ---------------------------------------------------------------------------


class Assignment(Node):
    """``name = value``."""

    kind: Literal["assign"] = "assign"
    name: str
    value: Expr

    def __str__(self) -> str:
        return f"{self.name} = {self.value}"


class NamedMap(Node):
    """
    ``name ["label"] { ... }``: a nested block whose attributes are the
    key/value pairs of a map-valued attribute.
    """

    kind: Literal["named_map"] = "named_map"
    name: str
    label: str | None = None
    block: Block

    def __str__(self) -> str:
        head = self.name if self.label is None else f"{self.name} {quote(self.label)}"
        return f"{head} {self.block}"


Attribute = Assignment | NamedMap


class Block(Node):
    """Brace-delimited attribute list. Duplicate names are preserved in order."""

    kind: Literal["block"] = "block"
    attributes: list[Attribute] = Field(default_factory=list)

    def __str__(self) -> str:
        if not self.attributes:
            return "{\n}"
        body = "\n".join(str(a) for a in self.attributes)
        return "{\n" + body + "\n}"

    def get(self, name: str) -> list[Attribute]:
        """All attributes called ``name``, in source order."""
        return [a for a in self.attributes if a.name == name]


# ---------------------------------------------------------------------------
# Variable entries
# ---------------------------------------------------------------------------


class TypeEntry(Node):
    kind: Literal["type_entry"] = "type_entry"
    type_expr: TypeExpr

    def __str__(self) -> str:
        return f"type = {self.type_expr}"


class DescriptionEntry(Node):
    kind: Literal["description_entry"] = "description_entry"
    text: str = Field(description="Raw text between the quotes")

    def __str__(self) -> str:
        return f"description = {quote(self.text)}"


class DefaultEntry(Node):
    kind: Literal["default_entry"] = "default_entry"
    value: Expr

    def __str__(self) -> str:
        return f"default = {self.value}"


VariableEntry = TypeEntry | DescriptionEntry | DefaultEntry


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


class TerraformSpec(Node):
    kind: Literal["terraform"] = "terraform"
    block: Block

    def __str__(self) -> str:
        return f"terraform {self.block}"


class VariableSpec(Node):
    """
    ``variable "name" { ... }``.

    Entries may repeat in any order. All of them are kept; when an entry kind
    repeats, the last occurrence wins, which is what the ``type``,
    ``description`` and ``default`` properties return.
    """

    kind: Literal["variable"] = "variable"
    name: str
    entries: list[VariableEntry] = Field(default_factory=list)

    def _last(self, entry_cls: type) -> VariableEntry | None:
        for entry in reversed(self.entries):
            if isinstance(entry, entry_cls):
                return entry
        return None

    @property
    def type(self) -> TypeExpr | None:
        entry = self._last(TypeEntry)
        return entry.type_expr if entry is not None else None

    @property
    def description(self) -> str | None:
        entry = self._last(DescriptionEntry)
        return entry.text if entry is not None else None

    @property
    def default(self) -> Expr | None:
        entry = self._last(DefaultEntry)
        return entry.value if entry is not None else None

    @property
    def has_default(self) -> bool:
        """Distinguishes ``default = null`` from no default at all."""
        return self._last(DefaultEntry) is not None

    def __str__(self) -> str:
        head = f"variable {quote(self.name)} "
        if not self.entries:
            return head + "{\n}"
        body = "\n".join(str(e) for e in self.entries)
        return head + "{\n" + body + "\n}"


class ProviderSpec(Node):
    kind: Literal["provider"] = "provider"
    name: str
    block: Block

    def __str__(self) -> str:
        return f"provider {quote(self.name)} {self.block}"


class OutputSpec(Node):
    kind: Literal["output"] = "output"
    name: str
    block: Block

    def __str__(self) -> str:
        return f"output {quote(self.name)} {self.block}"


class ModuleSpec(Node):
    """
    ``module "name" { source = "..." ... }``.

    ``source`` is lifted out of the block; ``block`` holds the remaining
    attributes.
    """

    kind: Literal["module"] = "module"
    name: str
    source: str = Field(description="Raw text of the source string")
    block: Block

    def __str__(self) -> str:
        lines = [f"source = {quote(self.source)}"]
        lines.extend(str(a) for a in self.block.attributes)
        return f"module {quote(self.name)} " + "{\n" + "\n".join(lines) + "\n}"


class ResourceSpec(Node):
    """``resource "type" "name" { ... }``; the name may be a query escape."""

    kind: Literal["resource"] = "resource"
    resource_type: str
    name: str | QueryExpr
    block: Block

    @property
    def is_dynamic(self) -> bool:
        return isinstance(self.name, QueryExpr)

    def __str__(self) -> str:
        name = str(self.name) if isinstance(self.name, QueryExpr) else quote(self.name)
        return f"resource {quote(self.resource_type)} {name} {self.block}"


class DataSpec(Node):
    kind: Literal["data"] = "data"
    data_type: str
    name: str
    block: Block

    def __str__(self) -> str:
        return f"data {quote(self.data_type)} {quote(self.name)} {self.block}"


class LocalsSpec(Node):
    kind: Literal["locals"] = "locals"
    block: Block

    def __str__(self) -> str:
        return f"locals {self.block}"


Declaration = (
    TerraformSpec
    | VariableSpec
    | ProviderSpec
    | OutputSpec
    | ModuleSpec
    | ResourceSpec
    | DataSpec
    | LocalsSpec
)


class Configuration(Node):
    """Ordered declarations of one source buffer."""

    kind: Literal["configuration"] = "configuration"
    declarations: list[Declaration] = Field(default_factory=list)

    def __str__(self) -> str:
        return "\n\n".join(str(d) for d in self.declarations) + "\n"

    def of_kind(self, decl_cls: type) -> list[Declaration]:
        """Declarations of one kind, in source order."""
        return [d for d in self.declarations if isinstance(d, decl_cls)]


NamedMap.model_rebuild()
Block.model_rebuild()
