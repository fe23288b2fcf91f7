"""
hclkit abstract syntax tree.

All nodes are frozen pydantic models tagged with a ``kind`` literal and an
optional source ``span``. Types are organized into submodules and re-exported
here.
"""

from .base import (
    Node,
    Span,
)

# Declarations
from .declarations import (
    Assignment,
    Attribute,
    Block,
    Configuration,
    DataSpec,
    Declaration,
    DefaultEntry,
    DescriptionEntry,
    LocalsSpec,
    ModuleSpec,
    NamedMap,
    OutputSpec,
    ProviderSpec,
    ResourceSpec,
    TerraformSpec,
    TypeEntry,
    VariableEntry,
    VariableSpec,
)

# Expressions
from .expressions import (
    BINDING_POWER,
    BinaryExpr,
    BinaryOp,
    BoolLiteral,
    Expr,
    ForComprehension,
    FuncCall,
    IndexSegment,
    InterpolatedString,
    ListExpr,
    MapEntry,
    MapExpr,
    NameSegment,
    NullLiteral,
    NumberLiteral,
    QueryExpr,
    Reference,
    SequenceExpr,
    StringLiteral,
    Substitution,
    TernaryExpr,
    TextPart,
    UnaryExpr,
    UnaryOp,
)

# Type expressions
from .types import (
    ListType,
    MapType,
    ObjectType,
    PrimitiveKind,
    PrimitiveType,
    SetType,
    TupleType,
    TypeExpr,
)

__all__ = [
    "Node",
    "Span",
    # Declarations
    "Assignment",
    "Attribute",
    "Block",
    "Configuration",
    "DataSpec",
    "Declaration",
    "DefaultEntry",
    "DescriptionEntry",
    "LocalsSpec",
    "ModuleSpec",
    "NamedMap",
    "OutputSpec",
    "ProviderSpec",
    "ResourceSpec",
    "TerraformSpec",
    "TypeEntry",
    "VariableEntry",
    "VariableSpec",
    # Expressions
    "BINDING_POWER",
    "BinaryExpr",
    "BinaryOp",
    "BoolLiteral",
    "Expr",
    "ForComprehension",
    "FuncCall",
    "IndexSegment",
    "InterpolatedString",
    "ListExpr",
    "MapEntry",
    "MapExpr",
    "NameSegment",
    "NullLiteral",
    "NumberLiteral",
    "QueryExpr",
    "Reference",
    "SequenceExpr",
    "StringLiteral",
    "Substitution",
    "TernaryExpr",
    "TextPart",
    "UnaryExpr",
    "UnaryOp",
    # Types
    "ListType",
    "MapType",
    "ObjectType",
    "PrimitiveKind",
    "PrimitiveType",
    "SetType",
    "TupleType",
    "TypeExpr",
]
