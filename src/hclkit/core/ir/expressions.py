"""
Expression types for the hclkit AST.

Supports:
- Literals: numbers (decimal, exponent, hex), true/false, null, strings
- Interpolated strings: "${var.first}-${var.last}"
- Collections: [a, b], [for x in var.items : x], { key = value }
- References: var.name, aws_instance.web[0].id
- Function calls from a fixed allow-list: merge(a, b), length(x)
- Operators: unary - + !, binary * / + - == != > >= < <= && ||
- Ternary: cond ? a : b
- Query escape: $( raw text )

Every node renders back to equivalent source text through ``__str__``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import Field, field_validator

from .base import Node, quote

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary operators, all left-associative."""

    # Multiplicative
    MUL = "*"
    DIV = "/"
    # Additive
    ADD = "+"
    SUB = "-"
    # Comparative
    EQ = "=="
    NE = "!="
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="
    # Logical
    AND = "&&"
    OR = "||"

    @property
    def binding_power(self) -> int:
        return BINDING_POWER[self]


class UnaryOp(StrEnum):
    """Prefix operators. They bind to a single primary term."""

    NEG = "-"
    POS = "+"
    NOT = "!"


# Higher binds tighter. The ternary sits below all of these.
BINDING_POWER: dict[BinaryOp, int] = {
    BinaryOp.OR: 1,
    BinaryOp.AND: 2,
    BinaryOp.EQ: 3,
    BinaryOp.NE: 3,
    BinaryOp.GT: 3,
    BinaryOp.GE: 3,
    BinaryOp.LT: 3,
    BinaryOp.LE: 3,
    BinaryOp.ADD: 4,
    BinaryOp.SUB: 4,
    BinaryOp.MUL: 5,
    BinaryOp.DIV: 5,
}


# ---------------------------------------------------------------------------
# Literals
# ---------------------------------------------------------------------------


class NumberLiteral(Node):
    """A numeric literal. ``raw`` keeps the source spelling (e.g. 0x1F, 1e3)."""

    kind: Literal["number"] = "number"
    raw: str = Field(description="Source text of the literal")
    value: int | float = Field(description="Numeric value")

    def __str__(self) -> str:
        return self.raw


class BoolLiteral(Node):
    kind: Literal["bool"] = "bool"
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


class NullLiteral(Node):
    kind: Literal["null"] = "null"

    def __str__(self) -> str:
        return "null"


class StringLiteral(Node):
    """
    A quoted string without substitutions.

    ``value`` is the text between the quotes with escape sequences kept
    verbatim; unescaping is left to the evaluator.
    """

    kind: Literal["string"] = "string"
    value: str = Field(description="Raw text between the quotes")

    def __str__(self) -> str:
        return quote(self.value)


class TextPart(Node):
    """Literal run inside an interpolated string (escapes kept verbatim)."""

    kind: Literal["text"] = "text"
    value: str

    def __str__(self) -> str:
        return self.value


class Substitution(Node):
    """A ``${...}`` region inside an interpolated string."""

    kind: Literal["substitution"] = "substitution"
    expr: Expr | SequenceExpr

    def __str__(self) -> str:
        return f"${{{self.expr}}}"


class InterpolatedString(Node):
    """
    A quoted string containing at least one substitution.

    Examples:
        "${var.first}-${var.last}" ->
            [Substitution(var.first), TextPart("-"), Substitution(var.last)]
    """

    kind: Literal["interpolated_string"] = "interpolated_string"
    parts: list[TextPart | Substitution] = Field(default_factory=list)

    def __str__(self) -> str:
        return quote("".join(str(p) for p in self.parts))


class SequenceExpr(Node):
    """Comma-separated expressions, only valid directly inside ``${...}``."""

    kind: Literal["sequence"] = "sequence"
    elements: list[Expr] = Field(min_length=2)

    def __str__(self) -> str:
        return ", ".join(str(e) for e in self.elements)


class QueryExpr(Node):
    """
    Opaque ``$( ... )`` payload passed through to a dynamic naming mechanism.

    Accepted as a resource name and as an attribute value.
    """

    kind: Literal["query"] = "query"
    raw: str = Field(description="Text between the parentheses")

    def __str__(self) -> str:
        return f"$({self.raw})"


# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------


class NameSegment(Node):
    """A ``.name`` step (the first segment is the bare root identifier)."""

    kind: Literal["name"] = "name"
    name: str

    def __str__(self) -> str:
        return self.name


class IndexSegment(Node):
    """A ``[index]`` step."""

    kind: Literal["index"] = "index"
    index: Expr

    def __str__(self) -> str:
        return f"[{self.index}]"


class Reference(Node):
    """
    Dotted / bracket-indexed identifier chain.

    Examples:
        - var.region -> [NameSegment(var), NameSegment(region)]
        - aws_instance.web[0].id -> [web..., IndexSegment(0), NameSegment(id)]
    """

    kind: Literal["reference"] = "reference"
    path: list[NameSegment | IndexSegment] = Field(min_length=1)

    @field_validator("path")
    @classmethod
    def validate_path(
        cls, v: list[NameSegment | IndexSegment]
    ) -> list[NameSegment | IndexSegment]:
        """A reference starts with a name."""
        if v and not isinstance(v[0], NameSegment):
            raise ValueError("Reference path must start with a name segment")
        return v

    def __str__(self) -> str:
        out = []
        for i, segment in enumerate(self.path):
            if isinstance(segment, NameSegment) and i > 0:
                out.append(".")
            out.append(str(segment))
        return "".join(out)

    @property
    def root(self) -> str:
        return str(self.path[0])


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


class ForComprehension(Node):
    """``for <loop_var> in <source> :`` prefix of a list."""

    kind: Literal["for"] = "for"
    loop_var: str
    source: Reference

    def __str__(self) -> str:
        return f"for {self.loop_var} in {self.source} :"


class ListExpr(Node):
    kind: Literal["list"] = "list"
    comprehension: ForComprehension | None = None
    elements: list[Expr] = Field(default_factory=list)

    def __str__(self) -> str:
        items = ", ".join(str(e) for e in self.elements)
        if self.comprehension is not None:
            return f"[{self.comprehension} {items}]" if items else f"[{self.comprehension}]"
        return f"[{items}]"


class MapEntry(Node):
    """
    ``key = value`` pair. A bare identifier key is kept as a one-segment
    Reference; a quoted key is a StringLiteral.
    """

    kind: Literal["map_entry"] = "map_entry"
    key: Expr
    value: Expr

    def __str__(self) -> str:
        return f"{self.key} = {self.value}"


class MapExpr(Node):
    kind: Literal["map"] = "map"
    entries: list[MapEntry] = Field(default_factory=list)

    def __str__(self) -> str:
        if not self.entries:
            return "{}"
        return "{ " + ", ".join(str(e) for e in self.entries) + " }"


# ---------------------------------------------------------------------------
# Calls and operators
# ---------------------------------------------------------------------------


class FuncCall(Node):
    """
    Function call: name(arg1, arg2, ...).

    Only names on the parser's allow-list are accepted (merge, length,
    file, md5, replace, toset, concat by default).
    """

    kind: Literal["call"] = "call"
    name: str = Field(description="Function name")
    args: list[Expr] = Field(default_factory=list, description="Arguments")

    def __str__(self) -> str:
        args_str = ", ".join(str(a) for a in self.args)
        return f"{self.name}({args_str})"


class UnaryExpr(Node):
    kind: Literal["unary"] = "unary"
    op: UnaryOp
    operand: Expr

    def __str__(self) -> str:
        if isinstance(self.operand, (BinaryExpr, TernaryExpr, UnaryExpr)):
            return f"{self.op.value}({self.operand})"
        return f"{self.op.value}{self.operand}"


class BinaryExpr(Node):
    """Binary operation: left op right."""

    kind: Literal["binary"] = "binary"
    op: BinaryOp
    left: Expr
    right: Expr

    def __str__(self) -> str:
        bp = self.op.binding_power
        left = str(self.left)
        if _looser_than(self.left, bp):
            left = f"({left})"
        right = str(self.right)
        # Left-associative: an equal-precedence right operand needs grouping
        if _looser_than(self.right, bp + 1):
            right = f"({right})"
        return f"{left} {self.op.value} {right}"


class TernaryExpr(Node):
    """Conditional expression: condition ? then_expr : else_expr."""

    kind: Literal["ternary"] = "ternary"
    condition: Expr
    then_expr: Expr
    else_expr: Expr

    def __str__(self) -> str:
        condition = str(self.condition)
        if isinstance(self.condition, TernaryExpr):
            condition = f"({condition})"
        return f"{condition} ? {self.then_expr} : {self.else_expr}"


def _looser_than(expr: Expr, bp: int) -> bool:
    """True if ``expr`` binds more loosely than binding power ``bp``."""
    if isinstance(expr, TernaryExpr):
        return True
    if isinstance(expr, BinaryExpr):
        return expr.op.binding_power < bp
    return False


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = (
    NumberLiteral
    | BoolLiteral
    | NullLiteral
    | StringLiteral
    | InterpolatedString
    | ListExpr
    | MapExpr
    | Reference
    | FuncCall
    | UnaryExpr
    | BinaryExpr
    | TernaryExpr
    | QueryExpr
)

# Rebuild models for recursive forward references
Substitution.model_rebuild()
InterpolatedString.model_rebuild()
SequenceExpr.model_rebuild()
IndexSegment.model_rebuild()
Reference.model_rebuild()
ForComprehension.model_rebuild()
ListExpr.model_rebuild()
MapEntry.model_rebuild()
MapExpr.model_rebuild()
FuncCall.model_rebuild()
UnaryExpr.model_rebuild()
BinaryExpr.model_rebuild()
TernaryExpr.model_rebuild()
