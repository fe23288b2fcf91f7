"""
Shared building blocks for the hclkit AST.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Span(BaseModel):
    """
    Source location of a node or token.

    Attributes:
        start: Byte offset of the first byte (UTF-8)
        end: Byte offset one past the last byte
        line: Line of ``start`` (1-indexed)
        column: Column of ``start`` (1-indexed, in characters)
    """

    start: int
    end: int
    line: int
    column: int

    model_config = ConfigDict(frozen=True)

    def to(self, other: Span | None) -> Span:
        """Span covering from the start of this span to the end of ``other``."""
        if other is None:
            return self
        return Span(start=self.start, end=other.end, line=self.line, column=self.column)


class Node(BaseModel):
    """
    Base for every AST node.

    The span is diagnostic metadata only: it is left out of ``model_dump()``
    so that two trees built from differently formatted source compare equal
    after dumping.
    """

    span: Span | None = Field(default=None, exclude=True, repr=False)

    model_config = ConfigDict(frozen=True)


def quote(text: str) -> str:
    """Wrap raw (still escaped) string text in double quotes."""
    return f'"{text}"'


