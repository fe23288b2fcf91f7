"""
Error types for HCL lexing and parsing.

Every failure aborts the parse. The raised error carries the byte offset and
line/column of the offending token plus enough context to render a caret
diagnostic.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ir.base import Span


class ErrorKind(StrEnum):
    """Machine-readable error categories."""

    # Lexical
    UNTERMINATED_STRING = "unterminated_string"
    UNTERMINATED_COMMENT = "unterminated_comment"
    UNTERMINATED_QUERY = "unterminated_query"
    INVALID_NUMBER = "invalid_number"
    UNEXPECTED_CHARACTER = "unexpected_character"

    # Syntactic
    UNEXPECTED_TOKEN = "unexpected_token"
    EXPECTED_ONE_OF = "expected_one_of"
    UNKNOWN_FUNCTION = "unknown_function"
    DUPLICATE_FIELD = "duplicate_field"
    MALFORMED_TERNARY = "malformed_ternary"
    NESTING_TOO_DEEP = "nesting_too_deep"


class HclError(Exception):
    """Base exception for all hclkit errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.location()}: {self.message}"
        return self.message


class ParseError(HclError):
    """
    Raised when source text cannot be turned into a Configuration.

    Attributes:
        kind: Error category
        span: Source span of the offending token or character
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        span: Span,
        context: ErrorContext | None = None,
    ):
        self.kind = kind
        self.span = span
        super().__init__(message, context)

    @property
    def byte_offset(self) -> int:
        return self.span.start

    @property
    def line(self) -> int:
        return self.span.line

    @property
    def column(self) -> int:
        return self.span.column

    def render(self) -> str:
        """Render the error with a caret snippet when source context is known."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return f"{self.line}:{self.column}: {self.message}"


class LexError(ParseError):
    """
    Raised when the source cannot be tokenized.

    Examples:
    - Unterminated string literal
    - Unterminated block comment
    - Malformed numeric literal
    """

    pass


class HclSyntaxError(ParseError):
    """
    Raised when the token stream does not match the grammar.

    Examples:
    - Missing label or brace
    - Unknown function name
    - Duplicate object type field
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        span: Span,
        context: ErrorContext | None = None,
        expected: tuple[str, ...] = (),
    ):
        self.expected = expected
        super().__init__(kind, message, span, context)


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        source_name: Name of the source buffer (file name or "<input>")
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source lines surrounding the error
    """

    source_name: str
    line: int
    column: int
    snippet: str | None = None

    def location(self) -> str:
        return f"{self.source_name}:{self.line}:{self.column}"

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "main.tf:10:5" followed by the snippet
        """
        if self.snippet:
            return f"{self.location()}\n{self._format_snippet()}"
        return self.location()

    def _format_snippet(self) -> str:
        """Format code snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippet starts 2 lines before the error (see extract_snippet)
        start_line = max(1, self.line - 2)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^")

        return "\n".join(formatted)


def extract_snippet(source: str, line: int, radius: int = 2) -> str:
    """Return the source lines within ``radius`` lines of ``line``."""
    lines = source.split("\n")
    start = max(1, line - radius)
    end = min(len(lines), line + radius)
    return "\n".join(lines[start - 1 : end])


def _context(source: str | None, source_name: str, span: Span) -> ErrorContext:
    snippet = extract_snippet(source, span.line) if source is not None else None
    return ErrorContext(
        source_name=source_name,
        line=span.line,
        column=span.column,
        snippet=snippet,
    )


def make_lex_error(
    kind: ErrorKind,
    message: str,
    span: Span,
    source: str | None = None,
    source_name: str = "<input>",
) -> LexError:
    """
    Helper to create a LexError with context.

    Args:
        kind: Lexical error category
        message: Error description
        span: Location of the offending character(s)
        source: Full source text, used for the snippet
        source_name: Name used in the location prefix

    Returns:
        LexError with context attached
    """
    return LexError(kind, message, span, _context(source, source_name, span))


def make_syntax_error(
    kind: ErrorKind,
    message: str,
    span: Span,
    source: str | None = None,
    source_name: str = "<input>",
    expected: tuple[str, ...] = (),
) -> HclSyntaxError:
    """Helper to create an HclSyntaxError with context."""
    return HclSyntaxError(
        kind,
        message,
        span,
        _context(source, source_name, span),
        expected=expected,
    )
