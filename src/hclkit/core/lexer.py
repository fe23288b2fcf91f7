"""
Lexer/Tokenizer for HCL configuration source.

Converts raw text into a stream of tokens with source location tracking.
Whitespace and comments are trivia and never reach the parser. Keywords are
not reserved: every word is an IDENTIFIER and the parser decides its meaning
from position.

Quoted strings are scanned as a single STRING token holding the raw text
between the quotes. Interpolation is resolved later by ``scan_template``,
which re-lexes the string body and switches into substitution mode at each
``${``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from .config import DEFAULT_MAX_DEPTH
from .errors import ErrorKind, LexError, make_lex_error
from .ir.base import Span

logger = logging.getLogger(__name__)


class TokenType(Enum):
    """Token types in HCL source."""

    # Literals
    IDENTIFIER = "identifier"
    STRING = "string_literal"
    NUMBER = "number"
    QUERY = "query"

    # Delimiters
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","
    EQUALS = "="
    QUESTION = "?"
    COLON = ":"
    DOT = "."

    # Operators
    STAR = "*"
    SLASH = "/"
    PLUS = "+"
    MINUS = "-"
    DOUBLE_EQUALS = "=="
    NOT_EQUALS = "!="
    GREATER_EQUAL = ">="
    LESS_EQUAL = "<="
    GREATER_THAN = ">"
    LESS_THAN = "<"
    AND = "&&"
    OR = "||"
    BANG = "!"

    # End of input
    EOF = "end of input"


# Two-character operators are checked before their one-character prefixes
TWO_CHAR_TOKENS: dict[str, TokenType] = {
    "==": TokenType.DOUBLE_EQUALS,
    "!=": TokenType.NOT_EQUALS,
    ">=": TokenType.GREATER_EQUAL,
    "<=": TokenType.LESS_EQUAL,
    "&&": TokenType.AND,
    "||": TokenType.OR,
}

ONE_CHAR_TOKENS: dict[str, TokenType] = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
    "=": TokenType.EQUALS,
    "?": TokenType.QUESTION,
    ":": TokenType.COLON,
    ".": TokenType.DOT,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    ">": TokenType.GREATER_THAN,
    "<": TokenType.LESS_THAN,
    "!": TokenType.BANG,
}

# Tokens that can end an operand; a '.' after one of them is member access
VALUE_END_TOKENS = frozenset(
    {
        TokenType.IDENTIFIER,
        TokenType.NUMBER,
        TokenType.STRING,
        TokenType.QUERY,
        TokenType.RPAREN,
        TokenType.RBRACKET,
        TokenType.RBRACE,
    }
)

# Non-breaking and zero-width characters that count as whitespace
EXTRA_WHITESPACE = frozenset("\ufeff\u2060\u200b\u00a0")

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _is_ident_start(ch: str) -> bool:
    return ch.isascii() and (ch.isalpha() or ch == "_")


def _is_ident_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch in "_-")


@dataclass
class Token:
    """
    A single token.

    Attributes:
        type: Type of token
        value: Token text; for STRING and QUERY the raw text between the
            delimiters
        span: Byte span and line/column of the whole token
    """

    type: TokenType
    value: str
    span: Span

    @property
    def line(self) -> int:
        return self.span.line

    @property
    def column(self) -> int:
        return self.span.column

    def describe(self) -> str:
        """Human-readable form for error messages."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.STRING:
            return f'string "{self.value}"'
        if self.type in (TokenType.IDENTIFIER, TokenType.NUMBER):
            return f"{self.type.value} '{self.value}'"
        if self.type == TokenType.QUERY:
            return "query $(...)"
        return f"'{self.type.value}'"

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """
    Lexer for HCL source.

    A lexer can start part-way into a buffer (``offset``/``line``/``column``
    describe where ``text`` begins in the original source); the template
    scanner relies on this to re-lex string bodies with absolute spans.
    """

    def __init__(
        self,
        text: str,
        source_name: str = "<input>",
        *,
        source: str | None = None,
        offset: int = 0,
        line: int = 1,
        column: int = 1,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        """
        Initialize lexer.

        Args:
            text: Text to tokenize
            source_name: Name used in error locations
            source: Complete source buffer for error snippets (defaults to text)
            offset: Byte offset of ``text[0]`` in the source
            line: Line of ``text[0]``
            column: Column of ``text[0]``
            max_depth: Deepest allowed nesting of strings inside substitutions
        """
        self.text = text
        self.source_name = source_name
        self.source = source if source is not None else text
        self.pos = 0
        self.offset = offset
        self.line = line
        self.column = column
        self.max_depth = max_depth
        self.tokens: list[Token] = []

    # -- Character navigation --

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating byte offset and line/column."""
        if self.pos < len(self.text):
            ch = self.text[self.pos]
            self.offset += len(ch.encode("utf-8"))
            if ch == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def mark(self) -> tuple[int, int, int]:
        return (self.offset, self.line, self.column)

    def span_from(self, start: tuple[int, int, int]) -> Span:
        offset, line, column = start
        return Span(start=offset, end=self.offset, line=line, column=column)

    def error(self, kind: ErrorKind, message: str, start: tuple[int, int, int]) -> LexError:
        return make_lex_error(kind, message, self.span_from(start), self.source, self.source_name)

    # -- Trivia --

    def skip_trivia(self) -> None:
        """Skip whitespace and comments (#, //, /* */)."""
        while True:
            ch = self.current_char()
            if ch is None:
                return
            if ch.isspace() or ch in EXTRA_WHITESPACE:
                self.advance()
            elif ch == "#" or (ch == "/" and self.peek_char() == "/"):
                while self.current_char() not in (None, "\n"):
                    self.advance()
            elif ch == "/" and self.peek_char() == "*":
                self.skip_block_comment()
            else:
                return

    def skip_block_comment(self) -> None:
        """Skip a /* ... */ comment. Comments do not nest."""
        start = self.mark()
        self.advance()
        self.advance()
        while True:
            ch = self.current_char()
            if ch is None:
                raise self.error(
                    ErrorKind.UNTERMINATED_COMMENT, "Unterminated block comment", start
                )
            if ch == "*" and self.peek_char() == "/":
                self.advance()
                self.advance()
                return
            self.advance()

    # -- Token readers --

    def read_string(self, nesting: int = 0) -> str:
        """
        Read a quoted string and return the raw text between the quotes.

        Escapes are kept verbatim. Inside ``${ ... }`` regions braces are
        counted and nested strings are read recursively, so a quote inside a
        substitution does not end the outer string. Strings nested deeper
        than ``max_depth`` raise NESTING_TOO_DEEP.
        """
        start = self.mark()
        if nesting > self.max_depth:
            raise self.error(
                ErrorKind.NESTING_TOO_DEEP,
                f"Strings nested deeper than {self.max_depth} levels",
                start,
            )
        self.advance()  # skip opening quote

        chars: list[str] = []
        depth = 0
        while True:
            ch = self.current_char()
            if ch is None:
                raise self.error(
                    ErrorKind.UNTERMINATED_STRING, "Unterminated string literal", start
                )

            if depth == 0:
                if ch == '"':
                    break
                if ch == "\\":
                    chars.append(ch)
                    self.advance()
                    escaped = self.current_char()
                    if escaped is None:
                        raise self.error(
                            ErrorKind.UNTERMINATED_STRING, "Unterminated string literal", start
                        )
                    chars.append(escaped)
                    self.advance()
                    continue
                if ch == "$" and self.peek_char() == "{":
                    chars.append("${")
                    self.advance()
                    self.advance()
                    depth = 1
                    continue
            else:
                if ch == '"':
                    chars.append('"' + self.read_string(nesting + 1) + '"')
                    continue
                if ch == "{":
                    depth += 1
                elif ch == "}":
                    depth -= 1

            chars.append(ch)
            self.advance()

        self.advance()  # skip closing quote
        return "".join(chars)

    def read_number(self, after_dot: bool = False) -> str:
        """
        Read a numeric literal.

        Forms: 0x1F, 42, 3.14, 1., .5, 1e10, 2.5E-3, 1.e3. Directly after a
        '.' only plain digits are read, so ``list.0.name`` indexes rather than
        producing a float.
        """
        start = self.mark()
        begin = self.pos

        if self.current_char() == "0" and self.peek_char() == "x" and not after_dot:
            self.advance()
            self.advance()
            if self.current_char() not in HEX_DIGITS:
                raise self.error(ErrorKind.INVALID_NUMBER, "Hex literal has no digits", start)
            while self.current_char() in HEX_DIGITS:
                self.advance()
        else:
            self._read_digits()
            if not after_dot:
                if self.current_char() == "." and self._decimal_point_follows():
                    self.advance()
                    self._read_digits()
                if self.current_char() in ("e", "E"):
                    self.advance()
                    if self.current_char() in ("+", "-"):
                        self.advance()
                    if not (self.current_char() or "").isdigit():
                        raise self.error(
                            ErrorKind.INVALID_NUMBER, "Exponent has no digits", start
                        )
                    self._read_digits()

        ch = self.current_char()
        if ch is not None and _is_ident_char(ch) and ch != "-":
            while self.current_char() is not None and _is_ident_char(self.current_char()):
                self.advance()
            raise self.error(
                ErrorKind.INVALID_NUMBER,
                f"Malformed number: {self.text[begin:self.pos]!r}",
                start,
            )

        return self.text[begin : self.pos]

    def _read_digits(self) -> None:
        while (self.current_char() or "").isdigit():
            self.advance()

    def _decimal_point_follows(self) -> bool:
        """A '.' after digits is a decimal point unless a name follows it."""
        nxt = self.peek_char()
        if nxt is None or nxt.isdigit():
            return True
        if nxt in ("e", "E"):
            after = self.peek_char(2)
            if after in ("+", "-"):
                after = self.peek_char(3)
            return after is not None and after.isdigit()
        return not _is_ident_start(nxt) and nxt != "."

    def read_identifier(self) -> str:
        """Read an identifier: [A-Za-z_][A-Za-z0-9_-]*."""
        begin = self.pos
        while self.current_char() is not None and _is_ident_char(self.current_char()):
            self.advance()
        return self.text[begin : self.pos]

    def read_query(self) -> str:
        """Read ``$( ... )`` and return the raw text up to the first unmatched ')'."""
        start = self.mark()
        self.advance()  # $
        self.advance()  # (
        begin = self.pos
        depth = 0
        while True:
            ch = self.current_char()
            if ch is None:
                raise self.error(ErrorKind.UNTERMINATED_QUERY, "Unterminated query escape", start)
            if ch == "(":
                depth += 1
            elif ch == ")":
                if depth == 0:
                    break
                depth -= 1
            self.advance()
        raw = self.text[begin : self.pos]
        self.advance()  # )
        return raw

    # -- Tokenizing --

    def next_token(self) -> Token | None:
        """Read one token after skipping trivia. Returns None at end of text."""
        self.skip_trivia()

        ch = self.current_char()
        if ch is None:
            return None

        start = self.mark()

        # Strings
        if ch == '"':
            value = self.read_string()
            return self._emit(TokenType.STRING, value, start)

        # Numbers
        if ch.isdigit():
            after_dot = bool(self.tokens) and self.tokens[-1].type == TokenType.DOT
            value = self.read_number(after_dot=after_dot)
            return self._emit(TokenType.NUMBER, value, start)

        # Leading-dot decimal (.5) where no value precedes it
        if ch == "." and (self.peek_char() or "").isdigit() and not self._follows_value():
            value = self.read_number()
            return self._emit(TokenType.NUMBER, value, start)

        # Identifiers (keywords are contextual)
        if _is_ident_start(ch):
            value = self.read_identifier()
            return self._emit(TokenType.IDENTIFIER, value, start)

        # Query escape
        if ch == "$" and self.peek_char() == "(":
            value = self.read_query()
            return self._emit(TokenType.QUERY, value, start)

        # Operators and punctuation
        two = ch + (self.peek_char() or "")
        if two in TWO_CHAR_TOKENS:
            self.advance()
            self.advance()
            return self._emit(TWO_CHAR_TOKENS[two], two, start)

        if ch in ONE_CHAR_TOKENS:
            self.advance()
            return self._emit(ONE_CHAR_TOKENS[ch], ch, start)

        self.advance()
        raise self.error(ErrorKind.UNEXPECTED_CHARACTER, f"Unexpected character: {ch!r}", start)

    def _follows_value(self) -> bool:
        return bool(self.tokens) and self.tokens[-1].type in VALUE_END_TOKENS

    def _emit(self, token_type: TokenType, value: str, start: tuple[int, int, int]) -> Token:
        token = Token(token_type, value, self.span_from(start))
        self.tokens.append(token)
        return token

    def _eof(self) -> Token:
        token = Token(TokenType.EOF, "", self.span_from(self.mark()))
        self.tokens.append(token)
        return token

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire text.

        Returns:
            List of tokens ending with EOF

        Raises:
            LexError: If the text cannot be tokenized
        """
        while self.next_token() is not None:
            pass
        self._eof()
        return self.tokens

    def tokenize_substitution(self) -> list[Token]:
        """
        Tokenize the body of a ``${ ... }`` region.

        Stops after the '}' that closes the region (the first '}' at brace
        depth zero); that RBRACE is the last token before EOF. The lexer is
        left positioned just after it.
        """
        depth = 0
        while True:
            token = self.next_token()
            if token is None:
                # The enclosing string was already checked for termination,
                # so this only happens for a substitution left open at the
                # very end of the string body.
                eof = self._eof()
                raise make_lex_error(
                    ErrorKind.UNTERMINATED_STRING,
                    "Unterminated interpolation: missing '}'",
                    eof.span,
                    self.source,
                    self.source_name,
                )
            if token.type == TokenType.LBRACE:
                depth += 1
            elif token.type == TokenType.RBRACE:
                if depth == 0:
                    break
                depth -= 1
        self._eof()
        return self.tokens


# ---------------------------------------------------------------------------
# String / interpolation sub-lexer
# ---------------------------------------------------------------------------


@dataclass
class TemplateText:
    """Literal run of a string body, escapes kept verbatim."""

    value: str
    span: Span


@dataclass
class TemplateSubstitution:
    """Tokens of one ``${ ... }`` region, ending with RBRACE and EOF."""

    tokens: list[Token]
    span: Span


TemplateChunk = TemplateText | TemplateSubstitution


def scan_template(
    token: Token,
    source: str | None = None,
    source_name: str = "<input>",
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Iterator[TemplateChunk]:
    """
    Split a STRING token's body into literal text and substitution regions.

    State machine: TEXT -> "${" -> SUBST -> matching "}" -> TEXT. An escaped
    character (``\\$``, ``\\"``, ...) is always literal text.

    Args:
        token: STRING token to scan
        source: Complete source buffer, for error snippets
        source_name: Name used in error locations
        max_depth: Deepest allowed nesting of strings inside substitutions

    Yields:
        TemplateText and TemplateSubstitution chunks in source order
    """
    # The body starts one byte / one column after the opening quote
    lexer = Lexer(
        token.value,
        source_name,
        source=source if source is not None else token.value,
        offset=token.span.start + 1,
        line=token.span.line,
        column=token.span.column + 1,
        max_depth=max_depth,
    )

    chars: list[str] = []
    text_start = lexer.mark()

    while (ch := lexer.current_char()) is not None:
        if ch == "\\":
            chars.append(ch)
            lexer.advance()
            escaped = lexer.current_char()
            if escaped is not None:
                chars.append(escaped)
                lexer.advance()
            continue

        if ch == "$" and lexer.peek_char() == "{":
            if chars:
                yield TemplateText("".join(chars), lexer.span_from(text_start))
                chars = []
            subst_start = lexer.mark()
            lexer.advance()
            lexer.advance()
            lexer.tokens = []
            tokens = lexer.tokenize_substitution()
            yield TemplateSubstitution(tokens, lexer.span_from(subst_start))
            text_start = lexer.mark()
            continue

        chars.append(ch)
        lexer.advance()

    if chars:
        yield TemplateText("".join(chars), lexer.span_from(text_start))


def tokenize(
    text: str, source_name: str = "<input>", max_depth: int = DEFAULT_MAX_DEPTH
) -> list[Token]:
    """
    Convenience function to tokenize HCL text.

    Args:
        text: Source text
        source_name: Source name for error reporting
        max_depth: Deepest allowed nesting of strings inside substitutions

    Returns:
        List of tokens ending with EOF
    """
    lexer = Lexer(text, source_name, max_depth=max_depth)
    tokens = lexer.tokenize()
    logger.debug(f"Tokenized {len(tokens)} tokens from {source_name}")
    return tokens
