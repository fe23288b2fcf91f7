"""
Base parser class for HCL.

Provides the token cursor, matching helpers and error construction used by
all parser mixins.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ..config import DEFAULT_CONFIG, ParserConfig
from ..errors import ErrorKind, HclSyntaxError, make_syntax_error
from ..lexer import Token, TokenType

if TYPE_CHECKING:
    from .. import ir


@runtime_checkable
class ParserProtocol(Protocol):
    """
    Protocol defining the interface available to parser mixins.

    This allows mypy to understand that mixins will have access to
    BaseParser methods when combined in the final Parser class.
    """

    tokens: list[Token]
    config: ParserConfig
    pos: int

    def current_token(self) -> Token: ...
    def peek_token(self, offset: int = 1) -> Token: ...
    def advance(self) -> Token: ...
    def expect(self, token_type: TokenType) -> Token: ...
    def match(self, *token_types: TokenType) -> bool: ...
    def match_keyword(self, *words: str) -> bool: ...
    def parse_label(self) -> str: ...

    # Methods from other mixins that may be called cross-mixin
    def parse_type_expr(self) -> "ir.TypeExpr": ...
    def parse_expression(self) -> "ir.Expr": ...
    def parse_template(self, token: Token) -> "ir.StringLiteral | ir.InterpolatedString": ...
    def parse_block(self) -> "ir.Block": ...


class BaseParser:
    """
    Base parser class with token manipulation utilities.

    This class provides the foundation for recursive descent parsing,
    including token navigation, matching, and error generation.
    """

    def __init__(
        self,
        tokens: list[Token],
        config: ParserConfig = DEFAULT_CONFIG,
        source: str | None = None,
        source_name: str = "<input>",
    ):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from lexer, ending with EOF
            config: Parser settings
            source: Source text (for error snippets and template re-lexing)
            source_name: Source name (for error reporting)
        """
        self.tokens = tokens
        self.config = config
        self.source = source
        self.source_name = source_name
        self.pos = 0
        self.depth = 0

    # -- Cursor --

    def current_token(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[self.pos]

    def peek_token(self, offset: int = 1) -> Token:
        """Peek ahead at token."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[pos]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token().type in token_types

    def match_keyword(self, *words: str) -> bool:
        """Check if current token is an identifier spelled as one of ``words``."""
        token = self.current_token()
        return token.type == TokenType.IDENTIFIER and token.value in words

    def expect(self, token_type: TokenType) -> Token:
        """
        Expect a specific token type and consume it.

        Raises:
            HclSyntaxError: If token doesn't match
        """
        token = self.current_token()
        if token.type != token_type:
            raise self.syntax_error(
                ErrorKind.UNEXPECTED_TOKEN,
                f"Expected '{token_type.value}', got {token.describe()}",
                token,
                expected=(token_type.value,),
            )
        return self.advance()

    def expect_identifier(self) -> Token:
        return self.expect(TokenType.IDENTIFIER)

    def expect_keyword(self, word: str) -> Token:
        """Expect an identifier spelled exactly ``word``."""
        token = self.current_token()
        if not self.match_keyword(word):
            raise self.syntax_error(
                ErrorKind.UNEXPECTED_TOKEN,
                f"Expected '{word}', got {token.describe()}",
                token,
                expected=(word,),
            )
        return self.advance()

    def expect_end(self) -> None:
        """Require that all input has been consumed."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            raise self.syntax_error(
                ErrorKind.UNEXPECTED_TOKEN,
                f"Unexpected {token.describe()} after end of input",
                token,
                expected=(TokenType.EOF.value,),
            )

    # -- Labels --

    def parse_label(self) -> str:
        """
        Parse a plain string label (declaration names, module sources,
        descriptions). Labels are not interpolation-aware: the raw text
        between the quotes is returned as-is.
        """
        return self.expect(TokenType.STRING).value

    # -- Errors --

    def syntax_error(
        self,
        kind: ErrorKind,
        message: str,
        token: Token,
        expected: tuple[str, ...] = (),
    ) -> HclSyntaxError:
        return make_syntax_error(
            kind,
            message,
            token.span,
            self.source,
            self.source_name,
            expected=expected,
        )

    def expected_one_of(self, token: Token, *alternatives: str) -> HclSyntaxError:
        """Build an EXPECTED_ONE_OF error listing the accepted alternatives."""
        if len(alternatives) > 1:
            wanted = ", ".join(alternatives[:-1]) + f" or {alternatives[-1]}"
        else:
            wanted = alternatives[0]
        return self.syntax_error(
            ErrorKind.EXPECTED_ONE_OF,
            f"Expected {wanted}, got {token.describe()}",
            token,
            expected=tuple(alternatives),
        )

    @contextmanager
    def nested(self) -> Iterator[None]:
        """Track recursion depth for one nested construct."""
        self.depth += 1
        try:
            if self.depth > self.config.max_depth:
                raise self.syntax_error(
                    ErrorKind.NESTING_TOO_DEEP,
                    f"Nesting deeper than {self.config.max_depth} levels",
                    self.current_token(),
                )
            yield
        finally:
            self.depth -= 1
