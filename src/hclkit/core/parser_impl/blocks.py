"""
Block and attribute parsing.

    block      → "{" attribute* "}"
    attribute  → IDENT "=" initializer
               | IDENT STRING? block
    initializer→ QUERY | expression
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType


class BlockParserMixin:
    """
    Mixin providing block and attribute parsing.

    Note: This mixin expects to be combined with BaseParser via multiple inheritance.
    """

    if TYPE_CHECKING:
        config: Any
        expect: Any
        advance: Any
        match: Any
        current_token: Any
        peek_token: Any
        expected_one_of: Any
        nested: Any
        parse_label: Any
        parse_expression: Any

    def parse_block(self) -> ir.Block:
        """Parse ``{ attribute* }``."""
        open_brace = self.expect(TokenType.LBRACE)

        attributes: list[ir.Attribute] = []
        with self.nested():
            while not self.match(TokenType.RBRACE, TokenType.EOF):
                attributes.append(self.parse_attribute())

        close = self.expect(TokenType.RBRACE)
        return ir.Block(attributes=attributes, span=open_brace.span.to(close.span))

    def parse_attribute(self) -> ir.Attribute:
        """
        Parse one attribute.

        Examples:
            ami = "ami-123"
            tags { Name = "web" }
            ingress "ssh" { port = 22 }
        """
        name = self.current_token()
        if name.type != TokenType.IDENTIFIER:
            raise self.expected_one_of(name, "identifier", "'}'")

        following = self.peek_token()
        if following.type == TokenType.EQUALS:
            self.advance()
            self.advance()
            value = self.parse_initializer()
            return ir.Assignment(name=name.value, value=value, span=name.span.to(value.span))

        if following.type in (TokenType.STRING, TokenType.LBRACE):
            self.advance()
            label = self.parse_label() if self.match(TokenType.STRING) else None
            block = self.parse_block()
            return ir.NamedMap(
                name=name.value, label=label, block=block, span=name.span.to(block.span)
            )

        raise self.expected_one_of(following, "'='", "'{'", TokenType.STRING.value)

    def parse_initializer(self) -> ir.Expr:
        """Right-hand side of an assignment: an expression or a query escape."""
        token = self.current_token()
        if token.type == TokenType.QUERY and self.config.allow_query_in_attributes:
            self.advance()
            return ir.QueryExpr(raw=token.value, span=token.span)
        return self.parse_expression()
