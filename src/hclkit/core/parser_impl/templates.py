"""
String template parsing.

A STRING token's body is split by ``scan_template`` into literal text and
``${ ... }`` regions. Each region carries its own token list, which is
parsed by a child parser sharing this parser's config, source and depth.
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TemplateText, Token, TokenType, scan_template


class TemplateParserMixin:
    """
    Mixin providing string template parsing.

    Note: This mixin expects to be combined with BaseParser via multiple inheritance.
    """

    if TYPE_CHECKING:
        config: Any
        source: Any
        source_name: Any
        depth: int
        advance: Any
        match: Any
        expect: Any
        expect_end: Any
        nested: Any
        parse_expression: Any

    def parse_template(self, token: Token) -> ir.StringLiteral | ir.InterpolatedString:
        """
        Parse a STRING token into a StringLiteral or an InterpolatedString.

        A string without any ``${`` stays a StringLiteral holding the raw
        body. Otherwise the parts alternate between TextPart and
        Substitution; empty text runs are omitted.
        """
        parts: list[ir.TextPart | ir.Substitution] = []
        chunks = scan_template(token, self.source, self.source_name, self.config.max_depth)
        for chunk in chunks:
            if isinstance(chunk, TemplateText):
                parts.append(ir.TextPart(value=chunk.value, span=chunk.span))
            else:
                parts.append(self._parse_substitution(chunk.tokens, chunk.span))

        if not any(isinstance(p, ir.Substitution) for p in parts):
            return ir.StringLiteral(value=token.value, span=token.span)
        return ir.InterpolatedString(parts=parts, span=token.span)

    def _parse_substitution(self, tokens: list[Token], span: ir.Span) -> ir.Substitution:
        sub = type(self)(tokens, self.config, self.source, self.source_name)
        sub.depth = self.depth
        with sub.nested():
            expr = sub.parse_sequence()
        sub.expect(TokenType.RBRACE)
        sub.expect_end()
        return ir.Substitution(expr=expr, span=span)

    def parse_sequence(self) -> ir.Expr | ir.SequenceExpr:
        """expression (',' expression)*: commas are only legal inside ${ }."""
        first = self.parse_expression()
        if not self.match(TokenType.COMMA):
            return first

        elements = [first]
        while self.match(TokenType.COMMA):
            self.advance()
            elements.append(self.parse_expression())
        return ir.SequenceExpr(elements=elements, span=first.span.to(elements[-1].span))
