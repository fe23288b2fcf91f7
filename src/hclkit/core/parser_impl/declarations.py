"""
Top-level declaration parsing.

    configuration → declaration*
    declaration   → "terraform" block
                  | "variable" STRING "{" variable_entry* "}"
                  | "provider" STRING block
                  | "output" STRING block
                  | "module" STRING "{" "source" "=" STRING attribute* "}"
                  | "resource" STRING (STRING | QUERY) block
                  | "data" STRING STRING block
                  | "locals" block
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..errors import ErrorKind
from ..lexer import Token, TokenType

DECLARATION_KEYWORDS = (
    "data",
    "locals",
    "module",
    "output",
    "provider",
    "resource",
    "terraform",
    "variable",
)

VARIABLE_ENTRY_KEYWORDS = ("type", "description", "default")


class DeclarationParserMixin:
    """
    Mixin providing top-level declaration parsing.

    Note: This mixin expects to be combined with BaseParser via multiple inheritance.
    """

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        match_keyword: Any
        current_token: Any
        peek_token: Any
        syntax_error: Any
        expected_one_of: Any
        nested: Any
        parse_label: Any
        parse_block: Any
        parse_attribute: Any
        parse_expression: Any
        parse_type_expr: Any

    def parse_configuration(self) -> ir.Configuration:
        """Parse declarations until end of input."""
        start = self.current_token()
        declarations: list[ir.Declaration] = []
        while not self.match(TokenType.EOF):
            declarations.append(self.parse_declaration())

        span = start.span.to(declarations[-1].span) if declarations else start.span
        return ir.Configuration(declarations=declarations, span=span)

    def parse_declaration(self) -> ir.Declaration:
        token = self.current_token()
        if not self.match_keyword(*DECLARATION_KEYWORDS):
            raise self.expected_one_of(token, *DECLARATION_KEYWORDS)

        keyword = self.advance()

        if keyword.value == "terraform":
            block = self.parse_block()
            return ir.TerraformSpec(block=block, span=keyword.span.to(block.span))

        elif keyword.value == "variable":
            name = self.parse_label()
            entries, close = self._parse_variable_body()
            return ir.VariableSpec(name=name, entries=entries, span=keyword.span.to(close.span))

        elif keyword.value == "provider":
            name = self.parse_label()
            block = self.parse_block()
            return ir.ProviderSpec(name=name, block=block, span=keyword.span.to(block.span))

        elif keyword.value == "output":
            name = self.parse_label()
            block = self.parse_block()
            return ir.OutputSpec(name=name, block=block, span=keyword.span.to(block.span))

        elif keyword.value == "module":
            name = self.parse_label()
            source, block = self._parse_module_body()
            return ir.ModuleSpec(
                name=name, source=source, block=block, span=keyword.span.to(block.span)
            )

        elif keyword.value == "resource":
            resource_type = self.parse_label()
            resource_name = self._parse_resource_name()
            block = self.parse_block()
            return ir.ResourceSpec(
                resource_type=resource_type,
                name=resource_name,
                block=block,
                span=keyword.span.to(block.span),
            )

        elif keyword.value == "data":
            data_type = self.parse_label()
            name = self.parse_label()
            block = self.parse_block()
            return ir.DataSpec(
                data_type=data_type, name=name, block=block, span=keyword.span.to(block.span)
            )

        else:  # locals
            block = self.parse_block()
            return ir.LocalsSpec(block=block, span=keyword.span.to(block.span))

    def _parse_resource_name(self) -> str | ir.QueryExpr:
        """Second resource label: a plain string or a $( ... ) query."""
        token = self.current_token()
        if token.type == TokenType.STRING:
            return self.parse_label()
        if token.type == TokenType.QUERY:
            self.advance()
            return ir.QueryExpr(raw=token.value, span=token.span)
        raise self.expected_one_of(token, TokenType.STRING.value, TokenType.QUERY.value)

    def _parse_variable_body(self) -> tuple[list[ir.VariableEntry], Token]:
        """
        Parse ``{ (type = T | description = "..." | default = expr)* }``.

        Every entry is kept in source order, repeats included.
        """
        self.expect(TokenType.LBRACE)

        entries: list[ir.VariableEntry] = []
        with self.nested():
            while not self.match(TokenType.RBRACE, TokenType.EOF):
                token = self.current_token()
                if not self.match_keyword(*VARIABLE_ENTRY_KEYWORDS):
                    raise self.expected_one_of(token, *VARIABLE_ENTRY_KEYWORDS, "'}'")
                self.advance()
                self.expect(TokenType.EQUALS)

                if token.value == "type":
                    type_expr = self.parse_type_expr()
                    entries.append(
                        ir.TypeEntry(type_expr=type_expr, span=token.span.to(type_expr.span))
                    )
                elif token.value == "description":
                    text = self.expect(TokenType.STRING)
                    entries.append(
                        ir.DescriptionEntry(text=text.value, span=token.span.to(text.span))
                    )
                else:
                    value = self.parse_expression()
                    entries.append(ir.DefaultEntry(value=value, span=token.span.to(value.span)))

        close = self.expect(TokenType.RBRACE)
        return entries, close

    def _parse_module_body(self) -> tuple[str, ir.Block]:
        """Parse ``{ source = "..." attribute* }``; source must come first."""
        open_brace = self.expect(TokenType.LBRACE)

        token = self.current_token()
        if not (self.match_keyword("source") and self.peek_token().type == TokenType.EQUALS):
            raise self.syntax_error(
                ErrorKind.UNEXPECTED_TOKEN,
                f"Expected 'source' as the first module attribute, got {token.describe()}",
                token,
                expected=("source",),
            )
        self.advance()
        self.advance()
        source = self.parse_label()

        attributes: list[ir.Attribute] = []
        with self.nested():
            while not self.match(TokenType.RBRACE, TokenType.EOF):
                attributes.append(self.parse_attribute())

        close = self.expect(TokenType.RBRACE)
        return source, ir.Block(attributes=attributes, span=open_brace.span.to(close.span))
