"""
Type-expression parsing.

Handles the type sublanguage used by ``type = ...`` in variable blocks:
primitives and the list/set/map/tuple/object constructors.
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..errors import ErrorKind
from ..lexer import TokenType

PRIMITIVE_TYPES: dict[str, ir.PrimitiveKind] = {
    "bool": ir.PrimitiveKind.BOOL,
    "number": ir.PrimitiveKind.NUMBER,
    "string": ir.PrimitiveKind.STRING,
}

COLLECTION_TYPES: dict[str, type[ir.ListType | ir.SetType | ir.MapType]] = {
    "list": ir.ListType,
    "set": ir.SetType,
    "map": ir.MapType,
}

TYPE_KEYWORDS = ("bool", "number", "string", "list", "set", "map", "tuple", "object")


class TypeParserMixin:
    """
    Mixin providing type-expression parsing.

    Note: This mixin expects to be combined with BaseParser via multiple inheritance.
    """

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        current_token: Any
        expect_identifier: Any
        expected_one_of: Any
        syntax_error: Any
        nested: Any

    def parse_type_expr(self) -> ir.TypeExpr:
        """
        Parse a type expression.

        Examples:
            string
            list(number)
            map(object({ name = string, count = number }))
            tuple([string, bool])
        """
        token = self.current_token()
        if token.type != TokenType.IDENTIFIER:
            raise self.expected_one_of(token, *TYPE_KEYWORDS)

        with self.nested():
            # bool / number / string
            if token.value in PRIMITIVE_TYPES:
                self.advance()
                return ir.PrimitiveType(name=PRIMITIVE_TYPES[token.value], span=token.span)

            # list(T) / set(T) / map(T)
            if token.value in COLLECTION_TYPES:
                self.advance()
                self.expect(TokenType.LPAREN)
                element = self.parse_type_expr()
                close = self.expect(TokenType.RPAREN)
                return COLLECTION_TYPES[token.value](
                    element=element, span=token.span.to(close.span)
                )

            if token.value == "tuple":
                return self._parse_tuple_type()

            if token.value == "object":
                return self._parse_object_type()

        raise self.expected_one_of(token, *TYPE_KEYWORDS)

    def _parse_tuple_type(self) -> ir.TupleType:
        """tuple '(' '[' (T (',' T)* ','?)? ']' ')'"""
        start = self.advance()
        self.expect(TokenType.LPAREN)
        self.expect(TokenType.LBRACKET)

        elements: list[ir.TypeExpr] = []
        while not self.match(TokenType.RBRACKET):
            elements.append(self.parse_type_expr())
            if not self.match(TokenType.COMMA):
                break
            self.advance()

        self.expect(TokenType.RBRACKET)
        close = self.expect(TokenType.RPAREN)
        return ir.TupleType(elements=elements, span=start.span.to(close.span))

    def _parse_object_type(self) -> ir.ObjectType:
        """object '(' '{' (IDENT '=' T ','?)* '}' ')'"""
        start = self.advance()
        self.expect(TokenType.LPAREN)
        self.expect(TokenType.LBRACE)

        field_types: dict[str, ir.TypeExpr] = {}
        while not self.match(TokenType.RBRACE, TokenType.EOF):
            name = self.expect_identifier()
            if name.value in field_types:
                raise self.syntax_error(
                    ErrorKind.DUPLICATE_FIELD,
                    f"Duplicate object field '{name.value}'",
                    name,
                    expected=(),
                )
            self.expect(TokenType.EQUALS)
            field_types[name.value] = self.parse_type_expr()

            # Separators are optional between fields
            if self.match(TokenType.COMMA):
                self.advance()

        self.expect(TokenType.RBRACE)
        close = self.expect(TokenType.RPAREN)
        return ir.ObjectType(field_types=field_types, span=start.span.to(close.span))
