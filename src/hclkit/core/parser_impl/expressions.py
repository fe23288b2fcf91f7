"""
Expression parsing (precedence climbing).

Grammar (precedence low to high):
    expression  → binary ("?" expression ":" expression)?
    binary      → unary (binop unary)*        climbing on BINDING_POWER
                  || (1)  && (2)  == != > >= < <= (3)  + - (4)  * / (5)
    unary       → ("-" | "+" | "!") primary | primary
    primary     → NUMBER | "true" | "false" | "null" | STRING
                | list | map | call | reference | "(" expression ")"
    list        → "[" for_clause? (expression ("," expression)* ","?)? "]"
    for_clause  → "for" IDENT "in" reference ":"
    map         → "{" (key "=" expression ","?)* "}"
    call        → FUNCTION "(" (expression ("," expression)* ","?)? ")"
    reference   → IDENT ("." (IDENT | NUMBER) | "[" expression "]")*

All binary operators are left-associative. The ternary has the lowest
precedence; its condition is a binary expression and each branch is a full
expression, so ``a ? b : c ? d : e`` nests to the right.
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..errors import ErrorKind
from ..lexer import Token, TokenType

BINARY_OPERATORS: dict[TokenType, ir.BinaryOp] = {
    TokenType.STAR: ir.BinaryOp.MUL,
    TokenType.SLASH: ir.BinaryOp.DIV,
    TokenType.PLUS: ir.BinaryOp.ADD,
    TokenType.MINUS: ir.BinaryOp.SUB,
    TokenType.DOUBLE_EQUALS: ir.BinaryOp.EQ,
    TokenType.NOT_EQUALS: ir.BinaryOp.NE,
    TokenType.GREATER_THAN: ir.BinaryOp.GT,
    TokenType.GREATER_EQUAL: ir.BinaryOp.GE,
    TokenType.LESS_THAN: ir.BinaryOp.LT,
    TokenType.LESS_EQUAL: ir.BinaryOp.LE,
    TokenType.AND: ir.BinaryOp.AND,
    TokenType.OR: ir.BinaryOp.OR,
}

UNARY_OPERATORS: dict[TokenType, ir.UnaryOp] = {
    TokenType.MINUS: ir.UnaryOp.NEG,
    TokenType.PLUS: ir.UnaryOp.POS,
    TokenType.BANG: ir.UnaryOp.NOT,
}


def number_value(raw: str) -> int | float:
    """Numeric value of a NUMBER token."""
    if raw.startswith("0x"):
        return int(raw, 16)
    if any(c in raw for c in ".eE"):
        return float(raw)
    return int(raw)


class ExpressionParserMixin:
    """
    Mixin providing expression parsing.

    Note: This mixin expects to be combined with BaseParser via multiple inheritance.
    """

    if TYPE_CHECKING:
        config: Any
        expect: Any
        expect_identifier: Any
        expect_keyword: Any
        advance: Any
        match: Any
        match_keyword: Any
        current_token: Any
        peek_token: Any
        syntax_error: Any
        expected_one_of: Any
        nested: Any
        parse_template: Any

    def parse_expression(self) -> ir.Expr:
        """Parse a full expression, including a trailing ternary."""
        with self.nested():
            condition = self.parse_binary(0)
            if not self.match(TokenType.QUESTION):
                return condition

            self.advance()
            then_expr = self.parse_expression()

            token = self.current_token()
            if token.type != TokenType.COLON:
                raise self.syntax_error(
                    ErrorKind.MALFORMED_TERNARY,
                    f"Expected ':' in conditional expression, got {token.describe()}",
                    token,
                    expected=(TokenType.COLON.value,),
                )
            self.advance()
            else_expr = self.parse_expression()

            return ir.TernaryExpr(
                condition=condition,
                then_expr=then_expr,
                else_expr=else_expr,
                span=condition.span.to(else_expr.span),
            )

    def parse_binary(self, min_bp: int) -> ir.Expr:
        """
        Parse a chain of binary operators binding tighter than ``min_bp``.

        An operator of equal power stops the recursive call, which makes
        every operator left-associative.
        """
        left = self.parse_unary()

        while True:
            op = BINARY_OPERATORS.get(self.current_token().type)
            if op is None or op.binding_power <= min_bp:
                return left
            self.advance()
            right = self.parse_binary(op.binding_power)
            left = ir.BinaryExpr(op=op, left=left, right=right, span=left.span.to(right.span))

    def parse_unary(self) -> ir.Expr:
        """Prefix - + ! applied to a single primary term."""
        token = self.current_token()
        op = UNARY_OPERATORS.get(token.type)
        if op is None:
            return self.parse_primary()

        self.advance()
        operand = self.parse_primary()
        return ir.UnaryExpr(op=op, operand=operand, span=token.span.to(operand.span))

    def parse_primary(self) -> ir.Expr:
        """literal | string | list | map | call | reference | '(' expression ')'"""
        tok = self.current_token()

        # Literals
        if tok.type == TokenType.NUMBER:
            self.advance()
            return ir.NumberLiteral(raw=tok.value, value=number_value(tok.value), span=tok.span)

        if tok.type == TokenType.STRING:
            self.advance()
            return self.parse_template(tok)

        # Collections
        if tok.type == TokenType.LBRACKET:
            return self._parse_list()

        if tok.type == TokenType.LBRACE:
            return self._parse_map()

        # Parenthesized expression
        if tok.type == TokenType.LPAREN:
            self.advance()
            expr = self.parse_expression()
            self.expect(TokenType.RPAREN)
            return expr

        if tok.type == TokenType.IDENTIFIER:
            if tok.value in ("true", "false"):
                self.advance()
                return ir.BoolLiteral(value=tok.value == "true", span=tok.span)
            if tok.value == "null":
                self.advance()
                return ir.NullLiteral(span=tok.span)

            # Look ahead for function call
            if self.peek_token().type == TokenType.LPAREN:
                return self._parse_func_call()
            return self.parse_reference()

        if tok.type == TokenType.QUERY:
            raise self.syntax_error(
                ErrorKind.UNEXPECTED_TOKEN,
                "Query escape $(...) is only allowed as a resource name or attribute value",
                tok,
            )

        raise self.syntax_error(
            ErrorKind.UNEXPECTED_TOKEN,
            f"Expected expression, got {tok.describe()}",
            tok,
            expected=("expression",),
        )

    def _parse_func_call(self) -> ir.FuncCall:
        """FUNCTION '(' (expr (',' expr)* ','?)? ')'"""
        name = self.advance()
        if not self.config.is_function(name.value):
            raise self.syntax_error(
                ErrorKind.UNKNOWN_FUNCTION,
                f"Unknown function '{name.value}'",
                name,
                expected=self.config.functions,
            )
        self.expect(TokenType.LPAREN)

        args: list[ir.Expr] = []
        while not self.match(TokenType.RPAREN):
            args.append(self.parse_expression())
            if not self.match(TokenType.COMMA):
                break
            self.advance()

        close = self.expect(TokenType.RPAREN)
        return ir.FuncCall(name=name.value, args=args, span=name.span.to(close.span))

    def parse_reference(self) -> ir.Reference:
        """IDENT ('.' (IDENT | NUMBER) | '[' expression ']')*"""
        first = self.current_token()
        if first.type != TokenType.IDENTIFIER:
            raise self.expected_one_of(first, "reference")
        if not first.value[0].isalpha():
            raise self.syntax_error(
                ErrorKind.UNEXPECTED_TOKEN,
                f"A reference must start with a letter, got {first.describe()}",
                first,
            )
        self.advance()

        path: list[ir.NameSegment | ir.IndexSegment] = [
            ir.NameSegment(name=first.value, span=first.span)
        ]
        last: Token = first

        while True:
            if self.match(TokenType.DOT):
                self.advance()
                segment = self.current_token()
                if segment.type not in (TokenType.IDENTIFIER, TokenType.NUMBER):
                    raise self.expected_one_of(segment, "identifier", "number")
                self.advance()
                path.append(ir.NameSegment(name=segment.value, span=segment.span))
                last = segment

            elif self.match(TokenType.LBRACKET):
                open_bracket = self.advance()
                index = self.parse_expression()
                last = self.expect(TokenType.RBRACKET)
                path.append(ir.IndexSegment(index=index, span=open_bracket.span.to(last.span)))

            else:
                break

        return ir.Reference(path=path, span=first.span.to(last.span))

    def _parse_list(self) -> ir.ListExpr:
        """'[' for_clause? (expr (',' expr)* ','?)? ']'"""
        open_bracket = self.expect(TokenType.LBRACKET)

        comprehension = None
        if (
            self.match_keyword("for")
            and self.peek_token().type == TokenType.IDENTIFIER
            and self.peek_token(2).type == TokenType.IDENTIFIER
            and self.peek_token(2).value == "in"
        ):
            comprehension = self._parse_for_clause()

        elements: list[ir.Expr] = []
        while not self.match(TokenType.RBRACKET):
            elements.append(self.parse_expression())
            if not self.match(TokenType.COMMA):
                break
            self.advance()

        close = self.expect(TokenType.RBRACKET)
        return ir.ListExpr(
            comprehension=comprehension,
            elements=elements,
            span=open_bracket.span.to(close.span),
        )

    def _parse_for_clause(self) -> ir.ForComprehension:
        """'for' IDENT 'in' reference ':'"""
        start = self.advance()  # for
        loop_var = self.expect_identifier()
        self.expect_keyword("in")
        source = self.parse_reference()
        close = self.expect(TokenType.COLON)
        return ir.ForComprehension(
            loop_var=loop_var.value,
            source=source,
            span=start.span.to(close.span),
        )

    def _parse_map(self) -> ir.MapExpr:
        """'{' (key '=' expr ','?)* '}'"""
        open_brace = self.expect(TokenType.LBRACE)

        entries: list[ir.MapEntry] = []
        while not self.match(TokenType.RBRACE, TokenType.EOF):
            key_tok = self.current_token()
            key: ir.Expr
            if key_tok.type == TokenType.IDENTIFIER:
                self.advance()
                key = ir.Reference(
                    path=[ir.NameSegment(name=key_tok.value, span=key_tok.span)],
                    span=key_tok.span,
                )
            elif key_tok.type == TokenType.STRING:
                self.advance()
                key = ir.StringLiteral(value=key_tok.value, span=key_tok.span)
            else:
                raise self.expected_one_of(key_tok, "identifier", "string_literal", "'}'")

            self.expect(TokenType.EQUALS)
            value = self.parse_expression()
            entries.append(ir.MapEntry(key=key, value=value, span=key_tok.span.to(value.span)))

            if self.match(TokenType.COMMA):
                self.advance()

        close = self.expect(TokenType.RBRACE)
        return ir.MapExpr(entries=entries, span=open_brace.span.to(close.span))
