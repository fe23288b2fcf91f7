"""Tests for the HCL expression parser.

Covers:
- Precedence and associativity of binary operators
- Unary prefixes and parenthesised grouping
- Ternary nesting and malformed conditionals
- Primaries: literals, lists, for-comprehensions, maps, references, calls
- Rendering expressions back to source
"""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from hclkit import ParserConfig, parse_expr
from hclkit.core import ir
from hclkit.core.config import MAX_DEPTH_LIMIT
from hclkit.core.errors import ErrorKind, HclSyntaxError

# ============================================================================
# Builders
# ============================================================================


def num(value: int | float, raw: str | None = None) -> ir.NumberLiteral:
    return ir.NumberLiteral(raw=raw if raw is not None else str(value), value=value)


def ref(*names: str) -> ir.Reference:
    return ir.Reference(path=[ir.NameSegment(name=n) for n in names])


def binary(op: ir.BinaryOp, left: ir.Expr, right: ir.Expr) -> ir.BinaryExpr:
    return ir.BinaryExpr(op=op, left=left, right=right)


def dump(source: str, **kwargs: Any) -> dict[str, Any]:
    return parse_expr(source, **kwargs).model_dump()


# ============================================================================
# Operators
# ============================================================================


class TestPrecedence:
    """Binding powers: || < && < comparisons < + - < * /."""

    def test_multiplication_binds_tighter_than_addition(self) -> None:
        expected = binary(ir.BinaryOp.ADD, num(1), binary(ir.BinaryOp.MUL, num(2), num(3)))
        assert dump("1 + 2 * 3") == expected.model_dump()

    def test_and_binds_tighter_than_or(self) -> None:
        expected = binary(
            ir.BinaryOp.OR, ref("a"), binary(ir.BinaryOp.AND, ref("b"), ref("c"))
        )
        assert dump("a || b && c") == expected.model_dump()

    def test_comparison_below_arithmetic(self) -> None:
        expected = binary(
            ir.BinaryOp.EQ,
            binary(ir.BinaryOp.ADD, num(1), binary(ir.BinaryOp.MUL, num(2), num(3))),
            num(7),
        )
        assert dump("1 + 2 * 3 == 7") == expected.model_dump()

    def test_not_equals(self) -> None:
        expr = parse_expr("a != b")
        assert isinstance(expr, ir.BinaryExpr)
        assert expr.op == ir.BinaryOp.NE

    def test_comparison_above_logical(self) -> None:
        expr = parse_expr("a > 1 && b <= 2")
        assert isinstance(expr, ir.BinaryExpr)
        assert expr.op == ir.BinaryOp.AND
        assert expr.left.op == ir.BinaryOp.GT
        assert expr.right.op == ir.BinaryOp.LE

    @pytest.mark.parametrize("op", ["-", "/", "||", "=="])
    def test_left_associative(self, op: str) -> None:
        expr = parse_expr(f"a {op} b {op} c")
        assert isinstance(expr, ir.BinaryExpr)
        assert isinstance(expr.left, ir.BinaryExpr)
        assert isinstance(expr.right, ir.Reference)
        assert expr.right.root == "c"

    def test_parentheses_override_precedence(self) -> None:
        expected = binary(ir.BinaryOp.MUL, binary(ir.BinaryOp.ADD, num(1), num(2)), num(3))
        assert dump("(1 + 2) * 3") == expected.model_dump()

    def test_binding_power_table(self) -> None:
        assert ir.BinaryOp.OR.binding_power < ir.BinaryOp.AND.binding_power
        assert ir.BinaryOp.AND.binding_power < ir.BinaryOp.EQ.binding_power
        assert ir.BinaryOp.EQ.binding_power == ir.BinaryOp.LT.binding_power
        assert ir.BinaryOp.ADD.binding_power < ir.BinaryOp.MUL.binding_power


class TestUnary:
    """Prefix - + ! apply to a single primary."""

    def test_negation_binds_to_primary(self) -> None:
        expected = binary(
            ir.BinaryOp.MUL,
            ir.UnaryExpr(op=ir.UnaryOp.NEG, operand=ref("a")),
            ref("b"),
        )
        assert dump("-a * b") == expected.model_dump()

    def test_not(self) -> None:
        expr = parse_expr("!enabled && ready")
        assert isinstance(expr, ir.BinaryExpr)
        assert isinstance(expr.left, ir.UnaryExpr)
        assert expr.left.op == ir.UnaryOp.NOT

    def test_unary_plus(self) -> None:
        expr = parse_expr("+1")
        assert isinstance(expr, ir.UnaryExpr)
        assert expr.op == ir.UnaryOp.POS

    def test_unary_on_group(self) -> None:
        expr = parse_expr("-(a + b)")
        assert isinstance(expr, ir.UnaryExpr)
        assert isinstance(expr.operand, ir.BinaryExpr)

    def test_double_prefix_rejected(self) -> None:
        with pytest.raises(HclSyntaxError, match="Expected expression"):
            parse_expr("--a")


class TestTernary:
    """cond ? a : b has the lowest precedence."""

    def test_simple(self) -> None:
        expected = ir.TernaryExpr(condition=ref("a"), then_expr=num(1), else_expr=num(2))
        assert dump("a ? 1 : 2") == expected.model_dump()

    def test_condition_may_be_comparison(self) -> None:
        expr = parse_expr("count == 0 ? 1 : 2")
        assert isinstance(expr, ir.TernaryExpr)
        assert isinstance(expr.condition, ir.BinaryExpr)
        assert expr.condition.op == ir.BinaryOp.EQ

    def test_condition_may_be_logical(self) -> None:
        expr = parse_expr("a || b ? 1 : 2")
        assert isinstance(expr, ir.TernaryExpr)
        assert expr.condition.op == ir.BinaryOp.OR

    def test_else_branch_nests_right(self) -> None:
        expected = ir.TernaryExpr(
            condition=ref("a"),
            then_expr=ref("b"),
            else_expr=ir.TernaryExpr(condition=ref("c"), then_expr=ref("d"), else_expr=ref("e")),
        )
        assert dump("a ? b : c ? d : e") == expected.model_dump()

    def test_then_branch_may_nest(self) -> None:
        expr = parse_expr("a ? b ? 1 : 2 : 3")
        assert isinstance(expr, ir.TernaryExpr)
        assert isinstance(expr.then_expr, ir.TernaryExpr)

    def test_branches_take_full_expressions(self) -> None:
        expr = parse_expr("a ? 1 + 2 : 3 * 4")
        assert isinstance(expr.then_expr, ir.BinaryExpr)
        assert isinstance(expr.else_expr, ir.BinaryExpr)

    def test_parenthesised_ternary_as_condition(self) -> None:
        expr = parse_expr("(a ? b : c) ? 1 : 2")
        assert isinstance(expr, ir.TernaryExpr)
        assert isinstance(expr.condition, ir.TernaryExpr)

    def test_missing_colon(self) -> None:
        with pytest.raises(HclSyntaxError, match="Expected ':'") as exc_info:
            parse_expr("a ? b")
        assert exc_info.value.kind == ErrorKind.MALFORMED_TERNARY

    def test_missing_colon_before_token(self) -> None:
        with pytest.raises(HclSyntaxError) as exc_info:
            parse_expr("a ? b c")
        assert exc_info.value.kind == ErrorKind.MALFORMED_TERNARY
        assert exc_info.value.column == 7


# ============================================================================
# Primaries
# ============================================================================


class TestLiterals:
    """Numbers, booleans, null."""

    @pytest.mark.parametrize(
        "source,value",
        [
            ("42", 42),
            ("0x1F", 31),
            ("1.5", 1.5),
            ("1e3", 1000.0),
            ("2.5E-1", 0.25),
            ("1.", 1.0),
            (".5", 0.5),
            ("1.e3", 1000.0),
            (".5e2", 50.0),
        ],
    )
    def test_number_values(self, source: str, value: int | float) -> None:
        expr = parse_expr(source)
        assert isinstance(expr, ir.NumberLiteral)
        assert expr.value == value
        assert type(expr.value) is type(value)
        assert expr.raw == source

    def test_leading_dot_number_in_operand_position(self) -> None:
        expr = parse_expr("a - .5")
        assert isinstance(expr, ir.BinaryExpr)
        assert expr.right.model_dump() == {"kind": "number", "raw": ".5", "value": 0.5}
        assert str(expr) == "a - .5"

    def test_booleans(self) -> None:
        assert parse_expr("true").model_dump() == {"kind": "bool", "value": True}
        assert parse_expr("false").model_dump() == {"kind": "bool", "value": False}

    def test_null(self) -> None:
        assert isinstance(parse_expr("null"), ir.NullLiteral)

    def test_query_not_allowed_in_expression(self) -> None:
        with pytest.raises(HclSyntaxError, match="Query escape") as exc_info:
            parse_expr("$(name)")
        assert exc_info.value.kind == ErrorKind.UNEXPECTED_TOKEN


class TestLists:
    """List literals and for-comprehensions."""

    def test_list(self) -> None:
        expr = parse_expr("[1, 2, 3]")
        assert isinstance(expr, ir.ListExpr)
        assert expr.comprehension is None
        assert [e.value for e in expr.elements] == [1, 2, 3]

    def test_trailing_comma(self) -> None:
        expr = parse_expr("[a, b,]")
        assert len(expr.elements) == 2

    def test_empty_list(self) -> None:
        expr = parse_expr("[]")
        assert isinstance(expr, ir.ListExpr)
        assert expr.elements == []

    def test_for_comprehension(self) -> None:
        expr = parse_expr("[for s in var.list : s]")
        expected = ir.ListExpr(
            comprehension=ir.ForComprehension(loop_var="s", source=ref("var", "list")),
            elements=[ref("s")],
        )
        assert expr.model_dump() == expected.model_dump()

    def test_for_as_plain_reference(self) -> None:
        expr = parse_expr("[for]")
        assert expr.comprehension is None
        assert expr.elements[0].root == "for"

    def test_for_comprehension_requires_colon(self) -> None:
        with pytest.raises(HclSyntaxError, match="Expected ':'"):
            parse_expr("[for s in var.list s]")

    def test_missing_separator(self) -> None:
        with pytest.raises(HclSyntaxError, match=r"Expected '\]'"):
            parse_expr("[1 2]")


class TestMaps:
    """Map literals."""

    def test_keys(self) -> None:
        expr = parse_expr('{ a = 1, "b c" = 2 }')
        assert isinstance(expr, ir.MapExpr)
        first, second = expr.entries
        assert first.key.model_dump() == ref("a").model_dump()
        assert second.key.model_dump() == {"kind": "string", "value": "b c"}

    def test_separators_optional(self) -> None:
        expr = parse_expr("{\n  a = 1\n  b = x.y\n  c = [1]\n}")
        assert [str(e.key) for e in expr.entries] == ["a", "b", "c"]

    def test_empty_map(self) -> None:
        expr = parse_expr("{}")
        assert isinstance(expr, ir.MapExpr)
        assert expr.entries == []

    def test_nested_map(self) -> None:
        expr = parse_expr("{ tags = { Name = \"web\" } }")
        assert isinstance(expr.entries[0].value, ir.MapExpr)

    def test_invalid_key(self) -> None:
        with pytest.raises(HclSyntaxError) as exc_info:
            parse_expr("{ 1 = 2 }")
        assert exc_info.value.kind == ErrorKind.EXPECTED_ONE_OF

    def test_unclosed_map(self) -> None:
        with pytest.raises(HclSyntaxError, match=r"Expected '\}', got end of input"):
            parse_expr("{ a = 1")


class TestReferences:
    """Dotted and indexed references."""

    def test_dotted(self) -> None:
        assert dump("var.region") == ref("var", "region").model_dump()

    def test_index_and_attribute(self) -> None:
        expr = parse_expr("aws_instance.web[0].id")
        assert isinstance(expr, ir.Reference)
        kinds = [s.kind for s in expr.path]
        assert kinds == ["name", "name", "index", "name"]
        index = expr.path[2]
        assert isinstance(index, ir.IndexSegment)
        assert index.index.model_dump() == num(0).model_dump()

    def test_numeric_attribute(self) -> None:
        expr = parse_expr("aws_instance.web.0.id")
        assert [str(s) for s in expr.path] == ["aws_instance", "web", "0", "id"]

    def test_expression_index(self) -> None:
        expr = parse_expr("var.map[var.key]")
        index = expr.path[2]
        assert isinstance(index.index, ir.Reference)

    def test_render(self) -> None:
        assert str(parse_expr("a.b[0].c")) == "a.b[0].c"

    def test_dot_requires_name(self) -> None:
        with pytest.raises(HclSyntaxError) as exc_info:
            parse_expr("a.")
        assert exc_info.value.kind == ErrorKind.EXPECTED_ONE_OF

    def test_span(self) -> None:
        expr = parse_expr("a.b[0]")
        assert (expr.span.start, expr.span.end) == (0, 6)

    def test_leading_underscore_rejected(self) -> None:
        with pytest.raises(HclSyntaxError, match="must start with a letter") as exc_info:
            parse_expr("1 + _private")
        assert exc_info.value.kind == ErrorKind.UNEXPECTED_TOKEN
        assert exc_info.value.column == 5

    def test_underscore_inside_reference(self) -> None:
        assert dump("aws_instance.my_web") == ref("aws_instance", "my_web").model_dump()

    def test_path_must_start_with_name(self) -> None:
        with pytest.raises(ValidationError, match="must start with a name segment"):
            ir.Reference(path=[ir.IndexSegment(index=num(0))])

    def test_root(self) -> None:
        assert parse_expr("var.list[0]").root == "var"


class TestFunctionCalls:
    """Calls are limited to the configured allow-list."""

    def test_call(self) -> None:
        expr = parse_expr("merge(a, {b = 1})")
        assert isinstance(expr, ir.FuncCall)
        assert expr.name == "merge"
        assert len(expr.args) == 2

    def test_no_arguments_and_trailing_comma(self) -> None:
        assert parse_expr("length()").args == []
        assert len(parse_expr("concat(a, b,)").args) == 2

    @pytest.mark.parametrize(
        "name", ["merge", "length", "file", "md5", "replace", "toset", "concat"]
    )
    def test_default_functions(self, name: str) -> None:
        assert isinstance(parse_expr(f"{name}(x)"), ir.FuncCall)

    def test_unknown_function(self) -> None:
        with pytest.raises(HclSyntaxError, match="Unknown function 'upper'") as exc_info:
            parse_expr("upper(x)")
        assert exc_info.value.kind == ErrorKind.UNKNOWN_FUNCTION
        assert "merge" in exc_info.value.expected

    def test_extra_function_from_config(self) -> None:
        config = ParserConfig().with_functions("upper")
        expr = parse_expr("upper(x)", config=config)
        assert isinstance(expr, ir.FuncCall)

    def test_call_inside_arithmetic(self) -> None:
        expr = parse_expr("length(a) + 1")
        assert isinstance(expr, ir.BinaryExpr)
        assert isinstance(expr.left, ir.FuncCall)


class TestExpressionErrors:
    """General errors."""

    def test_trailing_garbage(self) -> None:
        with pytest.raises(HclSyntaxError, match="after end of input"):
            parse_expr("1 2")

    def test_dangling_operator(self) -> None:
        with pytest.raises(HclSyntaxError, match="Expected expression, got end of input"):
            parse_expr("1 +")

    def test_unclosed_group(self) -> None:
        with pytest.raises(HclSyntaxError, match=r"Expected '\)'"):
            parse_expr("(1 + 2")

    def test_nesting_limit(self) -> None:
        with pytest.raises(HclSyntaxError) as exc_info:
            parse_expr("[" * 50 + "]" * 50, config=ParserConfig(max_depth=20))
        assert exc_info.value.kind == ErrorKind.NESTING_TOO_DEEP

    @pytest.mark.parametrize(
        "source",
        [
            "(" * 250 + "1" + ")" * 250,
            "[" * 200 + "]" * 200,
            "{a = " * 200 + "1" + "}" * 200,
            "-(" * 200 + "x" + ")" * 200,
            "1 + (" * 200 + "1" + ")" * 200,
        ],
    )
    def test_deep_nesting_with_default_config(self, source: str) -> None:
        with pytest.raises(HclSyntaxError) as exc_info:
            parse_expr(source)
        assert exc_info.value.kind == ErrorKind.NESTING_TOO_DEEP

    def test_deep_nesting_at_highest_limit(self) -> None:
        config = ParserConfig(max_depth=MAX_DEPTH_LIMIT)
        with pytest.raises(HclSyntaxError) as exc_info:
            parse_expr("[" * 200 + "]" * 200, config=config)
        assert exc_info.value.kind == ErrorKind.NESTING_TOO_DEEP

    def test_nesting_just_under_default_limit(self) -> None:
        expr = parse_expr("(" * 60 + "1" + ")" * 60)
        assert expr.model_dump() == num(1).model_dump()


# ============================================================================
# Rendering
# ============================================================================


class TestRender:
    """str() renders equivalent source, parenthesising only where needed."""

    @pytest.mark.parametrize(
        "source",
        [
            "1 + 2 * 3",
            "(1 + 2) * 3",
            "a - (b - c)",
            "a - b - c",
            "-(a + b)",
            "!a && b",
            "a || b && c",
            "(a || b) && c",
            "a ? b : c ? d : e",
            "(a ? b : c) ? 1 : 2",
            "(a ? b : c) + 1",
            "[for s in var.list : s]",
            '{ a = 1, "b" = [1, 2] }',
            'merge(a, "${b}-x")',
            '"${a, b}"',
        ],
    )
    def test_render_is_stable(self, source: str) -> None:
        assert str(parse_expr(source)) == source
