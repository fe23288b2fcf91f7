"""
HCL parser implementation.

The parser is assembled from mixins, one per grammar area:
- base: token cursor, matching and error helpers
- types: type expressions
- expressions: operators, literals, collections, references and calls
- templates: quoted strings and ${ } substitutions
- blocks: blocks and attributes
- declarations: top-level declarations
"""

import logging

from .. import ir
from ..config import DEFAULT_CONFIG, ParserConfig
from ..lexer import tokenize
from .base import BaseParser, ParserProtocol
from .blocks import BlockParserMixin
from .declarations import DECLARATION_KEYWORDS, DeclarationParserMixin
from .expressions import ExpressionParserMixin
from .templates import TemplateParserMixin
from .types import TypeParserMixin

logger = logging.getLogger(__name__)


class Parser(
    BaseParser,
    TypeParserMixin,
    ExpressionParserMixin,
    TemplateParserMixin,
    BlockParserMixin,
    DeclarationParserMixin,
):
    """Complete HCL parser over a token list."""

    pass


def _parser_for(text: str, source_name: str, config: ParserConfig | None) -> Parser:
    config = config or DEFAULT_CONFIG
    tokens = tokenize(text, source_name, max_depth=config.max_depth)
    return Parser(tokens, config, source=text, source_name=source_name)


def parse_configuration(
    text: str,
    source_name: str = "<input>",
    config: ParserConfig | None = None,
) -> ir.Configuration:
    """
    Parse HCL source into a Configuration.

    Args:
        text: Source text
        source_name: Name used in error locations (typically the file path)
        config: Parser settings; defaults apply when omitted

    Returns:
        Configuration with declarations in source order

    Raises:
        LexError: If the text cannot be tokenized
        HclSyntaxError: If the tokens do not form a valid configuration
    """
    parser = _parser_for(text, source_name, config)
    configuration = parser.parse_configuration()
    parser.expect_end()
    logger.debug(f"Parsed {len(configuration.declarations)} declarations from {source_name}")
    return configuration


def parse_expr(
    text: str,
    source_name: str = "<input>",
    config: ParserConfig | None = None,
) -> ir.Expr:
    """Parse a single standalone expression."""
    parser = _parser_for(text, source_name, config)
    expr = parser.parse_expression()
    parser.expect_end()
    return expr


def parse_type(
    text: str,
    source_name: str = "<input>",
    config: ParserConfig | None = None,
) -> ir.TypeExpr:
    """Parse a single standalone type expression."""
    parser = _parser_for(text, source_name, config)
    type_expr = parser.parse_type_expr()
    parser.expect_end()
    return type_expr


__all__ = [
    "BaseParser",
    "BlockParserMixin",
    "DECLARATION_KEYWORDS",
    "DeclarationParserMixin",
    "ExpressionParserMixin",
    "Parser",
    "ParserProtocol",
    "TemplateParserMixin",
    "TypeParserMixin",
    "parse_configuration",
    "parse_expr",
    "parse_type",
]
