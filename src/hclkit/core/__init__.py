"""
Core HCL parsing: lexer, parser, AST and configuration.
"""

from . import ir
from .config import DEFAULT_CONFIG, DEFAULT_FUNCTIONS, ParserConfig, load_config
from .errors import (
    ErrorContext,
    ErrorKind,
    HclError,
    HclSyntaxError,
    LexError,
    ParseError,
)
from .lexer import Lexer, Token, TokenType, scan_template, tokenize
from .parser_impl import Parser, parse_configuration, parse_expr, parse_type

__all__ = [
    "ir",
    "DEFAULT_CONFIG",
    "DEFAULT_FUNCTIONS",
    "ParserConfig",
    "load_config",
    "ErrorContext",
    "ErrorKind",
    "HclError",
    "HclSyntaxError",
    "LexError",
    "ParseError",
    "Lexer",
    "Token",
    "TokenType",
    "scan_template",
    "tokenize",
    "Parser",
    "parse_configuration",
    "parse_expr",
    "parse_type",
]
