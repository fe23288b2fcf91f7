"""
hclkit - parser for HCL2 / Terraform-style configuration files.

Turns source text into a frozen, span-annotated syntax tree:

    from hclkit import parse_configuration

    config = parse_configuration(open("main.tf").read(), "main.tf")
    for resource in config.of_kind(ir.ResourceSpec):
        ...
"""

__version__ = "0.1.0"

from .core import (
    DEFAULT_CONFIG,
    DEFAULT_FUNCTIONS,
    ErrorContext,
    ErrorKind,
    HclError,
    HclSyntaxError,
    LexError,
    Lexer,
    ParseError,
    Parser,
    ParserConfig,
    Token,
    TokenType,
    ir,
    load_config,
    parse_configuration,
    parse_expr,
    parse_type,
    scan_template,
    tokenize,
)

__all__ = [
    "__version__",
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
