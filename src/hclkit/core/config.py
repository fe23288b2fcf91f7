"""
Parser configuration.

Defaults cover the standard grammar. A project can adjust them in the
``[tool.hclkit]`` table of its ``pyproject.toml`` or the ``[parser]`` table
of an ``hclkit.toml``:

    [tool.hclkit]
    extra_functions = ["lookup", "format"]
    allow_query_in_attributes = false
    max_depth = 48
"""

import logging
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

logger = logging.getLogger(__name__)

# Callee names accepted in function-call position
DEFAULT_FUNCTIONS: tuple[str, ...] = (
    "merge",
    "length",
    "file",
    "md5",
    "replace",
    "toset",
    "concat",
)

# Nesting limits for expressions, blocks, types and nested strings. Every level
# costs several interpreter frames; MAX_DEPTH_LIMIT keeps a parse under the
# default recursion limit.
DEFAULT_MAX_DEPTH = 64
MAX_DEPTH_LIMIT = 100


@dataclass(frozen=True)
class ParserConfig:
    """Settings shared by one parse."""

    functions: tuple[str, ...] = field(default=DEFAULT_FUNCTIONS)
    allow_query_in_attributes: bool = True  # name = $( ... )
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if not 1 <= self.max_depth <= MAX_DEPTH_LIMIT:
            raise ValueError(
                f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}, got {self.max_depth}"
            )

    def is_function(self, name: str) -> bool:
        return name in self.functions

    def with_functions(self, *names: str) -> "ParserConfig":
        """Copy of this config with extra callee names allowed."""
        extra = tuple(n for n in names if n not in self.functions)
        return replace(self, functions=self.functions + extra)


DEFAULT_CONFIG = ParserConfig()


def load_config(path: Path) -> ParserConfig:
    """
    Load parser settings from a TOML file.

    ``pyproject.toml`` files are read from ``[tool.hclkit]``; any other file
    from ``[parser]``. Missing keys keep their defaults.

    Args:
        path: TOML file to read

    Returns:
        ParserConfig built from the file
    """
    data = tomllib.loads(path.read_text(encoding="utf-8"))

    if path.name == "pyproject.toml":
        section = data.get("tool", {}).get("hclkit", {})
    else:
        section = data.get("parser", {})

    functions = tuple(section.get("functions", DEFAULT_FUNCTIONS))
    config = ParserConfig(
        functions=functions,
        allow_query_in_attributes=section.get("allow_query_in_attributes", True),
        max_depth=section.get("max_depth", DEFAULT_MAX_DEPTH),
    )

    extra = section.get("extra_functions", [])
    if extra:
        config = config.with_functions(*extra)

    logger.debug(f"Loaded parser config from {path}")
    return config
