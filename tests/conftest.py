"""Shared pytest fixtures for hclkit tests."""

from pathlib import Path

import pytest

from hclkit import parse_configuration
from hclkit.core import ir


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def main_tf(fixtures_dir: Path) -> str:
    """Source text of a configuration using every declaration kind."""
    return (fixtures_dir / "main.tf").read_text(encoding="utf-8")


@pytest.fixture
def main_config(main_tf: str) -> ir.Configuration:
    """Parsed form of ``main_tf``."""
    return parse_configuration(main_tf, source_name="main.tf")
