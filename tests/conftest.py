"""Shared fixtures for collation pipeline tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from uca_pipeline.table.repository import CollationElementTable, TableRepository

FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture(scope="session")
def mini_allkeys_path() -> Path:
    """Path of the miniature allkeys-format fixture table."""

    return FIXTURES / "mini_allkeys.txt"


@pytest.fixture(scope="session")
def mini_table(mini_allkeys_path: Path) -> CollationElementTable:
    """Fixture table loaded once and shared read-only across tests."""

    return TableRepository(mini_allkeys_path).table
