"""
Shared test fixtures and path constants for ston-log-transform tests.

Sample inputs live in tests/data/. If files move or new ones are added,
update the constants here.
"""

from pathlib import Path

import pytest

from ston_log_transform.schema_registry import Schema, default_registry

# ---------------------------------------------------------------------------
# Input file paths
# ---------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent / "data"

SAMPLE_LOG = DATA_DIR / "sample_ston.log"


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (runs against sample log files)",
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def ston_schema() -> Schema:
    """The built-in ston_v1.0 schema."""
    return default_registry().get("ston_v1.0")


@pytest.fixture
def sample_log() -> Path:
    return SAMPLE_LOG
