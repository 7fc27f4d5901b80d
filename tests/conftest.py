"""
Shared test fixtures for flat-file-readers tests.

Schemas used across several test modules are built here so that the
column layout of the sample data lives in one place.
"""

from __future__ import annotations

import pytest

from flat_file_readers import (
    FixedWidthSchema,
    Schema,
    boolean_column,
    datetime_column,
    float_column,
    integer_column,
    string_column,
)

# ---------------------------------------------------------------------------
# Sample data -- matches the fixtures below
# ---------------------------------------------------------------------------

# widths: id=5, name=10, score=6, active=5, joined=8  (total 34)
PEOPLE_FIXED = (
    "00001Alice     92.50 True 20240102\n"
    "00002Bob       71.25 False20231130\n"
    "00003          88.00      20220615\n"
)

PEOPLE_CSV = (
    "id,name,score,active,joined\n"
    '1,"Smith, Alice",92.5,true,2024-01-02\n'
    "2,Bob,71.25,FALSE,2023-11-30\n"
    "3,,,,\n"
)


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: end-to-end tests that parse files written to disk",
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def people_fixed_schema() -> FixedWidthSchema:
    """Fixed-width schema for PEOPLE_FIXED."""
    return (
        FixedWidthSchema()
        .add_column(integer_column("id"), 5)
        .add_column(string_column("name"), 10)
        .add_column(float_column("score"), 6)
        .add_column(boolean_column("active"), 5)
        .add_column(datetime_column("joined", "%Y%m%d"), 8)
    )


@pytest.fixture()
def people_schema() -> Schema:
    """Plain schema for PEOPLE_CSV."""
    return (
        Schema()
        .add_column(integer_column("id"))
        .add_column(string_column("name"))
        .add_column(float_column("score"))
        .add_column(boolean_column("active"))
        .add_column(datetime_column("joined", "%Y-%m-%d"))
    )
