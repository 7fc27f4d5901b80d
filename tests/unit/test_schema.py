"""
Unit tests for schemas (flat_file_readers.schema).

Tests column ordering, name uniqueness, element-wise value parsing and
the width bookkeeping of FixedWidthSchema.
"""

from __future__ import annotations

import pytest

from flat_file_readers.columns import (
    boolean_column,
    float_column,
    integer_column,
    string_column,
)
from flat_file_readers.exceptions import DuplicateColumnError, TypeConversionError
from flat_file_readers.schema import FixedWidthSchema, Schema


class TestSchema:
    """Tests for the plain Schema."""

    def test_add_column_chains(self):
        schema = Schema()
        result = schema.add_column(integer_column("id")).add_column(string_column("name"))
        assert result is schema
        assert schema.column_names == ["id", "name"]
        assert len(schema) == 2

    def test_constructor_columns(self):
        schema = Schema([integer_column("a"), string_column("b")])
        assert schema.column_names == ["a", "b"]

    def test_duplicate_name_rejected(self):
        schema = Schema().add_column(integer_column("id"))
        with pytest.raises(DuplicateColumnError, match="id"):
            schema.add_column(string_column("id"))
        assert len(schema) == 1

    def test_index_of(self):
        schema = Schema([integer_column("a"), string_column("b")])
        assert schema.index_of("b") == 1
        assert "a" in schema
        assert "z" not in schema
        with pytest.raises(KeyError):
            schema.index_of("z")

    def test_columns_is_a_snapshot(self):
        schema = Schema([integer_column("a")])
        columns = schema.columns
        schema.add_column(string_column("b"))
        assert len(columns) == 1

    def test_parse_values_in_order(self):
        schema = Schema([integer_column("id"), string_column("name"), boolean_column("ok")])
        assert schema.parse_values(["7", " Ann ", "false"]) == [7, "Ann", False]

    def test_parse_values_blank_fields(self):
        schema = Schema([integer_column("id"), float_column("score")])
        assert schema.parse_values(["", "  "]) == [None, None]

    def test_parse_values_wrong_length(self):
        schema = Schema([integer_column("id")])
        with pytest.raises(ValueError, match="Expected 1 raw values, got 2"):
            schema.parse_values(["1", "2"])

    def test_parse_values_propagates_first_error(self):
        schema = Schema([integer_column("a"), integer_column("b")])
        with pytest.raises(TypeConversionError) as exc_info:
            schema.parse_values(["x", "y"])
        assert exc_info.value.column == "a"


class TestFixedWidthSchema:
    """Tests for FixedWidthSchema width bookkeeping."""

    def test_total_width_is_sum(self):
        schema = (
            FixedWidthSchema()
            .add_column(integer_column("a"), 5)
            .add_column(string_column("b"), 10)
            .add_column(string_column("c"), 1)
        )
        assert schema.widths == (5, 10, 1)
        assert schema.total_width == sum(schema.widths) == 16

    def test_empty_schema(self):
        schema = FixedWidthSchema()
        assert schema.total_width == 0
        assert schema.widths == ()

    def test_is_a_schema(self):
        schema = FixedWidthSchema().add_column(integer_column("a"), 3)
        assert isinstance(schema, Schema)
        assert schema.parse_values(["12"]) == [12]

    @pytest.mark.parametrize("width", [0, -1, 2.5, True])
    def test_invalid_width_rejected(self, width):
        with pytest.raises(ValueError, match="positive integer"):
            FixedWidthSchema().add_column(integer_column("a"), width)

    def test_duplicate_keeps_widths(self):
        schema = FixedWidthSchema().add_column(integer_column("a"), 3)
        with pytest.raises(DuplicateColumnError):
            schema.add_column(string_column("a"), 4)
        assert schema.widths == (3,)
        assert schema.total_width == 3
