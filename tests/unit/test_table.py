"""
Unit tests for the table helper and exporter (flat_file_readers.table).

Tests DataFrame dtypes per column kind, null handling, CSV and Parquet
export, and error handling using pytest's tmp_path fixture.
"""

from __future__ import annotations

import io
from decimal import Decimal

import pandas as pd
import pytest

from flat_file_readers.columns import decimal_column, integer_column, string_column
from flat_file_readers.exceptions import ExportError, RecordFormatError, TypeConversionError
from flat_file_readers.parsers import DelimitedParser, FixedLengthParser
from flat_file_readers.schema import Schema
from flat_file_readers.table import export_table, to_dataframe
from tests.conftest import PEOPLE_FIXED


@pytest.fixture()
def people_df(people_fixed_schema) -> pd.DataFrame:
    with FixedLengthParser(io.StringIO(PEOPLE_FIXED), people_fixed_schema) as parser:
        return to_dataframe(parser)


class TestToDataFrame:
    """Tests for to_dataframe()."""

    def test_shape_and_order(self, people_df):
        assert list(people_df.columns) == ["id", "name", "score", "active", "joined"]
        assert len(people_df) == 3

    def test_dtypes(self, people_df):
        assert str(people_df["id"].dtype) == "Int64"
        assert str(people_df["name"].dtype) == "string"
        assert str(people_df["score"].dtype) == "Float64"
        assert str(people_df["active"].dtype) == "boolean"
        assert pd.api.types.is_datetime64_any_dtype(people_df["joined"])

    def test_values_and_nulls(self, people_df):
        assert people_df["id"].tolist() == [1, 2, 3]
        assert people_df["name"].iloc[0] == "Alice"
        assert pd.isna(people_df["name"].iloc[2])
        assert pd.isna(people_df["active"].iloc[2])
        assert people_df["joined"].iloc[1] == pd.Timestamp("2023-11-30")

    def test_decimal_kept_exact(self):
        schema = Schema([decimal_column("price")])
        with DelimitedParser(io.StringIO("0.10\n\n"), schema) as parser:
            df = to_dataframe(parser)
        assert df["price"].iloc[0] == Decimal("0.10")
        assert df["price"].iloc[1] is None

    def test_empty_input(self, people_fixed_schema):
        with FixedLengthParser(io.StringIO(""), people_fixed_schema) as parser:
            df = to_dataframe(parser)
        assert len(df) == 0
        assert list(df.columns) == people_fixed_schema.column_names

    def test_parse_error_propagates(self, people_fixed_schema):
        with FixedLengthParser(io.StringIO("short\n"), people_fixed_schema) as parser:
            with pytest.raises(RecordFormatError):
                to_dataframe(parser)

    def test_integer_beyond_int64_is_conversion_error(self):
        schema = Schema([integer_column("n")])
        with DelimitedParser(io.StringIO("1\n99999999999999999999\n"), schema) as parser:
            with pytest.raises(TypeConversionError) as exc_info:
                to_dataframe(parser)
        assert exc_info.value.record_index == 2


class TestExportTable:
    """Tests for export_table()."""

    def test_csv(self, tmp_path, people_df):
        path = export_table(people_df, tmp_path / "out" / "people.csv", "csv")
        assert path.endswith("people.csv")
        loaded = pd.read_csv(path)
        assert loaded["id"].tolist() == [1, 2, 3]
        assert loaded["name"].iloc[1] == "Bob"

    def test_parquet_round_trip(self, tmp_path, people_df):
        path = export_table(people_df, tmp_path / "people.parquet", "parquet")
        loaded = pd.read_parquet(path)
        assert loaded["id"].tolist() == [1, 2, 3]
        assert loaded["score"].iloc[0] == pytest.approx(92.5)
        assert bool(loaded["active"].iloc[1]) is False

    def test_unsupported_format(self, tmp_path, people_df):
        with pytest.raises(ExportError, match="Unsupported output format"):
            export_table(people_df, tmp_path / "people.xlsx", "xlsx")

    def test_write_failure_wrapped(self, tmp_path, people_df):
        target = tmp_path / "is_a_dir"
        target.mkdir()
        with pytest.raises(ExportError, match="Failed to write"):
            export_table(people_df, target, "csv")

    def test_strings_only(self, tmp_path):
        schema = Schema([string_column("a"), string_column("b")])
        with DelimitedParser(io.StringIO("x,y\n"), schema) as parser:
            df = to_dataframe(parser)
        path = export_table(df, tmp_path / "s.csv", "csv")
        assert pd.read_csv(path).to_dict("records") == [{"a": "x", "b": "y"}]
