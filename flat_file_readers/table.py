"""
Table helper and exporter for flat-file-readers.

``to_dataframe`` drains a parser into a ``pandas.DataFrame`` whose columns
follow the schema order and whose dtypes follow the column kinds:

    string   -> "string"
    integer  -> "Int64"      (nullable)
    float    -> "Float64"    (nullable)
    decimal  -> object       (``decimal.Decimal`` values, no rounding)
    boolean  -> "boolean"    (nullable)
    datetime -> datetime64   (``NaT`` for blanks)

``export_table`` writes such a DataFrame as CSV or Parquet.

Why Parquet is supported next to CSV:
- Preserves column dtypes (no re-parsing on load).
- Decimal columns round-trip as exact decimals.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

import pandas as pd

from flat_file_readers.columns import ColumnDefinition, ColumnKind
from flat_file_readers.exceptions import ExportError
from flat_file_readers.parsers.base import BaseParser

logger = logging.getLogger(__name__)

_SUPPORTED_FORMATS = {"csv", "parquet"}

_DTYPES: dict[ColumnKind, str] = {
    ColumnKind.STRING: "string",
    ColumnKind.INTEGER: "Int64",
    ColumnKind.FLOAT: "Float64",
    ColumnKind.DECIMAL: "object",
    ColumnKind.BOOLEAN: "boolean",
}


def _to_series(column: ColumnDefinition, values: list[Any]) -> pd.Series:
    if column.kind is ColumnKind.DATETIME:
        # to_datetime keeps a common timezone when the values carry one
        return pd.to_datetime(pd.Series(values, dtype="object"))
    return pd.Series(values, dtype=_DTYPES[column.kind])


def to_dataframe(parser: BaseParser) -> pd.DataFrame:
    """Read every remaining record of *parser* into a DataFrame.

    The parser is not closed; scope it with ``with`` as usual.

    Raises:
        RecordFormatError: From the parser, if a record has the wrong shape.
        TypeConversionError: From the parser, if a field fails to convert.
    """
    schema = parser.get_schema()
    columns: list[list[Any]] = [[] for _ in range(len(schema))]
    for values in parser:
        for bucket, value in zip(columns, values):
            bucket.append(value)

    df = pd.DataFrame(
        {
            column.name: _to_series(column, bucket)
            for column, bucket in zip(schema.columns, columns)
        }
    )
    logger.debug("Loaded %d rows x %d columns", len(df), len(df.columns))
    return df


def export_table(
    df: pd.DataFrame,
    path: str | Path,
    output_format: Literal["csv", "parquet"] = "parquet",
) -> str:
    """Write *df* to *path* as CSV or Parquet.

    The parent directory is created if it does not exist.

    Returns:
        The written path as a string.

    Raises:
        ExportError: If *output_format* is unsupported, or if the write fails.
    """
    if output_format not in _SUPPORTED_FORMATS:
        raise ExportError(
            f"Unsupported output format: '{output_format}'. "
            f"Supported formats: {sorted(_SUPPORTED_FORMATS)}"
        )

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        if output_format == "csv":
            df.to_csv(path, index=False, encoding="utf-8")
        else:  # parquet
            df.to_parquet(path, index=False, engine="pyarrow")
    except Exception as exc:
        raise ExportError(
            f"Failed to write {path.name} as {output_format}: {exc}"
        ) from exc

    logger.info(
        "Exported table -> %s (%d rows, %d cols)",
        path.name,
        len(df),
        len(df.columns),
    )
    return str(path)
