"""
flat-file-readers: typed records from fixed-width and delimited text files.

Public API surface:

- ``open_fixed_length(path, schema, ...)`` -- open a fixed-width file and
  return a ``FixedLengthParser`` that owns the file handle.

- ``open_delimited(path, schema=None, ...)`` -- open a separated-value
  file and return a ``DelimitedParser``.

- ``read_dataframe(path, schema, ...)`` -- parse a whole file into a
  ``pandas.DataFrame`` with dtypes derived from the schema.

Schemas are built in code (``Schema``, ``FixedWidthSchema`` and the
column factories) or loaded from YAML with ``load_schema``.

Typical use::

    schema = (
        FixedWidthSchema()
        .add_column(integer_column("id"), 5)
        .add_column(string_column("name"), 10)
    )
    with flat_file_readers.open_fixed_length("people.txt", schema) as parser:
        while parser.read():
            record_id, name = parser.get_values()
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from flat_file_readers.columns import (
    ColumnDefinition,
    ColumnKind,
    boolean_column,
    datetime_column,
    decimal_column,
    float_column,
    integer_column,
    string_column,
)
from flat_file_readers.config import (
    DelimitedOptions,
    FixedLengthOptions,
    load_schema,
    save_schema,
)
from flat_file_readers.exceptions import (
    ColumnTypeError,
    ConstructionError,
    DuplicateColumnError,
    ExportError,
    FlatFileReadersError,
    ParserDisposedError,
    ParserError,
    ParserStateError,
    RecordFormatError,
    SchemaConfigError,
    TypeConversionError,
)
from flat_file_readers.parsers import (
    BaseParser,
    DelimitedParser,
    FixedLengthParser,
    ParserState,
)
from flat_file_readers.reader import FlatFileReader
from flat_file_readers.schema import FixedWidthSchema, Schema
from flat_file_readers.table import export_table, to_dataframe

__all__ = [
    "open_fixed_length",
    "open_delimited",
    "read_dataframe",
    "BaseParser",
    "ColumnDefinition",
    "ColumnKind",
    "ColumnTypeError",
    "ConstructionError",
    "DelimitedOptions",
    "DelimitedParser",
    "DuplicateColumnError",
    "ExportError",
    "FixedLengthOptions",
    "FixedLengthParser",
    "FixedWidthSchema",
    "FlatFileReader",
    "FlatFileReadersError",
    "ParserDisposedError",
    "ParserError",
    "ParserState",
    "ParserStateError",
    "RecordFormatError",
    "Schema",
    "SchemaConfigError",
    "TypeConversionError",
    "boolean_column",
    "datetime_column",
    "decimal_column",
    "export_table",
    "float_column",
    "integer_column",
    "load_schema",
    "save_schema",
    "string_column",
    "to_dataframe",
]

logger = logging.getLogger(__name__)


def open_fixed_length(
    path: str | Path,
    schema: FixedWidthSchema,
    options: FixedLengthOptions | None = None,
    encoding: str = "utf-8",
) -> FixedLengthParser:
    """Open a fixed-width file.

    Args:
        path: Path to the file.
        schema: Column definitions and widths.
        options: Record separator and fill character; defaults when ``None``.
        encoding: Text encoding of the file.

    Returns:
        A ``FixedLengthParser`` that owns the open file. Use it in a
        ``with`` block so the file is closed on every exit path.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ConstructionError: If *schema* is missing or not fixed-width.
    """
    return FixedLengthParser.from_path(path, schema, options, encoding=encoding)


def open_delimited(
    path: str | Path,
    schema: Schema | None = None,
    options: DelimitedOptions | None = None,
    encoding: str = "utf-8",
) -> DelimitedParser:
    """Open a delimited (separated-value) file.

    Args:
        path: Path to the file.
        schema: Column definitions. May be ``None`` when
            ``options.is_first_record_schema`` is set, in which case the
            header line defines all-string columns.
        options: Separator and header handling; defaults when ``None``.
        encoding: Text encoding of the file.

    Returns:
        A ``DelimitedParser`` that owns the open file.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ConstructionError: If no schema is given and the header flag is off.
    """
    return DelimitedParser.from_path(path, schema, options, encoding=encoding)


def read_dataframe(
    path: str | Path,
    schema: Schema | None = None,
    options: FixedLengthOptions | DelimitedOptions | None = None,
    encoding: str = "utf-8",
) -> pd.DataFrame:
    """Parse a whole file into a DataFrame.

    A ``FixedWidthSchema`` selects the fixed-length parser; anything else
    (including no schema) selects the delimited parser.

    Raises:
        RecordFormatError: If a record has the wrong shape.
        TypeConversionError: If a field fails to convert.
    """
    logger.info("read_dataframe() -- path=%s", path)
    parser: BaseParser
    if isinstance(schema, FixedWidthSchema):
        parser = open_fixed_length(path, schema, options, encoding=encoding)  # type: ignore[arg-type]
    else:
        parser = open_delimited(path, schema, options, encoding=encoding)  # type: ignore[arg-type]
    with parser:
        return to_dataframe(parser)
