"""
Fixed-length parser for flat-file-readers.

Each line holds one record whose fields sit in contiguous character
ranges, in schema order, with no delimiter between them. Fields shorter
than their column are padded with a fill character (space by default).

Input structure (widths 5, 10, fill '_')::

    00042Alice_____
    00043Bob_______

Lines are split by the stream's own line reading, and only the newline
(``\\n``, ``\\r\\n`` or ``\\r``) is removed. ``record_separator`` is kept on
the options but never applied to the text.
"""

from __future__ import annotations

from typing import IO, Any

from flat_file_readers.config import FixedLengthOptions
from flat_file_readers.exceptions import ConstructionError, RecordFormatError
from flat_file_readers.parsers.base import BaseParser, require, resolve_options
from flat_file_readers.schema import FixedWidthSchema


class FixedLengthParser(BaseParser):
    """Parser for records laid out in fixed-width columns."""

    def __init__(
        self,
        stream: IO[Any],
        schema: FixedWidthSchema,
        options: FixedLengthOptions | None = None,
    ) -> None:
        require(stream, "stream")
        require(schema, "schema")
        if not isinstance(schema, FixedWidthSchema):
            raise ConstructionError(
                f"FixedLengthParser needs a FixedWidthSchema, got {type(schema).__name__}"
            )
        self._options = resolve_options(options, FixedLengthOptions)
        super().__init__(stream, schema)
        self._fixed_schema = schema

    @property
    def options(self) -> FixedLengthOptions:
        return self._options

    def _split_record(self, line: str) -> list[str]:
        schema = self._fixed_schema
        if len(line) != schema.total_width:
            raise RecordFormatError(
                f"expected {schema.total_width} characters, found {len(line)}",
                record_index=self._record_count,
            )

        fill = self._options.fill_character
        raw_values: list[str] = []
        offset = 0
        for width in schema.widths:
            raw_values.append(line[offset : offset + width].strip(fill))
            offset += width
        return raw_values
