"""
Delimited (separated-value) parser for flat-file-readers.

Each record is split on a separator string (``,`` by default). A field
that starts with a single or double quote runs until the matching quote,
so it may contain the separator or line breaks; the quotes themselves are
dropped. There are no escape sequences: inside a quoted span every
character other than the closing quote is literal, and a quote character
anywhere other than the start of a field is ordinary text.

Input structure::

    id,name,joined
    1,"Smith, Jane",2024-01-02
    2,'multi
    line',2024-03-04

With ``is_first_record_schema=True`` and no schema, the first record
names the columns and every column is a string column. With a schema and
the flag, the first record is skipped without looking at it.
"""

from __future__ import annotations

import logging
from typing import IO, Any

from flat_file_readers.columns import string_column
from flat_file_readers.config import QUOTE_CHARACTERS, DelimitedOptions
from flat_file_readers.exceptions import ConstructionError, RecordFormatError
from flat_file_readers.parsers.base import BaseParser, require, resolve_options
from flat_file_readers.schema import Schema

logger = logging.getLogger(__name__)


class DelimitedParser(BaseParser):
    """Parser for separator-delimited records."""

    def __init__(
        self,
        stream: IO[Any],
        schema: Schema | None = None,
        options: DelimitedOptions | None = None,
    ) -> None:
        require(stream, "stream")
        options = resolve_options(options, DelimitedOptions)
        if schema is None and not options.is_first_record_schema:
            raise ConstructionError(
                "The schema argument is required unless is_first_record_schema is set"
            )
        self._options = options
        super().__init__(stream, schema)
        if options.is_first_record_schema:
            try:
                self._consume_header()
            except Exception:
                self.close()
                raise

    @property
    def options(self) -> DelimitedOptions:
        return self._options

    def _consume_header(self) -> None:
        line = self._read_line()
        if self._schema is not None:
            # Caller's schema wins; the header line is skipped unchecked.
            return
        if line is None:
            self._schema = Schema()
            return
        names = [name.strip() for name in self._split_fields(line, record_index=None)]
        if not all(names):
            raise ConstructionError(
                f"The header record has an empty column name: {names}"
            )
        self._schema = Schema([string_column(name) for name in names])
        logger.debug("Header record defines columns %s", names)

    def _split_record(self, line: str) -> list[str]:
        fields = self._split_fields(line, record_index=self._record_count)
        expected = len(self._schema)  # type: ignore[arg-type]
        if len(fields) != expected:
            raise RecordFormatError(
                f"expected {expected} fields, found {len(fields)}",
                record_index=self._record_count,
            )
        return fields

    def _split_fields(self, line: str, record_index: int | None) -> list[str]:
        """Split a record into fields, reading more lines while a quote is open."""
        separator = self._options.separator
        fields: list[str] = []
        current: list[str] = []
        quote: str | None = None
        at_field_start = True
        i = 0

        while True:
            if i >= len(line):
                if quote is None:
                    break
                continuation = self._read_line()
                if continuation is None:
                    where = "header record" if record_index is None else "record"
                    raise RecordFormatError(
                        f"{where} ends inside a field opened with {quote}",
                        record_index=record_index,
                    )
                current.append("\n")
                line, i = continuation, 0
                continue

            char = line[i]
            if quote is not None:
                if char == quote:
                    quote = None
                else:
                    current.append(char)
                i += 1
            elif line.startswith(separator, i):
                fields.append("".join(current))
                current = []
                at_field_start = True
                i += len(separator)
            elif at_field_start and char in QUOTE_CHARACTERS:
                quote = char
                at_field_start = False
                i += 1
            else:
                current.append(char)
                at_field_start = False
                i += 1

        fields.append("".join(current))
        return fields
