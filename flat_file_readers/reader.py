"""
Tabular cursor over a parser.

``FlatFileReader`` lets callers walk a flat file the way they would walk
a database cursor: advance with ``read()``, then fetch columns by
position or name with typed getters (``get_int``, ``get_string``, ...).

The reader adds no state of its own beyond a cached copy of the current
record: every call is checked by the wrapped parser's state machine, so
reading before ``read()``, after the end of input, after a parse error or
after ``close()`` fails the same way it does on the parser.

Typed getters check the column kind, not the value: ``get_int`` on a
string column raises ``ColumnTypeError`` even when the text looks
numeric. Blank fields are ``None``; test them with ``is_null`` first.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from flat_file_readers.columns import ColumnDefinition, ColumnKind
from flat_file_readers.exceptions import ColumnTypeError
from flat_file_readers.parsers.base import BaseParser


class FlatFileReader:
    """Cursor-style access to the records of a parser."""

    def __init__(self, parser: BaseParser) -> None:
        self._parser = parser
        self._current: list[Any] | None = None

    @property
    def parser(self) -> BaseParser:
        return self._parser

    @property
    def field_count(self) -> int:
        return len(self._parser.get_schema())

    def read(self) -> bool:
        """Advance to the next record; ``False`` once input is exhausted."""
        self._current = None
        return self._parser.read()

    def get_name(self, index: int) -> str:
        return self._column(index).name

    def get_ordinal(self, name: str) -> int:
        """Return the position of the column called *name*."""
        return self._parser.get_schema().index_of(name)

    def get_field_type(self, index: int) -> type:
        return self._column(index).python_type

    def get_values(self) -> list[Any]:
        """Return a copy of the current record's values."""
        return list(self._record())

    def get_value(self, index: int) -> Any:
        return self._record()[index]

    def is_null(self, index: int) -> bool:
        return self.get_value(index) is None

    def get_string(self, index: int) -> str | None:
        return self._typed(index, ColumnKind.STRING)

    def get_int(self, index: int) -> int | None:
        return self._typed(index, ColumnKind.INTEGER)

    def get_float(self, index: int) -> float | None:
        return self._typed(index, ColumnKind.FLOAT)

    def get_decimal(self, index: int) -> Decimal | None:
        return self._typed(index, ColumnKind.DECIMAL)

    def get_bool(self, index: int) -> bool | None:
        return self._typed(index, ColumnKind.BOOLEAN)

    def get_datetime(self, index: int) -> datetime | None:
        return self._typed(index, ColumnKind.DATETIME)

    def __getitem__(self, key: int | str) -> Any:
        if isinstance(key, str):
            key = self.get_ordinal(key)
        return self.get_value(key)

    def close(self) -> None:
        self._current = None
        self._parser.close()

    def __enter__(self) -> FlatFileReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -- Private helpers ---------------------------------------------------

    def _column(self, index: int) -> ColumnDefinition:
        return self._parser.get_schema().columns[index]

    def _record(self) -> list[Any]:
        # get_values() enforces the parser state; cache to avoid a copy per column
        if self._current is None:
            self._current = self._parser.get_values()
        return self._current

    def _typed(self, index: int, kind: ColumnKind) -> Any:
        column = self._column(index)
        if column.kind is not kind:
            raise ColumnTypeError(
                f"Column '{column.name}' holds {column.kind.value} values, "
                f"not {kind.value}"
            )
        return self.get_value(index)
