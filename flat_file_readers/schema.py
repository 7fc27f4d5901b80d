"""
Schemas for flat-file-readers.

A ``Schema`` is an ordered, name-unique list of ``ColumnDefinition``
objects. It turns the raw strings split out of one record into typed
values, column by column.

A ``FixedWidthSchema`` is a ``Schema`` whose columns also have a width in
characters. The fixed-length parser slices each line with these widths;
``total_width`` is the exact length every line must have.

Schemas are built once, before parsing, and are not meant to be changed
while a parser is using them.
"""

from __future__ import annotations

from typing import Any, Iterator, Sequence

from flat_file_readers.columns import ColumnDefinition
from flat_file_readers.exceptions import DuplicateColumnError


class Schema:
    """An ordered collection of uniquely named columns.

    ``add_column`` returns the schema, so definitions chain::

        schema = (
            Schema()
            .add_column(integer_column("id"))
            .add_column(string_column("name"))
        )
    """

    def __init__(self, columns: Sequence[ColumnDefinition] = ()) -> None:
        self._columns: list[ColumnDefinition] = []
        self._index: dict[str, int] = {}
        for column in columns:
            self.add_column(column)

    def add_column(self, column: ColumnDefinition) -> Schema:
        """Append *column*.

        Raises:
            DuplicateColumnError: If a column with the same name exists.
        """
        self._append(column)
        return self

    def _append(self, column: ColumnDefinition) -> None:
        if column.name in self._index:
            raise DuplicateColumnError(
                f"A column named '{column.name}' already exists in the schema"
            )
        self._index[column.name] = len(self._columns)
        self._columns.append(column)

    @property
    def columns(self) -> tuple[ColumnDefinition, ...]:
        return tuple(self._columns)

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self._columns]

    def index_of(self, name: str) -> int:
        """Return the position of the column called *name*.

        Raises:
            KeyError: If there is no such column.
        """
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(f"No column named '{name}' in the schema") from None

    def parse_values(self, raw_values: Sequence[str]) -> list[Any]:
        """Convert one record's raw strings into typed values.

        Args:
            raw_values: One string per column, in column order. Passing a
                sequence of another length is a programming error.

        Returns:
            A new list of typed values (``None`` for blank fields).

        Raises:
            ValueError: If the number of raw values differs from the
                number of columns.
            TypeConversionError: From the first column that cannot
                convert its text.
        """
        if len(raw_values) != len(self._columns):
            raise ValueError(
                f"Expected {len(self._columns)} raw values, got {len(raw_values)}"
            )
        return [column.parse(raw) for column, raw in zip(self._columns, raw_values)]

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[ColumnDefinition]:
        return iter(self._columns)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __repr__(self) -> str:
        return f"{type(self).__name__}(columns={self.column_names!r})"


class FixedWidthSchema(Schema):
    """A schema whose columns occupy fixed character ranges."""

    def __init__(self) -> None:
        super().__init__()
        self._widths: list[int] = []
        self._total_width = 0

    def add_column(self, column: ColumnDefinition, width: int) -> FixedWidthSchema:  # type: ignore[override]
        """Append *column* occupying *width* characters.

        Raises:
            ValueError: If *width* is not a positive integer.
            DuplicateColumnError: If a column with the same name exists.
        """
        if isinstance(width, bool) or not isinstance(width, int) or width < 1:
            raise ValueError(
                f"Width of column '{column.name}' must be a positive integer, got {width!r}"
            )
        self._append(column)
        self._widths.append(width)
        self._total_width = sum(self._widths)
        return self

    @property
    def widths(self) -> tuple[int, ...]:
        return tuple(self._widths)

    @property
    def total_width(self) -> int:
        """The exact character length of every record."""
        return self._total_width

    def __repr__(self) -> str:
        pairs = list(zip(self.column_names, self._widths))
        return f"FixedWidthSchema(columns={pairs!r}, total_width={self._total_width})"
