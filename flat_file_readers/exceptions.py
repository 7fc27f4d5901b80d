"""
Custom exception hierarchy for flat-file-readers.

Why a custom hierarchy:
- Callers can catch specific exceptions (e.g., RecordFormatError vs
  TypeConversionError) without relying on generic ValueError/RuntimeError.
- Record-level failures carry the 1-based record index so a bad line can
  be located in the source file.

Errors that are really misuse of an argument (ConstructionError,
DuplicateColumnError) or of the parser state (ParserStateError) also
derive from the matching built-in so plain ``except ValueError`` keeps
working for callers that don't know this library.
"""

from __future__ import annotations


class FlatFileReadersError(Exception):
    """Base exception for all flat-file-readers errors."""


class ConstructionError(FlatFileReadersError, ValueError):
    """Raised when a parser is built without a stream, schema or options."""


class DuplicateColumnError(FlatFileReadersError, ValueError):
    """Raised when a column is added to a schema that already has its name."""


class ParserStateError(FlatFileReadersError, RuntimeError):
    """Raised when a parser operation is invalid for the parser's state.

    For example, calling ``get_values()`` before ``read()``, after the
    end of the file, or after a record failed to parse.
    """


class ParserDisposedError(ParserStateError):
    """Raised when any operation is attempted on a closed parser."""


class ParserError(FlatFileReadersError):
    """A record could not be parsed.

    Attributes:
        record_index: 1-based index of the offending record, or ``None``
            when the error was raised outside a parser (e.g., by calling
            ``ColumnDefinition.parse`` directly).
    """

    def __init__(self, message: str, record_index: int | None = None) -> None:
        if record_index is not None:
            message = f"Record {record_index}: {message}"
        super().__init__(message)
        self.record_index = record_index


class RecordFormatError(ParserError):
    """Raised when a record does not have the expected shape.

    Fixed-length records whose length differs from the schema's total
    width, delimited records with the wrong number of fields, and quoted
    fields left open at the end of the input all raise this.
    """


class TypeConversionError(ParserError):
    """Raised when a field's text does not satisfy its column's parse rule.

    Attributes:
        column: Name of the column whose rule failed.
        value: The raw field text.
    """

    def __init__(
        self,
        column: str,
        value: str,
        reason: str,
        record_index: int | None = None,
    ) -> None:
        super().__init__(
            f"Column '{column}' cannot convert {value!r}: {reason}",
            record_index=record_index,
        )
        self.column = column
        self.value = value
        self.reason = reason

    def with_record_index(self, record_index: int) -> TypeConversionError:
        """Return a copy of this error annotated with *record_index*."""
        return TypeConversionError(
            self.column, self.value, self.reason, record_index=record_index
        )


class ColumnTypeError(FlatFileReadersError, TypeError):
    """Raised when a typed accessor is used on a column of another kind."""


class SchemaConfigError(FlatFileReadersError):
    """Raised when a schema YAML file is empty or inconsistent.

    For example, when only some columns declare a width.
    """


class ExportError(FlatFileReadersError):
    """Raised when the exporter fails to write a table.

    For example, permission errors, disk full, or unsupported format.
    """
