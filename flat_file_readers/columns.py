"""
Column definitions for flat-file-readers.

A column is a tagged variant: every ``ColumnDefinition`` carries a
``ColumnKind`` tag plus the configuration its kind needs (a date format,
true/false tokens, string trimming). Converting raw text looks the tag up
in ``_PARSERS`` and calls the matching pure function.

Conversion contract shared by every kind:
- Blank or whitespace-only text is a missing value and yields ``None``.
- Text that does not match the kind's representation raises
  ``TypeConversionError`` (carrying the column name and the raw text).
- Numbers use invariant formatting: ``.`` as the decimal point, no
  thousand separators, optional leading sign.

Why pydantic models:
- Definitions are immutable once built (``frozen=True``).
- The same models validate schema YAML files (see ``config.py``), so a
  column declared in code and one loaded from disk are the same object.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from flat_file_readers.exceptions import TypeConversionError

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)

# Signed 64-bit, the range a pandas Int64 column holds
_INTEGER_MIN = -(2**63)
_INTEGER_MAX = 2**63 - 1


class ColumnKind(str, Enum):
    """The closed set of column kinds."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATETIME = "datetime"


class ColumnDefinition(BaseModel):
    """A named column and the rule that turns its raw text into a value.

    Build instances with the factory helpers (``integer_column("id")``,
    ``boolean_column("active", true_string="Y", false_string="N")``, ...)
    or directly with a ``kind``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Column name, unique within a schema")
    kind: ColumnKind = Field(ColumnKind.STRING, description="Type of the parsed values")
    date_format: str | None = Field(
        None,
        description="strptime format for datetime columns; ISO-8601 when unset",
    )
    true_string: str = Field("True", description="Token for true (boolean columns)")
    false_string: str = Field("False", description="Token for false (boolean columns)")
    trim: bool = Field(True, description="Strip surrounding whitespace (string columns)")

    @model_validator(mode="after")
    def _check_boolean_tokens(self) -> ColumnDefinition:
        """Boolean tokens must be non-blank and distinguishable."""
        if self.kind is ColumnKind.BOOLEAN:
            true_token = self.true_string.strip()
            false_token = self.false_string.strip()
            if not true_token or not false_token:
                raise ValueError(
                    f"Boolean column '{self.name}' needs non-blank true/false tokens"
                )
            if true_token.casefold() == false_token.casefold():
                raise ValueError(
                    f"Boolean column '{self.name}' has identical true/false tokens: "
                    f"{true_token!r}"
                )
        return self

    @property
    def python_type(self) -> type:
        """The Python type of the values this column produces."""
        return _PYTHON_TYPES[self.kind]

    def parse(self, raw: str | None) -> Any:
        """Convert *raw* into this column's value type.

        Returns:
            The typed value, or ``None`` for blank input.

        Raises:
            TypeConversionError: If non-blank text cannot be converted.
        """
        if raw is None or not raw.strip():
            return None
        return _PARSERS[self.kind](self, raw)


# ---------------------------------------------------------------------------
# Per-kind parse functions
# ---------------------------------------------------------------------------

def _parse_string(column: ColumnDefinition, raw: str) -> str:
    return raw.strip() if column.trim else raw


def _parse_integer(column: ColumnDefinition, raw: str) -> int:
    text = raw.strip()
    if not _INTEGER_PATTERN.fullmatch(text):
        raise TypeConversionError(column.name, raw, "not an integer")
    value = int(text)
    if not _INTEGER_MIN <= value <= _INTEGER_MAX:
        raise TypeConversionError(column.name, raw, "number out of range")
    return value


def _parse_float(column: ColumnDefinition, raw: str) -> float:
    text = raw.strip()
    if not _FLOAT_PATTERN.fullmatch(text):
        raise TypeConversionError(column.name, raw, "not a number")
    value = float(text)
    if math.isinf(value):
        raise TypeConversionError(column.name, raw, "number out of range")
    return value


def _parse_decimal(column: ColumnDefinition, raw: str) -> Decimal:
    text = raw.strip()
    if not _FLOAT_PATTERN.fullmatch(text):
        raise TypeConversionError(column.name, raw, "not a number")
    try:
        return Decimal(text)
    except InvalidOperation as exc:
        raise TypeConversionError(column.name, raw, "not a number") from exc


def _parse_boolean(column: ColumnDefinition, raw: str) -> bool:
    text = raw.strip().casefold()
    if text == column.true_string.strip().casefold():
        return True
    if text == column.false_string.strip().casefold():
        return False
    raise TypeConversionError(
        column.name,
        raw,
        f"expected {column.true_string!r} or {column.false_string!r}",
    )


def _parse_datetime(column: ColumnDefinition, raw: str) -> datetime:
    text = raw.strip()
    try:
        if column.date_format is None:
            return datetime.fromisoformat(text)
        return datetime.strptime(text, column.date_format)
    except ValueError as exc:
        expected = column.date_format or "ISO-8601"
        raise TypeConversionError(
            column.name, raw, f"does not match date format {expected!r}"
        ) from exc


_PARSERS: dict[ColumnKind, Callable[[ColumnDefinition, str], Any]] = {
    ColumnKind.STRING: _parse_string,
    ColumnKind.INTEGER: _parse_integer,
    ColumnKind.FLOAT: _parse_float,
    ColumnKind.DECIMAL: _parse_decimal,
    ColumnKind.BOOLEAN: _parse_boolean,
    ColumnKind.DATETIME: _parse_datetime,
}

_PYTHON_TYPES: dict[ColumnKind, type] = {
    ColumnKind.STRING: str,
    ColumnKind.INTEGER: int,
    ColumnKind.FLOAT: float,
    ColumnKind.DECIMAL: Decimal,
    ColumnKind.BOOLEAN: bool,
    ColumnKind.DATETIME: datetime,
}


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------

def string_column(name: str, trim: bool = True) -> ColumnDefinition:
    return ColumnDefinition(name=name, kind=ColumnKind.STRING, trim=trim)


def integer_column(name: str) -> ColumnDefinition:
    return ColumnDefinition(name=name, kind=ColumnKind.INTEGER)


def float_column(name: str) -> ColumnDefinition:
    return ColumnDefinition(name=name, kind=ColumnKind.FLOAT)


def decimal_column(name: str) -> ColumnDefinition:
    return ColumnDefinition(name=name, kind=ColumnKind.DECIMAL)


def datetime_column(name: str, date_format: str | None = None) -> ColumnDefinition:
    """Build a datetime column.

    Args:
        name: Column name.
        date_format: A ``strptime`` format such as ``"%Y%m%d"``. When
            ``None``, values are parsed as ISO-8601.
    """
    return ColumnDefinition(name=name, kind=ColumnKind.DATETIME, date_format=date_format)


def boolean_column(
    name: str,
    true_string: str = "True",
    false_string: str = "False",
) -> ColumnDefinition:
    """Build a boolean column matching *true_string*/*false_string* case-insensitively."""
    return ColumnDefinition(
        name=name,
        kind=ColumnKind.BOOLEAN,
        true_string=true_string,
        false_string=false_string,
    )
