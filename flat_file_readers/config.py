"""
Configuration models and YAML I/O for flat-file-readers.

This module defines the Pydantic models for parser options and for
schema files, plus helpers for loading and saving schemas as YAML.

Key models:
- FixedLengthOptions: Record separator and fill character.
- DelimitedOptions: Separator string and first-record-schema flag.
- ColumnConfig: A ColumnDefinition with an optional width.
- SchemaConfig: The top-level schema file (an ordered column list).

Key functions:
- load_schema(path) -> Schema | FixedWidthSchema: Load and validate a YAML file.
- save_schema(schema, path): Serialize a schema to YAML.
- schema_config_from(schema) -> SchemaConfig: Model form of an in-memory schema.

Schema file layout::

    columns:
      - name: id
        kind: integer
        width: 5
      - name: joined
        kind: datetime
        date_format: "%Y%m%d"
        width: 8

Either every column declares a ``width`` (a fixed-width schema) or none
does (a plain schema for delimited files).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from flat_file_readers.columns import ColumnDefinition
from flat_file_readers.exceptions import ConstructionError, SchemaConfigError
from flat_file_readers.schema import FixedWidthSchema, Schema

logger = logging.getLogger(__name__)

QUOTE_CHARACTERS = ("'", '"')


class _ParserOptions(BaseModel):
    """Frozen options model whose validation failures are ``ConstructionError``."""

    model_config = ConfigDict(frozen=True)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConstructionError(f"Invalid {type(self).__name__}: {exc}") from exc


class FixedLengthOptions(_ParserOptions):
    """Settings for ``FixedLengthParser``."""

    record_separator: str = Field(
        os.linesep,
        min_length=1,
        description=(
            "Line-terminator convention of the file. Lines come from the "
            "stream's own line reading; this value is not applied to the text."
        ),
    )
    fill_character: str = Field(
        " ",
        min_length=1,
        max_length=1,
        description="Padding character trimmed from both ends of each field",
    )


class DelimitedOptions(_ParserOptions):
    """Settings for ``DelimitedParser``."""

    separator: str = Field(",", min_length=1, description="Field separator string")
    is_first_record_schema: bool = Field(
        False,
        description=(
            "If True, the first record holds column names. Without a schema "
            "it defines an all-string schema; with a schema it is skipped."
        ),
    )

    @field_validator("separator")
    @classmethod
    def _check_separator_not_quote(cls, value: str) -> str:
        """A separator that is a quote character makes quoting ambiguous."""
        if value in QUOTE_CHARACTERS:
            raise ValueError(
                f"Separator {value!r} cannot be a quote character "
                f"({' or '.join(QUOTE_CHARACTERS)})"
            )
        return value


class ColumnConfig(ColumnDefinition):
    """A column entry in a schema file."""

    width: int | None = Field(
        None, ge=1, description="Field width in characters (fixed-width schemas)"
    )

    def to_definition(self) -> ColumnDefinition:
        return ColumnDefinition(**self.model_dump(exclude={"width"}))


class SchemaConfig(BaseModel):
    """Top-level schema file model. Maps 1:1 to the YAML file."""

    columns: list[ColumnConfig] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_widths_consistent(self) -> SchemaConfig:
        """Widths must be declared on all columns or on none."""
        with_width = [c.name for c in self.columns if c.width is not None]
        if with_width and len(with_width) != len(self.columns):
            missing = [c.name for c in self.columns if c.width is None]
            raise ValueError(
                f"Columns {missing} have no width while {with_width} do. "
                "Declare a width on every column or on none."
            )
        return self

    @property
    def is_fixed_width(self) -> bool:
        return self.columns[0].width is not None

    def build(self) -> Schema | FixedWidthSchema:
        """Build the in-memory schema described by this config."""
        if self.is_fixed_width:
            fixed = FixedWidthSchema()
            for column in self.columns:
                fixed.add_column(column.to_definition(), column.width)
            return fixed
        return Schema([column.to_definition() for column in self.columns])


def schema_config_from(schema: Schema) -> SchemaConfig:
    """Describe an in-memory schema as a ``SchemaConfig``."""
    widths: tuple[int | None, ...]
    if isinstance(schema, FixedWidthSchema):
        widths = schema.widths
    else:
        widths = (None,) * len(schema)
    return SchemaConfig(
        columns=[
            ColumnConfig(**column.model_dump(), width=width)
            for column, width in zip(schema.columns, widths)
        ]
    )


def load_schema(path: str | Path) -> Schema | FixedWidthSchema:
    """Load and validate a schema YAML file.

    Returns:
        A ``FixedWidthSchema`` when the columns declare widths, otherwise
        a plain ``Schema``.

    Raises:
        FileNotFoundError: If the file does not exist.
        SchemaConfigError: If the file is empty.
        pydantic.ValidationError: If the content fails validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise SchemaConfigError(f"Schema file is empty: {path}")
    config = SchemaConfig.model_validate(raw)
    logger.info(
        "Loaded %s schema with %d columns from %s",
        "fixed-width" if config.is_fixed_width else "plain",
        len(config.columns),
        path,
    )
    return config.build()


def save_schema(schema: Schema, path: str | Path) -> None:
    """Serialize *schema* to YAML.

    Defaults are left out so hand-edited files stay short.
    """
    if len(schema) == 0:
        raise SchemaConfigError("Cannot save a schema without columns")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = schema_config_from(schema).model_dump(mode="json", exclude_defaults=True)
    # kind defaults to string but is always written out
    data["columns"] = [
        {"name": entry.pop("name"), "kind": column.kind.value, **entry}
        for entry, column in zip(data["columns"], schema.columns)
    ]
    with open(path, "w", encoding="utf-8") as f:
        f.write("# flat-file-readers schema\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved schema to %s", path)
