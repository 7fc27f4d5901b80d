"""
Parsers sub-package for flat-file-readers.

Contains the record parsers that turn lines of a flat file into lists of
typed values.

Design: Template Method
- base.py defines BaseParser, which owns the state machine (read,
  get_values, get_schema, close) and the error poisoning rules.
- fixed_length.py implements FixedLengthParser: slices each line by the
  widths of a FixedWidthSchema.
- delimited.py implements DelimitedParser: splits each record on a
  separator string, honoring quoted fields.

Each variant only supplies ``_split_record``; typed conversion is always
delegated to the schema.
"""

from flat_file_readers.parsers.base import BaseParser, ParserState
from flat_file_readers.parsers.delimited import DelimitedParser
from flat_file_readers.parsers.fixed_length import FixedLengthParser

__all__ = ["BaseParser", "ParserState", "DelimitedParser", "FixedLengthParser"]
