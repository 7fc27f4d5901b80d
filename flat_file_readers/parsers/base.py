"""
Base parser for flat-file-readers.

Both parser variants share one state machine, implemented here. The
variants only decide how a line becomes a list of raw field strings
(``_split_record``); reading lines, typed conversion, error poisoning and
resource release all live in ``BaseParser``.

States (``ParserState``)::

    FRESH --read()--> POSITIONED --read()--> POSITIONED
      |                   |
      +-------------------+--> END_OF_FILE   (read() keeps returning False)
      |                   |
      +-------------------+--> ERRORED       (every call raises ParserStateError)

    any state --close()--> DISPOSED          (every call raises ParserDisposedError)

A record that fails to parse poisons the parser: there is no skip and no
retry. Open a new parser over a fresh stream to read the file again.

Release the stream with ``close()`` or, preferably, a ``with`` block.
``__del__`` closes a stream the caller forgot about, but when that runs is
up to the garbage collector, so correct code never relies on it.
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import IO, Any, Iterator, TypeVar

from pydantic import BaseModel

from flat_file_readers.exceptions import (
    ConstructionError,
    ParserDisposedError,
    ParserStateError,
    TypeConversionError,
)
from flat_file_readers.schema import Schema

logger = logging.getLogger(__name__)

_READ_NOT_CALLED = "read() has not been called yet"
_NO_MORE_RECORDS = "there are no more records"
_READING_WITH_ERRORS = "the parser stopped at a record with errors"

_OptionsT = TypeVar("_OptionsT", bound=BaseModel)
_ParserT = TypeVar("_ParserT", bound="BaseParser")


class ParserState(str, Enum):
    """Mutually exclusive states of a parser."""

    FRESH = "fresh"
    POSITIONED = "positioned"
    END_OF_FILE = "end_of_file"
    ERRORED = "errored"
    DISPOSED = "disposed"


def require(value: object, name: str) -> None:
    """Raise ``ConstructionError`` if a required argument is missing."""
    if value is None:
        raise ConstructionError(f"The {name} argument is required")


def resolve_options(options: _OptionsT | None, options_type: type[_OptionsT]) -> _OptionsT:
    """Return *options*, or default options when ``None`` is passed."""
    if options is None:
        return options_type()
    if not isinstance(options, options_type):
        raise ConstructionError(
            f"Expected {options_type.__name__}, got {type(options).__name__}"
        )
    return options


def _as_text_stream(stream: IO[Any]) -> IO[str]:
    """Wrap binary streams in a UTF-8 text reader; text streams pass through."""
    if isinstance(stream, io.TextIOBase):
        return stream
    if isinstance(stream, io.RawIOBase):
        return io.TextIOWrapper(io.BufferedReader(stream), encoding="utf-8")
    if isinstance(stream, io.BufferedIOBase):
        return io.TextIOWrapper(stream, encoding="utf-8")
    return stream


class BaseParser(ABC):
    """Abstract base class for the record parsers.

    Subclasses validate their own arguments (see ``require``) before
    calling ``super().__init__`` so that nothing touches the stream when
    construction fails, and implement ``_split_record``.
    """

    def __init__(self, stream: IO[Any], schema: Schema | None) -> None:
        self._reader = _as_text_stream(stream)
        self._schema = schema
        self._record_count = 0
        self._values: list[Any] = []
        self._state = ParserState.FRESH

    @classmethod
    def from_path(
        cls: type[_ParserT],
        path: str | Path,
        schema: Schema | None = None,
        options: BaseModel | None = None,
        encoding: str = "utf-8",
    ) -> _ParserT:
        """Open the file at *path* and build a parser that owns it.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConstructionError: If the schema or options are invalid.
        """
        path = Path(path)
        stream = open(path, "r", encoding=encoding)
        try:
            parser = cls(stream, schema, options)  # type: ignore[call-arg]
        except Exception:
            stream.close()
            raise
        logger.info("Opened %s with %s", path, cls.__name__)
        return parser

    # -- Public API --------------------------------------------------------

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def record_count(self) -> int:
        """Number of records read so far (0 before the first ``read()``)."""
        return self._record_count

    def get_schema(self) -> Schema:
        """Return the schema the parser converts records with."""
        self._check_not_disposed()
        return self._schema  # type: ignore[return-value]

    def read(self) -> bool:
        """Advance to the next record.

        Returns:
            ``True`` if a record was parsed; ``False`` once the input is
            exhausted (and on every later call).

        Raises:
            RecordFormatError: The record has the wrong shape.
            TypeConversionError: A field failed its column's parse rule.
            ParserStateError: A previous record failed to parse.
            ParserDisposedError: The parser was closed.

        Any other error from the stream (``OSError``, ``UnicodeDecodeError``)
        also poisons the parser and propagates unchanged.
        """
        self._check_not_disposed()
        if self._state is ParserState.ERRORED:
            raise ParserStateError(_READING_WITH_ERRORS)
        if self._state is ParserState.END_OF_FILE:
            return False

        try:
            line = self._read_line()
            if line is None:
                self._state = ParserState.END_OF_FILE
                logger.debug("End of input after %d records", self._record_count)
                return False

            self._record_count += 1
            raw_values = self._split_record(line)
            values = self._schema.parse_values(raw_values)  # type: ignore[union-attr]
        except TypeConversionError as exc:
            error = exc.with_record_index(self._record_count)
            self._poison(error)
            raise error from exc
        except Exception as exc:
            self._poison(exc)
            raise

        self._values = values
        self._state = ParserState.POSITIONED
        return True

    def get_values(self) -> list[Any]:
        """Return a copy of the current record's typed values.

        Raises:
            ParserStateError: No record is current (before the first
                ``read()``, after the end of input, or after an error).
            ParserDisposedError: The parser was closed.
        """
        self._check_not_disposed()
        if self._state is ParserState.ERRORED:
            raise ParserStateError(_READING_WITH_ERRORS)
        if self._state is ParserState.FRESH:
            raise ParserStateError(_READ_NOT_CALLED)
        if self._state is ParserState.END_OF_FILE:
            raise ParserStateError(_NO_MORE_RECORDS)
        return list(self._values)

    def close(self) -> None:
        """Close the underlying stream. Calling it again does nothing."""
        if self._state is ParserState.DISPOSED:
            return
        self._state = ParserState.DISPOSED
        self._values = []
        self._reader.close()

    def __enter__(self: _ParserT) -> _ParserT:
        self._check_not_disposed()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[list[Any]]:
        """Yield the values of each remaining record."""
        while self.read():
            yield self.get_values()

    def __del__(self) -> None:
        # Only reached when the caller never closed the parser.
        if getattr(self, "_state", ParserState.DISPOSED) is not ParserState.DISPOSED:
            logger.warning(
                "%s was garbage collected without close(); closing its stream",
                type(self).__name__,
            )
            self.close()

    # -- Subclass hooks ----------------------------------------------------

    @abstractmethod
    def _split_record(self, line: str) -> list[str]:
        """Split one record into one raw string per schema column.

        Raises:
            RecordFormatError: If the record does not have the expected shape.
        """

    def _strip_terminator(self, line: str) -> str:
        if line.endswith("\r\n"):
            return line[:-2]
        if line.endswith(("\n", "\r")):
            return line[:-1]
        return line

    # -- Internal helpers --------------------------------------------------

    def _read_line(self) -> str | None:
        """Read one physical line without its terminator; ``None`` at end of input."""
        line = self._reader.readline()
        if not line:
            return None
        return self._strip_terminator(line)

    def _poison(self, error: Exception) -> None:
        self._state = ParserState.ERRORED
        self._values = []
        logger.warning("%s stopped: %s", type(self).__name__, error)

    def _check_not_disposed(self) -> None:
        if self._state is ParserState.DISPOSED:
            raise ParserDisposedError(f"{type(self).__name__} has been closed")
