"""Custom exceptions for benchwatch.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from BenchwatchError for easy catching.
"""

from __future__ import annotations

from enum import Enum


class BenchwatchError(Exception):
    """Base exception for all benchwatch errors.

    Example:
        >>> try:
        ...     history = load("benchmark-data.json")
        ... except BenchwatchError as e:
        ...     print(f"benchwatch error: {e}")
    """


class ParseErrorKind(str, Enum):
    """Reason a benchmark output could not be parsed."""

    NO_DIALECT_MATCHED = "no_dialect_matched"
    MALFORMED_VALUE = "malformed_value"
    EMPTY_RESULT = "empty_result"
    IO_FAILURE = "io_failure"


class ParseError(BenchwatchError):
    """Raised when benchmark output cannot be turned into measurements.

    Attributes:
        kind: Why parsing failed.
        line_number: 1-based line number of the offending line, if any.
        line: Text of the offending line, if any.

    Example:
        >>> raise ParseError(ParseErrorKind.MALFORMED_VALUE, "bad value '1.2.3'", line_number=4)
    """

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        line_number: int | None = None,
        line: str | None = None,
    ) -> None:
        self.kind = kind
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class StoreErrorKind(str, Enum):
    """Reason the benchmark history could not be loaded or written."""

    CORRUPT_DATA = "corrupt_data"
    IO_FAILURE = "io_failure"


class StoreError(BenchwatchError):
    """Raised when the history file is unreadable, corrupt or unwritable.

    A corrupt history is never treated as empty, since rewriting it would
    destroy the recorded runs.

    Attributes:
        kind: Why the store operation failed.
        path: Path of the history file involved.
    """

    def __init__(self, kind: StoreErrorKind, message: str, path: str | None = None) -> None:
        self.kind = kind
        self.path = path
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)


class ComparisonError(BenchwatchError):
    """Describes a measurement pair that cannot be compared.

    This error is not raised by the comparator. It is attached to the
    affected comparison entry so reports can show it while the rest of the
    run is classified normally.

    Attributes:
        kind: Always "incomparable_units" for now.
        name: Benchmark name.
    """

    def __init__(self, name: str, message: str, kind: str = "incomparable_units") -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"{name}: {message}")


class ConfigurationError(BenchwatchError):
    """Raised when configuration is invalid or missing.

    Example:
        >>> raise ConfigurationError("Invalid threshold: 'abc%'")
    """


class VcsError(BenchwatchError):
    """Raised when commit metadata cannot be read from git."""
