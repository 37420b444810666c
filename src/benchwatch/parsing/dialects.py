"""Line formats understood by the benchmark output parser.

Each dialect has its own pattern and extraction function; the two formats
are not unified before extraction. A dialect's line parser returns None
for lines it does not recognize and raises ParseError for recognized lines
whose numbers are unusable.

Libtest (``cargo bench`` on nightly)::

    test bench_add ... bench:       1,234 ns/iter (+/- 56)

Criterion::

    bench_fibonacci         time:   [1.2345 µs 1.2456 µs 1.2567 µs]
"""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import TYPE_CHECKING

from benchwatch.benchmarks.models import Measurement
from benchwatch.core.exceptions import ParseError, ParseErrorKind

if TYPE_CHECKING:
    from collections.abc import Callable


class Dialect(str, Enum):
    """Supported benchmark output formats."""

    SIMPLE_TIMING = "libtest"
    STATISTICAL_TRIPLE = "criterion"


LIBTEST_PATTERN = re.compile(
    r"^test\s+(?P<name>\S+)\s+\.\.\.\s+bench:\s+(?P<value>[\d,.]+)\s+(?P<unit>\S+)"
    r"(?:\s+\(\+/-\s+(?P<error>[\d,.]+)\))?"
)

# The name is optional: Criterion moves long names to their own line
CRITERION_PATTERN = re.compile(
    r"^(?:(?P<name>\S+)\s+)?time:\s+\["
    r"(?P<low>[^\s\]]+)\s+(?P<low_unit>[^\s\]]+)\s+"
    r"(?P<mid>[^\s\]]+)\s+(?P<mid_unit>[^\s\]]+)\s+"
    r"(?P<high>[^\s\]]+)\s+(?P<high_unit>[^\s\]]+)\]"
)


def _strip_separators(literal: str) -> str:
    return literal.replace(",", "")


def _to_float(literal: str, field: str, line_number: int, line: str) -> float:
    try:
        value = float(_strip_separators(literal))
    except ValueError as e:
        raise ParseError(
            ParseErrorKind.MALFORMED_VALUE,
            f"invalid {field} '{literal}'",
            line_number=line_number,
            line=line,
        ) from e
    # Literals past the float range would be stored as Infinity
    if not math.isfinite(value):
        raise ParseError(
            ParseErrorKind.MALFORMED_VALUE,
            f"{field} '{literal}' is out of range",
            line_number=line_number,
            line=line,
        )
    return value


def _to_decimal(literal: str, field: str, line_number: int, line: str) -> Decimal:
    try:
        value = Decimal(literal)
    except InvalidOperation as e:
        raise ParseError(
            ParseErrorKind.MALFORMED_VALUE,
            f"invalid {field} '{literal}'",
            line_number=line_number,
            line=line,
        ) from e
    if not value.is_finite() or not math.isfinite(float(value)):
        raise ParseError(
            ParseErrorKind.MALFORMED_VALUE,
            f"invalid {field} '{literal}'",
            line_number=line_number,
            line=line,
        )
    return value


def _format_decimal(value: Decimal) -> str:
    return format(value.normalize(), "f")


def parse_libtest_line(line: str, line_number: int, name: str | None = None) -> Measurement | None:  # noqa: ARG001
    """Parse one libtest ``bench:`` line.

    Thousands separators are removed from the value and the error bound.
    The unit is kept as printed.

    Args:
        line: Trimmed line text.
        line_number: 1-based line number, for error messages.
        name: Unused; libtest always prints the name on the same line.

    Returns:
        The measurement, or None if the line is not a libtest result.

    Raises:
        ParseError: If the value or error bound is not a number.
    """
    match = LIBTEST_PATTERN.match(line)
    if match is None:
        return None

    value = _to_float(match.group("value"), "value", line_number, line)
    error = match.group("error")
    bench_range = None
    if error is not None:
        _to_float(error, "error bound", line_number, line)
        bench_range = f"+/- {_strip_separators(error)}"

    return Measurement(
        name=match.group("name"),
        value=value,
        unit=match.group("unit"),
        range=bench_range,
    )


def parse_criterion_line(line: str, line_number: int, name: str | None = None) -> Measurement | None:
    """Parse one Criterion ``time:`` line.

    The middle estimate becomes the value, in its own unit. The interval
    bounds are reduced to a symmetric error of ``(high - low) / 2`` in the
    same unit, computed on the decimal literals so no binary rounding
    creeps in.

    Args:
        line: Trimmed line text.
        line_number: 1-based line number, for error messages.
        name: Benchmark name from the preceding line, for wrapped output.

    Returns:
        The measurement, or None if the line is not a Criterion result.

    Raises:
        ParseError: If a bound is not a number, the units differ, or the
            bounds are not in ascending order.
    """
    match = CRITERION_PATTERN.match(line)
    if match is None:
        return None

    bench_name = match.group("name") or name
    if bench_name is None:
        return None

    low = _to_decimal(match.group("low"), "lower bound", line_number, line)
    mid = _to_decimal(match.group("mid"), "estimate", line_number, line)
    high = _to_decimal(match.group("high"), "upper bound", line_number, line)

    unit = match.group("mid_unit")
    if match.group("low_unit") != unit or match.group("high_unit") != unit:
        raise ParseError(
            ParseErrorKind.MALFORMED_VALUE,
            f"mixed units in interval [{match.group('low_unit')} {unit} {match.group('high_unit')}]",
            line_number=line_number,
            line=line,
        )
    if not low <= mid <= high:
        raise ParseError(
            ParseErrorKind.MALFORMED_VALUE,
            f"interval bounds are not ascending [{low} {mid} {high}]",
            line_number=line_number,
            line=line,
        )

    return Measurement(
        name=bench_name,
        value=float(mid),
        unit=unit,
        range=f"+/- {_format_decimal((high - low) / 2)}",
        extra={"low": _format_decimal(low), "high": _format_decimal(high)},
    )


LINE_PARSERS: dict[Dialect, Callable[[str, int, str | None], Measurement | None]] = {
    Dialect.SIMPLE_TIMING: parse_libtest_line,
    Dialect.STATISTICAL_TRIPLE: parse_criterion_line,
}
