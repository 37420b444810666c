"""Time unit handling for benchmark measurements.

Benchmark harnesses report durations in several units (``ns/iter``,
``µs``, ``ms``...). Values are stored in the unit they were reported in and
only converted when two measurements are compared, using exact rational
factors so that 1000 ns and 1 µs compare as exactly equal.
"""

from __future__ import annotations

from enum import Enum
from fractions import Fraction

# Per-iteration suffix emitted by libtest, e.g. "ns/iter"
_ITER_SUFFIX = "/iter"


class TimeUnit(str, Enum):
    """Canonical time units, smallest first."""

    PICOSECONDS = "ps"
    NANOSECONDS = "ns"
    MICROSECONDS = "µs"
    MILLISECONDS = "ms"
    SECONDS = "s"

    @property
    def picoseconds(self) -> int:
        """Exact number of picoseconds in one unit."""
        return _PICOSECONDS[self]


_PICOSECONDS: dict[TimeUnit, int] = {
    TimeUnit.PICOSECONDS: 1,
    TimeUnit.NANOSECONDS: 10**3,
    TimeUnit.MICROSECONDS: 10**6,
    TimeUnit.MILLISECONDS: 10**9,
    TimeUnit.SECONDS: 10**12,
}

_ALIASES: dict[str, TimeUnit] = {
    "ps": TimeUnit.PICOSECONDS,
    "ns": TimeUnit.NANOSECONDS,
    "µs": TimeUnit.MICROSECONDS,  # micro sign U+00B5
    "μs": TimeUnit.MICROSECONDS,  # greek mu U+03BC
    "us": TimeUnit.MICROSECONDS,
    "ms": TimeUnit.MILLISECONDS,
    "s": TimeUnit.SECONDS,
}


def parse_time_unit(unit: str) -> TimeUnit | None:
    """Map reported unit text to a canonical time unit.

    Args:
        unit: Unit as printed by the harness (e.g. "ns/iter", "µs").

    Returns:
        The matching TimeUnit, or None for non-time ("other") units.

    Example:
        >>> parse_time_unit("ns/iter")
        <TimeUnit.NANOSECONDS: 'ns'>
        >>> parse_time_unit("MB/s") is None
        True
    """
    text = unit.strip()
    if text.endswith(_ITER_SUFFIX):
        text = text[: -len(_ITER_SUFFIX)]
    return _ALIASES.get(text)


def to_picoseconds(value: float, unit: TimeUnit) -> Fraction:
    """Convert a value to an exact number of picoseconds.

    Args:
        value: Value expressed in ``unit``.
        unit: Unit of ``value``.

    Returns:
        Exact rational picosecond count.
    """
    return Fraction(value) * unit.picoseconds


def normalized_ratio(
    current: float,
    current_unit: TimeUnit,
    previous: float,
    previous_unit: TimeUnit,
) -> float:
    """Compute current/previous after converting both to picoseconds.

    The division is done on exact fractions and rounded once at the end.

    Raises:
        ZeroDivisionError: If the previous value is zero.

    Example:
        >>> normalized_ratio(1000.0, TimeUnit.NANOSECONDS, 1.0, TimeUnit.MICROSECONDS)
        1.0
    """
    return float(to_picoseconds(current, current_unit) / to_picoseconds(previous, previous_unit))
