"""Benchmark output parsing for benchwatch.

Supports libtest (``test x ... bench: 123 ns/iter (+/- 4)``) and
Criterion (``x time: [1.0 µs 1.1 µs 1.2 µs]``) output.

Example:
    >>> from benchwatch.parsing import parse
    >>> measurements = parse(open("output.txt").read())
"""

from __future__ import annotations

from benchwatch.parsing.dialects import Dialect
from benchwatch.parsing.parser import parse, parse_file

__all__ = [
    "Dialect",
    "parse",
    "parse_file",
]
