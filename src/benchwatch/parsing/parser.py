"""Benchmark output parser.

This module turns raw harness output into measurements. Lines are matched
independently and in file order; anything that is not a benchmark result
(compiler output, progress lines, summaries) is skipped.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from benchwatch.core.exceptions import ParseError, ParseErrorKind
from benchwatch.parsing.dialects import LINE_PARSERS, Dialect

if TYPE_CHECKING:
    from benchwatch.benchmarks.models import Measurement

logger = logging.getLogger(__name__)

# Detection order when no dialect is forced
AUTO_DETECT_ORDER: tuple[Dialect, ...] = (Dialect.SIMPLE_TIMING, Dialect.STATISTICAL_TRIPLE)


def parse(raw_text: str, dialect: Dialect | None = None) -> list[Measurement]:
    """Parse benchmark output into measurements.

    Args:
        raw_text: Harness output.
        dialect: Restrict matching to one format. None detects the format
            line by line, so mixed output is accepted.

    Returns:
        Measurements in the order they appear. When a name occurs more
        than once, the first occurrence is kept.

    Raises:
        ParseError: EMPTY_RESULT if the text has no content,
            NO_DIALECT_MATCHED if no line is a benchmark result,
            MALFORMED_VALUE if a result line carries an unusable number.

    Example:
        >>> parse("test bench_add ... bench:       1,234 ns/iter (+/- 56)")
        [Measurement(name='bench_add', value=1234.0, unit='ns/iter', range='+/- 56', extra={})]
    """
    dialects = AUTO_DETECT_ORDER if dialect is None else (dialect,)
    results: list[Measurement] = []
    seen: set[str] = set()
    pending_name: str | None = None
    has_content = False

    for line_number, raw_line in enumerate(raw_text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        has_content = True

        measurement = None
        for candidate in dialects:
            measurement = LINE_PARSERS[candidate](line, line_number, pending_name)
            if measurement is not None:
                break

        if measurement is None:
            # A lone token may be a Criterion name wrapped onto its own line
            pending_name = line if len(line.split()) == 1 else None
            continue
        pending_name = None

        if measurement.name in seen:
            logger.debug(f"Ignoring repeated result for '{measurement.name}' on line {line_number}")
            continue
        seen.add(measurement.name)
        results.append(measurement)

    if not has_content:
        raise ParseError(ParseErrorKind.EMPTY_RESULT, "benchmark output is empty")
    if not results:
        expected = " or ".join(d.value for d in dialects)
        raise ParseError(
            ParseErrorKind.NO_DIALECT_MATCHED,
            f"no benchmark results found; expected {expected} output",
        )

    logger.debug(f"Parsed {len(results)} benchmark result(s)")
    return results


def parse_file(path: str | Path, dialect: Dialect | None = None) -> list[Measurement]:
    """Read a UTF-8 output file and parse it.

    Args:
        path: File containing harness output.
        dialect: See ``parse``.

    Returns:
        Parsed measurements.

    Raises:
        ParseError: IO_FAILURE if the file cannot be read, otherwise as ``parse``.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(ParseErrorKind.IO_FAILURE, f"failed to read benchmark output {path}: {e}") from e

    try:
        return parse(content, dialect)
    except ParseError as e:
        error = ParseError(e.kind, f"{path}: {e}", line=e.line)
        error.line_number = e.line_number
        raise error from e
