"""Console reporter for benchwatch.

This module provides terminal output for comparison reports and the
benchmark history, with colored status indicators.
"""

from __future__ import annotations

import sys
from datetime import timezone
from typing import TYPE_CHECKING, TextIO

from benchwatch.regression.models import AlertLevel, ComparisonStatus, Direction

if TYPE_CHECKING:
    from benchwatch.benchmarks.models import Run
    from benchwatch.regression.models import ComparisonReport, MeasurementComparison


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"


ARROWS = {
    Direction.REGRESSION: "↑",
    Direction.IMPROVEMENT: "↓",
    Direction.UNCHANGED: "=",
}


class ConsoleReporter:
    """Reporter that prints comparison reports and history to the terminal.

    Attributes:
        use_colors: Whether to use ANSI colors in output.
        output: Output stream (defaults to stdout).

    Example:
        >>> reporter = ConsoleReporter()
        >>> reporter.report_comparison(report)
        ⚪ No significant changes
          ↓ bench_add: 100.00 ns/iter -> 90.00 ns/iter (-10.0%)
    """

    def __init__(self, use_colors: bool = True, output: TextIO | None = None) -> None:
        """Initialize ConsoleReporter.

        Args:
            use_colors: Whether to use ANSI colors. Defaults to True.
            output: Output stream. Defaults to sys.stdout.
        """
        self.use_colors = use_colors and _supports_color(output or sys.stdout)
        self.output = output or sys.stdout

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if self.use_colors:
            return f"{color}{text}{Colors.RESET}"
        return text

    def _print(self, text: str = "") -> None:
        """Print text to output stream."""
        print(text, file=self.output)

    def _line_for(self, comparison: MeasurementComparison) -> str:
        if comparison.status is ComparisonStatus.NEW:
            return self._color(f"  + {comparison.name}: {comparison.current:.2f} {comparison.unit} (new)", Colors.BLUE)
        if comparison.status is ComparisonStatus.REMOVED:
            return self._color(f"  - {comparison.name}: was {comparison.previous:.2f} {comparison.unit}", Colors.DIM)
        if comparison.status is ComparisonStatus.INCOMPARABLE:
            return self._color(f"  ? {comparison.name}: {comparison.error}", Colors.YELLOW)

        arrow = ARROWS[comparison.direction]
        text = (
            f"  {arrow} {comparison.name}: {comparison.previous:.2f} {comparison.previous_unit} -> "
            f"{comparison.current:.2f} {comparison.unit} ({comparison.percentage_change:+.1f}%)"
        )
        if comparison.alert_level is AlertLevel.FAIL:
            return self._color(f"{text} [FAIL]", Colors.RED + Colors.BOLD)
        if comparison.alert_level is AlertLevel.ALERT:
            return self._color(f"{text} [ALERT]", Colors.YELLOW)
        if comparison.direction is Direction.IMPROVEMENT:
            return self._color(text, Colors.GREEN)
        return text

    def report_comparison(self, report: ComparisonReport, headline: str | None = None) -> None:
        """Print one line per benchmark, preceded by a headline.

        Args:
            report: Comparison report.
            headline: First line; typically the markdown short summary.
        """
        if headline:
            self._print(headline)
        for comparison in report.comparisons:
            self._print(self._line_for(comparison))

    def report_history(self, suite_name: str, runs: list[Run]) -> None:
        """Print the given runs of a suite.

        Args:
            suite_name: Suite the runs belong to.
            runs: Runs to print, in display order.
        """
        self._print(self._color(f"## {suite_name}", Colors.BOLD + Colors.CYAN))
        self._print()

        for run in runs:
            self._print(self._color(f"### {run.commit.short_id} - {run.commit.message}", Colors.BOLD))
            date = run.date.astimezone(timezone.utc) if run.date.tzinfo is not None else run.date
            self._print(f"Date: {date.strftime('%Y-%m-%d %H:%M:%S')} UTC")
            self._print()
            for bench in run.benches:
                self._print(f"  - {bench.name}: {bench.value:.2f} {bench.unit} ({bench.range or '-'})")
            self._print()


def _supports_color(stream: TextIO) -> bool:
    """Check if the output stream supports ANSI colors.

    Args:
        stream: Output stream to check.

    Returns:
        True if colors are supported, False otherwise.
    """
    if not hasattr(stream, "isatty"):
        return False
    if not stream.isatty():
        return False

    import os

    if os.environ.get("NO_COLOR"):
        return False

    return os.environ.get("TERM") != "dumb"
