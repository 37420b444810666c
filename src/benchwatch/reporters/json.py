"""JSON reporter for benchwatch.

This module provides JSON output for comparison reports,
suitable for CI/CD pipelines and machine processing.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from benchwatch.benchmarks.models import Run
    from benchwatch.regression.models import ComparisonReport


class JSONReporter:
    """Reporter that outputs comparison reports as JSON.

    Attributes:
        indent: JSON indentation level (None for compact).

    Example:
        >>> reporter = JSONReporter()
        >>> print(reporter.report(report))
        {
          "timestamp": "2024-01-15T10:30:00+00:00",
          "suite": "cargo",
          "verdict": "alert",
          ...
        }
    """

    def __init__(self, indent: int | None = 2) -> None:
        """Initialize JSONReporter.

        Args:
            indent: JSON indentation level. Defaults to 2. Use None for compact output.
        """
        self.indent = indent

    def _get_timestamp(self) -> str:
        """Get current timestamp in ISO 8601 format."""
        return datetime.now(timezone.utc).isoformat(timespec="seconds")

    def _report_to_dict(self, report: ComparisonReport, suite_name: str | None) -> dict[str, Any]:
        data: dict[str, Any] = {"timestamp": self._get_timestamp(), "suite": suite_name}
        data.update(report.to_dict())
        return data

    def report(self, report: ComparisonReport, suite_name: str | None = None) -> str:
        """Generate JSON for a comparison report.

        Args:
            report: The comparison report.
            suite_name: Suite the report belongs to.

        Returns:
            JSON string representation of the report.
        """
        return json.dumps(self._report_to_dict(report, suite_name), indent=self.indent, ensure_ascii=False)

    def report_to_file(self, report: ComparisonReport, path: Path | str, suite_name: str | None = None) -> None:
        """Write the JSON report to a file.

        Example:
            >>> reporter.report_to_file(report, Path("comparison.json"))
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.report(report, suite_name) + "\n", encoding="utf-8")

    def report_history(self, runs_by_suite: dict[str, list[Run]]) -> str:
        """Generate JSON for the given runs of each suite."""
        return json.dumps(
            {"suites": {name: [run.to_dict() for run in runs] for name, runs in runs_by_suite.items()}},
            indent=self.indent,
            ensure_ascii=False,
        )
