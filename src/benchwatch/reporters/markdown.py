"""Markdown reporter for benchwatch.

This module renders comparison reports as markdown, suitable for job
summaries and commit comments, and as GitHub Actions workflow commands.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from benchwatch.regression.models import Direction

if TYPE_CHECKING:
    from benchwatch.regression.models import ComparisonReport, MeasurementComparison


def _format_change(comparison: MeasurementComparison) -> str:
    change = comparison.percentage_change or 0.0
    return f"+{change:.2f}%" if change >= 0 else f"{change:.2f}%"


def _indicator(comparison: MeasurementComparison) -> str:
    if comparison.direction is Direction.REGRESSION:
        return "🔴"
    if comparison.direction is Direction.IMPROVEMENT:
        return "🟢"
    return "⚪"


def _values(comparison: MeasurementComparison) -> str:
    return f"{comparison.previous:.2f} {comparison.previous_unit} → {comparison.current:.2f} {comparison.unit}"


class MarkdownReporter:
    """Reporter that renders comparison reports as markdown.

    Attributes:
        cc_users: Users to mention under alert messages (e.g. "@alice,@bob").

    Example:
        >>> reporter = MarkdownReporter()
        >>> print(reporter.summary(report))
        ## Benchmark Comparison Report
        ...
    """

    def __init__(self, cc_users: str | None = None) -> None:
        """Initialize MarkdownReporter.

        Args:
            cc_users: Users to mention under alert messages.
        """
        self.cc_users = cc_users

    def summary(self, report: ComparisonReport) -> str:
        """Full report: comparison table plus new, removed, incomparable and alerting benchmarks."""
        if not report.comparisons:
            return "No benchmark comparisons available."

        lines = ["## Benchmark Comparison Report", ""]

        if report.matched:
            lines.extend(
                [
                    "### Comparisons",
                    "",
                    "| Benchmark | Previous | Current | Ratio | Change |",
                    "|-----------|----------|---------|-------|--------|",
                ]
            )
            for comp in report.matched:
                lines.append(
                    f"| {comp.name} | {comp.previous:.2f} {comp.previous_unit} | {comp.current:.2f} {comp.unit} "
                    f"| {comp.ratio:.2f}x | {_indicator(comp)} {_format_change(comp)} |"
                )
            lines.append("")

        if report.new_benchmarks:
            lines.extend(["### New Benchmarks", ""])
            lines.extend(f"- **{b.name}**: {b.current:.2f} {b.unit}" for b in report.new_benchmarks)
            lines.append("")

        if report.removed_benchmarks:
            lines.extend(["### Removed Benchmarks", ""])
            lines.extend(f"- **{b.name}** (was {b.previous:.2f} {b.unit})" for b in report.removed_benchmarks)
            lines.append("")

        if report.incomparable:
            lines.extend(["### Incomparable Benchmarks", ""])
            lines.extend(f"- **{c.name}**: {c.error}" for c in report.incomparable)
            lines.append("")

        if report.alerts:
            lines.extend(["### ⚠️ Performance Alerts", ""])
            lines.extend(
                f"- **{a.name}**: {_format_change(a)} regression ({_values(a)})" for a in report.alerts
            )
            lines.append("")

        if report.failures:
            lines.extend(["### 🚨 Critical Regressions (Failing)", ""])
            lines.extend(
                f"- **{f.name}**: {_format_change(f)} regression exceeds the "
                f"{report.thresholds.effective_fail_threshold:.0%} threshold"
                for f in report.failures
            )
            lines.append("")

        return "\n".join(lines).rstrip() + "\n"

    def short_summary(self, report: ComparisonReport) -> str:
        """One-line summary for commit comments and logs."""
        if not report.comparisons:
            return "No benchmark data to compare."

        parts: list[str] = []
        if report.regressions:
            parts.append(f"🔴 {len(report.regressions)} regression(s)")
        if report.improvements:
            parts.append(f"🟢 {len(report.improvements)} improvement(s)")
        if report.new_benchmarks:
            parts.append(f"🆕 {len(report.new_benchmarks)} new benchmark(s)")
        if report.incomparable:
            parts.append(f"❔ {len(report.incomparable)} incomparable benchmark(s)")

        return ", ".join(parts) if parts else "⚪ No significant changes"

    def alert_message(self, report: ComparisonReport) -> str | None:
        """Alert table for a commit comment, or None when nothing alerted."""
        if not report.alerts:
            return None

        lines = [
            "# ⚠️ Performance Alert",
            "",
            "The following benchmarks show significant performance regressions:",
            "",
            "| Benchmark | Previous | Current | Ratio | Change |",
            "|-----------|----------|---------|-------|--------|",
        ]
        for alert in report.alerts:
            lines.append(
                f"| {alert.name} | {alert.previous:.2f} {alert.previous_unit} | {alert.current:.2f} {alert.unit} "
                f"| {alert.ratio:.2f}x | {_format_change(alert)} |"
            )
        lines.append("")

        if self.cc_users:
            lines.append(f"cc: {self.cc_users}")

        return "\n".join(lines) + "\n"


def format_github_actions_alert(report: ComparisonReport) -> str:
    """Format alerts and failures as GitHub Actions workflow commands.

    Args:
        report: Comparison report.

    Returns:
        One ``::warning`` line per alert and one ``::error`` line per failure.
    """
    lines: list[str] = []

    for alert in report.alerts:
        lines.append(
            f"::warning title=Performance Regression::Benchmark '{alert.name}' regressed by "
            f"{alert.percentage_change:.1f}% ({_values(alert)})"
        )

    for failure in report.failures:
        lines.append(
            f"::error title=Critical Performance Regression::Benchmark '{failure.name}' regressed by "
            f"{failure.percentage_change:.1f}%, exceeding threshold"
        )

    return "".join(f"{line}\n" for line in lines)
