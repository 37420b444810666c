"""Tests for the markdown reporter and GitHub Actions annotations."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from benchwatch.benchmarks import CommitInfo, Measurement, Run
from benchwatch.regression import ComparisonReport, Thresholds, compare_runs
from benchwatch.reporters import MarkdownReporter, format_github_actions_alert


def bench(name: str, value: float, unit: str = "ns/iter") -> Measurement:
    return Measurement(name=name, value=value, unit=unit)


@pytest.fixture
def baseline() -> Run:
    """Baseline run with four benchmarks."""
    return Run(
        commit=CommitInfo(id="b" * 40, message="baseline", timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc)),
        date=datetime(2024, 1, 1, tzinfo=timezone.utc),
        benches=(bench("slow", 100.0), bench("broken", 100.0), bench("fast", 100.0), bench("gone", 10.0)),
    )


@pytest.fixture
def report(baseline: Run) -> ComparisonReport:
    """A report with an alert, a failure, an improvement, a new and a removed benchmark."""
    return compare_runs(
        [bench("slow", 250.0), bench("broken", 400.0), bench("fast", 50.0), bench("added", 7.0)],
        baseline,
        Thresholds(alert_threshold=2.0, fail_threshold=3.0),
    )


class TestSummary:
    """Tests for MarkdownReporter.summary."""

    def test_sections(self, report: ComparisonReport) -> None:
        """Every kind of entry gets its own section."""
        text = MarkdownReporter().summary(report)

        assert text.startswith("## Benchmark Comparison Report")
        assert "| slow | 100.00 ns/iter | 250.00 ns/iter | 2.50x | 🔴 +150.00% |" in text
        assert "| fast | 100.00 ns/iter | 50.00 ns/iter | 0.50x | 🟢 -50.00% |" in text
        assert "### New Benchmarks" in text
        assert "- **added**: 7.00 ns/iter" in text
        assert "- **gone** (was 10.00 ns/iter)" in text
        assert "### ⚠️ Performance Alerts" in text
        assert "### 🚨 Critical Regressions (Failing)" in text
        assert "- **broken**: +300.00% regression exceeds the 300% threshold" in text

    def test_incomparable_listed(self, baseline: Run) -> None:
        """Incomparable benchmarks are shown with the reason."""
        report = compare_runs([bench("slow", 5.0, "MB/s")], baseline)

        assert "### Incomparable Benchmarks" in MarkdownReporter().summary(report)

    def test_empty(self) -> None:
        assert MarkdownReporter().summary(ComparisonReport(comparisons=[])) == "No benchmark comparisons available."


class TestShortSummary:
    """Tests for MarkdownReporter.short_summary."""

    def test_counts(self, report: ComparisonReport) -> None:
        assert MarkdownReporter().short_summary(report) == (
            "🔴 2 regression(s), 🟢 1 improvement(s), 🆕 1 new benchmark(s)"
        )

    def test_no_changes(self, baseline: Run) -> None:
        """Changes inside the noise band are not counted."""
        report = compare_runs([bench("slow", 102.0)], baseline)

        assert MarkdownReporter().short_summary(report) == "⚪ No significant changes"

    def test_no_data(self) -> None:
        assert MarkdownReporter().short_summary(ComparisonReport(comparisons=[])) == "No benchmark data to compare."


class TestAlertMessage:
    """Tests for MarkdownReporter.alert_message."""

    def test_lists_alerts_with_cc(self, report: ComparisonReport) -> None:
        """Failures are included in the alert table; cc users are mentioned."""
        text = MarkdownReporter(cc_users="@alice,@bob").alert_message(report)

        assert text is not None
        assert text.startswith("# ⚠️ Performance Alert")
        assert "| slow |" in text
        assert "| broken |" in text
        assert "| fast |" not in text
        assert text.rstrip().endswith("cc: @alice,@bob")

    def test_none_without_alerts(self, baseline: Run) -> None:
        report = compare_runs([bench("slow", 100.0)], baseline)

        assert MarkdownReporter().alert_message(report) is None


class TestGitHubActionsAlert:
    """Tests for format_github_actions_alert."""

    def test_workflow_commands(self, report: ComparisonReport) -> None:
        """One warning per alert, one error per failure."""
        lines = format_github_actions_alert(report).splitlines()

        assert lines == [
            "::warning title=Performance Regression::Benchmark 'slow' regressed by 150.0% "
            "(100.00 ns/iter → 250.00 ns/iter)",
            "::warning title=Performance Regression::Benchmark 'broken' regressed by 300.0% "
            "(100.00 ns/iter → 400.00 ns/iter)",
            "::error title=Critical Performance Regression::Benchmark 'broken' regressed by 300.0%, "
            "exceeding threshold",
        ]

    def test_empty_without_alerts(self, baseline: Run) -> None:
        report = compare_runs([bench("slow", 100.0)], baseline)

        assert format_github_actions_alert(report) == ""
