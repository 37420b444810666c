"""Tests for console reporter."""

from __future__ import annotations

from datetime import datetime, timezone
from io import StringIO

import pytest

from benchwatch.benchmarks import CommitInfo, Measurement, Run
from benchwatch.regression import ComparisonReport, Thresholds, compare_runs
from benchwatch.reporters.console import Colors, ConsoleReporter, _supports_color


def bench(name: str, value: float, unit: str = "ns/iter", bench_range: str | None = None) -> Measurement:
    return Measurement(name=name, value=value, unit=unit, range=bench_range)


@pytest.fixture
def baseline() -> Run:
    return Run(
        commit=CommitInfo(
            id="0123456789abcdef0123456789abcdef01234567",
            message="Speed up parser",
            timestamp=datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
        ),
        date=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        benches=(bench("bench_a", 100.0, bench_range="+/- 3"), bench("bench_b", 100.0), bench("bench_old", 1.0)),
    )


@pytest.fixture
def report(baseline: Run) -> ComparisonReport:
    return compare_runs(
        [bench("bench_a", 250.0), bench("bench_b", 97.0), bench("bench_new", 3.0)],
        baseline,
        Thresholds(alert_threshold=2.0, fail_threshold=3.0),
    )


class TestConsoleReporterInit:
    """Tests for ConsoleReporter initialization."""

    def test_default_values(self) -> None:
        """Default values are set correctly."""
        output = StringIO()
        reporter = ConsoleReporter(output=output)

        assert reporter.output is output
        assert reporter.use_colors is False  # StringIO is not a TTY

    def test_colors_disabled(self) -> None:
        """Colors can be disabled."""
        reporter = ConsoleReporter(use_colors=False, output=StringIO())

        assert reporter.use_colors is False


class TestReportComparison:
    """Tests for the comparison listing."""

    def test_lines(self, report: ComparisonReport) -> None:
        """One line per benchmark with arrow, values and change."""
        output = StringIO()
        ConsoleReporter(use_colors=False, output=output).report_comparison(report, "headline")

        lines = output.getvalue().splitlines()
        assert lines == [
            "headline",
            "  ↑ bench_a: 100.00 ns/iter -> 250.00 ns/iter (+150.0%) [ALERT]",
            "  = bench_b: 100.00 ns/iter -> 97.00 ns/iter (-3.0%)",
            "  + bench_new: 3.00 ns/iter (new)",
            "  - bench_old: was 1.00 ns/iter",
        ]

    def test_arrow_follows_direction(self, baseline: Run) -> None:
        """Equal values get no arrow; changes past the noise band do."""
        report = compare_runs([bench("bench_a", 100.0), bench("bench_b", 50.0)], baseline)
        output = StringIO()

        ConsoleReporter(use_colors=False, output=output).report_comparison(report)

        lines = output.getvalue().splitlines()
        assert lines[0] == "  = bench_a: 100.00 ns/iter -> 100.00 ns/iter (+0.0%)"
        assert lines[1] == "  ↓ bench_b: 100.00 ns/iter -> 50.00 ns/iter (-50.0%)"

    def test_colors(self, report: ComparisonReport) -> None:
        """Alerts are highlighted when colors are on."""
        output = StringIO()
        reporter = ConsoleReporter(output=output)
        reporter.use_colors = True

        reporter.report_comparison(report)

        assert Colors.YELLOW in output.getvalue()
        assert Colors.RESET in output.getvalue()


class TestReportHistory:
    """Tests for the history listing."""

    def test_listing(self, baseline: Run) -> None:
        output = StringIO()
        ConsoleReporter(use_colors=False, output=output).report_history("cargo", [baseline])

        text = output.getvalue()
        assert text.startswith("## cargo\n\n")
        assert "### 0123456 - Speed up parser" in text
        assert "Date: 2024-01-15 10:30:00 UTC" in text
        assert "  - bench_a: 100.00 ns/iter (+/- 3)" in text
        assert "  - bench_b: 100.00 ns/iter (-)" in text


class TestSupportsColor:
    """Tests for terminal color detection."""

    def test_no_isatty(self) -> None:
        assert _supports_color(object()) is False  # type: ignore[arg-type]

    def test_not_a_tty(self) -> None:
        assert _supports_color(StringIO()) is False

    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """NO_COLOR disables colors even on a TTY."""

        class FakeTTY(StringIO):
            def isatty(self) -> bool:
                return True

        monkeypatch.setenv("NO_COLOR", "1")
        assert _supports_color(FakeTTY()) is False

        monkeypatch.delenv("NO_COLOR")
        monkeypatch.setenv("TERM", "dumb")
        assert _supports_color(FakeTTY()) is False

        monkeypatch.setenv("TERM", "xterm-256color")
        assert _supports_color(FakeTTY()) is True
