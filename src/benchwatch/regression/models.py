"""Models for regression detection.

This module provides the thresholds, per-measurement comparisons and the
report produced when a new run is classified against its baseline.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from benchwatch.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from benchwatch.benchmarks.models import Measurement, Run
    from benchwatch.core.exceptions import ComparisonError

logger = logging.getLogger(__name__)


class AlertLevel(str, Enum):
    """Outcome of checking one ratio against the thresholds."""

    NONE = "none"
    ALERT = "alert"
    FAIL = "fail"

    @property
    def severity(self) -> int:
        """Rank used to order levels: none < alert < fail."""
        return _SEVERITY[self]


_SEVERITY: dict[AlertLevel, int] = {
    AlertLevel.NONE: 0,
    AlertLevel.ALERT: 1,
    AlertLevel.FAIL: 2,
}


class Direction(str, Enum):
    """Which way a measurement moved, ignoring changes within the noise band."""

    IMPROVEMENT = "improvement"
    REGRESSION = "regression"
    UNCHANGED = "unchanged"


class ComparisonStatus(str, Enum):
    """How a measurement relates to the baseline run."""

    MATCHED = "matched"
    NEW = "new"
    REMOVED = "removed"
    INCOMPARABLE = "incomparable"


def parse_threshold(text: str) -> float:
    """Parse a threshold into a ratio.

    Accepts percentages ("200%"), multipliers ("1.5x") and bare numbers,
    which are read as percentages ("150" is 1.5). Bare numbers below 100
    are rejected as ambiguous ("2.0" could mean 2% or 2x).

    Args:
        text: Threshold as written by the user.

    Returns:
        Threshold as a ratio of new/old.

    Raises:
        ConfigurationError: If the text is not a positive number, or is a
            bare number below 100.

    Example:
        >>> parse_threshold("200%")
        2.0
        >>> parse_threshold("1.5x")
        1.5
    """
    raw = str(text).strip()
    if raw.endswith("%"):
        number, scale, bare = raw[:-1], 100.0, False
    elif raw.lower().endswith("x"):
        number, scale, bare = raw[:-1], 1.0, False
    else:
        number, scale, bare = raw, 100.0, True

    try:
        value = float(number.strip()) / scale
    except ValueError as e:
        raise ConfigurationError(f"Invalid threshold: '{text}'") from e

    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"Threshold must be greater than 0: '{text}'")
    if bare and value < 1.0:
        raise ConfigurationError(f"Ambiguous threshold '{text}': write '{raw}x' or '{raw}%'")
    return value


@dataclass(frozen=True)
class Thresholds:
    """Thresholds for regression classification.

    Both thresholds are ratios of new/old: 2.0 alerts once a benchmark
    takes twice as long as in the baseline.

    Attributes:
        alert_threshold: Ratio at or above which a measurement alerts (default 200%).
        fail_threshold: Ratio at or above which a measurement fails.
            Defaults to alert_threshold.
        noise: Relative band around 1.0 reported as "unchanged" (default 5%).

    Example:
        >>> thresholds = Thresholds(alert_threshold=1.5)
        >>> thresholds.effective_fail_threshold
        1.5
    """

    alert_threshold: float = 2.0
    fail_threshold: float | None = None
    noise: float = 0.05

    @property
    def effective_fail_threshold(self) -> float:
        """Fail threshold, falling back to the alert threshold."""
        return self.fail_threshold if self.fail_threshold is not None else self.alert_threshold

    @classmethod
    def from_strings(cls, alert: str, fail: str | None = None, noise: float = 0.05) -> Thresholds:
        """Build thresholds from user-facing strings such as "150%".

        A fail threshold below the alert threshold is accepted; such
        measurements are classified as failures, which take precedence.

        Raises:
            ConfigurationError: If a threshold cannot be parsed.
        """
        alert_threshold = parse_threshold(alert)
        fail_threshold = parse_threshold(fail) if fail is not None else None
        if fail_threshold is not None and fail_threshold < alert_threshold:
            logger.warning(
                f"Fail threshold {fail_threshold:.0%} is lower than alert threshold {alert_threshold:.0%}; "
                "measurements between them will fail"
            )
        return cls(alert_threshold=alert_threshold, fail_threshold=fail_threshold, noise=noise)

    @classmethod
    def from_yaml(cls, path: Path | str) -> Thresholds:
        """Load thresholds from a YAML file.

        The values may sit at the top level or under a ``thresholds`` key.
        Numbers are read as percentages, like on the command line.

        Example file::

            thresholds:
              alert_threshold: 150%
              fail_threshold: 300%
              noise: 0.02

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ConfigurationError: If a value is invalid.
        """
        import yaml

        path = Path(path)
        if not path.exists():
            msg = f"Configuration file not found: {path}"
            raise FileNotFoundError(msg)

        data = yaml.safe_load(path.read_text())
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigurationError(f"Invalid threshold configuration in {path}")

        section: dict[str, Any] = data.get("thresholds", data)
        fail = section.get("fail_threshold")
        return cls.from_strings(
            alert=str(section.get("alert_threshold", "200%")),
            fail=str(fail) if fail is not None else None,
            noise=float(section.get("noise", 0.05)),
        )


@dataclass(frozen=True)
class MeasurementComparison:
    """Comparison of one measurement against the baseline.

    Attributes:
        name: Benchmark name.
        status: Matched, new, removed or incomparable.
        unit: Unit of the current value (of the previous one for removed benchmarks).
        current: Value in the new run, None for removed benchmarks.
        previous: Value in the baseline, None for new benchmarks.
        previous_unit: Unit of the baseline value, None for new benchmarks.
        ratio: current/previous after unit normalization, matched entries only.
        direction: Improvement, regression or unchanged.
        alert_level: Threshold classification; always NONE unless matched.
        error: Why the pair could not be compared, for incomparable entries.
    """

    name: str
    status: ComparisonStatus
    unit: str
    current: float | None = None
    previous: float | None = None
    previous_unit: str | None = None
    ratio: float | None = None
    direction: Direction = Direction.UNCHANGED
    alert_level: AlertLevel = AlertLevel.NONE
    error: ComparisonError | None = None

    @property
    def percentage_change(self) -> float | None:
        """Change relative to the baseline in percent (positive = slower)."""
        if self.ratio is None:
            return None
        return (self.ratio - 1.0) * 100.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "name": self.name,
            "status": self.status.value,
            "unit": self.unit,
            "current": self.current,
            "previous": self.previous,
            "previous_unit": self.previous_unit,
            "ratio": self.ratio,
            "percentage_change": self.percentage_change,
            "direction": self.direction.value,
            "alert_level": self.alert_level.value,
            "error": str(self.error) if self.error is not None else None,
        }


@dataclass
class ComparisonReport:
    """Result of classifying a new run against its baseline.

    Attributes:
        comparisons: One entry per measurement of the new run, in run
            order, followed by the benchmarks only present in the baseline.
        thresholds: Thresholds used for classification.
        baseline: Run compared against, None on the first run of a suite.

    Example:
        >>> report = classify(measurements, history.runs("cargo"), Thresholds())
        >>> if report.verdict is AlertLevel.FAIL:
        ...     print("Performance regression!")
    """

    comparisons: list[MeasurementComparison]
    thresholds: Thresholds = field(default_factory=Thresholds)
    baseline: Run | None = None

    def _with_status(self, status: ComparisonStatus) -> list[MeasurementComparison]:
        return [c for c in self.comparisons if c.status == status]

    @property
    def matched(self) -> list[MeasurementComparison]:
        """Comparisons with a ratio."""
        return self._with_status(ComparisonStatus.MATCHED)

    @property
    def new_benchmarks(self) -> list[MeasurementComparison]:
        return self._with_status(ComparisonStatus.NEW)

    @property
    def removed_benchmarks(self) -> list[MeasurementComparison]:
        return self._with_status(ComparisonStatus.REMOVED)

    @property
    def incomparable(self) -> list[MeasurementComparison]:
        return self._with_status(ComparisonStatus.INCOMPARABLE)

    @property
    def alerts(self) -> list[MeasurementComparison]:
        """Comparisons at alert level or above (failures included)."""
        return [c for c in self.comparisons if c.alert_level is not AlertLevel.NONE]

    @property
    def failures(self) -> list[MeasurementComparison]:
        return [c for c in self.comparisons if c.alert_level is AlertLevel.FAIL]

    @property
    def regressions(self) -> list[MeasurementComparison]:
        return [c for c in self.matched if c.direction is Direction.REGRESSION]

    @property
    def improvements(self) -> list[MeasurementComparison]:
        return [c for c in self.matched if c.direction is Direction.IMPROVEMENT]

    @property
    def has_alerts(self) -> bool:
        return bool(self.alerts)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    @property
    def verdict(self) -> AlertLevel:
        """Most severe alert level across all comparable measurements."""
        return max(
            (c.alert_level for c in self.comparisons),
            key=lambda level: level.severity,
            default=AlertLevel.NONE,
        )

    def ratio_for(self, name: str) -> float | None:
        """Ratio of a benchmark, if it was matched."""
        for comparison in self.comparisons:
            if comparison.name == name:
                return comparison.ratio
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "verdict": self.verdict.value,
            "baseline_commit": self.baseline.commit.id if self.baseline is not None else None,
            "thresholds": {
                "alert": self.thresholds.alert_threshold,
                "fail": self.thresholds.effective_fail_threshold,
            },
            "has_alerts": self.has_alerts,
            "has_failures": self.has_failures,
            "comparisons": [c.to_dict() for c in self.comparisons],
        }


def measurement_status_entry(measurement: Measurement, status: ComparisonStatus) -> MeasurementComparison:
    """Entry for a measurement that has no counterpart to compare with."""
    if status is ComparisonStatus.REMOVED:
        return MeasurementComparison(
            name=measurement.name,
            status=status,
            unit=measurement.unit,
            previous=measurement.value,
            previous_unit=measurement.unit,
        )
    return MeasurementComparison(
        name=measurement.name,
        status=status,
        unit=measurement.unit,
        current=measurement.value,
    )
