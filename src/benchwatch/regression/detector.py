"""Regression detector for benchmark runs.

A new run is compared against the last run recorded for its suite, the
state immediately preceding the commit under test. Benchmarks are matched
by exact name and every measured time is treated as bigger-is-worse.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from benchwatch.core.exceptions import ComparisonError
from benchwatch.core.units import normalized_ratio
from benchwatch.regression.models import (
    AlertLevel,
    ComparisonReport,
    ComparisonStatus,
    Direction,
    MeasurementComparison,
    Thresholds,
    measurement_status_entry,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from benchwatch.benchmarks.models import Measurement, Run

logger = logging.getLogger(__name__)


def classify_ratio(ratio: float, thresholds: Thresholds) -> AlertLevel:
    """Classify a new/old ratio.

    Failure is checked first, so it wins whenever both thresholds are
    reached, including when the fail threshold is the lower one.

    Args:
        ratio: new/old ratio.
        thresholds: Thresholds to apply.

    Returns:
        FAIL, ALERT or NONE.

    Example:
        >>> classify_ratio(2.5, Thresholds(alert_threshold=2.0, fail_threshold=3.0))
        <AlertLevel.ALERT: 'alert'>
    """
    if ratio >= thresholds.effective_fail_threshold:
        return AlertLevel.FAIL
    if ratio >= thresholds.alert_threshold:
        return AlertLevel.ALERT
    return AlertLevel.NONE


def direction_of(ratio: float, noise: float) -> Direction:
    """Direction of change, treating ratios within ``noise`` of 1.0 as unchanged."""
    if ratio > 1.0 + noise:
        return Direction.REGRESSION
    if ratio < 1.0 - noise:
        return Direction.IMPROVEMENT
    return Direction.UNCHANGED


def _incomparable(current: Measurement, previous: Measurement, reason: str) -> MeasurementComparison:
    error = ComparisonError(current.name, reason)
    logger.warning(f"Cannot compare {error}")
    return MeasurementComparison(
        name=current.name,
        status=ComparisonStatus.INCOMPARABLE,
        unit=current.unit,
        current=current.value,
        previous=previous.value,
        previous_unit=previous.unit,
        error=error,
    )


def compare_measurements(
    current: Measurement,
    previous: Measurement,
    thresholds: Thresholds,
) -> MeasurementComparison:
    """Compare one measurement with its baseline counterpart.

    Time units are normalized exactly before dividing. Identical non-time
    units are compared as they are. Any other unit pair, or a zero
    baseline, is incomparable and never alerts.

    Args:
        current: Measurement from the new run.
        previous: Measurement with the same name from the baseline run.
        thresholds: Thresholds to apply.

    Returns:
        The comparison entry.
    """
    current_unit, previous_unit = current.time_unit, previous.time_unit

    if previous.value == 0:
        return _incomparable(current, previous, "baseline value is zero")

    if current_unit is not None and previous_unit is not None:
        ratio = normalized_ratio(current.value, current_unit, previous.value, previous_unit)
    elif current_unit is None and previous_unit is None and current.unit == previous.unit:
        ratio = current.value / previous.value
    else:
        return _incomparable(current, previous, f"unit '{current.unit}' is not comparable to '{previous.unit}'")

    return MeasurementComparison(
        name=current.name,
        status=ComparisonStatus.MATCHED,
        unit=current.unit,
        current=current.value,
        previous=previous.value,
        previous_unit=previous.unit,
        ratio=ratio,
        direction=direction_of(ratio, thresholds.noise),
        alert_level=classify_ratio(ratio, thresholds),
    )


def compare_runs(
    measurements: Sequence[Measurement],
    baseline: Run | None,
    thresholds: Thresholds | None = None,
) -> ComparisonReport:
    """Compare measurements against an explicit baseline run.

    Args:
        measurements: Measurements of the new run.
        baseline: Run to compare against; None means no history.
        thresholds: Thresholds to apply. Defaults to Thresholds().

    Returns:
        The comparison report.
    """
    thresholds = thresholds or Thresholds()

    if baseline is None:
        return ComparisonReport(
            comparisons=[measurement_status_entry(m, ComparisonStatus.NEW) for m in measurements],
            thresholds=thresholds,
        )

    previous_by_name: dict[str, Measurement] = {}
    for bench in baseline.benches:
        previous_by_name.setdefault(bench.name, bench)
    current_names = {m.name for m in measurements}

    comparisons: list[MeasurementComparison] = []
    for measurement in measurements:
        previous = previous_by_name.get(measurement.name)
        if previous is None:
            comparisons.append(measurement_status_entry(measurement, ComparisonStatus.NEW))
        else:
            comparisons.append(compare_measurements(measurement, previous, thresholds))

    for name, previous in previous_by_name.items():
        if name not in current_names:
            comparisons.append(measurement_status_entry(previous, ComparisonStatus.REMOVED))

    return ComparisonReport(comparisons=comparisons, thresholds=thresholds, baseline=baseline)


def classify(
    measurements: Sequence[Measurement],
    runs: Sequence[Run],
    thresholds: Thresholds | None = None,
) -> ComparisonReport:
    """Classify a new run against a suite's recorded runs.

    The baseline is the last recorded run. Call this before appending the
    new run (and before trimming) so the baseline is the true predecessor.

    Args:
        measurements: Measurements of the new run.
        runs: The suite's runs, oldest first, without the new run.
        thresholds: Thresholds to apply. Defaults to Thresholds().

    Returns:
        The comparison report; ``report.verdict`` is the overall outcome.

    Example:
        >>> report = classify(parse(output), history.runs("cargo"), Thresholds(alert_threshold=1.5))
        >>> report.verdict
        <AlertLevel.NONE: 'none'>
    """
    baseline = runs[-1] if runs else None
    report = compare_runs(measurements, baseline, thresholds)
    logger.info(
        f"Compared {len(report.matched)} benchmark(s) against "
        f"{baseline.commit.short_id if baseline is not None else 'no baseline'}: verdict {report.verdict.value}"
    )
    return report


def should_fail(
    report: ComparisonReport,
    fail_on_alert: bool = False,
    fail_on_any_alert: bool = False,
) -> bool:
    """Decide whether the calling process should exit non-zero.

    Args:
        report: Comparison report.
        fail_on_alert: Fail when the verdict is FAIL.
        fail_on_any_alert: Also fail when the verdict is ALERT.

    Returns:
        True if the workflow should fail.
    """
    verdict = report.verdict
    if verdict is AlertLevel.FAIL:
        return fail_on_alert or fail_on_any_alert
    if verdict is AlertLevel.ALERT:
        return fail_on_any_alert
    return False
