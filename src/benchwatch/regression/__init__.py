"""Regression detection module for benchwatch.

This module compares a new benchmark run with the previous run of its
suite and classifies each measurement against ratio thresholds.

Example:
    >>> from benchwatch.regression import Thresholds, classify
    >>>
    >>> report = classify(measurements, history.runs("cargo"), Thresholds(alert_threshold=1.5))
    >>> if report.has_failures:
    ...     print("Critical regressions detected!")
"""

from __future__ import annotations

from benchwatch.regression.detector import (
    classify,
    classify_ratio,
    compare_measurements,
    compare_runs,
    direction_of,
    should_fail,
)
from benchwatch.regression.models import (
    AlertLevel,
    ComparisonReport,
    ComparisonStatus,
    Direction,
    MeasurementComparison,
    Thresholds,
    parse_threshold,
)

__all__ = [
    "AlertLevel",
    "ComparisonReport",
    "ComparisonStatus",
    "Direction",
    "MeasurementComparison",
    "Thresholds",
    "classify",
    "classify_ratio",
    "compare_measurements",
    "compare_runs",
    "direction_of",
    "parse_threshold",
    "should_fail",
]
