"""benchwatch: Continuous benchmarking for cargo bench and Criterion output."""

from __future__ import annotations

from benchwatch.benchmarks import (
    AuthorInfo,
    CommitInfo,
    History,
    JSONHistoryStore,
    Measurement,
    Run,
    append,
    load,
    merge,
    persist,
    trim,
)
from benchwatch.core.exceptions import (
    BenchwatchError,
    ComparisonError,
    ConfigurationError,
    ParseError,
    StoreError,
    VcsError,
)
from benchwatch.parsing import Dialect, parse, parse_file
from benchwatch.regression import AlertLevel, ComparisonReport, Thresholds, classify, should_fail

__version__ = "0.1.0"
__all__ = [
    # Models
    "AuthorInfo",
    "CommitInfo",
    "History",
    "Measurement",
    "Run",
    # Parsing
    "Dialect",
    "parse",
    "parse_file",
    # History store
    "JSONHistoryStore",
    "append",
    "load",
    "merge",
    "persist",
    "trim",
    # Comparison
    "AlertLevel",
    "ComparisonReport",
    "Thresholds",
    "classify",
    "should_fail",
    # Errors
    "BenchwatchError",
    "ComparisonError",
    "ConfigurationError",
    "ParseError",
    "StoreError",
    "VcsError",
    # Version
    "__version__",
]
