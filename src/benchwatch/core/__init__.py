"""Core module for benchwatch.

This module contains the exceptions, configuration and unit handling
used throughout the library.
"""

from __future__ import annotations

from benchwatch.core.config import Settings
from benchwatch.core.exceptions import (
    BenchwatchError,
    ComparisonError,
    ConfigurationError,
    ParseError,
    ParseErrorKind,
    StoreError,
    StoreErrorKind,
    VcsError,
)
from benchwatch.core.units import TimeUnit, normalized_ratio, parse_time_unit

__all__ = [
    "BenchwatchError",
    "ComparisonError",
    "ConfigurationError",
    "ParseError",
    "ParseErrorKind",
    "Settings",
    "StoreError",
    "StoreErrorKind",
    "TimeUnit",
    "VcsError",
    "normalized_ratio",
    "parse_time_unit",
]
