"""Benchmark history module for benchwatch.

This module provides the measurement records and the append-only,
suite-keyed history they are stored in.

Example:
    >>> from benchwatch.benchmarks import append, load, persist, trim
    >>>
    >>> history = load("benchmark-data.json")
    >>> history = append(history, "cargo", run)
    >>> history = trim(history, "cargo", max_len=100)
    >>> persist(history, "benchmark-data.json")
"""

from __future__ import annotations

from benchwatch.benchmarks.history import append, latest_run, merge, previous_run, suite_names, trim
from benchwatch.benchmarks.models import AuthorInfo, CommitInfo, History, Measurement, Run
from benchwatch.benchmarks.storage import JSONHistoryStore, StorageProtocol, dumps, load, loads, persist

__all__ = [
    "AuthorInfo",
    "CommitInfo",
    "History",
    "JSONHistoryStore",
    "Measurement",
    "Run",
    "StorageProtocol",
    "append",
    "dumps",
    "latest_run",
    "load",
    "loads",
    "merge",
    "persist",
    "previous_run",
    "suite_names",
    "trim",
]
