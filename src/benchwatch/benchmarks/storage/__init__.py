"""Storage backends for the benchmark history.

Example:
    >>> from benchwatch.benchmarks.storage import JSONHistoryStore
    >>> store = JSONHistoryStore("benchmark-data.json")
    >>> history = store.load()
"""

from __future__ import annotations

from benchwatch.benchmarks.storage.base import StorageProtocol
from benchwatch.benchmarks.storage.json_store import JSONHistoryStore, dumps, load, loads, persist

__all__ = [
    "JSONHistoryStore",
    "StorageProtocol",
    "dumps",
    "load",
    "loads",
    "persist",
]
