"""JSON file storage for the benchmark history.

This module reads and writes the history document. Output is
deterministic (sorted suites, fixed field order) so that a history kept in
version control only diffs where runs were added or trimmed.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from benchwatch.benchmarks.models import History
from benchwatch.core.exceptions import StoreError, StoreErrorKind

logger = logging.getLogger(__name__)


def loads(content: str, source: str | None = None) -> History:
    """Parse a history document.

    Args:
        content: JSON text.
        source: Name of the source, used in error messages.

    Returns:
        The parsed history.

    Raises:
        StoreError: With kind CORRUPT_DATA if the text is not a valid history.
    """
    if not content.strip():
        raise StoreError(StoreErrorKind.CORRUPT_DATA, "History file is empty", path=source)

    try:
        data: Any = json.loads(content)
    except json.JSONDecodeError as e:
        raise StoreError(StoreErrorKind.CORRUPT_DATA, f"History is not valid JSON: {e}", path=source) from e

    if not isinstance(data, dict):
        raise StoreError(StoreErrorKind.CORRUPT_DATA, "History must be a JSON object", path=source)

    try:
        return History.from_dict(data)
    except ValidationError as e:
        raise StoreError(
            StoreErrorKind.CORRUPT_DATA,
            f"History has an invalid structure: {e.error_count()} error(s), first at "
            f"{'.'.join(str(part) for part in e.errors()[0]['loc'])}",
            path=source,
        ) from e


def load(source: str | Path) -> History:
    """Load the history from a JSON file.

    A missing file is the first run ever and yields an empty history.
    Anything else that prevents reading a valid history is an error.

    Args:
        source: Path of the history file.

    Returns:
        The stored history.

    Raises:
        StoreError: CORRUPT_DATA for malformed content, IO_FAILURE for OS errors.
    """
    path = Path(source)
    if not path.exists():
        logger.info(f"No benchmark history at {path}, starting a new one")
        return History()

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StoreError(StoreErrorKind.IO_FAILURE, f"Failed to read history: {e}", path=str(path)) from e

    history = loads(content, source=str(path))
    logger.debug(f"Loaded {sum(len(runs) for runs in history.entries.values())} run(s) from {path}")
    return history


def dumps(history: History) -> str:
    """Serialize a history deterministically.

    Args:
        history: History to serialize.

    Returns:
        Indented JSON text ending with a newline.
    """
    return json.dumps(history.to_dict(), indent=2, ensure_ascii=False) + "\n"


def persist(history: History, destination: str | Path) -> None:
    """Write the history to a JSON file with an atomic replace.

    Uses temp file + rename so readers never see a partial document.

    Args:
        history: History to write.
        destination: Path of the history file.

    Raises:
        StoreError: With kind IO_FAILURE if the file cannot be written.
    """
    path = Path(destination)
    content = dumps(history)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_fd, temp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=".benchwatch_",
            suffix=".tmp",
        )
    except OSError as e:
        raise StoreError(StoreErrorKind.IO_FAILURE, f"Failed to write history: {e}", path=str(path)) from e

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
        Path(temp_path).replace(path)
    except OSError as e:
        Path(temp_path).unlink(missing_ok=True)
        raise StoreError(StoreErrorKind.IO_FAILURE, f"Failed to write history: {e}", path=str(path)) from e

    logger.debug(f"Saved benchmark history to {path}")


class JSONHistoryStore:
    """JSON file storage bound to one path.

    Example:
        >>> store = JSONHistoryStore("benchmark-data.json")
        >>> history = store.load()
        >>> store.persist(append(history, "cargo", run))
    """

    def __init__(self, path: str | Path = "benchmark-data.json") -> None:
        """Initialize the store.

        Args:
            path: Path to the JSON file.
        """
        self.path = Path(path)

    def load(self) -> History:
        """Load the stored history (empty if the file does not exist)."""
        return load(self.path)

    def persist(self, history: History) -> None:
        """Atomically replace the stored history."""
        persist(history, self.path)
