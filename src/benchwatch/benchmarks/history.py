"""Operations on the benchmark history.

Every function here returns a new History and leaves its input
untouched. Existing runs are carried over as the same objects in the same
order; the only removal is trimming the oldest runs of a suite.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from benchwatch.benchmarks.models import History, Run
from benchwatch.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def append(history: History, suite_name: str, run: Run) -> History:
    """Add a run to the end of a suite's sequence.

    The suite is created if absent and ``last_update`` is set to the run's
    date.

    Args:
        history: Current history.
        suite_name: Suite to append to.
        run: Run to record.

    Returns:
        The new history.

    Example:
        >>> history = append(History(), "cargo", run)
        >>> len(history.runs("cargo"))
        1
    """
    entries = dict(history.entries)
    entries[suite_name] = (*history.runs(suite_name), run)
    logger.debug(f"Appended run {run.commit.short_id} to suite '{suite_name}' ({len(entries[suite_name])} runs)")
    return history.model_copy(update={"entries": entries, "last_update": run.date})


def trim(history: History, suite_name: str, max_len: int | None) -> History:
    """Drop the oldest runs of a suite until it holds at most ``max_len``.

    Remaining runs keep their order. A ``max_len`` of None means unlimited.

    Args:
        history: Current history.
        suite_name: Suite to trim.
        max_len: Maximum number of runs to keep.

    Returns:
        The trimmed history (the same object if nothing was dropped).

    Raises:
        ConfigurationError: If max_len is smaller than 1.
    """
    if max_len is None:
        return history
    if max_len < 1:
        raise ConfigurationError(f"max items must be at least 1, got {max_len}")

    runs = history.runs(suite_name)
    if len(runs) <= max_len:
        return history

    dropped = len(runs) - max_len
    logger.info(f"Trimming {dropped} oldest run(s) from suite '{suite_name}'")
    entries = dict(history.entries)
    entries[suite_name] = runs[dropped:]
    return history.model_copy(update={"entries": entries})


def _run_key(run: Run) -> tuple[str, datetime]:
    return (run.commit.id, run.date)


def merge(base: History, incoming: History) -> History:
    """Merge two histories of the same store.

    Used when the persisted history changed between load and persist
    (e.g. another CI job pushed first): ``base`` is the freshly fetched
    copy and ``incoming`` the local one. For each suite the runs of
    ``base`` are kept in order, followed by the runs of ``incoming`` that
    ``base`` does not already contain, identified by commit id and date.

    Args:
        base: History whose order wins.
        incoming: History contributing missing runs.

    Returns:
        The merged history.
    """
    entries = dict(base.entries)
    for suite_name in incoming.entries:
        known = {_run_key(run) for run in base.runs(suite_name)}
        missing = tuple(run for run in incoming.runs(suite_name) if _run_key(run) not in known)
        if missing:
            entries[suite_name] = (*base.runs(suite_name), *missing)

    candidates = [ts for ts in (base.last_update, incoming.last_update) if ts is not None]
    return base.model_copy(
        update={
            "entries": entries,
            "last_update": max(candidates, key=_as_utc) if candidates else None,
            "repo_url": base.repo_url or incoming.repo_url,
        }
    )


def _as_utc(timestamp: datetime) -> datetime:
    # Naive timestamps from hand-written documents are taken as UTC
    return timestamp if timestamp.tzinfo is not None else timestamp.replace(tzinfo=timezone.utc)


def latest_run(history: History, suite_name: str) -> Run | None:
    """Most recent run of a suite, or None if it has none."""
    runs = history.runs(suite_name)
    return runs[-1] if runs else None


def previous_run(history: History, suite_name: str) -> Run | None:
    """Run before the most recent one, or None."""
    runs = history.runs(suite_name)
    return runs[-2] if len(runs) >= 2 else None


def suite_names(history: History) -> list[str]:
    """Suite names in sorted order."""
    return sorted(history.entries)
