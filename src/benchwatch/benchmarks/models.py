"""Models for benchmark tracking.

This module provides the immutable records stored in the benchmark
history: measurements, commits, runs and the history document itself.
Field names and nesting follow the persisted JSON format exactly.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from benchwatch.core.units import TimeUnit, parse_time_unit

_SYMMETRIC_RANGE = re.compile(r"^\+/-\s*([\d.]+)$")


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ISO-8601, writing UTC as a "Z" suffix."""
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


class Measurement(BaseModel):
    """A single named benchmark result.

    Attributes:
        name: Benchmark name, possibly hierarchical ("module::group::case").
        value: Measured value in the unit it was reported in.
        unit: Unit text as reported (e.g. "ns/iter", "µs").
        range: Free-text error bound (e.g. "+/- 56"), if the format provides one.
        extra: Format-specific details (e.g. Criterion's low and high bounds).

    Example:
        >>> m = Measurement(name="bench_add", value=1234.0, unit="ns/iter", range="+/- 56")
        >>> m.variance
        56.0
    """

    model_config = {"frozen": True}

    name: str = Field(..., description="Benchmark name")
    value: float = Field(..., description="Measured value in its reported unit")
    unit: str = Field(..., description="Reported unit text")
    range: str | None = Field(default=None, description="Error bound as text")
    extra: dict[str, str] = Field(default_factory=dict, description="Format-specific details")

    @property
    def time_unit(self) -> TimeUnit | None:
        """Canonical time unit, or None for non-time units."""
        return parse_time_unit(self.unit)

    @property
    def variance(self) -> float | None:
        """Symmetric error bound parsed from ``range``, if it has one."""
        if self.range is None:
            return None
        match = _SYMMETRIC_RANGE.match(self.range.strip())
        if match is None:
            return None
        return float(match.group(1))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted dictionary form."""
        data: dict[str, Any] = {
            "name": self.name,
            "value": self.value,
            "unit": self.unit,
        }
        if self.range is not None:
            data["range"] = self.range
        if self.extra:
            data["extra"] = {key: self.extra[key] for key in sorted(self.extra)}
        return data


class AuthorInfo(BaseModel):
    """Commit author."""

    model_config = {"frozen": True}

    name: str
    email: str | None = None
    username: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.email is not None:
            data["email"] = self.email
        if self.username is not None:
            data["username"] = self.username
        return data


class CommitInfo(BaseModel):
    """The commit a run was measured at.

    Attributes:
        id: Full commit hash.
        message: First line of the commit message.
        timestamp: Commit time.
        url: Link to the commit on the hosting service, if known.
        author: Commit author, if known.
    """

    model_config = {"frozen": True}

    id: str
    message: str
    timestamp: datetime
    url: str | None = None
    author: AuthorInfo | None = None

    @property
    def short_id(self) -> str:
        """Abbreviated commit hash."""
        return self.id[:7]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "message": self.message,
            "timestamp": format_timestamp(self.timestamp),
        }
        if self.url is not None:
            data["url"] = self.url
        if self.author is not None:
            data["author"] = self.author.to_dict()
        return data


class Run(BaseModel):
    """One execution of a benchmark suite at one commit.

    Attributes:
        commit: Commit the benchmarks ran against.
        date: When the run was recorded (not the commit time).
        tool: Identifier of the harness that produced the output.
        benches: Measurements in the order the harness emitted them.
    """

    model_config = {"frozen": True}

    commit: CommitInfo
    date: datetime
    tool: str = "cargo"
    benches: tuple[Measurement, ...] = ()

    @property
    def measurements(self) -> tuple[Measurement, ...]:
        """Alias of ``benches``."""
        return self.benches

    def to_dict(self) -> dict[str, Any]:
        return {
            "commit": self.commit.to_dict(),
            "date": format_timestamp(self.date),
            "tool": self.tool,
            "benches": [bench.to_dict() for bench in self.benches],
        }


class History(BaseModel):
    """The persisted corpus of runs, keyed by suite name.

    Runs for a suite are ordered by append time. The history is replaced,
    never edited: see ``benchwatch.benchmarks.history`` for the operations
    that derive a new history from an old one.

    Attributes:
        last_update: Time of the most recent append.
        repo_url: Repository the history belongs to, if recorded.
        entries: Suite name to chronological runs.
    """

    model_config = {"frozen": True}

    last_update: datetime | None = None
    repo_url: str | None = None
    entries: dict[str, tuple[Run, ...]] = Field(default_factory=dict)

    def runs(self, suite_name: str) -> tuple[Run, ...]:
        """Runs recorded for a suite, oldest first (empty if unknown)."""
        return self.entries.get(suite_name, ())

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted dictionary form.

        Suites are sorted by name so that logically identical histories
        produce identical documents.
        """
        data: dict[str, Any] = {
            "last_update": format_timestamp(self.last_update) if self.last_update is not None else None,
        }
        if self.repo_url is not None:
            data["repo_url"] = self.repo_url
        data["entries"] = {name: [run.to_dict() for run in self.entries[name]] for name in sorted(self.entries)}
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> History:
        """Create a history from its persisted dictionary form.

        Raises:
            pydantic.ValidationError: If the structure does not match.
        """
        return cls.model_validate(data)
