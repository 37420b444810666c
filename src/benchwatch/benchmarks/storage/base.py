"""Base protocol for benchmark history storage backends."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from benchwatch.benchmarks.models import History


@runtime_checkable
class StorageProtocol(Protocol):
    """Protocol for benchmark history storage backends.

    Loading and persisting are separate steps with no caching in between,
    so a caller can wrap them in its own fetch/merge/retry cycle when
    several writers share the same store.

    Example:
        >>> class MyStorage:
        ...     def load(self) -> History: ...
        ...     def persist(self, history: History) -> None: ...
        >>> isinstance(MyStorage(), StorageProtocol)
        True
    """

    def load(self) -> History:
        """Load the stored history.

        Returns:
            The stored history, or an empty one if nothing was stored yet.
        """
        ...

    def persist(self, history: History) -> None:
        """Replace the stored history.

        Args:
            history: The history to store.
        """
        ...
