"""Application layer - Recursion guard."""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from keystone_di.domain import RecursionLimitError

logger = logging.getLogger(__name__)


class RecursionGuard:
    """Bounds self-referential resolution chains.

    Keeps a depth counter per identifier or type name, plus the nesting depth
    of ``get`` calls. Every counter is dropped when the outermost call exits,
    whether it returned or raised, so a failed resolution never leaks depth
    into the next one. State lives in thread-local storage and each container
    owns its own guard.

    Attributes:
        _local: Thread-local storage for counters and call depth.
    """

    def __init__(self) -> None:
        """Initialize the guard with thread-local storage."""
        self._local = threading.local()

    def _get_counts(self) -> Dict[str, int]:
        if not hasattr(self._local, "counts"):
            self._local.counts = {}
        return self._local.counts

    @property
    def depth(self) -> int:
        """Number of nested ``get`` calls currently running."""
        return getattr(self._local, "depth", 0)

    @contextmanager
    def outermost(self) -> Iterator[None]:
        """Track one ``get`` call; the outermost one clears every counter on exit.

        Example:
            >>> with guard.outermost():
            ...     guard.increment("app.Service", max_recursion=3)
        """
        self._local.depth = self.depth + 1
        try:
            yield
        finally:
            self._local.depth -= 1
            if self._local.depth == 0:
                self.clear()

    def increment(self, key: str, max_recursion: int) -> int:
        """Advance the counter for a key.

        Args:
            key: Identifier or type name being constructed.
            max_recursion: The ceiling the counter may reach.

        Returns:
            The new counter value.

        Raises:
            RecursionLimitError: If the counter exceeds the ceiling.
        """
        counts = self._get_counts()
        counts[key] = counts.get(key, 0) + 1
        if counts[key] > max_recursion:
            logger.debug("Recursion ceiling of %s reached for %s", max_recursion, key)
            raise RecursionLimitError(key, max_recursion)
        return counts[key]

    def reset(self, key: str) -> None:
        """Drop the counter for a single key."""
        self._get_counts().pop(key, None)

    def count(self, key: str) -> int:
        return self._get_counts().get(key, 0)

    def clear(self) -> None:
        """Drop every counter."""
        if hasattr(self._local, "counts"):
            self._local.counts.clear()
