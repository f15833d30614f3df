"""Cycle guard: the set of values currently on the traversal stack."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator
from contextlib import contextmanager
from numbers import Number

logger = logging.getLogger(__name__)

# Immutable leaves cannot take part in a cycle.
_UNGUARDED = (Number, str, bytes, bool)


def is_guarded(value: object) -> bool:
    """Check whether a value needs cycle protection.

    Args:
        value: Value about to be traversed.

    Returns:
        False for None, numbers, strings, bytes and booleans.
    """
    return value is not None and not isinstance(value, _UNGUARDED)


class CycleGuard:
    """Visited-set keyed by identity tokens.

    A key is recorded only while the subtree under it is being traversed and
    is removed before the enclosing call returns, including on error.
    """

    __slots__ = ("_active",)

    def __init__(self) -> None:
        self._active: set[Hashable] = set()

    def enter(self, key: Hashable) -> bool:
        """Record ``key`` as being visited.

        Args:
            key: Identity token (VisitKey or a pair of them).

        Returns:
            False, without recording, if ``key`` is already being visited.
        """
        if key in self._active:
            logger.debug("Cycle re-entry detected for %r", key)
            return False
        self._active.add(key)
        return True

    def leave(self, key: Hashable) -> None:
        """Forget ``key``; a no-op if it is not recorded."""
        self._active.discard(key)

    def is_active(self, key: Hashable) -> bool:
        """Check if ``key`` is currently being visited."""
        return key in self._active

    def is_empty(self) -> bool:
        """Check if nothing is being visited."""
        return not self._active

    def __len__(self) -> int:
        return len(self._active)

    @contextmanager
    def visiting(self, key: Hashable) -> Iterator[bool]:
        """Scope a visit to ``key``.

        Yields:
            True on first visit, False on re-entry. Only a first visit is
            recorded, and it is always released when the block exits.
        """
        entered = self.enter(key)
        try:
            yield entered
        finally:
            if entered:
                self.leave(key)
