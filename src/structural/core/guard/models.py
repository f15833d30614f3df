"""Identity tokens and traversal-scoped state.

Usage:
    context = TraversalContext()
    key = VisitKey(node)
    with context.guard.visiting(key) as first_visit:
        if first_visit:
            ...  # recurse into node
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from structural.core.guard.core import CycleGuard


class VisitKey:
    """Identity token for a value, never compared by value equality.

    ``id()`` is unique among live objects. The live reference is kept next to
    it so the object cannot be collected and its id reused while the key sits
    in a visited-set.
    """

    __slots__ = ("_ident", "_ref")

    def __init__(self, value: Any) -> None:
        self._ident = id(value)
        self._ref = value

    @property
    def ident(self) -> int:
        """Raw identity code of the referenced value."""
        return self._ident

    def __hash__(self) -> int:
        return self._ident

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VisitKey):
            return NotImplemented
        return self._ident == other._ident and self._ref is other._ref

    def __repr__(self) -> str:
        return f"VisitKey({type(self._ref).__qualname__}@{self._ident:x})"


def pair_key(lhs: Any, rhs: Any) -> tuple[VisitKey, VisitKey]:
    """Build the key used to mark a (lhs, rhs) comparison as in progress."""
    return (VisitKey(lhs), VisitKey(rhs))


@dataclass(slots=True)
class TraversalContext:
    """State owned by exactly one top-level engine call.

    Threaded explicitly through every recursive call and discarded when the
    call returns. Concurrent calls each build their own context.
    """

    guard: CycleGuard = field(default_factory=CycleGuard)
    """Values (or value pairs) being compared, hashed or ordered."""

    render_guard: CycleGuard = field(default_factory=CycleGuard)
    """Values currently being rendered."""

    def is_clean(self) -> bool:
        """Check that no visit markers are left behind.

        Returns:
            True if both guards are empty.
        """
        return self.guard.is_empty() and self.render_guard.is_empty()
