"""Cycle detection: identity keys, cycle guard, and traversal context."""

from structural.core.guard.core import CycleGuard, is_guarded
from structural.core.guard.models import TraversalContext, VisitKey, pair_key

__all__ = [
    "CycleGuard",
    "TraversalContext",
    "VisitKey",
    "is_guarded",
    "pair_key",
]
