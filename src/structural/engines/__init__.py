"""Structural algorithms over pairs or single values: equality, ordering, hashing, diff."""

from structural.engines.diff import DiffEngine, DiffEntry, DiffResult, structural_diff
from structural.engines.equality import EqualityEngine, structural_equals
from structural.engines.hashing import HashEngine, structural_hash
from structural.engines.ordering import OrderingEngine, structural_compare

__all__ = [
    # Equality
    "EqualityEngine",
    "structural_equals",
    # Ordering
    "OrderingEngine",
    "structural_compare",
    # Hashing
    "HashEngine",
    "structural_hash",
    # Diff
    "DiffEngine",
    "DiffEntry",
    "DiffResult",
    "structural_diff",
]
