"""Core functionalities: field selection, cycle guard, array rules, options.

Architecture Note:
    core/ holds the building blocks shared by every algorithm. Engines in
    engines/ and render/ own per-call state; nothing in core/ keeps state
    across calls apart from the per-type field cache.
"""

from structural.core.arrays import ArrayKind, ElementVisitor, array_kind, dispatch, is_array
from structural.core.errors import AccessError, StructuralError, TypeMismatchError, UsageError
from structural.core.fields import (
    MARKER_KEY,
    FieldDescriptor,
    Marker,
    declared_fields,
    is_composite,
    marked,
    select_fields,
)
from structural.core.guard import CycleGuard, TraversalContext, VisitKey, is_guarded, pair_key
from structural.core.options import (
    DiffOptions,
    EqualityOptions,
    HashOptions,
    OrderingOptions,
    RenderOptions,
    TraversalOptions,
)
from structural.core.types import ALGORITHMS, Algorithm, Comparator

__all__ = [
    # Types
    "ALGORITHMS",
    "Algorithm",
    "Comparator",
    # Errors
    "StructuralError",
    "AccessError",
    "TypeMismatchError",
    "UsageError",
    # Fields
    "MARKER_KEY",
    "FieldDescriptor",
    "Marker",
    "marked",
    "declared_fields",
    "select_fields",
    "is_composite",
    # Guard
    "CycleGuard",
    "TraversalContext",
    "VisitKey",
    "is_guarded",
    "pair_key",
    # Arrays
    "ArrayKind",
    "ElementVisitor",
    "array_kind",
    "is_array",
    "dispatch",
    # Options
    "TraversalOptions",
    "EqualityOptions",
    "OrderingOptions",
    "HashOptions",
    "DiffOptions",
    "RenderOptions",
]
