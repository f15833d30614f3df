"""Array functionality: element kinds, scalar rules, and the dispatcher."""

from structural.core.arrays.dispatch import (
    ElementVisitor,
    array_kind,
    array_signature,
    dispatch,
    elements,
    is_array,
    visitor_for,
)
from structural.core.arrays.models import ArrayKind

__all__ = [
    # Models
    "ArrayKind",
    # Dispatch
    "ElementVisitor",
    "array_kind",
    "array_signature",
    "dispatch",
    "elements",
    "is_array",
    "visitor_for",
]
