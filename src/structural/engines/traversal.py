"""Helpers shared by the two-value engines (equality, ordering, diff)."""

from __future__ import annotations

from typing import Any

from structural.core.fields import FieldDescriptor
from structural.core.options import TraversalOptions


def related_type(lhs: Any, rhs: Any) -> type | None:
    """Pick the type whose fields are walked when comparing two values.

    Args:
        lhs: Left value.
        rhs: Right value.

    Returns:
        The more specific of the two runtime types when one is an instance of
        the other's type, or None when the types are unrelated.
    """
    left, right = type(lhs), type(rhs)
    if isinstance(rhs, left):
        return right
    if isinstance(lhs, right):
        return left
    return None


def paired_fields(
    lhs: Any,
    rhs: Any,
    options: TraversalOptions,
    algorithm: str,
) -> tuple[FieldDescriptor, ...] | None:
    """Fields to read from both values, in declaration order.

    Values pair up when their types are related and both expose the same
    participating field names. A subclass adding fields therefore never pairs
    with an instance of its base.

    Returns:
        Descriptors of ``lhs``, or None when the values cannot be paired.
    """
    if related_type(lhs, rhs) is None:
        return None
    left = options.fields_of(type(lhs), lhs, algorithm)
    right = options.fields_of(type(rhs), rhs, algorithm)
    if [d.name for d in left] != [d.name for d in right]:
        return None
    return left


def scalar_kind(value: Any) -> type | None:
    """Numeric kind of a leaf: bool, int or float; None for anything else.

    Leaves of two different numeric kinds are never equal, so ``1``, ``1.0``
    and ``True`` stay apart the way their hash contributions do.
    """
    if isinstance(value, bool):
        return bool
    if isinstance(value, int):
        return int
    if isinstance(value, float):
        return float
    return None
