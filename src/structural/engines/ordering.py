"""Structural ordering: three-way comparison field by field.

Usage:
    structural_compare(a, b)          # -1, 0 or 1
    sorted(items, key=functools.cmp_to_key(structural_compare))

    engine = OrderingEngine()
    engine.append(a.priority, b.priority).append(a.name, b.name)
    engine.result()

None sorts before any value. The first non-zero field decides.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping, Set
from typing import Any, Self

from structural.config import get_settings
from structural.core.arrays import ArrayKind, array_kind, array_signature, dispatch
from structural.core.arrays import operations as ops
from structural.core.errors import TypeMismatchError
from structural.core.fields import is_composite
from structural.core.guard import TraversalContext, pair_key
from structural.core.options import OrderingOptions
from structural.core.types import Comparator
from structural.engines.traversal import paired_fields, scalar_kind

logger = logging.getLogger(__name__)

# Tie-break between an int and a float of the same numeric value.
_NUMERIC_RANK = {int: 0, float: 1}


def _compare_numbers(lhs: int | float, rhs: int | float) -> int:
    left_kind, right_kind = scalar_kind(lhs), scalar_kind(rhs)
    if left_kind is float and right_kind is float:
        return ops.compare_floats(lhs, rhs)
    if isinstance(lhs, float) and math.isnan(lhs):
        return 1
    if isinstance(rhs, float) and math.isnan(rhs):
        return -1
    result = ops.compare_ints(lhs, rhs)  # type: ignore[arg-type]
    if result == 0:
        left_rank = _NUMERIC_RANK[left_kind]  # type: ignore[index]
        return ops.compare_ints(left_rank, _NUMERIC_RANK[right_kind])  # type: ignore[index]
    return result


def leaf_compare(lhs: Any, rhs: Any) -> int:
    """Order two non-composite, non-array values.

    Raises:
        TypeMismatchError: If the values have no natural order.
    """
    left_kind, right_kind = scalar_kind(lhs), scalar_kind(rhs)
    if left_kind is bool or right_kind is bool:
        if left_kind is not right_kind:
            raise TypeMismatchError(
                f"Cannot order {type(lhs).__qualname__} against {type(rhs).__qualname__}"
            )
        return ops.compare_ints(int(lhs), int(rhs))
    if left_kind is not None and right_kind is not None:
        return _compare_numbers(lhs, rhs)
    if isinstance(lhs, (Set, Mapping)) or isinstance(rhs, (Set, Mapping)):
        raise TypeMismatchError(f"{type(lhs).__qualname__} has no natural order")
    try:
        return ops.compare_ints(lhs, rhs)
    except TypeError as e:
        raise TypeMismatchError(
            f"Cannot order {type(lhs).__qualname__} against {type(rhs).__qualname__}"
        ) from e


class OrderingEngine:
    """Accumulates one comparison result over appended value pairs.

    Args:
        options: Field selection, recursion and comparator knobs.
        context: Traversal state shared with an enclosing call.
    """

    def __init__(
        self,
        options: OrderingOptions | None = None,
        context: TraversalContext | None = None,
    ) -> None:
        self._options = options or OrderingOptions(recursive=get_settings().recursive)
        self._context = context or TraversalContext()
        self._comparison = 0

    def result(self) -> int:
        """Comparison over everything appended so far: -1, 0 or 1."""
        return self._comparison

    def append_super(self, super_compare: int) -> Self:
        """Fold in an ancestor's comparison result."""
        if self._comparison == 0:
            self._comparison = ops.sign(super_compare)
        return self

    def append(self, lhs: Any, rhs: Any, comparator: Comparator | None = None) -> Self:
        """Fold in the comparison of one pair of values.

        Args:
            lhs: Left value.
            rhs: Right value.
            comparator: Used instead of the options' comparator for this pair.
        """
        if self._comparison == 0:
            self._comparison = self.compare_values(lhs, rhs, comparator)
        return self

    def reflection_append(self, lhs: Any, rhs: Any) -> Self:
        """Fold in the field-by-field comparison of two whole objects.

        Raises:
            TypeMismatchError: If the objects cannot be paired field by field.
        """
        if self._comparison != 0 or lhs is rhs:
            return self
        if lhs is None or rhs is None or not is_composite(lhs):
            self._comparison = self.compare_values(lhs, rhs)
        else:
            self._comparison = self._compare_fields(lhs, rhs, self._options.comparator)
        return self

    def compare_values(self, lhs: Any, rhs: Any, comparator: Comparator | None = None) -> int:
        """Compare one pair without touching the accumulated result."""
        if lhs is rhs:
            return 0
        if lhs is None:
            return -1
        if rhs is None:
            return 1
        comparator = comparator or self._options.comparator

        kind = array_kind(lhs)
        if kind is not None or array_kind(rhs) is not None:
            if (
                kind is None
                or array_kind(rhs) is None
                or array_signature(lhs) != array_signature(rhs)
            ):
                raise TypeMismatchError(
                    f"Cannot order {type(lhs).__qualname__} against {type(rhs).__qualname__}"
                )
            visitor = dispatch(lhs)

            def elementwise() -> int:
                return visitor.compare(lhs, rhs, lambda a, b: self.compare_values(a, b, comparator))

            if kind is not ArrayKind.OBJECT:
                return elementwise()
            return self._guarded(lhs, rhs, elementwise)

        if self._options.recursive and is_composite(lhs):
            return self._compare_fields(lhs, rhs, comparator)
        if comparator is not None:
            return ops.sign(comparator(lhs, rhs))
        return leaf_compare(lhs, rhs)

    def _compare_fields(self, lhs: Any, rhs: Any, comparator: Comparator | None) -> int:
        fields = paired_fields(lhs, rhs, self._options, "compare")
        if fields is None:
            raise TypeMismatchError(
                f"Cannot order {type(lhs).__qualname__} against {type(rhs).__qualname__}"
            )

        def walk() -> int:
            for descriptor in fields:
                result = self.compare_values(descriptor.get(lhs), descriptor.get(rhs), comparator)
                if result != 0:
                    return result
            return 0

        return self._guarded(lhs, rhs, walk)

    def _guarded(self, lhs: Any, rhs: Any, walk: Callable[[], int]) -> int:
        guard = self._context.guard
        key = pair_key(lhs, rhs)
        if guard.is_active(key) or guard.is_active((key[1], key[0])):
            # Re-entered an in-progress pair: fall back to identity order.
            return ops.compare_ints(id(lhs), id(rhs))
        with guard.visiting(key):
            return walk()


def structural_compare(lhs: Any, rhs: Any, options: OrderingOptions | None = None) -> int:
    """Order two values structurally.

    Args:
        lhs: Left value.
        rhs: Right value.
        options: Field selection, recursion and comparator knobs.

    Returns:
        -1, 0 or 1.

    Raises:
        TypeMismatchError: If the values (or a pair of their fields) have no
            meaningful order.
        AccessError: If a participating field cannot be read.
    """
    logger.debug(
        "Structural comparison of %s and %s", type(lhs).__qualname__, type(rhs).__qualname__
    )
    return OrderingEngine(options).reflection_append(lhs, rhs).result()
