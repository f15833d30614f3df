"""Structural equality: compare two values field by field.

Usage:
    structural_equals(order_a, order_b)

    # Builder form, one verdict over several pairs
    engine = EqualityEngine()
    engine.append(a.id, b.id).append(a.lines, b.lines)
    engine.is_equal

The first unequal pair decides the verdict; later appends are skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, Self

from structural.config import get_settings
from structural.core.arrays import ArrayKind, array_kind, array_signature, dispatch
from structural.core.arrays import operations as ops
from structural.core.fields import is_composite
from structural.core.guard import TraversalContext, pair_key
from structural.core.options import EqualityOptions
from structural.engines.traversal import paired_fields, scalar_kind

logger = logging.getLogger(__name__)


def leaf_equal(lhs: Any, rhs: Any) -> bool:
    """Equality of two non-composite, non-array values.

    Numeric leaves must share a kind; floats compare by bit pattern.
    """
    kind = scalar_kind(lhs)
    if kind is not scalar_kind(rhs):
        return False
    if kind is float:
        return ops.floats_equal(lhs, rhs)
    return bool(lhs == rhs)


class EqualityEngine:
    """Accumulates one equality verdict over appended value pairs.

    Args:
        options: Field selection and recursion knobs.
        context: Traversal state shared with an enclosing call. A fresh one is
            created when omitted.
    """

    def __init__(
        self,
        options: EqualityOptions | None = None,
        context: TraversalContext | None = None,
    ) -> None:
        self._options = options or EqualityOptions(recursive=get_settings().recursive)
        self._context = context or TraversalContext()
        self._is_equal = True

    @property
    def is_equal(self) -> bool:
        """Verdict over everything appended so far."""
        return self._is_equal

    def reset(self) -> None:
        """Start a new verdict."""
        self._is_equal = True

    def append_super(self, super_equals: bool) -> Self:
        """Fold in the verdict of an ancestor's equality."""
        if self._is_equal:
            self._is_equal = super_equals
        return self

    def append(self, lhs: Any, rhs: Any) -> Self:
        """Fold in the equality of one pair of values."""
        if self._is_equal:
            self._is_equal = self.values_equal(lhs, rhs)
        return self

    def reflection_append(self, lhs: Any, rhs: Any) -> Self:
        """Fold in the field-by-field equality of two whole objects.

        Unlike ``append``, composite roots are always walked, even when the
        options disable recursion into nested values.
        """
        if not self._is_equal or lhs is rhs:
            return self
        if lhs is None or rhs is None:
            self._is_equal = False
        elif self._walks(lhs, rhs):
            self._is_equal = self._fields_equal(lhs, rhs)
        else:
            self._is_equal = self.values_equal(lhs, rhs)
        return self

    def values_equal(self, lhs: Any, rhs: Any) -> bool:
        """Compare one pair without touching the accumulated verdict."""
        if lhs is rhs:
            return True
        if lhs is None or rhs is None:
            return False

        kind = array_kind(lhs)
        if kind is not None:
            if array_kind(rhs) is None or array_signature(lhs) != array_signature(rhs):
                return False
            visitor = dispatch(lhs)
            if kind is not ArrayKind.OBJECT:
                return visitor.equals(lhs, rhs, self.values_equal)
            return self._guarded(lhs, rhs, lambda: visitor.equals(lhs, rhs, self.values_equal))

        if self._options.recursive and self._walks(lhs, rhs):
            return self._fields_equal(lhs, rhs)

        comparator = self._options.comparator
        if comparator is not None:
            return comparator(lhs, rhs) == 0

        if isinstance(lhs, Mapping) and isinstance(rhs, Mapping):
            return self._guarded(lhs, rhs, lambda: self._mappings_equal(lhs, rhs))
        return leaf_equal(lhs, rhs)

    def _walks(self, lhs: Any, rhs: Any) -> bool:
        bypass = self._options.bypass_types
        return is_composite(lhs) and not isinstance(lhs, bypass) and not isinstance(rhs, bypass)

    def _mappings_equal(self, lhs: Mapping[Any, Any], rhs: Mapping[Any, Any]) -> bool:
        if len(lhs) != len(rhs) or lhs.keys() != rhs.keys():
            return False
        return all(self.values_equal(value, rhs[key]) for key, value in lhs.items())

    def _fields_equal(self, lhs: Any, rhs: Any) -> bool:
        fields = paired_fields(lhs, rhs, self._options, "equals")
        if fields is None:
            return False
        return self._guarded(
            lhs, rhs, lambda: all(self.values_equal(d.get(lhs), d.get(rhs)) for d in fields)
        )

    def _guarded(self, lhs: Any, rhs: Any, walk: Callable[[], bool]) -> bool:
        """Run ``walk`` with the pair marked as in progress.

        Composites, object arrays and mappings can reach themselves again.
        """
        guard = self._context.guard
        key = pair_key(lhs, rhs)
        if guard.is_active(key) or guard.is_active((key[1], key[0])):
            # Re-entered an in-progress pair: only the same object is equal.
            return lhs is rhs
        with guard.visiting(key):
            return walk()


def structural_equals(lhs: Any, rhs: Any, options: EqualityOptions | None = None) -> bool:
    """Test two values for structural equality.

    Args:
        lhs: Left value.
        rhs: Right value.
        options: Field selection and recursion knobs.

    Returns:
        True if the values are identical or all participating fields are
        equal. Unrelated types are never equal.

    Raises:
        AccessError: If a participating field cannot be read.
    """
    logger.debug("Structural equality of %s and %s", type(lhs).__qualname__, type(rhs).__qualname__)
    return EqualityEngine(options).reflection_append(lhs, rhs).is_equal
