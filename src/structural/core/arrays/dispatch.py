"""Array dispatch: route an array to the visitor for its element kind.

Usage:
    visitor = dispatch(array.array("i", [1, 2, 3]))
    visitor.kind                      # ArrayKind.INT32
    visitor.equals(a, b, element_equals)

The classification is a closed switch over ArrayKind; there is no registry.
"""

from __future__ import annotations

import array
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias, assert_never

from structural.core.arrays import operations as ops
from structural.core.arrays.models import ArrayKind

_TYPECODE_KINDS = {
    "b": ArrayKind.INT8,
    "B": ArrayKind.INT8,
    "h": ArrayKind.INT16,
    "H": ArrayKind.INT16,
    "f": ArrayKind.FLOAT32,
    "d": ArrayKind.FLOAT64,
    "u": ArrayKind.CHAR,
    "w": ArrayKind.CHAR,
}

_INT_KINDS_BY_SIZE = {
    1: ArrayKind.INT8,
    2: ArrayKind.INT16,
    4: ArrayKind.INT32,
    8: ArrayKind.INT64,
}


def _is_ndarray_like(value: Any) -> bool:
    """Duck-type numpy-style arrays without importing numpy."""
    dtype = getattr(value, "dtype", None)
    return (
        dtype is not None
        and hasattr(dtype, "kind")
        and hasattr(value, "tolist")
        and getattr(value, "ndim", 0) > 0
    )


def _dtype_kind(dtype: Any) -> ArrayKind:
    match dtype.kind:
        case "b":
            return ArrayKind.BOOL
        case "i" | "u":
            return _INT_KINDS_BY_SIZE.get(dtype.itemsize, ArrayKind.INT64)
        case "f":
            return ArrayKind.FLOAT64 if dtype.itemsize >= 8 else ArrayKind.FLOAT32
        case "U" if dtype.itemsize == 4:
            return ArrayKind.CHAR
        case _:
            return ArrayKind.OBJECT


def array_kind(value: Any) -> ArrayKind | None:
    """Classify ``value`` by array element kind.

    Args:
        value: Any value.

    Returns:
        The element kind, or None when ``value`` is not an array.
    """
    if isinstance(value, (bytes, bytearray)):
        return ArrayKind.INT8
    if isinstance(value, array.array):
        kind = _TYPECODE_KINDS.get(value.typecode)
        return kind if kind is not None else _INT_KINDS_BY_SIZE[value.itemsize]
    if isinstance(value, (list, tuple)):
        return ArrayKind.OBJECT
    if _is_ndarray_like(value):
        return _dtype_kind(value.dtype)
    return None


def is_array(value: Any) -> bool:
    return array_kind(value) is not None


def array_signature(value: Any) -> tuple[Any, ...]:
    """Runtime identity of an array's element kind.

    Two arrays with different signatures are never equal, mirroring distinct
    array classes.
    """
    kind = array_kind(value)
    if isinstance(value, array.array):
        return (type(value), kind, value.typecode)
    if _is_ndarray_like(value):
        return (type(value), kind, value.dtype.str, tuple(value.shape[1:]))
    return (type(value), kind)


def elements(value: Any) -> list[Any]:
    """Materialise array elements as plain Python values."""
    if _is_ndarray_like(value):
        flat = value.ravel() if value.ndim > 1 else value
        return list(flat.tolist())
    return list(value)


ElementEquals: TypeAlias = Callable[[Any, Any], bool]
ElementCompare: TypeAlias = Callable[[Any, Any], int]
ElementHash: TypeAlias = Callable[[Any], int]
ElementText: TypeAlias = Callable[[Any], str]


@dataclass(frozen=True, slots=True)
class ElementVisitor:
    """Per-kind element algorithms, applied index by index.

    Primitive visitors carry scalar rules. The object visitor leaves every
    element rule to the calling engine, which may recurse.
    """

    kind: ArrayKind
    scalar_equals: ElementEquals | None = None
    scalar_compare: ElementCompare | None = None
    scalar_hash: ElementHash | None = None
    scalar_text: ElementText | None = None

    def equals(self, lhs: Any, rhs: Any, element_equals: ElementEquals) -> bool:
        """Elementwise equality; arrays of different length are unequal."""
        left, right = elements(lhs), elements(rhs)
        if len(left) != len(right):
            return False
        check = self.scalar_equals or element_equals
        return all(check(a, b) for a, b in zip(left, right, strict=True))

    def compare(self, lhs: Any, rhs: Any, element_compare: ElementCompare) -> int:
        """Length first, then the first differing element."""
        left, right = elements(lhs), elements(rhs)
        if len(left) != len(right):
            return -1 if len(left) < len(right) else 1
        check = self.scalar_compare or element_compare
        for a, b in zip(left, right, strict=True):
            result = check(a, b)
            if result != 0:
                return ops.sign(result)
        return 0

    def contributions(self, value: Any, element_hash: ElementHash) -> list[int]:
        """Hash contribution of every element, in order."""
        rule = self.scalar_hash or element_hash
        return [rule(item) for item in elements(value)]

    def texts(self, value: Any) -> Sequence[str] | None:
        """Element texts for primitive kinds; None for object arrays."""
        if self.scalar_text is None:
            return None
        return [self.scalar_text(item) for item in elements(value)]


def _int_visitor(kind: ArrayKind, rule: ElementHash) -> ElementVisitor:
    return ElementVisitor(
        kind=kind,
        scalar_equals=lambda a, b: a == b,
        scalar_compare=ops.compare_ints,
        scalar_hash=rule,
        scalar_text=str,
    )


INT8_VISITOR = _int_visitor(ArrayKind.INT8, ops.to_int32)
INT16_VISITOR = _int_visitor(ArrayKind.INT16, ops.to_int32)
INT32_VISITOR = _int_visitor(ArrayKind.INT32, ops.to_int32)
INT64_VISITOR = _int_visitor(ArrayKind.INT64, ops.fold_long)
FLOAT32_VISITOR = ElementVisitor(
    kind=ArrayKind.FLOAT32,
    scalar_equals=lambda a, b: ops.float_bits(a) == ops.float_bits(b),
    scalar_compare=ops.compare_floats,
    scalar_hash=ops.float32_hash,
    scalar_text=ops.float32_text,
)
FLOAT64_VISITOR = ElementVisitor(
    kind=ArrayKind.FLOAT64,
    scalar_equals=ops.floats_equal,
    scalar_compare=ops.compare_floats,
    scalar_hash=ops.double_hash,
    scalar_text=str,
)
BOOL_VISITOR = ElementVisitor(
    kind=ArrayKind.BOOL,
    scalar_equals=lambda a, b: bool(a) == bool(b),
    scalar_compare=lambda a, b: ops.compare_ints(int(a), int(b)),
    scalar_hash=ops.bool_hash,
    scalar_text=ops.bool_text,
)
CHAR_VISITOR = ElementVisitor(
    kind=ArrayKind.CHAR,
    scalar_equals=lambda a, b: a == b,
    scalar_compare=lambda a, b: ops.compare_ints(ord(a), ord(b)),
    scalar_hash=ord,
    scalar_text=str,
)
OBJECT_VISITOR = ElementVisitor(kind=ArrayKind.OBJECT)


def visitor_for(kind: ArrayKind) -> ElementVisitor:
    """Exhaustive switch from element kind to visitor."""
    match kind:
        case ArrayKind.INT8:
            return INT8_VISITOR
        case ArrayKind.INT16:
            return INT16_VISITOR
        case ArrayKind.INT32:
            return INT32_VISITOR
        case ArrayKind.INT64:
            return INT64_VISITOR
        case ArrayKind.FLOAT32:
            return FLOAT32_VISITOR
        case ArrayKind.FLOAT64:
            return FLOAT64_VISITOR
        case ArrayKind.BOOL:
            return BOOL_VISITOR
        case ArrayKind.CHAR:
            return CHAR_VISITOR
        case ArrayKind.OBJECT:
            return OBJECT_VISITOR
        case _:
            assert_never(kind)


def dispatch(value: Any) -> ElementVisitor:
    """Select the element visitor for an array value.

    Raises:
        TypeError: If ``value`` is not an array.
    """
    kind = array_kind(value)
    if kind is None:
        raise TypeError(f"{type(value).__name__} is not an array")
    return visitor_for(kind)
