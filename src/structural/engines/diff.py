"""Structural diff: list the fields on which two objects differ.

Usage:
    result = structural_diff(old, new)
    for entry in result:
        print(entry.field, entry.left, entry.right)
    str(result)     # "Order@1[qty=1] differs from Order@2[qty=2]"

    # Builder form
    result = (
        DiffEngine(old, new)
        .append("qty", old.qty, new.qty)
        .append("tags", old.tags, new.tags)
        .build()
    )

A field produces an entry exactly when structural equality with the same
options finds its two values unequal.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, ClassVar, Self

from structural.config import get_settings
from structural.core.arrays import elements, is_array
from structural.core.errors import TypeMismatchError, UsageError
from structural.core.fields import is_composite
from structural.core.guard import TraversalContext, pair_key
from structural.core.options import DiffOptions
from structural.engines.equality import EqualityEngine
from structural.engines.traversal import paired_fields
from structural.render.engine import RenderEngine
from structural.render.style import RenderStyle, get_style

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DiffEntry:
    """One differing field.

    Arrays are stored as tuples of their elements.
    """

    field: str
    left: Any
    right: Any

    def __str__(self) -> str:
        return f"[{self.field}: {self.left}, {self.right}]"


@dataclass(frozen=True, slots=True)
class DiffResult:
    """Immutable outcome of a diff: the roots plus the differing fields.

    Iterates over its entries in the order they were recorded; an empty
    result is falsy.
    """

    OBJECTS_SAME_STRING: ClassVar[str] = ""
    DIFFERS_STRING: ClassVar[str] = "differs from"

    left: Any
    right: Any
    entries: tuple[DiffEntry, ...] = ()
    style: RenderStyle | None = None

    def __iter__(self) -> Iterator[DiffEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def is_empty(self) -> bool:
        return not self.entries

    @property
    def number_of_diffs(self) -> int:
        return len(self.entries)

    @property
    def fields(self) -> tuple[str, ...]:
        """Names of the differing fields, in order."""
        return tuple(entry.field for entry in self.entries)

    def to_string(self, style: RenderStyle | None = None) -> str:
        """Render both sides restricted to the differing fields.

        Returns:
            ``"<left> differs from <right>"``, or an empty string when there
            are no differences.
        """
        if not self.entries:
            return self.OBJECTS_SAME_STRING
        style = style or self.style or get_style(get_settings().default_style)
        left = RenderEngine(self.left, style)
        right = RenderEngine(self.right, style)
        for entry in self.entries:
            left.append(entry.field, entry.left)
            right.append(entry.field, entry.right)
        return f"{left.build()} {self.DIFFERS_STRING} {right.build()}"

    def __str__(self) -> str:
        return self.to_string()


def _boxed(value: Any) -> Any:
    return tuple(elements(value)) if is_array(value) else value


class DiffEngine:
    """Collects differing fields of two objects into a DiffResult.

    Args:
        left: Left root; must not be None.
        right: Right root; must not be None.
        style: Style used when the result is rendered.
        test_trivially_equal: When the roots are already equal, skip every
            append and produce an empty result.
        options: Field selection, recursion and nesting knobs.
        context: Traversal state shared with an enclosing diff.

    Raises:
        UsageError: If either root is None.
    """

    def __init__(
        self,
        left: Any,
        right: Any,
        style: RenderStyle | None = None,
        test_trivially_equal: bool | None = None,
        options: DiffOptions | None = None,
        context: TraversalContext | None = None,
    ) -> None:
        if left is None:
            raise UsageError("Left hand object cannot be None")
        if right is None:
            raise UsageError("Right hand object cannot be None")

        self._options = options or DiffOptions(recursive=get_settings().recursive)
        self._context = context or TraversalContext()
        self._left = left
        self._right = right
        self._style = style or self._options.style
        self._entries: list[DiffEntry] = []
        self._equality = EqualityEngine(self._options.equality(), self._context)

        if test_trivially_equal is None:
            test_trivially_equal = self._options.test_trivially_equal
        self._trivially_equal = test_trivially_equal and (
            left is right
            or EqualityEngine(self._options.equality(), self._context)
            .reflection_append(left, right)
            .is_equal
        )

    def append(self, field_name: str, lhs: Any, rhs: Any) -> Self:
        """Record ``field_name`` if its two values are not equal.

        Raises:
            UsageError: If ``field_name`` is None.
        """
        if field_name is None:
            raise UsageError("Field name cannot be None")
        if self._trivially_equal or self._equality.values_equal(lhs, rhs):
            return self
        if self._options.nested and self._nests(lhs, rhs):
            return self._append_nested(field_name, lhs, rhs)
        self._entries.append(DiffEntry(field_name, _boxed(lhs), _boxed(rhs)))
        return self

    def append_diff(self, field_name: str, result: DiffResult) -> Self:
        """Record every entry of a nested result, prefixed with ``field_name``.

        Raises:
            UsageError: If ``field_name`` is None.
        """
        if field_name is None:
            raise UsageError("Field name cannot be None")
        if self._trivially_equal:
            return self
        for entry in result:
            self._entries.append(DiffEntry(f"{field_name}.{entry.field}", entry.left, entry.right))
        return self

    def reflection_append(self) -> Self:
        """Append every participating field of the two roots.

        Raises:
            TypeMismatchError: If the roots cannot be paired field by field.
        """
        if self._trivially_equal:
            return self
        left, right = self._left, self._right
        if not is_composite(left) or isinstance(left, self._options.bypass_types):
            return self.append("value", left, right)
        fields = paired_fields(left, right, self._options, "diff")
        if fields is None:
            raise TypeMismatchError(
                f"Cannot diff {type(left).__qualname__} against {type(right).__qualname__}"
            )
        with self._context.guard.visiting(pair_key(left, right)):
            for descriptor in fields:
                self.append(descriptor.name, descriptor.get(left), descriptor.get(right))
        return self

    def build(self) -> DiffResult:
        """Freeze the recorded entries into a DiffResult."""
        return DiffResult(self._left, self._right, tuple(self._entries), self._style)

    def _nests(self, lhs: Any, rhs: Any) -> bool:
        if not (is_composite(lhs) and is_composite(rhs)):
            return False
        if paired_fields(lhs, rhs, self._options, "diff") is None:
            return False
        guard = self._context.guard
        key = pair_key(lhs, rhs)
        return not (guard.is_active(key) or guard.is_active((key[1], key[0])))

    def _append_nested(self, field_name: str, lhs: Any, rhs: Any) -> Self:
        nested = DiffEngine(lhs, rhs, self._style, False, self._options, self._context)
        return self.append_diff(field_name, nested.reflection_append().build())


def structural_diff(lhs: Any, rhs: Any, options: DiffOptions | None = None) -> DiffResult:
    """Diff two objects field by field.

    Args:
        lhs: Left object.
        rhs: Right object.
        options: Field selection, nesting and presentation knobs.

    Returns:
        DiffResult listing every participating field whose values are unequal.

    Raises:
        UsageError: If either object is None.
        TypeMismatchError: If the objects cannot be paired field by field.
        AccessError: If a participating field cannot be read.
    """
    logger.debug("Structural diff of %s and %s", type(lhs).__qualname__, type(rhs).__qualname__)
    return DiffEngine(lhs, rhs, options=options).reflection_append().build()
