"""Per-call configuration for the structural algorithms.

Usage:
    options = EqualityOptions(exclude=("cache",), stop_at=BaseEntity)
    structural_equals(a, b, options)

    structural_diff(a, b, DiffOptions(nested=True))
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from structural.core.fields import FieldDescriptor, select_fields
from structural.core.types import Comparator

if TYPE_CHECKING:
    from structural.render.style import RenderStyle


def _names(value: Iterable[str] | str) -> tuple[str, ...]:
    return (value,) if isinstance(value, str) else tuple(value)


@dataclass(frozen=True, slots=True)
class TraversalOptions:
    """Field selection knobs shared by every algorithm."""

    exclude: tuple[str, ...] = ()
    """Field names that never participate."""

    include_transient: bool = False
    """Include fields marked transient."""

    include_static: bool = False
    """Include class-level attributes."""

    stop_at: type | None = None
    """Last ancestor whose fields are visited (inclusive)."""

    comparator: Comparator | None = None
    """Three-way comparison applied to values that are not walked field by field."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "exclude", _names(self.exclude))

    def fields_of(self, cls: type, instance: Any, algorithm: str) -> tuple[FieldDescriptor, ...]:
        """Select the participating fields of ``cls`` for ``algorithm``."""
        return select_fields(
            cls,
            stop_at=self.stop_at if self.stop_at in cls.__mro__ else None,
            exclude=self.exclude,
            include_transient=self.include_transient,
            include_static=self.include_static,
            algorithm=algorithm,
            instance=instance,
        )


@dataclass(frozen=True, slots=True)
class EqualityOptions(TraversalOptions):
    """Options for structural equality."""

    recursive: bool = True
    """Traverse nested composite values instead of calling their ``__eq__``."""

    bypass_types: tuple[type, ...] = (str,)
    """Types always compared with their own ``__eq__``."""


@dataclass(frozen=True, slots=True)
class OrderingOptions(TraversalOptions):
    """Options for structural ordering."""

    recursive: bool = True
    """Traverse nested composite values instead of using ``<``."""


@dataclass(frozen=True, slots=True)
class HashOptions(TraversalOptions):
    """Options for structural hashing."""

    recursive: bool = True
    """Traverse nested composite values instead of calling ``hash()``."""

    max_depth: int = 8
    """Levels of nested composites, object arrays and mappings hashed in full.

    Deeper object arrays and mappings contribute their length, deeper
    composites contribute zero.
    """


@dataclass(frozen=True, slots=True)
class DiffOptions(EqualityOptions):
    """Options for structural diffing."""

    nested: bool = False
    """Diff unequal composite fields recursively and prefix their entries."""

    test_trivially_equal: bool = True
    """Return an empty result at once when the roots are equal."""

    style: RenderStyle | None = None
    """Style used when the result is rendered as text."""

    def equality(self) -> EqualityOptions:
        """Equality options matching this diff's field selection."""
        return EqualityOptions(
            exclude=self.exclude,
            include_transient=self.include_transient,
            include_static=self.include_static,
            stop_at=self.stop_at,
            comparator=self.comparator,
            recursive=self.recursive,
            bypass_types=self.bypass_types,
        )


@dataclass(frozen=True, slots=True)
class RenderOptions(TraversalOptions):
    """Options for rendering."""

    exclude_none: bool = False
    """Skip fields whose value is None."""

    recursive: bool = True
    """Render nested composite values with the same style instead of ``str()``."""

    summary_fields: tuple[str, ...] = field(default=())
    """Field names rendered as summaries in addition to marked fields."""

    def __post_init__(self) -> None:
        TraversalOptions.__post_init__(self)
        object.__setattr__(self, "summary_fields", _names(self.summary_fields))
