"""Field models: descriptors and participation markers.

Usage:
    @dataclass
    class Account:
        owner: str
        balance: float
        session: object = marked(default=None, transient=True)
        audit_note: str = marked(default="", exclude={"equals", "hash"})
        history: list[str] = marked(default_factory=list, summary=True)

    # Pydantic models and Annotated hints carry the same marker:
    class Profile(BaseModel):
        token: Annotated[str, Marker(transient=True)]
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from structural.core.errors import AccessError, UsageError
from structural.core.types import ALGORITHMS

MARKER_KEY = "structural"
"""Key under which a Marker is stored in dataclass field metadata."""


@dataclass(frozen=True, slots=True)
class Marker:
    """Participation marker attached to a single field.

    Attributes:
        exclude: Algorithms ("equals", "hash", "compare", "diff", "render")
            that must skip this field regardless of caller options.
        transient: Field is skipped unless the caller opts into transients.
        summary: Render this field as a size/type summary instead of in full.
    """

    exclude: frozenset[str] = frozenset()
    transient: bool = False
    summary: bool = False

    def __post_init__(self) -> None:
        exclude: Iterable[str] | str = self.exclude
        names = frozenset((exclude,) if isinstance(exclude, str) else exclude)
        unknown = names - ALGORITHMS
        if unknown:
            raise UsageError(f"Unknown algorithm(s) in exclude marker: {sorted(unknown)}")
        object.__setattr__(self, "exclude", names)

    def excludes(self, algorithm: str | None) -> bool:
        """Check whether this marker removes the field from an algorithm."""
        return algorithm is not None and algorithm in self.exclude


NO_MARKER = Marker()


def marked(
    *,
    exclude: Iterable[str] | str = (),
    transient: bool = False,
    summary: bool = False,
    **field_kwargs: Any,
) -> Any:
    """Declare a dataclass field carrying a participation Marker.

    Accepts every keyword of ``dataclasses.field`` (default, default_factory,
    repr, compare, ...). Existing metadata is preserved.

    Returns:
        The dataclasses.Field sentinel to assign in the class body.
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[MARKER_KEY] = Marker(exclude=exclude, transient=transient, summary=summary)
    return field(metadata=metadata, **field_kwargs)


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """One participating field of a type.

    Immutable once computed, descriptors are cached per type for the process
    lifetime.
    """

    declaring_type: type
    name: str
    is_static: bool = False
    is_transient: bool = False
    is_synthetic: bool = False
    marker: Marker = NO_MARKER

    @property
    def summary(self) -> bool:
        """True when the field should be rendered as a summary."""
        return self.marker.summary

    @property
    def excluded_from(self) -> frozenset[str]:
        """Algorithms that always skip this field."""
        return self.marker.exclude

    def get(self, obj: Any) -> Any:
        """Read the field from ``obj`` (or from the declaring type when static).

        Raises:
            AccessError: If the value cannot be read.
        """
        target = self.declaring_type if self.is_static else obj
        try:
            return getattr(target, self.name)
        except Exception as e:
            raise AccessError(self.declaring_type, self.name, f"{type(e).__name__}: {e}") from e

    def set(self, obj: Any, value: Any) -> None:
        """Write the field on ``obj`` (or on the declaring type when static).

        Frozen dataclasses are written through ``object.__setattr__``.

        Raises:
            AccessError: If the value cannot be written.
        """
        target = self.declaring_type if self.is_static else obj
        try:
            if dataclasses.is_dataclass(target) and not self.is_static:
                object.__setattr__(target, self.name, value)
            else:
                setattr(target, self.name, value)
        except Exception as e:
            raise AccessError(self.declaring_type, self.name, f"{type(e).__name__}: {e}") from e
