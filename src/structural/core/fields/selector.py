"""Field selection: which fields of a type take part in a structural algorithm.

Usage:
    fields = select_fields(Employee, exclude=("password",), algorithm="equals")
    for descriptor in fields:
        value = descriptor.get(employee)

Field discovery understands dataclasses, Pydantic models, ``__slots__`` and,
for plain classes, the instance ``__dict__``. Fields are reported for the
runtime type first, then for each ancestor in MRO order.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Collection, Iterable, Mapping
from enum import Enum
from functools import lru_cache
from numbers import Number
from typing import Any, get_args, get_origin

from structural.core.errors import UsageError
from structural.core.fields.models import MARKER_KEY, NO_MARKER, FieldDescriptor, Marker

logger = logging.getLogger(__name__)

# Classes from these modules never contribute fields of their own.
_OPAQUE_MODULES = frozenset({"builtins", "typing", "abc", "collections.abc"})

_LEAF_TYPES = (Number, str, bytes, bytearray, memoryview, Enum, Collection, Mapping)


def _is_pydantic(cls: type) -> bool:
    """Check if class is a Pydantic model without importing pydantic.

    Args:
        cls: Class to check.

    Returns:
        True if class inherits from pydantic.BaseModel, False otherwise.
    """
    for base in cls.__mro__:
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


def _is_synthetic(name: str) -> bool:
    """Interpreter-managed names: dunders and the ABC registry caches."""
    return (name.startswith("__") and name.endswith("__")) or name.startswith("_abc_")


def _contributes(cls: type) -> bool:
    if cls is object or cls.__module__ in _OPAQUE_MODULES:
        return False
    return not cls.__module__.startswith("pydantic")


def _annotated_marker(hint: Any) -> Marker | None:
    if isinstance(hint, str) or get_origin(hint) is None:
        return None
    for extra in getattr(hint, "__metadata__", ()):
        if isinstance(extra, Marker):
            return extra
    for arg in get_args(hint):
        found = _annotated_marker(arg)
        if found is not None:
            return found
    return None


def _dataclass_fields(cls: type) -> list[FieldDescriptor]:
    inherited: set[str] = set()
    for base in cls.__mro__[1:]:
        if dataclasses.is_dataclass(base):
            inherited.update(f.name for f in dataclasses.fields(base))

    result = []
    for f in dataclasses.fields(cls):
        if f.name in inherited:
            continue
        marker = f.metadata.get(MARKER_KEY) or _annotated_marker(f.type) or NO_MARKER
        result.append(
            FieldDescriptor(
                declaring_type=cls,
                name=f.name,
                is_transient=marker.transient,
                is_synthetic=_is_synthetic(f.name),
                marker=marker,
            )
        )
    return result


def _pydantic_fields(cls: type) -> list[FieldDescriptor]:
    inherited: set[str] = set()
    for base in cls.__mro__[1:]:
        if _is_pydantic(base) and _contributes(base):
            inherited.update(base.model_fields)  # type: ignore[attr-defined]

    result = []
    for name, info in cls.model_fields.items():  # type: ignore[attr-defined]
        if name in inherited:
            continue
        marker = next((m for m in info.metadata if isinstance(m, Marker)), NO_MARKER)
        result.append(
            FieldDescriptor(
                declaring_type=cls,
                name=name,
                # exclude=True keeps the field out of serialization, which is
                # what transient means for a model.
                is_transient=marker.transient or info.exclude is True,
                is_synthetic=_is_synthetic(name),
                marker=marker,
            )
        )
    return result


def _slot_fields(cls: type) -> list[FieldDescriptor]:
    slots = cls.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    return [
        FieldDescriptor(declaring_type=cls, name=name, is_synthetic=_is_synthetic(name))
        for name in slots
    ]


def _static_fields(cls: type, instance_names: set[str]) -> list[FieldDescriptor]:
    result = []
    for name, value in cls.__dict__.items():
        if name in instance_names or isinstance(value, type):
            continue
        if name.startswith("__") and name.endswith("__"):
            continue
        # Functions, properties, slots and other descriptors are behaviour, not state.
        if callable(value) or hasattr(type(value), "__get__"):
            continue
        if _is_pydantic(cls) and name.startswith("model_"):
            continue
        result.append(
            FieldDescriptor(
                declaring_type=cls,
                name=name,
                is_static=True,
                is_synthetic=_is_synthetic(name),
            )
        )
    return result


@lru_cache(maxsize=None)
def declared_fields(cls: type) -> tuple[FieldDescriptor, ...]:
    """All candidate fields declared directly on ``cls``, before any filtering.

    Instance fields come first in declaration order, followed by class-level
    (static) attributes.

    Args:
        cls: Class to inspect.

    Returns:
        Tuple of descriptors; empty for opaque classes such as ``object``.
    """
    if not _contributes(cls):
        return ()
    if dataclasses.is_dataclass(cls):
        instance = _dataclass_fields(cls)
    elif _is_pydantic(cls):
        instance = _pydantic_fields(cls)
    else:
        instance = _slot_fields(cls)
    instance_names = {d.name for d in instance}
    if dataclasses.is_dataclass(cls):
        instance_names.update(f.name for f in dataclasses.fields(cls))
    elif _is_pydantic(cls):
        instance_names.update(cls.model_fields)  # type: ignore[attr-defined]
    statics = _static_fields(cls, instance_names)
    logger.debug(
        "Discovered %d instance and %d static fields on %s",
        len(instance),
        len(statics),
        cls.__qualname__,
    )
    return (*instance, *statics)


def _participates(
    descriptor: FieldDescriptor,
    exclude: frozenset[str],
    include_transient: bool,
    include_static: bool,
    algorithm: str | None,
) -> bool:
    """Apply the exclusion policy, strongest rule first."""
    if descriptor.marker.excludes(algorithm):
        return False
    if descriptor.name in exclude:
        return False
    if descriptor.is_synthetic:
        return False
    if descriptor.is_static and not include_static:
        return False
    return include_transient or not descriptor.is_transient


def _hierarchy(cls: type, stop_at: type | None) -> list[type]:
    if stop_at is not None and stop_at not in cls.__mro__:
        raise UsageError(f"{stop_at.__qualname__} is not an ancestor of {cls.__qualname__}")
    chain = []
    for klass in cls.__mro__:
        chain.append(klass)
        if klass is stop_at:
            break
    return chain


@lru_cache(maxsize=1024)
def _select_cached(
    cls: type,
    stop_at: type | None,
    exclude: frozenset[str],
    include_transient: bool,
    include_static: bool,
    algorithm: str | None,
) -> tuple[FieldDescriptor, ...]:
    return tuple(
        descriptor
        for klass in _hierarchy(cls, stop_at)
        for descriptor in declared_fields(klass)
        if _participates(descriptor, exclude, include_transient, include_static, algorithm)
    )


def _has_field_layout(cls: type) -> bool:
    return dataclasses.is_dataclass(cls) or _is_pydantic(cls)


def select_fields(
    cls: type,
    *,
    stop_at: type | None = None,
    exclude: Iterable[str] = (),
    include_transient: bool = False,
    include_static: bool = False,
    algorithm: str | None = None,
    instance: Any = None,
) -> tuple[FieldDescriptor, ...]:
    """Enumerate the fields of ``cls`` that participate in an algorithm.

    Args:
        cls: Runtime type whose fields are selected.
        stop_at: Last ancestor to visit (inclusive). None walks the whole MRO.
        exclude: Field names to skip.
        include_transient: Include fields marked transient.
        include_static: Include class-level attributes.
        algorithm: Algorithm name used to honour per-field exclusion markers.
        instance: Instance of ``cls``. Plain classes without a declared layout
            report its ``__dict__`` keys as fields of ``cls``: in assignment
            order for rendering, in name order for every other algorithm.

    Returns:
        Ordered tuple of field descriptors.

    Raises:
        UsageError: If ``stop_at`` is not an ancestor of ``cls``.
    """
    names = frozenset(exclude)
    selected = _select_cached(cls, stop_at, names, include_transient, include_static, algorithm)
    if instance is None or _has_field_layout(cls) or not hasattr(instance, "__dict__"):
        return selected

    # Attributes living only on the instance are attributed to its runtime type.
    known = {d.name for klass in cls.__mro__ for d in declared_fields(klass) if not d.is_static}
    attributes = list(vars(instance))
    if algorithm != "render":
        # Instances assigning the same attributes in a different order still pair up.
        attributes.sort()
    dynamic = tuple(
        descriptor
        for descriptor in (
            FieldDescriptor(declaring_type=cls, name=name, is_synthetic=_is_synthetic(name))
            for name in attributes
            if name not in known
        )
        if _participates(descriptor, names, include_transient, include_static, algorithm)
    )
    return dynamic + selected


def is_composite(value: Any) -> bool:
    """Decide whether engines introspect ``value`` or treat it as a leaf.

    Dataclass and Pydantic instances are always composite. Other user objects
    are composite when they keep identity equality and carry instance state.
    Numbers, strings, bytes, enums, collections, classes and builtins are leaves.

    Args:
        value: Value to classify.

    Returns:
        True if the value should be traversed field by field.
    """
    if value is None or isinstance(value, type):
        return False
    cls = type(value)
    if dataclasses.is_dataclass(cls) or _is_pydantic(cls):
        return True
    if isinstance(value, _LEAF_TYPES) or cls.__module__ in _OPAQUE_MODULES:
        return False
    if cls.__eq__ is not object.__eq__:
        return False
    return hasattr(value, "__dict__") or any("__slots__" in k.__dict__ for k in cls.__mro__)
