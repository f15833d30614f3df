"""Structural hashing: fold field contributions into a 32-bit accumulator.

Usage:
    structural_hash(order)

    engine = HashEngine(seed=17, multiplier=37)
    engine.append(order.id).append(order.lines)
    engine.result()

Each step computes ``total = int32(total * multiplier + contribution)``.
Values equal under structural equality hash to the same result.

Nested composites, object arrays and mappings are hashed down to
``HashOptions.max_depth`` levels below the appended value. Deeper containers
contribute only their length and deeper composites contribute zero, so
cyclic graphs terminate and a value hashes the same wherever it is reached
from.

Numbers, strings and arrays of them hash the same in every process. Enum
members, set elements and mapping keys go through the builtin ``hash()``,
which Python salts per process for strings and bytes unless
``PYTHONHASHSEED`` is fixed.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from typing import Any, Self

from structural.config import get_settings
from structural.core.arrays import ArrayKind, array_kind, dispatch
from structural.core.arrays import operations as ops
from structural.core.errors import TypeMismatchError, UsageError
from structural.core.fields import is_composite
from structural.core.options import HashOptions

logger = logging.getLogger(__name__)


def _builtin_hash(value: Any) -> int:
    try:
        return ops.int_hash(hash(value))
    except TypeError as e:
        raise TypeMismatchError(f"{type(value).__qualname__} is not hashable") from e


class HashEngine:
    """Accumulates a structural hash over appended values.

    Args:
        seed: Initial accumulator value; must be odd. Defaults to settings.
        multiplier: Per-step multiplier; must be odd. Defaults to settings.
        options: Field selection and recursion knobs.
        depth: Nesting level of the appended values below the hashed root.

    Raises:
        UsageError: If ``seed`` or ``multiplier`` is even.
    """

    def __init__(
        self,
        seed: int | None = None,
        multiplier: int | None = None,
        options: HashOptions | None = None,
        depth: int = 0,
    ) -> None:
        settings = get_settings()
        seed = settings.hash_seed if seed is None else seed
        multiplier = settings.hash_multiplier if multiplier is None else multiplier
        if seed % 2 == 0:
            raise UsageError(f"Hash seed must be odd, got {seed}")
        if multiplier % 2 == 0:
            raise UsageError(f"Hash multiplier must be odd, got {multiplier}")

        self._seed = seed
        self._multiplier = multiplier
        self._total = ops.to_int32(seed)
        self._options = options or HashOptions(recursive=settings.recursive)
        self._depth = depth

    def result(self) -> int:
        """Current accumulator value as a signed 32-bit integer."""
        return self._total

    def __int__(self) -> int:
        return self._total

    def append_super(self, super_hash: int) -> Self:
        """Fold in an ancestor's hash as one contribution."""
        self._step(ops.to_int32(super_hash))
        return self

    def append(self, value: Any) -> Self:
        """Fold in one value.

        Arrays contribute one step per element; anything else contributes
        a single step. None contributes zero.
        """
        if value is None or array_kind(value) is None:
            self._step(self._contribution(value))
        else:
            for contribution in dispatch(value).contributions(value, self._contribution):
                self._step(contribution)
        return self

    def reflection_append(self, value: Any) -> Self:
        """Fold in every participating field of ``value`` in declaration order.

        Non-composite values are appended as a whole.
        """
        if not is_composite(value):
            return self.append(value)
        for descriptor in self._options.fields_of(type(value), value, "hash"):
            self.append(descriptor.get(value))
        return self

    def _step(self, contribution: int) -> None:
        self._total = ops.to_int32(self._total * self._multiplier + contribution)

    def _nested(self) -> HashEngine:
        return HashEngine(self._seed, self._multiplier, self._options, self._depth + 1)

    def _contribution(self, value: Any) -> int:
        if value is None:
            return 0
        if isinstance(value, bool):
            return ops.bool_hash(value)
        if isinstance(value, int):
            return ops.int_hash(value)
        if isinstance(value, float):
            return ops.double_hash(value)
        if isinstance(value, str):
            return ops.string_hash(value)

        exhausted = self._depth >= self._options.max_depth
        kind = array_kind(value)
        if kind is not None:
            if exhausted and kind is ArrayKind.OBJECT:
                return len(value)
            return self._nested().append(value).result()
        if is_composite(value):
            if not self._options.recursive:
                return _builtin_hash(value)
            if exhausted:
                return 0
            return self._nested().reflection_append(value).result()
        if isinstance(value, Mapping):
            if exhausted:
                return len(value)
            nested = self._nested()
            return ops.to_int32(
                sum(_builtin_hash(k) ^ nested._contribution(v) for k, v in value.items())
            )
        if isinstance(value, Collection):
            # Unordered collections compare with ==, so contributions must not depend on order.
            return ops.to_int32(sum(_builtin_hash(item) for item in value))
        return _builtin_hash(value)


def structural_hash(
    value: Any,
    seed: int | None = None,
    multiplier: int | None = None,
    options: HashOptions | None = None,
) -> int:
    """Compute the structural hash of a value.

    Args:
        value: Value to hash.
        seed: Initial accumulator value (odd).
        multiplier: Per-step multiplier (odd).
        options: Field selection and recursion knobs.

    Returns:
        Signed 32-bit hash. Equal values under ``structural_equals`` with
        matching options hash alike.

    Raises:
        UsageError: If ``seed`` or ``multiplier`` is even.
        AccessError: If a participating field cannot be read.
        TypeMismatchError: If a leaf value is unhashable.
    """
    logger.debug("Structural hash of %s", type(value).__qualname__)
    return HashEngine(seed, multiplier, options).reflection_append(value).result()
