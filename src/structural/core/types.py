"""Core type definitions for structural."""

from collections.abc import Callable
from typing import Any, Literal, TypeAlias

Comparator: TypeAlias = Callable[[Any, Any], int]
"""Three-way comparison: negative, zero or positive, like ``cmp``.

Equality treats a zero result as "equal".
"""

Algorithm: TypeAlias = Literal["equals", "hash", "compare", "diff", "render"]
"""Name of a structural algorithm, used by per-field exclusion markers."""

ALGORITHMS: frozenset[str] = frozenset({"equals", "hash", "compare", "diff", "render"})
