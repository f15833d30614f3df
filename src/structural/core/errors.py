"""Error taxonomy for structural algorithms.

Every error is raised to the caller of the top-level entry point. A failed
traversal never produces a partial result.
"""


class StructuralError(Exception):
    """Base class for errors raised while running a structural algorithm."""

    pass


class AccessError(StructuralError):
    """Raised when a participating field cannot be read.

    Skipping the field would silently weaken the equality, hash and ordering
    contracts, so the whole traversal is aborted instead.
    """

    def __init__(self, owner: type, field_name: str, reason: str | None = None) -> None:
        self.owner = owner
        self.field_name = field_name
        message = f"Cannot read field {owner.__qualname__}.{field_name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class TypeMismatchError(StructuralError, TypeError):
    """Raised when two values have no meaningful structural relation.

    Ordering raises it for unrelated roots, mismatched array kinds and
    unorderable leaves. Equality never raises it and answers "not equal".
    """

    pass


class UsageError(StructuralError, ValueError):
    """Raised when an API or style contract is violated by the caller."""

    pass
