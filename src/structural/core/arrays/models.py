"""Array element kinds."""

from enum import Enum, auto


class ArrayKind(Enum):
    """Element kind of an array value; drives the per-element algorithm."""

    INT8 = auto()
    INT16 = auto()
    INT32 = auto()
    INT64 = auto()
    FLOAT32 = auto()
    FLOAT64 = auto()
    BOOL = auto()
    CHAR = auto()
    OBJECT = auto()  # list, tuple and object-dtype arrays: full recursive dispatch

    @property
    def is_primitive(self) -> bool:
        """True for the eight scalar element kinds."""
        return self is not ArrayKind.OBJECT
