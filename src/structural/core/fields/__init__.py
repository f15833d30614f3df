"""Field functionality: descriptors, markers, and the field selector."""

from structural.core.fields.models import (
    MARKER_KEY,
    FieldDescriptor,
    Marker,
    marked,
)
from structural.core.fields.selector import (
    declared_fields,
    is_composite,
    select_fields,
)

__all__ = [
    # Models
    "MARKER_KEY",
    "FieldDescriptor",
    "Marker",
    "marked",
    # Selector
    "declared_fields",
    "is_composite",
    "select_fields",
]
