"""Structural: field-by-field equality, hashing, ordering, diff and rendering.

Usage:
    from dataclasses import dataclass
    from structural import SHORT_PREFIX_STYLE, marked, render, structural_equals, structural_hash

    @dataclass
    class Account:
        owner: str
        balance: int
        session: object = marked(transient=True, default=None)

    a, b = Account("ada", 10), Account("ada", 10)
    structural_equals(a, b)                  # True
    structural_hash(a) == structural_hash(b) # True
    render(a, SHORT_PREFIX_STYLE)            # Account[owner=ada,balance=10]
"""

import logging

__version__ = "0.1.0"

# Configuration
from structural.config import StructuralSettings, get_settings

# Core primitives
from structural.core import (
    AccessError,
    DiffOptions,
    EqualityOptions,
    FieldDescriptor,
    HashOptions,
    Marker,
    OrderingOptions,
    RenderOptions,
    StructuralError,
    TraversalContext,
    TypeMismatchError,
    UsageError,
    marked,
    select_fields,
)

# Engines
from structural.engines import (
    DiffEngine,
    DiffEntry,
    DiffResult,
    EqualityEngine,
    HashEngine,
    OrderingEngine,
    structural_compare,
    structural_diff,
    structural_equals,
    structural_hash,
)

# Rendering
from structural.render import (
    DEFAULT_STYLE,
    JSON_STYLE,
    MULTI_LINE_STYLE,
    NO_CLASS_NAME_STYLE,
    NO_FIELD_NAMES_STYLE,
    SHORT_PREFIX_STYLE,
    SIMPLE_STYLE,
    RenderEngine,
    RenderStyle,
    get_style,
    render,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Config
    "StructuralSettings",
    "get_settings",
    # Core
    "FieldDescriptor",
    "Marker",
    "marked",
    "select_fields",
    "TraversalContext",
    "EqualityOptions",
    "OrderingOptions",
    "HashOptions",
    "DiffOptions",
    "RenderOptions",
    # Errors
    "StructuralError",
    "AccessError",
    "TypeMismatchError",
    "UsageError",
    # Engines
    "structural_equals",
    "structural_compare",
    "structural_hash",
    "structural_diff",
    "EqualityEngine",
    "OrderingEngine",
    "HashEngine",
    "DiffEngine",
    "DiffEntry",
    "DiffResult",
    # Rendering
    "render",
    "RenderEngine",
    "RenderStyle",
    "get_style",
    "DEFAULT_STYLE",
    "MULTI_LINE_STYLE",
    "NO_FIELD_NAMES_STYLE",
    "SHORT_PREFIX_STYLE",
    "SIMPLE_STYLE",
    "NO_CLASS_NAME_STYLE",
    "JSON_STYLE",
]
