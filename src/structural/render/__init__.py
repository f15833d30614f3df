"""Rendering: style presets and the render engine."""

from structural.render.engine import RenderEngine, render
from structural.render.style import (
    DEFAULT_STYLE,
    JSON_STYLE,
    MULTI_LINE_STYLE,
    NO_CLASS_NAME_STYLE,
    NO_FIELD_NAMES_STYLE,
    PRESETS,
    SHORT_PREFIX_STYLE,
    SIMPLE_STYLE,
    JsonStyleHooks,
    RenderStyle,
    StyleHooks,
    get_style,
)

__all__ = [
    # Style
    "RenderStyle",
    "StyleHooks",
    "JsonStyleHooks",
    "get_style",
    "PRESETS",
    "DEFAULT_STYLE",
    "MULTI_LINE_STYLE",
    "NO_FIELD_NAMES_STYLE",
    "SHORT_PREFIX_STYLE",
    "SIMPLE_STYLE",
    "NO_CLASS_NAME_STYLE",
    "JSON_STYLE",
    # Engine
    "RenderEngine",
    "render",
]
