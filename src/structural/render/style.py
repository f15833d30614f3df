"""Render styles: immutable formatting knobs plus per-kind formatting hooks.

Usage:
    render(order, DEFAULT_STYLE)        # shop.Order@7f2a1c[id=7,lines={...}]
    render(order, SHORT_PREFIX_STYLE)   # Order[id=7,lines={...}]
    render(order, JSON_STYLE)           # {"id":7,"lines":[...]}

    compact = DEFAULT_STYLE.with_options(use_identity_hash_code=False, null_text="-")

Presets are frozen and safe to share between threads. Custom styles are
derived with ``with_options`` rather than mutated in place.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Sequence
from dataclasses import dataclass
from numbers import Number
from typing import Any

from structural.core.arrays.operations import bool_text
from structural.core.errors import UsageError


class StyleHooks:
    """Default per-kind formatting; presets swap in a different hooks object."""

    def check_append(self, field_name: str | None, full_detail: bool) -> None:
        """Validate an append call before anything is written."""
        return None

    def format_field_name(self, name: str) -> str:
        return name

    def format_char(self, style: RenderStyle, value: str) -> str:
        return value

    def format_value(self, style: RenderStyle, value: Any) -> str:
        """Text of a leaf value rendered in full detail."""
        if isinstance(value, bool):
            return bool_text(value)
        return str(value)

    def format_collection(self, style: RenderStyle, items: Sequence[str]) -> str:
        return "[" + ", ".join(items) + "]"

    def format_mapping(self, style: RenderStyle, entries: Sequence[tuple[Any, str, str]]) -> str:
        """Join (key, key text, value text) triples."""
        pairs = (f"{key_text}={value_text}" for _, key_text, value_text in entries)
        return "{" + ", ".join(pairs) + "}"


class JsonStyleHooks(StyleHooks):
    """JSON-shaped output: quoted names and strings, mandatory names and detail."""

    def check_append(self, field_name: str | None, full_detail: bool) -> None:
        if field_name is None:
            raise UsageError("Field names are mandatory when using the JSON style")
        if not full_detail:
            raise UsageError("Full detail is mandatory when using the JSON style")

    def format_field_name(self, name: str) -> str:
        return _quote(name)

    def format_char(self, style: RenderStyle, value: str) -> str:
        return _quote(value)

    def format_value(self, style: RenderStyle, value: Any) -> str:
        if value is None:
            return style.null_text
        if isinstance(value, str):
            return _quote(value)
        if isinstance(value, bool):
            return bool_text(value)
        if isinstance(value, Number):
            return str(value)
        text = str(value)
        if _wrapped(text, style.content_start, style.content_end) or _wrapped(
            text, style.array_start, style.array_end
        ):
            return text
        return _quote(text)

    def format_collection(self, style: RenderStyle, items: Sequence[str]) -> str:
        return style.array_start + style.array_separator.join(items) + style.array_end

    def format_mapping(self, style: RenderStyle, entries: Sequence[tuple[Any, str, str]]) -> str:
        body = style.field_separator.join(
            f"{_quote(str(key))}{style.field_name_value_separator}{value_text}"
            for key, _, value_text in entries
        )
        return style.content_start + body + style.content_end


def _quote(text: str) -> str:
    """JSON string literal; forward slashes are escaped as well."""
    return json.dumps(text).replace("/", "\\/")


def _wrapped(text: str, start: str, end: str) -> bool:
    return text.startswith(start) and text.endswith(end)


DEFAULT_HOOKS = StyleHooks()
JSON_HOOKS = JsonStyleHooks()

_TEXT_KNOBS = (
    "content_start",
    "content_end",
    "field_name_value_separator",
    "field_separator",
    "array_start",
    "array_separator",
    "array_end",
    "null_text",
    "size_start_text",
    "size_end_text",
    "summary_object_start_text",
    "summary_object_end_text",
)


@dataclass(frozen=True, slots=True)
class RenderStyle:
    """Formatting configuration consumed by the render engine.

    Text knobs given as None are stored as empty strings.
    """

    name: str = "custom"
    use_field_names: bool = True
    use_class_name: bool = True
    use_short_class_name: bool = False
    use_identity_hash_code: bool = True
    content_start: str = "["
    content_end: str = "]"
    field_name_value_separator: str = "="
    field_separator_at_start: bool = False
    field_separator_at_end: bool = False
    field_separator: str = ","
    array_start: str = "{"
    array_separator: str = ","
    array_end: str = "}"
    array_content_detail: bool = True
    default_full_detail: bool = True
    null_text: str = "<null>"
    size_start_text: str = "<size="
    size_end_text: str = ">"
    summary_object_start_text: str = "<"
    summary_object_end_text: str = ">"
    hooks: StyleHooks = DEFAULT_HOOKS

    def __post_init__(self) -> None:
        for knob in _TEXT_KNOBS:
            if getattr(self, knob) is None:
                object.__setattr__(self, knob, "")

    def with_options(self, **changes: Any) -> RenderStyle:
        """Derive a style with some knobs changed.

        Returns:
            New RenderStyle; this style is left untouched.
        """
        changes.setdefault("name", "custom")
        return dataclasses.replace(self, **changes)

    def is_full_detail(self, request: bool | None) -> bool:
        """Resolve a per-call detail request against the style default."""
        return self.default_full_detail if request is None else request

    def class_name(self, cls: type) -> str:
        """Name written before the content, honouring ``use_short_class_name``."""
        return short_class_name(cls) if self.use_short_class_name else full_class_name(cls)


def full_class_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def short_class_name(cls: type) -> str:
    return cls.__qualname__


def identity_text(value: Any) -> str:
    """Identity placeholder: fully qualified type name and identity marker."""
    return f"{full_class_name(type(value))}@{id(value):x}"


DEFAULT_STYLE = RenderStyle(name="default")
"""``module.Type@1f2e3d[a=1,b=<null>]``"""

MULTI_LINE_STYLE = RenderStyle(
    name="multi_line",
    field_separator="\n ",
    field_separator_at_start=True,
    content_end="\n]",
)
"""One field per line, indented by a single space."""

NO_FIELD_NAMES_STYLE = RenderStyle(name="no_field_names", use_field_names=False)
"""``module.Type@1f2e3d[1,<null>]``"""

SHORT_PREFIX_STYLE = RenderStyle(
    name="short_prefix",
    use_short_class_name=True,
    use_identity_hash_code=False,
)
"""``Type[a=1,b=<null>]``"""

SIMPLE_STYLE = RenderStyle(
    name="simple",
    use_class_name=False,
    use_identity_hash_code=False,
    use_field_names=False,
    content_start="",
    content_end="",
)
"""``1,<null>``"""

NO_CLASS_NAME_STYLE = RenderStyle(
    name="no_class_name",
    use_class_name=False,
    use_identity_hash_code=False,
)
"""``[a=1,b=<null>]``"""

JSON_STYLE = RenderStyle(
    name="json",
    use_class_name=False,
    use_identity_hash_code=False,
    content_start="{",
    content_end="}",
    array_start="[",
    array_end="]",
    field_separator=",",
    field_name_value_separator=":",
    null_text="null",
    summary_object_start_text='"<',
    summary_object_end_text='>"',
    size_start_text='"<size=',
    size_end_text='>"',
    hooks=JSON_HOOKS,
)
"""``{"a":1,"b":null}``; every append needs a field name and full detail."""

PRESETS: dict[str, RenderStyle] = {
    style.name: style
    for style in (
        DEFAULT_STYLE,
        MULTI_LINE_STYLE,
        NO_FIELD_NAMES_STYLE,
        SHORT_PREFIX_STYLE,
        SIMPLE_STYLE,
        NO_CLASS_NAME_STYLE,
        JSON_STYLE,
    )
}


def get_style(name: str) -> RenderStyle:
    """Look up a preset by name.

    Args:
        name: One of the keys of ``PRESETS`` (e.g. "default", "json").

    Returns:
        The shared preset instance.

    Raises:
        UsageError: If no preset has that name.
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise UsageError(
            f"Unknown render style {name!r}; expected one of {sorted(PRESETS)}"
        ) from None
