"""Render engine: build a one-line (or multi-line) text form of an object.

Usage:
    render(order)                                  # every field, default style
    render(order, JSON_STYLE)

    # Builder form, explicit fields
    text = (
        RenderEngine(order, SHORT_PREFIX_STYLE)
        .append("id", order.id)
        .append("lines", order.lines, full_detail=False)
        .build()
    )                                              # Order[id=7,lines=<size=3>]

Values already being rendered further up the stack are written as an
identity placeholder, so self-referencing graphs terminate.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from typing import Any, Self

from structural.config import get_settings
from structural.core.arrays import ArrayKind, array_kind, dispatch, elements
from structural.core.fields import is_composite
from structural.core.guard import TraversalContext, VisitKey, is_guarded
from structural.core.options import RenderOptions
from structural.render.style import RenderStyle, get_style, identity_text, short_class_name

logger = logging.getLogger(__name__)


class RenderEngine:
    """Fluent builder writing one object's fields with a render style.

    The object's prefix (type name, identity marker, content start) is
    written on construction; ``build`` writes the suffix.

    Args:
        obj: Object being rendered. None renders as the style's null text.
        style: Render style. Defaults to the preset named in settings.
        options: Field selection and rendering knobs.
        context: Traversal state shared with an enclosing render.
    """

    def __init__(
        self,
        obj: Any,
        style: RenderStyle | None = None,
        options: RenderOptions | None = None,
        context: TraversalContext | None = None,
    ) -> None:
        settings = get_settings()
        self._object = obj
        self._style = style or get_style(settings.default_style)
        self._options = options or RenderOptions(recursive=settings.recursive)
        self._context = context or TraversalContext()
        self._parts: list[str] = []
        self._key: VisitKey | None = None

        if is_guarded(obj):
            key = VisitKey(obj)
            if self._context.render_guard.enter(key):
                self._key = key
        self._append_start()

    @property
    def style(self) -> RenderStyle:
        return self._style

    @property
    def object(self) -> Any:
        return self._object

    # -------------------------------------------------------------------------
    # Builder API
    # -------------------------------------------------------------------------

    def append(self, field_name: str | None, value: Any, full_detail: bool | None = None) -> Self:
        """Write one field.

        Args:
            field_name: Field name, or None for an anonymous value.
            value: Field value.
            full_detail: Full text (True) or a summary (False). None uses the
                style default.

        Raises:
            UsageError: If the style rejects the call (the JSON style requires
                a field name and full detail).
        """
        detail = self._style.is_full_detail(full_detail)
        self._style.hooks.check_append(field_name, detail)
        self._append_field_start(field_name)
        self._parts.append(self.value_text(value, detail))
        self._append_field_separator()
        return self

    def append_super(self, super_text: str | None) -> Self:
        """Splice the content of an ancestor's rendering into this one."""
        return self.append_to_string(super_text)

    def append_to_string(self, text: str | None) -> Self:
        """Splice the content of another rendering made with the same style.

        Only the text between the first content start and the last content
        end is kept; text without both delimiters is ignored.
        """
        if text is None:
            return self
        style = self._style
        start = text.find(style.content_start) + len(style.content_start)
        end = text.rfind(style.content_end)
        if start != end and start >= 0 and end >= 0:
            if style.field_separator_at_start:
                self._remove_last_field_separator()
            self._parts.append(text[start:end])
            self._append_field_separator()
        return self

    def append_as_identity(self, value: Any) -> Self:
        """Write ``value`` as its identity placeholder."""
        self._parts.append(identity_text(value))
        return self

    def reflection_append_fields(self) -> Self:
        """Write every participating field of the object.

        Arrays are written as a single array body. Fields marked as summary
        (or listed in ``RenderOptions.summary_fields``) are written in brief.
        """
        obj = self._object
        if obj is None:
            return self
        kind = array_kind(obj)
        if kind is not None:
            self._parts.append(self._array_text(obj, kind))
            return self

        options = self._options
        for descriptor in options.fields_of(type(obj), obj, "render"):
            value = descriptor.get(obj)
            if value is None and options.exclude_none:
                continue
            summary = descriptor.summary or descriptor.name in options.summary_fields
            self.append(descriptor.name, value, full_detail=not summary)
        return self

    def build(self) -> str:
        """Finish the rendering and release the object's visit marker.

        Returns:
            The complete text. Calling ``build`` again yields the same text.
        """
        self.release()
        if self._object is None:
            return "".join(self._parts) + self._style.null_text
        text = "".join(self._parts)
        separator = self._style.field_separator
        if not self._style.field_separator_at_end and separator and text.endswith(separator):
            text = text[: -len(separator)]
        return text + self._style.content_end

    def release(self) -> None:
        """Forget the object's visit marker; safe to call more than once."""
        if self._key is not None:
            self._context.render_guard.leave(self._key)
            self._key = None

    def __str__(self) -> str:
        return self.build()

    # -------------------------------------------------------------------------
    # Value text
    # -------------------------------------------------------------------------

    def value_text(self, value: Any, full_detail: bool = True) -> str:
        """Text of one value, in full or as a summary."""
        style = self._style
        if value is None:
            return style.null_text

        if not is_guarded(value):
            return self._detail_text(value) if full_detail else self._summary_text(value)

        guard = self._context.render_guard
        with guard.visiting(VisitKey(value)) as first_visit:
            if not first_visit:
                return identity_text(value)
            kind = array_kind(value)
            if kind is not None:
                if full_detail:
                    return self._array_text(value, kind)
                return self._size_text(len(elements(value)))
            if isinstance(value, Mapping):
                return self._mapping_text(value) if full_detail else self._size_text(len(value))
            if isinstance(value, Collection) and not isinstance(value, str):
                return self._collection_text(value) if full_detail else self._size_text(len(value))
            return self._detail_text(value) if full_detail else self._summary_text(value)

    def _detail_text(self, value: Any) -> str:
        if self._options.recursive and is_composite(value):
            return self._nested_text(value)
        return self._style.hooks.format_value(self._style, value)

    def _nested_text(self, value: Any) -> str:
        # The caller already holds the visit marker for ``value``.
        nested = RenderEngine(value, self._style, self._options, self._context)
        try:
            nested.reflection_append_fields()
            return nested.build()
        finally:
            nested.release()

    def _summary_text(self, value: Any) -> str:
        style = self._style
        name = short_class_name(type(value))
        return style.summary_object_start_text + name + style.summary_object_end_text

    def _size_text(self, size: int) -> str:
        return f"{self._style.size_start_text}{size}{self._style.size_end_text}"

    def _array_text(self, value: Any, kind: ArrayKind) -> str:
        style = self._style
        texts = dispatch(value).texts(value)
        if texts is None:
            detail = style.array_content_detail
            texts = [self.value_text(item, detail) for item in elements(value)]
        elif kind is ArrayKind.CHAR:
            texts = [style.hooks.format_char(style, char) for char in texts]
        return style.array_start + style.array_separator.join(texts) + style.array_end

    def _collection_text(self, value: Collection[Any]) -> str:
        detail = self._style.array_content_detail
        items = [self.value_text(item, detail) for item in value]
        return self._style.hooks.format_collection(self._style, items)

    def _mapping_text(self, value: Mapping[Any, Any]) -> str:
        detail = self._style.array_content_detail
        entries = [
            (key, self.value_text(key, detail), self.value_text(item, detail))
            for key, item in value.items()
        ]
        return self._style.hooks.format_mapping(self._style, entries)

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    def _append_start(self) -> None:
        obj, style = self._object, self._style
        if obj is None:
            return
        if style.use_class_name:
            self._parts.append(style.class_name(type(obj)))
        if style.use_identity_hash_code:
            self._parts.append(f"@{id(obj):x}")
        self._parts.append(style.content_start)
        if style.field_separator_at_start:
            self._append_field_separator()

    def _append_field_start(self, field_name: str | None) -> None:
        style = self._style
        if style.use_field_names and field_name is not None:
            self._parts.append(style.hooks.format_field_name(field_name))
            self._parts.append(style.field_name_value_separator)

    def _append_field_separator(self) -> None:
        self._parts.append(self._style.field_separator)

    def _remove_last_field_separator(self) -> None:
        separator = self._style.field_separator
        text = "".join(self._parts)
        if separator and text.endswith(separator):
            text = text[: -len(separator)]
        self._parts = [text]


def render(
    value: Any,
    style: RenderStyle | None = None,
    options: RenderOptions | None = None,
) -> str:
    """Render every participating field of a value.

    Args:
        value: Value to render. None renders as the style's null text.
        style: Render style. Defaults to the preset named in settings.
        options: Field selection and rendering knobs.

    Returns:
        The rendered text.

    Raises:
        AccessError: If a participating field cannot be read.
    """
    logger.debug("Rendering %s", type(value).__qualname__)
    engine = RenderEngine(value, style, options)
    try:
        engine.reflection_append_fields()
        return engine.build()
    finally:
        engine.release()
