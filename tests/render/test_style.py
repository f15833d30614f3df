"""Tests for render styles and presets."""

from dataclasses import FrozenInstanceError, dataclass

import pytest

from structural import (
    DEFAULT_STYLE,
    JSON_STYLE,
    SHORT_PREFIX_STYLE,
    RenderEngine,
    RenderStyle,
    UsageError,
    get_style,
    render,
)
from structural.render import PRESETS, JsonStyleHooks, StyleHooks


@dataclass
class Point:
    x: int
    y: int | None


def test_presets_are_registered_by_name():
    assert set(PRESETS) == {
        "default",
        "multi_line",
        "no_field_names",
        "short_prefix",
        "simple",
        "no_class_name",
        "json",
    }
    assert get_style("json") is JSON_STYLE
    assert get_style("default") is DEFAULT_STYLE


def test_unknown_preset_raises():
    with pytest.raises(UsageError, match="Unknown render style"):
        get_style("fancy")


def test_presets_are_immutable():
    with pytest.raises(FrozenInstanceError):
        DEFAULT_STYLE.null_text = "-"  # type: ignore[misc]


def test_with_options_derives_new_style():
    custom = SHORT_PREFIX_STYLE.with_options(null_text="-", field_separator="; ")

    assert custom is not SHORT_PREFIX_STYLE
    assert custom.name == "custom"
    assert SHORT_PREFIX_STYLE.null_text == "<null>"
    assert render(Point(1, None), custom) == "Point[x=1; y=-]"


def test_none_text_knobs_become_empty():
    style = RenderStyle(content_start=None, content_end=None)  # type: ignore[arg-type]

    assert style.content_start == ""
    assert style.content_end == ""


def test_field_separator_at_end():
    style = SHORT_PREFIX_STYLE.with_options(field_separator_at_end=True)

    assert render(Point(1, 2), style) == "Point[x=1,y=2,]"


def test_custom_delimiters():
    style = SHORT_PREFIX_STYLE.with_options(
        content_start="(", content_end=")", field_name_value_separator=": "
    )

    assert render(Point(1, 2), style) == "Point(x: 1,y: 2)"


def test_default_summary_detail():
    style = SHORT_PREFIX_STYLE.with_options(default_full_detail=False)
    engine = RenderEngine(Point(1, 2), style).append("x", 1).append("tags", [1, 2])

    assert engine.build() == "Point[x=<int>,tags=<size=2>]"


def test_is_full_detail():
    assert DEFAULT_STYLE.is_full_detail(None) is True
    assert DEFAULT_STYLE.is_full_detail(False) is False


def test_class_name():
    assert DEFAULT_STYLE.class_name(Point) == f"{__name__}.Point"
    assert SHORT_PREFIX_STYLE.class_name(Point) == "Point"


def test_hooks_are_strategies():
    assert type(DEFAULT_STYLE.hooks) is StyleHooks
    assert isinstance(JSON_STYLE.hooks, JsonStyleHooks)


class TestJsonHooks:
    hooks = JsonStyleHooks()

    def test_quotes_and_escapes(self):
        assert self.hooks.format_value(JSON_STYLE, "a/b") == '"a\\/b"'
        assert self.hooks.format_value(JSON_STYLE, 'q"') == '"q\\""'

    def test_numbers_and_booleans_are_raw(self):
        assert self.hooks.format_value(JSON_STYLE, 3) == "3"
        assert self.hooks.format_value(JSON_STYLE, 2.5) == "2.5"
        assert self.hooks.format_value(JSON_STYLE, False) == "false"

    def test_json_looking_text_is_raw(self):
        class Raw:
            def __str__(self):
                return '{"a":1}'

        assert self.hooks.format_value(JSON_STYLE, Raw()) == '{"a":1}'

    def test_other_objects_are_quoted(self):
        class Named:
            def __str__(self):
                return "named"

        assert self.hooks.format_value(JSON_STYLE, Named()) == '"named"'

    def test_mapping_keys_are_quoted_strings(self):
        assert self.hooks.format_mapping(JSON_STYLE, [(1, "1", "true")]) == '{"1":true}'
