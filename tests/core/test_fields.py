"""Tests for field discovery and selection."""

from dataclasses import FrozenInstanceError, dataclass
from enum import Enum
from typing import Annotated, ClassVar

import pytest
from pydantic import BaseModel, Field

from structural.core.errors import AccessError, UsageError
from structural.core.fields import (
    FieldDescriptor,
    Marker,
    declared_fields,
    is_composite,
    marked,
    select_fields,
)


@dataclass
class Base:
    a: int
    b: int


@dataclass
class Child(Base):
    c: int = 0


@dataclass
class Account:
    owner: str
    session: object = marked(transient=True, default=None)
    audit: str = marked(exclude={"equals", "hash"}, default="")
    history: list[int] = marked(summary=True, default_factory=list)
    token: Annotated[str, Marker(transient=True)] = ""
    KIND: ClassVar[str] = "account"


class Profile(BaseModel):
    name: str
    token: Annotated[str, Marker(transient=True)] = ""
    internal: str = Field(default="", exclude=True)


class Plain:
    kind = "plain"

    def __init__(self) -> None:
        self.x = 1
        self.y = 2


class Slotted:
    __slots__ = ("a", "b")

    def __init__(self) -> None:
        self.a = 1


class Color(Enum):
    RED = 1


def names(descriptors):
    return [d.name for d in descriptors]


def test_runtime_type_fields_come_before_ancestors():
    """Fields of the runtime type are listed first, then each ancestor."""
    assert names(select_fields(Child)) == ["c", "a", "b"]


def test_stop_at_is_inclusive():
    assert names(select_fields(Child, stop_at=Child)) == ["c"]
    assert names(select_fields(Child, stop_at=Base)) == ["c", "a", "b"]


def test_stop_at_outside_hierarchy_raises():
    with pytest.raises(UsageError):
        select_fields(Child, stop_at=int)


def test_declaring_type_is_recorded():
    declaring = {d.name: d.declaring_type for d in select_fields(Child)}

    assert declaring == {"c": Child, "a": Base, "b": Base}


def test_transient_fields_skipped_by_default():
    assert names(select_fields(Account)) == ["owner", "audit", "history"]
    assert "session" in names(select_fields(Account, include_transient=True))
    assert "token" in names(select_fields(Account, include_transient=True))


def test_static_fields_opt_in():
    assert "KIND" not in names(select_fields(Account))

    statics = [d for d in select_fields(Account, include_static=True) if d.is_static]

    assert names(statics) == ["KIND"]
    assert statics[0].get(Account("ada")) == "account"


def test_marker_excludes_per_algorithm():
    """An exclusion marker wins over every caller option."""
    assert "audit" not in names(select_fields(Account, algorithm="equals"))
    assert "audit" not in names(select_fields(Account, algorithm="hash"))
    assert "audit" in names(select_fields(Account, algorithm="render"))
    assert "audit" not in names(
        select_fields(Account, algorithm="equals", include_transient=True, include_static=True)
    )


def test_exclude_by_name():
    assert names(select_fields(Child, exclude=("a",))) == ["c", "b"]


def test_summary_marker_is_exposed():
    history = next(d for d in select_fields(Account) if d.name == "history")

    assert history.summary is True
    assert history.excluded_from == frozenset()


def test_unknown_algorithm_in_marker_rejected():
    with pytest.raises(UsageError):
        Marker(exclude={"equality"})


def test_marker_accepts_single_name():
    assert Marker(exclude="render").exclude == frozenset({"render"})


def test_pydantic_fields_and_markers():
    """Pydantic exclude=True and Annotated markers both mean transient."""
    assert names(select_fields(Profile)) == ["name"]
    assert names(select_fields(Profile, include_transient=True)) == ["name", "token", "internal"]


def test_pydantic_model_attributes_are_not_statics():
    assert names(select_fields(Profile, include_static=True)) == ["name"]


def test_plain_class_fields_come_from_instance():
    obj = Plain()

    assert names(select_fields(Plain, instance=obj)) == ["x", "y"]
    assert names(select_fields(Plain, instance=obj, include_static=True)) == ["x", "y", "kind"]


def test_plain_class_fields_are_name_ordered_except_for_render():
    obj = Plain.__new__(Plain)
    obj.y = 2
    obj.x = 1

    assert names(select_fields(Plain, instance=obj, algorithm="equals")) == ["x", "y"]
    assert names(select_fields(Plain, instance=obj, algorithm="hash")) == ["x", "y"]
    assert names(select_fields(Plain, instance=obj, algorithm="render")) == ["y", "x"]


def test_slots_are_fields():
    assert names(select_fields(Slotted)) == ["a", "b"]


def test_unreadable_field_raises_access_error():
    """A missing slot value aborts instead of being skipped."""
    b = next(d for d in select_fields(Slotted) if d.name == "b")

    with pytest.raises(AccessError, match="Slotted.b"):
        b.get(Slotted())


def test_selection_is_cached():
    assert select_fields(Child) is select_fields(Child)
    assert declared_fields(Base) is declared_fields(Base)


def test_object_contributes_nothing():
    assert declared_fields(object) == ()


def test_descriptor_set_writes_frozen_dataclass():
    @dataclass(frozen=True)
    class Frozen:
        value: int

    obj = Frozen(1)
    (descriptor,) = select_fields(Frozen)
    descriptor.set(obj, 5)

    assert obj.value == 5


def test_descriptor_is_immutable():
    descriptor = FieldDescriptor(declaring_type=Base, name="a")

    with pytest.raises(FrozenInstanceError):
        descriptor.name = "b"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (Base(1, 2), True),
        (Profile(name="n"), True),
        (Plain(), True),
        (Slotted(), True),
        (1, False),
        (1.5, False),
        ("text", False),
        (b"bytes", False),
        ([1, 2], False),
        ({"a": 1}, False),
        ({1, 2}, False),
        (Color.RED, False),
        (None, False),
        (Base, False),
    ],
)
def test_is_composite(value, expected):
    assert is_composite(value) is expected


def test_custom_eq_makes_a_leaf():
    class Money:
        def __init__(self, cents):
            self.cents = cents

        def __eq__(self, other):
            return isinstance(other, Money) and other.cents == self.cents

        __hash__ = object.__hash__

    assert not is_composite(Money(1))
