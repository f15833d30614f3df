"""Tests for structural hashing."""

import math
from dataclasses import dataclass

import pytest

from structural import (
    HashEngine,
    HashOptions,
    StructuralError,
    TypeMismatchError,
    UsageError,
    marked,
    structural_equals,
    structural_hash,
)


@dataclass
class Point:
    x: int
    y: int


@dataclass
class Box:
    value: object


@dataclass
class Empty:
    pass


@dataclass
class Outer:
    inner: object


@dataclass
class Cached:
    key: str
    cache: dict = marked(transient=True, default=None)


class Node:
    def __init__(self, value, next=None):
        self.value = value
        self.next = next


def test_known_values_with_default_seed():
    """seed=17, multiplier=37: total = total * 37 + contribution."""
    assert structural_hash(Empty()) == 17
    assert structural_hash(Point(1, 2)) == (17 * 37 + 1) * 37 + 2


def test_scalar_contributions():
    base = 17 * 37

    assert structural_hash(Box(None)) == base
    assert structural_hash(Box(True)) == base
    assert structural_hash(Box(False)) == base + 1
    assert structural_hash(Box("abc")) == base + 96354
    assert structural_hash(Box(1.0)) == base + 1072693248
    assert structural_hash(Box(2**32)) == base + 1


def test_accumulator_wraps_to_int32():
    assert structural_hash(Box(2**31 - 1)) == -2147483020


def test_custom_seed_and_multiplier():
    assert structural_hash(Point(1, 2), seed=3, multiplier=5) == (3 * 5 + 1) * 5 + 2


@pytest.mark.parametrize(("seed", "multiplier"), [(2, 37), (17, 4), (0, 1)])
def test_even_seed_or_multiplier_rejected(seed, multiplier):
    with pytest.raises(UsageError):
        HashEngine(seed, multiplier)

    with pytest.raises(ValueError):
        structural_hash(Point(1, 2), seed=seed, multiplier=multiplier)


def test_arrays_contribute_per_element():
    assert structural_hash(Box([1, 2])) == structural_hash(Point(1, 2))
    assert structural_hash(Box(b"\x01\x02")) == structural_hash(Point(1, 2))


def test_nested_composites_hash_recursively():
    assert structural_hash(Outer(Point(1, 2))) == 17 * 37 + structural_hash(Point(1, 2))


def test_transient_fields_are_ignored():
    assert structural_hash(Cached("k", {"a": 1})) == structural_hash(Cached("k"))
    assert structural_hash(Cached("k", {"a": 1}), options=HashOptions(include_transient=True)) != (
        structural_hash(Cached("k"), options=HashOptions(include_transient=True))
    )


def test_mapping_hash_ignores_insertion_order():
    assert structural_hash(Box({"a": 1, "b": 2})) == structural_hash(Box({"b": 2, "a": 1}))


def test_set_hash_is_consistent_with_set_equality():
    """{1} == {1.0}, so their hashes must collide."""
    assert structural_equals(Box({1}), Box({1.0}))
    assert structural_hash(Box({1})) == structural_hash(Box({1.0}))


def test_equal_values_hash_alike():
    a = Outer([Point(1, 2), {"k": Node(math.nan)}])
    b = Outer([Point(1, 2), {"k": Node(math.nan)}])

    assert structural_equals(a, b)
    assert structural_hash(a) == structural_hash(b)


def test_self_reference_terminates():
    node = Node(1)
    node.next = node

    assert structural_hash(node) == structural_hash(node)


def test_equal_values_through_a_cycle_hash_alike():
    """A node pointing at itself equals a fresh node pointing at it."""
    a = Node("n")
    a.next = a
    b = Node("n", a)

    assert structural_equals(a, b)
    assert structural_hash(a) == structural_hash(b)


def test_cyclic_hash_does_not_depend_on_identity():
    def loop():
        node = Node(1)
        node.next = node
        return node

    assert structural_hash(loop()) == structural_hash(loop())


def test_self_containing_list_terminates():
    a = [1]
    a.append(a)

    assert structural_hash(a) == structural_hash([1, a])
    assert structural_hash(Box(a)) == structural_hash(Box([1, a]))


def test_self_containing_dict_terminates():
    d = {"k": 1}
    d["me"] = d

    assert structural_hash(Box(d)) == structural_hash(Box({"k": 1, "me": d}))


def test_max_depth_bounds_nested_contributions():
    shallow = HashOptions(max_depth=0)

    assert structural_hash(Outer(Point(1, 2)), options=shallow) == 17 * 37
    assert structural_hash(Box([[1], [2, 3]]), options=shallow) == 17 * 37 + 2
    assert structural_hash(Box({"a": 1}), options=shallow) == 17 * 37 + 1
    assert structural_hash(Box(b"\x01"), options=shallow) == structural_hash(Box(b"\x01"))


def test_attribute_assignment_order_does_not_matter():
    first = Node(1, None)
    second = Node.__new__(Node)
    second.next = None
    second.value = 1

    assert structural_hash(first) == structural_hash(second)


def test_unhashable_leaf_raises():
    class Unhashable:
        __hash__ = None

        def __eq__(self, other):
            return self is other

    with pytest.raises(TypeMismatchError):
        structural_hash(Box(Unhashable()))


def test_nonrecursive_uses_builtin_hash():
    @dataclass(frozen=True)
    class Frozen:
        v: int

    value = Outer(Frozen(1))
    options = HashOptions(recursive=False)

    assert structural_hash(value, options=options) != structural_hash(value)
    with pytest.raises(StructuralError):
        structural_hash(Outer(Point(1, 2)), options=options)


def test_root_leaf_is_appended_whole():
    assert structural_hash(5) == 17 * 37 + 5
    assert structural_hash(None) == 17 * 37


class TestHashEngine:
    def test_builder(self):
        engine = HashEngine().append(1).append(None).append([2, 3])

        assert engine.result() == (((17 * 37 + 1) * 37) * 37 + 2) * 37 + 3
        assert int(engine) == engine.result()

    def test_append_super(self):
        assert HashEngine().append_super(100).result() == 17 * 37 + 100

    def test_reflection_append_matches_entry_point(self):
        assert HashEngine().reflection_append(Point(4, 5)).result() == structural_hash(Point(4, 5))


def test_settings_supply_defaults(monkeypatch):
    monkeypatch.setenv("STRUCTURAL_HASH_SEED", "3")

    assert structural_hash(Point(1, 2)) == (3 * 37 + 1) * 37 + 2
