"""Tests for identity keys and the cycle guard."""

import pytest

from structural.core.guard import CycleGuard, TraversalContext, VisitKey, is_guarded, pair_key


def test_visit_key_uses_identity_not_equality():
    """Equal but distinct values must never share a key."""
    a, b = [1, 2], [1, 2]

    assert VisitKey(a) == VisitKey(a)
    assert VisitKey(a) != VisitKey(b)
    assert hash(VisitKey(a)) == id(a)
    assert VisitKey(a).ident == id(a)


def test_pair_key_is_ordered():
    a, b = object(), object()

    assert pair_key(a, b) == pair_key(a, b)
    assert pair_key(a, b) != pair_key(b, a)


def test_enter_refuses_reentry():
    guard = CycleGuard()
    key = VisitKey(object())

    assert guard.enter(key) is True
    assert guard.enter(key) is False
    assert len(guard) == 1

    guard.leave(key)
    assert guard.is_empty()


def test_leave_unknown_key_is_noop():
    guard = CycleGuard()
    guard.leave(VisitKey(object()))

    assert guard.is_empty()


def test_visiting_releases_on_error():
    """Markers are removed on every exit path."""
    guard = CycleGuard()
    key = VisitKey(object())

    with pytest.raises(RuntimeError):
        with guard.visiting(key) as first:
            assert first is True
            assert guard.is_active(key)
            raise RuntimeError("boom")

    assert guard.is_empty()


def test_nested_visiting_keeps_outer_marker():
    guard = CycleGuard()
    key = VisitKey(object())

    with guard.visiting(key) as outer:
        with guard.visiting(key) as inner:
            assert outer is True
            assert inner is False
        assert guard.is_active(key)

    assert not guard.is_active(key)


@pytest.mark.parametrize("value", [None, 1, 2.5, True, "text", b"bytes"])
def test_immutable_leaves_are_never_guarded(value):
    assert not is_guarded(value)


@pytest.mark.parametrize("value", [[1], {}, object(), bytearray(b"x")])
def test_containers_are_guarded(value):
    assert is_guarded(value)


def test_contexts_are_independent():
    first, second = TraversalContext(), TraversalContext()
    first.guard.enter(VisitKey(first))

    assert not first.is_clean()
    assert second.is_clean()
