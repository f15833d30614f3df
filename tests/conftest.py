"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from dataclasses import dataclass, field

from structural import TraversalContext, get_settings, marked


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are re-read from the environment for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def context():
    """Fresh TraversalContext instance."""
    return TraversalContext()


@dataclass
class FixturePoint:
    x: int
    y: int


@dataclass
class FixtureRecord:
    name: str
    count: int
    tags: list[str] = field(default_factory=list)
    cache: object = marked(transient=True, default=None)


@pytest.fixture
def point_cls():
    return FixturePoint


@pytest.fixture
def record_cls():
    return FixtureRecord
