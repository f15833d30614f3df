"""Tests for configuration settings."""

import pytest
from pydantic import ValidationError

from structural.config import StructuralSettings, get_settings


def test_defaults():
    settings = StructuralSettings()

    assert settings.hash_seed == 17
    assert settings.hash_multiplier == 37
    assert settings.default_style == "default"
    assert settings.recursive is True


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("STRUCTURAL_HASH_MULTIPLIER", "31")
    monkeypatch.setenv("STRUCTURAL_RECURSIVE", "false")

    settings = StructuralSettings()

    assert settings.hash_multiplier == 31
    assert settings.recursive is False


def test_explicit_values_win():
    assert StructuralSettings(hash_seed=3).hash_seed == 3


@pytest.mark.parametrize("field", ["hash_seed", "hash_multiplier"])
def test_even_hash_parameters_rejected(field):
    with pytest.raises(ValidationError):
        StructuralSettings(**{field: 16})


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_cache_clear_rereads_environment(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("STRUCTURAL_DEFAULT_STYLE", "json")
    get_settings.cache_clear()

    assert get_settings() is not first
    assert get_settings().default_style == "json"
