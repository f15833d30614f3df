"""Configuration settings using Pydantic Settings.

Provides process-wide defaults for the structural algorithms with environment
variable support.

Usage:
    from structural.config import StructuralSettings, get_settings

    # Load from environment variables (STRUCTURAL_*)
    settings = get_settings()

    # Or override with explicit values
    settings = StructuralSettings(hash_seed=31, default_style="short_prefix")
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StructuralSettings(BaseSettings):  # type: ignore[misc]
    """Defaults applied when a call omits the corresponding argument.

    Attributes:
        hash_seed: Initial accumulator value for structural hashing (odd).
        hash_multiplier: Accumulator multiplier for structural hashing (odd).
        default_style: Name of the render style preset used by default.
        recursive: Traverse nested composite values by default.

    Environment Variables:
        STRUCTURAL_HASH_SEED
        STRUCTURAL_HASH_MULTIPLIER
        STRUCTURAL_DEFAULT_STYLE
        STRUCTURAL_RECURSIVE
    """

    model_config = SettingsConfigDict(
        env_prefix="STRUCTURAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    hash_seed: int = 17
    hash_multiplier: int = 37
    default_style: str = "default"
    recursive: bool = True

    @field_validator("hash_seed", "hash_multiplier")
    @classmethod
    def _require_odd(cls, value: int) -> int:
        if value % 2 == 0:
            raise ValueError("hash seed and multiplier must be odd")
        return value


@lru_cache(maxsize=1)
def get_settings() -> StructuralSettings:
    """Access the process-wide settings, loaded once from the environment.

    Returns:
        The cached StructuralSettings instance.
    """
    return StructuralSettings()
