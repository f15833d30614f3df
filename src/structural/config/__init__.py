"""Configuration module using Pydantic Settings.

Usage:
    from structural.config import get_settings

    seed = get_settings().hash_seed
"""

from structural.config.settings import StructuralSettings, get_settings

__all__ = [
    "StructuralSettings",
    "get_settings",
]
