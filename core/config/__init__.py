"""
Runtime Configuration Module

Provides configuration loading and management for tree construction.
"""

from .runtime import (
    DEFAULT_ITEMS,
    ENV_PREFIX,
    DisplayConfig,
    RuntimeConfig,
    TreeConfig,
)

__all__ = [
    "DEFAULT_ITEMS",
    "ENV_PREFIX",
    "DisplayConfig",
    "RuntimeConfig",
    "TreeConfig",
]
