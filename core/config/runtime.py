"""
Runtime Configuration

Central configuration for tree construction, display and logging.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.crypto.hashing import (
    DEFAULT_HASH_ALGORITHM,
    HashFunction,
    available_hash_functions,
    get_hash_function,
)

load_dotenv()


ENV_PREFIX = "HASHTREE_"

DEFAULT_ITEMS: tuple[str, ...] = (
    "Transaction 1: Alice -> Bob",
    "Transaction 2: Bob -> Charlie",
    "Transaction 3: Charlie -> David",
    "Transaction 4: David -> Alice",
)


@dataclass
class TreeConfig:
    """Configuration for tree construction."""
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    default_items: list[str] = field(default_factory=lambda: list(DEFAULT_ITEMS))

    def __post_init__(self):
        self.hash_algorithm = self.hash_algorithm.strip().lower()
        if self.hash_algorithm not in available_hash_functions():
            raise ValueError(
                f"Unknown hash algorithm {self.hash_algorithm!r}; "
                f"expected one of {', '.join(available_hash_functions())}"
            )


@dataclass
class DisplayConfig:
    """Configuration for rendered output."""
    short_digest_chars: int = 16
    max_leaves_shown: int = 50


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (a .env file is honoured)
    - YAML or JSON file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def hash_function(self) -> HashFunction:
        """Instantiate the configured hash function."""
        return get_hash_function(self.tree.hash_algorithm)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - HASHTREE_HASH_ALGORITHM: Hash function name
        - HASHTREE_SHORT_DIGEST_CHARS: Hex chars shown for short digests
        - HASHTREE_LOG_LEVEL: Log level
        - HASHTREE_LOG_FILE: Optional log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides.setdefault("tree", {})["hash_algorithm"] = os.getenv(
                f"{ENV_PREFIX}HASH_ALGORITHM"
            )

        if os.getenv(f"{ENV_PREFIX}SHORT_DIGEST_CHARS"):
            overrides.setdefault("display", {})["short_digest_chars"] = int(
                os.getenv(f"{ENV_PREFIX}SHORT_DIGEST_CHARS", "16")
            )

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_json(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load from .yaml/.yml or .json, chosen by extension."""
        path = Path(path)
        if path.suffix.lower() in (".yaml", ".yml"):
            return cls.from_yaml(path)
        return cls.from_json(path)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = data.get("tree", {})
        display_data = data.get("display", {})

        tree = TreeConfig(**tree_data) if tree_data else TreeConfig()
        display = DisplayConfig(**display_data) if display_data else DisplayConfig()

        return cls(
            tree=tree,
            display=display,
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "tree" in overrides:
            merged = {**self.to_dict()["tree"], **overrides["tree"]}
            new_config.tree = TreeConfig(**merged)

        if "display" in overrides:
            for key, value in overrides["display"].items():
                setattr(new_config.display, key, value)

        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]
        if "log_file" in overrides:
            new_config.log_file = overrides["log_file"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "hash_algorithm": self.tree.hash_algorithm,
                "default_items": list(self.tree.default_items),
            },
            "display": {
                "short_digest_chars": self.display.short_digest_chars,
                "max_leaves_shown": self.display.max_leaves_shown,
            },
            "log_level": self.log_level,
            "log_file": self.log_file,
            "extra": self.extra,
        }
