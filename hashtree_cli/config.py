"""
Module 05 - CLI Configuration

Config file discovery for the hashtree CLI.
Files may be YAML or JSON; environment variables (HASHTREE_* prefix)
override file settings.
"""

from __future__ import annotations

from pathlib import Path

from core.config.runtime import RuntimeConfig


DEFAULT_CONFIG_NAMES = (
    "hashtree.yaml",
    "hashtree.yml",
    "hashtree.json",
    ".hashtree.json",
)


def default_config_paths() -> list[Path]:
    """Locations searched, in order, when no --config is given."""
    paths = [Path.cwd() / name for name in DEFAULT_CONFIG_NAMES]
    config_dir = Path.home() / ".config" / "hashtree"
    paths.extend([config_dir / "config.yaml", config_dir / "config.json"])
    return paths


def find_config_file() -> Path | None:
    for path in default_config_paths():
        if path.exists():
            return path
    return None


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional explicit config file; must exist when given

    Returns:
        Merged configuration

    Raises:
        FileNotFoundError: If config_path is given but missing
    """
    if config_path is not None:
        config = RuntimeConfig.from_file(config_path)
    else:
        found = find_config_file()
        config = RuntimeConfig.from_file(found) if found else RuntimeConfig()

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """{
  "tree": {
    "hash_algorithm": "sha256",
    "default_items": [
      "Transaction 1: Alice -> Bob",
      "Transaction 2: Bob -> Charlie",
      "Transaction 3: Charlie -> David",
      "Transaction 4: David -> Alice"
    ]
  },
  "display": {
    "short_digest_chars": 16,
    "max_leaves_shown": 50
  },
  "log_level": "INFO",
  "log_file": null
}
"""
