"""
Pytest configuration and shared fixtures for hashtree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import os
import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_items = _common.make_items
make_tree = _common.make_tree
make_rolling_tree = _common.make_rolling_tree


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def scenario_items():
    """The four-transaction scenario."""
    return ["T1", "T2", "T3", "T4"]


@pytest.fixture
def scenario_tree(scenario_items):
    """SHA-256 tree over T1..T4."""
    return make_tree(scenario_items)


@pytest.fixture
def odd_tree():
    """SHA-256 tree with an odd leaf count at two levels (5 leaves)."""
    return make_tree(make_items(5))


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """Clear HASHTREE_* env vars and run from an empty directory."""
    for key in list(os.environ):
        if key.startswith("HASHTREE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "cli: marks tests that drive the command-line interface"
    )
