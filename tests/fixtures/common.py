"""
Common test fixtures shared by all modules.

Provides factory functions for item lists and trees.
"""

from typing import Optional, Sequence

from core.crypto.hashing import HashFunction, RollingHash
from core.merkle import MerkleTree


def make_items(count: int = 4, prefix: str = "leaf") -> list[str]:
    """Create `count` distinct items: leaf0, leaf1, ..."""
    return [f"{prefix}{i}" for i in range(count)]


def make_tree(
    items: Optional[Sequence[str]] = None,
    hash_function: Optional[HashFunction] = None,
) -> MerkleTree:
    """Create a non-empty tree (default: T1..T4, SHA-256)."""
    if items is None:
        items = ["T1", "T2", "T3", "T4"]
    return MerkleTree.from_items(items, hash_function)


def make_rolling_tree(items: Optional[Sequence[str]] = None) -> MerkleTree:
    """Create a tree with the 32-bit rolling reference hash."""
    return make_tree(items, RollingHash())
