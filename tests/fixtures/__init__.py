"""
Test fixtures package for hashtree tests.

This package provides factory functions for creating test objects.
Organized into layers:
- common.py: Item lists and trees
- proof_fixtures.py: Tampered proof builders for fail-closed tests

Usage:
    from fixtures import make_tree, flip_bit_in_step

    def test_something():
        tree = make_tree(["T1", "T2", "T3"])
        bad = flip_bit_in_step(tree.prove_by_index(0), step=0)
"""

from .common import (
    make_items,
    make_tree,
    make_rolling_tree,
)

from .proof_fixtures import (
    flip_bit,
    flip_bit_in_step,
    flip_bit_in_leaf,
    swap_side,
)

__all__ = [
    # Common
    "make_items",
    "make_tree",
    "make_rolling_tree",
    # Proofs
    "flip_bit",
    "flip_bit_in_step",
    "flip_bit_in_leaf",
    "swap_side",
]
