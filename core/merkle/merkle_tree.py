"""
Module 02 - Merkle Tree Implementation
Deterministic Merkle tree construction, mutation and queries.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Node: one digest at a (level, position) in the level arena
- build_levels: the single construction authority for tree shape
- MerkleTree: owns items + derived levels, exposes queries, mutation
  and proof operations

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = H(item bytes); str items are encoded UTF-8
2. Parent hashing: parent = H(left + right), byte concatenation
3. Padding rule: the last node of an odd level is paired with itself
4. Empty tree: no levels, no root (root_digest() returns None)
5. Single leaf: root = leaf digest, depth 1

Determinism Notes:
- Leaf order is the caller's item order; nothing is sorted
- levels is always re-derived from items in full; it is never edited
  independently of items
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from core.crypto.hashing import HashFunction, Sha256Hash, to_hex
from core.schemas.errors import (
    IndexOutOfRangeException,
    InvalidInputException,
    ItemNotFoundException,
)
from core.schemas.proof import InclusionProof
from core.schemas.summary import LeafInfo, NodeInfo, TreeSummary

from .merkle_proofs import (
    generate_proof,
    verify_item_against_proof,
    verify_proof,
)


logger = logging.getLogger(__name__)

Item = Union[str, bytes]


@dataclass(frozen=True)
class Node:
    """
    A node in the level arena.

    Children of an internal node at (level, position) live at positions
    2 * position and 2 * position + 1 of level - 1 (the right child is the
    left child when that level has odd length). There are no stored parent
    or child links.
    """
    digest: bytes
    level: int
    position: int
    item: Item | None = None

    @property
    def is_leaf(self) -> bool:
        return self.level == 0

    @property
    def index(self) -> int:
        """Leaf index (same as position)."""
        return self.position


Level = tuple[Node, ...]


def encode_item(item: Item) -> bytes:
    """
    Convert an item to the bytes that are hashed.

    Raises:
        InvalidInputException: If the item is not str or bytes
    """
    if isinstance(item, str):
        return item.encode("utf-8")
    if isinstance(item, (bytes, bytearray)):
        return bytes(item)
    raise InvalidInputException(
        f"Items must be str or bytes, got {type(item).__name__}"
    )


def item_text(item: Item) -> str:
    """Display form of an item."""
    if isinstance(item, str):
        return item
    return bytes(item).decode("utf-8", errors="replace")


def is_blank(item: Item) -> bool:
    """
    True for empty or whitespace-only items.

    str items use Unicode whitespace (U+3000, U+00A0 count as blank);
    bytes items only ASCII whitespace.
    """
    if isinstance(item, str):
        return not item.strip()
    return not encode_item(item).strip()


def validate_item(item: Item, position: int | None = None) -> None:
    """
    Reject non-str/bytes and blank items.

    Raises:
        InvalidInputException: With the offending position in details
    """
    if is_blank(item):
        where = f" at position {position}" if position is not None else ""
        raise InvalidInputException(
            f"Item{where} must not be empty or blank",
            position=position,
        )


def validate_items(items: Sequence[Item]) -> None:
    """
    Validate a complete replacement item list.

    Raises:
        InvalidInputException: If the list is empty or any item is blank
    """
    if len(items) == 0:
        raise InvalidInputException("Item list must not be empty")
    for position, item in enumerate(items):
        validate_item(item, position)


def merkle_parent(left: bytes, right: bytes, hash_function: HashFunction) -> bytes:
    """Parent digest: H(left + right)."""
    return hash_function.digest(left + right)


def build_levels(items: Sequence[Item], hash_function: HashFunction) -> tuple[Level, ...]:
    """
    Derive every level of the tree from an item list.

    Algorithm:
    1. If empty: no levels
    2. Level 0: H(item) for each item, in order
    3. Pair adjacent nodes (last with itself when odd) until one remains

    Example: [a, b, c] -> [H(a), H(b), H(c)]
                       -> [H(ab), H(cc)]
                       -> [H(ab + cc)]

    Args:
        items: Ordered items
        hash_function: Digest function

    Returns:
        Tuple of levels, leaves first, root level last
    """
    if len(items) == 0:
        return ()

    current: Level = tuple(
        Node(digest=hash_function.digest(encode_item(item)), level=0, position=i, item=item)
        for i, item in enumerate(items)
    )
    levels: list[Level] = [current]

    while len(current) > 1:
        level_number = len(levels)
        next_level: list[Node] = []
        for i in range(0, len(current), 2):
            left = current[i]
            right = current[i + 1] if i + 1 < len(current) else left
            next_level.append(
                Node(
                    digest=merkle_parent(left.digest, right.digest, hash_function),
                    level=level_number,
                    position=i // 2,
                )
            )
        current = tuple(next_level)
        levels.append(current)

    return tuple(levels)


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of levels (leaves through root) for a tree of `num_leaves`.

    0 for an empty tree, 1 for a single leaf.
    """
    if num_leaves <= 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


class MerkleTree:
    """
    Binary Merkle tree over an ordered item list.

    The tree owns its items and the levels derived from them. Every
    mutation re-derives all levels and swaps {items, levels} in a single
    assignment, so a failed mutation leaves the previous state untouched.

    Not thread-safe; wrap in core.service.TreeSession when shared.

    Example:
        >>> tree = MerkleTree.from_items(["T1", "T2", "T3", "T4"])
        >>> tree.depth()
        3
        >>> tree.verify(tree.prove_by_index(1))
        True
    """

    def __init__(
        self,
        items: Iterable[Item] = (),
        hash_function: HashFunction | None = None,
    ) -> None:
        self._hash = hash_function or Sha256Hash()
        initial = tuple(items)
        for position, item in enumerate(initial):
            validate_item(item, position)
        self._items: tuple[Item, ...] = initial
        self._levels: tuple[Level, ...] = build_levels(initial, self._hash)

    @classmethod
    def from_items(
        cls,
        items: Iterable[Item],
        hash_function: HashFunction | None = None,
    ) -> "MerkleTree":
        """
        Build a tree that must contain at least one item.

        Raises:
            InvalidInputException: If items is empty or contains a blank item
        """
        materialized = tuple(items)
        validate_items(materialized)
        return cls(materialized, hash_function)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def hash_function(self) -> HashFunction:
        return self._hash

    @property
    def items(self) -> tuple[Item, ...]:
        return self._items

    @property
    def levels(self) -> tuple[Level, ...]:
        return self._levels

    def _swap(self, items: tuple[Item, ...]) -> None:
        levels = build_levels(items, self._hash)
        self._items, self._levels = items, levels
        root = self.root_digest()
        logger.info(
            f"Tree rebuilt: {len(items)} leaves, depth {len(levels)}, "
            f"root {to_hex(root)[:18] if root else None}"
        )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, item: Item) -> None:
        """
        Append one item and rebuild.

        Raises:
            InvalidInputException: If the item is empty or blank
        """
        validate_item(item)
        self._swap(self._items + (item,))

    def rebuild(self, new_items: Iterable[Item]) -> None:
        """
        Replace all items and rebuild.

        Raises:
            InvalidInputException: If new_items is empty or has a blank item
        """
        materialized = tuple(new_items)
        validate_items(materialized)
        self._swap(materialized)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def root_digest(self) -> bytes | None:
        """Root digest, or None for an empty tree."""
        if not self._levels:
            return None
        return self._levels[-1][0].digest

    def leaf_count(self) -> int:
        return len(self._items)

    def depth(self) -> int:
        """Number of levels including leaves and root; 0 when empty."""
        return len(self._levels)

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= self.leaf_count():
            raise IndexOutOfRangeException(index, self.leaf_count())

    def leaf_at(self, index: int) -> Node:
        """
        Leaf node at `index`.

        Raises:
            IndexOutOfRangeException: If index is outside [0, leaf_count)
        """
        self._check_index(index)
        return self._levels[0][index]

    def node_at(self, level: int, position: int) -> Node:
        """Node at (level, position); raises IndexError when absent."""
        if level < 0 or level >= len(self._levels):
            raise IndexError(f"Level {level} out of range for depth {self.depth()}")
        nodes = self._levels[level]
        if position < 0 or position >= len(nodes):
            raise IndexError(
                f"Position {position} out of range for level {level} "
                f"with {len(nodes)} nodes"
            )
        return nodes[position]

    def children_of(self, level: int, position: int) -> tuple[Node, Node]:
        """
        The (left, right) children of an internal node.

        right is left when the child level has odd length and left is its
        last node.
        """
        if level <= 0:
            raise IndexError("Leaves have no children")
        self.node_at(level, position)
        below = self._levels[level - 1]
        left = below[2 * position]
        right = below[2 * position + 1] if 2 * position + 1 < len(below) else left
        return left, right

    def path_to_root(self, index: int) -> list[int]:
        """
        Positions of a leaf and each of its ancestors, one per level.

        Raises:
            IndexOutOfRangeException: If index is outside [0, leaf_count)
        """
        self._check_index(index)
        positions = []
        current = index
        for _ in self._levels:
            positions.append(current)
            current //= 2
        return positions

    def index_of_item(self, item: Item) -> int | None:
        """First index holding `item`, or None."""
        if not isinstance(item, (str, bytes, bytearray)):
            return None
        target = encode_item(item)
        for index, existing in enumerate(self._items):
            if encode_item(existing) == target:
                return index
        return None

    def contains_item(self, item: Item) -> bool:
        return self.index_of_item(item) is not None

    # ------------------------------------------------------------------
    # Proofs
    # ------------------------------------------------------------------

    def prove_by_index(self, leaf_index: int) -> InclusionProof:
        """
        Inclusion proof for the leaf at `leaf_index`.

        Raises:
            IndexOutOfRangeException: If leaf_index is outside [0, leaf_count)
        """
        self._check_index(leaf_index)
        return generate_proof(self._levels, leaf_index, self._hash.name)

    def prove_by_item(self, item: Item) -> InclusionProof:
        """
        Inclusion proof for the first occurrence of `item`.

        Raises:
            ItemNotFoundException: If the item is not in the tree
        """
        index = self.index_of_item(item)
        if index is None:
            raise ItemNotFoundException(item)
        return self.prove_by_index(index)

    def verify(self, proof: InclusionProof | None) -> bool:
        """Verify a proof with this tree's hash function (never raises)."""
        return verify_proof(proof, self._hash)

    def verify_item(self, item: Item, proof: InclusionProof | None) -> bool:
        """Verify a proof and bind it to `item` (never raises)."""
        return verify_item_against_proof(item, proof, self._hash)

    def verify_item_against_current_root(self, item: Item, proof: InclusionProof | None) -> bool:
        """
        Like verify_item, but the proof must also target this tree's
        current root. Proofs issued before a mutation fail this check.
        """
        root = self.root_digest()
        if root is None or not isinstance(proof, InclusionProof):
            return False
        if proof.root_digest != root:
            return False
        return self.verify_item(item, proof)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def summary(self) -> TreeSummary:
        """Full snapshot for renderers and transport."""
        root = self.root_digest()
        return TreeSummary(
            root_digest=to_hex(root) if root is not None else None,
            leaf_count=self.leaf_count(),
            depth=self.depth(),
            algorithm=self._hash.name,
            leaves=[
                LeafInfo(index=node.position, item=item_text(node.item), digest=to_hex(node.digest))
                for node in (self._levels[0] if self._levels else ())
            ],
            levels=[
                [
                    NodeInfo(
                        digest=to_hex(node.digest),
                        is_leaf=node.is_leaf,
                        item=item_text(node.item) if node.is_leaf else None,
                        position=node.position,
                    )
                    for node in level
                ]
                for level in self._levels
            ],
        )

    def __len__(self) -> int:
        return self.leaf_count()

    def __repr__(self) -> str:
        root = self.root_digest()
        return (
            f"MerkleTree(leaves={self.leaf_count()}, depth={self.depth()}, "
            f"algorithm={self._hash.name!r}, "
            f"root={to_hex(root)[:18] + '...' if root else None})"
        )


__all__ = [
    "Item",
    "Node",
    "Level",
    "encode_item",
    "item_text",
    "is_blank",
    "validate_item",
    "validate_items",
    "merkle_parent",
    "build_levels",
    "compute_tree_depth",
    "MerkleTree",
]
