"""
Module 02 - Merkle Tree and Inclusion Proofs
Deterministic Merkle tree construction + proof generation/verification.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- MerkleTree: Ordered items, derived levels, queries, mutation, proofs
- build_levels: The single construction authority for tree shape
- generate_proof / verify_proof / verify_item_against_proof
- MerkleVerifier: Independent verifier bound to one hash function

Canonical Commitment Rules:
1. Leaf hashing: H(item bytes)
2. Parent hashing: H(left + right)
3. Padding: Last node of an odd level is paired with itself
4. Empty tree: no root
5. Single leaf: root = leaf digest

Usage:
    from core.merkle import MerkleTree, verify_proof

    tree = MerkleTree.from_items(["T1", "T2", "T3", "T4"])
    proof = tree.prove_by_index(1)
    assert verify_proof(proof)
"""
from .merkle_tree import (
    Item,
    Node,
    MerkleTree,
    build_levels,
    compute_tree_depth,
    encode_item,
    item_text,
    is_blank,
    merkle_parent,
    validate_item,
    validate_items,
)

from .merkle_proofs import (
    MerkleVerifier,
    compute_root_from_proof,
    generate_proof,
    verify_item_against_proof,
    verify_proof,
)

from core.schemas.proof import estimate_proof_size


__all__ = [
    # Core types
    "Item",
    "Node",
    "MerkleTree",
    # Construction
    "build_levels",
    "compute_tree_depth",
    "encode_item",
    "item_text",
    "is_blank",
    "merkle_parent",
    "validate_item",
    "validate_items",
    # Proofs
    "generate_proof",
    "compute_root_from_proof",
    "verify_proof",
    "verify_item_against_proof",
    "estimate_proof_size",
    "MerkleVerifier",
]
