"""
Module 02 - Merkle Proofs
Inclusion proof generation over a level arena, and fail-closed verification.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- generate_proof: Build an InclusionProof for a leaf from derived levels
- verify_proof: Recompute the root from a proof and compare
- verify_item_against_proof: Bind a plaintext item to a verified proof
- MerkleVerifier: Class-based wrapper around the verification functions

Verification Rules (Hard Contracts):
1. Fold over path in order, starting from leaf_digest
2. side == left:  computed = H(sibling + computed)
3. side == right: computed = H(computed + sibling)
4. Valid iff computed == root_digest
5. Verification never raises; malformed input evaluates to False
"""
from __future__ import annotations

import hmac
import logging
from typing import Any, Sequence

from core.crypto.hashing import DEFAULT_HASH_ALGORITHM, HashFunction, Sha256Hash
from core.schemas.errors import IndexOutOfRangeException
from core.schemas.proof import InclusionProof, ProofStep, Side


logger = logging.getLogger(__name__)


def generate_proof(
    levels: Sequence[Sequence[Any]],
    leaf_index: int,
    algorithm: str = DEFAULT_HASH_ALGORITHM,
) -> InclusionProof:
    """
    Generate an inclusion proof for the leaf at `leaf_index`.

    Walks from the leaf level up to (excluding) the root level. At each
    level the sibling is `index ^ 1`; when that falls past the end of an
    odd-length level the node was paired with itself, so its own digest is
    the sibling on the right.

    Args:
        levels: Derived levels, leaves first; nodes expose `.digest`
        leaf_index: 0-based leaf position
        algorithm: Name of the hash function that produced the levels

    Returns:
        InclusionProof with a path of len(levels) - 1 steps

    Raises:
        IndexOutOfRangeException: If leaf_index is outside [0, leaf_count)
    """
    leaf_count = len(levels[0]) if levels else 0
    if leaf_index < 0 or leaf_index >= leaf_count:
        raise IndexOutOfRangeException(leaf_index, leaf_count)

    path: list[ProofStep] = []
    current_index = leaf_index

    for level in levels[:-1]:
        sibling_index = current_index ^ 1
        if sibling_index >= len(level):
            # Odd level: last node is its own sibling
            sibling_index = current_index

        side = Side.LEFT if sibling_index < current_index else Side.RIGHT
        path.append(ProofStep(digest=level[sibling_index].digest, side=side))

        current_index //= 2

    return InclusionProof(
        leaf_index=leaf_index,
        leaf_digest=levels[0][leaf_index].digest,
        root_digest=levels[-1][0].digest,
        path=tuple(path),
        algorithm=algorithm,
    )


def _is_digest(value: Any, hash_function: HashFunction) -> bool:
    return isinstance(value, bytes) and len(value) == hash_function.digest_size


def compute_root_from_proof(
    proof: InclusionProof,
    hash_function: HashFunction | None = None,
) -> bytes | None:
    """
    Recompute the root implied by a proof's leaf digest and path.

    Returns:
        The recomputed root, or None if the proof is malformed
    """
    fn = hash_function or Sha256Hash()

    if not isinstance(proof, InclusionProof):
        return None
    if not _is_digest(proof.leaf_digest, fn):
        return None
    if not isinstance(proof.path, (tuple, list)):
        return None

    computed = proof.leaf_digest
    for step in proof.path:
        if not isinstance(step, ProofStep) or not _is_digest(step.digest, fn):
            return None
        if step.side == Side.LEFT:
            computed = fn.digest(step.digest + computed)
        elif step.side == Side.RIGHT:
            computed = fn.digest(computed + step.digest)
        else:
            return None

    return computed


def verify_proof(
    proof: InclusionProof | None,
    hash_function: HashFunction | None = None,
) -> bool:
    """
    Verify an inclusion proof against its claimed root.

    Fails closed: a missing proof, malformed digests, an unknown side tag
    or a proof built with a different hash algorithm all yield False.

    Args:
        proof: Proof to verify (possibly attacker-supplied)
        hash_function: Function the tree was built with (default SHA-256)

    Returns:
        True if the proof is valid, False otherwise
    """
    fn = hash_function or Sha256Hash()

    if proof is None or not isinstance(proof, InclusionProof):
        logger.debug("Rejecting proof: not an InclusionProof")
        return False

    if proof.algorithm != fn.name:
        logger.debug(
            f"Rejecting proof: algorithm {proof.algorithm!r} != {fn.name!r}"
        )
        return False

    if not _is_digest(proof.root_digest, fn):
        logger.debug("Rejecting proof: malformed root digest")
        return False

    computed = compute_root_from_proof(proof, fn)
    if computed is None:
        logger.debug("Rejecting proof: malformed leaf digest or path")
        return False

    return hmac.compare_digest(computed, proof.root_digest)


def verify_item_against_proof(
    item: str | bytes,
    proof: InclusionProof | None,
    hash_function: HashFunction | None = None,
) -> bool:
    """
    Verify that `item` is the leaf a proof authenticates.

    Requires H(item) == proof.leaf_digest AND verify_proof(proof). This
    prevents a valid path being presented for a different plaintext.
    """
    fn = hash_function or Sha256Hash()

    if isinstance(item, str):
        data = item.encode("utf-8")
    elif isinstance(item, (bytes, bytearray)):
        data = bytes(item)
    else:
        return False

    if not isinstance(proof, InclusionProof) or not isinstance(proof.leaf_digest, bytes):
        return False

    if not hmac.compare_digest(fn.digest(data), proof.leaf_digest):
        logger.debug("Rejecting proof: item digest does not match leaf digest")
        return False

    return verify_proof(proof, fn)


class MerkleVerifier:
    """
    Independent verifier bound to one hash function.

    Needs only the proof (and optionally a trusted root), never the tree.

    Example:
        >>> verifier = MerkleVerifier()
        >>> verifier.verify(tree.prove_by_index(1))
        True
    """

    def __init__(self, hash_function: HashFunction | None = None) -> None:
        self.hash_function = hash_function or Sha256Hash()

    def verify(self, proof: InclusionProof | None) -> bool:
        return verify_proof(proof, self.hash_function)

    def verify_item(self, item: str | bytes, proof: InclusionProof | None) -> bool:
        return verify_item_against_proof(item, proof, self.hash_function)

    def verify_against_root(
        self,
        proof: InclusionProof | None,
        trusted_root: bytes,
        item: str | bytes | None = None,
    ) -> bool:
        """
        Verify a proof and additionally pin it to a root obtained out of band.

        A self-consistent proof carries its own root; this check rejects
        proofs for any tree other than the trusted one.
        """
        if not isinstance(proof, InclusionProof):
            return False
        if not isinstance(trusted_root, bytes) or not isinstance(proof.root_digest, bytes):
            return False
        if not hmac.compare_digest(proof.root_digest, trusted_root):
            logger.debug("Rejecting proof: root does not match trusted root")
            return False
        if item is not None:
            return self.verify_item(item, proof)
        return self.verify(proof)


__all__ = [
    "generate_proof",
    "compute_root_from_proof",
    "verify_proof",
    "verify_item_against_proof",
    "MerkleVerifier",
]
