"""
Module 05 - CLI Verify Command

Verify a proof file offline. Needs only the proof (and optionally the
claimed item and a trusted root), never the tree.

The hash function is taken from the proof's `algorithm` tag unless
`--algorithm` pins one, in which case a proof tagged differently fails
with ALGORITHM_MISMATCH.

Usage:
    hashtree verify proof.json [--item "T2"] [--root 0x...] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from core.crypto.hashing import from_hex, get_hash_function
from core.merkle import MerkleVerifier
from core.schemas.errors import ErrorCodes, MerkleError, ProofDecodeException
from core.schemas.proof import InclusionProof


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    algorithm: str = ""
    leaf_index: int | None = None
    root: str = ""
    proof_valid: bool = False
    item_valid: bool | None = None
    root_pinned: bool | None = None
    errors: list[MerkleError] = field(default_factory=list)

    def add_error(self, code: str, message: str, **details: Any) -> None:
        self.errors.append(MerkleError(code=code, message=message, details=details))

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "proof_path": self.proof_path,
            "algorithm": self.algorithm,
            "leaf_index": self.leaf_index,
            "root": self.root,
            "proof_valid": self.proof_valid,
        }
        if self.item_valid is not None:
            d["item_valid"] = self.item_valid
        if self.root_pinned is not None:
            d["root_pinned"] = self.root_pinned
        if self.errors:
            d["errors"] = [e.model_dump(mode="json") for e in self.errors]
        return d

    @property
    def error_codes(self) -> list[str]:
        return [e.code for e in self.errors]

    @property
    def all_ok(self) -> bool:
        """Check if all requested verifications passed."""
        if not self.proof_valid:
            return False
        if self.item_valid is not None and not self.item_valid:
            return False
        if self.root_pinned is not None and not self.root_pinned:
            return False
        return True


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"proof: {summary.proof_path}")
    print(f"algorithm: {summary.algorithm}")
    if summary.leaf_index is not None:
        print(f"leaf_index: {summary.leaf_index}")
    print(f"root: {summary.root}")
    print(f"proof_valid: {str(summary.proof_valid).lower()}")
    if summary.item_valid is not None:
        print(f"item_valid: {str(summary.item_valid).lower()}")
    if summary.root_pinned is not None:
        print(f"root_pinned: {str(summary.root_pinned).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors:
            print(f"  ✗ [{err.code}] {err.message}")


def select_verifier(
    proof: InclusionProof,
    pinned_algorithm: str | None,
    summary: VerifySummary,
) -> MerkleVerifier | None:
    """
    Pick the verifier for a decoded proof.

    Returns None (with the reason recorded on the summary) when the
    proof's algorithm is unknown or differs from the pinned one.
    """
    tagged = proof.algorithm.strip().lower()
    try:
        proof_fn = get_hash_function(tagged)
    except ValueError as e:
        summary.algorithm = proof.algorithm
        summary.add_error(ErrorCodes.MERKLE_PROOF_INVALID, str(e), algorithm=proof.algorithm)
        return None

    if pinned_algorithm is not None:
        pinned_fn = get_hash_function(pinned_algorithm)
        summary.algorithm = pinned_fn.name
        if pinned_fn.name != proof_fn.name:
            summary.add_error(
                ErrorCodes.ALGORITHM_MISMATCH,
                f"Proof was built with {proof_fn.name}, but {pinned_fn.name} was requested",
                expected=pinned_fn.name,
                actual=proof_fn.name,
            )
            return None
        return MerkleVerifier(pinned_fn)

    summary.algorithm = proof_fn.name
    return MerkleVerifier(proof_fn)


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        EXIT_SUCCESS if every requested check passed, EXIT_VERIFICATION_FAILED
        otherwise (including undecodable proofs)
    """
    proof_path = Path(args.proof_path)
    if not proof_path.exists():
        print(f"Error: Proof file not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    trusted_root: bytes | None = None
    if args.root:
        try:
            trusted_root = from_hex(args.root)
        except ValueError as e:
            print(f"Error: Invalid --root: {e}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

    summary = VerifySummary(proof_path=str(proof_path))

    verifier = None
    try:
        proof = InclusionProof.from_json(proof_path.read_bytes())
    except ProofDecodeException as e:
        logger.info(f"Proof decode failed: {e.message}")
        summary.algorithm = args.algorithm or ""
        summary.errors.append(e.to_error_model())
    else:
        summary.leaf_index = proof.leaf_index
        summary.root = "0x" + proof.root_digest.hex()
        verifier = select_verifier(proof, args.algorithm, summary)

    if verifier is None:
        if args.item is not None:
            summary.item_valid = False
        if trusted_root is not None:
            summary.root_pinned = False
    else:
        summary.proof_valid = verifier.verify(proof)
        if not summary.proof_valid:
            summary.add_error(
                ErrorCodes.MERKLE_PROOF_INVALID,
                "Recomputed root does not match proof root",
            )
        if args.item is not None:
            summary.item_valid = verifier.verify_item(args.item, proof)
            if not summary.item_valid:
                summary.add_error(
                    ErrorCodes.LEAF_HASH_MISMATCH,
                    "Item does not match the proof's leaf",
                )
        if trusted_root is not None:
            summary.root_pinned = verifier.verify_against_root(proof, trusted_root)
            if not summary.root_pinned:
                summary.add_error(
                    ErrorCodes.ROOT_MISMATCH,
                    "Proof does not authenticate against the trusted root",
                    trusted_root="0x" + trusted_root.hex(),
                )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if summary.all_ok else EXIT_VERIFICATION_FAILED
