"""
Module 05 - CLI Text Rendering

Human-readable views of tree summaries and proofs. Renderers only read
TreeSummary / InclusionProof values; they never hash anything.
"""

from __future__ import annotations

from core.schemas.proof import InclusionProof
from core.schemas.summary import TreeSummary


def short_digest(digest_hex: str | None, chars: int = 16) -> str:
    """First `chars` hex characters of a 0x-prefixed digest."""
    if not digest_hex:
        return "-"
    bare = digest_hex[2:] if digest_hex.startswith("0x") else digest_hex
    return bare[:chars]


def render_tree(summary: TreeSummary, short_chars: int = 16) -> str:
    """
    One line per level, leaves first, then the full root digest.

    Example:
        Merkle Tree Structure:
        Level 0: Leaf[559aead08264d579] | Leaf[df7e70e5021544f4]
        Level 1: Internal[63956f0ce48edc48]
        Root Hash: 63956f0ce48edc48...
    """
    lines = ["Merkle Tree Structure:"]
    if summary.is_empty:
        lines.append("(empty tree)")
        return "\n".join(lines)

    for level_number, level in enumerate(summary.levels):
        nodes = " | ".join(
            f"{'Leaf' if node.is_leaf else 'Internal'}[{short_digest(node.digest, short_chars)}]"
            for node in level
        )
        lines.append(f"Level {level_number}: {nodes}")

    lines.append(f"Root Hash: {summary.root_digest.removeprefix('0x')}")
    return "\n".join(lines)


def render_summary(summary: TreeSummary, short_chars: int = 16, max_leaves: int = 50) -> str:
    lines = [
        f"root: {summary.root_digest or '(none)'}",
        f"algorithm: {summary.algorithm}",
        f"leaf_count: {summary.leaf_count}",
        f"depth: {summary.depth}",
    ]
    if summary.leaves:
        lines.append("")
        lines.append("leaves:")
        for leaf in summary.leaves[:max_leaves]:
            lines.append(f"  [{leaf.index}] {short_digest(leaf.digest, short_chars)}  {leaf.item}")
        hidden = len(summary.leaves) - max_leaves
        if hidden > 0:
            lines.append(f"  ... {hidden} more")
    return "\n".join(lines)


def render_proof(proof: InclusionProof) -> str:
    """Multi-line description of a proof, path in verification order."""
    lines = [
        f"Merkle Proof for leaf {proof.leaf_index}:",
        f"Algorithm: {proof.algorithm}",
        f"Leaf Hash: {proof.leaf_digest.hex()}",
        f"Root Hash: {proof.root_digest.hex()}",
        "Proof Path:",
    ]
    if not proof.path:
        lines.append("  (empty: single-leaf tree)")
    for i, step in enumerate(proof.path, start=1):
        lines.append(f"  {i}. {step.side.value}: {step.digest.hex()}")
    return "\n".join(lines)


__all__ = [
    "short_digest",
    "render_tree",
    "render_summary",
    "render_proof",
]
