"""
Module 01 - Schemas & Canonicalization
File: summary.py

Purpose: Read-only snapshot of a tree for renderers and transport.

The summary exposes every level, not only leaves and root, so that
renderers never recompute hashes themselves.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LeafInfo(BaseModel):
    """A leaf as seen by external consumers."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int = Field(..., ge=0)
    item: str = Field(..., description="Item text (bytes decoded as UTF-8)")
    digest: str = Field(..., description="0x-prefixed hex digest")


class NodeInfo(BaseModel):
    """A node at any level of the tree."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    digest: str = Field(..., description="0x-prefixed hex digest")
    is_leaf: bool
    item: str | None = Field(default=None, description="Item text, leaves only")
    position: int = Field(..., ge=0, description="Index within its level")


class TreeSummary(BaseModel):
    """Complete derived state of a tree."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    root_digest: str | None = Field(default=None, description="None for an empty tree")
    leaf_count: int = Field(..., ge=0)
    depth: int = Field(..., ge=0)
    algorithm: str
    leaves: list[LeafInfo] = Field(default_factory=list)
    levels: list[list[NodeInfo]] = Field(
        default_factory=list,
        description="Level 0 holds the leaves; the last level holds the root",
    )

    @property
    def is_empty(self) -> bool:
        return self.leaf_count == 0


__all__ = [
    "LeafInfo",
    "NodeInfo",
    "TreeSummary",
]
