"""
Module 01 - Schemas & Canonicalization
File: proof.py

Purpose: Inclusion proof value objects.

An InclusionProof carries no reference to the tree that produced it.
It is verifiable from {leaf_digest, root_digest, path} alone, so it can
be serialized, shipped and checked by an independent verifier.

Wire format (JSON):
    {
      "algorithm": "sha256",
      "leaf_index": 1,
      "leaf_digest": "0x...",
      "root_digest": "0x...",
      "path": [{"digest": "0x...", "side": "left"}, ...]
    }

`side` is the side the SIBLING occupied at that level. Path order is
bottom-up and must be preserved exactly.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
)

from core.crypto.hashing import DEFAULT_HASH_ALGORITHM, from_hex, to_hex

from .canonical import dumps_canonical, loads_canonical
from .errors import ProofDecodeException


# Bytes reserved for the leaf index in the size estimate
INDEX_FIELD_SIZE = 4
# Bytes reserved for each side tag in the size estimate
SIDE_FIELD_SIZE = 1


class Side(str, Enum):
    """Side occupied by a sibling digest relative to the running hash."""

    LEFT = "left"
    RIGHT = "right"


def _parse_digest(value: Any) -> Any:
    if isinstance(value, str):
        return from_hex(value)
    return value


class ProofStep(BaseModel):
    """One sibling digest on the path from a leaf to the root."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    digest: bytes = Field(..., min_length=1, description="Sibling digest")
    side: Side = Field(..., description="Side the sibling occupies")

    @field_validator("digest", mode="before")
    @classmethod
    def _decode_digest(cls, value: Any) -> Any:
        return _parse_digest(value)

    @field_serializer("digest")
    def _encode_digest(self, value: bytes) -> str:
        return to_hex(value)


class InclusionProof(BaseModel):
    """
    Merkle inclusion proof for a single leaf.

    Attributes:
        leaf_index: 0-based position of the leaf when the proof was built
        leaf_digest: Digest of the leaf item
        root_digest: Root the proof authenticates against
        path: Sibling steps, bottom-up
        algorithm: Name of the hash function that produced the digests
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    leaf_index: int = Field(..., ge=0)
    leaf_digest: bytes = Field(..., min_length=1)
    root_digest: bytes = Field(..., min_length=1)
    path: tuple[ProofStep, ...] = Field(default_factory=tuple)
    algorithm: str = Field(default=DEFAULT_HASH_ALGORITHM, min_length=1)

    @field_validator("leaf_digest", "root_digest", mode="before")
    @classmethod
    def _decode_digests(cls, value: Any) -> Any:
        return _parse_digest(value)

    @field_serializer("leaf_digest", "root_digest")
    def _encode_digests(self, value: bytes) -> str:
        return to_hex(value)

    @property
    def path_length(self) -> int:
        return len(self.path)

    @property
    def estimated_size(self) -> int:
        """Approximate encoded size in bytes (for capacity planning only)."""
        return estimate_proof_size(len(self.path), len(self.leaf_digest))

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible dict with hex digests."""
        return self.model_dump(mode="json")

    def to_json(self) -> str:
        """Canonical JSON encoding."""
        return dumps_canonical(self)

    @classmethod
    def from_dict(cls, data: Any) -> "InclusionProof":
        """
        Decode a proof from its dict form.

        Raises:
            ProofDecodeException: If the data is not a well-formed proof
        """
        if not isinstance(data, dict):
            raise ProofDecodeException(
                f"Proof must be a JSON object, got {type(data).__name__}"
            )
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ProofDecodeException(
                f"Malformed proof: {e.error_count()} validation error(s)",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e

    @classmethod
    def from_json(cls, text: str | bytes) -> "InclusionProof":
        """Decode a proof from JSON text or UTF-8 encoded bytes."""
        if isinstance(text, (bytes, bytearray)):
            try:
                text = bytes(text).decode("utf-8")
            except UnicodeDecodeError as e:
                raise ProofDecodeException(
                    f"Proof is not valid UTF-8: {e.reason} at byte {e.start}",
                    details={"position": e.start},
                ) from e
        try:
            data = loads_canonical(text)
        except ValueError as e:
            raise ProofDecodeException(f"Proof is not valid JSON: {e}") from e
        return cls.from_dict(data)


def estimate_proof_size(path_length: int, digest_size: int) -> int:
    """
    Estimate the encoded size of a proof in bytes.

    size = 2 * digest_size + index field + path_length * (digest_size + side tag)

    Example:
        >>> estimate_proof_size(2, 32)
        134
    """
    return (
        2 * digest_size
        + INDEX_FIELD_SIZE
        + path_length * (digest_size + SIDE_FIELD_SIZE)
    )


__all__ = [
    "INDEX_FIELD_SIZE",
    "SIDE_FIELD_SIZE",
    "Side",
    "ProofStep",
    "InclusionProof",
    "estimate_proof_size",
]
