"""
Session Response Models

Pydantic envelopes returned by TreeSession operations.
"""

from typing import Any

from pydantic import BaseModel, Field

from core.schemas.errors import MerkleError
from core.schemas.proof import InclusionProof


class ServiceResponse(BaseModel):
    """Uniform result envelope: operations report failures here instead of raising."""

    ok: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(..., description="Human-readable outcome")
    data: Any = Field(default=None, description="Operation payload")
    error: MerkleError | None = Field(default=None)

    @classmethod
    def success(cls, message: str, data: Any = None) -> "ServiceResponse":
        return cls(ok=True, message=message, data=data)

    @classmethod
    def failure(cls, message: str, error: MerkleError) -> "ServiceResponse":
        return cls(ok=False, message=message, error=error)


class ProofInfo(BaseModel):
    """A freshly generated proof plus its self-check."""

    proof: InclusionProof
    is_valid: bool = Field(..., description="Whether the proof verifies")
    proof_size: int = Field(..., description="Estimated encoded size in bytes")


class VerificationInfo(BaseModel):
    """Outcome of verifying a (possibly foreign) proof."""

    proof_valid: bool
    item_valid: bool = Field(
        default=False,
        description="Whether the supplied item is the proof's leaf; False when no item given",
    )
    item: str = Field(default="")


class ContainsInfo(BaseModel):
    """Outcome of a containment query."""

    exists: bool
    item: str
    index: int | None = None


__all__ = [
    "ServiceResponse",
    "ProofInfo",
    "VerificationInfo",
    "ContainsInfo",
]
