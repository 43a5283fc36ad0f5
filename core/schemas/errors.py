"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for tree construction, queries and proofs.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the tree API."""

    # Input validation
    INVALID_INPUT = "INVALID_INPUT"

    # Queries
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"

    # Serialization
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    PROOF_DECODE_ERROR = "PROOF_DECODE_ERROR"

    # Verification outcomes (reported, never raised)
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"
    ROOT_MISMATCH = "ROOT_MISMATCH"
    LEAF_HASH_MISMATCH = "LEAF_HASH_MISMATCH"
    ALGORITHM_MISMATCH = "ALGORITHM_MISMATCH"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Base error model for structured error communication.

    Used by the session layer and the CLI to report failures without
    raising.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_INPUT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleException(Exception):
    """
    Base exception for all tree errors.

    Carries structured error information and converts to/from
    MerkleError models. All subclasses are local, recoverable conditions.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidInputException(MerkleException, ValueError):
    """Raised for an empty item list or an empty/blank item."""

    def __init__(
        self,
        message: str,
        position: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if position is not None:
            full_details["position"] = position
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_INPUT,
            details=full_details,
        )


class IndexOutOfRangeException(MerkleException, IndexError):
    """Raised when a leaf index falls outside [0, leaf_count)."""

    def __init__(self, index: int, leaf_count: int) -> None:
        super().__init__(
            message=f"Leaf index {index} out of range for {leaf_count} leaves",
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details={"index": index, "leaf_count": leaf_count},
        )


class ItemNotFoundException(MerkleException, LookupError):
    """Raised when proof-by-item cannot find the item in the tree."""

    def __init__(self, item: Any) -> None:
        super().__init__(
            message=f"Item not found in tree: {item!r}",
            code=ErrorCodes.ITEM_NOT_FOUND,
            details={"item": item if isinstance(item, str) else repr(item)},
        )


class CanonicalizationException(MerkleException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )


class ProofDecodeException(MerkleException, ValueError):
    """Raised when a serialized proof cannot be decoded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_DECODE_ERROR,
            details=details,
        )


__all__ = [
    "ErrorCodes",
    "MerkleError",
    "MerkleException",
    "InvalidInputException",
    "IndexOutOfRangeException",
    "ItemNotFoundException",
    "CanonicalizationException",
    "ProofDecodeException",
]
