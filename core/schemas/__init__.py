"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
    loads_canonical,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    ErrorCodes,
    IndexOutOfRangeException,
    InvalidInputException,
    ItemNotFoundException,
    MerkleError,
    MerkleException,
    ProofDecodeException,
)

# Proof value objects
from .proof import (
    InclusionProof,
    ProofStep,
    Side,
    estimate_proof_size,
)

# Tree summaries
from .summary import (
    LeafInfo,
    NodeInfo,
    TreeSummary,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    "loads_canonical",
    # Errors
    "CanonicalizationException",
    "ErrorCodes",
    "IndexOutOfRangeException",
    "InvalidInputException",
    "ItemNotFoundException",
    "MerkleError",
    "MerkleException",
    "ProofDecodeException",
    # Proof
    "InclusionProof",
    "ProofStep",
    "Side",
    "estimate_proof_size",
    # Summary
    "LeafInfo",
    "NodeInfo",
    "TreeSummary",
]
