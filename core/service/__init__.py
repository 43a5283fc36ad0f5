"""
Session layer: serialized, envelope-returning access to a MerkleTree.
"""

from .models import ContainsInfo, ProofInfo, ServiceResponse, VerificationInfo
from .session import TreeSession

__all__ = [
    "TreeSession",
    "ServiceResponse",
    "ProofInfo",
    "VerificationInfo",
    "ContainsInfo",
]
