"""
Core cryptographic utilities.

Module 02 provides the pluggable hash functions used by the Merkle tree.
"""
from .hashing import (
    DEFAULT_HASH_ALGORITHM,
    HashFunction,
    Sha256Hash,
    Blake2bHash,
    RollingHash,
    available_hash_functions,
    get_hash_function,
    sha256,
    hash_concat,
    to_hex,
    from_hex,
)

__all__ = [
    "DEFAULT_HASH_ALGORITHM",
    "HashFunction",
    "Sha256Hash",
    "Blake2bHash",
    "RollingHash",
    "available_hash_functions",
    "get_hash_function",
    "sha256",
    "hash_concat",
    "to_hex",
    "from_hex",
]
