"""
Module 02 - Hashing Utilities
Pluggable digest functions and hex helpers for Merkle commitments.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- HashFunction: the digest contract every tree and verifier depends on
- Sha256Hash (default), Blake2bHash: standard cryptographic digests
- RollingHash: 32-bit rolling hash kept as a deterministic reference vector
  source (NOT collision resistant, never use it for real commitments)
- Hash function registry lookup by name
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Always hash raw bytes exactly as given
- Parent digests hash the byte concatenation left + right, never a
  formatted string of the two digests
- All operations are deterministic
"""
from __future__ import annotations

import hashlib
from typing import Protocol, runtime_checkable


DEFAULT_HASH_ALGORITHM = "sha256"


@runtime_checkable
class HashFunction(Protocol):
    """
    Digest contract used by MerkleTree and the proof verifier.

    Implementations must be pure: the same input always yields the same
    fixed-size output, and no input makes them fail.
    """

    name: str
    digest_size: int

    def digest(self, data: bytes) -> bytes:
        ...


class Sha256Hash:
    """SHA-256 digest (32 bytes)."""

    name = "sha256"
    digest_size = 32

    def digest(self, data: bytes) -> bytes:
        return hashlib.sha256(data).digest()

    def __repr__(self) -> str:
        return "Sha256Hash()"


class Blake2bHash:
    """BLAKE2b digest truncated to 32 bytes."""

    name = "blake2b"
    digest_size = 32

    def digest(self, data: bytes) -> bytes:
        return hashlib.blake2b(data, digest_size=self.digest_size).digest()

    def __repr__(self) -> str:
        return "Blake2bHash()"


class RollingHash:
    """
    32-bit polynomial rolling hash: h = h * 31 + byte (mod 2**32).

    Output is the 4-byte big-endian encoding of h. Useful for small,
    hand-checkable test vectors; trivially forgeable.
    """

    name = "rolling32"
    digest_size = 4

    def digest(self, data: bytes) -> bytes:
        h = 0
        for byte in data:
            h = ((h << 5) - h + byte) & 0xFFFFFFFF
        return h.to_bytes(4, "big")

    def __repr__(self) -> str:
        return "RollingHash()"


_HASH_FUNCTIONS: dict[str, type] = {
    Sha256Hash.name: Sha256Hash,
    Blake2bHash.name: Blake2bHash,
    RollingHash.name: RollingHash,
}


def available_hash_functions() -> list[str]:
    """Names accepted by get_hash_function(), sorted."""
    return sorted(_HASH_FUNCTIONS)


def get_hash_function(name: str = DEFAULT_HASH_ALGORITHM) -> HashFunction:
    """
    Look up a hash function by name.

    Args:
        name: Registered algorithm name (case-insensitive)

    Returns:
        A new HashFunction instance

    Raises:
        ValueError: If no function is registered under that name
    """
    key = name.strip().lower()
    if key not in _HASH_FUNCTIONS:
        raise ValueError(
            f"Unknown hash algorithm {name!r}; "
            f"expected one of {', '.join(available_hash_functions())}"
        )
    return _HASH_FUNCTIONS[key]()


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_concat(left: bytes, right: bytes, hash_function: HashFunction | None = None) -> bytes:
    """
    Hash the byte concatenation of two digests.

    This is the Merkle parent rule: parent = H(left + right).

    Args:
        left: Left child digest
        right: Right child digest
        hash_function: Digest function to use (default SHA-256)

    Returns:
        Parent digest
    """
    fn = hash_function or Sha256Hash()
    return fn.digest(left + right)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


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
