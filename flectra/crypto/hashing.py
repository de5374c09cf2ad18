"""
Hashing Utilities
Hash primitives, leaf hashing and hex codec for Merkle commitments.

This module provides:
- Keccak-256 (the deployment default) and SHA-256 over raw bytes
- Double-hashing of leaf payloads
- Hasher lookup by algorithm name
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Always hash raw bytes exactly as given
- The same hasher must be used for build, proof and verify
- All operations are deterministic
"""
from __future__ import annotations

import hashlib
from typing import Callable

from eth_utils import keccak

from flectra.schemas.errors import UnsupportedHashAlgorithmError


Hasher = Callable[[bytes], bytes]

HASH_SIZE = 32


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 hash of raw bytes.

    This is the Ethereum flavour of Keccak (not NIST SHA3-256).

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(data)


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest
    """
    return hashlib.sha256(data).digest()


DEFAULT_HASHER: Hasher = keccak256

HASHERS: dict[str, Hasher] = {
    "keccak256": keccak256,
    "sha256": sha256,
}


def get_hasher(name: str) -> Hasher:
    """
    Resolve a hash function by algorithm name.

    Args:
        name: Algorithm name, case-insensitive ("keccak256" or "sha256")

    Returns:
        The hash function

    Raises:
        UnsupportedHashAlgorithmError: If the name is not registered
    """
    try:
        return HASHERS[name.lower()]
    except KeyError:
        raise UnsupportedHashAlgorithmError(name, supported=sorted(HASHERS)) from None


def hash_leaf(payload: bytes, hasher: Hasher | None = None) -> bytes:
    """
    Compute the leaf hash for a caller-supplied payload.

    Rule: leaf = H(H(payload))

    Double hashing keeps leaf values apart from internal node values,
    so a payload crafted to look like two concatenated child hashes
    cannot be passed off as an interior node.

    Args:
        payload: Raw payload bytes
        hasher: Hash function (defaults to keccak256)

    Returns:
        32-byte leaf hash
    """
    h = hasher or DEFAULT_HASHER
    return h(h(payload))


def hash_concat(left: bytes, right: bytes, hasher: Hasher | None = None) -> bytes:
    """
    Hash the concatenation of two byte sequences, in the given order.

    Args:
        left: Left operand
        right: Right operand
        hasher: Hash function (defaults to keccak256)

    Returns:
        32-byte digest of left + right
    """
    h = hasher or DEFAULT_HASHER
    return h(left + right)


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

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
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
    "Hasher",
    "HASH_SIZE",
    "DEFAULT_HASHER",
    "HASHERS",
    "keccak256",
    "sha256",
    "get_hasher",
    "hash_leaf",
    "hash_concat",
    "to_hex",
    "from_hex",
]
