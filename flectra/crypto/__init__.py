"""
Core cryptographic utilities.

Hash primitives and leaf hashing for Merkle commitments.
"""
from .hashing import (
    Hasher,
    HASH_SIZE,
    DEFAULT_HASHER,
    keccak256,
    sha256,
    get_hasher,
    hash_leaf,
    hash_concat,
    to_hex,
    from_hex,
)

__all__ = [
    "Hasher",
    "HASH_SIZE",
    "DEFAULT_HASHER",
    "keccak256",
    "sha256",
    "get_hasher",
    "hash_leaf",
    "hash_concat",
    "to_hex",
    "from_hex",
]
