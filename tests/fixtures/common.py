"""
Common test data factories shared across unit tests.
"""

from __future__ import annotations

from flectra.crypto.hashing import Hasher, hash_leaf


def make_leaves(count: int, prefix: str = "leaf", hasher: Hasher | None = None) -> list[bytes]:
    """Build ``count`` distinct leaf hashes from simple payloads."""
    return [hash_leaf(f"{prefix}{i}".encode(), hasher) for i in range(count)]


def flip_byte(value: bytes, position: int = 0) -> bytes:
    """Return a copy of ``value`` with one byte inverted."""
    mutated = bytearray(value)
    mutated[position] ^= 0xFF
    return bytes(mutated)
