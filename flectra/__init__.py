"""
Flectra Merkle commitment engine.

Builds binary hash trees over ordered 32-byte leaf hashes, derives a
root commitment, and produces and verifies inclusion proofs.
"""

from flectra.crypto.hashing import hash_leaf, keccak256, sha256
from flectra.merkle import (
    LeafBatchBuilder,
    MerkleProof,
    MerkleTree,
    build_merkle_tree,
    compute_merkle_root,
    hash_pair,
    verify_merkle_proof,
)
from flectra.schemas.errors import EmptyInputError, IndexOutOfRangeError

__version__ = "0.1.0"

__all__ = [
    "hash_leaf",
    "keccak256",
    "sha256",
    "hash_pair",
    "MerkleProof",
    "MerkleTree",
    "build_merkle_tree",
    "compute_merkle_root",
    "verify_merkle_proof",
    "LeafBatchBuilder",
    "EmptyInputError",
    "IndexOutOfRangeError",
]
