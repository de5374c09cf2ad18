"""
Merkle Tree and Commitments
Deterministic Merkle tree construction + proof generation/verification.

This module provides:
- MerkleTree: Immutable tree with root, leaves, depth, proof and verify
- MerkleProof: Dataclass representing a Merkle inclusion proof
- compute_merkle_root: Root-only computation
- verify_merkle_proof: Verify a proof against a known root
- LeafBatchBuilder: Sequential accumulator feeding a single build

Canonical Commitment Rules:
1. Leaf hashing (caller side): keccak256(keccak256(payload))
2. Parent hashing: keccak256(sorted(a, b) concatenated)
3. Padding: Pair the last node with itself if odd at any level
4. Empty tree: EmptyInputError
5. Single leaf: root = leaf

Usage:
    from flectra.crypto import hash_leaf
    from flectra.merkle import MerkleTree, verify_merkle_proof

    leaves = [hash_leaf(payload) for payload in payloads]
    tree = MerkleTree.build(leaves)
    proof = tree.proof(2)
    assert verify_merkle_proof(tree.root, proof)
"""
from .merkle_tree import (
    MerkleProof,
    MerkleTree,
    hash_pair,
    build_merkle_tree,
    verify_merkle_proof,
    compute_merkle_root,
    compute_tree_depth,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)

from .batch import (
    LeafBatch,
    LeafBatchBuilder,
)


__all__ = [
    # Core types
    "MerkleProof",
    "MerkleTree",
    # Core functions
    "hash_pair",
    "build_merkle_tree",
    "verify_merkle_proof",
    "compute_merkle_root",
    "compute_tree_depth",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
    "LeafBatch",
    "LeafBatchBuilder",
]
