"""
Merkle Proofs Convenience Wrappers
Thin wrappers around core Merkle tree functions for cleaner API.

This module provides class-based interfaces:
- MerkleProver: Generate proofs and roots from leaves or raw payloads
- MerkleVerifier: Verify proofs against a known root

These are convenience wrappers around the functions in merkle_tree.py.
"""
from __future__ import annotations

from typing import Sequence

from flectra.crypto.hashing import Hasher, hash_leaf
from flectra.merkle.merkle_tree import (
    MerkleProof,
    MerkleTree,
    compute_merkle_root,
    verify_merkle_proof,
)
from flectra.schemas.errors import MerkleVerificationException


class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Provides static methods for proof generation from:
    - Pre-hashed leaves (bytes)
    - Raw payloads (double-hashed via hash_leaf first)

    Example:
        >>> leaves = [hash_leaf(b"a"), hash_leaf(b"b"), hash_leaf(b"c")]
        >>> proof = MerkleProver.prove(leaves, index=1)
        >>> proof.leaf == leaves[1]
        True
    """

    @staticmethod
    def prove(leaves: Sequence[bytes], index: int, hasher: Hasher | None = None) -> MerkleProof:
        """
        Generate a Merkle proof for the leaf at the given index.

        Raises:
            EmptyInputError: If leaves is empty
            IndexOutOfRangeError: If index is out of range
        """
        return MerkleTree.build(leaves, hasher).proof(index)

    @staticmethod
    def prove_payload(
        payloads: Sequence[bytes],
        index: int,
        hasher: Hasher | None = None,
    ) -> MerkleProof:
        """
        Generate a Merkle proof for a raw payload at the given index.

        Payloads are first converted to leaf hashes via hash_leaf.
        """
        leaves = [hash_leaf(payload, hasher) for payload in payloads]
        return MerkleTree.build(leaves, hasher).proof(index)

    @staticmethod
    def compute_root(leaves: Sequence[bytes], hasher: Hasher | None = None) -> bytes:
        """Compute the Merkle root for a sequence of leaves."""
        return compute_merkle_root(leaves, hasher)

    @staticmethod
    def compute_root_from_payloads(
        payloads: Sequence[bytes],
        hasher: Hasher | None = None,
    ) -> bytes:
        """Compute the Merkle root for a sequence of raw payloads."""
        leaves = [hash_leaf(payload, hasher) for payload in payloads]
        return compute_merkle_root(leaves, hasher)


class MerkleVerifier:
    """
    Convenience class for verifying Merkle proofs.

    Example:
        >>> proof = MerkleProver.prove(leaves, index=1)
        >>> MerkleVerifier.verify(root, proof)
        True
    """

    @staticmethod
    def verify(root: bytes, proof: MerkleProof, hasher: Hasher | None = None) -> bool:
        """Verify a Merkle proof against a root."""
        return verify_merkle_proof(root, proof, hasher)

    @staticmethod
    def verify_leaf_in_root(
        leaf: bytes,
        siblings: Sequence[bytes],
        positions: Sequence[bool],
        index: int,
        root: bytes,
        hasher: Hasher | None = None,
    ) -> bool:
        """
        Verify a leaf is included in a Merkle root using raw components.

        Args:
            leaf: The leaf hash to verify
            siblings: Sibling hashes (bottom-up)
            positions: Sibling position flags (True = sibling on the right)
            index: The claimed index of the leaf
            root: The claimed Merkle root

        Returns:
            True if the proof is valid, False otherwise
        """
        proof = MerkleProof(
            leaf=leaf,
            siblings=tuple(siblings),
            positions=tuple(positions),
            index=index,
        )
        return verify_merkle_proof(root, proof, hasher)

    @staticmethod
    def verify_payload_in_root(
        payload: bytes,
        siblings: Sequence[bytes],
        positions: Sequence[bool],
        index: int,
        root: bytes,
        hasher: Hasher | None = None,
    ) -> bool:
        """Verify a raw payload is included in a Merkle root."""
        leaf = hash_leaf(payload, hasher)
        return MerkleVerifier.verify_leaf_in_root(
            leaf, siblings, positions, index, root, hasher
        )

    @staticmethod
    def require_valid(root: bytes, proof: MerkleProof, hasher: Hasher | None = None) -> None:
        """
        Verify a proof, raising if it does not match the root.

        Raises:
            MerkleVerificationException: If the proof is invalid
        """
        if not verify_merkle_proof(root, proof, hasher):
            raise MerkleVerificationException(
                "Merkle proof does not match root",
                leaf_index=proof.index,
                details={"root": "0x" + bytes(root).hex()},
            )


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
