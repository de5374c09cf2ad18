"""
Leaf Batch Builder
Sequential accumulator for attestation batches.

Callers append leaf hashes (or raw payloads, which are double-hashed)
one at a time and finish with a single build. The engine has no
incremental update path, so the builder is where appends get serialised.
Signing the resulting root is left to the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from flectra.crypto.hashing import DEFAULT_HASHER, HASH_SIZE, Hasher, hash_leaf
from flectra.merkle.merkle_tree import MerkleProof, MerkleTree, compute_merkle_root
from flectra.schemas.errors import EmptyInputError, InvalidHashLengthError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeafBatch:
    """A finalized batch: the committed root plus the tree behind it."""
    root: bytes
    count: int
    leaves: tuple[bytes, ...]
    tree: MerkleTree

    def proof(self, index: int) -> MerkleProof:
        return self.tree.proof(index)

    def verify(self, proof: MerkleProof) -> bool:
        return self.tree.verify(proof)


class LeafBatchBuilder:
    """
    Collects leaf hashes for one batch.

    Usage:
        builder = LeafBatchBuilder()
        builder.add(leaf_hash).add_payload(b"raw attestation bytes")
        batch = builder.build()
        proof = batch.proof(0)
    """

    def __init__(self, hasher: Hasher | None = None) -> None:
        self._hasher = hasher or DEFAULT_HASHER
        self._leaves: list[bytes] = []

    def add(self, leaf: bytes) -> "LeafBatchBuilder":
        """Append a pre-hashed 32-byte leaf."""
        if len(leaf) != HASH_SIZE:
            raise InvalidHashLengthError(len(leaf), HASH_SIZE, details={"position": len(self._leaves)})
        self._leaves.append(bytes(leaf))
        return self

    def add_payload(self, payload: bytes) -> "LeafBatchBuilder":
        """Hash a raw payload with hash_leaf and append it."""
        return self.add(hash_leaf(payload, self._hasher))

    def extend(self, leaves: Iterable[bytes]) -> "LeafBatchBuilder":
        for leaf in leaves:
            self.add(leaf)
        return self

    @property
    def count(self) -> int:
        return len(self._leaves)

    def build(self) -> LeafBatch:
        """
        Build the batch tree from the collected leaves.

        Raises:
            EmptyInputError: If no leaves were added
        """
        if not self._leaves:
            raise EmptyInputError("Cannot build batch with no leaves")

        tree = MerkleTree.build(self._leaves, self._hasher)
        logger.debug(f"Built batch of {tree.leaf_count} leaves, depth {tree.depth}")
        return LeafBatch(
            root=tree.root,
            count=tree.leaf_count,
            leaves=tree.leaves,
            tree=tree,
        )

    def compute_root(self) -> bytes:
        """Compute only the batch root, without keeping a tree."""
        if not self._leaves:
            raise EmptyInputError("Cannot build batch with no leaves")
        return compute_merkle_root(self._leaves, self._hasher)

    def reset(self) -> "LeafBatchBuilder":
        """Clear collected leaves so the builder can be reused."""
        self._leaves = []
        return self


__all__ = [
    "LeafBatch",
    "LeafBatchBuilder",
]
