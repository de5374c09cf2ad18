"""
Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification.

This module provides:
- A commutative pairwise combinator (sorted concatenation)
- Immutable trees that retain every level for proof lookups
- Inclusion proof generation for any original leaf index
- Proof verification against a tree or a bare root
- A root-only computation that keeps a single level at a time

Canonical Commitment Rules (Hard Contracts):
1. Leaves are 32-byte hashes, already double-hashed by the caller
   (see flectra.crypto.hashing.hash_leaf). The engine never re-hashes them.
2. Parent hashing: parent = H(min(a, b) + max(a, b)), bytewise ordering
3. Padding rule: Pair the last node with itself if a level is odd
4. Empty leaves: rejected with EmptyInputError
5. Single leaf: root = leaf, depth = 0

Determinism Notes:
- No randomness
- Leaf order is defined by the caller and preserved in tree.leaves
- Padding nodes are never visible through the public API
"""
from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import Sequence

from flectra.crypto.hashing import DEFAULT_HASHER, Hasher
from flectra.schemas.errors import EmptyInputError, IndexOutOfRangeError


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle inclusion proof for a single leaf.

    Proofs are plain values: they hold no reference to the tree they
    came from and can be verified with nothing but a root.

    Attributes:
        leaf: The leaf hash being proven
        siblings: Sibling hashes from the leaf level up to the root
        positions: One flag per sibling, True if the sibling sits to the
                   right of the accumulated hash
        index: The 0-based index of the leaf in the original leaf list
    """
    leaf: bytes
    siblings: tuple[bytes, ...]
    positions: tuple[bool, ...]
    index: int

    def __post_init__(self) -> None:
        # Stored as tuples whatever sequence type the caller passed
        object.__setattr__(self, "siblings", tuple(self.siblings))
        object.__setattr__(self, "positions", tuple(self.positions))

    @property
    def depth(self) -> int:
        """Number of levels this proof climbs."""
        return len(self.siblings)


def hash_pair(a: bytes, b: bytes, hasher: Hasher | None = None) -> bytes:
    """
    Compute the parent hash of two child nodes.

    The operands are sorted bytewise before concatenation, which makes
    the combinator commutative: hash_pair(a, b) == hash_pair(b, a).

    Args:
        a: First child hash
        b: Second child hash
        hasher: Hash function (defaults to keccak256)

    Returns:
        Parent hash (32 bytes)
    """
    h = hasher or DEFAULT_HASHER
    return h(a + b) if a < b else h(b + a)


def _next_level(level: Sequence[bytes], hasher: Hasher) -> list[bytes]:
    """Pair consecutive nodes, pairing a trailing odd node with itself."""
    parents: list[bytes] = []
    for i in range(0, len(level), 2):
        left = level[i]
        right = level[i + 1] if i + 1 < len(level) else left
        parents.append(hash_pair(left, right, hasher))
    return parents


class MerkleTree:
    """
    An immutable binary Merkle tree over 32-byte leaf hashes.

    The tree owns every level it built, leaf level first. Levels are
    stored unpadded; a duplicated trailing node only exists while
    pairing, so it never shows up in ``leaves``.

    Every level above the leaves is derived by the tree itself, so the
    constructor takes leaves, never precomputed levels.

    Usage:
        tree = MerkleTree.build(leaves)
        proof = tree.proof(2)
        assert tree.verify(proof)
        assert verify_merkle_proof(tree.root, proof)
    """

    __slots__ = ("_layers", "_hasher")

    def __init__(self, leaves: Sequence[bytes], hasher: Hasher | None = None) -> None:
        if len(leaves) == 0:
            raise EmptyInputError()

        h = hasher or DEFAULT_HASHER
        layers: list[tuple[bytes, ...]] = [tuple(leaves)]
        while len(layers[-1]) > 1:
            layers.append(tuple(_next_level(layers[-1], h)))

        self._layers: tuple[tuple[bytes, ...], ...] = tuple(layers)
        self._hasher = h

    @classmethod
    def build(cls, leaves: Sequence[bytes], hasher: Hasher | None = None) -> "MerkleTree":
        """
        Build a tree from an ordered sequence of leaf hashes.

        Algorithm:
        1. If empty: raise EmptyInputError
        2. If single leaf: the leaf is the root, depth 0
        3. Otherwise pair adjacent nodes level by level (odd levels
           pair their last node with itself) until one node remains

        Example: [a, b, c] -> [ab, cc] -> [root], depth 2

        Args:
            leaves: Sequence of 32-byte leaf hashes. Order matters.
            hasher: Hash function (defaults to keccak256)

        Returns:
            The built MerkleTree

        Raises:
            EmptyInputError: If leaves is empty
        """
        return cls(leaves, hasher)

    @property
    def root(self) -> bytes:
        """The root commitment."""
        return self._layers[-1][0]

    @property
    def leaves(self) -> tuple[bytes, ...]:
        """The original leaves in caller order, without padding."""
        return self._layers[0]

    @property
    def leaf_count(self) -> int:
        return len(self._layers[0])

    @property
    def depth(self) -> int:
        """Number of pairing rounds between the leaves and the root."""
        return len(self._layers) - 1

    def __len__(self) -> int:
        return self.leaf_count

    def __repr__(self) -> str:
        return f"MerkleTree(root=0x{self.root.hex()}, leaves={self.leaf_count}, depth={self.depth})"

    def proof(self, index: int) -> MerkleProof:
        """
        Generate an inclusion proof for the leaf at ``index``.

        At each level the sibling is the right neighbour of an even
        index and the left neighbour of an odd one. A node with no right
        neighbour was paired with itself, so it is its own sibling and
        the flag records it on the right.

        Args:
            index: 0-based index into the original leaves

        Returns:
            MerkleProof for the leaf

        Raises:
            IndexOutOfRangeError: If index is not an integer in [0, leaf_count)
        """
        if isinstance(index, bool):
            raise IndexOutOfRangeError(index, self.leaf_count)
        try:
            index = operator.index(index)
        except TypeError:
            raise IndexOutOfRangeError(index, self.leaf_count) from None
        if index < 0 or index >= self.leaf_count:
            raise IndexOutOfRangeError(index, self.leaf_count)

        siblings: list[bytes] = []
        positions: list[bool] = []
        current_index = index

        for level in self._layers[:-1]:
            is_right_node = current_index % 2 == 1
            sibling_index = current_index - 1 if is_right_node else current_index + 1

            if sibling_index < len(level):
                siblings.append(level[sibling_index])
                positions.append(not is_right_node)
            else:
                siblings.append(level[current_index])
                positions.append(True)

            current_index //= 2

        return MerkleProof(
            leaf=self._layers[0][index],
            siblings=tuple(siblings),
            positions=tuple(positions),
            index=index,
        )

    def verify(self, proof: MerkleProof) -> bool:
        """Verify a proof against this tree's own root."""
        return verify_merkle_proof(self.root, proof, self._hasher)


def build_merkle_tree(leaves: Sequence[bytes], hasher: Hasher | None = None) -> MerkleTree:
    """Functional alias for MerkleTree.build."""
    return MerkleTree.build(leaves, hasher)


def verify_merkle_proof(root: bytes, proof: MerkleProof, hasher: Hasher | None = None) -> bool:
    """
    Verify a Merkle proof against an expected root.

    Recomputes the root from the leaf and its siblings. The position
    flags decide argument order, but hash_pair sorts its operands, so
    they do not change the result.

    Never raises: a malformed proof (mismatched sibling/position
    counts, non-bytes values) simply fails.

    Args:
        root: Expected Merkle root
        proof: MerkleProof to verify
        hasher: Hash function (defaults to keccak256)

    Returns:
        True if the proof is valid, False otherwise
    """
    h = hasher or DEFAULT_HASHER

    try:
        siblings = tuple(proof.siblings)
        positions = tuple(proof.positions)
        current_hash = proof.leaf
    except (AttributeError, TypeError):
        return False

    if len(siblings) != len(positions):
        return False
    if not isinstance(current_hash, (bytes, bytearray)) or not isinstance(root, (bytes, bytearray)):
        return False

    for sibling, is_right in zip(siblings, positions):
        if not isinstance(sibling, (bytes, bytearray)):
            return False
        if is_right:
            current_hash = hash_pair(bytes(current_hash), bytes(sibling), h)
        else:
            current_hash = hash_pair(bytes(sibling), bytes(current_hash), h)

    return bytes(current_hash) == bytes(root)


def compute_merkle_root(leaves: Sequence[bytes], hasher: Hasher | None = None) -> bytes:
    """
    Compute only the Merkle root of a sequence of leaf hashes.

    Same padding and pairing as MerkleTree.build, but each level is
    dropped as soon as the next one exists. Always equal to
    MerkleTree.build(leaves, hasher).root.

    Args:
        leaves: Sequence of 32-byte leaf hashes
        hasher: Hash function (defaults to keccak256)

    Returns:
        32-byte Merkle root

    Raises:
        EmptyInputError: If leaves is empty
    """
    if len(leaves) == 0:
        raise EmptyInputError("Cannot compute Merkle root with no leaves")

    if len(leaves) == 1:
        return leaves[0]

    h = hasher or DEFAULT_HASHER
    current_level: Sequence[bytes] = leaves
    while len(current_level) > 1:
        current_level = _next_level(current_level, h)

    return current_level[0]


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the depth of a Merkle tree with the given number of leaves.

    Depth counts pairing rounds: 0 for one leaf, ceil(log2(n)) otherwise.

    Raises:
        EmptyInputError: If num_leaves is not positive
    """
    if num_leaves <= 0:
        raise EmptyInputError(f"Tree depth undefined for {num_leaves} leaves")
    return (num_leaves - 1).bit_length()


__all__ = [
    "MerkleProof",
    "MerkleTree",
    "hash_pair",
    "build_merkle_tree",
    "verify_merkle_proof",
    "compute_merkle_root",
    "compute_tree_depth",
]
