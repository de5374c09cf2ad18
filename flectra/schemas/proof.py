"""
Flectra Schemas
File: proof.py

Purpose: Transport schemas for Merkle proofs and tree summaries.
Hashes travel as 0x-prefixed hex strings.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from flectra.crypto.hashing import HASH_SIZE, from_hex, to_hex
from flectra.merkle.merkle_tree import MerkleProof, MerkleTree


def _check_hash_hex(value: str) -> str:
    raw = from_hex(value)
    if len(raw) != HASH_SIZE:
        raise ValueError(f"Expected a {HASH_SIZE}-byte hash, got {len(raw)} bytes")
    return value.lower()


class MerkleProofModel(BaseModel):
    """
    Wire form of a MerkleProof.

    ``root`` is optional: a verifier may receive it separately.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    leaf: str = Field(..., description="0x-prefixed leaf hash")
    siblings: list[str] = Field(default_factory=list, description="Sibling hashes, leaf level first")
    positions: list[bool] = Field(default_factory=list, description="True if the sibling is on the right")
    index: int = Field(..., ge=0, description="Index of the leaf in the original leaf list")
    root: str | None = Field(default=None, description="Root the proof was generated against")

    @field_validator("leaf", "root")
    @classmethod
    def _validate_hash(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return _check_hash_hex(value)

    @field_validator("siblings")
    @classmethod
    def _validate_siblings(cls, value: list[str]) -> list[str]:
        return [_check_hash_hex(item) for item in value]

    @model_validator(mode="after")
    def _check_lengths(self) -> "MerkleProofModel":
        if len(self.siblings) != len(self.positions):
            raise ValueError(
                f"siblings ({len(self.siblings)}) and positions "
                f"({len(self.positions)}) must have the same length"
            )
        return self

    @classmethod
    def from_proof(cls, proof: MerkleProof, root: bytes | None = None) -> "MerkleProofModel":
        return cls(
            leaf=to_hex(proof.leaf),
            siblings=[to_hex(s) for s in proof.siblings],
            positions=list(proof.positions),
            index=proof.index,
            root=to_hex(root) if root is not None else None,
        )

    def to_proof(self) -> MerkleProof:
        return MerkleProof(
            leaf=from_hex(self.leaf),
            siblings=tuple(from_hex(s) for s in self.siblings),
            positions=tuple(self.positions),
            index=self.index,
        )

    @property
    def root_bytes(self) -> bytes | None:
        return from_hex(self.root) if self.root is not None else None


class MerkleTreeSummary(BaseModel):
    """Summary of a built tree for reports and CLI output."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    root: str = Field(..., description="0x-prefixed root hash")
    leaf_count: int = Field(..., ge=1)
    depth: int = Field(..., ge=0)
    hash_algorithm: str = Field(default="keccak256")

    @classmethod
    def from_tree(cls, tree: MerkleTree, hash_algorithm: str = "keccak256") -> "MerkleTreeSummary":
        return cls(
            root=to_hex(tree.root),
            leaf_count=tree.leaf_count,
            depth=tree.depth,
            hash_algorithm=hash_algorithm,
        )
