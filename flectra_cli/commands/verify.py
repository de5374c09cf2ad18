"""
CLI Verify Command

Verify a proof document offline against a root.

The root comes from --root when given, otherwise from the proof
document itself.

Usage:
    flectra verify proof.json [--root 0x...] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from flectra.crypto.hashing import from_hex
from flectra.merkle.merkle_tree import verify_merkle_proof
from flectra.schemas.proof import MerkleProofModel


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    root: str = ""
    leaf: str = ""
    index: int = 0
    depth: int = 0
    ok: bool = False
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["errors"]:
            del d["errors"]
        return d


def load_proof(path: Path) -> MerkleProofModel:
    """Load and validate a proof document."""
    if not path.exists():
        raise FileNotFoundError(f"Proof file not found: {path}")
    return MerkleProofModel.model_validate_json(path.read_text())


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"proof: {summary.proof_path}")
    print(f"root: {summary.root}")
    print(f"leaf: {summary.leaf}")
    print(f"index: {summary.index}")
    print(f"depth: {summary.depth}")
    print(f"ok: {str(summary.ok).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors:
            print(f"  ✗ {err}")


def verify_cmd(args: Namespace) -> int:
    """Handle verify command."""
    proof_path = Path(args.proof_path)
    logger.info(f"Verifying proof: {proof_path}")

    try:
        model = load_proof(proof_path)
        root_hex = args.root or model.root
        if root_hex is None:
            raise ValueError("No root given: pass --root or include 'root' in the proof")
        root = from_hex(root_hex)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        if args.json:
            print(json.dumps({"ok": False, "error": str(e)}, indent=2))
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    proof = model.to_proof()
    summary = VerifySummary(
        proof_path=str(proof_path),
        root=root_hex.lower(),
        leaf=model.leaf,
        index=model.index,
        depth=proof.depth,
        ok=verify_merkle_proof(root, proof, args.hasher),
    )
    if not summary.ok:
        summary.errors.append("Recomputed root does not match expected root")

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if summary.ok else EXIT_VERIFICATION_FAILED
