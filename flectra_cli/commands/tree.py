"""
CLI Tree Commands

Hash payloads into leaves, compute roots and generate proofs.

Usage:
    flectra hash-leaf "<payload>" [--hex] [--json]
    flectra root <leaf ...> | --file PATH [--json]
    flectra prove <index> <leaf ...> | --file PATH [--out PATH] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from flectra.crypto.hashing import HASH_SIZE, from_hex, hash_leaf, to_hex
from flectra.merkle.merkle_tree import MerkleTree
from flectra.schemas.errors import FlectraException, InvalidHashLengthError
from flectra.schemas.proof import MerkleProofModel, MerkleTreeSummary


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def load_leaves(args: Namespace) -> list[bytes]:
    """
    Collect leaf hashes from positional arguments or a leaves file.

    The file holds either a JSON list of hex strings or one hex
    string per line (blank lines and '#' comments ignored).

    Raises:
        InvalidHashLengthError: If a decoded leaf is not 32 bytes
    """
    values: list[str] = list(getattr(args, "leaves", None) or [])

    leaves_file = getattr(args, "file", None)
    if leaves_file:
        path = Path(leaves_file)
        if not path.exists():
            raise FileNotFoundError(f"Leaves file not found: {path}")
        text = path.read_text()
        if text.lstrip().startswith("["):
            entries = json.loads(text)
            if not isinstance(entries, list) or not all(isinstance(e, str) for e in entries):
                raise ValueError(f"Leaves file must be a JSON list of hex strings: {path}")
            values.extend(entries)
        else:
            for line in text.splitlines():
                line = line.strip()
                if line and not line.startswith("#"):
                    values.append(line)

    logger.debug(f"Loaded {len(values)} leaves")

    leaves: list[bytes] = []
    for position, value in enumerate(values):
        leaf = from_hex(value)
        if len(leaf) != HASH_SIZE:
            raise InvalidHashLengthError(len(leaf), HASH_SIZE, details={"position": position})
        leaves.append(leaf)
    return leaves


def _print_error(message: str, as_json: bool) -> None:
    if as_json:
        print(json.dumps({"ok": False, "error": message}, indent=2))
    else:
        print(f"Error: {message}", file=sys.stderr)


def hash_leaf_cmd(args: Namespace) -> int:
    """Handle hash-leaf command."""
    try:
        payload = from_hex(args.payload) if args.hex else args.payload.encode("utf-8")
    except ValueError as e:
        _print_error(str(e), args.json)
        return EXIT_RUNTIME_ERROR

    leaf = to_hex(hash_leaf(payload, args.hasher))
    if args.json:
        print(json.dumps({"leaf": leaf, "hash_algorithm": args.hash_algorithm}, indent=2))
    else:
        print(leaf)
    return EXIT_SUCCESS


def root_cmd(args: Namespace) -> int:
    """Handle root command."""
    try:
        leaves = load_leaves(args)
        tree = MerkleTree.build(leaves, args.hasher)
    except (FlectraException, FileNotFoundError, ValueError) as e:
        _print_error(str(e), args.json)
        return EXIT_RUNTIME_ERROR

    summary = MerkleTreeSummary.from_tree(tree, args.hash_algorithm)
    logger.info(f"Computed root over {summary.leaf_count} leaves")

    if args.json:
        print(summary.model_dump_json(indent=2))
    else:
        print(f"root: {summary.root}")
        print(f"leaves: {summary.leaf_count}")
        print(f"depth: {summary.depth}")
    return EXIT_SUCCESS


def prove_cmd(args: Namespace) -> int:
    """Handle prove command."""
    try:
        leaves = load_leaves(args)
        tree = MerkleTree.build(leaves, args.hasher)
        proof = tree.proof(args.index)
    except (FlectraException, FileNotFoundError, ValueError) as e:
        _print_error(str(e), args.json)
        return EXIT_RUNTIME_ERROR

    model = MerkleProofModel.from_proof(proof, root=tree.root)
    document = model.model_dump_json(indent=2)

    if args.out:
        Path(args.out).write_text(document)
        logger.info(f"Wrote proof for leaf {proof.index} to {args.out}")

    if args.json or not args.out:
        print(document)
    else:
        print(f"proof: {args.out}")
        print(f"root: {model.root}")
        print(f"index: {model.index}")
        print(f"depth: {proof.depth}")
    return EXIT_SUCCESS
