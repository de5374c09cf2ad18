"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    flectra hash-leaf "<payload>" [--hex] [--json]
    flectra root <leaf ...> | --file PATH [--json]
    flectra prove <index> <leaf ...> | --file PATH [--out PATH] [--json]
    flectra verify <proof_path> [--root HEX] [--json]
    flectra config --show

Environment Variables:
    FLECTRA_HASH_ALGORITHM      Hash algorithm: keccak256 (default) or sha256
    FLECTRA_LOG_LEVEL           Log level (default: INFO)
    FLECTRA_LOG_FILE            Optional log file path
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from flectra.config.runtime import RuntimeConfig
from flectra.crypto.hashing import HASHERS
from flectra.schemas.errors import FlectraException
from flectra_cli.commands import tree, verify


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from a YAML file and/or environment.

    Environment variables override file settings.
    """
    if config_path is not None:
        return RuntimeConfig.from_yaml(config_path).with_env_overrides()

    default_paths = [
        Path.cwd() / "flectra.yaml",
        Path.home() / ".config" / "flectra" / "config.yaml",
    ]
    for default_path in default_paths:
        if default_path.exists():
            return RuntimeConfig.from_yaml(default_path).with_env_overrides()

    return RuntimeConfig.from_env()


def _add_leaf_source(sub: argparse.ArgumentParser) -> None:
    sub.add_argument(
        "leaves",
        nargs="*",
        help="0x-prefixed leaf hashes, in order",
    )
    sub.add_argument(
        "--file", "-f",
        type=str,
        default=None,
        help="File with leaf hashes (JSON list or one per line)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="flectra",
        description="Flectra Merkle CLI - Build commitment roots, generate and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: ./flectra.yaml or ~/.config/flectra/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--hash",
        dest="hash_override",
        type=str,
        default=None,
        choices=sorted(HASHERS),
        help="Hash algorithm (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- hash-leaf command ---
    hash_parser = subparsers.add_parser(
        "hash-leaf",
        help="Double-hash a payload into a leaf",
        description="Compute H(H(payload)) for a payload.",
    )
    hash_parser.add_argument("payload", type=str, help="Payload (UTF-8 text, or hex with --hex)")
    hash_parser.add_argument("--hex", action="store_true", default=False, help="Treat payload as 0x-prefixed hex")
    hash_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    hash_parser.set_defaults(func=tree.hash_leaf_cmd)

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Compute the Merkle root of a leaf sequence",
        description="Build a tree over the given leaves and print its root and depth.",
    )
    _add_leaf_source(root_parser)
    root_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    root_parser.set_defaults(func=tree.root_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate an inclusion proof for one leaf",
        description="Build a tree over the given leaves and emit a proof document for one index.",
    )
    prove_parser.add_argument("index", type=int, help="0-based index of the leaf to prove")
    _add_leaf_source(prove_parser)
    prove_parser.add_argument("--out", "-o", type=str, default=None, help="Write the proof document to this path")
    prove_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    prove_parser.set_defaults(func=tree.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof document offline",
        description="Recompute the root from a proof document and compare it with the expected root.",
    )
    verify_parser.add_argument("proof_path", type=str, help="Path to proof JSON document")
    verify_parser.add_argument("--root", type=str, default=None, help="Expected root (default: root in the proof)")
    verify_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    verify_parser.add_argument("--debug", action="store_true", default=False, help="Print tracebacks on errors")
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Show the effective configuration",
        description="Display configuration after file and environment overrides.",
    )
    config_parser.add_argument("--show", action="store_true", default=False, help="Show current configuration")
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.show:
        config_dict = args.runtime_config.to_dict()
        config_dict["merkle"]["hash_algorithm"] = args.hash_algorithm
        print(json.dumps(config_dict, indent=2))
        return EXIT_SUCCESS

    print("Usage: flectra config --show")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (FileNotFoundError, FlectraException) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.logging.level
    try:
        setup_logging(level=log_level, log_file=config.logging.log_file)
    except OSError as e:
        print(f"Error opening log file: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Attach config to args for commands to use
    args.runtime_config = config
    args.hash_algorithm = args.hash_override or config.merkle.hash_algorithm
    args.hasher = HASHERS[args.hash_algorithm]

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
