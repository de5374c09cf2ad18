"""
Flectra CLI

Command-line interface for the Merkle commitment engine.

Usage:
    python -m flectra_cli hash-leaf "<payload>"
    python -m flectra_cli root 0x... 0x... 0x...
    python -m flectra_cli prove 2 --file leaves.txt --out proof.json
    python -m flectra_cli verify proof.json --root 0x...
    python -m flectra_cli config --show
"""

__version__ = "0.1.0"
