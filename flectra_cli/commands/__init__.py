"""
CLI command modules.
"""

from flectra_cli.commands import tree, verify

__all__ = ["tree", "verify"]
