"""
CLI command modules.
"""

from hashtree_cli.commands import prove, tree, verify

__all__ = ["prove", "tree", "verify"]
