"""
CLI command modules.
"""

from whitelist_cli.commands import root, proofs, verify

__all__ = ["root", "proofs", "verify"]
