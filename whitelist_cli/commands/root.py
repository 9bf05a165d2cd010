"""
CLI Root Command

Build the Merkle tree over a whitelist and print its root.

Usage:
    whitelist-merkle root [whitelist.txt] [--amount N] [--unique] [--json] [--render]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from core.merkle.standard_tree import StandardMerkleTree
from core.whitelist.io import build_leaf_values, read_whitelist
from whitelist_cli.config import CLIConfig


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class RootSummary:
    """Summary of tree construction for CLI output."""
    input_path: str = ""
    root: str = ""
    leaves: int = 0
    leaf_encoding: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def resolve_options(args: Namespace) -> tuple[str, Any, bool, CLIConfig]:
    """Merge command-line options over the loaded configuration."""
    config: CLIConfig = args.cli_config
    input_path = getattr(args, "input", None) or config.input_path
    amount = getattr(args, "amount", None)
    if amount is None:
        amount = config.amount
    unique = bool(getattr(args, "unique", False)) or config.unique
    return input_path, amount, unique, config


def build_whitelist_tree(args: Namespace) -> tuple[StandardMerkleTree, str]:
    """
    Read the whitelist named by args/config and build its tree.

    Raises:
        WhitelistIOError: If the whitelist cannot be read
        SchemaMismatch: If an address (or the amount) does not encode
        EmptyTreeError: If the whitelist has no addresses
    """
    input_path, amount, unique, config = resolve_options(args)

    addresses = read_whitelist(input_path, unique=unique)
    if len(config.leaf_encoding) == 1:
        amount = None
    values = build_leaf_values(addresses, amount)

    tree = StandardMerkleTree.of(values, config.leaf_encoding, sort_leaves=config.sort_leaves)
    logger.info(f"Merkle root {tree.root} over {len(tree)} leaves")
    return tree, input_path


def print_summary_human(summary: RootSummary) -> None:
    """Print summary in human-readable format."""
    print(f"Merkle Root: {summary.root}")
    print(f"Leaves: {summary.leaves}")


def print_summary_json(summary: RootSummary) -> None:
    """Print summary as JSON."""
    print(json.dumps(summary.to_dict(), indent=2))


def root_cmd(args: Namespace) -> int:
    """
    Execute the root command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    tree, input_path = build_whitelist_tree(args)

    summary = RootSummary(
        input_path=str(input_path),
        root=tree.root,
        leaves=len(tree),
        leaf_encoding=list(tree.leaf_encoding),
    )

    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)
        if args.render:
            print()
            print(tree.render())

    return EXIT_SUCCESS
