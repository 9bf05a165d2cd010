"""
CLI Proofs Command

Build the tree and write every address's inclusion proof to a JSON file.

Usage:
    whitelist-merkle proofs [whitelist.txt] [--out proofs.json] [--tree-out tree.json] [--workers N]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass
from typing import Any

from core.merkle.merkle_proofs import MerkleProver
from core.whitelist.io import save_tree, write_proofs
from whitelist_cli.commands.root import build_whitelist_tree
from whitelist_cli.config import CLIConfig


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class ProofsSummary:
    """Summary of proof generation for CLI output."""
    input_path: str = ""
    root: str = ""
    leaves: int = 0
    proofs_path: str = ""
    tree_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["tree_path"] is None:
            del d["tree_path"]
        return d


def print_summary_human(summary: ProofsSummary) -> None:
    """Print summary in human-readable format."""
    print(f"Merkle Root: {summary.root}")
    print(f"Leaves: {summary.leaves}")
    print(f"Proofs: {summary.proofs_path}")
    if summary.tree_path:
        print(f"Tree: {summary.tree_path}")


def print_summary_json(summary: ProofsSummary) -> None:
    """Print summary as JSON."""
    print(json.dumps(summary.to_dict(), indent=2))


def proofs_cmd(args: Namespace) -> int:
    """
    Execute the proofs command.

    Nothing is written unless the whole tree builds and every proof
    is generated.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config: CLIConfig = args.cli_config
    out_path = args.out or config.proofs_out
    tree_out = args.tree_out or config.tree_out
    workers = args.workers if args.workers is not None else config.workers

    tree, input_path = build_whitelist_tree(args)
    entries = MerkleProver.prove_all(tree, workers=workers)

    write_proofs(out_path, entries)
    if tree_out:
        save_tree(tree_out, tree)

    summary = ProofsSummary(
        input_path=str(input_path),
        root=tree.root,
        leaves=len(tree),
        proofs_path=str(out_path),
        tree_path=str(tree_out) if tree_out else None,
    )

    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS
