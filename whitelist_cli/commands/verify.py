"""
CLI Verify Command

Check that an address belongs to a published Merkle root, offline.
The proof comes from a proofs file, a tree dump, or the command line.

Usage:
    whitelist-merkle verify --address 0x.. --root 0x.. --proofs proofs.json
    whitelist-merkle verify --address 0x.. --tree tree.json
    whitelist-merkle verify --address 0x.. --root 0x.. --proof 0x.. --proof 0x..
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from core.merkle.standard_tree import StandardMerkleTree
from core.schemas.errors import LeafNotFound
from core.whitelist.io import find_proof, load_proofs, load_tree
from whitelist_cli.config import CLIConfig


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    address: str = ""
    amount: Any = None
    root: str = ""
    proof_source: str = ""
    proof: list[str] = field(default_factory=list)
    valid: bool = False
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["amount"] is None:
            del d["amount"]
        if not d["errors"]:
            del d["errors"]
        return d


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"address: {summary.address}")
    if summary.amount is not None:
        print(f"amount: {summary.amount}")
    print(f"root: {summary.root}")
    print(f"proof_source: {summary.proof_source}")
    print(f"proof_length: {len(summary.proof)}")
    print(f"valid: {str(summary.valid).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors:
            print(f"  ✗ {err}")


def print_summary_json(summary: VerifySummary) -> None:
    """Print summary as JSON."""
    print(json.dumps(summary.to_dict(), indent=2))


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 = valid, 2 = not valid, 1 = usage/runtime error)
    """
    config: CLIConfig = args.cli_config
    address = args.address.strip()
    amount = args.amount if args.amount is not None else config.amount
    leaf_encoding = list(config.leaf_encoding)
    root = args.root

    summary = VerifySummary(address=address)
    proof: list[str] | None = list(args.proof) if args.proof else None
    tree: StandardMerkleTree | None = None

    if args.tree:
        tree = load_tree(args.tree)
        leaf_encoding = list(tree.leaf_encoding)
        root = root or tree.root

    if root is None:
        print("Error: --root is required unless --tree is given", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if len(leaf_encoding) == 1:
        value: list[Any] = [address]
    else:
        value = [address, amount]
        summary.amount = amount
    summary.root = root

    if proof is not None:
        summary.proof_source = "command line"
    elif args.proofs:
        summary.proof_source = str(args.proofs)
        entry = find_proof(load_proofs(args.proofs), address)
        if entry is None:
            summary.errors.append(f"Address not found in {args.proofs}")
        else:
            proof = list(entry.proof)
    elif tree is not None:
        summary.proof_source = str(args.tree)
        try:
            proof = tree.get_proof(value)
        except LeafNotFound as e:
            summary.errors.append(e.message)
    else:
        print("Error: one of --proof, --proofs or --tree is required", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if proof is not None:
        summary.proof = proof
        summary.valid = StandardMerkleTree.verify(root, leaf_encoding, value, proof)
        if not summary.valid:
            summary.errors.append("Proof does not reproduce the root")

    if args.json:
        print_summary_json(summary)
    else:
        print_summary_human(summary)

    if summary.valid:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
