"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m whitelist_cli root [INPUT] [--amount N] [--unique] [--json] [--render]
    python -m whitelist_cli proofs [INPUT] [--out PATH] [--tree-out PATH] [--workers N] [--json]
    python -m whitelist_cli verify --address ADDR (--root ROOT | --tree PATH) [--proofs PATH | --proof HASH ...]
    python -m whitelist_cli config --init

Environment Variables:
    WHITELIST_MERKLE_INPUT          Whitelist file (default: whitelist.txt)
    WHITELIST_MERKLE_AMOUNT         Amount paired with every address (default: 0)
    WHITELIST_MERKLE_LEAF_ENCODING  Comma-separated leaf types (default: address,uint256)
    WHITELIST_MERKLE_PROOFS_OUT     Proofs file (default: proofs.json)
    WHITELIST_MERKLE_WORKERS        Proof generation threads (default: 1)
    WHITELIST_MERKLE_LOG_LEVEL      Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.schemas.errors import WhitelistMerkleException
from whitelist_cli import __version__
from whitelist_cli.commands import proofs, root, verify
from whitelist_cli.config import (
    DEFAULT_CONFIG_FILE,
    get_default_config_template,
    load_config,
)


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
        force=True,
    )


def _add_build_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "input",
        type=str,
        nargs="?",
        default=None,
        help="Whitelist file, one address per line (default: from config or whitelist.txt)",
    )
    parser.add_argument(
        "--amount",
        type=lambda s: int(s, 0),
        default=None,
        help="Amount paired with every address (default: from config or 0)",
    )
    parser.add_argument(
        "--unique",
        action="store_true",
        default=False,
        help="Drop repeated addresses (case-insensitive) before building",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on error",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="whitelist-merkle",
        description="Build whitelist Merkle roots and proofs for on-chain claim verification.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to configuration file (default: ./{DEFAULT_CONFIG_FILE} or ~/.config/whitelist-merkle/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Print the Merkle root of a whitelist",
        description="Build the Merkle tree over (address, amount) leaves and print its root and leaf count.",
    )
    _add_build_arguments(root_parser)
    root_parser.add_argument(
        "--render",
        action="store_true",
        default=False,
        help="Also draw the whole tree",
    )
    root_parser.set_defaults(func=root.root_cmd)

    # --- proofs command ---
    proofs_parser = subparsers.add_parser(
        "proofs",
        help="Write the inclusion proof of every address",
        description="Build the Merkle tree and write a JSON array of {address, proof}.",
    )
    _add_build_arguments(proofs_parser)
    proofs_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Output path for the proofs file (default: from config or proofs.json)",
    )
    proofs_parser.add_argument(
        "--tree-out",
        type=str,
        default=None,
        help="Also write the full tree dump to this path",
    )
    proofs_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Threads used for proof generation (default: from config or 1)",
    )
    proofs_parser.set_defaults(func=proofs.proofs_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an address against a Merkle root",
        description="Recompute the root from an address and its proof, offline.",
    )
    verify_parser.add_argument(
        "--address", "-a",
        type=str,
        required=True,
        help="Address to verify",
    )
    verify_parser.add_argument(
        "--amount",
        type=lambda s: int(s, 0),
        default=None,
        help="Amount paired with the address (default: from config or 0)",
    )
    verify_parser.add_argument(
        "--root", "-r",
        type=str,
        default=None,
        help="Expected Merkle root (default: root of --tree)",
    )
    verify_parser.add_argument(
        "--proofs",
        type=str,
        default=None,
        help="Proofs file to take the address's proof from",
    )
    verify_parser.add_argument(
        "--proof",
        type=str,
        action="append",
        default=None,
        help="Proof node (repeat for each sibling, bottom-to-top)",
    )
    verify_parser.add_argument(
        "--tree",
        type=str,
        default=None,
        help="Tree dump providing the root, leaf encoding and proof",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on error",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default=DEFAULT_CONFIG_FILE,
        help=f"Path for config file (default: {DEFAULT_CONFIG_FILE})",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template(), encoding="utf-8")
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (WHITELIST_MERKLE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: whitelist-merkle config [--init|--show]")
    print("  --init  Create a template configuration file")
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

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except WhitelistMerkleException as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        if getattr(args, "json", False):
            print(json.dumps({"error": e.to_error_model().model_dump()}, indent=2))
        else:
            print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
