"""
whitelist-merkle CLI

Command-line interface for building whitelist Merkle roots and proofs.

Usage:
    python -m whitelist_cli root whitelist.txt
    python -m whitelist_cli proofs whitelist.txt --out proofs.json
    python -m whitelist_cli verify --address 0x.. --root 0x.. --proofs proofs.json
    python -m whitelist_cli config --init
"""

__version__ = "0.1.0"
