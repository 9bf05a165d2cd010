"""
Core cryptographic utilities.

Keccak-256 hashing and hex helpers shared by the Merkle tree code.
"""
from .hashing import (
    keccak256,
    hash_pair,
    to_hex,
    from_hex,
)

__all__ = [
    "keccak256",
    "hash_pair",
    "to_hex",
    "from_hex",
]
