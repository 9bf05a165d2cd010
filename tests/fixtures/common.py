"""
Common test factories.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence


# EIP-55 checksummed addresses from the EIP test vectors
CHECKSUMMED_ADDRESSES = [
    "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
    "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
    "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
    "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
]

# Same as the first vector with the case of its last letter flipped
BAD_CHECKSUM_ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAeD"


def make_address(n: int) -> str:
    """A valid lowercase address derived from n (n >= 1)."""
    return "0x" + f"{n:040x}"


def make_addresses(count: int, start: int = 1) -> list[str]:
    return [make_address(i) for i in range(start, start + count)]


def make_leaf_values(addresses: Sequence[str], amount: Any = 0) -> list[list[Any]]:
    return [[address, amount] for address in addresses]


def write_whitelist(path: Path, addresses: Sequence[str], newline: str = "\n") -> Path:
    path.write_text(newline.join(addresses) + newline, encoding="utf-8")
    return path
