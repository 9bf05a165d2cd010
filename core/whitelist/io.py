"""
Whitelist IO
File: io.py

Purpose: Read address lists and write/read the proofs file and tree dump.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Sequence

from pydantic import TypeAdapter, ValidationError

from core.merkle.standard_tree import StandardMerkleTree
from core.schemas.artifacts import ProofEntry
from core.schemas.errors import WhitelistIOError


logger = logging.getLogger(__name__)


# Default file names
WHITELIST_FILE = "whitelist.txt"
PROOFS_FILE = "proofs.json"
TREE_FILE = "tree.json"

_PROOF_ENTRIES = TypeAdapter(list[ProofEntry])


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise WhitelistIOError(f"Cannot read {path}: {e}", path=str(path)) from e


def _write_json_file(path: Path, obj: Any) -> int:
    """Write object as indented JSON, return size in bytes."""
    content = json.dumps(obj, indent=2) + "\n"
    data = content.encode("utf-8")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise WhitelistIOError(f"Cannot write {path}: {e}", path=str(path)) from e
    return len(data)


def _read_json_file(path: Path) -> Any:
    text = _read_text(path)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise WhitelistIOError(f"Invalid JSON in {path}: {e}", path=str(path)) from e


def parse_whitelist(lines: Iterable[str], *, unique: bool = False) -> list[str]:
    """
    Turn raw lines into addresses.

    Rules:
        - surrounding whitespace (including CR from CRLF files) is stripped
        - blank lines are skipped
        - with unique=True, repeats are dropped case-insensitively,
          keeping the first spelling and position

    Addresses are not validated here; that happens when leaves are encoded.
    """
    addresses: list[str] = []
    seen: set[str] = set()
    for line in lines:
        address = line.strip()
        if not address:
            continue
        if unique:
            key = address.lower()
            if key in seen:
                continue
            seen.add(key)
        addresses.append(address)
    return addresses


def read_whitelist(path: str | Path, *, unique: bool = False) -> list[str]:
    """
    Read a whitelist file with one address per line.

    Raises:
        WhitelistIOError: If the file cannot be read
    """
    path = Path(path)
    lines = _read_text(path).splitlines()
    addresses = parse_whitelist(lines, unique=unique)
    logger.info(f"Read {len(addresses)} addresses from {path}")
    if unique and len(addresses) < sum(1 for line in lines if line.strip()):
        logger.warning(f"Dropped duplicate addresses from {path}")
    return addresses


def build_leaf_values(addresses: Sequence[str], amount: Any = 0) -> list[list[Any]]:
    """
    Pair every address with the same amount: [[address, amount], ...].

    With amount=None the leaves are address-only: [[address], ...].
    """
    if amount is None:
        return [[address] for address in addresses]
    return [[address, amount] for address in addresses]


def write_proofs(path: str | Path, entries: Sequence[ProofEntry]) -> Path:
    """
    Write the proofs file: a JSON array of {address, proof}.

    Raises:
        WhitelistIOError: If the file cannot be written
    """
    path = Path(path)
    size = _write_json_file(path, [entry.model_dump(mode="json") for entry in entries])
    logger.info(f"Wrote {len(entries)} proofs to {path} ({size} bytes)")
    return path


def load_proofs(path: str | Path) -> list[ProofEntry]:
    """
    Load a proofs file written by write_proofs().

    Raises:
        WhitelistIOError: If the file is unreadable or malformed
    """
    path = Path(path)
    data = _read_json_file(path)
    try:
        return _PROOF_ENTRIES.validate_python(data)
    except ValidationError as e:
        raise WhitelistIOError(f"Malformed proofs file {path}: {e}", path=str(path)) from e


def find_proof(entries: Sequence[ProofEntry], address: str) -> ProofEntry | None:
    """Find the entry for an address, comparing case-insensitively."""
    key = address.strip().lower()
    for entry in entries:
        if entry.address.lower() == key:
            return entry
    return None


def save_tree(path: str | Path, tree: StandardMerkleTree) -> Path:
    """Write the full tree dump (standard-v1 format)."""
    path = Path(path)
    size = _write_json_file(path, tree.dump())
    logger.info(f"Wrote tree dump to {path} ({size} bytes)")
    return path


def load_tree(path: str | Path) -> StandardMerkleTree:
    """
    Load a tree dump written by save_tree() or by OpenZeppelin's
    StandardMerkleTree.dump().
    """
    return StandardMerkleTree.load(_read_json_file(Path(path)))


__all__ = [
    "WHITELIST_FILE",
    "PROOFS_FILE",
    "TREE_FILE",
    "parse_whitelist",
    "read_whitelist",
    "build_leaf_values",
    "write_proofs",
    "load_proofs",
    "find_proof",
    "save_tree",
    "load_tree",
]
