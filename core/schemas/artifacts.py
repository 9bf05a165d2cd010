"""
Schemas
File: artifacts.py

Purpose: Models for the files this tool writes: the per-address proofs
file and the full tree dump.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .versioning import TREE_DUMP_FORMAT


def _check_hex32(value: str) -> str:
    if not isinstance(value, str) or not value.startswith("0x") or len(value) != 66:
        raise ValueError(f"expected 0x-prefixed 32-byte hex string, got {value!r}")
    if len(bytes.fromhex(value[2:])) != 32:
        raise ValueError(f"expected 0x-prefixed 32-byte hex string, got {value!r}")
    return value.lower()


class ProofEntry(BaseModel):
    """One whitelisted address together with its inclusion proof."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    address: str = Field(..., min_length=1, description="Address as read from the whitelist")
    proof: list[str] = Field(
        default_factory=list,
        description="Sibling hashes, bottom-to-top, 0x-prefixed hex",
    )

    @field_validator("proof")
    @classmethod
    def _proof_nodes_are_hashes(cls, v: list[str]) -> list[str]:
        return [_check_hex32(node) for node in v]


class TreeValue(BaseModel):
    """A leaf value in input order and the array index of its leaf."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    value: list[Any]
    tree_index: int = Field(..., ge=0, alias="treeIndex")


class StandardTreeDump(BaseModel):
    """
    Flat JSON dump of a standard Merkle tree.

    Field names follow the OpenZeppelin merkle-tree dump so the file can
    be loaded by either implementation.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    format: Literal["standard-v1"] = Field(default=TREE_DUMP_FORMAT)
    leaf_encoding: list[str] = Field(..., min_length=1, alias="leafEncoding")
    tree: list[str] = Field(..., min_length=1)
    values: list[TreeValue] = Field(..., min_length=1)

    @field_validator("tree")
    @classmethod
    def _tree_nodes_are_hashes(cls, v: list[str]) -> list[str]:
        return [_check_hex32(node) for node in v]


__all__ = [
    "ProofEntry",
    "TreeValue",
    "StandardTreeDump",
]
