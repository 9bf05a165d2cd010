"""
Standard Merkle Tree
Order-independent Merkle tree over typed leaf values.

A StandardMerkleTree commits to a multiset of ABI-typed values:
- each value is hashed with standard_leaf_hash (double keccak of abi.encode)
- leaf hashes are sorted byte-wise, so the root does not depend on input order
- the sorted leaves are folded with make_merkle_tree (sorted-pair hashing)

The input order of values is kept: every value remembers the array index
of its leaf, and proofs are requested by input position or by value.

Trees are immutable once built. Proofs can be generated from several
threads at once.

Usage:
    tree = StandardMerkleTree.of(
        [["0x1111111111111111111111111111111111111111", 0]],
        ["address", "uint256"],
    )
    proof = tree.get_proof(0)
    assert StandardMerkleTree.verify(tree.root, tree.leaf_encoding, tree.values[0], proof)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Sequence, Union

from pydantic import ValidationError

from core.crypto.hashing import from_hex, to_hex
from core.merkle.leaf import standard_leaf_hash
from core.merkle.merkle_tree import (
    check_valid_merkle_node,
    get_proof,
    is_leaf_node,
    is_valid_merkle_tree,
    make_merkle_tree,
    process_proof,
    render_merkle_tree,
)
from core.schemas.artifacts import StandardTreeDump, TreeValue
from core.schemas.errors import (
    EmptyTreeError,
    IndexOutOfRange,
    InvalidMerkleNode,
    InvalidProof,
    LeafNotFound,
    TreeIntegrityError,
    UnsupportedFormat,
)
from core.schemas.versioning import TREE_DUMP_FORMAT, is_supported_tree_dump_format


logger = logging.getLogger(__name__)


LeafRef = Union[int, Sequence[Any]]


@dataclass(frozen=True)
class IndexedValue:
    """A leaf value and the array index of its leaf hash."""
    value: tuple[Any, ...]
    tree_index: int


def _decode_root(root: str | bytes) -> bytes:
    if isinstance(root, str):
        try:
            root = from_hex(root)
        except ValueError as e:
            raise InvalidMerkleNode(root) from e
    return check_valid_merkle_node(root)


def _decode_proof(proof: Sequence[str | bytes]) -> list[bytes]:
    nodes: list[bytes] = []
    for node in proof:
        if isinstance(node, str):
            try:
                node = from_hex(node)
            except ValueError as e:
                raise InvalidMerkleNode(node) from e
        nodes.append(node)
    return nodes


class StandardMerkleTree:
    """
    Merkle tree over ABI-typed values, compatible with OpenZeppelin's
    StandardMerkleTree and MerkleProof.verify.

    Build with StandardMerkleTree.of() or StandardMerkleTree.load();
    the constructor takes an already laid out tree.
    """

    def __init__(
        self,
        tree: Sequence[bytes],
        values: Sequence[IndexedValue],
        leaf_encoding: Sequence[str],
    ) -> None:
        if len(values) == 0:
            raise EmptyTreeError()

        for entry in values:
            if not is_leaf_node(tree, entry.tree_index):
                raise TreeIntegrityError(
                    f"Value {list(entry.value)!r} points at {entry.tree_index}, "
                    f"which is not a leaf of a {len(tree)}-node tree",
                    details={"tree_index": entry.tree_index},
                )

        self._tree: tuple[bytes, ...] = tuple(tree)
        self._values: tuple[IndexedValue, ...] = tuple(values)
        self._leaf_encoding: tuple[str, ...] = tuple(leaf_encoding)

        # duplicate values resolve to their first occurrence
        self._hash_lookup: dict[bytes, int] = {}
        for value_index, entry in enumerate(self._values):
            self._hash_lookup.setdefault(self._tree[entry.tree_index], value_index)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def of(
        cls,
        values: Sequence[Sequence[Any]],
        leaf_encoding: Sequence[str],
        *,
        sort_leaves: bool = True,
    ) -> "StandardMerkleTree":
        """
        Build a tree from leaf values.

        Args:
            values: Leaf tuples, e.g. [[address, amount], ...]
            leaf_encoding: Solidity types of the tuple fields
            sort_leaves: Sort leaf hashes before building (default). With
                False the tree follows input order and the root depends on it.

        Returns:
            The built tree

        Raises:
            SchemaMismatch: If any value does not match leaf_encoding
            EmptyTreeError: If values is empty
        """
        if len(values) == 0:
            raise EmptyTreeError()

        hashed_values = [
            (standard_leaf_hash(leaf_encoding, value), value_index)
            for value_index, value in enumerate(values)
        ]
        if sort_leaves:
            hashed_values.sort(key=lambda hv: hv[0])

        tree = make_merkle_tree([leaf for leaf, _ in hashed_values])

        indexed: list[IndexedValue | None] = [None] * len(values)
        for leaf_index, (_, value_index) in enumerate(hashed_values):
            indexed[value_index] = IndexedValue(
                value=tuple(values[value_index]),
                tree_index=len(tree) - leaf_index - 1,
            )

        logger.debug(
            "Built tree with %d leaves (%d nodes), root %s",
            len(values), len(tree), to_hex(tree[0]),
        )
        return cls(tree, indexed, leaf_encoding)  # type: ignore[arg-type]

    @classmethod
    def load(cls, data: Mapping[str, Any] | StandardTreeDump) -> "StandardMerkleTree":
        """
        Rebuild a tree from a dump produced by dump().

        The dump is trusted as-is; call validate() to re-derive its hashes.

        Raises:
            UnsupportedFormat: If the format tag is not "standard-v1"
            TreeIntegrityError: If the dump is malformed
        """
        if isinstance(data, StandardTreeDump):
            dump = data
        else:
            if not isinstance(data, Mapping):
                raise TreeIntegrityError(
                    f"Tree dump must be a JSON object, got {type(data).__name__}"
                )
            if not is_supported_tree_dump_format(data.get("format")):
                raise UnsupportedFormat(data.get("format"))
            try:
                dump = StandardTreeDump.model_validate(data)
            except ValidationError as e:
                raise TreeIntegrityError(f"Malformed tree dump: {e}") from e

        return cls(
            [from_hex(node) for node in dump.tree],
            [IndexedValue(tuple(v.value), v.tree_index) for v in dump.values],
            dump.leaf_encoding,
        )

    def dump(self) -> dict[str, Any]:
        """Serialize the whole tree to a JSON-compatible dict."""
        model = StandardTreeDump(
            format=TREE_DUMP_FORMAT,
            leaf_encoding=list(self._leaf_encoding),
            tree=[to_hex(node) for node in self._tree],
            values=[
                TreeValue(value=list(entry.value), tree_index=entry.tree_index)
                for entry in self._values
            ],
        )
        return model.model_dump(mode="json", by_alias=True)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def root(self) -> str:
        """Root hash as 0x-prefixed hex."""
        return to_hex(self._tree[0])

    @property
    def leaf_encoding(self) -> tuple[str, ...]:
        return self._leaf_encoding

    @property
    def values(self) -> tuple[tuple[Any, ...], ...]:
        """Leaf values in input order."""
        return tuple(entry.value for entry in self._values)

    def __len__(self) -> int:
        return len(self._values)

    def entries(self) -> Iterator[tuple[int, tuple[Any, ...]]]:
        """Iterate (input index, value) pairs."""
        for value_index, entry in enumerate(self._values):
            yield value_index, entry.value

    def render(self) -> str:
        return render_merkle_tree(self._tree)

    # ------------------------------------------------------------------
    # Leaves and proofs
    # ------------------------------------------------------------------

    def leaf_hash(self, value: Sequence[Any]) -> str:
        """Standard leaf hash of a value under this tree's encoding."""
        return to_hex(standard_leaf_hash(self._leaf_encoding, value))

    def leaf_lookup(self, value: Sequence[Any]) -> int:
        """
        Find the input position of a value.

        Raises:
            LeafNotFound: If the value is not in the tree
        """
        leaf = standard_leaf_hash(self._leaf_encoding, value)
        try:
            return self._hash_lookup[leaf]
        except KeyError:
            raise LeafNotFound(value) from None

    def _value_index(self, leaf: LeafRef) -> int:
        if isinstance(leaf, int) and not isinstance(leaf, bool):
            if not 0 <= leaf < len(self._values):
                raise IndexOutOfRange(leaf, len(self._values))
            return leaf
        return self.leaf_lookup(leaf)

    def get_proof(self, leaf: LeafRef) -> list[str]:
        """
        Inclusion proof for a leaf, given by input position or by value.

        Args:
            leaf: Index into the input values, or the value itself

        Returns:
            Sibling hashes, bottom-to-top, as 0x-prefixed hex

        Raises:
            IndexOutOfRange: If an index is not a valid position
            LeafNotFound: If a value is not in the tree
            InvalidProof: If the proof does not reproduce the root
        """
        value_index = self._value_index(leaf)
        tree_index = self._values[value_index].tree_index
        proof = get_proof(self._tree, tree_index)

        if process_proof(self._tree[tree_index], proof) != self._tree[0]:
            raise InvalidProof("Unable to prove value", leaf_index=value_index)

        return [to_hex(node) for node in proof]

    def verify_leaf(self, leaf: LeafRef, proof: Sequence[str | bytes]) -> bool:
        """Check a proof for a leaf of this tree against this tree's root."""
        value_index = self._value_index(leaf)
        leaf_hash = self._tree[self._values[value_index].tree_index]
        return process_proof(leaf_hash, _decode_proof(proof)) == self._tree[0]

    @staticmethod
    def verify(
        root: str | bytes,
        leaf_encoding: Sequence[str],
        value: Sequence[Any],
        proof: Sequence[str | bytes],
    ) -> bool:
        """
        Check that value is committed to by root, without the tree.

        Recomputes the leaf hash, folds the proof with sorted-pair hashing
        and compares the result with root.

        Raises:
            SchemaMismatch: If value does not match leaf_encoding
            InvalidMerkleNode: If root or a proof node is not a 32-byte hash
        """
        expected = _decode_root(root)
        leaf = standard_leaf_hash(leaf_encoding, value)
        return process_proof(leaf, _decode_proof(proof)) == expected

    # ------------------------------------------------------------------
    # Integrity
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """
        Re-derive every leaf and internal hash.

        Raises:
            TreeIntegrityError: On the first mismatch
        """
        for value_index, entry in enumerate(self._values):
            expected = standard_leaf_hash(self._leaf_encoding, entry.value)
            if self._tree[entry.tree_index] != expected:
                raise TreeIntegrityError(
                    f"Stored leaf for value {value_index} does not match its hash",
                    details={"value_index": value_index, "tree_index": entry.tree_index},
                )
        if not is_valid_merkle_tree(self._tree):
            raise TreeIntegrityError("Merkle tree is invalid")

    def __repr__(self) -> str:
        return f"StandardMerkleTree(root={self.root!r}, leaves={len(self)})"


def verify_proof(
    value: Sequence[Any],
    proof: Sequence[str | bytes],
    expected_root: str | bytes,
    leaf_encoding: Sequence[str],
) -> bool:
    """Functional form of StandardMerkleTree.verify."""
    return StandardMerkleTree.verify(expected_root, leaf_encoding, value, proof)


__all__ = [
    "IndexedValue",
    "StandardMerkleTree",
    "verify_proof",
]
