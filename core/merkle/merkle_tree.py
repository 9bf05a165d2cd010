"""
Merkle Tree Implementation
Array-backed Merkle tree construction, proof generation, and verification.

This module provides:
- Deterministic tree construction over pre-hashed leaves
- Proof generation for any tree index
- Proof processing (root reconstruction)
- Structural validation and ASCII rendering

Canonical Commitment Rules (Hard Contracts):
1. Parent hashing: parent = keccak256(min(a, b) || max(a, b))
2. Layout: a complete binary tree stored in an array of 2n - 1 nodes.
   Node 0 is the root, children of node i are 2i + 1 and 2i + 2.
3. Leaves occupy the tail of the array in reverse order: leaf k is stored
   at index len(tree) - 1 - k.
4. Odd levels: no duplication and no promotion. The heap layout fixes
   every pairing, an unpaired node meets its sibling one level higher.
5. Empty leaves: rejected with EmptyTreeError
6. Single leaf: tree = [leaf], root = leaf, proof = []

Determinism Notes:
- This module never sorts leaves - it trusts input order
- Sorting for order independence happens in StandardMerkleTree
"""
from __future__ import annotations

from typing import Sequence

from core.crypto.hashing import hash_pair, to_hex
from core.schemas.errors import EmptyTreeError, IndexOutOfRange, InvalidMerkleNode


HASH_LENGTH = 32


def is_valid_merkle_node(node: object) -> bool:
    """Check that a node is a 32-byte hash."""
    return isinstance(node, bytes) and len(node) == HASH_LENGTH


def check_valid_merkle_node(node: object) -> bytes:
    """Return the node unchanged, or raise InvalidMerkleNode."""
    if not is_valid_merkle_node(node):
        raise InvalidMerkleNode(node)
    return node  # type: ignore[return-value]


def left_child_index(i: int) -> int:
    return 2 * i + 1


def right_child_index(i: int) -> int:
    return 2 * i + 2


def parent_index(i: int) -> int:
    if i <= 0:
        raise ValueError("Root has no parent")
    return (i - 1) // 2


def sibling_index(i: int) -> int:
    if i <= 0:
        raise ValueError("Root has no siblings")
    # left children sit at odd indices
    return i + 1 if i % 2 == 1 else i - 1


def is_tree_node(tree: Sequence[bytes], i: int) -> bool:
    return 0 <= i < len(tree)


def is_internal_node(tree: Sequence[bytes], i: int) -> bool:
    return is_tree_node(tree, left_child_index(i))


def is_leaf_node(tree: Sequence[bytes], i: int) -> bool:
    return is_tree_node(tree, i) and not is_internal_node(tree, i)


def make_merkle_tree(leaves: Sequence[bytes]) -> tuple[bytes, ...]:
    """
    Build an array-backed Merkle tree from leaf hashes.

    Algorithm:
    1. Allocate 2n - 1 slots
    2. Place leaf k at slot len - 1 - k
    3. Fill internal slots from the back: tree[i] = hash_pair(left, right)

    Example: [a, b, c] is laid out as [r, x, c, b, a]
             with x = hash_pair(b, a) and r = hash_pair(x, c)

    Args:
        leaves: Sequence of 32-byte leaf hashes. Order matters and is
                preserved.

    Returns:
        Immutable tuple of node hashes, root first

    Raises:
        EmptyTreeError: If leaves is empty
        InvalidMerkleNode: If a leaf is not a 32-byte hash
    """
    for leaf in leaves:
        check_valid_merkle_node(leaf)

    if len(leaves) == 0:
        raise EmptyTreeError()

    tree: list[bytes] = [b""] * (2 * len(leaves) - 1)

    for i, leaf in enumerate(leaves):
        tree[len(tree) - 1 - i] = leaf

    for i in range(len(tree) - 1 - len(leaves), -1, -1):
        tree[i] = hash_pair(tree[left_child_index(i)], tree[right_child_index(i)])

    return tuple(tree)


def get_proof(tree: Sequence[bytes], index: int) -> list[bytes]:
    """
    Collect the sibling hashes from a leaf up to the root.

    Args:
        tree: Array-backed tree from make_merkle_tree
        index: Array index of a leaf node

    Returns:
        Sibling hashes, bottom-to-top (empty for a single-leaf tree)

    Raises:
        IndexOutOfRange: If index is not a leaf of the tree
    """
    if not is_leaf_node(tree, index):
        raise IndexOutOfRange(
            index, len(tree), message=f"Index {index} is not a leaf of a {len(tree)}-node tree"
        )

    proof: list[bytes] = []
    while index > 0:
        proof.append(tree[sibling_index(index)])
        index = parent_index(index)
    return proof


def process_proof(leaf: bytes, proof: Sequence[bytes]) -> bytes:
    """
    Recompute a root from a leaf and its proof.

    Raises:
        InvalidMerkleNode: If the leaf or any proof node is not 32 bytes
    """
    check_valid_merkle_node(leaf)
    for node in proof:
        check_valid_merkle_node(node)

    computed = leaf
    for node in proof:
        computed = hash_pair(computed, node)
    return computed


def is_valid_merkle_tree(tree: Sequence[bytes]) -> bool:
    """
    Check the structure and every internal hash of a tree.

    Returns:
        True if all nodes are 32-byte hashes and each internal node
        equals hash_pair of its children
    """
    for i, node in enumerate(tree):
        if not is_valid_merkle_node(node):
            return False

        left = left_child_index(i)
        right = right_child_index(i)

        if right >= len(tree):
            if left < len(tree):
                return False
        elif node != hash_pair(tree[left], tree[right]):
            return False

    return len(tree) > 0


def render_merkle_tree(tree: Sequence[bytes]) -> str:
    """
    Draw the tree as indented ASCII, one node per line.

    Example for two leaves:
        0) 0x...
        ├─ 1) 0x...
        └─ 2) 0x...
    """
    if len(tree) == 0:
        raise EmptyTreeError()

    stack: list[tuple[int, list[int]]] = [(0, [])]
    lines: list[str] = []

    while stack:
        i, path = stack.pop()

        prefix = "".join(["   ", "│  "][p] for p in path[:-1])
        prefix += "".join(["└─ ", "├─ "][p] for p in path[-1:])
        lines.append(f"{prefix}{i}) {to_hex(tree[i])}")

        if right_child_index(i) < len(tree):
            stack.append((right_child_index(i), path + [0]))
            stack.append((left_child_index(i), path + [1]))

    return "\n".join(lines)


__all__ = [
    "HASH_LENGTH",
    "is_valid_merkle_node",
    "check_valid_merkle_node",
    "left_child_index",
    "right_child_index",
    "parent_index",
    "sibling_index",
    "is_leaf_node",
    "make_merkle_tree",
    "get_proof",
    "process_proof",
    "is_valid_merkle_tree",
    "render_merkle_tree",
]
