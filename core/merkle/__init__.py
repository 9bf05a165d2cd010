"""
Merkle Tree and Commitments
Deterministic, order-independent Merkle trees over typed values, with
proof generation and verification compatible with OpenZeppelin's
StandardMerkleTree / MerkleProof.

This module provides:
- StandardMerkleTree: build from values, root, proofs, dump/load, validate
- verify_proof: check a value and proof against a published root
- make_merkle_tree / get_proof / process_proof: array-backed tree primitives
- standard_leaf_hash / encode_leaf: leaf encoding and hashing
- MerkleProver / MerkleVerifier: whitelist-level conveniences

Canonical Commitment Rules:
1. Leaf hashing: keccak256(keccak256(abi.encode(types, value)))
2. Leaf order: leaf hashes sorted ascending before building
3. Parent hashing: keccak256(min(a, b) || max(a, b))
4. Layout: complete binary tree in an array, no padding
5. Empty tree: rejected (EmptyTreeError)
6. Single leaf: root = leaf, proof = []

Usage:
    from core.merkle import StandardMerkleTree

    tree = StandardMerkleTree.of(
        [[address, 0] for address in addresses],
        ["address", "uint256"],
    )
    print(tree.root)
    proof = tree.get_proof(0)
    assert StandardMerkleTree.verify(tree.root, tree.leaf_encoding, tree.values[0], proof)
"""
from .leaf import (
    WHITELIST_LEAF_ENCODING,
    encode_leaf,
    standard_leaf_hash,
)

from .merkle_tree import (
    get_proof,
    is_valid_merkle_tree,
    make_merkle_tree,
    process_proof,
    render_merkle_tree,
)

from .standard_tree import (
    IndexedValue,
    StandardMerkleTree,
    verify_proof,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Leaves
    "WHITELIST_LEAF_ENCODING",
    "encode_leaf",
    "standard_leaf_hash",
    # Tree primitives
    "make_merkle_tree",
    "get_proof",
    "process_proof",
    "is_valid_merkle_tree",
    "render_merkle_tree",
    # Standard tree
    "IndexedValue",
    "StandardMerkleTree",
    "verify_proof",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
