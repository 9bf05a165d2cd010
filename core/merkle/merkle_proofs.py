"""
Merkle Proofs Convenience Wrappers
Bulk proof generation and address-level verification.

This module provides class-based interfaces:
- MerkleProver: Generate a ProofEntry for every leaf of a tree
- MerkleVerifier: Verify whitelist entries against a published root

These are wrappers around StandardMerkleTree for the whitelist case,
where each leaf is (address, amount).
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Sequence

from core.merkle.leaf import WHITELIST_LEAF_ENCODING
from core.merkle.standard_tree import StandardMerkleTree
from core.schemas.artifacts import ProofEntry


logger = logging.getLogger(__name__)


class MerkleProver:
    """
    Convenience class for generating Merkle proofs.

    Example:
        >>> tree = StandardMerkleTree.of(values, ["address", "uint256"])
        >>> entries = MerkleProver.prove_all(tree, workers=4)
        >>> entries[0].address == values[0][0]
        True
    """

    @staticmethod
    def prove(tree: StandardMerkleTree, index: int) -> ProofEntry:
        """
        Build the proof entry for the value at the given input position.

        The address is the first field of the value.

        Raises:
            IndexOutOfRange: If index is not a valid position
        """
        proof = tree.get_proof(index)
        return ProofEntry(address=str(tree.values[index][0]), proof=proof)

    @staticmethod
    def prove_all(tree: StandardMerkleTree, workers: int = 1) -> list[ProofEntry]:
        """
        Build proof entries for every value, in input order.

        Args:
            tree: A built tree
            workers: Number of threads; 1 runs inline. The tree is
                read-only so no coordination between workers is needed.

        Returns:
            One ProofEntry per value, same order as tree.values
        """
        indices = range(len(tree))
        if workers <= 1 or len(tree) <= 1:
            entries = [MerkleProver.prove(tree, i) for i in indices]
        else:
            logger.debug("Generating %d proofs on %d threads", len(tree), workers)
            with ThreadPoolExecutor(max_workers=workers) as pool:
                entries = list(pool.map(lambda i: MerkleProver.prove(tree, i), indices))
        logger.info("Generated %d proofs", len(entries))
        return entries


class MerkleVerifier:
    """
    Convenience class for verifying whitelist proofs.

    Example:
        >>> MerkleVerifier.verify_address(tree.root, address, 0, proof)
        True
    """

    @staticmethod
    def verify_address(
        root: str,
        address: str,
        amount: Any,
        proof: Sequence[str],
        leaf_encoding: Sequence[str] = WHITELIST_LEAF_ENCODING,
    ) -> bool:
        """
        Verify that (address, amount) is committed to by root.

        Args:
            root: Published Merkle root (0x hex)
            address: Claimed address
            amount: Claimed amount
            proof: Sibling hashes, bottom-to-top
            leaf_encoding: Leaf schema, (address, uint256) by default

        Returns:
            True if the proof reproduces root, False otherwise
        """
        return StandardMerkleTree.verify(root, leaf_encoding, [address, amount], proof)

    @staticmethod
    def verify_entry(
        root: str,
        entry: ProofEntry,
        amount: Any = 0,
        leaf_encoding: Sequence[str] = WHITELIST_LEAF_ENCODING,
    ) -> bool:
        """Verify a ProofEntry as read from a proofs file."""
        return MerkleVerifier.verify_address(
            root, entry.address, amount, entry.proof, leaf_encoding
        )


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
