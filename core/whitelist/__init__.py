"""
Whitelist input/output.

Reads address lists and persists the proofs file and tree dump.
"""
from .io import (
    PROOFS_FILE,
    TREE_FILE,
    WHITELIST_FILE,
    build_leaf_values,
    find_proof,
    load_proofs,
    load_tree,
    parse_whitelist,
    read_whitelist,
    save_tree,
    write_proofs,
)

__all__ = [
    "PROOFS_FILE",
    "TREE_FILE",
    "WHITELIST_FILE",
    "build_leaf_values",
    "find_proof",
    "load_proofs",
    "load_tree",
    "parse_whitelist",
    "read_whitelist",
    "save_tree",
    "write_proofs",
]
