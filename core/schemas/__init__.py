"""
Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Version constants
from .versioning import (
    SUPPORTED_TREE_DUMP_FORMATS,
    TREE_DUMP_FORMAT,
    TreeDumpFormat,
    is_supported_tree_dump_format,
)

# Error models and exceptions
from .errors import (
    EmptyTreeError,
    ErrorCodes,
    IndexOutOfRange,
    InvalidMerkleNode,
    InvalidProof,
    LeafNotFound,
    SchemaMismatch,
    TreeIntegrityError,
    UnsupportedFormat,
    WhitelistIOError,
    WhitelistMerkleError,
    WhitelistMerkleException,
)

# Artifact schemas
from .artifacts import (
    ProofEntry,
    StandardTreeDump,
    TreeValue,
)

__all__ = [
    # Versioning
    "SUPPORTED_TREE_DUMP_FORMATS",
    "TREE_DUMP_FORMAT",
    "TreeDumpFormat",
    "is_supported_tree_dump_format",
    # Errors
    "EmptyTreeError",
    "ErrorCodes",
    "IndexOutOfRange",
    "InvalidMerkleNode",
    "InvalidProof",
    "LeafNotFound",
    "SchemaMismatch",
    "TreeIntegrityError",
    "UnsupportedFormat",
    "WhitelistIOError",
    "WhitelistMerkleError",
    "WhitelistMerkleException",
    # Artifacts
    "ProofEntry",
    "StandardTreeDump",
    "TreeValue",
]
