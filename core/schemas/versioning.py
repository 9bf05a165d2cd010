"""
Schemas
File: versioning.py

Purpose: Centralize file format constants.
This file must remain tiny and have no imports from other schema files
to avoid circular dependencies.
"""

from typing import Literal

# Tree dump format tag, shared with the OpenZeppelin merkle-tree library
TREE_DUMP_FORMAT: str = "standard-v1"

TreeDumpFormat = Literal["standard-v1"]

SUPPORTED_TREE_DUMP_FORMATS: frozenset[str] = frozenset({"standard-v1"})


def is_supported_tree_dump_format(fmt: object) -> bool:
    """Check whether a dump's format tag can be loaded."""
    return fmt in SUPPORTED_TREE_DUMP_FORMATS
