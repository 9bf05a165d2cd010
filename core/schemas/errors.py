"""
Schemas
File: errors.py

Purpose: Standard error taxonomy for tree construction, proof generation
and whitelist IO. Defines both Pydantic models for structured error
reporting and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Leaf encoding
    SCHEMA_MISMATCH = "SCHEMA_MISMATCH"

    # Tree construction & lookup
    EMPTY_TREE = "EMPTY_TREE"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"
    INVALID_MERKLE_NODE = "INVALID_MERKLE_NODE"
    TREE_INTEGRITY_ERROR = "TREE_INTEGRITY_ERROR"

    # Proofs
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"

    # Serialization & IO
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    WHITELIST_IO_ERROR = "WHITELIST_IO_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class WhitelistMerkleError(BaseModel):
    """
    Error model for structured error reporting.

    Used when a failure has to be serialized (e.g. the CLI's JSON output)
    rather than raised.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.SCHEMA_MISMATCH],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "WhitelistMerkleException":
        """Convert this error model to a raised exception."""
        return WhitelistMerkleException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class WhitelistMerkleException(Exception):
    """
    Base exception for all whitelist Merkle errors.

    Carries structured error information and can be converted to/from
    WhitelistMerkleError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "WHITELIST_MERKLE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> WhitelistMerkleError:
        """Convert this exception to a WhitelistMerkleError model."""
        return WhitelistMerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class SchemaMismatch(WhitelistMerkleException):
    """Raised when a leaf value does not conform to its declared types."""

    def __init__(
        self,
        message: str,
        value: Any = None,
        leaf_encoding: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if value is not None:
            full_details["value"] = repr(value)
        if leaf_encoding is not None:
            full_details["leaf_encoding"] = list(leaf_encoding)
        super().__init__(
            message=message,
            code=ErrorCodes.SCHEMA_MISMATCH,
            details=full_details,
        )


class EmptyTreeError(WhitelistMerkleException):
    """Raised when a tree is requested over zero leaves."""

    def __init__(self, message: str = "Expected non-zero number of leaves") -> None:
        super().__init__(message=message, code=ErrorCodes.EMPTY_TREE)


class IndexOutOfRange(WhitelistMerkleException, IndexError):
    """Raised when a proof is requested for an invalid leaf position."""

    def __init__(self, index: int, size: int, message: str | None = None) -> None:
        super().__init__(
            message=message or f"Index {index} out of range for {size} leaves",
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details={"index": index, "size": size},
        )


class LeafNotFound(WhitelistMerkleException):
    """Raised when a value is looked up that is not part of the tree."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            message=f"Leaf is not in tree: {value!r}",
            code=ErrorCodes.LEAF_NOT_FOUND,
            details={"value": repr(value)},
        )


class InvalidMerkleNode(WhitelistMerkleException):
    """Raised when a node is not a 32-byte hash."""

    def __init__(self, node: Any) -> None:
        super().__init__(
            message=f"Merkle tree nodes must be 32-byte hashes, got {node!r}",
            code=ErrorCodes.INVALID_MERKLE_NODE,
        )


class InvalidProof(WhitelistMerkleException):
    """Raised when a freshly generated proof does not reproduce the root."""

    def __init__(self, message: str, leaf_index: int | None = None) -> None:
        details = {}
        if leaf_index is not None:
            details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.MERKLE_PROOF_INVALID,
            details=details,
        )


class TreeIntegrityError(WhitelistMerkleException):
    """Raised by tree validation when stored hashes do not re-derive."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.TREE_INTEGRITY_ERROR,
            details=details,
        )


class UnsupportedFormat(WhitelistMerkleException):
    """Raised when loading a tree dump of an unknown format."""

    def __init__(self, fmt: Any) -> None:
        super().__init__(
            message=f"Unknown tree dump format: {fmt!r}",
            code=ErrorCodes.UNSUPPORTED_FORMAT,
            details={"format": repr(fmt)},
        )


class WhitelistIOError(WhitelistMerkleException):
    """Raised when a whitelist, proofs or tree file cannot be read or written."""

    def __init__(self, message: str, path: str | None = None) -> None:
        details = {}
        if path is not None:
            details["path"] = path
        super().__init__(
            message=message,
            code=ErrorCodes.WHITELIST_IO_ERROR,
            details=details,
        )
