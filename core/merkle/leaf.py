"""
Leaf Encoding
ABI encoding and hashing of leaf values.

Canonical Leaf Rules (Hard Contracts):
1. Encoding: abi.encode(leaf_encoding, value), i.e. Solidity ABI encoding
   of the tuple; an address is left-padded to 32 bytes, a uint256 is
   32 bytes big-endian.
2. Leaf hash: keccak256(keccak256(encoding)). Hashing twice keeps a leaf
   from being confused with a 64-byte internal node preimage.

These rules match OpenZeppelin's StandardMerkleTree, so leaves can be
checked on-chain with:
    keccak256(bytes.concat(keccak256(abi.encode(account, amount))))
"""
from __future__ import annotations

from typing import Any, Sequence

from eth_abi import encode
from eth_abi.exceptions import EncodingError, ParseError
from eth_utils import is_checksum_address, is_checksum_formatted_address, is_hex_address

from core.crypto.hashing import keccak256
from core.schemas.errors import SchemaMismatch


# Leaf schema used for whitelist claims: (account, amount)
WHITELIST_LEAF_ENCODING: tuple[str, ...] = ("address", "uint256")


def _check_address(field: Any) -> None:
    # all-lowercase (or all-uppercase) hex is accepted, mixed case must be EIP-55
    if not isinstance(field, str):
        return
    if not field.startswith("0x") or not is_hex_address(field):
        raise ValueError(f"{field!r} is not a 20-byte hex address")
    if is_checksum_formatted_address(field) and not is_checksum_address(field):
        raise ValueError(f"{field!r} has an invalid EIP-55 checksum")


def _coerce_field(typ: str, field: Any) -> Any:
    if typ == "address":
        _check_address(field)
        return field
    # Integer fields may arrive as decimal or 0x-hex strings (JSON dumps)
    if isinstance(field, str) and typ.startswith(("uint", "int")):
        text = field.strip()
        if text.lower().startswith(("0x", "-0x")):
            return int(text, 16)
        return int(text, 10)
    return field


def encode_leaf(leaf_encoding: Sequence[str], value: Sequence[Any]) -> bytes:
    """
    ABI-encode a leaf value according to its schema.

    Args:
        leaf_encoding: Solidity type names, one per field
        value: Field values in the same order

    Returns:
        ABI-encoded bytes

    Raises:
        SchemaMismatch: If the value does not conform to the schema
            (wrong arity, malformed address, bad checksum, integer out
            of range, unknown type name, ...)
    """
    types = list(leaf_encoding)
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise SchemaMismatch(
            f"Leaf value must be a sequence of {len(types)} fields, got {type(value).__name__}",
            value=value,
            leaf_encoding=types,
        )
    if len(value) != len(types):
        raise SchemaMismatch(
            f"Leaf value has {len(value)} fields but encoding declares {len(types)}",
            value=value,
            leaf_encoding=types,
        )
    try:
        fields = [_coerce_field(typ, field) for typ, field in zip(types, value)]
        return encode(types, fields)
    except (EncodingError, ParseError, ValueError, TypeError) as e:
        raise SchemaMismatch(
            f"Leaf value {list(value)!r} does not match {types}: {e}",
            value=value,
            leaf_encoding=types,
        ) from e


def standard_leaf_hash(leaf_encoding: Sequence[str], value: Sequence[Any]) -> bytes:
    """
    Compute the standard leaf hash of a value.

    Rule: leaf = keccak256(keccak256(abi.encode(leaf_encoding, value)))

    Raises:
        SchemaMismatch: If the value does not conform to the schema
    """
    return keccak256(keccak256(encode_leaf(leaf_encoding, value)))


__all__ = [
    "WHITELIST_LEAF_ENCODING",
    "encode_leaf",
    "standard_leaf_hash",
]
