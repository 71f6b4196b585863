"""
Module 00 - Schemas
File: types.py

Purpose: Annotated pydantic field types for on-chain primitives.

JSON form follows the Ethereum JSON-RPC conventions:
- byte strings as 0x-prefixed hex
- 256-bit integers as 0x-prefixed hex quantities (decimal strings accepted)
- addresses as EIP-55 checksummed hex
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import AfterValidator, BeforeValidator, Field, PlainSerializer
from web3 import Web3

from wormhole.constants import ADDRESS_LENGTH, HASH_LENGTH, U256_MAX
from wormhole.crypto.hashing import from_hex, to_hex


def parse_bytes(value: Any) -> Any:
    """Accept raw bytes or 0x-prefixed hex strings."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return from_hex(value)
    return value


def parse_quantity(value: Any) -> Any:
    """Accept ints, 0x-prefixed hex quantities and decimal strings."""
    if isinstance(value, bool):
        raise ValueError("boolean is not a valid quantity")
    if isinstance(value, str):
        text = value.strip()
        if text.startswith(("0x", "0X")):
            if len(text) == 2:
                raise ValueError("empty hex quantity")
            return int(text, 16)
        if not text.isdigit():
            raise ValueError(f"invalid quantity: {value!r}")
        return int(text)
    return value


def _fixed_length(length: int):
    def check(value: bytes) -> bytes:
        if len(value) != length:
            raise ValueError(f"expected {length} bytes, got {len(value)}")
        return value
    return check


def _checksum(value: bytes) -> str:
    return Web3.to_checksum_address(to_hex(value))


HexBytes = Annotated[
    bytes,
    BeforeValidator(parse_bytes),
    PlainSerializer(to_hex, return_type=str, when_used="json"),
]

Hash32 = Annotated[
    bytes,
    BeforeValidator(parse_bytes),
    AfterValidator(_fixed_length(HASH_LENGTH)),
    PlainSerializer(to_hex, return_type=str, when_used="json"),
]

Address = Annotated[
    bytes,
    BeforeValidator(parse_bytes),
    AfterValidator(_fixed_length(ADDRESS_LENGTH)),
    PlainSerializer(_checksum, return_type=str, when_used="json"),
]

Uint256 = Annotated[
    int,
    BeforeValidator(parse_quantity),
    Field(ge=0, le=U256_MAX),
    PlainSerializer(hex, return_type=str, when_used="json"),
]

ProofNodes = list[HexBytes]


__all__ = [
    "Address",
    "Hash32",
    "HexBytes",
    "ProofNodes",
    "Uint256",
    "parse_bytes",
    "parse_quantity",
]
