"""
Module 01 - Hashing Utilities
Hash functions and byte codecs shared by derivation and trie verification.

This module provides:
- SHA-256 for secret derivations (addresses, nullifiers, proof-of-work)
- Keccak-256 for trie keys, node references and registry values
- Hex encoding/decoding with 0x prefix
- Fixed-width 256-bit word encodings

Determinism Notes:
- Every function here is pure; they run unchanged inside the proving program
"""
from __future__ import annotations

import hashlib

from web3 import Web3

from wormhole.constants import U256_MAX


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 (the Ethereum variant, not NIST SHA3-256) of raw bytes.

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return bytes(Web3.keccak(data))


def to_hex(data: bytes) -> str:
    """Convert bytes to a hexadecimal string with 0x prefix."""
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert a 0x-prefixed hexadecimal string to bytes.

    Raises:
        ValueError: If the prefix is missing, the length is odd,
                    or the string contains invalid hex characters
    """
    if not hex_string.startswith(("0x", "0X")):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def to_be32(value: int) -> bytes:
    """
    Encode an unsigned 256-bit integer as 32 big-endian bytes.

    Raises:
        ValueError: If value is negative or does not fit in 256 bits
    """
    if value < 0 or value > U256_MAX:
        raise ValueError(f"Value out of uint256 range: {value}")
    return value.to_bytes(32, "big")


def to_le32(value: int) -> bytes:
    """Encode an unsigned 256-bit integer as 32 little-endian bytes."""
    if value < 0 or value > U256_MAX:
        raise ValueError(f"Value out of uint256 range: {value}")
    return value.to_bytes(32, "little")


def hash_amount(amount: int) -> bytes:
    """
    Hash of a withdrawn amount as stored in the nullifier registry.

    Rule: keccak256(to_be32(amount))
    """
    return keccak256(to_be32(amount))


__all__ = [
    "sha256",
    "keccak256",
    "to_hex",
    "from_hex",
    "to_be32",
    "to_le32",
    "hash_amount",
]
