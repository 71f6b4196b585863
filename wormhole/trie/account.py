"""
Account record stored at the leaves of the state trie, and storage slot encoding.
"""
from __future__ import annotations

import rlp
from rlp.sedes import Binary, big_endian_int

from wormhole.crypto.hashing import keccak256


hash32 = Binary.fixed_length(32)

# Root of a trie with no entries: keccak256(rlp(b""))
EMPTY_ROOT_HASH: bytes = keccak256(rlp.encode(b""))

# Code hash of an account without code: keccak256(b"")
KECCAK_EMPTY: bytes = keccak256(b"")


class TrieAccount(rlp.Serializable):
    """Account leaf value: rlp([nonce, balance, storage_root, code_hash])."""

    fields = [
        ("nonce", big_endian_int),
        ("balance", big_endian_int),
        ("storage_root", hash32),
        ("code_hash", hash32),
    ]

    @classmethod
    def externally_owned(cls, balance: int, nonce: int = 0) -> "TrieAccount":
        """An account with no code and no storage."""
        return cls(
            nonce=nonce,
            balance=balance,
            storage_root=EMPTY_ROOT_HASH,
            code_hash=KECCAK_EMPTY,
        )

    def to_rlp(self) -> bytes:
        return rlp.encode(self)

    @classmethod
    def from_rlp(cls, data: bytes) -> "TrieAccount":
        return rlp.decode(data, sedes=cls)


def encode_storage_value(word: bytes) -> bytes:
    """
    Leaf value of a storage slot holding `word`.

    Slots are stored as the RLP of the big-endian word with leading
    zero bytes stripped.
    """
    return rlp.encode(word.lstrip(b"\x00"))


def decode_storage_value(data: bytes) -> bytes:
    """Inverse of encode_storage_value, left-padded back to 32 bytes."""
    value = rlp.decode(data)
    if not isinstance(value, bytes) or len(value) > 32:
        raise ValueError("storage value must be a byte string of at most 32 bytes")
    return value.rjust(32, b"\x00")
