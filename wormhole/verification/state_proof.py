"""
Module 03 - State-Proof Verifier
Account and storage proofs against a state root.

Accounts live in the state trie under keccak256(address); storage slots
live in the account's storage trie under keccak256(slot). Each check has
a raising form used by the program and a boolean form.

Verification Rules:
1. An expected account of None asserts the account does not exist
2. An expected storage word of zero asserts the slot is empty
3. Malformed proofs are failures, never retried
"""
from __future__ import annotations

from typing import Optional, Sequence

from rlp.exceptions import RLPException

from wormhole.crypto.hashing import keccak256, to_hex
from wormhole.schemas.errors import NullifierAccountMissing, StateProofException
from wormhole.trie.account import TrieAccount, encode_storage_value
from wormhole.trie.nodes import LeafNode, decode_node
from wormhole.trie.proof import verify_proof


ZERO_WORD = b"\x00" * 32


def check_account_proof(
    root: bytes,
    address: bytes,
    expected: Optional[TrieAccount],
    proof: Sequence[bytes],
    *,
    label: str = "account",
) -> None:
    """
    Verify an account proof.

    Raises:
        StateProofException: If the proof does not bind `address` to `expected`
    """
    value = expected.to_rlp() if expected is not None else None
    verify_proof(root, keccak256(address), value, proof, label=label)


def check_storage_proof(
    storage_root: bytes,
    slot: bytes,
    expected: bytes,
    proof: Sequence[bytes],
    *,
    label: str = "storage",
) -> None:
    """
    Verify a storage proof for a 32-byte slot holding the 32-byte word `expected`.

    Raises:
        StateProofException: If the proof does not bind `slot` to `expected`
    """
    value = None if expected == ZERO_WORD else encode_storage_value(expected)
    verify_proof(storage_root, keccak256(slot), value, proof, label=label)


def verify_account_proof(
    root: bytes,
    address: bytes,
    expected: Optional[TrieAccount],
    proof: Sequence[bytes],
) -> bool:
    try:
        check_account_proof(root, address, expected, proof)
    except StateProofException:
        return False
    return True


def read_proven_account(
    proof: Sequence[bytes],
    *,
    label: str = "nullifier_account",
) -> tuple[bytes, TrieAccount]:
    """
    Return the raw leaf value at the end of an account proof and its decoded account.

    The account is only trustworthy once the same proof has been verified
    against the state root with this account as the expected value.

    Raises:
        NullifierAccountMissing: If the proof does not end in a leaf
        StateProofException: If the leaf does not hold an account record
    """
    if len(proof) == 0:
        raise NullifierAccountMissing()
    node = decode_node(bytes(proof[-1]))
    if not isinstance(node, LeafNode):
        raise NullifierAccountMissing()
    try:
        return node.value, TrieAccount.from_rlp(node.value)
    except RLPException as e:
        raise StateProofException(
            f"leaf does not hold an account: {e}",
            proof=label,
        ) from e


def check_proven_account(
    root: bytes,
    address: bytes,
    proof: Sequence[bytes],
    *,
    label: str = "account",
) -> TrieAccount:
    """
    Verify an account proof whose leaf is read from the proof itself.

    Raises:
        NullifierAccountMissing: If the proof does not end in a leaf
        StateProofException: If the leaf is not bound to `address` under `root`
    """
    value, account = read_proven_account(proof, label=label)
    verify_proof(root, keccak256(address), value, proof, label=label)
    return account


def check_nullifier_account(
    root: bytes,
    nullifier_address: bytes,
    proof: Sequence[bytes],
) -> TrieAccount:
    """
    Verify the registry account proof and return the proven account.

    Its storage_root anchors the previous-nullifier storage proof.
    """
    return check_proven_account(root, nullifier_address, proof, label="nullifier_account")


def verify_storage_proof(
    root: bytes,
    address: bytes,
    slot: bytes,
    expected: bytes,
    proof: Sequence[bytes],
    *,
    account_proof: Sequence[bytes],
) -> bool:
    """
    Check that `slot` of the account at `address` holds `expected` at state `root`.

    `account_proof` binds the account to `root`; its storage_root then
    anchors the storage `proof`.
    """
    label = f"storage:{to_hex(address)}"
    try:
        account = check_proven_account(root, address, account_proof, label=label)
        check_storage_proof(account.storage_root, slot, expected, proof, label=label)
    except StateProofException:
        return False
    return True


__all__ = [
    "ZERO_WORD",
    "check_account_proof",
    "check_storage_proof",
    "verify_account_proof",
    "verify_storage_proof",
    "read_proven_account",
    "check_proven_account",
    "check_nullifier_account",
]
