"""
Module 03 - Nullifier-Chain Validator

Withdrawals of one secret form a chain indexed 0, 1, 2, ...
Once withdrawal i is accepted the registry stores
hash(cumulative withdrawn after i) at nullifier(secret, i). Withdrawal
i + 1 must prove that slot holds hash(its claimed cumulative amount),
which binds the running total to the committed history.

States:
- index == 0: cumulative must be 0, previous proof must be empty
- index > 0:  registry[nullifier(secret, index - 1)] == hash(cumulative)

The validator keeps no state; marking the new nullifier spent happens
outside, in the registry.
"""
from __future__ import annotations

from typing import Sequence

from wormhole.crypto.hashing import hash_amount, keccak256, to_hex
from wormhole.crypto.secret import nullifier
from wormhole.schemas.errors import NullifierChainException
from wormhole.trie.account import encode_storage_value
from wormhole.trie.proof import get_proof_value


def check_first_withdrawal(
    withdrawal_index: int,
    cumulative_withdrawn_amount: int,
    previous_nullifier_storage_proof: Sequence[bytes],
) -> None:
    """
    Enforce the index-0 invariants. No-op for later indices.

    Raises:
        NullifierChainException: If index 0 claims history
    """
    if withdrawal_index != 0:
        return
    if cumulative_withdrawn_amount != 0:
        raise NullifierChainException(
            "cumulative withdrawn amount must be 0 for the first withdrawal",
            withdrawal_index=0,
        )
    if len(previous_nullifier_storage_proof) != 0:
        raise NullifierChainException(
            "previous nullifier storage proof must be empty for the first withdrawal",
            withdrawal_index=0,
        )


def check_previous_nullifier(
    secret: bytes,
    withdrawal_index: int,
    cumulative_withdrawn_amount: int,
    registry_storage_root: bytes,
    previous_nullifier_storage_proof: Sequence[bytes],
) -> None:
    """
    Prove the previous withdrawal recorded `cumulative_withdrawn_amount`.

    Raises:
        StateProofException: If the storage proof itself is malformed
        NullifierChainException: If the slot holds anything else
    """
    previous = nullifier(secret, withdrawal_index - 1)
    expected = encode_storage_value(hash_amount(cumulative_withdrawn_amount))
    actual = get_proof_value(
        registry_storage_root,
        keccak256(previous),
        previous_nullifier_storage_proof,
        label="previous_nullifier_storage",
    )
    if actual != expected:
        raise NullifierChainException(
            "previous nullifier does not record the claimed cumulative amount",
            withdrawal_index=withdrawal_index,
            details={
                "previous_nullifier_recorded": actual is not None,
                "registry_storage_root": to_hex(registry_storage_root),
            },
        )


__all__ = [
    "check_first_withdrawal",
    "check_previous_nullifier",
]
