"""
Module 03 - Verification

State-proof verifier, nullifier-chain validator and withdrawal accounting.
Everything here is deterministic and runs inside the proving program.
"""
from .accounting import checked_add, check_withdrawal_amounts
from .nullifier_chain import (
    check_first_withdrawal,
    check_previous_nullifier,
)
from .state_proof import (
    ZERO_WORD,
    check_account_proof,
    check_storage_proof,
    check_nullifier_account,
    check_proven_account,
    read_proven_account,
    verify_account_proof,
    verify_storage_proof,
)

__all__ = [
    "checked_add",
    "check_withdrawal_amounts",
    "check_first_withdrawal",
    "check_previous_nullifier",
    "ZERO_WORD",
    "check_account_proof",
    "check_storage_proof",
    "check_nullifier_account",
    "check_proven_account",
    "read_proven_account",
    "verify_account_proof",
    "verify_storage_proof",
]
