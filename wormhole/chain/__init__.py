"""
Chain-side collaborators: the nullifier registry and the acceptance check.
"""
from .registry import ZERO_SLOT, NullifierRegistry, apply_withdrawal, is_spent
from .acceptance import (
    ProofVerifier,
    StateRootLookup,
    check_acceptance,
    check_nullifier_unspent,
    check_proof,
    check_state_root,
)

__all__ = [
    "ZERO_SLOT",
    "NullifierRegistry",
    "apply_withdrawal",
    "is_spent",
    "ProofVerifier",
    "StateRootLookup",
    "check_acceptance",
    "check_nullifier_unspent",
    "check_proof",
    "check_state_root",
]
