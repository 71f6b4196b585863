"""
Chain-Level Acceptance Check

Consumes the public outputs carried by a withdrawal transaction:

1. proof_valid        - the attached proof verifies
2. nullifier_unspent  - the registry slot at `nullifier` is zero
3. state_root_matches - the state root at `state_root_block_number`
                        equals the committed state root

All three checks always run; the result lists every outcome.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from wormhole.crypto.hashing import to_hex
from wormhole.schemas.errors import WormholeException
from wormhole.schemas.transaction import WormholeTx, WormholeTxProof
from wormhole.schemas.verification import CheckResult, VerificationResult

from .registry import NullifierRegistry, is_spent


logger = logging.getLogger(__name__)

ProofVerifier = Callable[[WormholeTxProof], bool]
StateRootLookup = Callable[[int], Optional[bytes]]


def check_proof(tx: WormholeTx, proof_verifier: ProofVerifier) -> CheckResult:
    try:
        valid = proof_verifier(tx.proof)
    except WormholeException as e:
        return CheckResult.failed(
            "proof_valid",
            f"Proof verification raised: {e.message}",
            details={"code": e.code},
        )
    if not valid:
        return CheckResult.failed("proof_valid", "Proof does not verify")
    return CheckResult.passed("proof_valid", "Proof verifies")


def check_nullifier_unspent(
    tx: WormholeTx,
    registry: NullifierRegistry,
) -> CheckResult:
    nullifier = tx.proof.nullifier
    if is_spent(registry, nullifier):
        return CheckResult.failed(
            "nullifier_unspent",
            "Nullifier already spent",
            details={"nullifier": to_hex(nullifier)},
        )
    return CheckResult.passed("nullifier_unspent", "Nullifier unspent")


def check_state_root(tx: WormholeTx, state_root_at: StateRootLookup) -> CheckResult:
    block_number = tx.state_root_block_number
    actual = state_root_at(block_number)
    details = {
        "block_number": block_number,
        "committed": to_hex(tx.proof.state_root),
        "actual": to_hex(actual) if actual is not None else None,
    }
    if actual is None:
        return CheckResult.failed(
            "state_root_matches", "Unknown state root block", details=details
        )
    if actual != tx.proof.state_root:
        return CheckResult.failed(
            "state_root_matches", "State root mismatch", details=details
        )
    return CheckResult.passed("state_root_matches", "State root matches", details=details)


def check_acceptance(
    tx: WormholeTx,
    *,
    registry: NullifierRegistry,
    state_root_at: StateRootLookup,
    proof_verifier: ProofVerifier,
) -> VerificationResult:
    """
    Decide whether a withdrawal transaction may be included.

    Args:
        tx: Decoded withdrawal transaction
        registry: Nullifier registry to read
        state_root_at: Block number to canonical state root (None if unknown)
        proof_verifier: Verifies the attached succinct proof against
            `tx.proof.public_values()`

    Returns:
        VerificationResult with proof_valid, nullifier_unspent and
        state_root_matches checks
    """
    result = VerificationResult.from_checks([
        check_proof(tx, proof_verifier),
        check_nullifier_unspent(tx, registry),
        check_state_root(tx, state_root_at),
    ])
    if not result.ok:
        reasons = ", ".join(result.get_error_messages())
        logger.info(f"Rejected withdrawal {to_hex(tx.proof.nullifier)}: {reasons}")
    return result
