"""
Module 04 - Program Entry
The withdrawal check executed inside every proving backend.

Order of checks:
1. Proof-of-work of the secret
2. Accounting: withdraw > 0, checked add, not above the deposit
3. Index-0 invariants of the nullifier chain
4. Deposit account proof: {nonce: 0, balance: deposit, no code, no storage}
5. Nullifier registry account proof
6. Previous-nullifier storage proof (index > 0)
7. Output

Execution is single-threaded and deterministic: no logging, no I/O,
no randomness, no clock reads.
"""
from __future__ import annotations

from wormhole.constants import POW_LOG_DIFFICULTY
from wormhole.crypto.hashing import hash_amount
from wormhole.crypto.secret import check_pow, deposit_address, nullifier
from wormhole.schemas.errors import (
    ProgramAbortedException,
    ProofOfWorkException,
    WormholeException,
)
from wormhole.schemas.program import WormholeProgramInput, WormholeProgramOutput
from wormhole.trie.account import TrieAccount
from wormhole.verification.accounting import check_withdrawal_amounts
from wormhole.verification.nullifier_chain import (
    check_first_withdrawal,
    check_previous_nullifier,
)
from wormhole.verification.state_proof import (
    check_account_proof,
    check_nullifier_account,
)


def execute_wormhole_program(
    program_input: WormholeProgramInput,
    *,
    pow_log_difficulty: int = POW_LOG_DIFFICULTY,
) -> WormholeProgramOutput:
    """
    Run every withdrawal check and compute the public output.

    Raises:
        ProofOfWorkException: Secret fails the proof-of-work
        AccountingException: Zero, overflowing or excessive withdrawal
        NullifierChainException: Inconsistent withdrawal history
        StateProofException: Any proof fails to verify
    """
    secret = program_input.secret
    if not check_pow(secret, pow_log_difficulty):
        raise ProofOfWorkException("invalid secret", difficulty=pow_log_difficulty)

    next_cumulative = check_withdrawal_amounts(
        program_input.deposit_amount,
        program_input.withdraw_amount,
        program_input.cumulative_withdrawn_amount,
    )

    index = program_input.withdrawal_index
    check_first_withdrawal(
        index,
        program_input.cumulative_withdrawn_amount,
        program_input.previous_nullifier_storage_proof,
    )

    check_account_proof(
        program_input.state_root,
        deposit_address(secret),
        TrieAccount.externally_owned(balance=program_input.deposit_amount),
        program_input.deposit_account_proof,
        label="deposit_account",
    )

    registry = check_nullifier_account(
        program_input.state_root,
        program_input.nullifier_address,
        program_input.nullifier_account_proof,
    )

    if index > 0:
        check_previous_nullifier(
            secret,
            index,
            program_input.cumulative_withdrawn_amount,
            registry.storage_root,
            program_input.previous_nullifier_storage_proof,
        )

    return WormholeProgramOutput(
        nullifier_address=program_input.nullifier_address,
        state_root=program_input.state_root,
        withdraw_amount=program_input.withdraw_amount,
        nullifier=nullifier(secret, index),
        next_cumulative_withdrawn_amount_hashed=hash_amount(next_cumulative),
    )


class WormholeProgram:
    """
    Backend-facing boundary of the program.

    Any failed check surfaces as a bare ProgramAbortedException; which
    check failed never leaves the proving environment.
    """

    def __init__(self, pow_log_difficulty: int = POW_LOG_DIFFICULTY) -> None:
        self.pow_log_difficulty = pow_log_difficulty

    def run(self, program_input: WormholeProgramInput) -> WormholeProgramOutput:
        try:
            return execute_wormhole_program(
                program_input, pow_log_difficulty=self.pow_log_difficulty
            )
        except (WormholeException, ValueError):
            raise ProgramAbortedException() from None

    def run_bytes(self, stdin: bytes) -> bytes:
        """Decode a JSON witness, run, and return the committed public values."""
        try:
            program_input = WormholeProgramInput.from_json(stdin)
        except WormholeException:
            raise ProgramAbortedException() from None
        return self.run(program_input).to_public_values()
