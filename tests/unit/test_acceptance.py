"""
Chain-Level Acceptance Unit Tests
Tests for wormhole/chain/

A withdrawal is only included when its proof verifies, its nullifier is
unspent and its state root is canonical.
"""
import pytest

from wormhole.chain.acceptance import check_acceptance
from wormhole.chain.registry import ZERO_SLOT, apply_withdrawal, is_spent
from wormhole.constants import POW_LOG_DIFFICULTY
from wormhole.crypto.hashing import hash_amount
from wormhole.crypto.secret import nullifier
from wormhole.program.entry import execute_wormhole_program
from wormhole.schemas.errors import ProofOfWorkException
from wormhole.schemas.transaction import WormholeTx, WormholeTxProof

from fixtures import REGISTRY_OWNER, TEST_SECRET, make_program_input


VALID_PROOF = b"valid-proof"


def accept_valid(proof: WormholeTxProof) -> bool:
    return proof.proof == VALID_PROOF


def make_tx(output, block_number, proof=VALID_PROOF):
    return WormholeTx(
        chain_id=1,
        nonce=0,
        max_priority_fee_per_gas=0,
        max_fee_per_gas=0,
        gas_limit=300_000,
        to=output.nullifier_address,
        data=b"",
        access_list=(),
        state_root_block_number=block_number,
        proof=WormholeTxProof.from_output(output, proof),
    )


@pytest.fixture
def first_withdrawal(funded_chain):
    program_input = make_program_input(funded_chain, TEST_SECRET, withdraw=10)
    output = execute_wormhole_program(program_input, pow_log_difficulty=POW_LOG_DIFFICULTY)
    return output, make_tx(output, program_input.block_number)


def _accept(chain, tx, verifier=accept_valid):
    return check_acceptance(
        tx,
        registry=chain.registry,
        state_root_at=chain.state_root_at,
        proof_verifier=verifier,
    )


class TestAcceptance:

    def test_valid_withdrawal_accepted(
        self, funded_chain, first_withdrawal, assert_check_passed
    ):
        _, tx = first_withdrawal
        result = _accept(funded_chain, tx)

        assert result.ok
        assert_check_passed(result, "proof_valid")
        assert_check_passed(result, "nullifier_unspent")
        assert_check_passed(result, "state_root_matches")

    def test_invalid_proof_rejected(self, funded_chain, first_withdrawal, assert_check_failed):
        output, _ = first_withdrawal
        tx = make_tx(output, funded_chain.get_block("latest").number, proof=b"forged")
        result = _accept(funded_chain, tx)

        assert not result.ok
        assert_check_failed(result, "proof_valid")

    def test_verifier_error_is_a_failed_check(
        self, funded_chain, first_withdrawal, assert_check_failed
    ):
        _, tx = first_withdrawal

        def raising(proof):
            raise ProofOfWorkException("bad")

        result = _accept(funded_chain, tx, verifier=raising)
        assert_check_failed(result, "proof_valid")
        assert result.get_check("proof_valid").details["code"] == "PROOF_OF_WORK_FAILED"

    def test_unknown_block_rejected(self, funded_chain, first_withdrawal, assert_check_failed):
        output, _ = first_withdrawal
        result = _accept(funded_chain, make_tx(output, 999))
        assert_check_failed(result, "state_root_matches")

    def test_stale_state_root_rejected(
        self, funded_chain, first_withdrawal, assert_check_failed
    ):
        """The state root must be the one of the named block."""
        output, _ = first_withdrawal
        result = _accept(funded_chain, make_tx(output, 0))
        assert_check_failed(result, "state_root_matches")
        assert result.error_count == 1


class TestDoubleSpend:
    """Replaying a withdrawal index is caught by the registry."""

    def test_recorded_nullifier_is_spent(self, funded_chain, first_withdrawal):
        output, _ = first_withdrawal
        assert not is_spent(funded_chain.registry, output.nullifier)
        apply_withdrawal(funded_chain.registry, output, caller=REGISTRY_OWNER)
        assert is_spent(funded_chain.registry, output.nullifier)
        assert funded_chain.registry.read(output.nullifier) != ZERO_SLOT

    def test_reused_index_zero_rejected(
        self, funded_chain, first_withdrawal, assert_check_failed, assert_check_passed
    ):
        """
        After index 0 is spent, a fresh index-0 proof against a newer block
        still passes the program but not acceptance.
        """
        output, _ = first_withdrawal
        apply_withdrawal(funded_chain.registry, output, caller=REGISTRY_OWNER)
        funded_chain.mine()

        replay_input = make_program_input(funded_chain, TEST_SECRET, withdraw=10)
        replay_output = execute_wormhole_program(replay_input)
        assert replay_output.nullifier == output.nullifier

        result = _accept(funded_chain, make_tx(replay_output, replay_input.block_number))
        assert not result.ok
        assert_check_failed(result, "nullifier_unspent")
        assert_check_passed(result, "state_root_matches")

    def test_only_owner_writes(self, funded_chain, first_withdrawal):
        output, _ = first_withdrawal
        with pytest.raises(PermissionError):
            apply_withdrawal(funded_chain.registry, output, caller=b"\x01" * 20)


class TestTransactionLifecycle:
    """The chain works from transaction bytes alone."""

    def test_decoded_tx_drives_the_next_withdrawal(self, funded_chain, first_withdrawal):
        output, tx = first_withdrawal
        committed = output.to_public_values()

        def verifier(proof):
            return proof.proof == VALID_PROOF and proof.public_values() == committed

        decoded = WormholeTx.from_bytes(tx.to_bytes())
        assert _accept(funded_chain, decoded, verifier=verifier).ok

        apply_withdrawal(funded_chain.registry, decoded.proof, caller=REGISTRY_OWNER)
        funded_chain.mine()
        assert funded_chain.registry.read(output.nullifier) == hash_amount(10)

        second_input = make_program_input(
            funded_chain, TEST_SECRET, withdraw=50, cumulative=10, index=1
        )
        second = execute_wormhole_program(second_input)
        assert second.nullifier == nullifier(TEST_SECRET, 1)
        assert second.next_cumulative_withdrawn_amount_hashed == hash_amount(60)

    def test_tampered_public_output_fails_proof_check(
        self, funded_chain, first_withdrawal, assert_check_failed
    ):
        output, tx = first_withdrawal
        committed = output.to_public_values()
        forged_output = output.model_copy(update={"withdraw_amount": output.withdraw_amount + 1})
        forged = make_tx(forged_output, tx.state_root_block_number)

        result = _accept(funded_chain, forged, verifier=lambda p: p.public_values() == committed)
        assert_check_failed(result, "proof_valid")
