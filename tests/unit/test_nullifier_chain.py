"""
Module 03 - Nullifier-Chain Validator Unit Tests
Tests for wormhole/verification/nullifier_chain.py
"""
import pytest

from wormhole.crypto.hashing import hash_amount
from wormhole.crypto.secret import nullifier
from wormhole.schemas.errors import NullifierChainException, StateProofException
from wormhole.verification.nullifier_chain import (
    check_first_withdrawal,
    check_previous_nullifier,
)

from fixtures import REGISTRY_ADDRESS, REGISTRY_OWNER, TEST_SECRET


def _record(chain, index, cumulative):
    chain.registry.write(
        nullifier(TEST_SECRET, index), hash_amount(cumulative), caller=REGISTRY_OWNER
    )
    chain.mine()


def _previous_proof(chain, index):
    slot = nullifier(TEST_SECRET, index - 1)
    proof = chain.get_proof(REGISTRY_ADDRESS, [slot], "latest")
    return proof.storage_hash, proof.storage_proof[0].proof


class TestFirstWithdrawal:
    """Index-0 invariants."""

    def test_clean_first_withdrawal(self):
        check_first_withdrawal(0, 0, [])

    def test_cumulative_must_be_zero(self):
        with pytest.raises(NullifierChainException, match="cumulative") as exc_info:
            check_first_withdrawal(0, 5, [])
        assert exc_info.value.details["withdrawal_index"] == 0

    def test_previous_proof_must_be_empty(self):
        with pytest.raises(NullifierChainException, match="empty"):
            check_first_withdrawal(0, 0, [b"\xc0"])

    def test_later_index_is_not_checked(self):
        check_first_withdrawal(3, 5, [b"\xc0"])


class TestPreviousNullifier:
    """The previous nullifier must record the claimed cumulative amount."""

    def test_recorded_cumulative_accepted(self, chain):
        _record(chain, 0, 10)
        storage_root, proof = _previous_proof(chain, 1)
        check_previous_nullifier(TEST_SECRET, 1, 10, storage_root, proof)

    def test_understated_cumulative_rejected(self, chain):
        _record(chain, 0, 10)
        storage_root, proof = _previous_proof(chain, 1)
        with pytest.raises(NullifierChainException) as exc_info:
            check_previous_nullifier(TEST_SECRET, 1, 0, storage_root, proof)
        assert exc_info.value.details["previous_nullifier_recorded"] is True

    def test_skipped_index_rejected(self, chain):
        """Index 2 cannot be used while index 1 was never spent."""
        _record(chain, 0, 10)
        storage_root, proof = _previous_proof(chain, 2)
        with pytest.raises(NullifierChainException) as exc_info:
            check_previous_nullifier(TEST_SECRET, 2, 10, storage_root, proof)
        assert exc_info.value.details["previous_nullifier_recorded"] is False

    def test_proof_against_wrong_root_is_state_proof_error(self, chain):
        _record(chain, 0, 10)
        _, proof = _previous_proof(chain, 1)
        with pytest.raises(StateProofException):
            check_previous_nullifier(TEST_SECRET, 1, 10, b"\x13" * 32, proof)
