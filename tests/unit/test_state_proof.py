"""
Module 03 - State-Proof Verifier Unit Tests
Tests for wormhole/verification/state_proof.py
"""
import pytest

from wormhole.crypto.hashing import hash_amount
from wormhole.crypto.secret import deposit_address
from wormhole.schemas.errors import ErrorCodes, NullifierAccountMissing, StateProofException
from wormhole.trie import TrieAccount
from wormhole.verification.state_proof import (
    ZERO_WORD,
    check_account_proof,
    check_nullifier_account,
    check_storage_proof,
    read_proven_account,
    verify_account_proof,
    verify_storage_proof,
)

from fixtures import REGISTRY_ADDRESS, REGISTRY_OWNER, TEST_SECRET


class TestAccountProofs:
    """Tests for account proofs against a state root."""

    def test_funded_deposit_proves(self, funded_chain):
        address = deposit_address(TEST_SECRET)
        header = funded_chain.get_block("latest")
        proof = funded_chain.get_proof(address, [], header.number)
        check_account_proof(
            header.state_root,
            address,
            TrieAccount.externally_owned(100),
            proof.account_proof,
        )

    def test_absent_account_proves_none(self, chain):
        address = b"\x42" * 20
        header = chain.get_block("latest")
        proof = chain.get_proof(address, [], header.number)
        assert verify_account_proof(header.state_root, address, None, proof.account_proof)
        assert not verify_account_proof(
            header.state_root,
            address,
            TrieAccount.externally_owned(0),
            proof.account_proof,
        )

    def test_proof_from_other_block_rejected(self, funded_chain):
        address = deposit_address(TEST_SECRET)
        old = funded_chain.get_block(0)
        proof = funded_chain.get_proof(address, [], "latest")
        with pytest.raises(StateProofException) as exc_info:
            check_account_proof(
                old.state_root,
                address,
                TrieAccount.externally_owned(100),
                proof.account_proof,
                label="deposit_account",
            )
        assert exc_info.value.details["proof"] == "deposit_account"


def _flip(data: bytes, position: int = -1) -> bytes:
    mutated = bytearray(data)
    mutated[position] ^= 0x01
    return bytes(mutated)


def _record_slot(chain, slot, word):
    chain.registry.write(slot, word, caller=REGISTRY_OWNER)
    chain.mine()
    header = chain.get_block("latest")
    return header.state_root, chain.get_proof(REGISTRY_ADDRESS, [slot], header.number)


class TestStorageProofs:
    """Tests for storage proofs against an account's storage root."""

    def test_set_slot_proves(self, chain):
        slot, word = b"\x01" * 32, b"\x00" * 31 + b"\x07"
        _, proof = _record_slot(chain, slot, word)
        check_storage_proof(proof.storage_hash, slot, word, proof.storage_proof[0].proof)

    def test_zero_word_means_absent(self, chain):
        _, proof = _record_slot(chain, b"\x01" * 32, b"\x09" * 32)
        missing = b"\x02" * 32
        absent = chain.get_proof(REGISTRY_ADDRESS, [missing], "latest")
        check_storage_proof(proof.storage_hash, missing, ZERO_WORD, absent.storage_proof[0].proof)

    def test_wrong_word_rejected(self, chain):
        slot = b"\x01" * 32
        _, proof = _record_slot(chain, slot, b"\x09" * 32)
        with pytest.raises(StateProofException):
            check_storage_proof(
                proof.storage_hash, slot, b"\x08" * 32, proof.storage_proof[0].proof
            )


class TestVerifyAccountProof:
    """Boolean account contract: valid proofs pass, any tampering fails."""

    @pytest.fixture
    def deposit(self, funded_chain):
        address = deposit_address(TEST_SECRET)
        header = funded_chain.get_block("latest")
        proof = funded_chain.get_proof(address, [], header.number)
        return header.state_root, address, list(proof.account_proof)

    def test_valid_proof(self, deposit):
        root, address, proof = deposit
        assert verify_account_proof(root, address, TrieAccount.externally_owned(100), proof)

    @pytest.mark.parametrize("node", [0, -1])
    def test_tampered_proof_node(self, deposit, node):
        root, address, proof = deposit
        proof[node] = _flip(proof[node], len(proof[node]) // 2)
        assert not verify_account_proof(root, address, TrieAccount.externally_owned(100), proof)

    def test_tampered_value(self, deposit):
        root, address, proof = deposit
        assert not verify_account_proof(root, address, TrieAccount.externally_owned(99), proof)

    def test_tampered_root(self, deposit):
        root, address, proof = deposit
        assert not verify_account_proof(_flip(root), address, TrieAccount.externally_owned(100), proof)

    def test_garbage_proof(self, deposit):
        root, address, _ = deposit
        assert not verify_account_proof(root, address, None, [b"\xff\x00"])


class TestVerifyStorageProof:
    """Boolean storage contract: the slot is read under the state root via the account."""

    SLOT = b"\x05" * 32
    WORD = hash_amount(10)

    @pytest.fixture
    def recorded(self, chain):
        state_root, proof = _record_slot(chain, self.SLOT, self.WORD)
        return state_root, list(proof.account_proof), list(proof.storage_proof[0].proof), proof

    def test_valid_proof(self, recorded):
        state_root, account_proof, storage_proof, _ = recorded
        assert verify_storage_proof(
            state_root, REGISTRY_ADDRESS, self.SLOT, self.WORD, storage_proof,
            account_proof=account_proof,
        )

    def test_storage_root_is_not_a_state_root(self, recorded):
        _, account_proof, storage_proof, proof = recorded
        assert not verify_storage_proof(
            proof.storage_hash, REGISTRY_ADDRESS, self.SLOT, self.WORD, storage_proof,
            account_proof=account_proof,
        )

    def test_other_address_rejected(self, recorded):
        state_root, account_proof, storage_proof, _ = recorded
        assert not verify_storage_proof(
            state_root, b"\x42" * 20, self.SLOT, self.WORD, storage_proof,
            account_proof=account_proof,
        )

    @pytest.mark.parametrize("which", ["account", "storage"])
    def test_tampered_proof(self, recorded, which):
        state_root, account_proof, storage_proof, _ = recorded
        target = account_proof if which == "account" else storage_proof
        target[-1] = _flip(target[-1], len(target[-1]) // 2)
        assert not verify_storage_proof(
            state_root, REGISTRY_ADDRESS, self.SLOT, self.WORD, storage_proof,
            account_proof=account_proof,
        )

    def test_tampered_value(self, recorded):
        state_root, account_proof, storage_proof, _ = recorded
        assert not verify_storage_proof(
            state_root, REGISTRY_ADDRESS, self.SLOT, hash_amount(11), storage_proof,
            account_proof=account_proof,
        )

    def test_tampered_root(self, recorded):
        state_root, account_proof, storage_proof, _ = recorded
        assert not verify_storage_proof(
            _flip(state_root), REGISTRY_ADDRESS, self.SLOT, self.WORD, storage_proof,
            account_proof=account_proof,
        )



class TestNullifierAccount:
    """Tests for the registry account proof."""

    def test_registry_account_proves(self, chain):
        header = chain.get_block("latest")
        proof = chain.get_proof(REGISTRY_ADDRESS, [], header.number)
        account = check_nullifier_account(header.state_root, REGISTRY_ADDRESS, proof.account_proof)
        assert account.storage_root == proof.storage_hash

    def test_empty_proof_is_missing_account(self):
        with pytest.raises(NullifierAccountMissing) as exc_info:
            read_proven_account([])
        assert exc_info.value.code == ErrorCodes.NULLIFIER_ACCOUNT_MISSING

    def test_exclusion_proof_is_missing_account(self, funded_chain):
        """An exclusion proof for the registry address is rejected."""
        header = funded_chain.get_block("latest")
        proof = funded_chain.get_proof(b"\x77" * 20, [], header.number)
        with pytest.raises(StateProofException):
            check_nullifier_account(header.state_root, b"\x77" * 20, proof.account_proof)

    def test_registry_proof_under_other_address_rejected(self, chain):
        header = chain.get_block("latest")
        proof = chain.get_proof(REGISTRY_ADDRESS, [], header.number)
        with pytest.raises(StateProofException):
            check_nullifier_account(header.state_root, b"\x66" * 20, proof.account_proof)
