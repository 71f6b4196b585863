"""
Module 00 - Withdrawal Transaction Codec Unit Tests
Tests for wormhole/schemas/transaction.py
"""
import pytest
import rlp

from wormhole.constants import WORMHOLE_TX_TYPE
from wormhole.crypto.hashing import hash_amount, keccak256
from wormhole.schemas.errors import InputMalformedException
from wormhole.schemas.program import WormholeProgramOutput
from wormhole.schemas.transaction import WormholeTx, WormholeTxProof


def make_tx(**overrides) -> WormholeTx:
    output = WormholeProgramOutput(
        nullifier_address=b"\xaa" * 20,
        state_root=b"\xbb" * 32,
        withdraw_amount=10,
        nullifier=b"\xcc" * 32,
        next_cumulative_withdrawn_amount_hashed=hash_amount(10),
    )
    fields = dict(
        chain_id=1,
        nonce=0,
        max_priority_fee_per_gas=1,
        max_fee_per_gas=100,
        gas_limit=500_000,
        to=b"\x11" * 20,
        data=b"",
        access_list=((b"\x22" * 20, (b"\x33" * 32,)),),
        state_root_block_number=7,
        proof=WormholeTxProof.from_output(output, b"succinct-proof"),
    )
    fields.update(overrides)
    return WormholeTx(**fields)


class TestEnvelope:
    """Typed envelope encoding."""

    def test_type_byte(self):
        assert WORMHOLE_TX_TYPE == 5
        assert make_tx().to_bytes()[0] == 0x05

    def test_payload_is_rlp_list(self):
        payload = rlp.decode(make_tx().to_bytes()[1:])
        assert len(payload) == 10
        # proof section is a nested list
        nullifier_address, state_root, value, nullifier, next_hash, proof = payload[9]
        assert nullifier_address == b"\xaa" * 20
        assert state_root == b"\xbb" * 32
        assert value == b"\x0a"
        assert nullifier == b"\xcc" * 32
        assert next_hash == hash_amount(10)
        assert proof == b"succinct-proof"

    def test_decode(self):
        tx = make_tx()
        decoded = WormholeTx.from_bytes(tx.to_bytes())
        assert decoded.to_bytes() == tx.to_bytes()
        assert decoded.state_root_block_number == 7
        assert decoded.proof.withdraw_value == 10
        assert decoded.access_list[0][0] == b"\x22" * 20

    def test_hash(self):
        tx = make_tx()
        assert tx.hash == keccak256(tx.to_bytes())
        assert make_tx(nonce=1).hash != tx.hash

    def test_proof_from_output(self):
        proof = make_tx().proof
        assert proof.state_root == b"\xbb" * 32
        assert proof.nullifier == b"\xcc" * 32


class TestMalformedEnvelope:

    def test_wrong_type_byte(self):
        data = bytearray(make_tx().to_bytes())
        data[0] = 0x02
        with pytest.raises(InputMalformedException, match="transaction type"):
            WormholeTx.from_bytes(bytes(data))

    def test_empty(self):
        with pytest.raises(InputMalformedException):
            WormholeTx.from_bytes(b"")

    def test_truncated_payload(self):
        with pytest.raises(InputMalformedException, match="invalid transaction encoding"):
            WormholeTx.from_bytes(make_tx().to_bytes()[:-3])

    def test_short_to_address(self):
        data = bytes([WORMHOLE_TX_TYPE]) + rlp.encode(
            [1, 0, 1, 100, 21000, b"\x11" * 19, b"", [], 7,
             [b"\xaa" * 20, b"\xbb" * 32, 10, b"\xcc" * 32, b"\xdd" * 32, b""]]
        )
        with pytest.raises(InputMalformedException):
            WormholeTx.from_bytes(data)


class TestPublicOutputs:
    """The proof section carries every public output of the program."""

    def test_public_values_match_program_output(self):
        tx = WormholeTx.from_bytes(make_tx().to_bytes())
        expected = WormholeProgramOutput(
            nullifier_address=b"\xaa" * 20,
            state_root=b"\xbb" * 32,
            withdraw_amount=10,
            nullifier=b"\xcc" * 32,
            next_cumulative_withdrawn_amount_hashed=hash_amount(10),
        )
        assert tx.proof.to_output() == expected
        assert tx.proof.public_values() == expected.to_public_values()

    def test_next_hash_is_in_the_envelope(self):
        assert hash_amount(10) in make_tx().to_bytes()

    def test_oversized_value_is_malformed(self):
        proof = WormholeTxProof(
            nullifier_address=b"\xaa" * 20,
            state_root=b"\xbb" * 32,
            withdraw_value=1 << 256,
            nullifier=b"\xcc" * 32,
            next_cumulative_withdrawn_amount_hashed=hash_amount(10),
            proof=b"",
        )
        with pytest.raises(InputMalformedException):
            proof.public_values()
