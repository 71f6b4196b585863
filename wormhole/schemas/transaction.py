"""
Module 00 - Schemas
File: transaction.py

Purpose: RLP codec of the withdrawal transaction.

Wire format (EIP-2718 typed envelope):

    0x05 ‖ rlp([chain_id, nonce, max_priority_fee_per_gas, max_fee_per_gas,
                gas_limit, to, data, access_list, state_root_block_number,
                [nullifier_address, state_root, withdraw_value, nullifier,
                 next_cumulative_withdrawn_amount_hashed, proof]])

The proof section carries every public output of the program, so the chain
can rebuild the committed public values and record the next cumulative
hash without any host-side data.

The transaction carries no value and no signature: the proof authorizes it.
"""

from __future__ import annotations

import rlp
from pydantic import ValidationError
from rlp.exceptions import RLPException
from rlp.sedes import Binary, CountableList, List, big_endian_int, binary

from wormhole.constants import WORMHOLE_TX_TYPE
from wormhole.crypto.hashing import keccak256

from .errors import InputMalformedException
from .program import WormholeProgramOutput


address = Binary.fixed_length(20)
hash32 = Binary.fixed_length(32)

access_list_sedes = CountableList(List([address, CountableList(hash32)]))


class WormholeTxProof(rlp.Serializable):
    """Public outputs of the program plus the succinct proof bytes."""

    fields = [
        ("nullifier_address", address),
        ("state_root", hash32),
        ("withdraw_value", big_endian_int),
        ("nullifier", hash32),
        ("next_cumulative_withdrawn_amount_hashed", hash32),
        ("proof", binary),
    ]

    @classmethod
    def from_output(cls, output: WormholeProgramOutput, proof: bytes) -> "WormholeTxProof":
        return cls(
            nullifier_address=output.nullifier_address,
            state_root=output.state_root,
            withdraw_value=output.withdraw_amount,
            nullifier=output.nullifier,
            next_cumulative_withdrawn_amount_hashed=output.next_cumulative_withdrawn_amount_hashed,
            proof=proof,
        )

    def to_output(self) -> WormholeProgramOutput:
        """
        Raises:
            InputMalformedException: If withdraw_value does not fit 256 bits
        """
        try:
            return WormholeProgramOutput(
                nullifier_address=self.nullifier_address,
                state_root=self.state_root,
                withdraw_amount=self.withdraw_value,
                nullifier=self.nullifier,
                next_cumulative_withdrawn_amount_hashed=self.next_cumulative_withdrawn_amount_hashed,
            )
        except ValidationError as e:
            raise InputMalformedException(
                "transaction proof does not hold valid public outputs",
                field_path="proof",
            ) from e

    def public_values(self) -> bytes:
        """The 148-byte public values the attached proof commits to."""
        return self.to_output().to_public_values()


class WormholeTx(rlp.Serializable):
    """Withdrawal transaction payload."""

    fields = [
        ("chain_id", big_endian_int),
        ("nonce", big_endian_int),
        ("max_priority_fee_per_gas", big_endian_int),
        ("max_fee_per_gas", big_endian_int),
        ("gas_limit", big_endian_int),
        ("to", address),
        ("data", binary),
        ("access_list", access_list_sedes),
        ("state_root_block_number", big_endian_int),
        ("proof", WormholeTxProof),
    ]

    tx_type = WORMHOLE_TX_TYPE

    def to_bytes(self) -> bytes:
        """Typed envelope: type byte followed by the RLP payload."""
        return bytes([self.tx_type]) + rlp.encode(self)

    @property
    def hash(self) -> bytes:
        return keccak256(self.to_bytes())

    @classmethod
    def from_bytes(cls, data: bytes) -> "WormholeTx":
        """
        Decode a typed envelope.

        Raises:
            InputMalformedException: On a wrong type byte or bad RLP
        """
        if not data or data[0] != WORMHOLE_TX_TYPE:
            raise InputMalformedException(
                f"expected transaction type {WORMHOLE_TX_TYPE:#04x}",
                field_path="tx_type",
            )
        try:
            return rlp.decode(data[1:], sedes=cls)
        except RLPException as e:
            raise InputMalformedException(
                f"invalid transaction encoding: {e}",
                field_path="payload",
            ) from e


__all__ = [
    "WormholeTx",
    "WormholeTxProof",
]
