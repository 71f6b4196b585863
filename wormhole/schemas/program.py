"""
Module 00 - Schemas
File: program.py

Purpose: Witness and output records of the withdrawal program.

WormholeProgramInput is the structured witness produced by the witness
builder and consumed by the program. WormholeProgramOutput holds the
values the program commits publicly; its byte layout is fixed:

    nullifier_address (20) ‖ state_root (32) ‖ withdraw_amount (32, BE)
    ‖ nullifier (32) ‖ next_cumulative_withdrawn_amount_hashed (32)
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from wormhole.constants import ADDRESS_LENGTH, HASH_LENGTH
from wormhole.crypto.hashing import to_be32

from .errors import InputMalformedException
from .types import Address, Hash32, HexBytes, ProofNodes, Uint256


PUBLIC_VALUES_LENGTH = ADDRESS_LENGTH + 4 * HASH_LENGTH


class WormholeProgramInput(BaseModel):
    """
    Private and public inputs of one withdrawal proof.

    The secret is kept as raw bytes: the program only checks its
    proof-of-work, length rules are enforced when a witness is built.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    secret: HexBytes = Field(
        ...,
        description="Wormhole secret (private)",
    )
    deposit_amount: Uint256 = Field(
        ...,
        description="Total amount ever deposited to the deposit address",
    )
    withdraw_amount: Uint256 = Field(
        ...,
        description="Amount withdrawn by this proof (public)",
    )
    cumulative_withdrawn_amount: Uint256 = Field(
        default=0,
        description="Total withdrawn by earlier withdrawals of this secret",
    )
    withdrawal_index: Uint256 = Field(
        default=0,
        description="Position of this withdrawal in the nullifier chain",
    )
    state_root: Hash32 = Field(
        ...,
        description="State root the proofs are checked against (public)",
    )
    deposit_account_proof: ProofNodes = Field(
        default_factory=list,
        description="Account proof of the deposit address",
    )
    nullifier_address: Address = Field(
        ...,
        description="Address of the nullifier registry (public)",
    )
    nullifier_account_proof: ProofNodes = Field(
        default_factory=list,
        description="Account proof of the nullifier registry",
    )
    previous_nullifier_storage_proof: ProofNodes = Field(
        default_factory=list,
        description="Storage proof of the previous nullifier; empty at index 0",
    )
    block_number: Optional[int] = Field(
        default=None,
        ge=0,
        description="Block the state root belongs to (audit only)",
    )
    block_hash: Optional[Hash32] = Field(
        default=None,
        description="Hash of that block (audit only)",
    )

    def to_json(self, **kwargs: Any) -> str:
        return self.model_dump_json(exclude_none=True, **kwargs)

    @classmethod
    def from_json(cls, data: str | bytes) -> "WormholeProgramInput":
        """
        Parse a JSON witness.

        Raises:
            InputMalformedException: If any field is missing or invalid
        """
        try:
            return cls.model_validate_json(data)
        except ValidationError as e:
            raise _malformed(e) from e

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WormholeProgramInput":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise _malformed(e) from e


class WormholeProgramOutput(BaseModel):
    """Values committed publicly by a successful program run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    nullifier_address: Address
    state_root: Hash32
    withdraw_amount: Uint256
    nullifier: Hash32 = Field(
        ...,
        description="nullifier(secret, withdrawal_index); must be unspent",
    )
    next_cumulative_withdrawn_amount_hashed: Hash32 = Field(
        ...,
        description="Registry value to store at `nullifier` once accepted",
    )

    def to_public_values(self) -> bytes:
        return (
            self.nullifier_address
            + self.state_root
            + to_be32(self.withdraw_amount)
            + self.nullifier
            + self.next_cumulative_withdrawn_amount_hashed
        )

    @classmethod
    def from_public_values(cls, data: bytes) -> "WormholeProgramOutput":
        """
        Decode committed public values.

        Raises:
            InputMalformedException: If the length is not exactly 148 bytes
        """
        if len(data) != PUBLIC_VALUES_LENGTH:
            raise InputMalformedException(
                f"public values must be {PUBLIC_VALUES_LENGTH} bytes, got {len(data)}",
                field_path="public_values",
            )
        offset = ADDRESS_LENGTH
        words = [data[offset + i * 32:offset + (i + 1) * 32] for i in range(4)]
        return cls(
            nullifier_address=data[:ADDRESS_LENGTH],
            state_root=words[0],
            withdraw_amount=int.from_bytes(words[1], "big"),
            nullifier=words[2],
            next_cumulative_withdrawn_amount_hashed=words[3],
        )


def _malformed(error: ValidationError) -> InputMalformedException:
    first = error.errors()[0]
    field_path = ".".join(str(part) for part in first.get("loc", ()))
    return InputMalformedException(
        f"invalid program input: {first.get('msg', 'validation failed')}",
        field_path=field_path or None,
        details={"error_count": error.error_count()},
    )


__all__ = [
    "PUBLIC_VALUES_LENGTH",
    "WormholeProgramInput",
    "WormholeProgramOutput",
]
