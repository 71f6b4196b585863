"""
Module 00 - Schemas
File: chain.py

Purpose: Chain data read by the witness builder.

Field aliases follow the JSON-RPC response shapes of
eth_getBlockByNumber and eth_getProof, so responses validate directly.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from wormhole.crypto.hashing import to_be32

from .types import Address, Hash32, ProofNodes, Uint256


class BlockHeader(BaseModel):
    """The part of a block header the witness is pinned to."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    number: Uint256
    hash: Hash32
    state_root: Hash32 = Field(..., alias="stateRoot")


class StorageProof(BaseModel):
    """One entry of eth_getProof's storageProof list."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    key: Uint256
    value: Uint256 = 0
    proof: ProofNodes = Field(default_factory=list)

    @property
    def slot(self) -> bytes:
        return to_be32(self.key)

    @property
    def word(self) -> bytes:
        return to_be32(self.value)


class AccountProof(BaseModel):
    """Response of eth_getProof."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    address: Address
    nonce: Uint256 = 0
    balance: Uint256 = 0
    code_hash: Hash32 = Field(..., alias="codeHash")
    storage_hash: Hash32 = Field(..., alias="storageHash")
    account_proof: ProofNodes = Field(default_factory=list, alias="accountProof")
    storage_proof: list[StorageProof] = Field(
        default_factory=list,
        alias="storageProof",
    )

    def storage_proof_for(self, slot: bytes) -> StorageProof | None:
        """Find the storage proof of a 32-byte slot."""
        for entry in self.storage_proof:
            if entry.slot == slot:
                return entry
        return None


__all__ = [
    "AccountProof",
    "BlockHeader",
    "StorageProof",
]
