"""
Chain data source interface of the witness builder.
"""

from __future__ import annotations

from typing import Annotated, Protocol, Sequence, Union

from pydantic import Field

from wormhole.schemas.chain import AccountProof, BlockHeader


# Block number or tag ("latest", "safe", "finalized", ...)
BlockId = Union[Annotated[int, Field(ge=0)], str]


class ChainDataSource(Protocol):
    """Read-only access to chain state at a given block."""

    def get_block(self, block: BlockId) -> BlockHeader:
        """Header of `block`; raises ExternalFetchException if unknown."""
        ...

    def get_proof(
        self,
        address: bytes,
        slots: Sequence[bytes],
        block: int,
    ) -> AccountProof:
        """eth_getProof of `address` and its storage `slots` at `block`."""
        ...

    def get_storage_at(self, address: bytes, slot: bytes, block: int) -> bytes:
        """32-byte word stored at `slot` of `address` at `block`."""
        ...
