"""
ChainDataSource backed by an Ethereum JSON-RPC endpoint.

Methods used:
- eth_getBlockByNumber
- eth_getProof (EIP-1186)
- eth_getStorageAt
"""

from __future__ import annotations

from typing import Any, Sequence

from pydantic import BaseModel, ValidationError

from wormhole.crypto.hashing import to_be32, to_hex
from wormhole.schemas.chain import AccountProof, BlockHeader
from wormhole.schemas.errors import ExternalFetchException, InputMalformedException
from wormhole.schemas.types import parse_quantity
from wormhole.witness.source import BlockId

from .client import JsonRpcClient


def block_param(block: BlockId) -> str:
    """JSON-RPC block parameter: hex quantity or tag."""
    if isinstance(block, int):
        if block < 0:
            raise InputMalformedException(f"negative block number {block}", field_path="block")
        return hex(block)
    return block


class JsonRpcChainSource:
    """
    Reads blocks, proofs and storage through a JsonRpcClient.
    """

    def __init__(self, client: JsonRpcClient) -> None:
        self.client = client

    def _parse(
        self,
        model: type[BaseModel],
        result: Any,
        *,
        fetch: str,
        block: BlockId,
    ) -> Any:
        if result is None:
            raise ExternalFetchException(
                f"{fetch}: node returned no data",
                fetch=fetch,
                endpoint=self.client.url,
                block=block,
            )
        try:
            return model.model_validate(result)
        except ValidationError as e:
            raise ExternalFetchException(
                f"{fetch}: malformed response: {e.errors()[0]['msg']}",
                fetch=fetch,
                endpoint=self.client.url,
                block=block,
                retryable=False,
            ) from e

    def get_block(self, block: BlockId) -> BlockHeader:
        result = self.client.call("eth_getBlockByNumber", [block_param(block), False])
        return self._parse(BlockHeader, result, fetch="block", block=block)

    def get_proof(
        self,
        address: bytes,
        slots: Sequence[bytes],
        block: int,
    ) -> AccountProof:
        result = self.client.call(
            "eth_getProof",
            [to_hex(address), [to_hex(slot) for slot in slots], block_param(block)],
        )
        return self._parse(AccountProof, result, fetch=f"proof:{to_hex(address)}", block=block)

    def get_storage_at(self, address: bytes, slot: bytes, block: int) -> bytes:
        result = self.client.call(
            "eth_getStorageAt",
            [to_hex(address), to_hex(slot), block_param(block)],
        )
        try:
            return to_be32(parse_quantity(result))
        except (TypeError, ValueError) as e:
            raise ExternalFetchException(
                f"storage: malformed word {result!r}",
                fetch="storage",
                endpoint=self.client.url,
                block=block,
                retryable=False,
            ) from e
