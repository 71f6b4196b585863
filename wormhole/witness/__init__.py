"""
Module 05 - Witness Builder

Usage:
    from wormhole.rpc import JsonRpcChainSource, JsonRpcClient
    from wormhole.witness import WitnessBuilder, WitnessRequest

    builder = WitnessBuilder(JsonRpcChainSource(JsonRpcClient(url)))
    witness = builder.build(WitnessRequest(
        secret=secret_hex,
        nullifier_address=registry,
        withdraw_amount=10**17,
    ))
"""
from .source import BlockId, ChainDataSource
from .builder import WitnessBuilder, WitnessRequest

__all__ = [
    "BlockId",
    "ChainDataSource",
    "WitnessBuilder",
    "WitnessRequest",
]
