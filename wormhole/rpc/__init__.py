"""
JSON-RPC access to chain state.
"""

from .client import JsonRpcClient, JsonRpcError
from .chain_source import JsonRpcChainSource, block_param

__all__ = [
    "JsonRpcClient",
    "JsonRpcError",
    "JsonRpcChainSource",
    "block_param",
]
