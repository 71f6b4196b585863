"""
Runtime Configuration Module

Configuration loading from defaults, YAML, dicts and WORMHOLE_* environment variables.
"""

from .runtime import (
    RuntimeConfig,
    RpcConfig,
    ProtocolConfig,
    WitnessConfig,
)

__all__ = [
    "RuntimeConfig",
    "RpcConfig",
    "ProtocolConfig",
    "WitnessConfig",
]
