"""
Test fixtures package for wormhole tests.

- chain.py: InMemoryChain and MockNullifierRegistry
- common.py: secrets and witness factories
- rpc.py: HTTP doubles for the JSON-RPC client

Usage:
    from fixtures import InMemoryChain, make_program_input, TEST_SECRET
"""

from .chain import (
    REGISTRY_ADDRESS,
    REGISTRY_OWNER,
    InMemoryChain,
    MockNullifierRegistry,
)
from .rpc import FakeNodeHttp, ScriptedHttp, rpc_response
from .common import (
    LOW_DIFFICULTY,
    TEST_SECRET,
    fund_deposit,
    make_program_input,
    make_secret,
    withdraw_and_record,
)

__all__ = [
    # Chain
    "REGISTRY_ADDRESS",
    "REGISTRY_OWNER",
    "InMemoryChain",
    "MockNullifierRegistry",
    # RPC
    "FakeNodeHttp",
    "ScriptedHttp",
    "rpc_response",
    # Common
    "LOW_DIFFICULTY",
    "TEST_SECRET",
    "fund_deposit",
    "make_program_input",
    "make_secret",
    "withdraw_and_record",
]
