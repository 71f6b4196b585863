"""
Module 04 - Program

The withdrawal program and its proving-backend adapters.

Usage:
    from wormhole.program import LocalExecutor, create_backend

    report = LocalExecutor().execute(create_backend("sp1"), witness_json)
    print(report.output.nullifier.hex())
"""
from .entry import WormholeProgram, execute_wormhole_program
from .backends import (
    BACKENDS,
    BackendAdapter,
    ExecutionReport,
    GuestEnv,
    LocalExecutor,
    PicoAdapter,
    ProofArtifact,
    ProvingEngine,
    Risc0Adapter,
    Sp1Adapter,
    create_backend,
)

__all__ = [
    "WormholeProgram",
    "execute_wormhole_program",
    "BACKENDS",
    "BackendAdapter",
    "ExecutionReport",
    "GuestEnv",
    "LocalExecutor",
    "PicoAdapter",
    "ProofArtifact",
    "ProvingEngine",
    "Risc0Adapter",
    "Sp1Adapter",
    "create_backend",
]
