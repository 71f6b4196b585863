"""
Proving Backend Adapters

Thin per-backend entry shims around the shared program:
- SP1 (Succinct)
- RISC Zero
- Pico (Brevis)

Each adapter reads the JSON witness from the backend's stdin, runs
WormholeProgram and commits the public values with the backend's commit
primitive. The SDKs themselves are opaque engines behind ProvingEngine.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from wormhole.constants import POW_LOG_DIFFICULTY
from wormhole.schemas.program import WormholeProgramOutput

from .entry import WormholeProgram


logger = logging.getLogger(__name__)


@dataclass
class GuestEnv:
    """Input and committed output of one program execution."""

    stdin: bytes
    journal: bytearray = field(default_factory=bytearray)

    def read(self) -> bytes:
        return self.stdin

    def commit(self, data: bytes) -> None:
        self.journal.extend(data)


class BackendAdapter(ABC):
    """
    Entry shim of one proving backend.
    """

    def __init__(self, program: Optional[WormholeProgram] = None) -> None:
        self.program = program or WormholeProgram()

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (sp1, risc0, pico)."""
        ...

    @abstractmethod
    def commit(self, env: GuestEnv, public_values: bytes) -> None:
        """Write public values with the backend's commit primitive."""
        ...

    def main(self, env: GuestEnv) -> None:
        """Guest entrypoint: read input, execute, commit."""
        public_values = self.program.run_bytes(env.read())
        self.commit(env, public_values)


class Sp1Adapter(BackendAdapter):
    """SP1: sp1_zkvm::io::commit of the output record."""

    @property
    def name(self) -> str:
        return "sp1"

    def commit(self, env: GuestEnv, public_values: bytes) -> None:
        env.commit(public_values)


class Risc0Adapter(BackendAdapter):
    """RISC Zero: the output record goes to the receipt journal."""

    @property
    def name(self) -> str:
        return "risc0"

    def commit(self, env: GuestEnv, public_values: bytes) -> None:
        env.commit(public_values)


class PicoAdapter(BackendAdapter):
    """Pico: pico_sdk::io::commit of the output record."""

    @property
    def name(self) -> str:
        return "pico"

    def commit(self, env: GuestEnv, public_values: bytes) -> None:
        env.commit(public_values)


@dataclass
class ExecutionReport:
    """Outcome of executing a backend program without proving."""

    backend: str
    public_values: bytes
    duration_ms: float

    @property
    def output(self) -> WormholeProgramOutput:
        return WormholeProgramOutput.from_public_values(self.public_values)

    def to_dict(self) -> dict[str, Any]:
        return {
            "backend": self.backend,
            "public_values": "0x" + self.public_values.hex(),
            "output": self.output.model_dump(mode="json"),
            "duration_ms": round(self.duration_ms, 3),
        }


@dataclass
class ProofArtifact:
    """A succinct proof with the public values it commits to."""

    backend: str
    public_values: bytes
    proof: bytes


class ProvingEngine(Protocol):
    """Opaque proving SDK: program plus inputs in, succinct proof out."""

    def prove(self, adapter: BackendAdapter, stdin: bytes) -> ProofArtifact:
        ...

    def verify(self, artifact: ProofArtifact) -> bool:
        ...


class LocalExecutor:
    """
    Runs an adapter in-process, the equivalent of the SDKs' execute mode.

    Raises ProgramAbortedException when any check fails.
    """

    def execute(self, adapter: BackendAdapter, stdin: bytes) -> ExecutionReport:
        env = GuestEnv(stdin=stdin)
        started = time.perf_counter()
        adapter.main(env)
        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(f"Executed {adapter.name} program in {duration_ms:.1f} ms")
        return ExecutionReport(
            backend=adapter.name,
            public_values=bytes(env.journal),
            duration_ms=duration_ms,
        )


BACKENDS: dict[str, type[BackendAdapter]] = {
    "sp1": Sp1Adapter,
    "risc0": Risc0Adapter,
    "pico": PicoAdapter,
}


def create_backend(
    backend_name: str,
    pow_log_difficulty: int = POW_LOG_DIFFICULTY,
) -> BackendAdapter:
    """
    Factory function to create a backend adapter.

    Raises:
        ValueError: For an unknown backend name
    """
    adapter_cls = BACKENDS.get(backend_name.lower())
    if adapter_cls is None:
        raise ValueError(f"Unknown backend: {backend_name}")
    return adapter_cls(WormholeProgram(pow_log_difficulty=pow_log_difficulty))
