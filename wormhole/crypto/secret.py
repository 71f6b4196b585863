"""
Module 01 - Secret Derivation and Proof-of-Work Gate

Derivations (all SHA-256, salted with a one-byte domain tag):
- deposit address: sha256(MAGIC_ADDRESS ‖ secret)[12:]
- nullifier:       sha256(MAGIC_NULLIFIER ‖ secret ‖ le32(index))
- pow hash:        sha256(MAGIC_POW ‖ secret)

A secret is valid when int(pow hash) mod 2**difficulty == 0, which makes
grinding for many candidate deposit addresses expensive.

Derivation and check_pow are pure and run inside the proving program.
Secret generation draws from the OS CSPRNG and never runs there.
"""
from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from wormhole.constants import (
    MAGIC_ADDRESS,
    MAGIC_NULLIFIER,
    MAGIC_POW,
    POW_LOG_DIFFICULTY,
    SECRET_LENGTH,
)
from wormhole.crypto.hashing import from_hex, sha256, to_hex, to_le32
from wormhole.schemas.errors import (
    InputMalformedException,
    ProofOfWorkException,
    SecretSearchExhausted,
)


logger = logging.getLogger(__name__)

# Attempts between progress log lines during secret search.
_PROGRESS_INTERVAL = 1 << 20


def deposit_address(secret: bytes) -> bytes:
    """Return the 20-byte deposit address for a secret."""
    return sha256(bytes([MAGIC_ADDRESS]) + secret)[12:]


def nullifier(secret: bytes, index: int) -> bytes:
    """Return the 32-byte nullifier for a secret at a withdrawal index."""
    return sha256(bytes([MAGIC_NULLIFIER]) + secret + to_le32(index))


def proof_of_work_hash(secret: bytes) -> bytes:
    """Return sha256(MAGIC_POW ‖ secret)."""
    return sha256(bytes([MAGIC_POW]) + secret)


def check_pow(secret: bytes, difficulty: int = POW_LOG_DIFFICULTY) -> bool:
    """
    Check the proof-of-work predicate for a secret.

    The pow hash is read as a big-endian integer, so the predicate holds
    when its lowest `difficulty` bits are zero.
    """
    if difficulty < 0 or difficulty > 256:
        raise ValueError(f"difficulty must be in [0, 256], got {difficulty}")
    pow_value = int.from_bytes(proof_of_work_hash(secret), "big")
    return pow_value % (1 << difficulty) == 0


@dataclass(frozen=True)
class WormholeSecret:
    """
    The private preimage of a deposit address.

    No validation happens on construction; use `parse_secret` at input
    boundaries and `is_valid` for the proof-of-work check.
    """

    value: bytes

    @classmethod
    def from_hex(cls, hex_string: str) -> "WormholeSecret":
        return cls(from_hex(hex_string))

    def to_hex(self) -> str:
        return to_hex(self.value)

    def is_valid(self, difficulty: int = POW_LOG_DIFFICULTY) -> bool:
        return check_pow(self.value, difficulty)

    def proof_of_work_hash(self) -> bytes:
        return proof_of_work_hash(self.value)

    def deposit_address(self) -> bytes:
        return deposit_address(self.value)

    def nullifier(self, index: int) -> bytes:
        return nullifier(self.value, index)

    def __repr__(self) -> str:
        # Secrets must not end up in logs or tracebacks.
        return f"WormholeSecret(<{len(self.value)} bytes>)"

    __str__ = __repr__


def parse_secret(
    value: bytes | str,
    *,
    difficulty: Optional[int] = POW_LOG_DIFFICULTY,
) -> WormholeSecret:
    """
    Strictly parse a user-supplied secret.

    Args:
        value: Raw bytes or 0x-prefixed hex
        difficulty: Proof-of-work difficulty to enforce, or None to skip

    Raises:
        InputMalformedException: Bad hex or length other than 32 bytes
        ProofOfWorkException: Secret fails the proof-of-work check
    """
    if isinstance(value, str):
        try:
            raw = from_hex(value)
        except ValueError as e:
            raise InputMalformedException(str(e), field_path="secret") from e
    else:
        raw = bytes(value)

    if len(raw) != SECRET_LENGTH:
        raise InputMalformedException(
            f"secret must be {SECRET_LENGTH} bytes, got {len(raw)}",
            field_path="secret",
        )

    secret = WormholeSecret(raw)
    if difficulty is not None and not secret.is_valid(difficulty):
        raise ProofOfWorkException(
            "secret does not satisfy the proof-of-work condition",
            difficulty=difficulty,
        )
    return secret


def iter_candidate_secrets(
    length: int = SECRET_LENGTH,
    rng: Callable[[int], bytes] = secrets.token_bytes,
) -> Iterator[bytes]:
    """Yield an endless sequence of random candidate secrets."""
    while True:
        yield rng(length)


def generate_secret(
    difficulty: int = POW_LOG_DIFFICULTY,
    *,
    max_attempts: Optional[int] = None,
    max_seconds: Optional[float] = None,
    rng: Callable[[int], bytes] = secrets.token_bytes,
) -> WormholeSecret:
    """
    Search for a random secret satisfying the proof-of-work condition.

    Expected cost is 2**difficulty hash evaluations.

    Args:
        difficulty: Log2 of the proof-of-work difficulty
        max_attempts: Give up after this many candidates
        max_seconds: Give up after this much wall-clock time
        rng: Source of random bytes (must be cryptographically secure)

    Raises:
        SecretSearchExhausted: When a budget runs out
    """
    started_at = time.monotonic()
    attempts = 0

    candidates = iter_candidate_secrets(rng=rng)
    while True:
        candidate = next(candidates)
        attempts += 1
        if check_pow(candidate, difficulty):
            logger.debug(
                f"Found valid secret after {attempts} attempts "
                f"in {time.monotonic() - started_at:.2f}s"
            )
            return WormholeSecret(candidate)

        if attempts % _PROGRESS_INTERVAL == 0:
            logger.debug(f"Secret search: {attempts} attempts at difficulty {difficulty}")

        if max_attempts is not None and attempts >= max_attempts:
            raise SecretSearchExhausted(
                f"no valid secret within {max_attempts} attempts",
                attempts=attempts,
                difficulty=difficulty,
            )
        if max_seconds is not None and time.monotonic() - started_at >= max_seconds:
            raise SecretSearchExhausted(
                f"no valid secret within {max_seconds}s",
                attempts=attempts,
                difficulty=difficulty,
            )


__all__ = [
    "WormholeSecret",
    "deposit_address",
    "nullifier",
    "proof_of_work_hash",
    "check_pow",
    "parse_secret",
    "iter_candidate_secrets",
    "generate_secret",
]
