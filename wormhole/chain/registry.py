"""
Nullifier registry collaborator.

The registry is an external key-value store of 32-byte slots: reading
a slot is public, writing is restricted. A zero slot means the
nullifier is unspent.
"""

from __future__ import annotations

from typing import Protocol, Union

from wormhole.schemas.program import WormholeProgramOutput
from wormhole.schemas.transaction import WormholeTxProof


ZERO_SLOT = b"\x00" * 32


class NullifierRegistry(Protocol):
    """Read/write interface of the registry contract."""

    def read(self, slot: bytes) -> bytes:
        """Return the 32-byte word stored at `slot` (zero if unset)."""
        ...

    def write(self, slot: bytes, value: bytes, *, caller: bytes) -> None:
        """Store `value` at `slot`; raises if `caller` may not write."""
        ...


def is_spent(registry: NullifierRegistry, nullifier: bytes) -> bool:
    return registry.read(nullifier) != ZERO_SLOT


def apply_withdrawal(
    registry: NullifierRegistry,
    output: Union[WormholeProgramOutput, WormholeTxProof],
    *,
    caller: bytes,
) -> None:
    """
    Mark the withdrawal's nullifier spent.

    `output` is either the program output or the proof section of an
    accepted transaction; both carry the nullifier and the next hash.

    The stored value is hash(cumulative withdrawn after this withdrawal),
    which the next withdrawal of the same secret proves against.
    """
    registry.write(
        output.nullifier,
        output.next_cumulative_withdrawn_amount_hashed,
        caller=caller,
    )
