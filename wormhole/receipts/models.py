"""
Receipt Models

One RPCReceipt per JSON-RPC call made while building a witness. The
request and response hashes pin the exact chain data a witness came
from; timing fields are informational and never hashed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from wormhole.crypto.hashing import sha256, to_hex
from wormhole.schemas.canonical import dumps_canonical


def hash_canonical(obj: Any) -> str:
    """0x-prefixed SHA-256 of the canonical JSON of `obj`."""
    return to_hex(sha256(dumps_canonical(obj).encode("utf-8")))


class ReceiptTiming(BaseModel):
    """Wall-clock bounds of a call, in UTC."""

    model_config = ConfigDict(extra="forbid")

    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    duration_ms: Optional[float] = None

    def stop(self) -> None:
        self.ended_at = datetime.now(timezone.utc)
        if self.started_at is not None:
            self.duration_ms = (self.ended_at - self.started_at).total_seconds() * 1000


class RPCReceipt(BaseModel):
    """Request, outcome and transport attempts of one JSON-RPC call."""

    model_config = ConfigDict(extra="forbid")

    receipt_id: str
    endpoint: str
    rpc_method: str
    request: dict[str, Any] = Field(description="{'method': ..., 'params': [...]}")
    response: Optional[Any] = None
    request_hash: Optional[str] = None
    response_hash: Optional[str] = None
    attempts: int = Field(default=1, ge=1, description="Includes retries")
    timing: ReceiptTiming = Field(default_factory=ReceiptTiming)
    error: Optional[str] = None

    def settle(
        self,
        *,
        response: Optional[Any] = None,
        error: Optional[str] = None,
        attempts: int = 1,
    ) -> "RPCReceipt":
        """Attach the outcome, stop the clock and fill in the hashes."""
        self.timing.stop()
        self.attempts = attempts
        if error is not None:
            self.error = error
        if response is not None:
            self.response = response
            self.response_hash = hash_canonical({"result": response})
        self.request_hash = hash_canonical(self.request)
        return self

    @property
    def is_successful(self) -> bool:
        return self.error is None
