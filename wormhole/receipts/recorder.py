"""
Receipt Recorder

Thread-safe collector of RPCReceipt records. The witness builder's fetch
threads share one recorder through the JSON-RPC client.
"""

from __future__ import annotations

import itertools
import threading
from datetime import datetime, timezone
from typing import Any, Optional

from .models import RPCReceipt, ReceiptTiming


class ReceiptRecorder:
    """
    Usage:
        recorder = ReceiptRecorder()
        receipt = recorder.start_rpc_receipt(endpoint=url, rpc_method="eth_getProof", params=[...])
        recorder.complete(receipt, response=result)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._receipts: list[RPCReceipt] = []

    def start_rpc_receipt(
        self,
        *,
        endpoint: str,
        rpc_method: str,
        params: Optional[list[Any]] = None,
    ) -> RPCReceipt:
        with self._lock:
            receipt_id = f"rc_rpc_{next(self._ids):04d}"
        return RPCReceipt(
            receipt_id=receipt_id,
            endpoint=endpoint,
            rpc_method=rpc_method,
            request={"method": rpc_method, "params": list(params or [])},
            timing=ReceiptTiming(started_at=datetime.now(timezone.utc)),
        )

    def complete(
        self,
        receipt: RPCReceipt,
        *,
        response: Optional[Any] = None,
        error: Optional[str] = None,
        attempts: int = 1,
    ) -> RPCReceipt:
        """Settle `receipt` and keep it. Receipts are stored in completion order."""
        receipt.settle(response=response, error=error, attempts=attempts)
        with self._lock:
            self._receipts.append(receipt)
        return receipt

    def get_receipts(self) -> list[RPCReceipt]:
        with self._lock:
            return list(self._receipts)

    def clear(self) -> None:
        with self._lock:
            self._receipts = []

    def to_dict_list(self) -> list[dict[str, Any]]:
        return [r.model_dump(mode="json", exclude_none=True) for r in self.get_receipts()]
