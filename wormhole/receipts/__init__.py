"""
Receipts Module

Audit records of every RPC call made while building a witness.
"""

from .models import RPCReceipt, ReceiptTiming, hash_canonical
from .recorder import ReceiptRecorder

__all__ = [
    "RPCReceipt",
    "ReceiptTiming",
    "ReceiptRecorder",
    "hash_canonical",
]
