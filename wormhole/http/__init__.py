"""
HTTP Client Module

requests-based transport used by the JSON-RPC client.
"""

from .client import HttpClient, HttpError, HttpResponse

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
]
