"""
HTTP Transport

JSON-over-HTTP POST transport used by the JSON-RPC client. Only the parts
of requests that a node endpoint needs are exposed: a pooled session, a
per-call timeout and an optional proxy.
"""

from __future__ import annotations

import json as jsonlib
from dataclasses import dataclass, field
from typing import Any, Optional

import requests


# Status codes a node or load balancer returns for transient overload.
RETRYABLE_STATUS = frozenset({408, 425, 429, 500, 502, 503, 504})


@dataclass
class HttpResponse:
    """Status, body and timing of one POST."""
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    elapsed_ms: float = 0.0

    def json(self) -> Any:
        return jsonlib.loads(self.content)

    def raise_for_status(self) -> None:
        if self.status_code // 100 != 2:
            raise HttpError(
                f"node answered HTTP {self.status_code}",
                status_code=self.status_code,
                body=self.content[:512],
            )


class HttpError(Exception):
    """Transport failure or a non-2xx status from the endpoint."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: bytes = b"",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    @property
    def retryable(self) -> bool:
        # No status means the request never completed (refused, reset, timed out).
        return self.status_code is None or self.status_code in RETRYABLE_STATUS


class HttpClient:
    """
    Pooled POST transport for a JSON endpoint.

    Usage:
        with HttpClient(timeout=10.0) as http:
            response = http.post(url, json={"jsonrpc": "2.0", ...})
            response.raise_for_status()
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        default_headers: Optional[dict[str, str]] = None,
        proxy: Optional[str] = None,
    ) -> None:
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(default_headers or {})
        if proxy:
            self.session.proxies.update({"http": proxy, "https": proxy})

    def post(
        self,
        url: str,
        *,
        json: Any = None,
        headers: Optional[dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """
        POST a JSON body.

        Raises:
            HttpError: Connection refused, reset or timed out
        """
        try:
            reply = self.session.post(
                url,
                json=json,
                headers=headers,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except requests.RequestException as e:
            raise HttpError(f"POST {url} failed: {e}") from e

        return HttpResponse(
            status_code=reply.status_code,
            content=reply.content,
            headers=dict(reply.headers),
            elapsed_ms=reply.elapsed.total_seconds() * 1000,
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
