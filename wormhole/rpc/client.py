"""
JSON-RPC Client

JSON-RPC 2.0 over HttpClient with a caller-configured retry policy and
receipt recording.

Retry Policy:
- Connection errors, timeouts, HTTP 429 and 5xx are retried up to
  `max_retries` times, `retry_delay` seconds apart
- JSON-RPC error objects and malformed responses are not retried
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import TYPE_CHECKING, Any, Callable, Optional

from wormhole.http.client import HttpClient, HttpError
from wormhole.schemas.errors import ExternalFetchException

if TYPE_CHECKING:
    from wormhole.config.runtime import RpcConfig
    from wormhole.receipts import ReceiptRecorder


logger = logging.getLogger(__name__)


class JsonRpcError(ExternalFetchException):
    """The node answered with a JSON-RPC error object."""

    def __init__(
        self,
        message: str,
        rpc_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        rpc_method: Optional[str] = None,
    ) -> None:
        details: dict[str, Any] = {}
        if rpc_code is not None:
            details["rpc_code"] = rpc_code
        if rpc_method:
            details["rpc_method"] = rpc_method
        super().__init__(
            message,
            endpoint=endpoint,
            details=details,
            retryable=False,
        )
        self.rpc_code = rpc_code


class JsonRpcClient:
    """
    Minimal JSON-RPC 2.0 client.

    Usage:
        client = JsonRpcClient("http://127.0.0.1:8545", max_retries=2)
        block = client.call("eth_getBlockByNumber", ["latest", False])
    """

    def __init__(
        self,
        url: str,
        *,
        http: Optional[HttpClient] = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        recorder: Optional["ReceiptRecorder"] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.url = url
        self.http = http or HttpClient(
            timeout=timeout,
            default_headers={"Content-Type": "application/json"},
        )
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.recorder = recorder
        self._sleep = sleep
        self._ids = itertools.count(1)

    @classmethod
    def from_config(
        cls,
        config: "RpcConfig",
        recorder: Optional["ReceiptRecorder"] = None,
    ) -> "JsonRpcClient":
        http = HttpClient(
            timeout=config.timeout,
            default_headers={"Content-Type": "application/json"},
            proxy=config.proxy,
        )
        return cls(
            config.url,
            http=http,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            recorder=recorder,
        )

    def call(self, method: str, params: Optional[list[Any]] = None) -> Any:
        """
        Invoke `method` and return its result.

        Raises:
            JsonRpcError: The node returned an error object
            ExternalFetchException: Transport failed after all retries,
                or the response was not valid JSON-RPC
        """
        params = params or []
        receipt = None
        if self.recorder:
            receipt = self.recorder.start_rpc_receipt(
                endpoint=self.url,
                rpc_method=method,
                params=params,
            )

        attempts = 0
        try:
            while True:
                attempts += 1
                try:
                    result = self._send(method, params)
                except HttpError as e:
                    if not e.retryable or attempts > self.max_retries:
                        raise ExternalFetchException(
                            f"{method} failed after {attempts} attempt(s): {e}",
                            endpoint=self.url,
                            details={"rpc_method": method, "status_code": e.status_code},
                            retryable=e.retryable,
                        ) from e
                    logger.debug(f"Retry {attempts} for {method}: {e}")
                    self._sleep(self.retry_delay)
                    continue

                if receipt and self.recorder:
                    self.recorder.complete(receipt, response=result, attempts=attempts)
                return result
        except ExternalFetchException as e:
            if receipt and self.recorder:
                self.recorder.complete(receipt, error=e.message, attempts=attempts)
            raise

    def _send(self, method: str, params: list[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        response = self.http.post(self.url, json=payload)
        response.raise_for_status()

        try:
            body = response.json()
        except ValueError as e:
            raise ExternalFetchException(
                f"{method} returned invalid JSON",
                endpoint=self.url,
                details={"rpc_method": method},
            ) from e

        if not isinstance(body, dict):
            raise ExternalFetchException(
                f"{method} returned a non-object response",
                endpoint=self.url,
                details={"rpc_method": method},
            )
        if body.get("error") is not None:
            error = body["error"]
            if isinstance(error, dict):
                raise JsonRpcError(
                    str(error.get("message", "unknown error")),
                    rpc_code=error.get("code"),
                    endpoint=self.url,
                    rpc_method=method,
                )
            raise JsonRpcError(str(error), endpoint=self.url, rpc_method=method)
        if "result" not in body:
            raise ExternalFetchException(
                f"{method} response has no result",
                endpoint=self.url,
                details={"rpc_method": method},
            )
        return body["result"]

    def close(self) -> None:
        self.http.close()
