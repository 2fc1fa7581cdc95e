"""
HTTP transport for Horizon and friendbot calls.

The Horizon client depends on the ``HttpTransport`` protocol, not on httpx
directly, so tests can swap in canned responses without touching parsing
logic.

Concrete implementations:
    - HttpxTransport (default, uses httpx.AsyncClient)
    - FakeTransport (tests)

Non-2xx responses are NOT errors at this layer: Horizon reports "not
found" and "transaction failed" through status codes with JSON bodies,
and the client needs both. Only failures to get a JSON answer at all
raise ``LedgerUnavailableError``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import httpx

from stellar_account_helper.errors import LedgerUnavailableError


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    payload: dict[str, Any]

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class HttpTransport(Protocol):
    """Async transport for the two request shapes Horizon needs."""

    async def get_json(
        self, url: str, params: dict[str, str] | None = None
    ) -> TransportResponse:
        ...

    async def post_form(self, url: str, data: dict[str, str]) -> TransportResponse:
        ...


class HttpxTransport:
    """Default transport using httpx.AsyncClient.

    Args:
        timeout: Request timeout in seconds.
        headers: Extra headers sent with every request.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._timeout = timeout
        self._headers = {"Accept": "application/json", **(headers or {})}

    async def get_json(
        self, url: str, params: dict[str, str] | None = None
    ) -> TransportResponse:
        return await self._request("GET", url, params=params)

    async def post_form(self, url: str, data: dict[str, str]) -> TransportResponse:
        return await self._request("POST", url, data=data)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
    ) -> TransportResponse:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(
                    method, url, params=params, data=data, headers=self._headers
                )
        except httpx.TimeoutException as e:
            raise LedgerUnavailableError(
                f"HTTP request timed out after {self._timeout}s",
                error_code="TIMEOUT",
                details={"url": url, "timeout_s": self._timeout},
            ) from e
        except httpx.ConnectError as e:
            raise LedgerUnavailableError(
                f"Failed to connect to {url}",
                error_code="CONNECTION_FAILED",
                details={"url": url},
            ) from e
        except httpx.HTTPError as e:
            raise LedgerUnavailableError(
                f"HTTP error: {e}",
                error_code="HTTP_ERROR",
                details={"url": url, "error": str(e)},
            ) from e

        try:
            payload = response.json()
        except json.JSONDecodeError as e:
            raise LedgerUnavailableError(
                "Response was not valid JSON",
                error_code="INVALID_JSON",
                details={
                    "url": url,
                    "status_code": response.status_code,
                    "body_preview": response.text[:200] if response.text else "",
                },
            ) from e

        if not isinstance(payload, dict):
            raise LedgerUnavailableError(
                "Response JSON was not an object",
                error_code="INVALID_JSON",
                details={"url": url, "type": type(payload).__name__},
            )

        return TransportResponse(status_code=response.status_code, payload=payload)
