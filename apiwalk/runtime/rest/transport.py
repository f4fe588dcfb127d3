"""Transport boundary: wire request in, status and body out."""

from __future__ import annotations

from typing import Protocol

from .definitions import RawResponse, WireRequest
from .http_client import HTTPClient, ResponseHook


class Transport(Protocol):
    """Anything that can execute a wire request.

    Implementations raise ``TransportError`` for I/O failures and return every
    response they receive, whatever its status.
    """

    async def send(self, request: WireRequest) -> RawResponse:
        ...


class RESTTransport:
    """Default transport backed by ``HTTPClient`` (aiohttp)."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        http: HTTPClient | None = None,
        timeout: float | None = None,
    ) -> None:
        if http is None:
            http = HTTPClient(base_url=base_url) if timeout is None else HTTPClient(base_url, timeout)
        self._http = http

    def add_response_hook(self, hook: ResponseHook) -> None:
        self._http.add_response_hook(hook)

    async def send(self, request: WireRequest) -> RawResponse:
        return await self._http.request(
            request.method, request.url, headers=request.headers, data=request.body
        )

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> RESTTransport:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
