"""HTTP client helper."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

import aiohttp
from yarl import URL

from ...core.config import DEFAULT_HEADERS, DEFAULT_TIMEOUT, ClientConfig
from ...core.exceptions import TransportError
from .definitions import RawResponse

logger = logging.getLogger(__name__)

ResponseHook = Callable[[RawResponse], None]


class HTTPClient:
    """Async HTTP client wrapper returning raw status and body."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        headers: Mapping[str, str] | None = None,
        verify_ssl: bool = True,
    ) -> None:
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = dict(DEFAULT_HEADERS if headers is None else headers)
        self.verify_ssl = verify_ssl
        self._session: aiohttp.ClientSession | None = None
        self._response_hooks: list[ResponseHook] = []

    @classmethod
    def from_config(cls, config: ClientConfig) -> HTTPClient:
        return cls(
            base_url=config.base_url,
            timeout=config.timeout,
            headers=config.headers,
            verify_ssl=config.verify_ssl,
        )

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers=self.headers)
        return self._session

    def add_response_hook(self, hook: ResponseHook) -> None:
        """Register a callable invoked with every response received."""
        self._response_hooks.append(hook)

    def _resolve(self, url: str) -> str:
        # If base_url is set and url is relative, combine them
        if self.base_url and not url.startswith(("http://", "https://")):
            return f"{self.base_url.rstrip('/')}/{url.lstrip('/')}"
        return url

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        data: bytes | None = None,
    ) -> RawResponse:
        """Send one request and read the whole body.

        Raises:
            TransportError: On connection failures, timeouts and invalid URLs.
        """
        target = self._resolve(url)
        kwargs: dict[str, Any] = {"headers": dict(headers or {}), "data": data}
        if not self.verify_ssl:
            kwargs["ssl"] = False
        try:
            async with self.session.request(method, URL(target, encoded=True), **kwargs) as resp:
                body = await resp.read()
                response = RawResponse(
                    status=resp.status,
                    body=body,
                    url=str(resp.url),
                    headers=dict(resp.headers),
                )
        except asyncio.TimeoutError as exc:
            raise TransportError(f"request to {target} timed out", cause=exc, url=target) from exc
        except (aiohttp.ClientError, ValueError) as exc:
            raise TransportError(f"request to {target} failed: {exc}", cause=exc, url=target) from exc

        logger.debug(
            "http_response",
            extra={"method": method, "url": target, "status": response.status},
        )
        for hook in self._response_hooks:
            hook(response)
        return response

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
