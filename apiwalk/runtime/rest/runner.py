"""REST request runner using endpoints and a transport."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from ..pagination import Page, PaginationPolicy, Paginator, RetryPolicy
from .definitions import ApiResponse, EndpointRequest
from .endpoint import Endpoint
from .transport import Transport

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RestRunner:
    """Executes endpoint round trips over a transport."""

    def __init__(self, transport: Transport) -> None:
        self._t = transport

    async def run(
        self, endpoint: Endpoint[T], request: EndpointRequest | None = None
    ) -> ApiResponse[T]:
        """Build, send and decode one request.

        Raises:
            ApiError: Whichever kind the build, transport or decode step raised.
        """
        request = request or EndpointRequest()
        wire = endpoint.build_request(request)
        logger.debug(
            "request_sent",
            extra={"endpoint_id": endpoint.id, "method": wire.method, "url": wire.url},
        )
        response = await self._t.send(wire)
        value = endpoint.decode_response(response, request)
        return ApiResponse(value=value, body=response.body, status=response.status)

    async def fetch(self, endpoint: Endpoint[T], request: EndpointRequest | None = None) -> T:
        """Like ``run`` but returns only the decoded value."""
        return (await self.run(endpoint, request)).value

    def fetcher(
        self, endpoint: Endpoint[Page[T]]
    ) -> Callable[[EndpointRequest], Awaitable[Page[T]]]:
        """Page fetch callable for a paginated endpoint."""

        async def fetch_page(request: EndpointRequest) -> Page[T]:
            return await self.fetch(endpoint, request)

        return fetch_page

    def paginate(
        self,
        endpoint: Endpoint[Page[T]],
        request: EndpointRequest | None = None,
        *,
        next_request: Callable[[EndpointRequest, Page[T]], EndpointRequest | None] | None = None,
        policy: PaginationPolicy | None = None,
        retry: RetryPolicy | None = None,
    ) -> Paginator[EndpointRequest, T]:
        """Lazily iterate every item of a paginated endpoint.

        Nothing is sent until the first item is pulled.
        """
        return Paginator(
            self.fetcher(endpoint),
            request or EndpointRequest(),
            next_request=next_request,
            policy=policy,
            retry=retry,
            name=endpoint.id,
        )

    async def close(self) -> None:
        close: Any = getattr(self._t, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> RestRunner:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
